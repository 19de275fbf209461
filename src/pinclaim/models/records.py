"""Pin claim records and operation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ClaimValidity(str, Enum):
    """Validation state of a claim as decided by the pinning service."""

    UNVALIDATED = "unvalidated"  # validClaim == null
    VALID = "valid"
    INVALID = "invalid"
    UNKNOWN = "unknown"  # validClaim missing or not a boolean

    @classmethod
    def from_raw(cls, value: Any) -> ClaimValidity:
        match value:
            case None:
                return cls.UNVALIDATED
            case True:
                return cls.VALID
            case False:
                return cls.INVALID
            case _:
                return cls.UNKNOWN

    def to_raw(self) -> bool | None:
        match self:
            case ClaimValidity.UNVALIDATED:
                return None
            case ClaimValidity.VALID:
                return True
            case ClaimValidity.INVALID:
                return False
            case ClaimValidity.UNKNOWN:
                raise ValueError("unknown claim validity has no wire value")

    @property
    def is_unprocessed(self) -> bool:
        match self:
            case ClaimValidity.UNVALIDATED:
                return True
            case ClaimValidity.VALID | ClaimValidity.INVALID | ClaimValidity.UNKNOWN:
                return False


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _opt_number(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else number


@dataclass
class ClaimRecord:
    """A pin claim as known by the pinning service.

    Built permissively from the raw service payload: any field the service
    omits is left as None. ``claim_time`` and ``expiration_time`` are derived
    client-side and only set when ``claim_tx_time`` is known.
    """

    cid: str | None = None
    filename: str | None = None
    address: str | None = None
    proof_of_burn_txid: str | None = None
    claim_txid: str | None = None
    file_size: int | float | None = None  # bytes
    claim_tx_time: int | float | None = None  # ledger UNIX seconds
    valid_claim: ClaimValidity = ClaimValidity.UNKNOWN
    claim_time: str | None = None  # ISO 8601
    expiration_time: str | None = None  # ISO 8601
    raw: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> ClaimRecord:
        """Build a record from a pin-status payload without validating it."""
        if not isinstance(raw, dict):
            return cls(raw=raw)

        details = raw.get("claimTxDetails")
        tx_time = details.get("time") if isinstance(details, dict) else None
        validity = (
            ClaimValidity.from_raw(raw["validClaim"])
            if "validClaim" in raw
            else ClaimValidity.UNKNOWN
        )

        return cls(
            cid=_opt_str(raw.get("cid")),
            filename=_opt_str(raw.get("filename")),
            address=_opt_str(raw.get("address")),
            proof_of_burn_txid=_opt_str(raw.get("proofOfBurnTxid")),
            claim_txid=_opt_str(raw.get("claimTxid")),
            file_size=_opt_number(raw.get("fileSize")),
            claim_tx_time=_opt_number(tx_time),
            valid_claim=validity,
            raw=raw,
        )

    def to_dict(self) -> dict[str, Any]:
        """Raw payload enriched with the derived time fields."""
        data: dict[str, Any] = dict(self.raw) if isinstance(self.raw, dict) else {}
        if self.claim_time is not None:
            data["claimTime"] = self.claim_time
        if self.expiration_time is not None:
            data["expirationTime"] = self.expiration_time
        return data


@dataclass
class ClaimSubmission:
    """Body of a pin-claim notification to the pinning service."""

    cid: str
    filename: str
    claim_txid: str
    proof_of_burn_txid: str
    address: str

    @classmethod
    def from_record(cls, record: ClaimRecord) -> ClaimSubmission:
        return cls(
            cid=record.cid or "",
            filename=record.filename or "",
            claim_txid=record.claim_txid or "",
            proof_of_burn_txid=record.proof_of_burn_txid or "",
            address=record.address or "",
        )

    def to_payload(self) -> dict[str, str]:
        return {
            "cid": self.cid,
            "filename": self.filename,
            "claimTxid": self.claim_txid,
            "proofOfBurnTxid": self.proof_of_burn_txid,
            "address": self.address,
        }


@dataclass
class PinClaimResult:
    """Outcome of the upload -> burn/claim -> notify workflow.

    The transaction ids are set as soon as the ledger step completes, even
    if the service notification afterwards fails.
    """

    cid: str
    pob_txid: str
    claim_txid: str
    address: str = ""
    notified: bool = False
    message: str | None = None


@dataclass
class RenewalResult:
    """New transaction pair produced by a renewal."""

    cid: str
    pob_txid: str
    claim_txid: str
    expired: bool
    previous_expiration: str


@dataclass
class UploadResult:
    """Result of uploading a local file to the storage network."""

    cid: str
    filename: str
    size_bytes: int
    raw: dict = field(default_factory=dict)


@dataclass
class TokenBalance:
    """Aggregated balance of one token across all token UTXO categories."""

    token_id: str
    qty: float
    ticker: str = ""
    name: str = ""


@dataclass
class JournalEntry:
    """A generated proof-of-burn/claim pair as persisted locally."""

    cid: str
    filename: str
    address: str
    pob_txid: str
    claim_txid: str
    operation: str  # "claim", "renew", "reprocess"
    status: str = "generated"
    message: str | None = None
    id: int | None = None
    created_at: str = ""
    updated_at: str = ""
