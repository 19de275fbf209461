"""Error taxonomy for pin claim workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pinclaim.models.records import PinClaimResult


class PinClaimError(Exception):
    """Base class for every error raised by pinclaim components."""


class MissingArgument(PinClaimError):
    """A required flag or field was absent or empty."""


class FileNotFound(PinClaimError):
    """The local file to upload does not exist."""


class FileTooLarge(PinClaimError):
    """The local file exceeds the upload size limit."""


class InsufficientFunds(PinClaimError):
    """The wallet does not hold the token required for a paid operation."""


class MissingExpiration(PinClaimError):
    """Renewal requested for a claim whose expiration cannot be derived."""


class UpstreamServiceError(PinClaimError):
    """The pinning service answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ClaimNotificationError(UpstreamServiceError):
    """The ledger claim exists but the pinning service did not record it.

    ``result`` holds the already broadcast transaction ids so the claim can
    be reprocessed later.
    """

    def __init__(self, message: str, result: PinClaimResult) -> None:
        super().__init__(message)
        self.result = result


class ClaimGenerationError(PinClaimError):
    """Tokens were burned but the claim transaction was not broadcast.

    ``pob_txid`` identifies the burn so the claim can be written later.
    """

    def __init__(self, message: str, pob_txid: str) -> None:
        super().__init__(message)
        self.pob_txid = pob_txid


class TransportError(PinClaimError):
    """Network-level failure talking to a remote service."""


class WalletError(PinClaimError):
    """The wallet could not be loaded, initialized or asked to sign."""


class ConfigError(PinClaimError):
    """The configuration is incomplete or invalid."""
