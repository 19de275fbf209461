"""Renewal coordinator - a fresh one-year claim window for an existing CID."""

from __future__ import annotations

import logging
from datetime import datetime

from pinclaim.claims.expiration import is_expired
from pinclaim.claims.orchestrator import record_burn_without_claim
from pinclaim.claims.status import PinStatusResolver
from pinclaim.claims.tokens import TokenSufficiencyChecker
from pinclaim.errors import ClaimGenerationError, MissingArgument, MissingExpiration
from pinclaim.interfaces.generator import ClaimGenerator
from pinclaim.interfaces.journal import ClaimJournal
from pinclaim.interfaces.wallet import WalletLoader
from pinclaim.models.config import ClientConfig
from pinclaim.models.records import ClaimRecord, JournalEntry, RenewalResult

log = logging.getLogger(__name__)

# Renewals size the stored byte count in decimal megabytes, unlike new
# uploads (claims.orchestrator.BINARY_MEGABYTE).
DECIMAL_MEGABYTE = 10**6


class RenewalCoordinator:
    """Drives status check -> expiration check -> token check -> new claim.

    Expiration is advisory: a claim that has not expired yet is renewed
    anyway, with a warning. The previous transaction ids are left alone.
    """

    def __init__(
        self,
        config: ClientConfig,
        resolver: PinStatusResolver,
        wallet_loader: WalletLoader,
        generator: ClaimGenerator,
        checker: TokenSufficiencyChecker | None = None,
        journal: ClaimJournal | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._wallet_loader = wallet_loader
        self._generator = generator
        self._checker = checker or TokenSufficiencyChecker()
        self._journal = journal

    @staticmethod
    def validate(cid: str | None, wallet_name: str | None) -> None:
        if not cid:
            raise MissingArgument("You must specify a CID with the -c flag.")
        if not wallet_name:
            raise MissingArgument("You must specify a wallet name with the -n flag.")

    async def check_expiration(
        self, cid: str, now: datetime | None = None
    ) -> tuple[ClaimRecord, bool]:
        """Return the claim record and whether it has expired."""
        record = await self._resolver.get_status(cid)
        if not record.expiration_time:
            raise MissingExpiration(
                "Unable to determine expiration time for this pin claim."
            )

        expired = is_expired(record.expiration_time, now)
        if expired:
            log.info("Pin claim expired at %s. Proceeding with renewal...", record.expiration_time)
        else:
            log.warning(
                "The pin claim has not expired yet (expires %s). "
                "Continuing with renewal anyway...",
                record.expiration_time,
            )
        return record, expired

    async def renew(
        self, cid: str, wallet_name: str, now: datetime | None = None
    ) -> RenewalResult:
        self.validate(cid, wallet_name)

        record, expired = await self.check_expiration(cid, now)

        wallet = self._wallet_loader.load(wallet_name)
        await wallet.initialize()
        self._checker.require(wallet, self._config.psf_token_id)

        file_size_mb = (record.file_size or 0) / DECIMAL_MEGABYTE
        cid = record.cid or cid
        filename = record.filename or ""
        log.info("Renewing pin claim for CID: %s", cid)
        log.info("Filename: %s", filename)
        log.info("File size: %.2f MB", file_size_mb)

        try:
            pob_txid, claim_txid = await self._generator.create_pin_claim(
                wallet, cid, filename, file_size_mb,
            )
        except ClaimGenerationError as exc:
            await record_burn_without_claim(
                self._journal, exc, cid, filename, wallet.address, "renew",
            )
            raise

        if self._journal is not None:
            await self._journal.record(JournalEntry(
                cid=cid,
                filename=filename,
                address=wallet.address,
                pob_txid=pob_txid,
                claim_txid=claim_txid,
                operation="renew",
                status="renewed",
            ))

        return RenewalResult(
            cid=cid,
            pob_txid=pob_txid,
            claim_txid=claim_txid,
            expired=expired,
            previous_expiration=record.expiration_time or "",
        )
