"""Pin claim orchestrator - upload a new file, pay for it, register the claim."""

from __future__ import annotations

import logging
from pathlib import Path

from pinclaim.claims.tokens import TokenSufficiencyChecker
from pinclaim.errors import (
    ClaimGenerationError,
    ClaimNotificationError,
    FileNotFound,
    MissingArgument,
    TransportError,
    UpstreamServiceError,
)
from pinclaim.interfaces.generator import ClaimGenerator
from pinclaim.interfaces.journal import ClaimJournal
from pinclaim.interfaces.pin_service import PinService
from pinclaim.interfaces.wallet import WalletLoader
from pinclaim.models.config import ClientConfig
from pinclaim.models.records import ClaimSubmission, JournalEntry, PinClaimResult

log = logging.getLogger(__name__)

# New uploads are sized in binary megabytes. Renewals use decimal megabytes
# (claims.renewal.DECIMAL_MEGABYTE).
BINARY_MEGABYTE = 1024 * 1024


def resolve_local_file(files_dir: str | Path, filename: str) -> Path:
    """Path of ``filename`` inside the files directory; it must exist."""
    path = Path(files_dir).expanduser() / filename
    if not path.is_file():
        raise FileNotFound(f"File not found: {path}")
    return path


async def record_burn_without_claim(
    journal: ClaimJournal | None,
    exc: ClaimGenerationError,
    cid: str,
    filename: str,
    address: str,
    operation: str,
) -> None:
    """Journal a burn whose claim transaction never made it to the ledger."""
    if journal is None:
        return
    await journal.record(JournalEntry(
        cid=cid,
        filename=filename,
        address=address,
        pob_txid=exc.pob_txid,
        claim_txid="",
        operation=operation,
        status="burned",
        message=str(exc),
    ))


class PinClaimOrchestrator:
    """Drives upload -> proof-of-burn/claim -> service notification.

    Every step depends on the previous one succeeding and nothing is
    retried. Once the generator returns, tokens are burned and the claim is
    on the ledger; if the service notification then fails, the raised
    ClaimNotificationError still carries both transaction ids so the claim
    can be repaired with the reprocessing workflow.
    """

    def __init__(
        self,
        config: ClientConfig,
        service: PinService,
        wallet_loader: WalletLoader,
        generator: ClaimGenerator,
        checker: TokenSufficiencyChecker | None = None,
        journal: ClaimJournal | None = None,
    ) -> None:
        self._config = config
        self._service = service
        self._wallet_loader = wallet_loader
        self._generator = generator
        self._checker = checker or TokenSufficiencyChecker()
        self._journal = journal

    @staticmethod
    def validate(filename: str | None, wallet_name: str | None) -> None:
        if not filename:
            raise MissingArgument("You must specify a filename with the -f flag.")
        if not wallet_name:
            raise MissingArgument("You must specify a wallet name with the -n flag.")

    def resolve_file(self, filename: str) -> Path:
        return resolve_local_file(self._config.files_dir, filename)

    def get_file_size(self, filename: str) -> float:
        """Size of a file in the files directory, in binary megabytes."""
        return self.resolve_file(filename).stat().st_size / BINARY_MEGABYTE

    async def pin_claim_file(self, filename: str, wallet_name: str) -> PinClaimResult:
        self.validate(filename, wallet_name)

        # 1. Measure the file
        path = self.resolve_file(filename)
        file_size_mb = path.stat().st_size / BINARY_MEGABYTE
        log.info("File size: %.2f MB", file_size_mb)

        # 2. Upload to get the CID
        log.info("Uploading %s to IPFS...", filename)
        upload = await self._service.upload_file(path, filename)
        cid = upload.cid
        log.info("File uploaded to IPFS with CID: %s", cid)

        # 3. Wallet, funded with the payment token
        log.info("Initializing wallet %s...", wallet_name)
        wallet = self._wallet_loader.load(wallet_name)
        await wallet.initialize()
        self._checker.require(wallet, self._config.psf_token_id)

        # 4. Burn + claim on the ledger (irreversible)
        log.info("Generating pin claim on the ledger...")
        try:
            pob_txid, claim_txid = await self._generator.create_pin_claim(
                wallet, cid, filename, file_size_mb,
            )
        except ClaimGenerationError as exc:
            await record_burn_without_claim(
                self._journal, exc, cid, filename, wallet.address, "claim",
            )
            raise
        result = PinClaimResult(
            cid=cid,
            pob_txid=pob_txid,
            claim_txid=claim_txid,
            address=wallet.address,
        )
        log.info("Proof-of-Burn TXID: %s", pob_txid)
        log.info("Pin Claim TXID: %s", claim_txid)

        entry_id = None
        if self._journal is not None:
            entry_id = await self._journal.record(JournalEntry(
                cid=cid,
                filename=filename,
                address=wallet.address,
                pob_txid=pob_txid,
                claim_txid=claim_txid,
                operation="claim",
            ))

        # 5. Register the claim with the pinning service
        log.info("Notifying pinning service...")
        submission = ClaimSubmission(
            cid=cid,
            filename=filename,
            claim_txid=claim_txid,
            proof_of_burn_txid=pob_txid,
            address=wallet.address,
        )
        try:
            await self._service.submit_claim(submission)
        except (UpstreamServiceError, TransportError) as exc:
            message = str(exc)
            result.message = message
            log.error(
                "Pin claim for %s is on the ledger but was not recorded by the "
                "service: %s (pobTxid=%s claimTxid=%s)",
                cid, message, pob_txid, claim_txid,
            )
            if self._journal is not None and entry_id is not None:
                await self._journal.update_status(entry_id, "notify_failed", message)
            raise ClaimNotificationError(message, result) from exc

        result.notified = True
        if self._journal is not None and entry_id is not None:
            await self._journal.update_status(entry_id, "notified")

        log.info("Pin claim submitted for %s", cid)
        return result
