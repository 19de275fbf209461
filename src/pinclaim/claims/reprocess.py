"""Reprocessing coordinator - resubmit claims the service never validated."""

from __future__ import annotations

import logging

from pinclaim.claims.expiration import derive_claim_times
from pinclaim.errors import MissingArgument
from pinclaim.interfaces.journal import ClaimJournal
from pinclaim.interfaces.pin_service import PinService
from pinclaim.models.records import ClaimRecord, ClaimSubmission
from pinclaim.storage.sqlite import UNACKNOWLEDGED_STATUSES

log = logging.getLogger(__name__)


class ReprocessingCoordinator:
    """Lists unvalidated claims and replays a claim to the pinning service.

    Reprocessing never touches the ledger: it resends the txids and metadata
    the service already holds for a CID. Each CID is handled on its own.
    """

    def __init__(self, service: PinService, journal: ClaimJournal | None = None) -> None:
        self._service = service
        self._journal = journal

    async def list_unprocessed(self) -> list[ClaimRecord]:
        records = []
        for raw in await self._service.list_unprocessed():
            record = ClaimRecord.from_raw(raw)
            if not record.valid_claim.is_unprocessed:
                continue
            record.claim_time, record.expiration_time = derive_claim_times(
                record.claim_tx_time
            )
            records.append(record)
        log.info("%d unprocessed pin claims", len(records))
        return records

    async def get_claim_fields(self, cid: str) -> ClaimSubmission:
        """The identity fields needed to resubmit the claim for ``cid``."""
        raw = await self._service.get_pin_status(cid)
        return ClaimSubmission.from_record(ClaimRecord.from_raw(raw))

    async def reprocess(self, cid: str) -> dict:
        if not cid:
            raise MissingArgument("You must specify a CID with the -c flag.")

        submission = await self.get_claim_fields(cid)
        log.info(
            "Resubmitting pin claim for %s (pobTxid=%s claimTxid=%s)",
            submission.cid or cid, submission.proof_of_burn_txid, submission.claim_txid,
        )
        data = await self._service.submit_claim(submission)

        if self._journal is not None:
            for entry in await self._journal.get_entries(submission.cid or cid):
                if entry.status in UNACKNOWLEDGED_STATUSES and entry.claim_txid == submission.claim_txid:
                    await self._journal.update_status(entry.id, "resubmitted")

        return data
