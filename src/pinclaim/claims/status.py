"""Pin status resolver - claim record for a CID, enriched with its expiration."""

from __future__ import annotations

import logging

from pinclaim.claims.expiration import derive_claim_times
from pinclaim.errors import MissingArgument
from pinclaim.interfaces.pin_service import PinService
from pinclaim.models.records import ClaimRecord

log = logging.getLogger(__name__)


class PinStatusResolver:
    """Fetches a claim record and derives claim/expiration times.

    The upstream payload is not validated: whatever the service returns is
    wrapped as-is, and callers check for the fields they need.
    """

    def __init__(self, service: PinService) -> None:
        self._service = service

    async def get_status(self, cid: str) -> ClaimRecord:
        if not cid:
            raise MissingArgument("You must specify a CID with the -c flag.")

        raw = await self._service.get_pin_status(cid)
        record = ClaimRecord.from_raw(raw)
        record.claim_time, record.expiration_time = derive_claim_times(record.claim_tx_time)

        log.debug(
            "Pin status for %s: valid=%s expires=%s",
            cid, record.valid_claim.value, record.expiration_time,
        )
        return record
