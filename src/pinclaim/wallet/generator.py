"""Proof-of-burn + claim generator - the paid, irreversible ledger step."""

from __future__ import annotations

import json
import logging
from decimal import ROUND_UP, Decimal

from pinclaim.errors import ClaimGenerationError
from pinclaim.interfaces.wallet import Wallet

log = logging.getLogger(__name__)

# PSF tokens carry 8 decimals
TOKEN_QUANTUM = Decimal("0.00000001")


def burn_cost(file_size_mb: float, write_price: Decimal) -> Decimal:
    """Tokens to burn for ``file_size_mb`` megabytes at ``write_price`` per MB."""
    cost = (Decimal(str(file_size_mb)) * write_price).quantize(TOKEN_QUANTUM, rounding=ROUND_UP)
    return max(cost, TOKEN_QUANTUM)


class BurnClaimGenerator:
    """Burns payment tokens, then writes a claim referencing the burn.

    The claim transaction carries a JSON message with the CID, the
    proof-of-burn txid and the filename. Both transactions are broadcast by
    the wallet; nothing here can undo them.
    """

    def __init__(self, token_id: str, write_price: Decimal) -> None:
        self._token_id = token_id
        self._write_price = write_price

    async def create_pin_claim(
        self,
        wallet: Wallet,
        cid: str,
        filename: str,
        file_size_mb: float,
    ) -> tuple[str, str]:
        cost = burn_cost(file_size_mb, self._write_price)
        log.info("Burning %s PSF for %s (%.2f MB)", cost, cid, file_size_mb)

        pob_txid = await wallet.burn_tokens(cost, self._token_id)
        log.info("Proof-of-burn broadcast: %s", pob_txid)

        message = json.dumps({"cid": cid, "pobTxid": pob_txid, "filename": filename})
        try:
            claim_txid = await wallet.send_op_return(message)
        except Exception as exc:
            log.error("Claim broadcast failed after burn %s: %s", pob_txid, exc)
            raise ClaimGenerationError(
                f"Tokens burned in {pob_txid} but the claim was not broadcast: {exc}",
                pob_txid,
            ) from exc
        log.info("Pin claim broadcast: %s", claim_txid)

        return pob_txid, claim_txid
