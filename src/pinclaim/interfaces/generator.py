"""ClaimGenerator protocol - produces the proof-of-burn and claim transactions."""

from __future__ import annotations

from typing import Protocol

from pinclaim.interfaces.wallet import Wallet


class ClaimGenerator(Protocol):
    """Burns tokens and writes the pin claim transaction to the ledger."""

    async def create_pin_claim(
        self,
        wallet: Wallet,
        cid: str,
        filename: str,
        file_size_mb: float,
    ) -> tuple[str, str]:
        """Return ``(pob_txid, claim_txid)``. Irreversible once it returns."""
        ...
