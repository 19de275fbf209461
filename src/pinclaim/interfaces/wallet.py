"""Wallet protocols - key holder, token holdings and transaction signing."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class Wallet(Protocol):
    """An initialized wallet handle, exclusively owned by one workflow."""

    @property
    def name(self) -> str:
        ...

    @property
    def address(self) -> str:
        ...

    async def initialize(self) -> None:
        """Sync UTXO state from the network."""
        ...

    def token_utxos(self) -> dict[str, list[dict]]:
        """Token UTXOs by category: "type1", "group" and "nft"."""
        ...

    async def burn_tokens(self, qty: Decimal, token_id: str) -> str:
        """Burn ``qty`` tokens and return the proof-of-burn txid."""
        ...

    async def send_op_return(self, message: str) -> str:
        """Write ``message`` to the ledger and return the txid."""
        ...


class WalletLoader(Protocol):
    """Instantiates a named wallet."""

    def load(self, name: str) -> Wallet:
        ...


class TransactionSigner(Protocol):
    """Builds, signs and broadcasts transactions on behalf of a wallet."""

    async def burn_tokens(self, wallet: Wallet, qty: Decimal, token_id: str) -> str:
        ...

    async def send_op_return(self, wallet: Wallet, message: str) -> str:
        ...
