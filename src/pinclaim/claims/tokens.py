"""Token sufficiency - does the wallet hold the token a paid operation burns?"""

from __future__ import annotations

import logging
from typing import Iterable

from pinclaim.errors import InsufficientFunds
from pinclaim.interfaces.wallet import Wallet
from pinclaim.models.records import TokenBalance
from pinclaim.wallet.consumer import TOKEN_CATEGORIES

log = logging.getLogger(__name__)


def _qty(utxo: dict) -> float:
    value = utxo.get("qtyStr", utxo.get("qty", 0))
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def merge_token_utxos(categorized: dict[str, list[dict]]) -> list[dict]:
    """Flatten type1, group and NFT token UTXOs into one list."""
    merged: list[dict] = []
    for category in TOKEN_CATEGORIES:
        merged.extend(categorized.get(category) or [])
    return merged


def get_token_balances(token_utxos: Iterable[dict]) -> list[TokenBalance]:
    """Sum UTXO quantities per token id, in first-seen order."""
    balances: dict[str, TokenBalance] = {}
    for utxo in token_utxos:
        token_id = utxo.get("tokenId")
        if not token_id:
            continue
        balance = balances.get(token_id)
        if balance is None:
            balance = TokenBalance(
                token_id=token_id,
                qty=0.0,
                ticker=utxo.get("ticker", ""),
                name=utxo.get("name", ""),
            )
            balances[token_id] = balance
        balance.qty += _qty(utxo)
    return list(balances.values())


class TokenSufficiencyChecker:
    """Confirms an initialized wallet holds a non-zero balance of a token."""

    def balance_of(self, wallet: Wallet, token_id: str) -> TokenBalance | None:
        tokens = get_token_balances(merge_token_utxos(wallet.token_utxos()))
        return next((t for t in tokens if t.token_id == token_id), None)

    def require(self, wallet: Wallet, token_id: str) -> TokenBalance:
        balance = self.balance_of(wallet, token_id)
        if balance is None or balance.qty <= 0:
            log.error("Wallet %s holds no %s tokens", wallet.name, token_id[:12])
            raise InsufficientFunds(
                "Wallet does not contain PSF tokens. Please add PSF tokens to "
                "the wallet before creating or renewing a pin claim."
            )
        log.info("PSF token balance: %s", balance.qty)
        return balance
