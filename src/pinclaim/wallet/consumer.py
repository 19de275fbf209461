"""Wallet adapter - wallet files on disk, token UTXOs from a consumer API."""

from __future__ import annotations

import importlib
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import httpx

from pinclaim.errors import ConfigError, PinClaimError, TransportError, WalletError
from pinclaim.interfaces.wallet import TransactionSigner

log = logging.getLogger(__name__)

TOKEN_CATEGORIES = ("type1", "group", "nft")


def load_signer(target: str, **kwargs: Any) -> TransactionSigner:
    """Import a signer factory from ``"package.module:attr"`` and call it."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"signer must look like 'package.module:factory', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"cannot import signer module {module_name!r}: {exc}") from exc
    factory: Callable[..., TransactionSigner] | None = getattr(module, attr, None)
    if factory is None:
        raise ConfigError(f"{module_name!r} has no attribute {attr!r}")
    return factory(**kwargs)


class ConsumerWallet:
    """A named wallet whose UTXO state comes from an ipfs-bch-wallet-consumer.

    The consumer API's POST /bch/utxos returns, per address, the BCH UTXOs
    and the token UTXOs grouped as type1, group and nft. Signing is handed to
    the configured TransactionSigner.
    """

    def __init__(
        self,
        name: str,
        wallet_info: dict,
        wallet_url: str,
        signer: TransactionSigner | None = None,
        timeout: float | None = None,
    ) -> None:
        self._name = name
        self._info = wallet_info
        self._wallet_url = wallet_url.rstrip("/")
        self._signer = signer
        self._timeout = timeout
        self._token_utxos: dict[str, list[dict]] | None = None

        address = wallet_info.get("cashAddress") or wallet_info.get("address")
        if not address:
            raise WalletError(f"wallet {name!r} has no address")
        self._address = str(address)

    @property
    def name(self) -> str:
        return self._name

    @property
    def address(self) -> str:
        return self._address

    @property
    def info(self) -> dict:
        return self._info

    async def initialize(self) -> None:
        """Fetch the token UTXOs held by the wallet address."""
        url = f"{self._wallet_url}/bch/utxos"
        log.debug("Syncing UTXOs for %s from %s", self._address, url)
        kwargs: dict[str, Any] = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        try:
            async with httpx.AsyncClient(**kwargs) as client:
                resp = await client.post(url, json={"address": self._address})
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise WalletError(
                f"UTXO query failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise WalletError("UTXO query returned invalid JSON") from exc

        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise WalletError("UTXO query returned an unexpected payload")
        slp = data.get("slpUtxos") or {}

        self._token_utxos = {
            category: list((slp.get(category) or {}).get("tokens") or [])
            for category in TOKEN_CATEGORIES
        }
        log.info(
            "Wallet %s initialized (%s token UTXOs)",
            self._name,
            sum(len(v) for v in self._token_utxos.values()),
        )

    def token_utxos(self) -> dict[str, list[dict]]:
        if self._token_utxos is None:
            raise WalletError(f"wallet {self._name!r} not initialized")
        return self._token_utxos

    def _require_signer(self) -> TransactionSigner:
        if self._signer is None:
            raise WalletError(
                "No transaction signer configured. Set wallet.signer in the "
                "config file or PINCLAIM_SIGNER."
            )
        return self._signer

    async def burn_tokens(self, qty: Decimal, token_id: str) -> str:
        signer = self._require_signer()
        try:
            return await signer.burn_tokens(self, qty, token_id)
        except PinClaimError:
            raise
        except Exception as exc:
            raise WalletError(f"signer failed to burn tokens: {exc}") from exc

    async def send_op_return(self, message: str) -> str:
        signer = self._require_signer()
        try:
            return await signer.send_op_return(self, message)
        except PinClaimError:
            raise
        except Exception as exc:
            raise WalletError(f"signer failed to broadcast claim: {exc}") from exc


class FileWalletLoader:
    """Loads wallets saved as ``<wallets_dir>/<name>.json``.

    Files follow the psf-bch-wallet layout:
    {"wallet": {"cashAddress": ..., "mnemonic": ..., ...}, "description": ...}
    """

    def __init__(
        self,
        wallets_dir: str | Path,
        wallet_url: str,
        signer: TransactionSigner | None = None,
        timeout: float | None = None,
    ) -> None:
        self._dir = Path(wallets_dir).expanduser()
        self._wallet_url = wallet_url
        self._signer = signer
        self._timeout = timeout

    def path_for(self, name: str) -> Path:
        return self._dir / f"{name}.json"

    def load(self, name: str) -> ConsumerWallet:
        path = self.path_for(name)
        if not path.exists():
            raise WalletError(f"Wallet not found: {path}")
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise WalletError(f"Cannot read wallet file {path}: {exc}") from exc

        info = data.get("wallet") if isinstance(data, dict) else None
        if not isinstance(info, dict):
            raise WalletError(f"Wallet file {path} has no 'wallet' section")

        return ConsumerWallet(
            name=name,
            wallet_info=info,
            wallet_url=self._wallet_url,
            signer=self._signer,
            timeout=self._timeout,
        )
