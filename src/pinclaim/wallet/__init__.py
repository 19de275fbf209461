"""Wallet module adapter and the ledger claim generator."""

from pinclaim.wallet.consumer import ConsumerWallet, FileWalletLoader, load_signer
from pinclaim.wallet.generator import BurnClaimGenerator

__all__ = ["ConsumerWallet", "FileWalletLoader", "load_signer", "BurnClaimGenerator"]
