"""Protocol interfaces for all pinclaim collaborators."""

from pinclaim.interfaces.pin_service import PinService
from pinclaim.interfaces.wallet import TransactionSigner, Wallet, WalletLoader
from pinclaim.interfaces.generator import ClaimGenerator
from pinclaim.interfaces.journal import ClaimJournal

__all__ = [
    "PinService",
    "Wallet", "WalletLoader", "TransactionSigner",
    "ClaimGenerator",
    "ClaimJournal",
]
