"""Configuration models for the pin claim client."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

# Token burned to pay for pin claims and renewals
PSF_TOKEN_ID = "38e97c5d7d3585a2cbf3f9580c82ca33985f9cb0845d4dcce220cb709f9538b0"


@dataclass
class ClientConfig:
    """Complete client configuration, passed explicitly to each component."""

    # Pinning service
    pin_service_url: str = "http://localhost:5031"
    http_timeout: float | None = None  # seconds; None keeps the httpx default

    # Wallet
    wallet_url: str = "https://free-bch.fullstack.cash"
    wallets_dir: str = "~/.pinclaim/wallets"
    signer: str = ""  # "package.module:factory" for the transaction signer

    # Payment
    psf_token_id: str = PSF_TOKEN_ID
    write_price: Decimal = Decimal("0.08335233")  # PSF per megabyte

    # Files
    files_dir: str = "files"
    max_upload_size: int = 150_000_000  # bytes

    # Storage
    db_path: str = "~/.pinclaim/claims.db"

    # Logging
    log_level: str = "info"
