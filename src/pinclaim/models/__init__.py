"""Data models for the pinclaim client."""

from pinclaim.models.config import ClientConfig, PSF_TOKEN_ID
from pinclaim.models.records import (
    ClaimRecord,
    ClaimSubmission,
    ClaimValidity,
    JournalEntry,
    PinClaimResult,
    RenewalResult,
    TokenBalance,
    UploadResult,
)

__all__ = [
    "ClientConfig", "PSF_TOKEN_ID",
    "ClaimRecord", "ClaimSubmission", "ClaimValidity", "JournalEntry",
    "PinClaimResult", "RenewalResult", "TokenBalance", "UploadResult",
]
