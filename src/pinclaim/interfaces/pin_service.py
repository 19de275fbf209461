"""PinService protocol - the pinning service and storage upload endpoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from pinclaim.models.records import ClaimSubmission, UploadResult


class PinService(Protocol):
    """Records and queries pin claims, and accepts file uploads."""

    async def get_pin_status(self, cid: str) -> Any:
        """Return the raw claim payload for a CID, unvalidated."""
        ...

    async def submit_claim(self, submission: ClaimSubmission) -> dict:
        """Record a claim. Raises UpstreamServiceError on success=false."""
        ...

    async def list_unprocessed(self) -> list[dict]:
        """Return raw claim payloads whose validClaim is null."""
        ...

    async def upload_file(self, path: Path, filename: str) -> UploadResult:
        """Upload a local file to the storage network and return its CID."""
        ...
