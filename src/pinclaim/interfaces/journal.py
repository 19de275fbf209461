"""ClaimJournal protocol - local record of generated transaction pairs."""

from __future__ import annotations

from typing import Protocol

from pinclaim.models.records import JournalEntry


class ClaimJournal(Protocol):
    """Persists every proof-of-burn/claim pair so orphans can be recovered."""

    async def initialize(self) -> None:
        """Create tables if they don't exist."""
        ...

    async def close(self) -> None:
        ...

    async def record(self, entry: JournalEntry) -> int:
        """Persist a new entry and return its id."""
        ...

    async def update_status(
        self, entry_id: int, status: str, message: str | None = None
    ) -> None:
        ...

    async def get_entries(self, cid: str | None = None) -> list[JournalEntry]:
        ...

    async def get_orphaned(self) -> list[JournalEntry]:
        """Unacknowledged claims, and burns whose claim was never broadcast."""
        ...
