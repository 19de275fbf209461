"""Local persistence of broadcast claim transactions."""

from pinclaim.storage.sqlite import SQLiteClaimJournal

__all__ = ["SQLiteClaimJournal"]
