"""SQLite implementation of the ClaimJournal protocol."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from pinclaim.models.records import JournalEntry

SCHEMA = """
-- Every proof-of-burn/claim pair this client broadcast
CREATE TABLE IF NOT EXISTS claims (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    cid TEXT NOT NULL,
    filename TEXT NOT NULL,
    address TEXT NOT NULL,
    pob_txid TEXT NOT NULL,
    claim_txid TEXT NOT NULL,
    operation TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'generated',
    message TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_claims_cid ON claims(cid);
CREATE INDEX IF NOT EXISTS idx_claims_status ON claims(status);
"""

# Claims on the ledger that the pinning service has not acknowledged
UNACKNOWLEDGED_STATUSES = ("generated", "notify_failed")
# Plus burns whose claim transaction was never broadcast
ORPHAN_STATUSES = UNACKNOWLEDGED_STATUSES + ("burned",)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_entry(row: aiosqlite.Row) -> JournalEntry:
    return JournalEntry(
        id=row["id"],
        cid=row["cid"],
        filename=row["filename"],
        address=row["address"],
        pob_txid=row["pob_txid"],
        claim_txid=row["claim_txid"],
        operation=row["operation"],
        status=row["status"],
        message=row["message"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteClaimJournal:
    """SQLite-backed implementation of the ClaimJournal protocol."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Journal not initialized. Call initialize() first."
        return self._db

    async def record(self, entry: JournalEntry) -> int:
        now = _now()
        async with self.db.execute(
            "INSERT INTO claims"
            " (cid, filename, address, pob_txid, claim_txid, operation,"
            "  status, message, created_at, updated_at)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                entry.cid, entry.filename, entry.address, entry.pob_txid,
                entry.claim_txid, entry.operation, entry.status, entry.message,
                now, now,
            ),
        ) as cur:
            entry_id = cur.lastrowid
        await self.db.commit()
        return int(entry_id)

    async def update_status(
        self, entry_id: int, status: str, message: str | None = None
    ) -> None:
        await self.db.execute(
            "UPDATE claims SET status=?, message=?, updated_at=? WHERE id=?",
            (status, message, _now(), entry_id),
        )
        await self.db.commit()

    async def get_entries(self, cid: str | None = None) -> list[JournalEntry]:
        if cid:
            query, params = "SELECT * FROM claims WHERE cid=? ORDER BY id", (cid,)
        else:
            query, params = "SELECT * FROM claims ORDER BY id", ()
        async with self.db.execute(query, params) as cur:
            return [_row_to_entry(row) async for row in cur]

    async def get_orphaned(self) -> list[JournalEntry]:
        placeholders = ",".join("?" for _ in ORPHAN_STATUSES)
        async with self.db.execute(
            f"SELECT * FROM claims WHERE status IN ({placeholders})"
            " ORDER BY id",
            ORPHAN_STATUSES,
        ) as cur:
            return [_row_to_entry(row) async for row in cur]
