"""SQLite implementation of the ClaimStore protocol."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from spl_airdrop.models.records import ClaimRecord

log = logging.getLogger(__name__)

SCHEMA = """
-- One row per wallet; the primary key is what makes a claim exclusive
CREATE TABLE IF NOT EXISTS claims (
    wallet_address TEXT PRIMARY KEY,
    status TEXT NOT NULL DEFAULT 'pending',
    signature TEXT,
    amount INTEGER,
    error TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_claims_status ON claims(status);
"""

# Takes a fresh address, or re-takes one whose previous attempt failed.
_RESERVE = (
    "INSERT INTO claims (wallet_address, status, created_at, updated_at)"
    " VALUES (?, 'pending', ?, ?)"
    " ON CONFLICT(wallet_address) DO UPDATE SET"
    " status='pending', error=NULL, updated_at=excluded.updated_at"
    " WHERE claims.status='failed'"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_claim(row: aiosqlite.Row) -> ClaimRecord:
    return ClaimRecord(
        wallet_address=row["wallet_address"],
        status=row["status"],
        signature=row["signature"],
        amount=row["amount"],
        error=row["error"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteClaimStore:
    """Durable claim ledger.

    ``reserve`` is a single conditional insert on one connection, so two
    requests for the same wallet serialize on it and only one wins.
    """

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
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    async def is_claimed(self, wallet_address: str) -> bool:
        async with self.db.execute(
            "SELECT status FROM claims WHERE wallet_address=?", (wallet_address,),
        ) as cur:
            row = await cur.fetchone()
            return row is not None and row["status"] in ("pending", "completed")

    async def reserve(self, wallet_address: str) -> bool:
        now = _now()
        cur = await self.db.execute(_RESERVE, (wallet_address, now, now))
        taken = cur.rowcount == 1
        await cur.close()
        await self.db.commit()
        if not taken:
            log.info("Claim for %s already reserved or completed", wallet_address)
        return taken

    async def confirm(self, wallet_address: str, signature: str, amount: int) -> None:
        now = _now()
        await self.db.execute(
            "INSERT INTO claims (wallet_address, status, signature, amount, created_at, updated_at)"
            " VALUES (?, 'completed', ?, ?, ?, ?)"
            " ON CONFLICT(wallet_address) DO UPDATE SET"
            " status='completed', signature=excluded.signature, amount=excluded.amount,"
            " error=NULL, updated_at=excluded.updated_at",
            (wallet_address, signature, amount, now, now),
        )
        await self.db.commit()

    async def release(self, wallet_address: str, error: str | None = None) -> None:
        await self.db.execute(
            "UPDATE claims SET status='failed', error=?, updated_at=?"
            " WHERE wallet_address=? AND status='pending'",
            (error, _now(), wallet_address),
        )
        await self.db.commit()

    async def get_claim(self, wallet_address: str) -> ClaimRecord | None:
        async with self.db.execute(
            "SELECT * FROM claims WHERE wallet_address=?", (wallet_address,),
        ) as cur:
            row = await cur.fetchone()
            return _row_to_claim(row) if row else None

    async def list_claims(
        self, status: str | None = None, limit: int = 100
    ) -> list[ClaimRecord]:
        if status:
            query = "SELECT * FROM claims WHERE status=? ORDER BY created_at DESC LIMIT ?"
            params: tuple = (status, limit)
        else:
            query = "SELECT * FROM claims ORDER BY created_at DESC LIMIT ?"
            params = (limit,)
        async with self.db.execute(query, params) as cur:
            rows = await cur.fetchall()
            return [_row_to_claim(r) for r in rows]
