"""Base repository pattern for ledger store operations."""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence, Tuple

import aiosqlite

from core.exceptions import StoreUnavailableError
from database.connection import LedgerConnectionPool, get_db_pool


class BaseRepository:
    """Base repository with common database operations.

    Operational failures (locked database, missing file, I/O errors) surface
    as ``StoreUnavailableError``. ``sqlite3.IntegrityError`` is left for the
    concrete repository to translate, since only it knows which constraint
    a violation means.
    """

    def __init__(self, pool: Optional[LedgerConnectionPool] = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> LedgerConnectionPool:
        return self._pool or get_db_pool()

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with self.pool.connection() as conn:
                yield conn
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Ledger store failure: {e}") from e

    async def insert(self, query: str, params: Sequence[Any] = ()) -> int:
        """Execute an INSERT and return the new row id."""
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(query, params)
                await conn.commit()
            except sqlite3.Error:
                await conn.rollback()
                raise
            return cursor.lastrowid

    async def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[Tuple]:
        """Fetch a single row."""
        async with self._connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()

    async def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Tuple]:
        """Fetch all rows."""
        async with self._connection() as conn:
            cursor = await conn.execute(query, params)
            return [row async for row in cursor]

    async def fetch_value(self, query: str, params: Sequence[Any] = ()) -> Optional[Any]:
        """Fetch a single value from a single row."""
        row = await self.fetch_one(query, params)
        return row[0] if row else None
