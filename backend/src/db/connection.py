"""
SQLite connection manager for the task table.

Provides:
- One shared aiosqlite connection per process
- Transaction-scoped locking so concurrent requests never interleave
- Idempotent schema creation on first use
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import aiosqlite

from .schema import SCHEMA_SQL

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Owns the SQLite connection used by SqliteTaskStore.

    Note: a single connection is shared by all requests. transaction()
    holds an asyncio.Lock for its whole body, so statements from two
    requests never run inside the same transaction.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._connection: Optional[aiosqlite.Connection] = None
        self._initialized = False
        self._lock = asyncio.Lock()
        self._init_lock = asyncio.Lock()
        self._transaction_owner: Optional[asyncio.Task] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def init(self):
        """
        Open the connection and create the schema.

        Safe to call repeatedly; only the first call does any work.
        """
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._connection = await aiosqlite.connect(str(self.db_path), timeout=5.0)
                self._connection.row_factory = aiosqlite.Row
                await self._connection.executescript(SCHEMA_SQL)
                await self._connection.commit()
                self._initialized = True
                logger.info("SQLite task table ready at %s", self.db_path)
            except Exception:
                if self._connection:
                    await self._connection.close()
                    self._connection = None
                raise

    async def close(self):
        """Close the connection once no transaction is running."""
        async with self._lock:
            if self._connection:
                await self._connection.close()
                self._connection = None
                self._initialized = False

    @property
    def connection(self) -> aiosqlite.Connection:
        if not self._initialized or not self._connection:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._connection

    def _require_transaction(self, operation: str) -> None:
        if self._transaction_owner is None:
            raise RuntimeError(
                f"{operation} requires an active transaction. "
                "Use 'async with db.transaction()'."
            )
        if self._transaction_owner is not asyncio.current_task():
            raise RuntimeError(
                f"{operation} must run within the current task's transaction."
            )

    async def execute(self, sql: str, parameters=None) -> aiosqlite.Cursor:
        self._require_transaction("execute")
        return await self.connection.execute(sql, parameters or ())

    async def fetch_one(self, sql: str, parameters=None) -> Optional[aiosqlite.Row]:
        self._require_transaction("fetch_one")
        cursor = await self.execute(sql, parameters)
        try:
            return await cursor.fetchone()
        finally:
            await cursor.close()

    async def fetch_all(self, sql: str, parameters=None) -> list[aiosqlite.Row]:
        self._require_transaction("fetch_all")
        cursor = await self.execute(sql, parameters)
        try:
            return await cursor.fetchall()
        finally:
            await cursor.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Run the body inside BEGIN/COMMIT, rolling back on any exception.

        Cancellation (e.g. an expired request deadline) also rolls back, so
        the shared connection never stays inside an open BEGIN.

        Do NOT nest transactions: asyncio.Lock is not reentrant.
        """
        if self._transaction_owner is asyncio.current_task():
            raise RuntimeError("Nested transaction() is not allowed.")

        async with self._lock:
            self._transaction_owner = asyncio.current_task()
            try:
                try:
                    await self.connection.execute("BEGIN TRANSACTION")
                    yield self
                except BaseException:
                    # aiosqlite runs statements in order on one thread, so the
                    # rollback lands after a BEGIN that was still in flight.
                    await asyncio.shield(self.connection.rollback())
                    raise
                else:
                    await self.connection.commit()
            finally:
                self._transaction_owner = None

