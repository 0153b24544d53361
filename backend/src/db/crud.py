"""
SQLite implementation of the TaskStore capability.

Each public method is one statement inside one transaction, so a request
touches the table at most once per call.
"""

import logging
from pathlib import Path
from typing import List, Optional

import aiosqlite

from .connection import DatabaseManager
from .schema import TaskItem

logger = logging.getLogger(__name__)


class SqliteTaskStore:
    """
    TaskStore backed by the `tasks` table.

    The DatabaseManager is created lazily on first use, so constructing the
    store never touches the filesystem.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    @classmethod
    def from_path(cls, db_path: Path) -> "SqliteTaskStore":
        return cls(DatabaseManager(db_path))

    async def _ready(self) -> DatabaseManager:
        if not self.db.is_initialized:
            await self.db.init()
        return self.db

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> TaskItem:
        return TaskItem(
            task_id=row["task_id"],
            title=row["title"],
            is_complete=bool(row["is_complete"]),
        )

    async def get(self, task_id: str) -> Optional[TaskItem]:
        db = await self._ready()
        async with db.transaction():
            row = await db.fetch_one(
                "SELECT task_id, title, is_complete FROM tasks WHERE task_id = ?",
                (task_id,),
            )
        return self._row_to_task(row) if row else None

    async def put(self, task: TaskItem) -> None:
        db = await self._ready()
        async with db.transaction():
            await db.execute(
                """
                INSERT INTO tasks (task_id, title, is_complete)
                VALUES (?, ?, ?)
                ON CONFLICT(task_id) DO UPDATE SET
                    title = excluded.title,
                    is_complete = excluded.is_complete
                """,
                (task.task_id, task.title, int(task.is_complete)),
            )
        logger.debug("Saved task %s", task.task_id)

    async def delete(self, task: TaskItem) -> None:
        db = await self._ready()
        async with db.transaction():
            await db.execute("DELETE FROM tasks WHERE task_id = ?", (task.task_id,))
        logger.debug("Deleted task %s", task.task_id)

    async def scan_all(self) -> List[TaskItem]:
        db = await self._ready()
        async with db.transaction():
            rows = await db.fetch_all("SELECT task_id, title, is_complete FROM tasks")
        return [self._row_to_task(row) for row in rows]

    async def open(self) -> None:
        await self._ready()

    async def close(self) -> None:
        await self.db.close()
