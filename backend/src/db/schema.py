"""
Task schema definitions.

Provides:
- TaskItem: the stored task entity and its JSON encoding
- TaskPatch: the partial update payload accepted by PUT
- SCHEMA_SQL: DDL for the SQLite key-value table

JSON field names follow the API contract (taskId, title, isComplete);
Python attribute names stay snake_case.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr, field_validator


# ==================== Pydantic Models ====================

class TaskItem(BaseModel):
    """A single task record."""
    task_id: str = Field(..., alias="taskId", min_length=1)
    title: str
    is_complete: bool = Field(False, alias="isComplete")

    class Config:
        populate_by_name = True
        from_attributes = True

    @classmethod
    def new(cls, title: str) -> "TaskItem":
        """Create a fresh task with a generated id and isComplete=false."""
        return cls(task_id=str(uuid.uuid4()), title=title, is_complete=False)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class TaskPatch(BaseModel):
    """
    Fields accepted by an update request.

    Absent fields stay None and leave the stored value untouched. A field
    that is present must carry the right JSON type; null is rejected.
    """
    title: Optional[StrictStr] = None
    is_complete: Optional[StrictBool] = Field(None, alias="isComplete")

    class Config:
        populate_by_name = True

    @field_validator("title", "is_complete", mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    def apply_to(self, task: TaskItem) -> TaskItem:
        """Return a copy of task with the present fields overwritten."""
        changes = {}
        if self.title is not None:
            changes["title"] = self.title
        if self.is_complete is not None:
            changes["is_complete"] = self.is_complete
        return task.model_copy(update=changes)


# ==================== SQL DDL ====================

SCHEMA_SQL = """
PRAGMA journal_mode = WAL;
PRAGMA synchronous = NORMAL;
PRAGMA busy_timeout = 5000;

-- One row per task, keyed by the generated id
CREATE TABLE IF NOT EXISTS tasks (
    task_id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    is_complete INTEGER NOT NULL DEFAULT 0
        CHECK (is_complete IN (0, 1))
) WITHOUT ROWID;
"""
