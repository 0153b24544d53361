"""
Storage abstraction layer - the TaskStore capability.

This module provides:
- TaskStore protocol: the four key-value operations the request handler uses
- STORE_BACKENDS: names of the shipped implementations

Implementations:
- SqliteTaskStore (crud.py): aiosqlite, single local file
- DynamoDBTaskStore (dynamodb.py): boto3, one DynamoDB table
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from .schema import TaskItem


STORE_BACKENDS = ("sqlite", "dynamodb")


@runtime_checkable
class TaskStore(Protocol):
    """
    Protocol for task persistence.

    Every method is a single round trip to the backend. Implementations must
    be safe to share between concurrent requests.
    """

    async def get(self, task_id: str) -> Optional[TaskItem]:
        """Load a task by id, or None if it does not exist."""
        ...

    async def put(self, task: TaskItem) -> None:
        """Insert a task, or fully overwrite the task with the same id."""
        ...

    async def delete(self, task: TaskItem) -> None:
        """Remove the task with task.task_id."""
        ...

    async def scan_all(self) -> List[TaskItem]:
        """Return every stored task, in backend order."""
        ...

    async def open(self) -> None:
        """Prepare backend resources; safe to call more than once."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
