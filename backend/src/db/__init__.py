"""
Database module for task persistence.

Provides the TaskStore capability and its two backends:
- SqliteTaskStore: local file via aiosqlite (default)
- DynamoDBTaskStore: AWS DynamoDB table via boto3

Usage:
    from backend.src.db import get_task_store

    store = get_task_store(config)
    task = await store.get("123-456")
"""

import logging
from typing import Optional

from .base import STORE_BACKENDS, TaskStore
from .crud import SqliteTaskStore
from .dynamodb import DynamoDBTaskStore
from .schema import TaskItem, TaskPatch

logger = logging.getLogger(__name__)


def create_task_store(config) -> TaskStore:
    """
    Build a new store for config.store_backend.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = config.store_backend
    if backend == "sqlite":
        logger.info("Using SQLite task store: %s", config.db_path)
        return SqliteTaskStore.from_path(config.db_path)
    if backend == "dynamodb":
        logger.info("Using DynamoDB task store: %s", config.table_name)
        return DynamoDBTaskStore(
            table_name=config.table_name,
            region_name=config.aws_region,
            endpoint_url=config.dynamodb_endpoint_url,
        )
    raise ValueError(f"Unknown store backend {backend!r}, expected one of {STORE_BACKENDS}")


# ==================== Global Instance ====================

_task_store: Optional[TaskStore] = None


def get_task_store(config=None) -> TaskStore:
    """
    Get or create the process-wide TaskStore.

    Args:
        config: AppConfig used on first call; defaults to the global config
    """
    global _task_store

    if _task_store is None:
        if config is None:
            from ..web.config import config as app_config
            config = app_config
        _task_store = create_task_store(config)

    return _task_store


def reset_task_store():
    """Forget the global TaskStore (tests)."""
    global _task_store
    _task_store = None


__all__ = [
    "STORE_BACKENDS",
    "TaskStore",
    "SqliteTaskStore",
    "DynamoDBTaskStore",
    "TaskItem",
    "TaskPatch",
    "create_task_store",
    "get_task_store",
    "reset_task_store",
]
