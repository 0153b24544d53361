"""
DynamoDB implementation of the TaskStore capability.

Item layout (hash key TaskId):
    {"TaskId": "<uuid>", "Title": "<text>", "IsComplete": true|false}

boto3 is blocking, so every call runs in a worker thread. The boto3
resource is created once and shared; boto3 resources are not guaranteed
thread-safe, so calls on the shared Table are serialized per store.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Dict, List, Optional

import boto3

from .schema import TaskItem

logger = logging.getLogger(__name__)

HASH_KEY = "TaskId"


def _item_to_task(item: Dict[str, Any]) -> TaskItem:
    return TaskItem(
        task_id=str(item[HASH_KEY]),
        title=str(item["Title"]),
        is_complete=bool(item.get("IsComplete", False)),
    )


def _task_to_item(task: TaskItem) -> Dict[str, Any]:
    return {
        HASH_KEY: task.task_id,
        "Title": task.title,
        "IsComplete": task.is_complete,
    }


class DynamoDBTaskStore:
    """TaskStore backed by a single DynamoDB table."""

    def __init__(
        self,
        table_name: str = "Tasks",
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        table: Any = None,
    ):
        self.table_name = table_name
        self._region_name = region_name
        self._endpoint_url = endpoint_url
        self._table = table
        self._table_lock = threading.Lock()

    @property
    def table(self) -> Any:
        """The boto3 Table, created on first access."""
        if self._table is None:
            resource = boto3.resource(
                "dynamodb",
                region_name=self._region_name,
                endpoint_url=self._endpoint_url,
            )
            self._table = resource.Table(self.table_name)
            logger.info("DynamoDB task table: %s", self.table_name)
        return self._table

    def _call(self, method: str, **kwargs) -> Dict[str, Any]:
        with self._table_lock:
            return getattr(self.table, method)(**kwargs)

    async def get(self, task_id: str) -> Optional[TaskItem]:
        resp = await asyncio.to_thread(self._call, "get_item", Key={HASH_KEY: task_id})
        item = resp.get("Item")
        return _item_to_task(item) if item else None

    async def put(self, task: TaskItem) -> None:
        await asyncio.to_thread(self._call, "put_item", Item=_task_to_item(task))

    async def delete(self, task: TaskItem) -> None:
        await asyncio.to_thread(self._call, "delete_item", Key={HASH_KEY: task.task_id})

    def _scan_pages(self) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        kwargs: Dict[str, Any] = {}
        while True:
            page = self._call("scan", **kwargs)
            items.extend(page.get("Items", []))
            last_key = page.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    async def scan_all(self) -> List[TaskItem]:
        items = await asyncio.to_thread(self._scan_pages)
        return [_item_to_task(item) for item in items]

    async def open(self) -> None:
        await asyncio.to_thread(lambda: self.table)

    async def close(self) -> None:
        return None
