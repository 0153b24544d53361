"""
Task Request Handler - routes a request envelope to one CRUD operation.

Routing is an explicit table keyed on (method, has path id):

    GET    no id  -> list
    GET    id     -> get
    POST   no id  -> create
    PUT    id     -> update
    DELETE id     -> delete
    anything else -> 405

Each request performs at most one store read and at most one store write.
Client errors become 400/404/405 envelopes where they are detected; store
faults are logged and answered with a generic 500.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from pydantic import ValidationError

from ...db.base import TaskStore
from ...db.schema import TaskItem, TaskPatch
from .contracts import ApiRequest, ApiResponse

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "Task not found."
MSG_MISSING_TITLE = "Missing 'title' in request body."
MSG_INVALID_BODY = "Invalid request body."
MSG_METHOD_NOT_ALLOWED = "Method not allowed."
MSG_UPDATED = "Task updated successfully."
MSG_INTERNAL_ERROR = "Internal server error."

Route = Callable[[ApiRequest], Awaitable[ApiResponse]]


def parse_json_object(body: Optional[str]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Decode a request body into a flat JSON object.

    Returns (object, None) on success and (None, reason) on failure.
    A missing or blank body decodes to {}.
    """
    if body is None or not body.strip():
        return {}, None
    try:
        parsed = json.loads(body)
    except ValueError:
        return None, "request body must be valid JSON"
    if not isinstance(parsed, dict):
        return None, "request body must be a JSON object"
    return parsed, None


def parse_task_patch(body: Optional[str]) -> Tuple[Optional[TaskPatch], Optional[str]]:
    """Decode an update body; wrong field types are reported, not raised."""
    payload, error = parse_json_object(body)
    if error:
        return None, error
    try:
        return TaskPatch.model_validate(payload), None
    except ValidationError as e:
        fields = ", ".join(".".join(str(x) for x in err["loc"]) for err in e.errors())
        return None, f"invalid field(s): {fields}"


class TaskRequestHandler:
    """
    Dispatches ApiRequest envelopes against a TaskStore.

    The store is injected once and shared by every request; the handler
    keeps no other state.
    """

    def __init__(self, store: TaskStore, timeout: Optional[float] = None):
        self.store = store
        self.timeout = timeout
        self._routes: Dict[Tuple[str, bool], Route] = {
            ("GET", False): lambda req: self.list_tasks(),
            ("GET", True): lambda req: self.get_task(req.task_id),
            ("POST", False): lambda req: self.create_task(req.body),
            ("PUT", True): lambda req: self.update_task(req.task_id, req.body),
            ("DELETE", True): lambda req: self.delete_task(req.task_id),
        }

    def resolve(self, method: str, task_id: Optional[str]) -> Optional[Route]:
        """Look up the operation for (method, has id); None means 405."""
        return self._routes.get((method.upper(), task_id is not None))

    async def handle(self, request: ApiRequest, timeout: Optional[float] = None) -> ApiResponse:
        """
        Handle one request.

        Args:
            request: Normalized request envelope
            timeout: Deadline in seconds for the whole operation; falls back
                to the handler default

        Returns:
            Response envelope; never raises for store faults
        """
        method = request.method.upper()
        task_id = request.task_id
        logger.info("Received request method=%s task_id=%s", method, task_id)

        route = self.resolve(method, task_id)
        if route is None:
            return ApiResponse.error(405, MSG_METHOD_NOT_ALLOWED)

        deadline = timeout if timeout is not None else self.timeout
        try:
            return await asyncio.wait_for(route(request), timeout=deadline)
        except asyncio.TimeoutError:
            logger.error("%s task_id=%s timed out after %ss", method, task_id, deadline)
        except Exception:
            logger.exception("%s task_id=%s failed", method, task_id)
        return ApiResponse.error(500, MSG_INTERNAL_ERROR)

    # ==================== Operations ====================

    async def list_tasks(self) -> ApiResponse:
        tasks = await self.store.scan_all()
        return ApiResponse.with_json(200, [task.to_json_dict() for task in tasks])

    async def get_task(self, task_id: str) -> ApiResponse:
        task = await self.store.get(task_id)
        if task is None:
            return ApiResponse.error(404, MSG_NOT_FOUND)
        return ApiResponse.with_json(200, task.to_json_dict())

    async def create_task(self, body: Optional[str]) -> ApiResponse:
        payload, error = parse_json_object(body)
        if error:
            logger.info("Rejected create: %s", error)
            return ApiResponse.error(400, MSG_INVALID_BODY)

        title = payload.get("title")
        if title is None or (isinstance(title, str) and not title.strip()):
            return ApiResponse.error(400, MSG_MISSING_TITLE)
        if not isinstance(title, str):
            logger.info("Rejected create: title is %s", type(title).__name__)
            return ApiResponse.error(400, MSG_INVALID_BODY)

        task = TaskItem.new(title)
        await self.store.put(task)
        logger.info("Created task %s", task.task_id)
        return ApiResponse.with_json(201, task.to_json_dict())

    async def update_task(self, task_id: str, body: Optional[str]) -> ApiResponse:
        task = await self.store.get(task_id)
        if task is None:
            return ApiResponse.error(404, MSG_NOT_FOUND)

        patch, error = parse_task_patch(body)
        if error:
            logger.info("Rejected update of %s: %s", task_id, error)
            return ApiResponse.error(400, MSG_INVALID_BODY)

        await self.store.put(patch.apply_to(task))
        return ApiResponse.with_json(200, {"message": MSG_UPDATED})

    async def delete_task(self, task_id: str) -> ApiResponse:
        task = await self.store.get(task_id)
        if task is None:
            return ApiResponse.error(404, MSG_NOT_FOUND)

        await self.store.delete(task)
        logger.info("Deleted task %s", task_id)
        return ApiResponse.empty(204)
