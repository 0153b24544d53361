"""
Tasks Router - HTTP adapter for the task request handler

The common methods are forwarded on both paths and the handler's routing
table decides which combinations are allowed. Methods the router does not
register (HEAD, TRACE, custom verbs) get the same 405 envelope from the
app-level handler in main.py.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ...services.tasks import ApiRequest, ApiResponse, TaskRequestHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tasks"])

TASK_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def to_response(result: ApiResponse) -> Response:
    """Render a handler envelope as-is: status, headers and body."""
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


def get_task_handler(request: Request) -> TaskRequestHandler:
    """Handler built once in the app lifespan."""
    return request.app.state.task_handler


async def _dispatch(
    request: Request,
    handler: TaskRequestHandler,
    task_id: Optional[str],
) -> Response:
    raw = await request.body()
    api_request = ApiRequest(
        method=request.method,
        path_parameters={"id": task_id} if task_id is not None else None,
        body=raw.decode("utf-8", errors="replace") if raw else None,
    )
    return to_response(await handler.handle(api_request))


@router.api_route("/tasks", methods=TASK_METHODS)
async def tasks_collection(
    request: Request,
    handler: TaskRequestHandler = Depends(get_task_handler),
):
    """List (GET) or create (POST) tasks."""
    return await _dispatch(request, handler, None)


@router.api_route("/tasks/{task_id}", methods=TASK_METHODS)
async def task_item(
    task_id: str,
    request: Request,
    handler: TaskRequestHandler = Depends(get_task_handler),
):
    """Get (GET), update (PUT) or delete (DELETE) one task."""
    return await _dispatch(request, handler, task_id)
