"""
Lambda entry point - API Gateway proxy events in, proxy responses out.

Handler setting: backend.src.lambda_handler.handler

The task store and request handler are built on the first invocation and
reused by every later invocation of the same process. A single event loop
is kept for the process so that the store's connections stay bound to it.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any, Dict, Optional

from .db import get_task_store
from .services.tasks import ApiRequest, ApiResponse, TaskRequestHandler
from .services.tasks.handler import MSG_INVALID_BODY
from .web.config import config

logger = logging.getLogger(__name__)

# Leave room to serialize the response before Lambda kills the invocation
DEADLINE_MARGIN_S = 0.5

_loop: Optional[asyncio.AbstractEventLoop] = None
_request_handler: Optional[TaskRequestHandler] = None


def _get_loop() -> asyncio.AbstractEventLoop:
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
    return _loop


def get_request_handler() -> TaskRequestHandler:
    """Build the process-wide handler on first use."""
    global _request_handler
    if _request_handler is None:
        logging.getLogger().setLevel(config.log_level)
        _request_handler = TaskRequestHandler(get_task_store(config), timeout=config.request_timeout)
    return _request_handler


def set_request_handler(handler: Optional[TaskRequestHandler]) -> None:
    """Replace the process-wide handler (tests)."""
    global _request_handler
    _request_handler = handler


def _deadline(context: Any) -> Optional[float]:
    """Seconds left for this invocation, minus the margin; capped by config."""
    remaining_ms = getattr(context, "get_remaining_time_in_millis", None)
    limits = []
    if callable(remaining_ms):
        limits.append(max(0.0, remaining_ms() / 1000.0 - DEADLINE_MARGIN_S))
    if config.request_timeout is not None:
        limits.append(config.request_timeout)
    return min(limits) if limits else None


def _decode_body(event: Dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body, None
    try:
        return base64.b64decode(body.encode("utf-8"), validate=True).decode("utf-8"), None
    except (binascii.Error, UnicodeDecodeError):
        return None, "request body base64 decode failed"


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Handle one API Gateway proxy event."""
    body, error = _decode_body(event)
    if error:
        logger.info("Rejected request: %s", error)
        return ApiResponse.error(400, MSG_INVALID_BODY).to_event()

    request = ApiRequest(
        method=event.get("httpMethod") or "",
        path_parameters=event.get("pathParameters"),
        body=body,
    )
    request_handler = get_request_handler()
    response = _get_loop().run_until_complete(
        request_handler.handle(request, timeout=_deadline(context))
    )
    return response.to_event()
