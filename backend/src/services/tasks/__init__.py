"""
Tasks module - request handling for the task resource.
"""

from .contracts import ApiRequest, ApiResponse
from .handler import (
    MSG_METHOD_NOT_ALLOWED,
    TaskRequestHandler,
    parse_json_object,
    parse_task_patch,
)

__all__ = [
    "MSG_METHOD_NOT_ALLOWED",
    "ApiRequest",
    "ApiResponse",
    "TaskRequestHandler",
    "parse_json_object",
    "parse_task_patch",
]
