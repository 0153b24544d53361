"""
Services module - Business logic layer.

This module provides:
- tasks: request routing, validation and response envelopes for the task resource
"""

from .tasks import ApiRequest, ApiResponse, TaskRequestHandler

__all__ = [
    "ApiRequest",
    "ApiResponse",
    "TaskRequestHandler",
]
