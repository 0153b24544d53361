"""
Task API contracts - Request and response envelopes.

The envelopes mirror the API Gateway proxy shapes so that any transport
(FastAPI route, Lambda event) can be mapped onto them:

- ApiRequest: httpMethod, pathParameters, body
- ApiResponse: statusCode, headers, body
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


JSON_HEADERS = {"Content-Type": "application/json"}


class ApiRequest(BaseModel):
    """Normalized inbound request."""

    method: str = Field(..., alias="httpMethod")
    path_parameters: Optional[Dict[str, str]] = Field(None, alias="pathParameters")
    body: Optional[str] = None

    class Config:
        populate_by_name = True

    @property
    def task_id(self) -> Optional[str]:
        """The `id` path parameter, or None when missing or blank."""
        if not self.path_parameters:
            return None
        value = (self.path_parameters.get("id") or "").strip()
        return value or None


class ApiResponse(BaseModel):
    """Normalized outbound response."""

    status_code: int = Field(..., alias="statusCode")
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""

    class Config:
        populate_by_name = True

    @classmethod
    def with_json(cls, status_code: int, payload: Any) -> "ApiResponse":
        """Success response carrying a JSON body."""
        return cls(
            status_code=status_code,
            headers=dict(JSON_HEADERS),
            body=json.dumps(payload),
        )

    @classmethod
    def error(cls, status_code: int, text: str) -> "ApiResponse":
        """`{"message": ...}` response without a Content-Type header."""
        return cls(status_code=status_code, body=json.dumps({"message": text}))

    @classmethod
    def empty(cls, status_code: int = 204) -> "ApiResponse":
        return cls(status_code=status_code)

    def to_event(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
