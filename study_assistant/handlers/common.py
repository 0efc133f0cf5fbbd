"""Helpers shared by the HTTP handlers."""

import uuid
from typing import Any

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from study_assistant.core.exceptions import CanvasAPIError

# Upstream statuses forwarded as-is; the rest become 502
PASSTHROUGH_STATUSES = (401, 403, 404)


def bind_request_context(**extra: Any) -> str:
    """Start a fresh logging context for one request and return its ID."""
    request_id = str(uuid.uuid4())[:8]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **extra)
    return request_id


def bearer_token(request: Request) -> str | None:
    """Token from ``Authorization: Bearer <token>``, if present."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def error_response(
    status_code: int,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def canvas_error_response(error: CanvasAPIError, message: str) -> JSONResponse:
    """Translate an upstream Canvas failure into a proxy response."""
    if error.status_code in PASSTHROUGH_STATUSES:
        return error_response(error.status_code, message, error.body or error.message)
    return error_response(502, message, str(error))
