"""Server-Sent Events framing."""

import json
from typing import Any

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse(payload: dict[str, Any]) -> str:
    """Frame a JSON payload as one ``data:`` event."""
    return f"data: {json.dumps(payload, default=str)}\n\n"
