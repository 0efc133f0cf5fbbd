"""Normalization helpers for upstream payloads."""

from typing import Any


def as_list(payload: Any) -> list[Any]:
    """Coerce a Canvas response into an ordered list.

    Canvas returns a bare object for single-resource endpoints and an array for
    collections; ``None`` becomes an empty list.
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def truncate_text(text: str | None, max_chars: int) -> str | None:
    """Cut long text bodies, marking where the cut happened."""
    if text is None or len(text) <= max_chars:
        return text
    return text[:max_chars] + f"\n\n[truncated {len(text) - max_chars} characters]"
