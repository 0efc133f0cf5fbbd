"""Utility functions."""

from study_assistant.utils.normalize import as_list, truncate_text
from study_assistant.utils.sse import SSE_HEADERS, format_sse
from study_assistant.utils.tool_converter import convert_tools_for_provider, validate_tool_arguments

__all__ = [
    "as_list",
    "truncate_text",
    "SSE_HEADERS",
    "format_sse",
    "convert_tools_for_provider",
    "validate_tool_arguments",
]
