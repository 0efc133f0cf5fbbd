"""Tools the assistant can call."""

from study_assistant.tools.base import BaseTool
from study_assistant.tools.registry import ToolRegistry, build_default_registry

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "build_default_registry",
]
