"""Registry of tools advertised to the model."""

from collections.abc import Iterable, Iterator
from typing import Any

from study_assistant.core.exceptions import ConfigurationError
from study_assistant.models.tools import Tool
from study_assistant.tools.base import BaseTool
from study_assistant.tools.canvas_tools import (
    GetAssignmentContentTool,
    GetAssignmentsTool,
    GetCoursesTool,
    GetFilesTool,
    GetModulesTool,
    GetPageContentTool,
    GetPagesTool,
    GetQuizContentTool,
    GetQuizzesTool,
)
from study_assistant.tools.study_tools import GenerateStudyPackTool
from study_assistant.utils.tool_converter import convert_tools_for_provider


class ToolRegistry:
    """Ordered, name-keyed set of tool handlers."""

    def __init__(self, tools: Iterable[BaseTool] = ()) -> None:
        self._tools: dict[str, BaseTool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Register a tool."""
        if tool.name in self._tools:
            raise ConfigurationError(f"Duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[Tool]:
        """Schemas of all registered tools, in registration order."""
        return [tool.spec() for tool in self._tools.values()]

    def to_provider_format(self, provider: str) -> list[dict[str, Any]]:
        """Convert all tools to a specific provider's format."""
        return convert_tools_for_provider(self.list_tools(), provider)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry(max_content_chars: int | None = None) -> ToolRegistry:
    """The tool set the study assistant ships with."""
    return ToolRegistry(
        [
            GetCoursesTool(max_content_chars),
            GetModulesTool(max_content_chars),
            GetPagesTool(max_content_chars),
            GetPageContentTool(max_content_chars),
            GetAssignmentsTool(max_content_chars),
            GetAssignmentContentTool(max_content_chars),
            GetQuizzesTool(max_content_chars),
            GetQuizContentTool(max_content_chars),
            GetFilesTool(max_content_chars),
            GenerateStudyPackTool(),
        ]
    )
