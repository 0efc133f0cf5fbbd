"""Base class for tools the assistant can call."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from study_assistant.core.exceptions import ToolInputError
from study_assistant.models.tools import Tool
from study_assistant.utils.tool_converter import validate_tool_arguments

if TYPE_CHECKING:
    from study_assistant.services.canvas_client import CanvasClient


class BaseTool(ABC):
    """A tool's schema and behavior, kept on one object.

    Subclasses set ``name``, ``description`` and ``parameters`` (JSON Schema)
    and implement ``run``. Tools with ``requires_credential`` are never run
    without a Canvas client.
    """

    name: str = "base"
    description: str = ""
    parameters: dict[str, Any] = {"type": "object", "properties": {}, "required": []}
    requires_credential: bool = True

    def spec(self) -> Tool:
        return Tool(name=self.name, description=self.description, parameters=self.parameters)

    def validate(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Check arguments against the schema and return the cleaned copy."""
        cleaned, errors = validate_tool_arguments(self.parameters, arguments)
        if errors:
            raise ToolInputError(
                "; ".join(errors),
                tool_name=self.name,
                details={"errors": errors},
            )
        return cleaned

    @abstractmethod
    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        """
        Execute with already validated arguments.

        Args:
            arguments: Output of ``validate``
            canvas: Per-request Canvas client, guaranteed set for credentialed tools

        Returns:
            A JSON-serializable result for the model
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"
