"""Tool/function calling models."""

from typing import Any

from pydantic import BaseModel


class Tool(BaseModel):
    """Unified tool definition (provider-agnostic)."""

    name: str
    description: str
    parameters: dict[str, Any]  # JSON Schema format

    def to_anthropic_format(self) -> dict[str, Any]:
        """Convert to Anthropic tool format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters,
        }

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
