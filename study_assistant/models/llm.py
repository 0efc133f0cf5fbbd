"""LLM conversation, request and response models."""

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Role of a turn in the conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class TextBlock(BaseModel):
    """Plain text segment."""

    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel):
    """Tool invocation requested by the assistant."""

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel):
    """Answer to a ToolUseBlock, matched on ``tool_use_id``."""

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str
    is_error: bool = False


ContentBlock = Annotated[
    Union[TextBlock, ToolUseBlock, ToolResultBlock],
    Field(discriminator="type"),
]


class ToolCall(BaseModel):
    """Tool call requested by the model."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Result from a tool execution."""

    tool_call_id: str
    content: str
    is_error: bool = False

    def to_block(self) -> ToolResultBlock:
        return ToolResultBlock(
            tool_use_id=self.tool_call_id,
            content=self.content,
            is_error=self.is_error,
        )


class ChatMessage(BaseModel):
    """A single turn in the conversation (provider-agnostic)."""

    role: MessageRole
    content: list[ContentBlock] = Field(default_factory=list)

    @classmethod
    def user_text(cls, text: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=[TextBlock(text=text)])

    @classmethod
    def from_tool_results(cls, results: list[ToolResult]) -> "ChatMessage":
        """Build the user turn that answers every tool call of one step."""
        return cls(role=MessageRole.USER, content=[r.to_block() for r in results])

    @property
    def text(self) -> str | None:
        """First text segment, if any."""
        for block in self.content:
            if isinstance(block, TextBlock):
                return block.text
        return None

    @property
    def tool_calls(self) -> list[ToolCall]:
        return [
            ToolCall(id=block.id, name=block.name, arguments=block.input)
            for block in self.content
            if isinstance(block, ToolUseBlock)
        ]

    def to_anthropic_format(self) -> dict[str, Any]:
        """Convert to Anthropic message format."""
        return {
            "role": self.role.value,
            "content": [block.model_dump() for block in self.content],
        }

    def to_openai_format(self) -> list[dict[str, Any]]:
        """Convert to OpenAI chat messages.

        OpenAI carries tool results as separate ``tool`` role messages, so one
        turn can expand into several messages.
        """
        texts = [b.text for b in self.content if isinstance(b, TextBlock)]
        text = "\n".join(texts)

        if self.role == MessageRole.ASSISTANT:
            message: dict[str, Any] = {"role": "assistant", "content": text or None}
            tool_uses = [b for b in self.content if isinstance(b, ToolUseBlock)]
            if tool_uses:
                message["tool_calls"] = [
                    {
                        "id": b.id,
                        "type": "function",
                        "function": {"name": b.name, "arguments": json.dumps(b.input)},
                    }
                    for b in tool_uses
                ]
            return [message]

        messages: list[dict[str, Any]] = [
            {"role": "tool", "tool_call_id": b.tool_use_id, "content": b.content}
            for b in self.content
            if isinstance(b, ToolResultBlock)
        ]
        if texts:
            messages.append({"role": "user", "content": text})
        return messages


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_anthropic(cls, usage: Any) -> "TokenUsage":
        """Create from Anthropic usage object."""
        prompt = getattr(usage, "input_tokens", 0) or 0
        completion = getattr(usage, "output_tokens", 0) or 0
        return cls(
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=prompt + completion,
        )

    @classmethod
    def from_openai(cls, usage: Any) -> "TokenUsage":
        """Create from OpenAI usage object."""
        return cls(
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
        )


class LLMResponse(BaseModel):
    """Unified response from any LLM provider."""

    message: ChatMessage | None = None
    finish_reason: str  # "stop", "tool_calls", "length", "error"
    usage: TokenUsage | None = None
    model: str
    provider: str

    @property
    def text(self) -> str | None:
        return self.message.text if self.message else None

    @property
    def tool_calls(self) -> list[ToolCall]:
        return self.message.tool_calls if self.message else []
