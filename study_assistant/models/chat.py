"""Chat API request, response and streaming event models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from study_assistant.models.llm import ChatMessage


class ChatRequest(BaseModel):
    """Body of POST /api/chat."""

    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1)
    token: str | None = None
    stream: bool = False


class ToolTraceEntry(BaseModel):
    """One executed tool call, kept for the caller."""

    model_config = ConfigDict(populate_by_name=True)

    step: int
    name: str
    input: dict[str, Any]
    output: Any = None
    is_error: bool = Field(default=False, alias="isError")


class ConversationResult(BaseModel):
    """Outcome of a completed conversation loop."""

    text: str
    message: ChatMessage
    tool_trace: list[ToolTraceEntry] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Non-streaming reply of POST /api/chat."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    message: ChatMessage
    tool_trace: list[ToolTraceEntry] = Field(default_factory=list, alias="toolTrace")

    @classmethod
    def from_result(cls, result: ConversationResult) -> "ChatResponse":
        return cls(text=result.text, message=result.message, tool_trace=result.tool_trace)


class ToolProgressEvent(BaseModel):
    """Streamed while a tool runs."""

    type: Literal["tool"] = "tool"
    step: int
    name: str
    status: Literal["started", "completed"]
    input: dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    is_error: bool = False

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type,
            "step": self.step,
            "name": self.name,
            "status": self.status,
            "input": self.input,
        }
        if self.status == "completed":
            payload["output"] = self.output
            payload["isError"] = self.is_error
        return payload


class FinalEvent(BaseModel):
    """Terminal event carrying the answer."""

    type: Literal["final"] = "final"
    text: str
    tool_trace: list[ToolTraceEntry] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "text": self.text,
            "toolTrace": [entry.model_dump(by_alias=True) for entry in self.tool_trace],
        }


class ErrorEvent(BaseModel):
    """Terminal event for a failed request."""

    type: Literal["error"] = "error"
    error: str

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "error": self.error}


class StudyPackRequest(BaseModel):
    """Body of POST /api/study-pack."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    course_id: str = Field(..., min_length=1, alias="courseId")
    token: str | None = None

    @field_validator("course_id", mode="before")
    @classmethod
    def coerce_course_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class StudyPackResponse(BaseModel):
    success: bool = True
    summary: str
