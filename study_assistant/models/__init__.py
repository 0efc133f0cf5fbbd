"""Data models for the application."""

from study_assistant.models.canvas import (
    Assignment,
    Course,
    File,
    Module,
    ModuleItem,
    Page,
    Quiz,
)
from study_assistant.models.chat import (
    ChatRequest,
    ChatResponse,
    ConversationResult,
    ErrorEvent,
    FinalEvent,
    StudyPackRequest,
    StudyPackResponse,
    ToolProgressEvent,
    ToolTraceEntry,
)
from study_assistant.models.llm import (
    ChatMessage,
    LLMResponse,
    MessageRole,
    TextBlock,
    TokenUsage,
    ToolCall,
    ToolResult,
    ToolResultBlock,
    ToolUseBlock,
)
from study_assistant.models.tools import Tool

__all__ = [
    # Canvas snapshots
    "Assignment",
    "Course",
    "File",
    "Module",
    "ModuleItem",
    "Page",
    "Quiz",
    # Chat API
    "ChatRequest",
    "ChatResponse",
    "ConversationResult",
    "ErrorEvent",
    "FinalEvent",
    "StudyPackRequest",
    "StudyPackResponse",
    "ToolProgressEvent",
    "ToolTraceEntry",
    # LLM models
    "ChatMessage",
    "LLMResponse",
    "MessageRole",
    "TextBlock",
    "TokenUsage",
    "ToolCall",
    "ToolResult",
    "ToolResultBlock",
    "ToolUseBlock",
    # Tool models
    "Tool",
]
