"""Business logic services."""

from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.progress import ProgressReporter
from study_assistant.services.tool_executor import ToolExecutor
from study_assistant.services.conversation_service import ConversationService
from study_assistant.services.study_pack_service import StudyPackService

__all__ = [
    "CanvasClient",
    "ProgressReporter",
    "ToolExecutor",
    "ConversationService",
    "StudyPackService",
]
