"""Request handlers."""

from study_assistant.handlers.canvas_handler import CanvasHandler
from study_assistant.handlers.chat_handler import ChatHandler
from study_assistant.handlers.study_pack_handler import StudyPackHandler

__all__ = [
    "CanvasHandler",
    "ChatHandler",
    "StudyPackHandler",
]
