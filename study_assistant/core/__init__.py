"""Core utilities and configuration."""

from study_assistant.core.logging import get_logger, setup_logging
from study_assistant.core.exceptions import (
    CanvasAPIError,
    CanvasAuthRequiredError,
    ConfigurationError,
    LLMError,
    LLMProviderError,
    NoAssistantMessageError,
    StepLimitExceededError,
    StudyAssistantError,
    ToolError,
    ToolExecutionError,
    ToolInputError,
    UnknownToolError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "CanvasAPIError",
    "CanvasAuthRequiredError",
    "ConfigurationError",
    "LLMError",
    "LLMProviderError",
    "NoAssistantMessageError",
    "StepLimitExceededError",
    "StudyAssistantError",
    "ToolError",
    "ToolExecutionError",
    "ToolInputError",
    "UnknownToolError",
]
