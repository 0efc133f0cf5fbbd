"""Structured logging configuration using structlog."""

import logging
import sys
from pathlib import Path

import structlog
from structlog.types import Processor

from study_assistant.config import get_settings, LogFormat, Settings

# Third-party loggers held at WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "openai")

SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _wants_console(settings: Settings) -> bool:
    return settings.log_format == LogFormat.CONSOLE or settings.is_development


def _handlers(settings: Settings, formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file_path:
        log_path = Path(settings.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging() -> None:
    """Route structlog and stdlib logging through one formatter.

    Development (or ``LOG_FORMAT=console``) renders colored console lines;
    everything else renders JSON, one object per line.
    """
    settings = get_settings()
    console = _wants_console(settings)

    processors = list(SHARED_PROCESSORS)
    if not console:
        processors.append(structlog.processors.format_exc_info)
    processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if console
        else structlog.processors.JSONRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers = _handlers(settings, formatter)
    root_logger.setLevel(settings.log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with optional component name."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(component=name)
    return logger


class LogEvents:
    """Standardized log event names for consistency."""

    # Lifecycle
    APP_STARTING = "app_starting"
    APP_STARTED = "app_started"
    APP_SHUTDOWN = "app_shutdown"

    # Chat requests
    CHAT_RECEIVED = "chat_received"
    CHAT_REJECTED = "chat_rejected"
    CHAT_COMPLETED = "chat_completed"
    CHAT_FAILED = "chat_failed"
    STREAM_OPENED = "stream_opened"
    STREAM_CLIENT_GONE = "stream_client_disconnected"

    # Conversation loop
    LLM_REQUEST_STARTED = "llm_request_started"
    LLM_REQUEST_COMPLETED = "llm_request_completed"
    LLM_REQUEST_FAILED = "llm_request_failed"
    LLM_TOOL_CALL = "llm_tool_call"
    LLM_STEP_LIMIT = "llm_step_limit_reached"

    # Tools
    TOOL_INVOKED = "tool_invoked"
    TOOL_RESULT = "tool_result"
    TOOL_ERROR = "tool_error"
    PROGRESS_SINK_FAILED = "progress_sink_failed"

    # Canvas
    CANVAS_REQUEST = "canvas_request"
    CANVAS_API_ERROR = "canvas_api_error"

    # Study pack
    STUDY_PACK_STARTED = "study_pack_started"
    STUDY_PACK_COMPLETED = "study_pack_completed"
    STUDY_PACK_REJECTED = "study_pack_rejected"
    STUDY_PACK_FAILED = "study_pack_failed"
