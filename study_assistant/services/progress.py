"""Best-effort progress reporting for tool execution."""

import asyncio
from collections.abc import Callable
from typing import Any

from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.models.chat import ToolProgressEvent
from study_assistant.models.llm import ToolCall

logger = get_logger("progress")

ProgressCallback = Callable[[ToolProgressEvent], None]


class ProgressReporter:
    """Pushes tool start/completion events to an optional sink.

    The sink is called synchronously; anything it raises is logged and
    dropped so reporting can never fail the conversation loop.
    """

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback

    @classmethod
    def to_queue(cls, queue: "asyncio.Queue[Any]") -> "ProgressReporter":
        """Reporter feeding an unbounded queue without ever awaiting."""
        return cls(queue.put_nowait)

    def started(self, step: int, call: ToolCall) -> None:
        self._emit(
            ToolProgressEvent(step=step, name=call.name, status="started", input=call.arguments)
        )

    def completed(self, step: int, call: ToolCall, output: Any, is_error: bool = False) -> None:
        self._emit(
            ToolProgressEvent(
                step=step,
                name=call.name,
                status="completed",
                input=call.arguments,
                output=output,
                is_error=is_error,
            )
        )

    def _emit(self, event: ToolProgressEvent) -> None:
        if self._callback is None:
            return
        try:
            self._callback(event)
        except Exception as e:
            logger.warning(
                LogEvents.PROGRESS_SINK_FAILED,
                tool_name=event.name,
                status=event.status,
                error=str(e),
            )
