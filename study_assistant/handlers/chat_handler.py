"""Handler for the chat endpoint (JSON and Server-Sent Events)."""

import asyncio
from collections.abc import AsyncIterator, Callable

from fastapi import Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError

from study_assistant.core.exceptions import (
    LLMError,
    LLMProviderError,
    NoAssistantMessageError,
    StepLimitExceededError,
)
from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.handlers.common import bearer_token, bind_request_context, error_response
from study_assistant.models.chat import (
    ChatRequest,
    ChatResponse,
    ConversationResult,
    ErrorEvent,
    FinalEvent,
    ToolProgressEvent,
)
from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.conversation_service import ConversationService
from study_assistant.services.progress import ProgressReporter
from study_assistant.utils.sse import SSE_HEADERS, format_sse

logger = get_logger("chat_handler")

CanvasFactory = Callable[[str], CanvasClient]

INVALID_BODY = "Request body must be JSON with a non-empty 'message' string"


def failure_status(error: LLMError) -> tuple[int, str]:
    """HTTP status and client-facing message for a failed conversation."""
    if isinstance(error, LLMProviderError):
        return 502, f"Model provider error: {error.message}"
    if isinstance(error, StepLimitExceededError):
        return 500, error.message
    if isinstance(error, NoAssistantMessageError):
        return 500, "The model returned no assistant message"
    return 500, error.message


class ChatHandler:
    """Runs one conversation per request and renders it as JSON or SSE."""

    def __init__(
        self,
        conversation_service: ConversationService,
        canvas_factory: CanvasFactory = CanvasClient,
    ) -> None:
        self._conversation = conversation_service
        self._canvas_factory = canvas_factory

    def _open_canvas(self, token: str | None) -> CanvasClient | None:
        return self._canvas_factory(token) if token else None

    async def handle(self, request: Request) -> Response:
        """
        Process a chat request.

        The Canvas token comes from ``Authorization: Bearer`` or, failing
        that, the body. Streaming is chosen by ``stream: true`` in the body
        or an ``Accept: text/event-stream`` header.
        """
        bind_request_context()

        body = await request.body()
        try:
            chat = ChatRequest.model_validate_json(body)
        except ValidationError as e:
            logger.warning(LogEvents.CHAT_REJECTED, error_count=e.error_count())
            return error_response(400, INVALID_BODY)

        token = bearer_token(request) or chat.token
        stream = chat.stream or "text/event-stream" in request.headers.get("accept", "")

        logger.info(
            LogEvents.CHAT_RECEIVED,
            stream=stream,
            has_credential=bool(token),
            message_length=len(chat.message),
        )

        if stream:
            return StreamingResponse(
                self._events(chat.message, token),
                media_type="text/event-stream",
                headers=SSE_HEADERS,
            )
        return await self._respond(chat.message, token)

    async def _respond(self, message: str, token: str | None) -> Response:
        canvas = self._open_canvas(token)
        try:
            result = await self._conversation.run(message, canvas=canvas)
        except LLMError as e:
            status_code, error = failure_status(e)
            logger.error(LogEvents.CHAT_FAILED, status_code=status_code, error=str(e))
            return error_response(status_code, error)
        finally:
            if canvas is not None:
                await canvas.close()

        logger.info(LogEvents.CHAT_COMPLETED, tool_calls=len(result.tool_trace))
        return JSONResponse(
            content=ChatResponse.from_result(result).model_dump(mode="json", by_alias=True)
        )

    async def _run_owned(
        self,
        message: str,
        token: str | None,
        reporter: ProgressReporter,
    ) -> ConversationResult:
        # The task owns the client and closes it, cancelled or not
        canvas = self._open_canvas(token)
        try:
            return await self._conversation.run(message, canvas=canvas, reporter=reporter)
        finally:
            if canvas is not None:
                await canvas.close()

    async def _events(self, message: str, token: str | None) -> AsyncIterator[str]:
        """Yield tool progress frames, then exactly one final or error frame."""
        queue: asyncio.Queue[ToolProgressEvent | None] = asyncio.Queue()
        reporter = ProgressReporter.to_queue(queue)

        task = asyncio.create_task(self._run_owned(message, token, reporter))
        task.add_done_callback(lambda _: queue.put_nowait(None))
        logger.info(LogEvents.STREAM_OPENED)

        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield format_sse(event.to_payload())

            try:
                result = task.result()
            except LLMError as e:
                status_code, error = failure_status(e)
                logger.error(LogEvents.CHAT_FAILED, status_code=status_code, error=str(e))
                yield format_sse(ErrorEvent(error=error).to_payload())
            except Exception as e:
                logger.error(LogEvents.CHAT_FAILED, error=str(e), exc_info=True)
                yield format_sse(ErrorEvent(error="Internal server error").to_payload())
            else:
                logger.info(LogEvents.CHAT_COMPLETED, tool_calls=len(result.tool_trace))
                yield format_sse(
                    FinalEvent(text=result.text, tool_trace=result.tool_trace).to_payload()
                )
        finally:
            if not task.done():
                logger.info(LogEvents.STREAM_CLIENT_GONE)
                task.cancel()
