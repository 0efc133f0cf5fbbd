"""Handler for course study pack generation."""

from collections.abc import Callable

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from study_assistant.core.exceptions import CanvasAPIError, LLMError
from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.handlers.chat_handler import failure_status
from study_assistant.handlers.common import (
    bearer_token,
    bind_request_context,
    canvas_error_response,
    error_response,
)
from study_assistant.models.chat import StudyPackRequest
from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.study_pack_service import StudyPackService

logger = get_logger("study_pack_handler")

MISSING_FIELDS = "Both courseId and a Canvas token are required"


class StudyPackHandler:
    def __init__(
        self,
        study_pack_service: StudyPackService,
        canvas_factory: Callable[[str], CanvasClient] = CanvasClient,
    ) -> None:
        self._study_packs = study_pack_service
        self._canvas_factory = canvas_factory

    async def handle(self, request: Request) -> Response:
        bind_request_context()

        try:
            body = StudyPackRequest.model_validate_json(await request.body())
        except ValidationError:
            logger.warning(LogEvents.STUDY_PACK_REJECTED, reason="invalid_study_pack_body")
            return error_response(400, MISSING_FIELDS)

        token = bearer_token(request) or body.token
        if not token:
            logger.warning(LogEvents.STUDY_PACK_REJECTED, reason="missing_token")
            return error_response(400, MISSING_FIELDS)

        async with self._canvas_factory(token) as canvas:
            try:
                result = await self._study_packs.generate(body.course_id, canvas)
            except CanvasAPIError as e:
                logger.error(LogEvents.STUDY_PACK_FAILED, course_id=body.course_id, error=str(e))
                return canvas_error_response(e, "Failed to load course content.")
            except LLMError as e:
                status_code, error = failure_status(e)
                logger.error(LogEvents.STUDY_PACK_FAILED, status_code=status_code, error=str(e))
                return error_response(status_code, error)

        return JSONResponse(content=result.model_dump())
