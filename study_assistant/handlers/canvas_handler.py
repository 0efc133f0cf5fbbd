"""Read-only proxy routes over the Canvas REST API."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from study_assistant.core.exceptions import CanvasAPIError
from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.handlers.common import (
    bearer_token,
    bind_request_context,
    canvas_error_response,
    error_response,
)
from study_assistant.models.canvas import CanvasModel, ModuleItemAnnotated
from study_assistant.services.canvas_client import CanvasClient

logger = get_logger("canvas_handler")

Fetch = Callable[[CanvasClient, str | None, str | None], Awaitable[list[Any]]]


@dataclass(frozen=True)
class CanvasResource:
    """How one ``/api/canvas/<plural>`` route maps onto the client."""

    singular: str
    plural: str
    id_param: str
    fetch: Fetch
    # Module item type used to filter ``moduleId`` listings
    item_type: str | None = None
    course_required: bool = True


RESOURCES: dict[str, CanvasResource] = {
    "courses": CanvasResource(
        singular="course",
        plural="courses",
        id_param="courseId",
        fetch=lambda canvas, course_id, rid: canvas.get_courses(rid),
        course_required=False,
    ),
    "modules": CanvasResource(
        singular="module",
        plural="modules",
        id_param="moduleId",
        fetch=lambda canvas, course_id, rid: canvas.get_modules(course_id, rid),
    ),
    "assignments": CanvasResource(
        singular="assignment",
        plural="assignments",
        id_param="assignmentId",
        fetch=lambda canvas, course_id, rid: canvas.get_assignments(course_id, rid),
        item_type="Assignment",
    ),
    "pages": CanvasResource(
        singular="page",
        plural="pages",
        id_param="pageId",
        fetch=lambda canvas, course_id, rid: canvas.get_pages(course_id, rid),
        item_type="Page",
    ),
    "quizzes": CanvasResource(
        singular="quiz",
        plural="quizzes",
        id_param="quizId",
        fetch=lambda canvas, course_id, rid: canvas.get_quizzes(course_id, rid),
        item_type="Quiz",
    ),
    "files": CanvasResource(
        singular="file",
        plural="files",
        id_param="fileId",
        fetch=lambda canvas, course_id, rid: canvas.get_files(course_id, rid),
        item_type="File",
    ),
}


class CanvasHandler:
    """Validates proxy parameters and delegates one-to-one to the client."""

    def __init__(self, canvas_factory: Callable[[str], CanvasClient] = CanvasClient) -> None:
        self._canvas_factory = canvas_factory

    async def handle(self, resource_name: str, request: Request) -> Response:
        """
        Serve ``GET /api/canvas/<resource_name>``.

        Query parameters: ``token`` (or a bearer header), ``courseId``, the
        resource's own ID parameter, ``moduleId`` and ``moduleItemId``.
        """
        resource = RESOURCES.get(resource_name)
        if resource is None:
            return error_response(404, f"Unknown Canvas resource: {resource_name}")

        bind_request_context(resource=resource.plural)
        params = request.query_params
        token = bearer_token(request) or params.get("token")
        course_id = params.get("courseId")

        if not token:
            return error_response(400, "Missing required parameter: Canvas API token")
        if resource.course_required and not course_id:
            return error_response(
                400, "Missing required parameters: Canvas API token and course ID"
            )

        async with self._canvas_factory(token) as canvas:
            try:
                return await self._serve(resource, canvas, course_id, params)
            except CanvasAPIError as e:
                logger.warning(
                    LogEvents.CANVAS_API_ERROR,
                    resource=resource.plural,
                    status_code=e.status_code,
                    error=str(e),
                )
                return canvas_error_response(e, f"Failed to fetch {resource.plural}.")

    async def _serve(
        self,
        resource: CanvasResource,
        canvas: CanvasClient,
        course_id: str | None,
        params: Any,
    ) -> Response:
        resource_id = params.get(resource.id_param)
        module_id = params.get("moduleId")

        if resource_id:
            records = await resource.fetch(canvas, course_id, resource_id)
            if not records:
                return error_response(
                    404, f"{resource.singular.capitalize()} with ID {resource_id} not found."
                )
            record = records[0]
            module_item_id = params.get("moduleItemId")
            if module_item_id and isinstance(record, ModuleItemAnnotated):
                record = record.with_module_item(module_item_id)
            return JSONResponse(content={resource.singular: record.to_dict()})

        if module_id and resource.item_type:
            items = await canvas.get_module_items(course_id, module_id)
            matched = [item for item in items if item.type == resource.item_type]
            if not matched:
                return JSONResponse(
                    content={"message": f"No {resource.plural} found in module {module_id}."}
                )
            return JSONResponse(content={resource.plural: _dump(matched)})

        records = await resource.fetch(canvas, course_id, None)
        if not records:
            return JSONResponse(content={"message": f"No {resource.plural} found."})
        return JSONResponse(content={resource.plural: _dump(records)})


def _dump(records: list[CanvasModel]) -> list[dict[str, Any]]:
    return [record.to_dict() for record in records]
