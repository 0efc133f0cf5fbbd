"""Canvas LMS REST client."""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from study_assistant.config import get_settings
from study_assistant.core.exceptions import CanvasAPIError
from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.models.canvas import (
    Assignment,
    CanvasModel,
    Course,
    File,
    Module,
    ModuleItem,
    Page,
    Quiz,
)
from study_assistant.utils.normalize import as_list

logger = get_logger("canvas_client")

ModelT = TypeVar("ModelT", bound=CanvasModel)

Identifier = int | str


def _segment(value: Identifier) -> str:
    return quote(str(value), safe="")


class CanvasClient:
    """Read-only client for one student's Canvas token.

    Built once per request at the HTTP boundary and passed down; never shared
    between requests. Every operation issues a single GET and returns an
    ordered list of snapshots (a one-element list for single-resource reads).
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        per_page: int | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.canvas_base_url).rstrip("/")
        self._per_page = per_page or settings.canvas_per_page
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=settings.canvas_timeout)

    async def __aenter__(self) -> "CanvasClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{endpoint}"
        logger.debug(LogEvents.CANVAS_REQUEST, endpoint=endpoint, params=params)

        try:
            response = await self._client.get(url, headers=self._headers, params=params)
        except httpx.HTTPError as e:
            logger.error(LogEvents.CANVAS_API_ERROR, endpoint=endpoint, error=str(e))
            raise CanvasAPIError(f"Request to {endpoint} failed: {e}") from e

        if not response.is_success:
            logger.warning(
                LogEvents.CANVAS_API_ERROR,
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise CanvasAPIError(
                f"{endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CanvasAPIError(
                f"{endpoint} returned a non-JSON body",
                status_code=response.status_code,
                body=response.text[:500],
            ) from e

    async def _get(
        self,
        endpoint: str,
        model: type[ModelT],
        params: dict[str, Any] | None = None,
    ) -> list[ModelT]:
        payload = await self._request(endpoint, params)
        try:
            return [model.model_validate(item) for item in as_list(payload)]
        except ValidationError as e:
            raise CanvasAPIError(
                f"{endpoint} returned an unexpected {model.__name__} shape",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def _collection_params(self, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {"per_page": self._per_page}
        params.update({k: v for k, v in extra.items() if v is not None})
        return params

    async def get_courses(
        self,
        course_id: Identifier | None = None,
        enrollment_state: str | None = None,
    ) -> list[Course]:
        if course_id is not None:
            return await self._get(f"/courses/{_segment(course_id)}", Course)
        return await self._get(
            "/courses",
            Course,
            self._collection_params(enrollment_state=enrollment_state),
        )

    async def get_modules(
        self,
        course_id: Identifier,
        module_id: Identifier | None = None,
        include_items: bool = False,
    ) -> list[Module]:
        endpoint = f"/courses/{_segment(course_id)}/modules"
        include = {"include[]": "items"} if include_items else {}
        if module_id is not None:
            return await self._get(f"{endpoint}/{_segment(module_id)}", Module, include or None)
        return await self._get(endpoint, Module, self._collection_params(**include))

    async def get_module_items(
        self,
        course_id: Identifier,
        module_id: Identifier,
    ) -> list[ModuleItem]:
        return await self._get(
            f"/courses/{_segment(course_id)}/modules/{_segment(module_id)}/items",
            ModuleItem,
            self._collection_params(),
        )

    async def get_assignments(
        self,
        course_id: Identifier,
        assignment_id: Identifier | None = None,
    ) -> list[Assignment]:
        endpoint = f"/courses/{_segment(course_id)}/assignments"
        if assignment_id is not None:
            return await self._get(f"{endpoint}/{_segment(assignment_id)}", Assignment)
        return await self._get(endpoint, Assignment, self._collection_params())

    async def get_quizzes(
        self,
        course_id: Identifier,
        quiz_id: Identifier | None = None,
    ) -> list[Quiz]:
        endpoint = f"/courses/{_segment(course_id)}/quizzes"
        if quiz_id is not None:
            return await self._get(f"{endpoint}/{_segment(quiz_id)}", Quiz)
        return await self._get(endpoint, Quiz, self._collection_params())

    async def get_pages(
        self,
        course_id: Identifier,
        page_url: str | None = None,
    ) -> list[Page]:
        """List pages, or fetch one by its URL slug (e.g. ``week-1-introduction``)."""
        endpoint = f"/courses/{_segment(course_id)}/pages"
        if page_url is not None:
            return await self._get(f"{endpoint}/{_segment(page_url)}", Page)
        return await self._get(endpoint, Page, self._collection_params())

    async def get_files(
        self,
        course_id: Identifier | None = None,
        file_id: Identifier | None = None,
    ) -> list[File]:
        if file_id is not None:
            # Files are addressable without their course
            return await self._get(f"/files/{_segment(file_id)}", File)
        if course_id is not None:
            return await self._get(
                f"/courses/{_segment(course_id)}/files", File, self._collection_params()
            )
        raise ValueError("Either course_id or file_id must be provided")
