"""Canvas read tools exposed to the assistant."""

from typing import TYPE_CHECKING, Any

from study_assistant.config import get_settings
from study_assistant.core.exceptions import ToolExecutionError, ToolInputError
from study_assistant.models.canvas import CanvasModel
from study_assistant.tools.base import BaseTool
from study_assistant.utils.normalize import truncate_text

if TYPE_CHECKING:
    from study_assistant.services.canvas_client import CanvasClient

COURSE_ID = {"type": "integer", "description": "The Canvas course ID (obtained from get_courses)"}

COURSE_ONLY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"course_id": COURSE_ID},
    "required": ["course_id"],
}

COURSE_FIELDS = ("id", "name", "course_code", "description", "start_at", "end_at")
MODULE_FIELDS = ("id", "name", "position", "items_count")
MODULE_ITEM_FIELDS = ("id", "title", "type", "content_id", "page_url")
PAGE_FIELDS = ("url", "title", "updated_at")
ASSIGNMENT_FIELDS = ("id", "name", "due_at", "unlock_at", "lock_at", "points_possible")
QUIZ_FIELDS = ("id", "title", "quiz_type", "due_at", "question_count")
FILE_FIELDS = ("id", "display_name", "content_type", "size", "url")


def project(record: CanvasModel, fields: tuple[str, ...]) -> dict[str, Any]:
    """Keep only the fields worth sending to the model."""
    return record.model_dump(include=set(fields))


class CanvasTool(BaseTool):
    """Tool backed by a Canvas read."""

    requires_credential = True

    def __init__(self, max_content_chars: int | None = None) -> None:
        self._max_content_chars = max_content_chars or get_settings().tool_content_max_chars

    def _body(self, text: str | None) -> str | None:
        return truncate_text(text, self._max_content_chars)

    def _only(self, records: list[Any], what: str) -> Any:
        if not records:
            raise ToolExecutionError(f"{what} not found", tool_name=self.name, status_code=404)
        return records[0]


class GetCoursesTool(CanvasTool):
    name = "get_courses"
    description = (
        "Retrieves all active courses for the student. Use this first to see which "
        "courses are available. Returns course IDs, names, codes and descriptions."
    )
    parameters = {"type": "object", "properties": {}, "required": []}

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        courses = await canvas.get_courses(enrollment_state="active")
        return {
            "count": len(courses),
            "courses": [project(c, COURSE_FIELDS) for c in courses],
        }


class GetModulesTool(CanvasTool):
    name = "get_modules"
    description = (
        "Retrieves all modules for a course, including their items (pages, assignments, "
        "files, quizzes). Use this to understand the course structure and find content."
    )
    parameters = COURSE_ONLY_SCHEMA

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        course_id = arguments["course_id"]
        modules = await canvas.get_modules(course_id, include_items=True)
        result = []
        for module in modules:
            entry = project(module, MODULE_FIELDS)
            entry["items"] = [project(item, MODULE_ITEM_FIELDS) for item in module.items or []]
            result.append(entry)
        return {"course_id": course_id, "modules": result}


class GetPagesTool(CanvasTool):
    name = "get_pages"
    description = (
        "Lists all pages in a course. Returns page titles and URL slugs; pass a slug "
        "to get_page_content to read the page."
    )
    parameters = COURSE_ONLY_SCHEMA

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        pages = await canvas.get_pages(arguments["course_id"])
        return {
            "course_id": arguments["course_id"],
            "pages": [project(p, PAGE_FIELDS) for p in pages],
        }


class GetPageContentTool(CanvasTool):
    name = "get_page_content"
    description = (
        "Fetches the full HTML content of one page. Use the page_url slug from get_pages "
        "or module items. The slug is a string such as 'syllabus', not a number."
    )
    parameters = {
        "type": "object",
        "properties": {
            "course_id": COURSE_ID,
            "page_url": {
                "type": "string",
                "description": (
                    "The page URL slug (e.g. 'syllabus', 'week-1-introduction'), "
                    "taken from get_pages or module items"
                ),
            },
        },
        "required": ["course_id", "page_url"],
    }

    def validate(self, arguments: dict[str, Any]) -> dict[str, Any]:
        cleaned = super().validate(arguments)
        if not cleaned["page_url"].strip():
            raise ToolInputError("page_url must not be empty", tool_name=self.name)
        return cleaned

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        page_url = arguments["page_url"].strip()
        page = self._only(
            await canvas.get_pages(arguments["course_id"], page_url),
            f"Page '{page_url}'",
        )
        result = project(page, PAGE_FIELDS)
        result["body"] = self._body(page.body)
        return result


class GetAssignmentsTool(CanvasTool):
    name = "get_assignments"
    description = (
        "Lists all assignments in a course with their due dates and IDs. Use it before "
        "fetching a specific assignment."
    )
    parameters = COURSE_ONLY_SCHEMA

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        assignments = await canvas.get_assignments(arguments["course_id"])
        return {
            "course_id": arguments["course_id"],
            "assignments": [project(a, ASSIGNMENT_FIELDS) for a in assignments],
        }


class GetAssignmentContentTool(CanvasTool):
    name = "get_assignment_content"
    description = (
        "Fetches the full details of one assignment, including its description, due "
        "dates and requirements. Use assignment_id from get_assignments or module items."
    )
    parameters = {
        "type": "object",
        "properties": {
            "course_id": COURSE_ID,
            "assignment_id": {
                "type": "integer",
                "description": "The assignment ID (from get_assignments or module items)",
            },
        },
        "required": ["course_id", "assignment_id"],
    }

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        assignment_id = arguments["assignment_id"]
        assignment = self._only(
            await canvas.get_assignments(arguments["course_id"], assignment_id),
            f"Assignment {assignment_id}",
        )
        result = project(assignment, ASSIGNMENT_FIELDS)
        result["description"] = self._body(assignment.description)
        return result


class GetQuizzesTool(CanvasTool):
    name = "get_quizzes"
    description = (
        "Lists all quizzes in a course with their types and IDs. Use it before fetching "
        "a specific quiz."
    )
    parameters = COURSE_ONLY_SCHEMA

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        quizzes = await canvas.get_quizzes(arguments["course_id"])
        return {
            "course_id": arguments["course_id"],
            "quizzes": [project(q, QUIZ_FIELDS) for q in quizzes],
        }


class GetQuizContentTool(CanvasTool):
    name = "get_quiz_content"
    description = (
        "Fetches the full details of one quiz, including its description and quiz type. "
        "Use quiz_id from get_quizzes or module items."
    )
    parameters = {
        "type": "object",
        "properties": {
            "course_id": COURSE_ID,
            "quiz_id": {
                "type": "integer",
                "description": "The quiz ID (from get_quizzes or module items)",
            },
        },
        "required": ["course_id", "quiz_id"],
    }

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        quiz_id = arguments["quiz_id"]
        quiz = self._only(
            await canvas.get_quizzes(arguments["course_id"], quiz_id),
            f"Quiz {quiz_id}",
        )
        result = project(quiz, QUIZ_FIELDS)
        result["description"] = self._body(quiz.description)
        return result


class GetFilesTool(CanvasTool):
    name = "get_files"
    description = (
        "Lists all files in a course (PDFs, documents, slides). Returns display names, "
        "content types, sizes and download URLs."
    )
    parameters = COURSE_ONLY_SCHEMA

    async def run(self, arguments: dict[str, Any], canvas: "CanvasClient | None") -> Any:
        files = await canvas.get_files(course_id=arguments["course_id"])
        return {
            "course_id": arguments["course_id"],
            "files": [project(f, FILE_FIELDS) for f in files],
        }
