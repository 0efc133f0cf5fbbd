"""Course-wide study pack generation."""

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.models.canvas import Assignment, Module, Page, Quiz
from study_assistant.models.chat import StudyPackResponse
from study_assistant.prompts import STUDY_PACK_PROMPT
from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.conversation_service import ConversationService

logger = get_logger("study_pack_service")

EMPTY_SUMMARY = "The assistant did not return a summary."

# Upper bounds on what one section contributes to the prompt
MAX_SECTION_ITEMS = 100
MAX_LINE_CHARS = 200


def _due(label: str, due_at: str | None) -> str:
    return f"{label} (due {due_at})" if due_at else label


def module_line(module: Module) -> str:
    return module.name or "Untitled Module"


def assignment_line(assignment: Assignment) -> str:
    return _due(assignment.name or "Unnamed Assignment", assignment.due_at)


def page_line(page: Page) -> str:
    return page.title or page.url or "Untitled Page"


def quiz_line(quiz: Quiz) -> str:
    return _due(quiz.title or "Untitled Quiz", quiz.due_at)


def format_section(records: Sequence[Any], pick: Callable[[Any], str]) -> str:
    """Render one resource kind as a bullet list, ``None`` when empty.

    Only names, titles and due dates are included; descriptions and bodies
    stay out of the prompt. Lines and item counts are capped.
    """
    if not records:
        return "None"

    lines = []
    for record in records[:MAX_SECTION_ITEMS]:
        label = " ".join(pick(record).split())
        if len(label) > MAX_LINE_CHARS:
            label = label[: MAX_LINE_CHARS - 3] + "..."
        lines.append(f"- {label}")

    hidden = len(records) - MAX_SECTION_ITEMS
    if hidden > 0:
        lines.append(f"- ... and {hidden} more")
    return "\n".join(lines)


class StudyPackService:
    """Builds a study guide from a snapshot of one course."""

    def __init__(self, conversation_service: ConversationService) -> None:
        self._conversation = conversation_service

    async def generate(self, course_id: str, canvas: CanvasClient) -> StudyPackResponse:
        """
        Fetch the course snapshot and ask the model for a study guide.

        Args:
            course_id: Canvas course ID
            canvas: Per-request Canvas client

        Returns:
            Study pack with the model's summary

        Raises:
            CanvasAPIError: A snapshot request failed
            LLMError: The conversation did not complete
        """
        logger.info(LogEvents.STUDY_PACK_STARTED, course_id=course_id)

        modules, assignments, pages, quizzes = await asyncio.gather(
            canvas.get_modules(course_id),
            canvas.get_assignments(course_id),
            canvas.get_pages(course_id),
            canvas.get_quizzes(course_id),
        )

        prompt = STUDY_PACK_PROMPT.format(
            course_id=course_id,
            modules=format_section(modules, module_line),
            assignments=format_section(assignments, assignment_line),
            pages=format_section(pages, page_line),
            quizzes=format_section(quizzes, quiz_line),
        )

        result = await self._conversation.run(prompt, canvas=canvas)
        summary = result.text.strip() or EMPTY_SUMMARY

        logger.info(
            LogEvents.STUDY_PACK_COMPLETED,
            course_id=course_id,
            modules=len(modules),
            assignments=len(assignments),
            pages=len(pages),
            quizzes=len(quizzes),
            summary_length=len(summary),
        )
        return StudyPackResponse(success=True, summary=summary)
