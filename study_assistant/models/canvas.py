"""Canvas LMS resource snapshots.

These mirror the upstream Canvas REST records. Unknown upstream fields are
kept (``extra="allow"``) so a snapshot serializes back to what Canvas sent.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CanvasModel(BaseModel):
    """Base for read-only Canvas records."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with upstream field names, leaving out unset annotations."""
        data = self.model_dump(by_alias=True)
        if data.get("moduleItemId") is None:
            data.pop("moduleItemId", None)
        return data


class ModuleItemAnnotated(CanvasModel):
    """Record that can carry the module item it was resolved through."""

    module_item_id: str | None = Field(default=None, alias="moduleItemId")

    def with_module_item(self, module_item_id: str | None) -> "ModuleItemAnnotated":
        if not module_item_id:
            return self
        return self.model_copy(update={"module_item_id": module_item_id})


class Course(CanvasModel):
    id: int
    name: str | None = None
    course_code: str | None = None
    description: str | None = None
    start_at: str | None = None
    end_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class ModuleItem(CanvasModel):
    id: int
    module_id: int | None = None
    position: int | None = None
    title: str | None = None
    # File, Page, Discussion, Assignment, Quiz, ExternalUrl, ExternalTool, SubHeader
    type: str | None = None
    content_id: int | None = None
    html_url: str | None = None
    external_url: str | None = None
    page_url: str | None = None


class Module(CanvasModel):
    id: int
    name: str | None = None
    position: int | None = None
    items_count: int | None = None
    items_url: str | None = None
    items: list[ModuleItem] | None = None


class Assignment(ModuleItemAnnotated):
    id: int
    name: str | None = None
    description: str | None = None
    due_at: str | None = None
    unlock_at: str | None = None
    lock_at: str | None = None
    points_possible: float | None = None
    course_id: int | None = None


class Quiz(ModuleItemAnnotated):
    id: int
    title: str | None = None
    description: str | None = None
    # practice_quiz, assignment, graded_survey, survey
    quiz_type: str | None = None
    due_at: str | None = None
    question_count: int | None = None
    course_id: int | None = None


class Page(ModuleItemAnnotated):
    page_id: int | None = None
    url: str | None = None
    title: str | None = None
    body: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class File(ModuleItemAnnotated):
    id: int
    display_name: str | None = None
    filename: str | None = None
    url: str | None = None
    content_type: str | None = Field(default=None, alias="content-type")
    size: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    folder_id: int | None = None
