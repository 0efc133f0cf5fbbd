"""Local tools that need no Canvas access."""

from typing import Any

from study_assistant.core.exceptions import ToolInputError
from study_assistant.tools.base import BaseTool

MATERIAL_TYPES = ["page", "assignment", "quiz", "combined"]


class GenerateStudyPackTool(BaseTool):
    """Signals that gathered material is ready to be turned into study aids.

    No network I/O: the acknowledgement is built locally and the model writes
    the actual guide in its next turn.
    """

    name = "generate_study_pack"
    description = (
        "Prepares study materials from content you already retrieved. Call it after "
        "gathering pages, assignments or quizzes, then write the study guide, summary, "
        "flashcards or practice questions for the student."
    )
    parameters = {
        "type": "object",
        "properties": {
            "content": {
                "type": "string",
                "description": "The material to study (may combine several sources)",
            },
            "material_type": {
                "type": "string",
                "enum": MATERIAL_TYPES,
                "description": (
                    "'page', 'assignment' or 'quiz' for a single kind of source, "
                    "'combined' for several"
                ),
            },
        },
        "required": ["content", "material_type"],
    }
    requires_credential = False

    def validate(self, arguments: dict[str, Any]) -> dict[str, Any]:
        cleaned = super().validate(arguments)
        if not cleaned["content"].strip():
            raise ToolInputError("content must not be empty", tool_name=self.name)
        return cleaned

    async def run(self, arguments: dict[str, Any], canvas: Any = None) -> Any:
        content = arguments["content"]
        material_type = arguments["material_type"]
        word_count = len(content.split())
        return {
            "status": "ready",
            "material_type": material_type,
            "content_length": len(content),
            "word_count": word_count,
            "summary": (
                f"Study pack ready from {word_count} words of {material_type} material. "
                "Write the study guide for the student now."
            ),
        }
