"""Pytest configuration and fixtures."""

import json
from typing import Any

import httpx
import pytest

from study_assistant.models.llm import (
    ChatMessage,
    LLMResponse,
    MessageRole,
    TextBlock,
    ToolCall,
    ToolUseBlock,
)
from study_assistant.models.tools import Tool
from study_assistant.providers.base import BaseLLMProvider
from study_assistant.services.canvas_client import CanvasClient

CANVAS_BASE_URL = "https://canvas.test/api/v1"


def text_response(text: str, finish_reason: str = "stop") -> LLMResponse:
    """Scripted final answer."""
    return LLMResponse(
        message=ChatMessage(role=MessageRole.ASSISTANT, content=[TextBlock(text=text)]),
        finish_reason=finish_reason,
        model="fake-model",
        provider="fake",
    )


def tool_response(*calls: tuple[str, str, dict[str, Any]]) -> LLMResponse:
    """Scripted tool-use turn from ``(id, name, arguments)`` triples."""
    return LLMResponse(
        message=ChatMessage(
            role=MessageRole.ASSISTANT,
            content=[ToolUseBlock(id=cid, name=name, input=args) for cid, name, args in calls],
        ),
        finish_reason="tool_calls",
        model="fake-model",
        provider="fake",
    )


class FakeProvider(BaseLLMProvider):
    """Replays canned responses (or raises canned exceptions) in order."""

    provider_name = "fake"

    def __init__(self, responses: list[LLMResponse | Exception]) -> None:
        super().__init__(api_key="test", model="fake-model")
        self._responses = list(responses)
        self.requests: list[list[ChatMessage]] = []
        self.tools_seen: list[list[Tool] | None] = []
        self.system_prompts: list[str | None] = []

    async def chat(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
        tools: list[Tool] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        self.requests.append(list(messages))
        self.tools_seen.append(tools)
        self.system_prompts.append(system_prompt)
        if not self._responses:
            raise AssertionError("FakeProvider ran out of scripted responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)


class CanvasStub:
    """Serves canned Canvas JSON by path and records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.tokens: list[str] = []

    def add(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.routes[path] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        if path not in self.routes:
            return httpx.Response(
                404, json={"errors": [{"message": "The specified resource does not exist."}]}
            )
        status_code, payload = self.routes[path]
        # None goes out as a literal null body
        return httpx.Response(
            status_code,
            content=json.dumps(payload).encode(),
            headers={"content-type": "application/json"},
        )

    def client(self, token: str = "canvas-token") -> CanvasClient:
        self.tokens.append(token)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return CanvasClient(token, base_url=CANVAS_BASE_URL, http_client=http_client)

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/api/v1") for r in self.requests]


@pytest.fixture
def canvas_stub():
    """Empty Canvas stub; tests add the routes they need."""
    return CanvasStub()


@pytest.fixture
def seeded_canvas_stub(canvas_stub):
    """Canvas stub holding one small course."""
    canvas_stub.add(
        "/courses",
        [
            {"id": 101, "name": "Intro to Biology", "course_code": "BIO101"},
            {"id": 202, "name": "Linear Algebra", "course_code": "MATH202"},
        ],
    )
    canvas_stub.add("/courses/101", {"id": 101, "name": "Intro to Biology", "course_code": "BIO101"})
    canvas_stub.add(
        "/courses/101/modules",
        [
            {
                "id": 11,
                "name": "Week 1",
                "position": 1,
                "items_count": 2,
                "items": [
                    {"id": 901, "title": "Cells", "type": "Page", "page_url": "cells"},
                    {"id": 902, "title": "Lab 1", "type": "Assignment", "content_id": 501},
                ],
            }
        ],
    )
    canvas_stub.add(
        "/courses/101/modules/11/items",
        [
            {"id": 901, "title": "Cells", "type": "Page", "page_url": "cells"},
            {"id": 902, "title": "Lab 1", "type": "Assignment", "content_id": 501},
        ],
    )
    canvas_stub.add(
        "/courses/101/assignments",
        [{"id": 501, "name": "Lab 1", "due_at": "2026-11-01T23:59:00Z", "points_possible": 10.0}],
    )
    canvas_stub.add(
        "/courses/101/assignments/501",
        {
            "id": 501,
            "name": "Lab 1",
            "description": "<p>Observe onion cells.</p>",
            "due_at": "2026-11-01T23:59:00Z",
        },
    )
    canvas_stub.add("/courses/101/pages", [{"url": "cells", "title": "Cells", "page_id": 7}])
    canvas_stub.add(
        "/courses/101/pages/cells",
        {"url": "cells", "title": "Cells", "page_id": 7, "body": "<h1>Cells</h1><p>The unit of life.</p>"},
    )
    canvas_stub.add("/courses/101/quizzes", [{"id": 301, "title": "Cells Quiz", "quiz_type": "assignment"}])
    canvas_stub.add(
        "/courses/101/quizzes/301",
        {"id": 301, "title": "Cells Quiz", "quiz_type": "assignment", "description": "Ten questions."},
    )
    canvas_stub.add(
        "/courses/101/files",
        [{"id": 801, "display_name": "slides.pdf", "content-type": "application/pdf", "size": 2048}],
    )
    canvas_stub.add("/files/801", {"id": 801, "display_name": "slides.pdf", "content-type": "application/pdf"})
    return canvas_stub


@pytest.fixture
def canvas(seeded_canvas_stub):
    """Canvas client backed by the seeded stub."""
    return seeded_canvas_stub.client()


@pytest.fixture
def sample_tool_call():
    """Create a sample tool call."""
    return ToolCall(id="call_1", name="get_assignments", arguments={"course_id": 101})


@pytest.fixture
def sample_tool():
    """Create sample tool definition."""
    return Tool(
        name="get_assignments",
        description="Lists all assignments in a course",
        parameters={
            "type": "object",
            "properties": {
                "course_id": {"type": "integer", "description": "The Canvas course ID"},
            },
            "required": ["course_id"],
        },
    )
