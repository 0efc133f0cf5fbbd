"""Tests for ToolExecutor."""

import asyncio
import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from study_assistant.core.exceptions import (
    CanvasAuthRequiredError,
    ToolExecutionError,
    ToolInputError,
    UnknownToolError,
)
from study_assistant.models.llm import ToolCall
from study_assistant.services.progress import ProgressReporter
from study_assistant.services.tool_executor import ToolExecutor, describe_operation
from study_assistant.tools.base import BaseTool
from study_assistant.tools.registry import ToolRegistry, build_default_registry

CREDENTIALED_CALLS = [
    ("get_courses", {}),
    ("get_modules", {"course_id": 101}),
    ("get_pages", {"course_id": 101}),
    ("get_page_content", {"course_id": 101, "page_url": "cells"}),
    ("get_assignments", {"course_id": 101}),
    ("get_assignment_content", {"course_id": 101, "assignment_id": 501}),
    ("get_quizzes", {"course_id": 101}),
    ("get_quiz_content", {"course_id": 101, "quiz_id": 301}),
    ("get_files", {"course_id": 101}),
]


class ExplodingTool(BaseTool):
    name = "explode"
    description = "Always fails"
    requires_credential = False

    async def run(self, arguments: dict[str, Any], canvas: Any = None) -> Any:
        raise RuntimeError("kaboom")


class SlowTool(BaseTool):
    """Echoes its delay so completion order differs from call order."""

    name = "slow"
    description = "Sleeps, then echoes"
    parameters = {
        "type": "object",
        "properties": {"delay": {"type": "number"}},
        "required": ["delay"],
    }
    requires_credential = False

    async def run(self, arguments: dict[str, Any], canvas: Any = None) -> Any:
        await asyncio.sleep(arguments["delay"])
        return {"delay": arguments["delay"]}


@pytest.fixture
def executor():
    return ToolExecutor(build_default_registry())


class TestExecute:
    """Tests for ToolExecutor.execute."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,arguments", CREDENTIALED_CALLS)
    async def test_no_credential_means_no_request(self, executor, name, arguments):
        with pytest.raises(CanvasAuthRequiredError) as exc_info:
            await executor.execute(ToolCall(id="c1", name=name, arguments=arguments), None)
        assert exc_info.value.tool_name == name
        assert exc_info.value.kind == "authentication"

    @pytest.mark.asyncio
    async def test_auth_checked_before_validation(self, executor):
        call = ToolCall(id="c1", name="get_assignments", arguments={})
        with pytest.raises(CanvasAuthRequiredError):
            await executor.execute(call, None)

    @pytest.mark.asyncio
    async def test_unknown_tool(self, executor, canvas):
        with pytest.raises(UnknownToolError, match="Unknown tool: drop_course"):
            await executor.execute(ToolCall(id="c1", name="drop_course"), canvas)

    @pytest.mark.asyncio
    async def test_invalid_input_makes_no_request(self, executor, seeded_canvas_stub, canvas):
        call = ToolCall(id="c1", name="get_assignments", arguments={"course_id": "abc"})
        with pytest.raises(ToolInputError):
            await executor.execute(call, canvas)
        assert seeded_canvas_stub.requests == []

    @pytest.mark.asyncio
    async def test_success(self, executor, sample_tool_call, canvas):
        result = await executor.execute(sample_tool_call, canvas)
        assert result["course_id"] == 101
        assert result["assignments"][0]["name"] == "Lab 1"

    @pytest.mark.asyncio
    async def test_upstream_failure_wrapped(self, executor, canvas_stub):
        canvas_stub.add("/courses/42/quizzes", {"message": "unauthorized"}, status_code=403)
        call = ToolCall(id="c1", name="get_quizzes", arguments={"course_id": 42})

        with pytest.raises(ToolExecutionError) as exc_info:
            await executor.execute(call, canvas_stub.client())

        error = exc_info.value
        assert error.status_code == 403
        assert error.details["operation"] == "get_quizzes(course_id=42)"
        assert "403" in error.message

    @pytest.mark.asyncio
    async def test_study_pack_without_credential(self, executor):
        call = ToolCall(
            id="c1",
            name="generate_study_pack",
            arguments={"content": "mitosis notes", "material_type": "combined"},
        )
        result = await executor.execute(call, None)
        assert result["status"] == "ready"


class TestInvoke:
    """Tests for ToolExecutor.invoke."""

    @pytest.mark.asyncio
    async def test_success_result_trace_and_progress(self, executor, sample_tool_call, canvas):
        events = []
        trace = []

        result = await executor.invoke(
            sample_tool_call, canvas, step=1, reporter=ProgressReporter(events.append), trace=trace
        )

        assert result.tool_call_id == "call_1"
        assert result.is_error is False
        assert json.loads(result.content)["assignments"][0]["id"] == 501

        assert [e.status for e in events] == ["started", "completed"]
        assert events[1].is_error is False
        assert trace[0].step == 1
        assert trace[0].name == "get_assignments"
        assert trace[0].input == {"course_id": 101}

    @pytest.mark.asyncio
    async def test_tool_error_becomes_error_result(self, executor, sample_tool_call):
        trace = []
        result = await executor.invoke(sample_tool_call, None, step=2, trace=trace)

        payload = json.loads(result.content)
        assert result.is_error is True
        assert payload["kind"] == "authentication"
        assert "Canvas access token is required" in payload["error"]
        assert trace[0].is_error is True
        assert trace[0].model_dump(by_alias=True)["isError"] is True

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self):
        executor = ToolExecutor(ToolRegistry([ExplodingTool()]))
        result = await executor.invoke(ToolCall(id="x", name="explode"), None, step=1)

        payload = json.loads(result.content)
        assert result.is_error is True
        assert payload == {"error": "Tool execution error: kaboom", "kind": "internal"}

    @pytest.mark.asyncio
    async def test_failing_sink_does_not_fail_invoke(self, executor, sample_tool_call, canvas):
        sink = MagicMock(side_effect=RuntimeError("socket closed"))
        result = await executor.invoke(sample_tool_call, canvas, step=1, reporter=ProgressReporter(sink))
        assert result.is_error is False
        assert sink.call_count == 2


class TestInvokeAll:
    @pytest.mark.asyncio
    async def test_sequential_by_default(self, executor, seeded_canvas_stub, canvas):
        calls = [
            ToolCall(id="a", name="get_assignments", arguments={"course_id": 101}),
            ToolCall(id="b", name="get_quizzes", arguments={"course_id": 101}),
        ]
        results = await executor.invoke_all(calls, canvas, step=1)

        assert [r.tool_call_id for r in results] == ["a", "b"]
        assert seeded_canvas_stub.paths == ["/courses/101/assignments", "/courses/101/quizzes"]

    @pytest.mark.asyncio
    async def test_concurrent_results_keep_call_order(self):
        executor = ToolExecutor(ToolRegistry([SlowTool()]))
        calls = [
            ToolCall(id="first", name="slow", arguments={"delay": 0.05}),
            ToolCall(id="second", name="slow", arguments={"delay": 0.0}),
        ]
        results = await executor.invoke_all(calls, None, step=1, concurrency=2)
        assert [r.tool_call_id for r in results] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_concurrent_trace_keeps_call_order(self):
        executor = ToolExecutor(ToolRegistry([SlowTool()]))
        calls = [
            ToolCall(id="first", name="slow", arguments={"delay": 0.05}),
            ToolCall(id="second", name="slow", arguments={"delay": 0.0}),
        ]
        trace = []
        await executor.invoke_all(calls, None, step=1, trace=trace, concurrency=2)
        assert [entry.input["delay"] for entry in trace] == [0.05, 0.0]

    @pytest.mark.asyncio
    async def test_one_failure_among_successes(self, executor, canvas):
        calls = [
            ToolCall(id="a", name="get_assignments", arguments={"course_id": 101}),
            ToolCall(id="b", name="no_such_tool"),
            ToolCall(id="c", name="get_pages", arguments={"course_id": 101}),
        ]
        results = await executor.invoke_all(calls, canvas, step=3)
        assert [r.is_error for r in results] == [False, True, False]


def test_describe_operation():
    assert describe_operation("get_page_content", {"course_id": 1, "page_url": "intro"}) == (
        "get_page_content(course_id=1, page_url='intro')"
    )

