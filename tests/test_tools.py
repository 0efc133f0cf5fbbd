"""Tests for tool handlers and the tool registry."""

import pytest

from study_assistant.core.exceptions import ConfigurationError, ToolExecutionError, ToolInputError
from study_assistant.tools.canvas_tools import GetCoursesTool, GetPageContentTool
from study_assistant.tools.registry import ToolRegistry, build_default_registry
from study_assistant.tools.study_tools import GenerateStudyPackTool

EXPECTED_TOOLS = [
    "get_courses",
    "get_modules",
    "get_pages",
    "get_page_content",
    "get_assignments",
    "get_assignment_content",
    "get_quizzes",
    "get_quiz_content",
    "get_files",
    "generate_study_pack",
]


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_default_tools_in_order(self):
        registry = build_default_registry()
        assert registry.names == EXPECTED_TOOLS
        assert [tool.name for tool in registry.list_tools()] == EXPECTED_TOOLS
        assert len(registry) == 10

    def test_lookup(self):
        registry = build_default_registry()
        assert "get_quizzes" in registry
        assert registry.get("get_quizzes").name == "get_quizzes"
        assert registry.get("delete_course") is None

    def test_duplicate_name_rejected(self):
        registry = ToolRegistry([GetCoursesTool()])
        with pytest.raises(ConfigurationError):
            registry.register(GetCoursesTool())

    def test_only_study_pack_runs_without_credential(self):
        registry = build_default_registry()
        local = [tool.name for tool in registry if not tool.requires_credential]
        assert local == ["generate_study_pack"]

    def test_course_scoped_tools_require_course_id(self):
        registry = build_default_registry()
        for tool in registry:
            if tool.name in ("get_courses", "generate_study_pack"):
                continue
            assert "course_id" in tool.parameters["required"], tool.name

    def test_anthropic_format(self):
        tools = build_default_registry().to_provider_format("anthropic")
        assert tools[0]["name"] == "get_courses"
        assert tools[0]["input_schema"]["type"] == "object"

    def test_openai_format(self):
        tools = build_default_registry().to_provider_format("openai")
        assert all(t["type"] == "function" for t in tools)
        page_tool = tools[EXPECTED_TOOLS.index("get_page_content")]["function"]
        assert page_tool["parameters"]["properties"]["page_url"]["type"] == "string"

    def test_unknown_provider_format(self):
        with pytest.raises(ValueError):
            build_default_registry().to_provider_format("gemini")


class TestToolValidation:
    def test_integral_float_coerced(self):
        tool = build_default_registry().get("get_assignments")
        assert tool.validate({"course_id": 101.0}) == {"course_id": 101}

    def test_bool_is_not_an_id(self):
        tool = build_default_registry().get("get_assignments")
        with pytest.raises(ToolInputError, match="Invalid type for course_id"):
            tool.validate({"course_id": True})

    def test_missing_and_unknown_reported_together(self):
        tool = build_default_registry().get("get_quiz_content")
        with pytest.raises(ToolInputError) as exc_info:
            tool.validate({"course_id": 101, "quiz": 3})
        errors = exc_info.value.details["errors"]
        assert "Missing required parameter: quiz_id" in errors
        assert "Unknown parameter: quiz" in errors

    def test_blank_page_slug_rejected(self):
        with pytest.raises(ToolInputError, match="page_url"):
            GetPageContentTool().validate({"course_id": 101, "page_url": "  "})

    def test_material_type_enum(self):
        with pytest.raises(ToolInputError, match="must be one of"):
            GenerateStudyPackTool().validate({"content": "notes", "material_type": "video"})


class TestCanvasTools:
    """Tests for Canvas-backed tool output."""

    @pytest.mark.asyncio
    async def test_get_courses(self, canvas):
        tool = build_default_registry().get("get_courses")
        result = await tool.run({}, canvas)

        assert result["count"] == 2
        assert result["courses"][0] == {
            "id": 101,
            "name": "Intro to Biology",
            "course_code": "BIO101",
            "description": None,
            "start_at": None,
            "end_at": None,
        }

    @pytest.mark.asyncio
    async def test_get_modules_includes_items(self, seeded_canvas_stub, canvas):
        tool = build_default_registry().get("get_modules")
        result = await tool.run({"course_id": 101}, canvas)

        module = result["modules"][0]
        assert module["name"] == "Week 1"
        assert [item["title"] for item in module["items"]] == ["Cells", "Lab 1"]
        assert seeded_canvas_stub.requests[0].url.params["include[]"] == "items"

    @pytest.mark.asyncio
    async def test_get_page_content(self, canvas):
        result = await GetPageContentTool().run({"course_id": 101, "page_url": "cells"}, canvas)
        assert result["title"] == "Cells"
        assert result["body"] == "<h1>Cells</h1><p>The unit of life.</p>"

    @pytest.mark.asyncio
    async def test_long_body_truncated(self, canvas):
        tool = GetPageContentTool(max_content_chars=10)
        result = await tool.run({"course_id": 101, "page_url": "cells"}, canvas)
        assert result["body"].startswith("<h1>Cells<")
        assert "[truncated" in result["body"]

    @pytest.mark.asyncio
    async def test_get_assignment_content(self, canvas):
        tool = build_default_registry().get("get_assignment_content")
        result = await tool.run({"course_id": 101, "assignment_id": 501}, canvas)
        assert result["name"] == "Lab 1"
        assert result["description"] == "<p>Observe onion cells.</p>"

    @pytest.mark.asyncio
    async def test_get_quiz_content(self, canvas):
        tool = build_default_registry().get("get_quiz_content")
        result = await tool.run({"course_id": 101, "quiz_id": 301}, canvas)
        assert result["quiz_type"] == "assignment"
        assert result["description"] == "Ten questions."

    @pytest.mark.asyncio
    async def test_get_files(self, canvas):
        tool = build_default_registry().get("get_files")
        result = await tool.run({"course_id": 101}, canvas)
        assert result["files"][0]["display_name"] == "slides.pdf"
        assert result["files"][0]["content_type"] == "application/pdf"

    @pytest.mark.asyncio
    async def test_empty_single_read_is_not_found(self, canvas_stub):
        canvas_stub.add("/courses/101/pages/missing", None)
        with pytest.raises(ToolExecutionError, match="not found") as exc_info:
            await GetPageContentTool().run(
                {"course_id": 101, "page_url": "missing"}, canvas_stub.client()
            )
        assert exc_info.value.status_code == 404


class TestGenerateStudyPackTool:
    @pytest.mark.asyncio
    async def test_acknowledges_without_canvas(self):
        tool = GenerateStudyPackTool()
        arguments = tool.validate({"content": "Cells are the unit of life", "material_type": "page"})

        result = await tool.run(arguments, None)

        assert result["status"] == "ready"
        assert result["material_type"] == "page"
        assert result["word_count"] == 6
        assert result["content_length"] == len("Cells are the unit of life")
