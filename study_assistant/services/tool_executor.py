"""Tool execution service: dispatches model tool calls to registered handlers."""

import asyncio
import json
from typing import Any

from study_assistant.core.exceptions import (
    CanvasAPIError,
    CanvasAuthRequiredError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
)
from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.models.chat import ToolTraceEntry
from study_assistant.models.llm import ToolCall, ToolResult
from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.progress import ProgressReporter
from study_assistant.tools.registry import ToolRegistry, build_default_registry

logger = get_logger("tool_executor")


def describe_operation(name: str, arguments: dict[str, Any]) -> str:
    """Render a call as ``get_assignments(course_id=101)`` for error context."""
    args = ", ".join(f"{key}={value!r}" for key, value in arguments.items())
    return f"{name}({args})"


class ToolExecutor:
    """Maps a model-issued tool call to its handler and runs it."""

    def __init__(self, registry: ToolRegistry | None = None) -> None:
        self._registry = registry or build_default_registry()

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def execute(self, call: ToolCall, canvas: CanvasClient | None) -> Any:
        """
        Run one tool call.

        Args:
            call: The tool call requested by the model
            canvas: Per-request Canvas client, or None when no token was linked

        Returns:
            JSON-serializable tool output

        Raises:
            UnknownToolError: The name is not registered
            CanvasAuthRequiredError: A credentialed tool ran without a client
            ToolInputError: Arguments failed validation
            ToolExecutionError: The Canvas request behind the tool failed
        """
        tool = self._registry.get(call.name)
        if tool is None:
            raise UnknownToolError(call.name)

        # Credential check precedes argument validation
        if tool.requires_credential and canvas is None:
            raise CanvasAuthRequiredError(call.name)

        arguments = tool.validate(dict(call.arguments))

        try:
            return await tool.run(arguments, canvas)
        except CanvasAPIError as e:
            operation = describe_operation(call.name, arguments)
            raise ToolExecutionError(
                f"{operation} failed: {e}",
                tool_name=call.name,
                status_code=e.status_code,
                details={"operation": operation},
            ) from e

    async def invoke(
        self,
        call: ToolCall,
        canvas: CanvasClient | None,
        step: int,
        reporter: ProgressReporter | None = None,
        trace: list[ToolTraceEntry] | None = None,
    ) -> ToolResult:
        """Execute a call and always return a result the model can read.

        Reports progress before and after, and records the outcome in
        ``trace``. Failures become error results instead of exceptions.
        """
        reporter = reporter or ProgressReporter()

        logger.info(
            LogEvents.TOOL_INVOKED,
            tool_name=call.name,
            tool_id=call.id,
            step=step,
        )
        reporter.started(step, call)

        is_error = False
        try:
            output = await self.execute(call, canvas)
            logger.debug(LogEvents.TOOL_RESULT, tool_name=call.name, step=step)
        except ToolError as e:
            is_error = True
            output = e.to_payload()
            logger.warning(
                LogEvents.TOOL_ERROR,
                tool_name=call.name,
                step=step,
                kind=e.kind,
                error=e.message,
            )
        except Exception as e:
            is_error = True
            output = {"error": f"Tool execution error: {e}", "kind": "internal"}
            logger.error(
                LogEvents.TOOL_ERROR,
                tool_name=call.name,
                step=step,
                kind="internal",
                error=str(e),
                exc_info=True,
            )

        reporter.completed(step, call, output, is_error)
        if trace is not None:
            trace.append(
                ToolTraceEntry(
                    step=step,
                    name=call.name,
                    input=dict(call.arguments),
                    output=output,
                    is_error=is_error,
                )
            )

        return ToolResult(
            tool_call_id=call.id,
            content=json.dumps(output, default=str),
            is_error=is_error,
        )

    async def invoke_all(
        self,
        calls: list[ToolCall],
        canvas: CanvasClient | None,
        step: int,
        reporter: ProgressReporter | None = None,
        trace: list[ToolTraceEntry] | None = None,
        concurrency: int = 1,
    ) -> list[ToolResult]:
        """Execute every call of one step; results keep the call order."""
        if concurrency <= 1 or len(calls) <= 1:
            results = []
            for call in calls:
                results.append(await self.invoke(call, canvas, step, reporter, trace))
            return results

        semaphore = asyncio.Semaphore(concurrency)
        entries: list[list[ToolTraceEntry]] = [[] for _ in calls]

        async def bounded(call: ToolCall, sink: list[ToolTraceEntry]) -> ToolResult:
            async with semaphore:
                return await self.invoke(call, canvas, step, reporter, sink)

        results = await asyncio.gather(*(bounded(c, s) for c, s in zip(calls, entries)))
        if trace is not None:
            for sink in entries:
                trace.extend(sink)
        return list(results)
