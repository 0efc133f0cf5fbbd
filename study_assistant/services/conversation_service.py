"""Conversation loop: drives the hosted model through tool calls to a final answer."""

from study_assistant.config import get_settings
from study_assistant.core.exceptions import NoAssistantMessageError, StepLimitExceededError
from study_assistant.core.logging import get_logger, LogEvents
from study_assistant.models.chat import ConversationResult, ToolTraceEntry
from study_assistant.models.llm import ChatMessage
from study_assistant.prompts import SYSTEM_PROMPT
from study_assistant.providers.base import BaseLLMProvider
from study_assistant.providers.registry import get_provider
from study_assistant.services.canvas_client import CanvasClient
from study_assistant.services.progress import ProgressReporter
from study_assistant.services.tool_executor import ToolExecutor

logger = get_logger("conversation_service")


class ConversationService:
    """Runs one request-scoped conversation with automatic tool execution.

    Nothing here is kept between calls to ``run``: the message history, the
    tool trace and the Canvas client all belong to a single request.
    """

    def __init__(
        self,
        tool_executor: ToolExecutor | None = None,
        provider: BaseLLMProvider | None = None,
        max_steps: int | None = None,
        tool_concurrency: int | None = None,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        settings = get_settings()
        self._executor = tool_executor or ToolExecutor()
        self._provider = provider
        self._max_steps = max_steps or settings.max_tool_steps
        self._tool_concurrency = tool_concurrency or settings.tool_concurrency
        self._system_prompt = system_prompt

    @property
    def max_steps(self) -> int:
        return self._max_steps

    @property
    def tool_executor(self) -> ToolExecutor:
        return self._executor

    def _get_provider(self) -> BaseLLMProvider:
        # Resolved on first use
        return self._provider or get_provider()

    async def run(
        self,
        message: str,
        canvas: CanvasClient | None = None,
        reporter: ProgressReporter | None = None,
    ) -> ConversationResult:
        """
        Answer a user message, executing tools as the model requests them.

        The loop:
        1. Send the history, system prompt and tool schemas to the model
        2. If the model stops for tool use, run every requested tool and
           append one user turn holding all results
        3. Repeat until the model gives a final answer or ``max_steps`` runs out

        Args:
            message: The student's message
            canvas: Per-request Canvas client, None when no token was linked
            reporter: Optional sink for tool progress events

        Returns:
            Final text, the final assistant turn and the tool trace

        Raises:
            NoAssistantMessageError: The model returned nothing usable
            StepLimitExceededError: No final answer within ``max_steps``
            LLMProviderError: The model could not be reached
        """
        provider = self._get_provider()
        tools = self._executor.registry.list_tools()
        reporter = reporter or ProgressReporter()

        messages: list[ChatMessage] = [ChatMessage.user_text(message)]
        trace: list[ToolTraceEntry] = []

        logger.info(
            LogEvents.LLM_REQUEST_STARTED,
            provider=provider.provider_name,
            model=provider.model,
            tool_count=len(tools),
            has_credential=canvas is not None,
            max_steps=self._max_steps,
        )

        for step in range(1, self._max_steps + 1):
            response = await provider.chat(
                messages=messages,
                system_prompt=self._system_prompt,
                tools=tools,
            )

            assistant = response.message
            if assistant is None or not assistant.content:
                logger.error(
                    LogEvents.LLM_REQUEST_FAILED,
                    reason="no_assistant_message",
                    step=step,
                    finish_reason=response.finish_reason,
                )
                raise NoAssistantMessageError()

            messages.append(assistant)
            tool_calls = assistant.tool_calls

            if response.finish_reason == "tool_calls" and tool_calls:
                logger.debug(
                    LogEvents.LLM_TOOL_CALL,
                    step=step,
                    tool_count=len(tool_calls),
                    tools=[tc.name for tc in tool_calls],
                )
                results = await self._executor.invoke_all(
                    tool_calls,
                    canvas,
                    step,
                    reporter=reporter,
                    trace=trace,
                    concurrency=self._tool_concurrency,
                )
                messages.append(ChatMessage.from_tool_results(results))
                continue

            logger.info(
                LogEvents.LLM_REQUEST_COMPLETED,
                provider=response.provider,
                model=response.model,
                steps=step,
                finish_reason=response.finish_reason,
                tool_calls=len(trace),
            )
            return ConversationResult(
                text=assistant.text or "",
                message=assistant,
                tool_trace=trace,
            )

        logger.warning(LogEvents.LLM_STEP_LIMIT, max_steps=self._max_steps, tool_calls=len(trace))
        raise StepLimitExceededError(self._max_steps)
