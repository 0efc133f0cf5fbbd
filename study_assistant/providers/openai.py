"""OpenAI Chat Completions provider."""

import json
from typing import Any

import openai
from openai import AsyncOpenAI

from study_assistant.core.exceptions import LLMAuthenticationError, LLMProviderError, LLMRateLimitError
from study_assistant.core.logging import get_logger
from study_assistant.models.llm import (
    ChatMessage,
    ContentBlock,
    LLMResponse,
    MessageRole,
    TextBlock,
    TokenUsage,
    ToolUseBlock,
)
from study_assistant.models.tools import Tool
from study_assistant.providers.base import BaseLLMProvider
from study_assistant.utils.tool_converter import convert_tools_for_provider

logger = get_logger("openai_provider")

# OpenAI finish reasons -> normalized finish_reason
FINISH_REASONS = {
    "stop": "stop",
    "tool_calls": "tool_calls",
    "function_call": "tool_calls",
    "length": "length",
    "content_filter": "error",
}


def _parse_arguments(name: str, raw: str | None) -> dict[str, Any]:
    """Decode a function-call argument string; malformed input becomes ``{}``."""
    try:
        args = json.loads(raw or "{}")
    except json.JSONDecodeError:
        logger.warning("openai_bad_tool_arguments", tool_name=name)
        return {}
    return args if isinstance(args, dict) else {}


class OpenAIProvider(BaseLLMProvider):
    """GPT models through the Chat Completions API."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        max_tokens: int = 4096,
        timeout: int = 120,
        client: Any | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens, timeout=timeout)
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout)

    def _build_request(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None,
        tools: list[Tool] | None,
    ) -> dict[str, Any]:
        # One neutral turn may expand into several OpenAI messages
        wire_messages: list[dict[str, Any]] = (
            [{"role": "system", "content": system_prompt}] if system_prompt else []
        )
        for message in messages:
            wire_messages.extend(message.to_openai_format())

        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": wire_messages,
        }
        if tools:
            request["tools"] = convert_tools_for_provider(tools, self.provider_name)
        return request

    def _parse_response(self, response: Any) -> LLMResponse:
        """Turn a ChatCompletion into the neutral response."""
        usage = TokenUsage.from_openai(response.usage) if response.usage else None

        if not response.choices:
            return LLMResponse(
                message=None,
                finish_reason="error",
                usage=usage,
                model=response.model,
                provider=self.provider_name,
            )

        choice = response.choices[0]
        blocks: list[ContentBlock] = []
        if choice.message.content:
            blocks.append(TextBlock(text=choice.message.content))
        for call in choice.message.tool_calls or []:
            blocks.append(
                ToolUseBlock(
                    id=call.id,
                    name=call.function.name,
                    input=_parse_arguments(call.function.name, call.function.arguments),
                )
            )

        return LLMResponse(
            message=ChatMessage(role=MessageRole.ASSISTANT, content=blocks) if blocks else None,
            finish_reason=FINISH_REASONS.get(choice.finish_reason or "stop", "stop"),
            usage=usage,
            model=response.model,
            provider=self.provider_name,
        )

    async def chat(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
        tools: list[Tool] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send one Chat Completions request."""
        request = self._build_request(messages, system_prompt, tools)
        logger.debug(
            "openai_request",
            model=self.model,
            message_count=len(request["messages"]),
            tool_count=len(request.get("tools", [])),
        )

        try:
            response = await self.client.chat.completions.create(**request)
        except openai.AuthenticationError as e:
            logger.error("openai_auth_error", error=str(e))
            raise LLMAuthenticationError(
                "Authentication failed", provider=self.provider_name, model=self.model
            ) from e
        except openai.RateLimitError as e:
            logger.warning("openai_rate_limit", error=str(e))
            raise LLMRateLimitError(
                "Rate limit exceeded", provider=self.provider_name, model=self.model
            ) from e
        except openai.APIError as e:
            status_code = getattr(e, "status_code", None)
            logger.error("openai_api_error", error=str(e), status_code=status_code)
            raise LLMProviderError(
                f"API error: {e.message}",
                provider=self.provider_name,
                model=self.model,
                status_code=status_code,
            ) from e

        result = self._parse_response(response)
        logger.debug(
            "openai_response",
            finish_reason=result.finish_reason,
            tool_calls=len(result.tool_calls),
        )
        return result
