"""Anthropic Claude providers (direct API and AWS Bedrock)."""

from typing import Any

import anthropic
from anthropic import AsyncAnthropic, AsyncAnthropicBedrock

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

logger = get_logger("anthropic_provider")


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude API provider."""

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4096,
        timeout: int = 120,
        client: Any | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens, timeout=timeout)
        self.client = client or self._create_client(**kwargs)

    def _create_client(self, **kwargs: Any) -> Any:
        return AsyncAnthropic(api_key=self.api_key, timeout=self.timeout)

    def _convert_messages(self, messages: list[ChatMessage]) -> list[dict[str, Any]]:
        """Convert messages to Anthropic format."""
        return [msg.to_anthropic_format() for msg in messages]

    def _convert_tools(self, tools: list[Tool] | None) -> list[dict[str, Any]] | None:
        """Convert tools to Anthropic (or Bedrock) format."""
        if not tools:
            return None
        return convert_tools_for_provider(tools, self.provider_name)

    def _parse_response(self, response: anthropic.types.Message) -> LLMResponse:
        """Parse Anthropic response to unified format."""
        blocks: list[ContentBlock] = []

        for block in response.content:
            if block.type == "text":
                blocks.append(TextBlock(text=block.text))
            elif block.type == "tool_use":
                blocks.append(
                    ToolUseBlock(
                        id=block.id,
                        name=block.name,
                        input=block.input if isinstance(block.input, dict) else {},
                    )
                )

        finish_reason = "stop"
        if response.stop_reason == "tool_use":
            finish_reason = "tool_calls"
        elif response.stop_reason == "max_tokens":
            finish_reason = "length"

        return LLMResponse(
            message=ChatMessage(role=MessageRole.ASSISTANT, content=blocks) if blocks else None,
            finish_reason=finish_reason,
            usage=TokenUsage.from_anthropic(response.usage),
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
        """Send a messages request to Anthropic."""
        anthropic_messages = self._convert_messages(messages)
        anthropic_tools = self._convert_tools(tools)

        logger.debug(
            "anthropic_request",
            provider=self.provider_name,
            model=self.model,
            message_count=len(anthropic_messages),
            has_tools=anthropic_tools is not None,
        )

        try:
            request_kwargs: dict[str, Any] = {
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": anthropic_messages,
            }

            if system_prompt:
                request_kwargs["system"] = system_prompt
            if anthropic_tools:
                request_kwargs["tools"] = anthropic_tools

            response = await self.client.messages.create(**request_kwargs)

            result = self._parse_response(response)
            logger.debug(
                "anthropic_response",
                provider=self.provider_name,
                finish_reason=result.finish_reason,
                tool_calls=len(result.tool_calls),
            )
            return result

        except anthropic.AuthenticationError as e:
            logger.error("anthropic_auth_error", provider=self.provider_name, error=str(e))
            raise LLMAuthenticationError(
                "Authentication failed", provider=self.provider_name, model=self.model
            ) from e
        except anthropic.RateLimitError as e:
            logger.warning("anthropic_rate_limit", provider=self.provider_name, error=str(e))
            raise LLMRateLimitError(
                "Rate limit exceeded", provider=self.provider_name, model=self.model
            ) from e
        except anthropic.APIError as e:
            status_code = getattr(e, "status_code", None)
            logger.error(
                "anthropic_api_error",
                provider=self.provider_name,
                error=str(e),
                status_code=status_code,
            )
            raise LLMProviderError(
                f"API error: {e.message}",
                provider=self.provider_name,
                model=self.model,
                status_code=status_code,
            ) from e


class BedrockProvider(AnthropicProvider):
    """Claude models served through AWS Bedrock."""

    provider_name = "bedrock"

    def __init__(
        self,
        model: str = "anthropic.claude-3-5-sonnet-20240620-v1:0",
        aws_region: str | None = None,
        aws_access_key: str | None = None,
        aws_secret_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            model=model,
            aws_region=aws_region,
            aws_access_key=aws_access_key,
            aws_secret_key=aws_secret_key,
            **kwargs,
        )

    def _create_client(self, **kwargs: Any) -> Any:
        # Unset keys fall back to the AWS default credential chain
        return AsyncAnthropicBedrock(
            aws_region=kwargs.get("aws_region"),
            aws_access_key=kwargs.get("aws_access_key"),
            aws_secret_key=kwargs.get("aws_secret_key"),
            timeout=self.timeout,
        )
