"""Abstract base class for LLM providers."""

from abc import ABC, abstractmethod
from typing import Any

from study_assistant.models.llm import ChatMessage, LLMResponse
from study_assistant.models.tools import Tool


class BaseLLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    provider_name: str = "base"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 4096,
        timeout: int = 120,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

    @abstractmethod
    async def chat(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
        tools: list[Tool] | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Send one conversational round-trip.

        Args:
            messages: Full conversation so far
            system_prompt: Optional system prompt
            tools: Optional list of tools for function calling
            **kwargs: Provider-specific options

        Returns:
            LLMResponse whose ``message`` is the assistant turn, or None when
            the model produced nothing usable

        Raises:
            LLMProviderError: The model could not be reached or answered badly
        """
        pass

    def get_model_name(self) -> str:
        """Get the current model name."""
        return self.model or "unknown"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
