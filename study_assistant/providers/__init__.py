"""LLM Provider abstraction layer."""

from study_assistant.providers.base import BaseLLMProvider
from study_assistant.providers.registry import ProviderRegistry, get_provider

__all__ = [
    "BaseLLMProvider",
    "ProviderRegistry",
    "get_provider",
]
