"""Provider registry and factory for LLM providers."""

from typing import Any

from study_assistant.config import LLMProvider, ProviderConfig, get_settings
from study_assistant.core.exceptions import ConfigurationError
from study_assistant.core.logging import get_logger
from study_assistant.providers.anthropic import AnthropicProvider, BedrockProvider
from study_assistant.providers.base import BaseLLMProvider
from study_assistant.providers.openai import OpenAIProvider

logger = get_logger("provider_registry")


class ProviderRegistry:
    """Registry and factory for LLM providers."""

    _providers: dict[LLMProvider, type[BaseLLMProvider]] = {
        LLMProvider.ANTHROPIC: AnthropicProvider,
        LLMProvider.BEDROCK: BedrockProvider,
        LLMProvider.OPENAI: OpenAIProvider,
    }

    # Keyed by provider name, shared across requests
    _instances: dict[str, BaseLLMProvider] = {}

    @classmethod
    def get_provider_class(cls, provider: LLMProvider) -> type[BaseLLMProvider]:
        """Get the provider class for a given provider type."""
        if provider not in cls._providers:
            raise ConfigurationError(f"Unknown provider: {provider}")
        return cls._providers[provider]

    @classmethod
    def create_provider(
        cls,
        provider: str | LLMProvider,
        config: ProviderConfig | None = None,
        **kwargs: Any,
    ) -> BaseLLMProvider:
        """Create a new provider instance.

        Args:
            provider: Provider name or enum
            config: Optional provider configuration
            **kwargs: Override configuration values

        Returns:
            Configured provider instance

        Raises:
            ConfigurationError: Unknown provider or missing API key
        """
        try:
            provider = LLMProvider(provider)
        except ValueError as e:
            raise ConfigurationError(f"Unknown provider: {provider}") from e

        if config is None:
            config = get_settings().get_provider_config(provider)

        provider_kwargs: dict[str, Any] = {
            "max_tokens": config.max_tokens,
            "timeout": config.timeout,
        }
        if config.model:
            provider_kwargs["model"] = config.model

        if provider == LLMProvider.BEDROCK:
            provider_kwargs.update(
                aws_region=config.aws_region,
                aws_access_key=config.aws_access_key,
                aws_secret_key=config.aws_secret_key,
            )
        else:
            provider_kwargs["api_key"] = config.api_key

        provider_kwargs.update(kwargs)

        if (
            provider != LLMProvider.BEDROCK
            and not provider_kwargs.get("api_key")
            and "client" not in provider_kwargs
        ):
            raise ConfigurationError(
                f"No API key configured for provider '{provider.value}'",
                details={"env": f"{provider.value.upper()}_API_KEY"},
            )

        provider_class = cls.get_provider_class(provider)
        instance = provider_class(**provider_kwargs)

        logger.debug(
            "provider_created",
            provider=provider.value,
            model=instance.model,
        )

        return instance

    @classmethod
    def get_or_create_provider(cls, provider: str | LLMProvider, **kwargs: Any) -> BaseLLMProvider:
        """Get a cached provider instance or create a new one."""
        key = LLMProvider(provider).value

        if key not in cls._instances:
            cls._instances[key] = cls.create_provider(provider, **kwargs)

        return cls._instances[key]

    @classmethod
    def clear_cache(cls) -> None:
        """Clear all cached provider instances."""
        cls._instances.clear()


def get_provider(provider: str | LLMProvider | None = None, **kwargs: Any) -> BaseLLMProvider:
    """Convenience function to get the configured provider instance."""
    if provider is None:
        provider = get_settings().llm_provider

    return ProviderRegistry.get_or_create_provider(provider, **kwargs)
