"""Application configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Supported hosted model backends."""

    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"
    OPENAI = "openai"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    CONSOLE = "console"


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class ProviderConfig:
    """Configuration for a specific LLM provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 4096,
        timeout: int = 120,
        aws_region: str | None = None,
        aws_access_key: str | None = None,
        aws_secret_key: str | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.aws_region = aws_region
        self.aws_access_key = aws_access_key
        self.aws_secret_key = aws_secret_key


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Hosted model
    llm_provider: LLMProvider = Field(
        default=LLMProvider.ANTHROPIC, description="Backend used by the assistant"
    )
    llm_timeout: int = Field(default=120, ge=1)

    # Anthropic Configuration
    anthropic_api_key: str | None = Field(default=None)
    anthropic_model: str = Field(default="claude-sonnet-4-20250514")
    anthropic_max_tokens: int = Field(default=4096)

    # AWS Bedrock Configuration
    aws_region: str = Field(default="us-east-1")
    aws_access_key_id: str | None = Field(default=None)
    aws_secret_access_key: str | None = Field(default=None)
    bedrock_model_id: str = Field(default="anthropic.claude-3-5-sonnet-20240620-v1:0")

    # OpenAI Configuration
    openai_api_key: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o")
    openai_max_tokens: int = Field(default=4096)

    # Tool loop
    max_tool_steps: int = Field(default=20, ge=1, description="Circuit breaker for the tool loop")
    tool_concurrency: int = Field(default=1, ge=1, description="Tool calls run at once per step")
    tool_content_max_chars: int = Field(default=20000, ge=100)

    # Canvas LMS
    canvas_base_url: str = Field(default="https://canvas.instructure.com/api/v1")
    canvas_timeout: float = Field(default=30.0, gt=0)
    canvas_per_page: int = Field(default=100, ge=1, le=100)

    # Application Settings
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000)
    app_env: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=True)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default=LogFormat.JSON)
    log_file_path: str | None = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("canvas_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == Environment.PRODUCTION

    def get_provider_config(self, provider: str | LLMProvider) -> ProviderConfig:
        """Get configuration for a specific provider."""
        if isinstance(provider, str):
            provider = LLMProvider(provider)

        configs = {
            LLMProvider.ANTHROPIC: ProviderConfig(
                api_key=self.anthropic_api_key,
                model=self.anthropic_model,
                max_tokens=self.anthropic_max_tokens,
                timeout=self.llm_timeout,
            ),
            LLMProvider.BEDROCK: ProviderConfig(
                model=self.bedrock_model_id,
                max_tokens=self.anthropic_max_tokens,
                timeout=self.llm_timeout,
                aws_region=self.aws_region,
                aws_access_key=self.aws_access_key_id,
                aws_secret_key=self.aws_secret_access_key,
            ),
            LLMProvider.OPENAI: ProviderConfig(
                api_key=self.openai_api_key,
                model=self.openai_model,
                max_tokens=self.openai_max_tokens,
                timeout=self.llm_timeout,
            ),
        }
        return configs[provider]

    def get_available_providers(self) -> list[LLMProvider]:
        """Get list of providers with credentials configured."""
        providers = []

        if self.anthropic_api_key:
            providers.append(LLMProvider.ANTHROPIC)
        # Region set explicitly, or a full key pair
        if "aws_region" in self.model_fields_set or (
            self.aws_access_key_id and self.aws_secret_access_key
        ):
            providers.append(LLMProvider.BEDROCK)
        if self.openai_api_key:
            providers.append(LLMProvider.OPENAI)

        return providers


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
