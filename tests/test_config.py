"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from study_assistant.config import Environment, LLMProvider, Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LLM_PROVIDER", "MAX_TOOL_STEPS", "TOOL_CONCURRENCY", "CANVAS_BASE_URL"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.llm_provider == LLMProvider.ANTHROPIC
        assert settings.max_tool_steps == 20
        assert settings.tool_concurrency == 1
        assert settings.canvas_base_url == "https://canvas.instructure.com/api/v1"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.setenv("MAX_TOOL_STEPS", "5")
        monkeypatch.setenv("APP_ENV", "production")
        settings = Settings(_env_file=None)

        assert settings.llm_provider == LLMProvider.OPENAI
        assert settings.max_tool_steps == 5
        assert settings.app_env == Environment.PRODUCTION
        assert settings.is_production

    def test_trailing_slash_stripped(self):
        settings = Settings(_env_file=None, canvas_base_url="https://school.instructure.com/api/v1/")
        assert settings.canvas_base_url == "https://school.instructure.com/api/v1"

    def test_step_bound_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_tool_steps=0)

    def test_log_level_validated(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_provider_config(self):
        settings = Settings(_env_file=None, openai_api_key="sk-test", openai_model="gpt-4o-mini")
        config = settings.get_provider_config("openai")
        assert config.api_key == "sk-test"
        assert config.model == "gpt-4o-mini"

    def test_available_providers_need_credentials(self, monkeypatch):
        names = (
            "ANTHROPIC_API_KEY",
            "OPENAI_API_KEY",
            "AWS_REGION",
            "AWS_ACCESS_KEY_ID",
            "AWS_SECRET_ACCESS_KEY",
        )
        for name in names:
            monkeypatch.delenv(name, raising=False)
        assert Settings(_env_file=None).get_available_providers() == []

    def test_bedrock_available_with_region(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        settings = Settings(_env_file=None)
        assert LLMProvider.BEDROCK in settings.get_available_providers()

    def test_bedrock_available_with_key_pair(self, monkeypatch):
        monkeypatch.delenv("AWS_REGION", raising=False)
        settings = Settings(_env_file=None, aws_access_key_id="AKIA", aws_secret_access_key="secret")
        assert LLMProvider.BEDROCK in settings.get_available_providers()
