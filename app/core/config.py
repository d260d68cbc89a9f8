"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file and not os.getenv("TESTING"):
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_llm_settings() -> "LLMSettings":
    """Build LLM settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return LLMSettings()  # type: ignore[call-arg]


def _build_chat_settings() -> "ChatSettings":
    return ChatSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class LLMSettings(BaseSettings):
    """Text-generation provider configuration.

    ``provider`` is the deployment-mode flag: ``openai`` talks to the standard
    API, ``azure`` to an Azure OpenAI deployment. Provider-specific
    requirements are checked in the adapter factory.
    """

    provider: str = Field(
        "openai",
        description="LLM provider name (openai or azure)",
    )
    model: str = Field(
        "gpt-4o-mini",
        description="Model name used with the standard OpenAI API",
    )
    api_key: str | None = Field(
        None,
        description="API key for the selected provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint for OpenAI-compatible gateways",
    )
    timeout_seconds: float = Field(
        45.0,
        description="Request timeout in seconds",
    )
    azure_endpoint: str | None = Field(
        None,
        description="Azure OpenAI resource endpoint (https://<name>.openai.azure.com)",
    )
    azure_deployment: str | None = Field(
        None,
        description="Azure OpenAI deployment name; falls back to model when unset",
    )
    azure_api_version: str = Field(
        "2024-06-01",
        description="Azure OpenAI REST API version",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )

    @property
    def uses_azure(self) -> bool:
        return self.provider.lower() == "azure"


class ChatSettings(BaseSettings):
    """Generation parameters for recruiter chat answers.

    Kept conservative so answers stay consistent and grounded in the resume.
    """

    temperature: float = Field(0.2, ge=0.0, le=2.0)
    top_p: float = Field(0.90, gt=0.0, le=1.0)
    max_tokens: int = Field(4096, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="CHAT_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    api_key_required: bool = Field(
        True,
        description="Whether API key authentication is required",
    )
    api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid API keys for authentication",
    )
    max_query_chars: int = Field(
        2000,
        description="Maximum length of a recruiter question in characters",
        ge=1,
    )
    max_evidence_items: int = Field(
        5,
        description="Maximum number of resume passages returned as evidence",
        ge=1,
        le=5,
    )
    job_description_preview_chars: int = Field(
        500,
        description="Characters of the job description included in the prompt context",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="json or plain")
    output: str = Field("stdout", description="stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10_485_760, description="Rotate after this many bytes (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=_build_llm_settings)
    chat: ChatSettings = Field(default_factory=_build_chat_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()
