"""Factory and process-wide accessor for LLM client instances."""

from __future__ import annotations

import logging
import threading

from app.adapters.llm.azure_client import AzureOpenAIClient
from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.openai_client import OpenAIClient
from app.core.config import LLMSettings, settings
from app.core.errors import ValidationAppError
from app.schemas.chat import EnvironmentStatus

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "azure")

_client: AbstractLLMClient | None = None
_client_uses_azure: bool | None = None
_client_lock = threading.Lock()


def active_model_name(llm_settings: LLMSettings | None = None) -> str:
    """Model (or Azure deployment) name that requests are sent to."""
    cfg = llm_settings or settings.llm
    if cfg.uses_azure:
        return cfg.azure_deployment or cfg.model
    return cfg.model


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Instantiate the client for the configured provider.

    Args:
        llm_settings: Provider settings; defaults to ``settings.llm``.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    if provider == "openai":
        if not cfg.api_key:
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="OpenAI provider requires LLM_API_KEY environment variable",
                details={"provider": provider},
            )
        return OpenAIClient(
            api_key=cfg.api_key,
            model=cfg.model,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    if provider == "azure":
        if not cfg.api_key:
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="Azure provider requires LLM_API_KEY environment variable",
                details={"provider": provider},
            )
        if not cfg.azure_endpoint:
            raise ValidationAppError(
                code="llm_missing_endpoint",
                message="Azure provider requires LLM_AZURE_ENDPOINT environment variable",
                details={"provider": provider},
            )
        return AzureOpenAIClient(
            api_key=cfg.api_key,
            endpoint=cfg.azure_endpoint,
            deployment=active_model_name(cfg),
            api_version=cfg.azure_api_version,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ValidationAppError(
        code="llm_unknown_provider",
        message=(
            f"Unknown LLM provider: '{provider}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        ),
    )


def get_llm_client() -> AbstractLLMClient:
    """Return the process-wide client, building it on first use.

    The instance is built at most once per deployment mode and treated as
    read-only afterwards; it is rebuilt only if the mode flag changes.

    Raises:
        ValidationAppError: If the client cannot be configured.
    """
    global _client, _client_uses_azure

    uses_azure = settings.llm.uses_azure
    if _client is not None and _client_uses_azure == uses_azure:
        return _client

    with _client_lock:
        if _client is None or _client_uses_azure != uses_azure:
            _client = create_llm_client(settings.llm)
            _client_uses_azure = uses_azure
            logger.info(
                "llm.client_initialized",
                extra={
                    "provider": "azure" if uses_azure else "openai",
                    "model": _client.model,
                },
            )
        return _client


def reset_llm_client() -> None:
    """Drop the cached client (used by tests and config reloads)."""
    global _client, _client_uses_azure

    with _client_lock:
        _client = None
        _client_uses_azure = None


def validate_environment(llm_settings: LLMSettings | None = None) -> EnvironmentStatus:
    """Check generation credentials without making a request.

    Returns:
        EnvironmentStatus with ``is_valid`` False and a reason when the
        credentials are missing or malformed.
    """
    cfg = llm_settings or settings.llm

    if cfg.uses_azure:
        if not cfg.api_key:
            return EnvironmentStatus(
                is_valid=False,
                error="LLM_API_KEY environment variable is not set (required for Azure)",
            )
        if not cfg.azure_endpoint:
            return EnvironmentStatus(
                is_valid=False,
                error="LLM_AZURE_ENDPOINT environment variable is not set",
            )
        return EnvironmentStatus(is_valid=True)

    if cfg.provider.lower() not in SUPPORTED_PROVIDERS:
        return EnvironmentStatus(
            is_valid=False,
            error=f"Unknown LLM provider: '{cfg.provider}'",
        )

    if not cfg.api_key:
        return EnvironmentStatus(
            is_valid=False,
            error="LLM_API_KEY environment variable is not set",
        )

    if not cfg.api_key.startswith("sk-"):
        return EnvironmentStatus(
            is_valid=False,
            error="LLM_API_KEY appears to be invalid (should start with sk-)",
        )

    return EnvironmentStatus(is_valid=True)
