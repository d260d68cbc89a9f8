"""LLM adapter layer - abstracts over the standard and Azure OpenAI deployments."""

from app.adapters.llm.azure_client import AzureOpenAIClient
from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import (
    active_model_name,
    create_llm_client,
    get_llm_client,
    reset_llm_client,
    validate_environment,
)
from app.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "AzureOpenAIClient",
    "OpenAIClient",
    "active_model_name",
    "create_llm_client",
    "get_llm_client",
    "reset_llm_client",
    "validate_environment",
]
