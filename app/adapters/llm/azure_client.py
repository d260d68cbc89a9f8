"""Azure OpenAI LLM client adapter."""

from openai import AsyncAzureOpenAI

from app.adapters.llm.openai_client import OpenAIClient


class AzureOpenAIClient(OpenAIClient):
    """Client for an Azure OpenAI deployment.

    Azure routes requests by deployment name, so ``model`` holds the
    deployment rather than the underlying model id.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        deployment: str,
        api_version: str,
        timeout_seconds: float = 45.0,
    ) -> None:
        self.client = AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            azure_deployment=deployment,
            api_version=api_version,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = deployment
        self.endpoint = endpoint
