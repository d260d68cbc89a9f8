"""OpenAI LLM client adapter."""

from typing import Any

from openai import AsyncOpenAI

from app.adapters.llm.base import AbstractLLMClient


class OpenAIClient(AbstractLLMClient):
    """Client for the standard OpenAI chat completions API.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Transport timeout for requests in seconds.
        """
        self.client: Any = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def complete(
        self,
        system_message: str,
        user_message: str,
        *,
        temperature: float,
        top_p: float,
        max_tokens: int,
    ) -> str:
        """Send one chat completion request and return the reply text.

        SDK exceptions are not wrapped: their text (status code, error type)
        is what callers inspect to pick a user-facing message.
        """
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_message},
            ],
            temperature=temperature,
            top_p=top_p,
            max_tokens=max_tokens,
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
