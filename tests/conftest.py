"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set here, before any test module imports
``app.core.config``, so the global settings instance is built from them and
no .env file is read.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from app.schemas.chat import ChatContext, EvaluationResult, EvaluationScores  # noqa: E402


SAMPLE_RESUME = (
    "Jane Doe is a senior backend engineer. "
    "She led a team of 6 engineers building payment APIs in Python! "
    "Deployed services on AWS with Docker and Kubernetes. "
    "Holds a Bachelor degree in Computer Science? "
    "Enjoys hiking."
)


@pytest.fixture
def sample_context() -> ChatContext:
    """Candidate context with every field populated."""
    return ChatContext(
        candidate_name="Jane Doe",
        resume_text=SAMPLE_RESUME,
        job_description="Senior Python engineer for a payments platform.",
        must_have_attributes="Python, AWS, team leadership",
        evaluation_result=EvaluationResult(
            scores=EvaluationScores(overall=82),
            tier="Top Tier",
            gaps=["No Go experience"],
            explanation="Strong backend background with leadership.",
        ),
    )


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """LLM client double whose ``complete`` returns a fixed answer."""
    client = MagicMock()
    client.model = "gpt-4o-mini"
    client.complete = AsyncMock(return_value="Jane led a team of 6 engineers.")
    return client
