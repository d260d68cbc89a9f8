"""Pydantic schemas for recruiter chat requests and responses.

Models serialize with camelCase aliases (``candidateName``, ``relevanceScore``)
to match the browser client, and accept snake_case field names as well.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatIntent(str, Enum):
    """Closed set of question categories a recruiter query can fall into."""

    RESUME_DETAIL_INQUIRY = "resume_detail_inquiry"
    EVALUATION_CHALLENGE = "evaluation_challenge"
    CANDIDATE_COMPARISON = "candidate_comparison"
    SKILL_VERIFICATION = "skill_verification"
    EXPERIENCE_ANALYSIS = "experience_analysis"
    AMBIGUITY_CHECK = "ambiguity_check"
    UNKNOWN = "unknown"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IntentClassificationResult(_CamelModel):
    """Outcome of classifying a single query."""

    model_config = ConfigDict(frozen=True)

    intent: ChatIntent
    confidence: float = Field(..., ge=0.0, le=1.0)
    entities: dict[str, str] = Field(
        default_factory=dict,
        description="Structured hints pulled from the query (technologies, experience_years).",
    )


class EvidenceSource(_CamelModel):
    """A resume excerpt supporting an answer, ranked by term overlap."""

    model_config = ConfigDict(frozen=True)

    type: Literal["resume"] = "resume"
    content: str = Field(..., description="One sentence-like unit of resume text.")
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    location: str = Field(..., description="Human-readable locator, e.g. 'Sentence 3'.")


class EvaluationScores(_CamelModel):
    """Scores from a prior evaluation; only ``overall`` is read here."""

    model_config = ConfigDict(extra="allow")

    overall: int | float | None = None


class EvaluationResult(_CamelModel):
    scores: EvaluationScores = Field(default_factory=EvaluationScores)
    tier: str | None = None
    gaps: list[str] = Field(default_factory=list)
    explanation: str | None = None


class ChatContext(_CamelModel):
    """Everything known about the candidate under discussion. Read-only."""

    model_config = ConfigDict(frozen=True)

    candidate_name: str | None = None
    resume_text: str | None = None
    job_description: str | None = None
    must_have_attributes: str | None = None
    evaluation_result: EvaluationResult | None = None


class ChatRequest(_CamelModel):
    query: str = Field(..., min_length=1, description="The recruiter's question.")
    context: ChatContext = Field(default_factory=ChatContext)


class IntentRequest(_CamelModel):
    query: str = Field(..., min_length=1)


class EvidenceRequest(_CamelModel):
    query: str = Field(..., min_length=1)
    resume_text: str = ""


class ChatResponse(_CamelModel):
    """Answer plus the classification and evidence it was grounded on."""

    answer: str
    intent: IntentClassificationResult
    evidence: list[EvidenceSource] = Field(default_factory=list)


class EnvironmentStatus(_CamelModel):
    """Result of checking the text-generation credentials."""

    is_valid: bool
    error: str | None = None
