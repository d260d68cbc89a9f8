"""Prompt assembly and answer generation for recruiter chat.

The composer builds a two-message prompt (fixed system instruction plus a
per-request user message) and makes exactly one generation call. Every code
path returns displayable text: provider failures are mapped to fixed
messages and are never retried or re-raised.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from app.adapters.llm.base import AbstractLLMClient
from app.core.config import ChatSettings, settings
from app.schemas.chat import ChatContext, EvidenceSource, IntentClassificationResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are a professional HR Copilot AI, assisting a human recruiter during post-evaluation review of candidate resumes.

ROLE: You act as a context-aware analyst helping HR clarify doubts, explore resume evidence, understand evaluation outcomes, and identify hidden strengths or gaps. You are accurate, transparent, and always grounded in the candidate's actual documents and metadata.

FORMATTING RULES:
- Use clear, professional language without markdown formatting
- Never use asterisks for bold or italics
- Structure responses with clear paragraphs and proper spacing
- Use "quotation marks" when quoting from resumes
- Create lists with simple dashes or numbers

INPUTS: You receive candidate information including:
- Full parsed resume text
- Evaluation results (score 0-100, tier, gaps, summary, qualification status)
- Job description and must-have attributes
- Semantic similarity scores when available

RESPONSE GUIDELINES:
1. Start with a direct answer to the question
2. Provide evidence from the resume when relevant
3. Use clear paragraph breaks for readability
4. Quote specific sections when referencing the resume
5. End with actionable insights when appropriate

TONE:
- Professional yet conversational
- Confident but not overly formal
- Helpful and constructive
- Clear and easy to understand

EXPECTATIONS:
- Be concise, factual, and grounded in resume content
- Quote relevant resume sections using quotation marks
- Align with scoring system logic
- Never fabricate qualifications
- When comparing candidates, focus only on requested attributes
- Avoid speculation without clear evidence
"""

EMPTY_RESPONSE_MESSAGE = "I apologize, but I cannot provide a response at this time."
NO_EVIDENCE_MESSAGE = "No specific evidence found in resume."
CLOSING_INSTRUCTION = "Please provide a helpful, evidence-based response."

AUTH_ERROR_MESSAGE = (
    "Authentication failed. Please check that the OpenAI API key is correctly configured."
)
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment and try again."
QUOTA_MESSAGE = "OpenAI API quota exceeded. Please check your OpenAI account."
MODEL_ACCESS_MESSAGE = "Model access error. The API key may not have access to {model}."
GENERIC_ERROR_MESSAGE = (
    "I apologize, but I encountered an error while processing your request. "
    "Please check the server logs for more details."
)


@dataclass(frozen=True)
class GenerationErrorRule:
    """Maps provider error text containing any of ``markers`` to ``message``."""

    category: str
    markers: tuple[str, ...]
    message: str


# Checked top to bottom; an error matching several rules gets the first.
GENERATION_ERROR_RULES: tuple[GenerationErrorRule, ...] = (
    GenerationErrorRule("authentication", ("401", "Incorrect API key"), AUTH_ERROR_MESSAGE),
    GenerationErrorRule("rate_limit", ("429",), RATE_LIMIT_MESSAGE),
    GenerationErrorRule(
        "quota",
        ("insufficient_quota", "exceeded your current quota"),
        QUOTA_MESSAGE,
    ),
    GenerationErrorRule("model_access", ("model",), MODEL_ACCESS_MESSAGE),
)


def classify_generation_error(exc: BaseException) -> GenerationErrorRule | None:
    """Return the first rule whose marker appears in the error text."""
    text = str(exc)
    for rule in GENERATION_ERROR_RULES:
        if any(marker in text for marker in rule.markers):
            return rule
    return None


def map_generation_error(exc: BaseException, model: str) -> str:
    """Translate a generation failure into a user-safe sentence."""
    rule = classify_generation_error(exc)
    if rule is None:
        return GENERIC_ERROR_MESSAGE
    return rule.message.format(model=model)


def _format_score(value: int | float | None) -> str:
    # Missing and zero scores both render as N/A
    if not value:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_context_summary(context: ChatContext, job_preview_chars: int = 500) -> str:
    """Summarize the candidate context, one labelled line per present field.

    The job description is cut to ``job_preview_chars`` and always followed
    by ``...``, even when it was shorter than the limit.
    """
    evaluation = context.evaluation_result
    lines = [
        f"Candidate: {context.candidate_name}" if context.candidate_name else "",
        (
            f"Job Description: {context.job_description[:job_preview_chars]}..."
            if context.job_description
            else ""
        ),
        (
            f"Must-Have Attributes: {context.must_have_attributes}"
            if context.must_have_attributes
            else ""
        ),
        f"Evaluation Score: {_format_score(evaluation.scores.overall)}" if evaluation else "",
        f"Tier: {evaluation.tier}" if evaluation and evaluation.tier else "",
        (
            f"Evaluation Summary: {evaluation.explanation}"
            if evaluation and evaluation.explanation
            else ""
        ),
    ]
    return "\n".join(line for line in lines if line)


def build_evidence_block(evidence: Sequence[EvidenceSource]) -> str:
    if not evidence:
        return f"\n{NO_EVIDENCE_MESSAGE}"
    bullets = "\n".join(f"- {item.content}" for item in evidence)
    return f"\nRelevant Evidence:\n{bullets}"


def build_user_message(
    query: str,
    context: ChatContext,
    intent: IntentClassificationResult,
    evidence: Sequence[EvidenceSource],
    job_preview_chars: int = 500,
) -> str:
    """Assemble the per-request user message sent after the system prompt."""
    context_summary = build_context_summary(context, job_preview_chars)
    evidence_block = build_evidence_block(evidence)
    return (
        f"Context:\n{context_summary}\n\n"
        f"Query: {query}\n\n"
        f"Intent: {intent.intent.value} (confidence: {intent.confidence})"
        f"{evidence_block}\n\n"
        f"{CLOSING_INSTRUCTION}"
    )


class ResponseComposer:
    """Produces the final answer text for a classified, evidence-backed query.

    Attributes:
        client_provider: Zero-argument callable returning the LLM client.
            Called per request so a construction failure is reported as an answer.
        chat_settings: Generation parameters (temperature, top_p, max_tokens).
        provider: Deployment mode, ``openai`` or ``azure``; logged only.
    """

    def __init__(
        self,
        client_provider: Callable[[], AbstractLLMClient],
        chat_settings: ChatSettings | None = None,
        model_name: str = "gpt-4o-mini",
        job_preview_chars: int = 500,
        provider: str = "openai",
    ) -> None:
        self.client_provider = client_provider
        self.chat_settings = chat_settings or settings.chat
        self.model_name = model_name
        self.job_preview_chars = job_preview_chars
        self.provider = provider

    async def generate_response(
        self,
        query: str,
        context: ChatContext,
        intent: IntentClassificationResult,
        evidence: Sequence[EvidenceSource],
    ) -> str:
        """Generate a grounded answer; never raises.

        Args:
            query: The recruiter's question.
            context: Candidate context supplied by the caller.
            intent: Classification of ``query``.
            evidence: Ranked resume passages for ``query``.

        Returns:
            The generated text, a fixed apology when the model returned
            nothing, or a fixed error message when the call failed.
        """
        logger.debug(
            "chat.generation_started",
            extra={
                "provider": self.provider,
                "model": self.model_name,
                "has_candidate": bool(context.candidate_name),
                "has_resume_text": bool(context.resume_text),
                "has_evaluation": context.evaluation_result is not None,
                "intent": intent.intent.value,
                "evidence_count": len(evidence),
            },
        )
        if not context.resume_text:
            logger.warning("chat.missing_resume_text")

        user_message = build_user_message(
            query, context, intent, evidence, self.job_preview_chars
        )

        start = time.perf_counter()
        try:
            client = self.client_provider()
            answer = await client.complete(
                SYSTEM_PROMPT,
                user_message,
                temperature=self.chat_settings.temperature,
                top_p=self.chat_settings.top_p,
                max_tokens=self.chat_settings.max_tokens,
            )
        except Exception as exc:
            rule = classify_generation_error(exc)
            logger.error(
                "chat.generation_failed",
                extra={
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                    "error_category": rule.category if rule else "unknown",
                    "model": self.model_name,
                },
            )
            return map_generation_error(exc, self.model_name)

        logger.info(
            "chat.generation_succeeded",
            extra={
                "model": self.model_name,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                "empty": not answer,
            },
        )
        return answer or EMPTY_RESPONSE_MESSAGE
