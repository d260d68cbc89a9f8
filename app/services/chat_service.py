"""Recruiter chat service: classify, retrieve, compose.

Handles one question at a time with no conversation state:
- Query validation
- Intent classification and entity extraction
- Resume evidence retrieval
- Answer generation through the response composer
"""

from __future__ import annotations

import logging

from app.core.config import AppSettings, settings
from app.core.errors import ValidationAppError
from app.schemas.chat import (
    ChatContext,
    ChatResponse,
    EvidenceSource,
    IntentClassificationResult,
)
from app.services.evidence_retriever import search_resume
from app.services.intent_classifier import classify_intent
from app.services.response_composer import ResponseComposer

logger = logging.getLogger(__name__)


class ChatService:
    """Answers recruiter questions about a single candidate.

    Attributes:
        composer: Builds the prompt and calls the text-generation client.
        app_settings: Limits for query length and evidence count.
    """

    def __init__(self, composer: ResponseComposer, app_settings: AppSettings | None = None) -> None:
        self.composer = composer
        self.app_settings = app_settings or settings.app

    def validate_query(self, query: str) -> str:
        """Reject blank or oversized questions.

        Raises:
            ValidationAppError: If the query is empty or too long.
        """
        stripped = query.strip() if query else ""
        if not stripped:
            raise ValidationAppError(
                code="query_empty",
                message="Query must not be empty.",
            )

        max_chars = self.app_settings.max_query_chars
        if len(stripped) > max_chars:
            raise ValidationAppError(
                code="query_too_long",
                message=f"Query is too long (maximum {max_chars} characters).",
                details={"max_value": max_chars, "actual_value": len(stripped)},
            )
        return stripped

    async def classify_intent(self, query: str) -> IntentClassificationResult:
        result = classify_intent(query)
        logger.info(
            "chat.intent_classified",
            extra={
                "intent": result.intent.value,
                "confidence": result.confidence,
                "entity_keys": sorted(result.entities),
            },
        )
        return result

    async def search_resume(self, resume_text: str | None, query: str) -> list[EvidenceSource]:
        evidence = search_resume(resume_text, query, limit=self.app_settings.max_evidence_items)
        logger.info(
            "chat.evidence_retrieved",
            extra={
                "evidence_count": len(evidence),
                "top_score": evidence[0].relevance_score if evidence else 0.0,
            },
        )
        return evidence

    async def answer(self, query: str, context: ChatContext) -> ChatResponse:
        """Run the full pipeline for one question.

        Args:
            query: The recruiter's question.
            context: Candidate context (resume, job description, evaluation).

        Returns:
            ChatResponse with the answer text, intent and supporting evidence.

        Raises:
            ValidationAppError: If the query is blank or too long.
        """
        query = self.validate_query(query)

        intent = await self.classify_intent(query)
        evidence = await self.search_resume(context.resume_text, query)
        answer = await self.composer.generate_response(query, context, intent, evidence)

        return ChatResponse(answer=answer, intent=intent, evidence=evidence)
