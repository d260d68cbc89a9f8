"""Rule-based intent classification for recruiter questions.

Rules are an ordered table. Intents are tried in declaration order and rules
within an intent in listed order; the first rule that matches decides the
intent. A query matching rules of two intents is reported as the earlier one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from app.schemas.chat import ChatIntent, IntentClassificationResult
from app.services.entity_extractor import extract_entities

MATCH_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.3


@dataclass(frozen=True)
class IntentRule:
    """A single case-insensitive pattern that signals ``intent``."""

    intent: ChatIntent
    pattern: str
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", re.compile(self.pattern, re.IGNORECASE))

    def matches(self, query: str) -> bool:
        return self.compiled.search(query) is not None


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        ChatIntent.RESUME_DETAIL_INQUIRY,
        r"did they mention|do they have|where.*show|what.*experience",
    ),
    IntentRule(ChatIntent.RESUME_DETAIL_INQUIRY, r"background in|skilled in|familiar with"),
    IntentRule(
        ChatIntent.EVALUATION_CHALLENGE,
        r"why.*qualified|why.*score|why.*ranked|what.*wrong",
    ),
    IntentRule(ChatIntent.EVALUATION_CHALLENGE, r"reason.*failed|explanation.*tier"),
    IntentRule(
        ChatIntent.CANDIDATE_COMPARISON,
        r"stronger than|better than|compare.*to|versus|vs\.",
    ),
    IntentRule(ChatIntent.CANDIDATE_COMPARISON, r"who.*better|which.*candidate"),
    IntentRule(
        ChatIntent.SKILL_VERIFICATION,
        r"where.*leadership|demonstrate.*skills|show.*ability",
    ),
    IntentRule(ChatIntent.SKILL_VERIFICATION, r"evidence.*of|proof.*of"),
    IntentRule(ChatIntent.EXPERIENCE_ANALYSIS, r"years.*experience|how long|duration.*work"),
    IntentRule(ChatIntent.EXPERIENCE_ANALYSIS, r"career.*length|time.*in"),
    IntentRule(
        ChatIntent.AMBIGUITY_CHECK,
        r"justified|reasonable|fair.*assessment|accurate",
    ),
    IntentRule(ChatIntent.AMBIGUITY_CHECK, r"should.*be.*higher|seems.*low"),
)


def classify_intent(
    query: str,
    rules: Sequence[IntentRule] = INTENT_RULES,
) -> IntentClassificationResult:
    """Assign exactly one intent to ``query`` (first match wins).

    Args:
        query: Free-text recruiter question.
        rules: Ordered rule table; defaults to ``INTENT_RULES``.

    Returns:
        The first matching intent with confidence 0.8, or ``unknown`` with
        confidence 0.3. Entities are extracted in both cases.
    """
    entities = extract_entities(query)

    for rule in rules:
        if rule.matches(query):
            return IntentClassificationResult(
                intent=rule.intent,
                confidence=MATCH_CONFIDENCE,
                entities=entities,
            )

    return IntentClassificationResult(
        intent=ChatIntent.UNKNOWN,
        confidence=FALLBACK_CONFIDENCE,
        entities=entities,
    )
