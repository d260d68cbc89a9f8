"""Lexical evidence retrieval over resume text.

Resumes are split into sentence-like units and each unit is scored by the
share of query terms it contains as substrings. This is plain term overlap,
not semantic search.
"""

from __future__ import annotations

import re

from app.schemas.chat import EvidenceSource

MAX_EVIDENCE_ITEMS = 5

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def split_sentences(text: str) -> list[str]:
    """Split on runs of ``.``, ``!`` or ``?`` and drop blank units.

    Returned units are stripped. ``Sentence N`` locators number these
    surviving units starting at 1.
    """
    return [unit.strip() for unit in _SENTENCE_BOUNDARY.split(text) if unit.strip()]


def tokenize_query(query: str) -> list[str]:
    """Lower-case whitespace tokens; no stop words removed, no stemming."""
    return query.lower().split()


def score_sentence(sentence: str, terms: list[str]) -> float:
    """Fraction of ``terms`` present anywhere in ``sentence`` (case-insensitive).

    Each term counts once regardless of how often it occurs.
    """
    if not terms:
        return 0.0
    lowered = sentence.lower()
    hits = sum(1 for term in terms if term in lowered)
    return hits / len(terms)


def search_resume(
    resume_text: str | None,
    query: str,
    limit: int = MAX_EVIDENCE_ITEMS,
) -> list[EvidenceSource]:
    """Rank resume sentences by overlap with ``query``.

    Args:
        resume_text: Full resume text; empty or None yields no evidence.
        query: Recruiter question.
        limit: Maximum number of passages to return; never more than
            ``MAX_EVIDENCE_ITEMS``.

    Returns:
        At most ``limit`` evidence items with non-zero score, highest score
        first; equal scores keep resume order.
    """
    if not resume_text:
        return []

    terms = tokenize_query(query)
    if not terms:
        return []

    scored: list[EvidenceSource] = []
    for position, sentence in enumerate(split_sentences(resume_text), start=1):
        score = score_sentence(sentence, terms)
        if score > 0:
            scored.append(
                EvidenceSource(
                    content=sentence,
                    relevance_score=score,
                    location=f"Sentence {position}",
                )
            )

    # sorted() is stable, so ties stay in resume order
    ranked = sorted(scored, key=lambda item: item.relevance_score, reverse=True)
    return ranked[: min(limit, MAX_EVIDENCE_ITEMS)]
