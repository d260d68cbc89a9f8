"""Pattern-based extraction of structured hints from recruiter questions.

This is not a general entity recognizer: it looks for a fixed vocabulary of
technologies, skills and credentials, plus a "N years of experience" claim.
"""

from __future__ import annotations

import re
from typing import Iterable

# Order matters: at a given position the first listed alternative wins,
# e.g. "AWS Certified" is reported as "AWS".
TECHNOLOGY_TERMS: tuple[str, ...] = (
    "JavaScript",
    "Python",
    "React",
    "Node.js",
    "AWS",
    "Azure",
    "Docker",
    "Kubernetes",
    "SQL",
    "MongoDB",
    "Git",
    "Java",
    "C++",
    "HTML",
    "CSS",
    "API",
    "REST",
    "GraphQL",
    "TypeScript",
    "Vue",
    "Angular",
    "PHP",
    "Ruby",
    "Go",
    "Rust",
    "Swift",
    "Kotlin",
    "Android",
    "iOS",
    "Linux",
    "Windows",
    "macOS",
    "Jenkins",
    "CI/CD",
    "DevOps",
    "Agile",
    "Scrum",
    "Machine Learning",
    "AI",
    "Data Science",
    "Analytics",
    "Cloud",
    "Database",
    "Security",
    "Testing",
    "QA",
    "UI/UX",
    "Design",
    "Marketing",
    "Sales",
    "Management",
    "Leadership",
    "Communication",
    "Project Management",
    "Certification",
    "Degree",
    "Bachelor",
    "Master",
    "PhD",
    "PMP",
    "Scrum Master",
    "AWS Certified",
    "Microsoft Certified",
)

EXPERIENCE_YEARS_PATTERN = re.compile(
    r"(\d+)\s*(?:years?|yrs?)\s*(?:of\s*)?(?:experience|exp)",
    re.IGNORECASE,
)


def compile_vocabulary(terms: Iterable[str]) -> re.Pattern[str]:
    """Build one case-insensitive, word-bounded alternation over ``terms``."""
    alternation = "|".join(re.escape(term) for term in terms)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


_TECHNOLOGY_PATTERN = compile_vocabulary(TECHNOLOGY_TERMS)


def extract_entities(
    query: str,
    vocabulary: re.Pattern[str] = _TECHNOLOGY_PATTERN,
) -> dict[str, str]:
    """Pull technology mentions and years-of-experience claims out of a query.

    Args:
        query: Free-text recruiter question.
        vocabulary: Compiled vocabulary pattern; defaults to ``TECHNOLOGY_TERMS``.

    Returns:
        Mapping with ``technologies`` (comma-separated matches in order of
        appearance, duplicates kept, original casing) and/or
        ``experience_years`` (the integer as text). Empty when nothing matches.
    """
    entities: dict[str, str] = {}
    if not query:
        return entities

    mentions = vocabulary.findall(query)
    if mentions:
        entities["technologies"] = ", ".join(mentions)

    experience = EXPERIENCE_YEARS_PATTERN.search(query)
    if experience:
        entities["experience_years"] = experience.group(1)

    return entities
