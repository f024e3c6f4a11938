"""Skill matching primitives shared by the domain scorers.

Two skills match when, after normalisation, they are equal or one contains
the other. Terms shorter than three characters (``js``, ``ml``) only match
as whole words so they do not hit inside unrelated skills.
"""

import logging
import re

from screener.core.schemas import SkillsMatch

logger = logging.getLogger(__name__)

_SHORT_TERM = 3


def normalize_skill(skill: str) -> str:
    """Lowercase, trim and collapse inner whitespace."""
    return " ".join(str(skill).lower().split())


def skills_overlap(candidate_skill: str, reference_skill: str) -> bool:
    """True if the skills are equal or one is a substring of the other."""
    a = normalize_skill(candidate_skill)
    b = normalize_skill(reference_skill)
    if not a or not b:
        return False
    if a == b:
        return True
    return _contains(a, b) or _contains(b, a)


def _contains(haystack: str, needle: str) -> bool:
    if len(needle) < _SHORT_TERM:
        return re.search(rf"(?<![a-z0-9]){re.escape(needle)}(?![a-z0-9])", haystack) is not None
    return needle in haystack


def has_skill(candidate_skills: list[str], reference_skill: str) -> bool:
    """True if any candidate skill overlaps ``reference_skill``."""
    return any(skills_overlap(skill, reference_skill) for skill in candidate_skills)


def match_category(candidate_skills: list[str], category_skills: tuple[str, ...]) -> list[str]:
    """Category skills present in the candidate's skill set, in category order."""
    return [skill for skill in category_skills if has_skill(candidate_skills, skill)]


def strict_skill_match(candidate_skills: list[str], required_skills: list[str]) -> SkillsMatch:
    """Compare a candidate's skills with a job's required skills.

    ``matched`` and ``missing`` keep the job's spelling and order.
    ``percentage`` is 0 when the job lists no required skills.
    """
    matched: list[str] = []
    missing: list[str] = []
    for required in required_skills:
        if has_skill(candidate_skills, required):
            matched.append(required)
        else:
            missing.append(required)

    percentage = 0
    if required_skills:
        percentage = round_half_up(len(matched) / len(required_skills) * 100)

    return SkillsMatch(matched=matched, missing=missing, percentage=percentage)


def count_markers(candidate_skills: list[str], markers: tuple[str, ...]) -> list[str]:
    """Markers that appear inside any candidate skill."""
    hits: list[str] = []
    normalized = [normalize_skill(s) for s in candidate_skills]
    for marker in markers:
        marker = normalize_skill(marker)
        if any(_contains(skill, marker) for skill in normalized):
            hits.append(marker)
    return hits


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    if value < 0:
        return -round_half_up(-value)
    return int(value + 0.5)
