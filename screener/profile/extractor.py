"""Rule-based résumé text → CandidateProfile extraction.

Every field is recovered independently and best-effort: a field that cannot
be found falls back to its default instead of failing the whole profile.
The only error raised is EmptyInputError for blank input.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from screener.core.errors import EmptyInputError
from screener.core.schemas import MAX_EXPERIENCE_YEARS, NOT_SPECIFIED, UNKNOWN_CANDIDATE
from screener.profile.schema import CandidateProfile, Experience
from screener.profile.vocabulary import (
    NAME_SKIP_TOOLS,
    NAME_SKIP_WORDS,
    SECTION_HEADERS,
    SKILL_PATTERNS,
    SKILL_SECTION_HEADERS,
    SKILL_SET,
)

if TYPE_CHECKING:
    from screener.pipeline.semantic import SemanticScorer

logger = logging.getLogger(__name__)

MAX_SKILLS = 25

# Line windows for the name cascade.
_HEADER_WINDOW = 10
_CAPS_WINDOW = (10, 40)
_TITLE_WINDOW = (10, 30)

_NAME_WORD = re.compile(r"^[A-Za-z][A-Za-z.'-]*$")
_LONG_DIGITS = re.compile(r"\d{3,}")
_CAPITALIZED_RUN = re.compile(r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+){1,3}\b")
_LINE_WORDS = re.compile(r"[a-z][a-z.+#]*")

_EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_NOISE = re.compile(r"[\s\-()]")
# Indian mobile numbers: optional +91 / 91 / 0 prefix, ten digits starting 6-9.
_MOBILE = re.compile(r"(?<!\d)(?:\+?91|0)?([6-9]\d{9})(?!\d)")

_EXPERIENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s*(?:of\s+)?(?:experience|exp)\b", re.IGNORECASE),
    re.compile(r"\b(?:experience|exp)[\s:]*(\d+)\+?\s*(?:years?|yrs?)\b", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s+(?:in|as|of)\b", re.IGNORECASE),
    re.compile(r"\b(?:at|with)\s+\w+\s*\((\d+)\s*(?:years?|yrs?)\)", re.IGNORECASE),
)
_FRESHER = re.compile(r"\bfresher\b|\bfresh graduate\b", re.IGNORECASE)
_INTERN = re.compile(r"\bintern(?:ship)?s?\b", re.IGNORECASE)

# Highest credential first; the first level that matches wins.
_EDUCATION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("PhD", re.compile(r"\bph\.?\s?d\b|\bdoctorate\b|\bdoctor of philosophy\b", re.IGNORECASE)),
    ("Master's", re.compile(
        r"\bmaster(?:'?s)?\s+(?:of|in|degree)\b|\bm\.\s?tech\b|\bmtech\b|\bm\.\s?sc\b"
        r"|\bmsc\b|\bmca\b|\bmba\b|\bm\.\s?com\b|\bmcom\b",
        re.IGNORECASE,
    )),
    ("Bachelor's", re.compile(
        r"\bbachelor(?:'?s)?\b|\bb\.\s?tech\b|\bbtech\b|\bb\.\s?sc\b|\bbsc\b|\bbca\b"
        r"|\bb\.\s?com\b|\bbcom\b|\bbba\b|\bb\.\s?e\b\.?(?=[\s,]|$)",
        re.IGNORECASE,
    )),
    ("Diploma", re.compile(r"\bdiploma\b", re.IGNORECASE)),
    ("12th", re.compile(r"\b12th\b|\bhigher secondary\b|\bhsc\b|\+2\b", re.IGNORECASE)),
    ("10th", re.compile(r"\b10th\b|\bsecondary school\b|\bsslc\b|\bssc\b|\bmatriculation\b", re.IGNORECASE)),
)
_EDUCATION_DETAIL_MAX = 120

# Confidence contributions
_BASE_CONFIDENCE = 20
_NAME_BONUS = 30
_EMAIL_BONUS = 25
_PHONE_BONUS = 15
_SKILLS_BONUS = 25
_EXPERIENCE_BONUS = 5


def load_resume_text(path: str | Path) -> str:
    """Read already-decoded résumé text from a file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Resume file not found: {path}"
        raise FileNotFoundError(msg)
    return path.read_text(encoding="utf-8", errors="replace")


def extract_profile(
    text: str,
    *,
    max_skills: int = MAX_SKILLS,
    semantic: SemanticScorer | None = None,
    min_skills_before_augment: int = 5,
) -> CandidateProfile:
    """Parse raw résumé text into a CandidateProfile.

    Args:
        text: Plain résumé text, already decoded by the caller.
        max_skills: Cap on the number of skills kept.
        semantic: Optional augmentation capability; only consulted when the
            rule-based pass found fewer than ``min_skills_before_augment`` skills.
        min_skills_before_augment: Threshold for asking ``semantic`` for skills.

    Returns:
        A best-effort CandidateProfile.

    Raises:
        EmptyInputError: If ``text`` is empty or whitespace only.
    """
    if not text or not text.strip():
        msg = "Empty or whitespace-only resume text"
        raise EmptyInputError(msg)

    name = extract_name(text)
    email = extract_email(text)
    phone = extract_phone(text)
    skills = extract_skills(text, max_skills=max_skills)
    experience = extract_experience(text)
    education, education_detail = extract_education(text)

    semantic_enhanced = False
    if semantic is not None and semantic.available and len(skills) < min_skills_before_augment:
        try:
            extra = [s.strip().lower() for s in semantic.augment_skills(text) if s.strip()]
        except Exception:
            logger.warning("Semantic skill augmentation failed - keeping rule-based skills", exc_info=True)
            extra = []
        merged = _dedupe(skills + extra)[:max_skills]
        if len(merged) > len(skills):
            logger.debug("Semantic augmentation added %d skills", len(merged) - len(skills))
            skills = merged
            semantic_enhanced = True

    confidence = _confidence(name, email, phone, skills, experience)

    logger.info(
        "Extracted profile '%s': %d skills, %d years, %s (confidence %d)",
        name, len(skills), experience.years, education, confidence,
    )

    return CandidateProfile(
        name=name,
        email=email,
        phone=phone,
        skills=skills,
        experience=experience,
        education=education,
        education_detail=education_detail,
        confidence=confidence,
        semantic_enhanced=semantic_enhanced,
        raw_text=text,
    )


# ---------------------------------------------------------------------------
# Name
# ---------------------------------------------------------------------------


def extract_name(text: str) -> str:
    """Find the candidate's name with a first-match-wins cascade.

    1. A 1-4 word alphabetic line among the first lines.
    2. An ALL CAPS 2-4 word line deeper in the document.
    3. A Title Case 2-4 word line deeper in the document.
    4. Any capitalized 2-4 word run anywhere in the text.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]

    for line in lines[:_HEADER_WINDOW]:
        if _looks_like_name(line, min_words=1):
            logger.debug("Name found in header lines: %s", line)
            return line

    start, end = _CAPS_WINDOW
    for line in lines[start:end]:
        if line.isupper() and _looks_like_name(line, min_words=2):
            logger.debug("Name found as ALL CAPS line: %s", line)
            return _title_case(line)

    start, end = _TITLE_WINDOW
    for line in lines[start:end]:
        if _is_title_case(line) and _looks_like_name(line, min_words=2):
            logger.debug("Name found as Title Case line: %s", line)
            return line

    for match in _CAPITALIZED_RUN.finditer(text):
        candidate = match.group(0)
        if not _has_skip_term(candidate):
            logger.debug("Name found by document-wide fallback: %s", candidate)
            return candidate

    logger.debug("No name found, using default")
    return UNKNOWN_CANDIDATE


def _looks_like_name(line: str, *, min_words: int) -> bool:
    if "@" in line or _LONG_DIGITS.search(line):
        return False
    if not 2 <= len(line) <= 50:
        return False
    words = line.split()
    if not min_words <= len(words) <= 4:
        return False
    if not all(_NAME_WORD.match(word) for word in words):
        return False
    return not _has_skip_term(line)


def _has_skip_term(line: str) -> bool:
    lower = line.lower()
    for word in _LINE_WORDS.findall(lower):
        word = word.rstrip(".")
        if word in NAME_SKIP_WORDS or word in NAME_SKIP_TOOLS:
            return True
    return any(" " in term and pattern.search(lower) for term, pattern in SKILL_PATTERNS)


def _is_title_case(line: str) -> bool:
    return all(word[0].isupper() and not word.isupper() for word in line.split() if len(word) > 1)


def _title_case(line: str) -> str:
    return " ".join(word[0].upper() + word[1:].lower() for word in line.split())


# ---------------------------------------------------------------------------
# Contact details
# ---------------------------------------------------------------------------


def extract_email(text: str) -> str | None:
    """Return the first email address in the text, lowercased."""
    match = _EMAIL.search(text)
    return match.group(0).lower() if match else None


def extract_phone(text: str) -> str | None:
    """Return a ten-digit mobile number with any country code stripped."""
    normalized = _PHONE_NOISE.sub("", text)
    match = _MOBILE.search(normalized)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def extract_skills(text: str, *, max_skills: int = MAX_SKILLS) -> list[str]:
    """Union of vocabulary hits in the whole text and tokens of the skills section."""
    found = [term for term, pattern in SKILL_PATTERNS if pattern.search(text)]
    found.extend(_skills_from_section(text))
    return _dedupe(found)[:max_skills]


def _skills_from_section(text: str) -> list[str]:
    section = _skills_section(text)
    if not section:
        return []
    skills: list[str] = []
    for chunk in re.split(r"[,;|•·\t\n]", section):
        chunk = chunk.strip(" .-*:").lower()
        if not 2 <= len(chunk) <= 30:
            continue
        if chunk in SKILL_SET:
            skills.append(chunk)
            continue
        skills.extend(word for word in chunk.split() if word in SKILL_SET)
    return skills


def _skills_section(text: str) -> str:
    """Return the body of the first skills section, up to the next header."""
    collected: list[str] = []
    inside = False
    for line in text.splitlines():
        header, _, rest = line.strip().partition(":")
        key = header.strip().lower()
        if inside:
            if _is_section_header(line):
                break
            collected.append(line)
        elif key in SKILL_SECTION_HEADERS:
            inside = True
            if rest.strip():
                collected.append(rest)
    return "\n".join(collected)


def _is_section_header(line: str) -> bool:
    key = line.strip().rstrip(":").strip().lower()
    if key in SECTION_HEADERS:
        return True
    head = line.strip().partition(":")[0].strip().lower()
    return head in SECTION_HEADERS and len(head.split()) <= 3


# ---------------------------------------------------------------------------
# Experience and education
# ---------------------------------------------------------------------------


def extract_experience(text: str) -> Experience:
    """Largest "N years of experience" style figure, capped at 50."""
    years = 0
    for pattern in _EXPERIENCE_PATTERNS:
        for match in pattern.finditer(text):
            years = max(years, min(int(match.group(1)), MAX_EXPERIENCE_YEARS))

    positions: list[str] = []
    if years == 0:
        if _FRESHER.search(text):
            positions.append("Fresher")
        if _INTERN.search(text):
            positions.append("Intern")

    return Experience(years=years, positions=positions)


def extract_education(text: str) -> tuple[str, str | None]:
    """Highest credential level and the line it was found on."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for level, pattern in _EDUCATION_PATTERNS:
        for line in lines:
            if pattern.search(line):
                return level, line[:_EDUCATION_DETAIL_MAX]
    return NOT_SPECIFIED, None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _confidence(
    name: str,
    email: str | None,
    phone: str | None,
    skills: list[str],
    experience: Experience,
) -> int:
    confidence = _BASE_CONFIDENCE
    if name != UNKNOWN_CANDIDATE:
        confidence += _NAME_BONUS
    if email:
        confidence += _EMAIL_BONUS
    if phone:
        confidence += _PHONE_BONUS
    if skills:
        confidence += _SKILLS_BONUS
    if experience.years > 0 or experience.positions:
        confidence += _EXPERIENCE_BONUS
    return min(100, confidence)


def _dedupe(skills: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for skill in skills:
        key = skill.lower()
        if key not in seen:
            seen.add(key)
            result.append(key)
    return result
