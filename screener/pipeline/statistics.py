"""Screening statistics: a pure reduction over a batch of results.

Score 0 marks an invalid candidate and is excluded from every average,
maximum and distribution bucket. It still counts toward
``total_candidates``.
"""

import logging
from collections.abc import Sequence

from screener.core.schemas import (
    CategoryStats,
    EducationCount,
    ExperienceBand,
    MultiJobScoreSet,
    PoolAnalytics,
    ScoreDistribution,
    ScoreResult,
    ScreeningMode,
    ScreeningStatistics,
    SkillCount,
    headline_score,
)
from screener.pipeline.matcher import round_half_up
from screener.profile.schema import EDUCATION_LEVELS, CandidateProfile

logger = logging.getLogger(__name__)

DEFAULT_QUALIFYING_THRESHOLD = 50

EXCELLENT_MIN = 80
GOOD_MIN = 60
AVERAGE_MIN = 40

TOP_SKILLS_LIMIT = 10

# (label, min years, max years exclusive); the last band is open-ended.
EXPERIENCE_BANDS: tuple[tuple[str, int, int | None], ...] = (
    ("Entry Level (0-2 yrs)", 0, 2),
    ("Junior (2-5 yrs)", 2, 5),
    ("Mid-Level (5-10 yrs)", 5, 10),
    ("Senior (10+ yrs)", 10, None),
)


def is_valid_score(score: int) -> bool:
    return 0 < score <= 100


def distribution(scores: Sequence[int]) -> ScoreDistribution:
    """Bucket valid scores: excellent ≥80, good [60,80), average [40,60), poor <40."""
    valid = [s for s in scores if is_valid_score(s)]
    return ScoreDistribution(
        excellent=sum(1 for s in valid if s >= EXCELLENT_MIN),
        good=sum(1 for s in valid if GOOD_MIN <= s < EXCELLENT_MIN),
        average=sum(1 for s in valid if AVERAGE_MIN <= s < GOOD_MIN),
        poor=sum(1 for s in valid if s < AVERAGE_MIN),
    )


def category_breakdown(results: Sequence[MultiJobScoreSet]) -> list[CategoryStats]:
    """Group valid candidates by their best job's category, in first-seen order."""
    groups: dict[str, list[int]] = {}
    for result in results:
        if is_valid_score(result.best_job.score):
            groups.setdefault(result.best_job.category, []).append(result.best_job.score)

    return [
        CategoryStats(
            category=category,
            candidate_count=len(scores),
            average_score=round_half_up(sum(scores) / len(scores)),
        )
        for category, scores in groups.items()
    ]


def aggregate(
    results: Sequence[ScoreResult | MultiJobScoreSet],
    mode: ScreeningMode = "single",
    qualifying_threshold: int = DEFAULT_QUALIFYING_THRESHOLD,
) -> ScreeningStatistics:
    """Summarise a batch of results.

    In ``multi`` mode each candidate is represented by its best job's score
    and a per-category breakdown is added. An empty batch yields all zeros.
    """
    total = len(results)
    scores = [headline_score(r) for r in results]
    valid = [s for s in scores if is_valid_score(s)]
    qualified = sum(1 for s in valid if s >= qualifying_threshold)

    breakdown = None
    if mode == "multi":
        breakdown = category_breakdown([r for r in results if isinstance(r, MultiJobScoreSet)])

    statistics = ScreeningStatistics(
        total_candidates=total,
        qualified_candidates=qualified,
        qualification_rate=round_half_up(qualified / total * 100) if total else 0,
        average_score=round_half_up(sum(valid) / len(valid)) if valid else 0,
        top_score=max(valid, default=0),
        score_distribution=distribution(valid),
        category_breakdown=breakdown,
    )

    if len(valid) < total:
        logger.debug("Excluded %d invalid results from statistics", total - len(valid))
    return statistics


# ---------------------------------------------------------------------------
# Candidate-pool analytics
# ---------------------------------------------------------------------------


def top_skills(
    profiles: Sequence[CandidateProfile | None], limit: int = TOP_SKILLS_LIMIT,
) -> list[SkillCount]:
    """Most common skills across a pool, most frequent first.

    Skills are compared lowercased; ties keep the order in which the skill
    was first seen.
    """
    counts: dict[str, int] = {}
    for profile in profiles:
        if profile is None:
            continue
        for skill in profile.skills:
            key = skill.strip().lower()
            if key:
                counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [SkillCount(skill=skill, count=count) for skill, count in ranked[:limit]]


def experience_distribution(profiles: Sequence[CandidateProfile | None]) -> list[ExperienceBand]:
    """Count candidates per experience band. Every band is listed, empty or not."""
    counts = [0] * len(EXPERIENCE_BANDS)
    for profile in profiles:
        if profile is None:
            continue
        years = profile.experience.years
        for i, (_, low, high) in enumerate(EXPERIENCE_BANDS):
            if years >= low and (high is None or years < high):
                counts[i] += 1
                break

    return [
        ExperienceBand(label=label, min_years=low, max_years=high, count=count)
        for (label, low, high), count in zip(EXPERIENCE_BANDS, counts, strict=True)
    ]


def education_distribution(profiles: Sequence[CandidateProfile | None]) -> list[EducationCount]:
    """Count candidates per highest credential, in ``EDUCATION_LEVELS`` order."""
    counts = dict.fromkeys(EDUCATION_LEVELS, 0)
    for profile in profiles:
        if profile is not None:
            counts[profile.education] += 1
    return [EducationCount(level=level, count=count) for level, count in counts.items()]


def analyze_pool(
    profiles: Sequence[CandidateProfile | None],
    top_skills_limit: int = TOP_SKILLS_LIMIT,
) -> PoolAnalytics:
    """Skill, experience and education breakdowns for a pool of profiles.

    Missing profiles (``None``) are left out; placeholder profiles are
    counted, since their skills and history were still extracted.
    """
    present = [p for p in profiles if p is not None]
    return PoolAnalytics(
        total_profiles=len(present),
        top_skills=top_skills(present, limit=top_skills_limit),
        experience_distribution=experience_distribution(present),
        education_distribution=education_distribution(present),
    )
