"""Core data models for the screening engine.

All records are frozen: a new model is produced instead of patching one.
Attributes are snake_case; dumping with ``by_alias=True`` yields the
camelCase field names the persistence layer expects.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

UNKNOWN_CANDIDATE = "Unknown Candidate"
NOT_SPECIFIED = "Not Specified"
MAX_EXPERIENCE_YEARS = 50


class FrozenModel(BaseModel):
    """Shared config: immutable, camelCase aliases, populate by field name."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class JobRequirement(FrozenModel):
    """A caller-supplied job posting, validated once at ingress."""

    title: str
    description: str = ""
    required_skills: list[str] = Field(default_factory=list)
    min_experience: float = Field(default=0, ge=0, le=MAX_EXPERIENCE_YEARS)
    max_experience: float = Field(default=10, ge=0, le=MAX_EXPERIENCE_YEARS)
    education_preference: str = ""
    domain_category: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            msg = "title must be at least 2 characters long"
            raise ValueError(msg)
        return v

    @field_validator("required_skills", mode="before")
    @classmethod
    def split_skills(cls, v: object) -> object:
        if isinstance(v, str):
            return v.split(",")
        return v

    @field_validator("required_skills")
    @classmethod
    def clean_skills(cls, v: list[str]) -> list[str]:
        seen: set[str] = set()
        cleaned: list[str] = []
        for skill in v:
            skill = skill.strip()
            if skill and skill.lower() not in seen:
                seen.add(skill.lower())
                cleaned.append(skill)
        return cleaned

    @field_validator("domain_category")
    @classmethod
    def normalize_category(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip().lower()

    @model_validator(mode="after")
    def experience_range_ordered(self) -> "JobRequirement":
        if self.min_experience > self.max_experience:
            msg = "min_experience cannot be greater than max_experience"
            raise ValueError(msg)
        return self


class SkillsMatch(FrozenModel):
    """Required skills found in / missing from a candidate's skill set."""

    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    percentage: int = Field(default=0, ge=0, le=100)


class ScoreResult(FrozenModel):
    """Outcome of scoring one candidate against one job.

    ``reasons`` is the ordered audit trail: one entry per evaluated step.
    A score of 0 together with ``valid=False`` marks invalid input.
    """

    score: int = Field(ge=0, le=100)
    skills_match: SkillsMatch = Field(default_factory=SkillsMatch)
    experience_match: bool = False
    education_match: bool = False
    domain_penalty: int = Field(default=0, ge=0)
    experience_penalty: int = Field(default=0, ge=0)
    reasons: list[str] = Field(default_factory=list)
    domain_category: str = "general"
    candidate_name: str = ""
    job_title: str = ""
    valid: bool = True
    semantic_enhanced: bool = False


class BestJob(FrozenModel):
    """The job a candidate scored highest against."""

    title: str
    score: int = Field(ge=0, le=100)
    category: str


class MultiJobScoreSet(FrozenModel):
    """Per-job results for one candidate, keyed by job title."""

    candidate_name: str
    scores: dict[str, ScoreResult]
    best_job: BestJob


class ScoreDistribution(FrozenModel):
    """Counts of valid scores per band: >=80, [60,80), [40,60), <40."""

    excellent: int = 0
    good: int = 0
    average: int = 0
    poor: int = 0


class CategoryStats(FrozenModel):
    """Candidates whose best job falls in one domain category."""

    category: str
    candidate_count: int
    average_score: int


class ScreeningStatistics(FrozenModel):
    """Summary over a batch of results."""

    total_candidates: int = 0
    qualified_candidates: int = 0
    qualification_rate: int = 0
    average_score: int = 0
    top_score: int = 0
    score_distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)
    category_breakdown: list[CategoryStats] | None = None


class SkillCount(FrozenModel):
    """How many candidates in a pool list one skill."""

    skill: str
    count: int


class ExperienceBand(FrozenModel):
    """Candidates whose years fall in ``[min_years, max_years)``; no max is open-ended."""

    label: str
    min_years: int
    max_years: int | None = None
    count: int = 0


class EducationCount(FrozenModel):
    """Candidates whose highest credential is ``level``."""

    level: str
    count: int = 0


class PoolAnalytics(FrozenModel):
    """Descriptive statistics over the candidate profiles of a batch."""

    total_profiles: int = 0
    top_skills: list[SkillCount] = Field(default_factory=list)
    experience_distribution: list[ExperienceBand] = Field(default_factory=list)
    education_distribution: list[EducationCount] = Field(default_factory=list)


ScreeningMode = Literal["single", "multi"]


class ScreeningReport(FrozenModel):
    """A full batch response: per-candidate results plus statistics."""

    mode: ScreeningMode
    results: list[ScoreResult | MultiJobScoreSet] = Field(default_factory=list)
    statistics: ScreeningStatistics = Field(default_factory=ScreeningStatistics)
    candidate_pool: PoolAnalytics | None = None

    def ranked(self) -> list[ScoreResult | MultiJobScoreSet]:
        """Results ordered by score descending; ties keep input order."""
        return sorted(self.results, key=lambda r: -headline_score(r))


def headline_score(result: ScoreResult | MultiJobScoreSet) -> int:
    """The single score that represents a result in rankings and statistics."""
    if isinstance(result, MultiJobScoreSet):
        return result.best_job.score
    return result.score
