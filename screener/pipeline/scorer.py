"""Rule-based domain scoring for candidate/job pairs.

Score range: floor-100 (clamped), 0 is reserved for invalid input.
Every domain shares one algorithm driven by its DomainSpec:

  skill score   = Σ matched/total × weight over the taxonomy, plus text bonuses
  experience    = experience_score(years, min, max)  (may carry a penalty)
  education     = education_relevance(education, domain)
  mismatch      = fixed penalty if skills point at another domain
  final         = clamp(skill + experience + education - penalties, floor, 100)

Each step appends a reason, so ``ScoreResult.reasons`` reads as an audit trail.
"""

import logging
import re
from collections.abc import Callable
from typing import NamedTuple

from screener.core.schemas import NOT_SPECIFIED, JobRequirement, ScoreResult
from screener.pipeline.domains import (
    DomainCatalog,
    DomainSpec,
    MismatchRule,
    SkillCategory,
    TextBonus,
    default_catalog,
)
from screener.pipeline.matcher import count_markers, match_category, round_half_up, strict_skill_match
from screener.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)

DEFAULT_SCORE_FLOOR = 5
MAX_SCORE = 100

# Education relevance points
EDUCATION_HIGHLY_RELEVANT = 15
EDUCATION_SOMEWHAT_RELEVANT = 10
EDUCATION_GENERAL = 7
EDUCATION_UNSPECIFIED = 5
EDUCATION_NOT_RELEVANT = 3
EDUCATION_MATCH_MIN = EDUCATION_SOMEWHAT_RELEVANT

# Entry-level roles (min experience 0)
FRESHER_PERFECT_MATCH = 15
ENTRY_LEVEL_SOME_EXPERIENCE = 18
ENTRY_LEVEL_OVERQUALIFIED = 12
ENTRY_LEVEL_MAX_YEARS = 2

# Experienced roles
EXPERIENCE_IN_RANGE = 20
EXPERIENCE_ABOVE_MAX = 15


class ExperienceAssessment(NamedTuple):
    score: int
    penalty: int
    reason: str


class EducationAssessment(NamedTuple):
    score: int
    reason: str


def experience_score(candidate_years: float, min_exp: float, max_exp: float) -> ExperienceAssessment:
    """Score a candidate's years against a job's experience range.

    Entry-level roles (``min_exp == 0``) never carry a penalty. For other
    roles, falling short of the minimum costs a penalty that grows with the
    gap, and a candidate with no experience at all is penalised by how much
    the role requires.
    """
    years = _fmt(candidate_years)

    if min_exp == 0:
        if candidate_years == 0:
            return ExperienceAssessment(FRESHER_PERFECT_MATCH, 0, "Fresher role - perfect match")
        if candidate_years <= ENTRY_LEVEL_MAX_YEARS:
            return ExperienceAssessment(
                ENTRY_LEVEL_SOME_EXPERIENCE, 0, f"Experience: {years} years (good for entry-level)",
            )
        return ExperienceAssessment(
            ENTRY_LEVEL_OVERQUALIFIED, 0, f"Experience: {years} years (may be overqualified)",
        )

    if min_exp <= candidate_years <= max_exp:
        return ExperienceAssessment(EXPERIENCE_IN_RANGE, 0, f"Experience: {years} years (ideal for role)")
    if candidate_years > max_exp:
        return ExperienceAssessment(EXPERIENCE_ABOVE_MAX, 0, f"Experience: {years} years (above maximum)")

    if candidate_years > 0:
        gap = min_exp - candidate_years
        if gap <= 1:
            return ExperienceAssessment(
                12, 10, f"Experience: {years} years (1 year below minimum, -10 penalty)",
            )
        if gap <= 2:
            return ExperienceAssessment(
                8, 15, f"Experience: {years} years (2 years below minimum, -15 penalty)",
            )
        return ExperienceAssessment(
            5, 20, f"Experience: {years} years ({_fmt(gap)} years below minimum, -20 penalty)",
        )

    required = _fmt(min_exp)
    if min_exp <= 1:
        return ExperienceAssessment(
            8, 15, f"Fresher (role requires {required} year, -15 penalty - trainable)",
        )
    if min_exp <= 2:
        return ExperienceAssessment(5, 20, f"Fresher (role requires {required} years, -20 penalty)")
    return ExperienceAssessment(
        3, 25, f"Fresher (role requires {required}+ years, -25 penalty - significant gap)",
    )


def education_relevance(education: str | None, domain: DomainSpec) -> EducationAssessment:
    """Grade a candidate's education against a domain's three-tier table."""
    if not education or not education.strip():
        return EducationAssessment(EDUCATION_UNSPECIFIED, "No education specified")

    lower = education.lower()
    tiers = domain.education
    if any(kw in lower for kw in tiers.highly_relevant):
        return EducationAssessment(EDUCATION_HIGHLY_RELEVANT, f"Highly relevant education: {education}")
    if any(kw in lower for kw in tiers.somewhat_relevant):
        return EducationAssessment(EDUCATION_SOMEWHAT_RELEVANT, f"Somewhat relevant education: {education}")
    if any(kw in lower for kw in tiers.not_relevant):
        return EducationAssessment(EDUCATION_NOT_RELEVANT, f"Education not ideal for this role: {education}")
    return EducationAssessment(EDUCATION_GENERAL, f"General education: {education}")


def score_domain(
    profile: CandidateProfile,
    job: JobRequirement,
    domain: DomainSpec,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    """Score a candidate against a job using ``domain``'s tables."""
    reasons: list[str] = []
    skills = profile.skills

    # Skill taxonomy
    skill_score = 0.0
    taxonomy = _taxonomy_for(domain, job)
    if domain.uses_required_skills and not taxonomy:
        reasons.append("No required skills listed for this job")
    for category in taxonomy:
        matches = match_category(skills, category.skills)
        skill_score += len(matches) / len(category.skills) * category.weight
        if matches:
            reasons.append(
                f"{category.name}: {', '.join(matches)} ({len(matches)}/{len(category.skills)})"
            )

    # Text evidence bonuses
    text = profile.raw_text.lower()
    for bonus in domain.bonuses:
        points, reason = _apply_bonus(bonus, text)
        if points:
            skill_score += points
            reasons.append(reason)

    if domain.skill_cap is not None:
        skill_score = min(domain.skill_cap, skill_score)

    # Experience
    experience = experience_score(profile.experience.years, job.min_experience, job.max_experience)
    reasons.append(experience.reason)

    # Education
    education = education_relevance(_education_text(profile), domain)
    reasons.append(education.reason)

    # Domain mismatch: at most one rule fires
    domain_penalty = 0
    rule = _triggered_mismatch(domain, job, skills, skill_score)
    if rule is not None:
        domain_penalty = rule.penalty
        reasons.append(rule.reason.format(penalty=rule.penalty))

    total = skill_score + experience.score + education.score - domain_penalty - experience.penalty
    final = max(floor, min(MAX_SCORE, round_half_up(total)))

    logger.debug(
        "%s vs '%s' [%s]: skills %.1f, experience %d (-%d), education %d, mismatch -%d -> %d",
        profile.name, job.title, domain.name, skill_score, experience.score,
        experience.penalty, education.score, domain_penalty, final,
    )

    return ScoreResult(
        score=final,
        skills_match=strict_skill_match(skills, job.required_skills),
        experience_match=profile.experience.years >= job.min_experience,
        education_match=education.score >= EDUCATION_MATCH_MIN,
        domain_penalty=domain_penalty,
        experience_penalty=experience.penalty,
        reasons=reasons,
        domain_category=domain.name,
        candidate_name=profile.name,
        job_title=job.title,
    )


# ---------------------------------------------------------------------------
# Per-domain scorers
# ---------------------------------------------------------------------------

Scorer = Callable[..., ScoreResult]


def score_network_engineer(
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog | None = None,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    return score_domain(profile, job, _spec(catalog, "network_engineer"), floor)


def score_full_stack_developer(
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog | None = None,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    return score_domain(profile, job, _spec(catalog, "full_stack_developer"), floor)


def score_software_developer(
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog | None = None,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    return score_domain(profile, job, _spec(catalog, "software_developer"), floor)


def score_finance(
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog | None = None,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    return score_domain(profile, job, _spec(catalog, "finance"), floor)


def score_general(
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog | None = None,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    """Unclassified jobs: the job's own required skills form the taxonomy."""
    catalog = catalog or default_catalog()
    return score_domain(profile, job, catalog.default, floor)


DOMAIN_SCORERS: dict[str, Scorer] = {
    "network_engineer": score_network_engineer,
    "full_stack_developer": score_full_stack_developer,
    "software_developer": score_software_developer,
    "finance": score_finance,
    "general": score_general,
}


def score_for_domain(
    domain_name: str,
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog | None = None,
    floor: int = DEFAULT_SCORE_FLOOR,
) -> ScoreResult:
    """Dispatch to the scorer registered for ``domain_name``.

    Catalog domains without a dedicated scorer use the shared algorithm
    directly; unknown names use the catalog's default domain.
    """
    catalog = catalog or default_catalog()
    scorer = DOMAIN_SCORERS.get(domain_name)
    if scorer is not None and catalog.get(domain_name) is not None:
        return scorer(profile, job, catalog, floor)
    domain = catalog.get(domain_name) or catalog.default
    return score_domain(profile, job, domain, floor)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _spec(catalog: DomainCatalog | None, name: str) -> DomainSpec:
    catalog = catalog or default_catalog()
    domain = catalog.get(name)
    if domain is None:
        msg = f"Domain '{name}' is not in the catalog"
        raise KeyError(msg)
    return domain


def _taxonomy_for(domain: DomainSpec, job: JobRequirement) -> tuple[SkillCategory, ...]:
    if not domain.uses_required_skills:
        return domain.taxonomy
    if not job.required_skills:
        return ()
    return (SkillCategory(name="required", weight=100, skills=tuple(job.required_skills)),)


def _apply_bonus(bonus: TextBonus, text: str) -> tuple[float, str]:
    found = [m.group(0).strip() for m in (re.search(p, text) for p in bonus.patterns) if m]
    if bonus.mode == "all":
        points = bonus.points if len(found) == len(bonus.patterns) else 0.0
    elif bonus.mode == "each":
        points = bonus.points * len(found)
    else:
        points = bonus.points if found else 0.0
    if not points:
        return 0.0, ""
    return points, bonus.reason.format(points=_fmt(points), matches=", ".join(found))


def _triggered_mismatch(
    domain: DomainSpec, job: JobRequirement, skills: list[str], skill_score: float,
) -> MismatchRule | None:
    rules = [domain.mismatch] if domain.mismatch is not None else []
    rules.extend(domain.title_mismatches)
    for rule in rules:
        if not rule.applies_to(job.title):
            continue
        if rule.below_skill_score is not None and skill_score >= rule.below_skill_score:
            continue
        if len(count_markers(skills, rule.markers)) >= rule.min_hits:
            return rule
    return None


def _education_text(profile: CandidateProfile) -> str | None:
    if profile.education == NOT_SPECIFIED and not profile.education_detail:
        return None
    if profile.education_detail:
        return profile.education_detail
    return profile.education


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
