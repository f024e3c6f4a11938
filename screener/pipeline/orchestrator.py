"""Orchestrator: wires classification, domain scoring, semantic notes and statistics.

Data flow for one (candidate, job) unit:
  1. Validate the candidate (placeholder → score 0, valid=False)
  2. Resolve the job's domain (explicit override, else classifier)
  3. Domain scorer → ScoreResult (scorer errors → floor-score fallback)
  4. Optional semantic notes appended to reasons

Nothing here raises for a bad candidate or a failing scorer: every unit ends
as a marked ScoreResult so a batch always completes.
"""

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Executor, ThreadPoolExecutor

from screener.core.config import ScoringConfig, SemanticConfig
from screener.core.errors import InvalidCandidateError, ScoringFailure
from screener.core.schemas import (
    BestJob,
    JobRequirement,
    MultiJobScoreSet,
    ScoreResult,
    ScreeningMode,
    ScreeningReport,
)
from screener.pipeline.classifier import classify
from screener.pipeline.domains import DomainCatalog, default_catalog
from screener.pipeline.scorer import score_for_domain
from screener.pipeline.semantic import SemanticScorer
from screener.pipeline.statistics import aggregate, analyze_pool
from screener.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)


def resolve_domain(
    job: JobRequirement,
    *,
    catalog: DomainCatalog | None = None,
    scoring: ScoringConfig | None = None,
    semantic: SemanticScorer | None = None,
    semantic_config: SemanticConfig | None = None,
) -> str:
    """Domain for a job: its explicit ``domain_category`` if known, else classified."""
    catalog = catalog or default_catalog()
    scoring = scoring or ScoringConfig()
    semantic_config = semantic_config or SemanticConfig()

    if job.domain_category:
        if catalog.get(job.domain_category) is not None:
            return job.domain_category
        logger.warning(
            "Job '%s' names unknown domain '%s' - classifying instead",
            job.title, job.domain_category,
        )

    return classify(
        job.title,
        job.description,
        job.required_skills,
        catalog=catalog,
        min_hits=scoring.classification_threshold,
        semantic=semantic,
        min_confidence=semantic_config.min_confidence,
    )


def score_one(
    profile: CandidateProfile | None,
    job: JobRequirement,
    *,
    domain: str | None = None,
    catalog: DomainCatalog | None = None,
    scoring: ScoringConfig | None = None,
    semantic: SemanticScorer | None = None,
    semantic_config: SemanticConfig | None = None,
) -> ScoreResult:
    """Score one candidate against one job. Never raises.

    ``domain`` skips classification when the caller has already resolved it
    (batch screening classifies each job once).
    """
    catalog = catalog or default_catalog()
    scoring = scoring or ScoringConfig()
    semantic_config = semantic_config or SemanticConfig()

    try:
        _check_candidate(profile)
    except InvalidCandidateError as e:
        logger.info("Skipping scoring for '%s': %s", job.title, e)
        return ScoreResult(
            score=0,
            valid=False,
            reasons=[f"Invalid candidate: {e}"],
            domain_category=catalog.default_category,
            candidate_name=profile.name if profile is not None else "",
            job_title=job.title,
        )

    if domain is None:
        try:
            domain = resolve_domain(
                job, catalog=catalog, scoring=scoring,
                semantic=semantic, semantic_config=semantic_config,
            )
        except Exception:
            logger.warning(
                "Classifying '%s' failed - using '%s'", job.title, catalog.default_category,
                exc_info=True,
            )
            domain = catalog.default_category

    try:
        result = _run_scorer(domain, profile, job, catalog, scoring.score_floor)
    except ScoringFailure as failure:
        logger.warning(
            "Scoring %s for '%s' failed in %s - using floor score",
            profile.name, job.title, failure.domain, exc_info=True,
        )
        return ScoreResult(
            score=scoring.score_floor,
            reasons=[f"Scoring error: {failure.error}"],
            domain_category=failure.domain,
            candidate_name=profile.name,
            job_title=job.title,
        )

    if semantic is not None and semantic.available:
        result = _add_semantic_notes(result, profile, job, catalog, semantic, semantic_config)

    logger.debug("%s vs '%s': %d (%s)", profile.name, job.title, result.score, domain)
    return result


def score_many(
    profile: CandidateProfile | None,
    jobs: Sequence[JobRequirement],
    *,
    domains: Sequence[str] | None = None,
    catalog: DomainCatalog | None = None,
    scoring: ScoringConfig | None = None,
    semantic: SemanticScorer | None = None,
    semantic_config: SemanticConfig | None = None,
    executor: Executor | None = None,
) -> MultiJobScoreSet:
    """Score one candidate against every job and pick the best match.

    Each job is scored independently, so one failing job never affects the
    others. Results are keyed by job title (duplicates get a `` (n)`` suffix)
    and ``best_job`` is the highest score, ties going to the earliest job.

    Raises:
        ValueError: If ``jobs`` is empty or ``domains`` does not match it.
    """
    if not jobs:
        msg = "at least one job is required for multi-job scoring"
        raise ValueError(msg)
    if domains is not None and len(domains) != len(jobs):
        msg = f"got {len(domains)} domains for {len(jobs)} jobs"
        raise ValueError(msg)

    resolved = list(domains) if domains is not None else [None] * len(jobs)
    kwargs = {
        "catalog": catalog, "scoring": scoring,
        "semantic": semantic, "semantic_config": semantic_config,
    }

    if executor is not None:
        futures = [
            executor.submit(score_one, profile, job, domain=domain, **kwargs)
            for job, domain in zip(jobs, resolved, strict=True)
        ]
        results = [f.result() for f in futures]
    else:
        results = [
            score_one(profile, job, domain=domain, **kwargs)
            for job, domain in zip(jobs, resolved, strict=True)
        ]

    keys = job_keys(jobs)
    best_index = 0
    for i, result in enumerate(results):
        if result.score > results[best_index].score:
            best_index = i
    best = results[best_index]

    return MultiJobScoreSet(
        candidate_name=profile.name if profile is not None else "",
        scores=dict(zip(keys, results, strict=True)),
        best_job=BestJob(title=keys[best_index], score=best.score, category=best.domain_category),
    )


def screen_candidates(
    profiles: Sequence[CandidateProfile | None],
    jobs: JobRequirement | Sequence[JobRequirement],
    scoring: ScoringConfig | None = None,
    *,
    catalog: DomainCatalog | None = None,
    semantic: SemanticScorer | None = None,
    semantic_config: SemanticConfig | None = None,
    mode: ScreeningMode | None = None,
    cancel_event: threading.Event | None = None,
) -> ScreeningReport:
    """Screen a batch of candidates against one job (single mode) or many (multi mode).

    ``mode`` defaults to single for exactly one job and multi otherwise. Passing
    ``"multi"`` with one job still yields per-candidate ``MultiJobScoreSet``s
    and a category breakdown.

    Candidates are scored on a thread pool of ``scoring.max_workers``;
    results keep input order. Setting ``cancel_event`` stops any candidate
    not yet started; the report then covers the completed ones only.

    Raises:
        ValueError: If no job is given, or single mode is asked for with several jobs.
    """
    catalog = catalog or default_catalog()
    scoring = scoring or ScoringConfig()
    semantic_config = semantic_config or SemanticConfig()

    job_list = [jobs] if isinstance(jobs, JobRequirement) else list(jobs)
    if not job_list:
        msg = "at least one job is required for screening"
        raise ValueError(msg)
    if mode is None:
        mode = "single" if len(job_list) == 1 else "multi"
    elif mode == "single" and len(job_list) > 1:
        msg = f"single mode takes one job, got {len(job_list)}"
        raise ValueError(msg)

    # Classify each job once for the whole batch
    domains = [
        resolve_domain(
            job, catalog=catalog, scoring=scoring,
            semantic=semantic, semantic_config=semantic_config,
        )
        for job in job_list
    ]
    for job, domain in zip(job_list, domains, strict=True):
        logger.info("Job '%s' → %s", job.title, domain)

    kwargs = {
        "catalog": catalog, "scoring": scoring,
        "semantic": semantic, "semantic_config": semantic_config,
    }

    def unit(profile: CandidateProfile | None) -> ScoreResult | MultiJobScoreSet | None:
        if cancel_event is not None and cancel_event.is_set():
            return None
        if mode == "single":
            return score_one(profile, job_list[0], domain=domains[0], **kwargs)
        return score_many(profile, job_list, domains=domains, **kwargs)

    with ThreadPoolExecutor(max_workers=scoring.max_workers, thread_name_prefix="screen") as pool:
        futures = [pool.submit(unit, profile) for profile in profiles]
        outcomes = [f.result() for f in futures]

    results = [r for r in outcomes if r is not None]
    if len(results) < len(outcomes):
        logger.info(
            "Screening cancelled: %d of %d candidates scored", len(results), len(outcomes),
        )

    statistics = aggregate(results, mode=mode, qualifying_threshold=scoring.qualifying_threshold)
    logger.info(
        "Screened %d candidates (%s mode): %d qualified, average %d, top %d",
        statistics.total_candidates, mode, statistics.qualified_candidates,
        statistics.average_score, statistics.top_score,
    )

    pool_analytics = analyze_pool(profiles, top_skills_limit=scoring.top_skills_limit)

    return ScreeningReport(
        mode=mode, results=results, statistics=statistics, candidate_pool=pool_analytics,
    )


def export_report_json(report: ScreeningReport) -> str:
    """Export a screening report as a JSON string with camelCase field names."""
    return report.model_dump_json(by_alias=True, indent=2)


def job_keys(jobs: Sequence[JobRequirement]) -> list[str]:
    """Job titles, with `` (2)``, `` (3)``... appended to repeated titles."""
    seen: dict[str, int] = {}
    keys: list[str] = []
    for job in jobs:
        count = seen.get(job.title, 0) + 1
        seen[job.title] = count
        keys.append(job.title if count == 1 else f"{job.title} ({count})")
    return keys


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_candidate(profile: CandidateProfile | None) -> None:
    if profile is None:
        msg = "no candidate profile"
        raise InvalidCandidateError(msg)
    if profile.is_placeholder:
        msg = "candidate name could not be extracted"
        raise InvalidCandidateError(msg)


def _run_scorer(
    domain: str,
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog,
    floor: int,
) -> ScoreResult:
    try:
        return score_for_domain(domain, profile, job, catalog, floor)
    except Exception as e:
        raise ScoringFailure(domain, e) from e


def _add_semantic_notes(
    result: ScoreResult,
    profile: CandidateProfile,
    job: JobRequirement,
    catalog: DomainCatalog,
    semantic: SemanticScorer,
    config: SemanticConfig,
) -> ScoreResult:
    """Append advisory semantic reasons. The numeric score is left untouched."""
    notes: list[str] = []
    try:
        if result.domain_category == catalog.default_category:
            match = semantic.match(profile, job, result.domain_category)
            if match is not None:
                verdict = f" ({match.recommendation})" if match.recommendation else ""
                notes.append(f"Semantic match: {match.score}%{verdict}")
                if match.strengths:
                    notes.append(f"Semantic strengths: {', '.join(match.strengths)}")
                if match.gaps:
                    notes.append(f"Semantic gaps: {', '.join(match.gaps)}")

        if config.borderline_low <= result.score <= config.borderline_high:
            notes.extend(f"Semantic insight: {r}" for r in semantic.explain(profile, job, result.score))
    except Exception:
        logger.warning(
            "Semantic notes for %s / '%s' failed - keeping rule-based reasons",
            profile.name, job.title, exc_info=True,
        )
        return result

    if not notes:
        return result
    return result.model_copy(update={"reasons": [*result.reasons, *notes], "semantic_enhanced": True})
