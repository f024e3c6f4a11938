"""Tests for single-job, multi-job and batch orchestration."""

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from screener.core.config import ScoringConfig
from screener.core.schemas import JobRequirement, MultiJobScoreSet, ScoreResult
from screener.pipeline.orchestrator import (
    export_report_json,
    job_keys,
    resolve_domain,
    score_many,
    score_one,
    screen_candidates,
)
from screener.pipeline.presets import PREDEFINED_JOBS
from screener.pipeline.scorer import score_for_domain as real_score_for_domain
from screener.pipeline.semantic import SemanticMatch, SemanticScorer
from screener.profile.extractor import extract_profile
from screener.profile.schema import CandidateProfile, Experience

ALL_PRESETS = list(PREDEFINED_JOBS.values())


@pytest.fixture
def finance_profile() -> CandidateProfile:
    return CandidateProfile(name="Sneha Iyer", skills=["accounting", "tally erp9", "excel"])


@pytest.fixture
def python_profile() -> CandidateProfile:
    return CandidateProfile(name="Ravi Kumar", skills=["python"])


@pytest.fixture
def general_job() -> JobRequirement:
    return JobRequirement(
        title="Automation Engineer",
        required_skills=["Python", "Go"],
        min_experience=0,
        max_experience=3,
        domain_category="general",
    )


def _semantic(**returns: object) -> MagicMock:
    semantic = MagicMock(spec=SemanticScorer)
    semantic.available = True
    semantic.classify_domain.return_value = None
    semantic.match.return_value = returns.get("match")
    semantic.explain.return_value = returns.get("explain", [])
    return semantic


# ---------------------------------------------------------------------------
# Domain resolution
# ---------------------------------------------------------------------------


class TestResolveDomain:
    def test_known_override_skips_classifier(self) -> None:
        with patch("screener.pipeline.orchestrator.classify") as mock_classify:
            assert resolve_domain(PREDEFINED_JOBS["finance_intern"]) == "finance"
        mock_classify.assert_not_called()

    def test_unknown_override_is_classified(self, caplog: pytest.LogCaptureFixture) -> None:
        job = JobRequirement(
            title="Accounts Executive",
            description="Accounting, audit and taxation work",
            domain_category="astrology",
        )
        with caplog.at_level(logging.WARNING, logger="screener.pipeline.orchestrator"):
            assert resolve_domain(job) == "finance"
        assert "unknown domain 'astrology'" in caplog.text

    def test_classification_threshold_from_config(self) -> None:
        job = JobRequirement(title="Network Technician", description="Keep things running")
        assert resolve_domain(job) == "general"
        assert resolve_domain(job, scoring=ScoringConfig(classification_threshold=1)) == "network_engineer"


# ---------------------------------------------------------------------------
# Single-job scoring
# ---------------------------------------------------------------------------


class TestScoreOne:
    def test_missing_candidate_is_invalid(self) -> None:
        result = score_one(None, PREDEFINED_JOBS["full_stack_developer"])
        assert result.score == 0
        assert result.valid is False
        assert result.reasons == ["Invalid candidate: no candidate profile"]
        assert result.domain_category == "general"
        assert result.job_title == "Full Stack Developer"

    def test_placeholder_candidate_is_invalid(self) -> None:
        result = score_one(CandidateProfile(skills=["python"]), PREDEFINED_JOBS["software_developer"])
        assert result.score == 0
        assert result.valid is False
        assert result.candidate_name == "Unknown Candidate"

    def test_valid_candidate_scored_by_job_domain(self, finance_profile: CandidateProfile) -> None:
        result = score_one(finance_profile, PREDEFINED_JOBS["finance_intern"])
        assert result.valid is True
        assert result.domain_category == "finance"
        assert result.score == 34
        assert result.candidate_name == "Sneha Iyer"

    def test_explicit_domain_wins(self, finance_profile: CandidateProfile) -> None:
        result = score_one(finance_profile, PREDEFINED_JOBS["full_stack_developer"], domain="finance")
        assert result.domain_category == "finance"

    def test_scorer_failure_falls_back_to_floor(
        self, finance_profile: CandidateProfile, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with (
            patch(
                "screener.pipeline.orchestrator.score_for_domain",
                side_effect=RuntimeError("boom"),
            ),
            caplog.at_level(logging.WARNING, logger="screener.pipeline.orchestrator"),
        ):
            result = score_one(finance_profile, PREDEFINED_JOBS["full_stack_developer"])

        assert result.score == 5
        assert result.valid is True
        assert result.reasons == ["Scoring error: boom"]
        assert result.domain_category == "full_stack_developer"
        assert "using floor score" in caplog.text

    def test_failure_floor_follows_config(self, finance_profile: CandidateProfile) -> None:
        with patch(
            "screener.pipeline.orchestrator.score_for_domain",
            side_effect=KeyError("missing"),
        ):
            result = score_one(
                finance_profile, PREDEFINED_JOBS["finance_intern"],
                scoring=ScoringConfig(score_floor=12),
            )
        assert result.score == 12


# ---------------------------------------------------------------------------
# Semantic notes
# ---------------------------------------------------------------------------


class TestSemanticNotes:
    def test_notes_never_change_score(
        self, python_profile: CandidateProfile, general_job: JobRequirement,
    ) -> None:
        baseline = score_one(python_profile, general_job)
        semantic = _semantic(
            match=SemanticMatch(
                score=90, strengths=["Python"], gaps=["Go"], recommendation="Strong match",
            ),
            explain=["Solid scripting background"],
        )

        result = score_one(python_profile, general_job, semantic=semantic)

        assert baseline.score == 70
        assert result.score == baseline.score
        assert result.semantic_enhanced is True
        assert result.reasons[: len(baseline.reasons)] == baseline.reasons
        assert result.reasons[len(baseline.reasons):] == [
            "Semantic match: 90% (Strong match)",
            "Semantic strengths: Python",
            "Semantic gaps: Go",
            "Semantic insight: Solid scripting background",
        ]

    def test_match_only_for_default_domain(self, finance_profile: CandidateProfile) -> None:
        semantic = _semantic()
        score_one(finance_profile, PREDEFINED_JOBS["finance_intern"], semantic=semantic)
        semantic.match.assert_not_called()

    def test_explain_outside_borderline_band_skipped(self, finance_profile: CandidateProfile) -> None:
        semantic = _semantic(explain=["unused"])
        result = score_one(finance_profile, PREDEFINED_JOBS["full_stack_developer"], semantic=semantic)
        assert result.score == 5
        semantic.explain.assert_not_called()
        assert result.semantic_enhanced is False

    def test_semantic_error_keeps_rule_based_result(
        self, python_profile: CandidateProfile, general_job: JobRequirement,
    ) -> None:
        semantic = _semantic()
        semantic.match.side_effect = RuntimeError("provider down")

        result = score_one(python_profile, general_job, semantic=semantic)

        assert result == score_one(python_profile, general_job)

    def test_unavailable_semantic_not_consulted(
        self, python_profile: CandidateProfile, general_job: JobRequirement,
    ) -> None:
        semantic = _semantic()
        semantic.available = False
        score_one(python_profile, general_job, semantic=semantic)
        semantic.match.assert_not_called()
        semantic.explain.assert_not_called()


# ---------------------------------------------------------------------------
# Multi-job scoring
# ---------------------------------------------------------------------------


class TestScoreMany:
    def test_one_result_per_job(self, finance_profile: CandidateProfile) -> None:
        result = score_many(finance_profile, ALL_PRESETS)
        assert list(result.scores) == [job.title for job in ALL_PRESETS]
        assert result.best_job.title == "Finance Intern"
        assert result.best_job.category == "finance"
        assert result.best_job.score == 34
        assert result.candidate_name == "Sneha Iyer"

    def test_best_is_maximum(self, finance_profile: CandidateProfile) -> None:
        result = score_many(finance_profile, ALL_PRESETS)
        assert result.best_job.score == max(r.score for r in result.scores.values())

    def test_tie_goes_to_first_job(self) -> None:
        profile = CandidateProfile(name="Asha Rao")
        jobs = [
            JobRequirement(title="Clerk A", domain_category="general"),
            JobRequirement(title="Clerk B", domain_category="general"),
        ]
        result = score_many(profile, jobs)
        assert result.scores["Clerk A"].score == result.scores["Clerk B"].score
        assert result.best_job.title == "Clerk A"

    def test_duplicate_titles_suffixed(self) -> None:
        job = JobRequirement(title="Clerk", domain_category="general")
        result = score_many(CandidateProfile(name="Asha Rao"), [job, job, job])
        assert list(result.scores) == ["Clerk", "Clerk (2)", "Clerk (3)"]

    def test_failure_isolated_to_one_job(self, finance_profile: CandidateProfile) -> None:
        def flaky(domain: str, *args: object, **kwargs: object) -> ScoreResult:
            if domain == "network_engineer":
                msg = "network tables corrupted"
                raise RuntimeError(msg)
            return real_score_for_domain(domain, *args, **kwargs)  # type: ignore[arg-type]

        with patch("screener.pipeline.orchestrator.score_for_domain", side_effect=flaky):
            result = score_many(finance_profile, ALL_PRESETS)

        assert result.scores["Network Engineer"].reasons == ["Scoring error: network tables corrupted"]
        assert result.scores["Finance Intern"].score == 34
        assert result.best_job.title == "Finance Intern"

    def test_invalid_candidate_scores_zero_everywhere(self) -> None:
        result = score_many(None, ALL_PRESETS)
        assert all(r.score == 0 and not r.valid for r in result.scores.values())
        assert result.best_job.score == 0
        assert result.best_job.title == ALL_PRESETS[0].title

    def test_executor_matches_sequential(self, finance_profile: CandidateProfile) -> None:
        with ThreadPoolExecutor(max_workers=3) as pool:
            parallel = score_many(finance_profile, ALL_PRESETS, executor=pool)
        assert parallel == score_many(finance_profile, ALL_PRESETS)

    def test_empty_jobs_rejected(self, finance_profile: CandidateProfile) -> None:
        with pytest.raises(ValueError, match="at least one job"):
            score_many(finance_profile, [])

    def test_domains_length_checked(self, finance_profile: CandidateProfile) -> None:
        with pytest.raises(ValueError, match="2 domains for 4 jobs"):
            score_many(finance_profile, ALL_PRESETS, domains=["finance", "general"])


class TestJobKeys:
    def test_unique_titles_unchanged(self) -> None:
        assert job_keys(ALL_PRESETS) == [job.title for job in ALL_PRESETS]

    def test_repeats_numbered(self) -> None:
        a = JobRequirement(title="Analyst")
        b = JobRequirement(title="Engineer")
        assert job_keys([a, b, a]) == ["Analyst", "Engineer", "Analyst (2)"]


# ---------------------------------------------------------------------------
# Batch screening
# ---------------------------------------------------------------------------


class TestScreenCandidates:
    def test_single_mode(self, finance_profile: CandidateProfile, python_profile: CandidateProfile) -> None:
        report = screen_candidates(
            [python_profile, finance_profile, None], PREDEFINED_JOBS["finance_intern"],
        )

        assert report.mode == "single"
        assert [r.candidate_name for r in report.results] == ["Ravi Kumar", "Sneha Iyer", ""]
        assert all(isinstance(r, ScoreResult) for r in report.results)
        stats = report.statistics
        assert stats.total_candidates == 3
        assert stats.top_score == 34
        assert stats.category_breakdown is None

    def test_single_job_list_is_single_mode(self, finance_profile: CandidateProfile) -> None:
        report = screen_candidates([finance_profile], [PREDEFINED_JOBS["finance_intern"]])
        assert report.mode == "single"

    def test_multi_mode(self, finance_profile: CandidateProfile, python_profile: CandidateProfile) -> None:
        report = screen_candidates([finance_profile, python_profile], ALL_PRESETS)

        assert report.mode == "multi"
        assert all(isinstance(r, MultiJobScoreSet) for r in report.results)
        assert report.statistics.total_candidates == 2
        breakdown = report.statistics.category_breakdown
        assert breakdown is not None
        assert sum(c.candidate_count for c in breakdown) == 2

    def test_each_job_classified_once(self, finance_profile: CandidateProfile) -> None:
        jobs = [
            JobRequirement(title="Bookkeeper", description="accounting and audit"),
            JobRequirement(title="Web Developer", description="frontend and backend"),
        ]
        profiles = [finance_profile] * 5
        with patch("screener.pipeline.orchestrator.classify", return_value="general") as mock_classify:
            screen_candidates(profiles, jobs)
        assert mock_classify.call_count == 2

    def test_cancelled_before_start(self, finance_profile: CandidateProfile) -> None:
        cancel = threading.Event()
        cancel.set()
        report = screen_candidates([finance_profile] * 3, ALL_PRESETS, cancel_event=cancel)
        assert report.results == []
        assert report.statistics.total_candidates == 0

    def test_no_jobs_rejected(self, finance_profile: CandidateProfile) -> None:
        with pytest.raises(ValueError, match="at least one job"):
            screen_candidates([finance_profile], [])

    def test_empty_batch(self) -> None:
        report = screen_candidates([], ALL_PRESETS)
        assert report.results == []
        assert report.statistics.average_score == 0
        assert report.statistics.category_breakdown == []

    def test_threshold_from_config(self, finance_profile: CandidateProfile) -> None:
        job = PREDEFINED_JOBS["finance_intern"]
        assert screen_candidates([finance_profile], job).statistics.qualified_candidates == 0
        report = screen_candidates([finance_profile], job, ScoringConfig(qualifying_threshold=30))
        assert report.statistics.qualified_candidates == 1

    def test_ranked_orders_by_score(
        self, finance_profile: CandidateProfile, python_profile: CandidateProfile,
    ) -> None:
        report = screen_candidates(
            [python_profile, finance_profile], PREDEFINED_JOBS["finance_intern"],
        )
        assert report.ranked()[0].candidate_name == "Sneha Iyer"

    def test_explicit_multi_mode_with_one_job(self, finance_profile: CandidateProfile) -> None:
        report = screen_candidates(
            [finance_profile], [PREDEFINED_JOBS["finance_intern"]], mode="multi",
        )
        assert report.mode == "multi"
        assert isinstance(report.results[0], MultiJobScoreSet)
        assert report.results[0].best_job.title == PREDEFINED_JOBS["finance_intern"].title
        breakdown = report.statistics.category_breakdown
        assert breakdown is not None
        assert [c.category for c in breakdown] == ["finance"]

    def test_explicit_single_mode_rejects_many_jobs(self, finance_profile: CandidateProfile) -> None:
        with pytest.raises(ValueError, match="single mode"):
            screen_candidates([finance_profile], ALL_PRESETS, mode="single")

    def test_candidate_pool_analytics(
        self, finance_profile: CandidateProfile, python_profile: CandidateProfile,
    ) -> None:
        report = screen_candidates(
            [finance_profile, python_profile, None], PREDEFINED_JOBS["finance_intern"],
        )
        pool = report.candidate_pool
        assert pool is not None
        assert pool.total_profiles == 2
        assert {s.skill for s in pool.top_skills} == {"accounting", "tally erp9", "excel", "python"}
        assert pool.experience_distribution[0].count == 2

    def test_top_skills_limit_from_config(self, finance_profile: CandidateProfile) -> None:
        report = screen_candidates(
            [finance_profile], PREDEFINED_JOBS["finance_intern"], ScoringConfig(top_skills_limit=1),
        )
        assert report.candidate_pool is not None
        assert len(report.candidate_pool.top_skills) == 1


class TestExportReportJson:
    def test_camel_case_keys(self, finance_profile: CandidateProfile) -> None:
        report = screen_candidates([finance_profile], PREDEFINED_JOBS["finance_intern"])
        data = json.loads(export_report_json(report))

        assert data["mode"] == "single"
        assert "skillsMatch" in data["results"][0]
        assert "domainCategory" in data["results"][0]
        assert data["statistics"]["totalCandidates"] == 1
        assert "scoreDistribution" in data["statistics"]

    def test_multi_mode_keys(self, finance_profile: CandidateProfile) -> None:
        report = screen_candidates([finance_profile], ALL_PRESETS)
        data = json.loads(export_report_json(report))
        assert data["results"][0]["bestJob"]["title"] == "Finance Intern"
        assert data["statistics"]["categoryBreakdown"][0]["candidateCount"] == 1


class TestFailingSemantic:
    @pytest.fixture
    def broken(self) -> MagicMock:
        semantic = _semantic()
        for method in (semantic.classify_domain, semantic.match, semantic.explain):
            method.side_effect = RuntimeError("backend down")
        return semantic

    def test_score_one_falls_back_to_keywords(
        self, finance_profile: CandidateProfile, broken: MagicMock,
    ) -> None:
        job = JobRequirement(title="Bookkeeper", description="Accounting and audit work")

        result = score_one(finance_profile, job, semantic=broken)

        assert result.domain_category == "finance"
        assert result == score_one(finance_profile, job)

    def test_score_many_returns_every_job(
        self, finance_profile: CandidateProfile, broken: MagicMock,
    ) -> None:
        jobs = [
            JobRequirement(title="Bookkeeper", description="Accounting and audit work"),
            JobRequirement(title="Platform Engineer", required_skills=["Python"]),
        ]
        result = score_many(finance_profile, jobs, semantic=broken)
        assert list(result.scores) == ["Bookkeeper", "Platform Engineer"]

    def test_domain_resolution_error_uses_default(self, finance_profile: CandidateProfile) -> None:
        job = JobRequirement(title="Bookkeeper", description="Accounting and audit work")
        with patch(
            "screener.pipeline.orchestrator.resolve_domain", side_effect=RuntimeError("catalog"),
        ):
            result = score_one(finance_profile, job)
        assert result.domain_category == "general"
        assert result.valid is True


class TestSkillLikeNames:
    def test_candidate_named_after_a_skill_is_scored(self, general_job: JobRequirement) -> None:
        profile = extract_profile("Ruby Patel\nSkills: Python, SQL\n")
        result = score_one(profile, general_job)
        assert result.candidate_name == "Ruby Patel"
        assert result.valid is True
        assert result.score > 0
