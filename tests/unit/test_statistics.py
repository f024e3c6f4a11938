"""Tests for screening statistics aggregation."""

import pytest

from screener.core.schemas import BestJob, MultiJobScoreSet, ScoreResult
from screener.pipeline.statistics import (
    aggregate,
    analyze_pool,
    category_breakdown,
    distribution,
    education_distribution,
    experience_distribution,
    is_valid_score,
    top_skills,
)
from screener.profile.schema import CandidateProfile, Experience


def _result(score: int) -> ScoreResult:
    return ScoreResult(score=score, valid=score > 0)


def _profile(skills: list[str], years: int = 0, education: str = "Not Specified") -> CandidateProfile:
    return CandidateProfile(
        name="Test Candidate",
        skills=skills,
        experience=Experience(years=years),
        education=education,
    )


def _multi(name: str, score: int, category: str) -> MultiJobScoreSet:
    return MultiJobScoreSet(
        candidate_name=name,
        scores={},
        best_job=BestJob(title=f"{category} job", score=score, category=category),
    )


class TestIsValidScore:
    @pytest.mark.parametrize(("score", "valid"), [(0, False), (1, True), (100, True), (101, False)])
    def test_range(self, score: int, valid: bool) -> None:
        assert is_valid_score(score) is valid


class TestDistribution:
    def test_band_boundaries(self) -> None:
        dist = distribution([80, 79, 60, 59, 40, 39])
        assert (dist.excellent, dist.good, dist.average, dist.poor) == (1, 2, 2, 1)

    def test_invalid_scores_not_bucketed(self) -> None:
        dist = distribution([0, 0, 5])
        assert dist.poor == 1
        assert dist.excellent + dist.good + dist.average == 0


class TestAggregate:
    def test_empty_batch(self) -> None:
        stats = aggregate([])
        assert stats.total_candidates == 0
        assert stats.qualified_candidates == 0
        assert stats.qualification_rate == 0
        assert stats.average_score == 0
        assert stats.top_score == 0
        assert stats.category_breakdown is None

    def test_invalid_scores_excluded(self) -> None:
        stats = aggregate([_result(s) for s in (85, 65, 45, 20, 0)])

        assert stats.total_candidates == 5
        assert stats.qualified_candidates == 2
        assert stats.qualification_rate == 40
        # (85 + 65 + 45 + 20) / 4 = 53.75
        assert stats.average_score == 54
        assert stats.top_score == 85
        dist = stats.score_distribution
        assert (dist.excellent, dist.good, dist.average, dist.poor) == (1, 1, 1, 1)

    def test_all_invalid(self) -> None:
        stats = aggregate([_result(0), _result(0)])
        assert stats.total_candidates == 2
        assert stats.average_score == 0
        assert stats.top_score == 0
        assert stats.qualification_rate == 0

    @pytest.mark.parametrize(("threshold", "qualified"), [(40, 3), (50, 2), (60, 2), (90, 0)])
    def test_threshold(self, threshold: int, qualified: int) -> None:
        stats = aggregate(
            [_result(s) for s in (85, 65, 45, 20)], qualifying_threshold=threshold,
        )
        assert stats.qualified_candidates == qualified
        assert stats.qualified_candidates <= stats.total_candidates

    def test_rates_round_half_up(self) -> None:
        assert aggregate([_result(50), _result(51)]).average_score == 51
        assert aggregate([_result(70), _result(10), _result(10)]).qualification_rate == 33
        assert aggregate([_result(70), _result(70), _result(10)]).qualification_rate == 67

    def test_multi_mode_uses_best_job(self) -> None:
        results = [
            _multi("A", 80, "finance"),
            _multi("B", 60, "full_stack_developer"),
            _multi("C", 71, "finance"),
            _multi("D", 0, "general"),
        ]
        stats = aggregate(results, mode="multi")

        assert stats.total_candidates == 4
        assert stats.top_score == 80
        assert stats.qualified_candidates == 3
        assert stats.category_breakdown is not None
        assert [(c.category, c.candidate_count, c.average_score) for c in stats.category_breakdown] == [
            ("finance", 2, 76),
            ("full_stack_developer", 1, 60),
        ]

    def test_multi_mode_empty_breakdown(self) -> None:
        assert aggregate([], mode="multi").category_breakdown == []


class TestCategoryBreakdown:
    def test_first_seen_order(self) -> None:
        results = [
            _multi("A", 40, "software_developer"),
            _multi("B", 90, "network_engineer"),
            _multi("C", 60, "software_developer"),
        ]
        assert [c.category for c in category_breakdown(results)] == [
            "software_developer",
            "network_engineer",
        ]

    def test_counts_sum_to_valid_candidates(self) -> None:
        results = [_multi("A", 40, "finance"), _multi("B", 0, "general"), _multi("C", 55, "general")]
        breakdown = category_breakdown(results)
        assert sum(c.candidate_count for c in breakdown) == 2


class TestTopSkills:
    def test_most_frequent_first(self) -> None:
        profiles = [
            _profile(["python", "sql"]),
            _profile(["sql", "docker"]),
            _profile(["SQL", "python"]),
        ]
        ranked = top_skills(profiles)
        assert [(s.skill, s.count) for s in ranked] == [("sql", 3), ("python", 2), ("docker", 1)]

    def test_ties_keep_first_seen_order(self) -> None:
        ranked = top_skills([_profile(["go", "rust"]), _profile(["rust", "go"])])
        assert [s.skill for s in ranked] == ["go", "rust"]

    def test_limit(self) -> None:
        profile = _profile([f"skill{i}" for i in range(15)])
        assert len(top_skills([profile])) == 10
        assert len(top_skills([profile], limit=3)) == 3

    def test_missing_profiles_skipped(self) -> None:
        assert top_skills([None, _profile(["excel"])])[0].count == 1

    def test_empty_pool(self) -> None:
        assert top_skills([]) == []


class TestExperienceDistribution:
    def test_band_boundaries(self) -> None:
        profiles = [_profile([], years=y) for y in (0, 1, 2, 4, 5, 9, 10, 50)]
        counts = {band.label: band.count for band in experience_distribution(profiles)}
        assert counts == {
            "Entry Level (0-2 yrs)": 2,
            "Junior (2-5 yrs)": 2,
            "Mid-Level (5-10 yrs)": 2,
            "Senior (10+ yrs)": 2,
        }

    def test_every_band_listed_for_empty_pool(self) -> None:
        bands = experience_distribution([])
        assert len(bands) == 4
        assert all(band.count == 0 for band in bands)
        assert bands[-1].max_years is None


class TestEducationDistribution:
    def test_fixed_level_order(self) -> None:
        levels = [e.level for e in education_distribution([])]
        assert levels == ["PhD", "Master's", "Bachelor's", "Diploma", "12th", "10th", "Not Specified"]

    def test_counts(self) -> None:
        profiles = [
            _profile([], education="Bachelor's"),
            _profile([], education="Bachelor's"),
            _profile([]),
            None,
        ]
        counts = {e.level: e.count for e in education_distribution(profiles)}
        assert counts["Bachelor's"] == 2
        assert counts["Not Specified"] == 1
        assert sum(counts.values()) == 3


class TestAnalyzePool:
    def test_combines_breakdowns(self) -> None:
        pool = analyze_pool([_profile(["python"], years=3, education="Master's"), None])
        assert pool.total_profiles == 1
        assert pool.top_skills[0].skill == "python"
        assert sum(b.count for b in pool.experience_distribution) == 1
        assert sum(e.count for e in pool.education_distribution) == 1

    def test_placeholder_profiles_counted(self) -> None:
        placeholder = CandidateProfile(skills=["tally"])
        assert analyze_pool([placeholder]).total_profiles == 1

    def test_camel_case_export(self) -> None:
        dumped = analyze_pool([_profile(["python"])]).model_dump(by_alias=True)
        assert "topSkills" in dumped
        assert "experienceDistribution" in dumped
        assert dumped["experienceDistribution"][0]["minYears"] == 0
