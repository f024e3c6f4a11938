"""Integration test: résumé text through extraction, screening and export."""

import json
from pathlib import Path

import pytest

from main import main
from screener.core.schemas import MultiJobScoreSet, ScoreResult, ScreeningReport
from screener.pipeline.orchestrator import export_report_json, screen_candidates
from screener.pipeline.presets import PREDEFINED_JOBS
from screener.profile.extractor import extract_profile, load_resume_text
from screener.profile.schema import CandidateProfile

RESUMES_DIR = Path(__file__).parent.parent / "fixtures" / "resumes"
RESUME_FILES = ["full_stack.txt", "network.txt", "finance.txt", "unnamed.txt"]


def _profiles() -> list[CandidateProfile]:
    return [extract_profile(load_resume_text(RESUMES_DIR / name)) for name in RESUME_FILES]


def _by_name(results: list[ScoreResult | MultiJobScoreSet]) -> dict[str, MultiJobScoreSet]:
    return {r.candidate_name: r for r in results if isinstance(r, MultiJobScoreSet)}


# ---------------------------------------------------------------------------
# Library pipeline
# ---------------------------------------------------------------------------


class TestMultiJobScreening:
    @pytest.fixture
    def report(self) -> ScreeningReport:
        return screen_candidates(_profiles(), list(PREDEFINED_JOBS.values()))

    def test_every_candidate_scored_against_every_job(self, report: ScreeningReport) -> None:
        assert report.mode == "multi"
        assert len(report.results) == 4
        for result in report.results:
            assert isinstance(result, MultiJobScoreSet)
            assert len(result.scores) == len(PREDEFINED_JOBS)

    def test_best_jobs_follow_background(self, report: ScreeningReport) -> None:
        results = _by_name(report.results)

        network = results["Arjun Menon"].best_job
        assert network.title == "Network Engineer"
        assert network.score == 100

        finance = results["Sneha Iyer"].best_job
        assert finance.title == "Finance Intern"
        assert finance.score >= 70

        developer = results["Priya Sharma"].best_job
        assert developer.category in {"full_stack_developer", "software_developer"}
        assert developer.score >= 50

    def test_domain_mismatch_keeps_scores_low(self, report: ScreeningReport) -> None:
        finance = _by_name(report.results)["Sneha Iyer"]
        assert finance.scores["Full Stack Developer"].score < 30
        assert finance.scores["Network Engineer"].score < 30
        assert finance.scores["Full Stack Developer"].domain_penalty > 0

    def test_unnamed_candidate_is_invalid(self, report: ScreeningReport) -> None:
        unnamed = _by_name(report.results)["Unknown Candidate"]
        assert unnamed.best_job.score == 0
        assert all(not r.valid for r in unnamed.scores.values())

    def test_statistics(self, report: ScreeningReport) -> None:
        stats = report.statistics
        assert stats.total_candidates == 4
        assert stats.qualified_candidates == 3
        assert stats.qualification_rate == 75
        assert stats.top_score == 100
        assert stats.category_breakdown is not None
        assert sum(c.candidate_count for c in stats.category_breakdown) == 3

    def test_export_roundtrips_as_json(self, report: ScreeningReport) -> None:
        data = json.loads(export_report_json(report))
        assert data["mode"] == "multi"
        assert len(data["results"]) == 4
        assert data["statistics"]["topScore"] == 100


class TestSingleJobScreening:
    def test_finance_candidate_ranks_first(self) -> None:
        report = screen_candidates(_profiles(), PREDEFINED_JOBS["finance_intern"])

        assert report.mode == "single"
        ranked = report.ranked()
        assert isinstance(ranked[0], ScoreResult)
        assert ranked[0].candidate_name == "Sneha Iyer"
        assert ranked[-1].score == 0

    def test_results_are_deterministic(self) -> None:
        first = screen_candidates(_profiles(), PREDEFINED_JOBS["full_stack_developer"])
        second = screen_candidates(_profiles(), PREDEFINED_JOBS["full_stack_developer"])
        assert export_report_json(first) == export_report_json(second)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


class TestCli:
    def test_presets(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["presets"])
        out = capsys.readouterr().out
        assert "finance_intern: Finance Intern (0-1 years)" in out
        assert "Network Engineer" in out

    def test_extract_profile_writes_yaml(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        output = tmp_path / "profile.yaml"
        main(["extract-profile", "--resume", str(RESUMES_DIR / "network.txt"), "--output", str(output)])

        assert "Name: Arjun Menon" in capsys.readouterr().out
        profile = CandidateProfile.from_yaml(output)
        assert profile.name == "Arjun Menon"
        assert "ospf" in profile.skills

    def test_screen_exports_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        output = tmp_path / "report.json"
        main([
            "screen",
            "--resumes", *(str(RESUMES_DIR / name) for name in RESUME_FILES),
            "--preset", "finance_intern",
            "--preset", "network_engineer",
            "--export", "json",
            "--output", str(output),
        ])

        out = capsys.readouterr().out
        assert "Screening complete (multi mode)" in out
        data = json.loads(output.read_text())
        assert data["statistics"]["totalCandidates"] == 4
        assert data["candidatePool"]["totalProfiles"] == 4
        assert "Candidate pool (4 profiles)" in out

    def test_screen_with_config_jobs(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(
            "scoring:\n"
            "  qualifying_threshold: 60\n"
            "jobs:\n"
            "  - title: Accounts Assistant\n"
            "    description: Accounting, audit and taxation support\n"
            "    requiredSkills: [Accounting, Tally ERP9, Excel]\n"
            "    minExperience: 0\n"
            "    maxExperience: 2\n"
        )
        main(["screen", "--resumes", str(RESUMES_DIR / "finance.txt"), "--config", str(config)])

        out = capsys.readouterr().out
        assert "Screening complete (single mode) against: Accounts Assistant" in out
        assert "(finance)" in out

    def test_screen_skips_empty_resume(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        empty = tmp_path / "empty.txt"
        empty.write_text("   \n")
        main([
            "screen",
            "--resumes", str(empty), str(RESUMES_DIR / "finance.txt"),
            "--preset", "finance_intern",
        ])
        assert "1/1 qualified" in capsys.readouterr().out

    def test_screen_multi_flag_with_one_preset(self, capsys: pytest.CaptureFixture[str]) -> None:
        main([
            "screen",
            "--resumes", str(RESUMES_DIR / "finance.txt"),
            "--preset", "finance_intern",
            "--multi",
        ])
        out = capsys.readouterr().out
        assert "Screening complete (multi mode)" in out
        assert "best Finance Intern" in out
        assert "finance: 1 candidates" in out

    def test_screen_without_jobs_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["screen", "--resumes", str(RESUMES_DIR / "finance.txt")])
        assert exc_info.value.code == 1
        assert "No jobs to screen against" in capsys.readouterr().err

    def test_missing_resume_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["screen", "--resumes", str(tmp_path / "nope.txt"), "--preset", "finance_intern"])
        assert exc_info.value.code == 1
        assert "Resume file not found" in capsys.readouterr().err
