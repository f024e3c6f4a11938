"""Tests for the CandidateProfile schema."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from screener.profile.schema import EDUCATION_LEVELS, CandidateProfile, Experience


class TestCandidateProfile:
    def test_defaults(self) -> None:
        p = CandidateProfile()
        assert p.name == "Unknown Candidate"
        assert p.email is None
        assert p.phone is None
        assert p.skills == []
        assert p.experience == Experience()
        assert p.education == "Not Specified"
        assert p.confidence == 0
        assert p.is_placeholder

    def test_named_profile_is_not_placeholder(self) -> None:
        assert not CandidateProfile(name="Meera Nair").is_placeholder

    def test_blank_name_is_placeholder(self) -> None:
        assert CandidateProfile(name="   ").is_placeholder

    def test_skills_normalized_and_deduplicated(self) -> None:
        p = CandidateProfile(skills=[" Python", "python", "SQL ", ""])
        assert p.skills == ["python", "sql"]

    def test_email_lowercased(self) -> None:
        assert CandidateProfile(email="Jane.Doe@Example.COM").email == "jane.doe@example.com"

    def test_unknown_education_raises(self) -> None:
        with pytest.raises(ValidationError, match="education must be one of"):
            CandidateProfile(education="Kindergarten")

    def test_education_vocabulary_order(self) -> None:
        assert EDUCATION_LEVELS[0] == "PhD"
        assert EDUCATION_LEVELS[-1] == "Not Specified"

    def test_confidence_bounds(self) -> None:
        with pytest.raises(ValidationError):
            CandidateProfile(confidence=101)

    def test_experience_capped(self) -> None:
        with pytest.raises(ValidationError):
            Experience(years=51)

    def test_raw_text_hidden_from_repr(self) -> None:
        p = CandidateProfile(name="Jane", raw_text="secret résumé body")
        assert "secret" not in repr(p)


class TestProfileYaml:
    def test_round_trip(self, tmp_path: Path) -> None:
        profile = CandidateProfile(
            name="Jane Doe",
            email="jane@example.com",
            phone="9876543210",
            skills=["python", "sql"],
            experience=Experience(years=3, positions=[]),
            education="Bachelor's",
            education_detail="B.Tech Computer Science",
            confidence=100,
        )
        path = tmp_path / "out" / "profile.yaml"
        profile.to_yaml(path)

        text = path.read_text()
        assert "educationDetail" in text
        assert CandidateProfile.from_yaml(path) == profile

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Profile file not found"):
            CandidateProfile.from_yaml(tmp_path / "nope.yaml")
