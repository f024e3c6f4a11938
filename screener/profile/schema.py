"""CandidateProfile model produced by the Profile Extractor."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator

from screener.core.schemas import (
    MAX_EXPERIENCE_YEARS,
    NOT_SPECIFIED,
    UNKNOWN_CANDIDATE,
    FrozenModel,
)

# Highest credential first.
EDUCATION_LEVELS = ("PhD", "Master's", "Bachelor's", "Diploma", "12th", "10th", NOT_SPECIFIED)


class Experience(FrozenModel):
    """Years of experience and labelled positions (e.g. "Fresher", "Intern")."""

    years: int = Field(default=0, ge=0, le=MAX_EXPERIENCE_YEARS)
    positions: list[str] = Field(default_factory=list)


class CandidateProfile(FrozenModel):
    """Structured facts recovered from one résumé.

    Built once by ``extract_profile``; callers build a new profile rather
    than patching an existing one.
    """

    name: str = UNKNOWN_CANDIDATE
    email: str | None = None
    phone: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: Experience = Field(default_factory=Experience)
    education: str = NOT_SPECIFIED
    education_detail: str | None = None
    confidence: int = Field(default=0, ge=0, le=100)
    semantic_enhanced: bool = False
    raw_text: str = Field(default="", repr=False)

    @field_validator("education")
    @classmethod
    def education_in_vocabulary(cls, v: str) -> str:
        if v not in EDUCATION_LEVELS:
            msg = f"education must be one of {list(EDUCATION_LEVELS)}, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str | None) -> str | None:
        return v.lower() if v else v

    @field_validator("skills")
    @classmethod
    def skills_normalized(cls, v: list[str]) -> list[str]:
        seen: set[str] = set()
        result: list[str] = []
        for skill in v:
            skill = skill.strip().lower()
            if skill and skill not in seen:
                seen.add(skill)
                result.append(skill)
        return result

    @property
    def is_placeholder(self) -> bool:
        """True when no name could be recovered."""
        return not self.name.strip() or self.name == UNKNOWN_CANDIDATE

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CandidateProfile":
        """Load a profile from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Profile file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def to_yaml(self, path: str | Path) -> None:
        """Write the profile to a YAML file (camelCase keys)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(by_alias=True)
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
