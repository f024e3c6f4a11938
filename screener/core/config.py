"""Configuration models and YAML loader for the screening engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from screener.core.schemas import JobRequirement

SEMANTIC_PROVIDERS = ("anthropic", "gemini", "ollama", "openai")


class ScoringConfig(BaseModel):
    """Thresholds for rule-based scoring and batch aggregation."""

    qualifying_threshold: int = Field(default=50, ge=1, le=100)
    score_floor: int = Field(default=5, ge=1, le=100)
    classification_threshold: int = Field(default=2, ge=1)
    max_skills: int = Field(default=25, ge=1)
    max_workers: int = Field(default=4, ge=1, le=64)
    top_skills_limit: int = Field(default=10, ge=1)


class SemanticConfig(BaseModel):
    """Optional LLM-backed augmentation. Disabled by default."""

    enabled: bool = False
    provider: str = "gemini"
    model: str | None = None
    timeout_seconds: float = Field(default=30.0, gt=0)
    min_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    borderline_low: int = Field(default=40, ge=0, le=100)
    borderline_high: int = Field(default=70, ge=0, le=100)
    min_skills_before_augment: int = Field(default=5, ge=0)

    @field_validator("provider")
    @classmethod
    def provider_known(cls, v: str) -> str:
        v = v.lower().strip()
        if v not in SEMANTIC_PROVIDERS:
            msg = f"provider must be one of {list(SEMANTIC_PROVIDERS)}, got '{v}'"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def borderline_band_ordered(self) -> "SemanticConfig":
        if self.borderline_low > self.borderline_high:
            msg = "borderline_low must not exceed borderline_high"
            raise ValueError(msg)
        return self


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    semantic: SemanticConfig = Field(default_factory=SemanticConfig)
    jobs: list[JobRequirement] = Field(default_factory=list)
    catalog_path: str | None = None

    @field_validator("jobs")
    @classmethod
    def job_titles_unique(cls, v: list[JobRequirement]) -> list[JobRequirement]:
        titles = [job.title.lower() for job in v]
        duplicates = sorted({t for t in titles if titles.count(t) > 1})
        if duplicates:
            msg = f"job titles must be unique, duplicated: {duplicates}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
