"""Optional semantic augmentation backed by an LLM provider.

Everything here is advisory. The rule-based extractor, classifier and
scorers are complete without it; a semantic scorer can only

- override a keyword classification it is confident about,
- add skills the vocabulary missed,
- append strengths, gaps and explanations to a result's reasons.

It never changes a numeric score. Provider errors and timeouts are logged
and surface as ``None`` / empty results so screening carries on.
"""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from pydantic import BaseModel, Field, field_validator

from screener.core.config import SemanticConfig
from screener.core.schemas import JobRequirement
from screener.llm import get_provider
from screener.llm.base import LLMProvider, parse_json_response
from screener.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)

MAX_RESUME_CHARS = 3000
MAX_DESCRIPTION_CHARS = 1500
MAX_AUGMENTED_SKILLS = 20
MAX_EXPLANATIONS = 5

SEMANTIC_DOMAINS = (
    "software_development", "web_development", "data_science", "network_engineering",
    "finance", "customs", "marketing", "human_resources", "sales", "operations",
    "design", "general",
)


class DomainGuess(BaseModel):
    """A semantic classifier's answer for one job posting."""

    domain: str
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""


class SemanticMatch(BaseModel):
    """Advisory semantic fit between a candidate and a job."""

    score: int = Field(ge=0, le=100)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    recommendation: str = ""
    reasoning: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> int:
        return max(0, min(100, int(float(v))))


class SemanticScorer(ABC):
    """Interface the extractor, classifier and orchestrator consult."""

    @property
    @abstractmethod
    def available(self) -> bool:
        """False when no backend is configured; callers then skip every call."""

    @abstractmethod
    def classify_domain(
        self, title: str, description: str, required_skills: list[str],
    ) -> DomainGuess | None: ...

    @abstractmethod
    def match(
        self, profile: CandidateProfile, job: JobRequirement, domain: str,
    ) -> SemanticMatch | None: ...

    @abstractmethod
    def augment_skills(self, text: str) -> list[str]: ...

    @abstractmethod
    def explain(self, profile: CandidateProfile, job: JobRequirement, score: int) -> list[str]: ...

    def close(self) -> None:  # noqa: B027
        """Release backend resources. Nothing to do by default."""


class NullSemanticScorer(SemanticScorer):
    """The collaborator is not present."""

    @property
    def available(self) -> bool:
        return False

    def classify_domain(
        self, title: str, description: str, required_skills: list[str],
    ) -> DomainGuess | None:
        return None

    def match(
        self, profile: CandidateProfile, job: JobRequirement, domain: str,
    ) -> SemanticMatch | None:
        return None

    def augment_skills(self, text: str) -> list[str]:
        return []

    def explain(self, profile: CandidateProfile, job: JobRequirement, score: int) -> list[str]:
        return []


# ---------------------------------------------------------------------------
# LLM-backed implementation
# ---------------------------------------------------------------------------

_CLASSIFY_PROMPT = (
    "Classify this job posting into ONE of these domains: {domains}.\n"
    "Customs, taxation, HMRC, due diligence and import/export work is "
    "'customs' or 'finance'. Programming, coding and software work is "
    "'software_development'.\n\n"
    "Job Title: {title}\n"
    "Job Description: {description}\n"
    "{skills}\n"
    'Return ONLY: {{"domain": "<domain>", "confidence": <0.0-1.0>, '
    '"reasoning": "<one sentence>"}}'
)

_MATCH_PROMPT = (
    "Screen this candidate for a job in the {domain} domain.\n\n"
    "Job: {title}\n{description}\n\n"
    "Candidate résumé:\n{resume}\n\n"
    "Weigh skills, experience, education and project work. Match the PRIMARY "
    "domain, not buzzwords: finance skills do not qualify for a technical "
    "role and technical skills do not qualify for a finance role.\n\n"
    'Return ONLY: {{"matchScore": <0-100>, "confidence": <0.0-1.0>, '
    '"strengths": [...], "gaps": [...], '
    '"recommendation": "Strong match | Moderate match | Weak match | Not recommended", '
    '"reasoning": "<2-3 sentences>"}}'
)

_SKILLS_PROMPT = (
    "List the professional and technical skills in this résumé as a JSON "
    "array of lowercase names, e.g. [\"javascript\", \"tally erp9\"].\n\n"
    "Résumé:\n{resume}"
)

_EXPLAIN_PROMPT = (
    "Explain in 3-5 short bullet points why this candidate {verdict} this job.\n\n"
    "Candidate: {name}\nSkills: {skills}\nExperience: {years} years\n\n"
    "Job: {title}\n{description}\n\n"
    "Rule-based score: {score}%\n\n"
    "Return ONLY a JSON array of strings."
)


class LLMSemanticScorer(SemanticScorer):
    """Semantic scorer over any registered ``LLMProvider``.

    Every provider call runs on a small worker pool and is abandoned after
    ``timeout_seconds``; the caller gets ``None`` or ``[]`` back. An abandoned
    call keeps its worker until the provider returns, so when every worker is
    still held by one the next call waits at most ``timeout_seconds`` for a
    free worker and is then skipped rather than queued.
    """

    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        timeout_seconds: float = 30.0,
        max_workers: int = 4,
    ) -> None:
        self._provider = provider
        self._model = model
        self._timeout = timeout_seconds
        self._max_workers = max_workers
        self._slots = threading.BoundedSemaphore(max_workers)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="semantic")

    @property
    def available(self) -> bool:
        return True

    @property
    def provider_id(self) -> str:
        return self._provider.provider_id

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def classify_domain(
        self, title: str, description: str, required_skills: list[str],
    ) -> DomainGuess | None:
        skills = f"Required Skills: {', '.join(required_skills)}\n" if required_skills else ""
        prompt = _CLASSIFY_PROMPT.format(
            domains=", ".join(SEMANTIC_DOMAINS),
            title=title,
            description=description[:MAX_DESCRIPTION_CHARS],
            skills=skills,
        )
        data = self._ask(prompt, f"classify '{title}'")
        if not isinstance(data, dict):
            return None
        try:
            return DomainGuess.model_validate(data)
        except ValueError:
            logger.warning("Semantic classification for '%s' returned an invalid shape", title)
            return None

    def match(
        self, profile: CandidateProfile, job: JobRequirement, domain: str,
    ) -> SemanticMatch | None:
        prompt = _MATCH_PROMPT.format(
            domain=domain,
            title=job.title,
            description=job.description[:MAX_DESCRIPTION_CHARS],
            resume=_resume_text(profile),
        )
        data = self._ask(prompt, f"match {profile.name} / '{job.title}'")
        if not isinstance(data, dict):
            return None
        if "matchScore" in data and "score" not in data:
            data = {**data, "score": data["matchScore"]}
        try:
            return SemanticMatch.model_validate(data)
        except ValueError:
            logger.warning(
                "Semantic match for %s / '%s' returned an invalid shape", profile.name, job.title,
            )
            return None

    def augment_skills(self, text: str) -> list[str]:
        data = self._ask(_SKILLS_PROMPT.format(resume=text[:MAX_RESUME_CHARS]), "skill extraction")
        if not isinstance(data, list):
            return []
        skills = [str(s).strip().lower() for s in data if str(s).strip()]
        return skills[:MAX_AUGMENTED_SKILLS]

    def explain(self, profile: CandidateProfile, job: JobRequirement, score: int) -> list[str]:
        prompt = _EXPLAIN_PROMPT.format(
            verdict="matches" if score >= 50 else "does not match",
            name=profile.name,
            skills=", ".join(profile.skills[:10]) or "none listed",
            years=profile.experience.years,
            title=job.title,
            description=job.description[:500],
            score=score,
        )
        data = self._ask(prompt, f"explain {profile.name} / '{job.title}'")
        if not isinstance(data, list):
            return []
        return [str(r).strip() for r in data if str(r).strip()][:MAX_EXPLANATIONS]

    def _ask(self, prompt: str, purpose: str) -> Any | None:
        """Run one provider call with a timeout and parse its JSON reply."""
        if not self._slots.acquire(timeout=self._timeout):
            logger.warning(
                "Semantic %s skipped: all %d workers still busy (%s)",
                purpose, self._max_workers, self.provider_id,
            )
            return None

        try:
            future = self._executor.submit(self._call, prompt)
        except RuntimeError:
            self._slots.release()
            raise

        try:
            raw = future.result(timeout=self._timeout)
            return parse_json_response(raw)
        except FutureTimeoutError:
            if future.cancel():
                self._slots.release()
            logger.warning(
                "Semantic %s timed out after %.0fs (%s)", purpose, self._timeout, self.provider_id,
            )
            return None
        except Exception:
            logger.warning(
                "Semantic %s failed (%s) - continuing rule-based", purpose, self.provider_id,
                exc_info=True,
            )
            return None

    def _call(self, prompt: str) -> str:
        try:
            return self._provider.complete(prompt, self._model)
        finally:
            self._slots.release()


def _resume_text(profile: CandidateProfile) -> str:
    if profile.raw_text:
        return profile.raw_text[:MAX_RESUME_CHARS]
    return (
        f"Name: {profile.name}\nSkills: {', '.join(profile.skills)}\n"
        f"Experience: {profile.experience.years} years\nEducation: {profile.education}"
    )


def build_semantic_scorer(config: SemanticConfig) -> SemanticScorer:
    """Return an LLM-backed scorer when enabled, otherwise the null scorer.

    A provider that cannot be constructed (unknown name) degrades to the
    null scorer with a warning. Missing API keys and SDKs surface on the
    first call and are handled there.
    """
    if not config.enabled:
        return NullSemanticScorer()

    try:
        provider = get_provider(config.provider)
    except ValueError:
        logger.warning(
            "Semantic provider '%s' unavailable - screening rule-based only", config.provider,
            exc_info=True,
        )
        return NullSemanticScorer()

    logger.info("Semantic augmentation enabled (%s)", provider.provider_id)
    return LLMSemanticScorer(provider, model=config.model, timeout_seconds=config.timeout_seconds)
