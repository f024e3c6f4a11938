"""Exception taxonomy for the screening engine.

Only the Profile Extractor lets an exception escape (EmptyInputError).
InvalidCandidateError and ScoringFailure are raised and caught inside the
orchestrator, where they turn into marked results instead of failures.
"""


class ScreeningError(Exception):
    """Base class for screening engine errors."""


class EmptyInputError(ScreeningError, ValueError):
    """Raised when the extractor receives empty or whitespace-only text."""


class InvalidCandidateError(ScreeningError):
    """A missing or placeholder candidate was passed to scoring."""


class ScoringFailure(ScreeningError):
    """Unexpected error inside a domain scorer.

    Keeps the domain and the original exception so the fallback result can
    carry a descriptive reason.
    """

    def __init__(self, domain: str, error: Exception) -> None:
        self.domain = domain
        self.error = error
        super().__init__(f"{domain} scorer failed: {error}")
