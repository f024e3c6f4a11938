"""Job posting → domain category classification.

Keyword counting over the title and description is always available and is
the authoritative fallback. An optional semantic classifier may override it
when it reports enough confidence.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from screener.pipeline.domains import DomainCatalog, default_catalog

if TYPE_CHECKING:
    from screener.pipeline.semantic import SemanticScorer

logger = logging.getLogger(__name__)

DEFAULT_MIN_HITS = 2
DEFAULT_MIN_CONFIDENCE = 0.6


def keyword_hits(title: str, description: str, catalog: DomainCatalog) -> dict[str, int]:
    """Count each domain's primary keywords present in title + description."""
    text = f"{description} {title}".lower()
    return {
        domain.name: sum(1 for kw in domain.primary_keywords if kw.lower() in text)
        for domain in catalog.domains
        if domain.primary_keywords
    }


def classify_by_keywords(
    title: str,
    description: str,
    catalog: DomainCatalog | None = None,
    min_hits: int = DEFAULT_MIN_HITS,
) -> str:
    """Domain with the most keyword hits, or the catalog default below ``min_hits``.

    Ties go to the domain listed first in the catalog.
    """
    catalog = catalog or default_catalog()
    best, best_hits = catalog.default_category, 0
    for name, hits in keyword_hits(title, description, catalog).items():
        if hits > best_hits:
            best, best_hits = name, hits

    if best_hits >= min_hits:
        logger.debug("Keyword classification: %s (%d hits)", best, best_hits)
        return best

    logger.debug(
        "No domain reached %d keyword hits (best %d) - using '%s'",
        min_hits, best_hits, catalog.default_category,
    )
    return catalog.default_category


def classify(
    title: str,
    description: str,
    required_skills: list[str] | None = None,
    *,
    catalog: DomainCatalog | None = None,
    min_hits: int = DEFAULT_MIN_HITS,
    semantic: SemanticScorer | None = None,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> str:
    """Classify a job posting into a catalog domain.

    The semantic classifier is consulted first when present; its answer is
    used only if its confidence reaches ``min_confidence``. Otherwise, or if
    it is absent or fails, keyword counting decides.
    """
    catalog = catalog or default_catalog()

    if semantic is not None and semantic.available:
        try:
            guess = semantic.classify_domain(title, description, list(required_skills or []))
        except Exception:
            logger.warning(
                "Semantic classification for '%s' failed - using keywords", title, exc_info=True,
            )
            guess = None
        if guess is not None and guess.confidence >= min_confidence:
            domain = catalog.resolve_alias(guess.domain)
            logger.info(
                "Semantic classification for '%s': %s -> %s (%.0f%% confident)",
                title, guess.domain, domain, guess.confidence * 100,
            )
            return domain
        if guess is not None:
            logger.debug(
                "Semantic confidence too low for '%s' (%.2f) - using keywords",
                title, guess.confidence,
            )

    return classify_by_keywords(title, description, catalog, min_hits)
