"""Domain catalog: keyword sets, skill taxonomies and education tables.

The catalog is read-only reference data. It is built once by
``default_catalog()`` (or loaded from YAML) and passed to the classifier and
scorers explicitly.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

GENERAL = "general"
TAXONOMY_TOTAL_WEIGHT = 100


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SkillCategory(_Frozen):
    """A weighted group of skills inside a domain taxonomy."""

    name: str
    weight: float = Field(gt=0)
    skills: tuple[str, ...]


class TextBonus(_Frozen):
    """Fixed addend awarded for evidence found in the raw résumé text.

    mode:
        ``any``  - one award if any pattern matches
        ``all``  - one award if every pattern matches
        ``each`` - one award per matching pattern
    ``reason`` may reference ``{points}`` and ``{matches}``.
    """

    patterns: tuple[str, ...]
    mode: Literal["any", "all", "each"] = "any"
    points: float
    reason: str


class MismatchRule(_Frozen):
    """Penalty for candidates whose skills point at a different domain.

    ``below_skill_score`` of None applies the rule whatever the skill score.
    Non-empty ``title_keywords`` restrict the rule to jobs whose title
    contains one of them.
    """

    markers: tuple[str, ...]
    below_skill_score: float | None = None
    penalty: int = Field(ge=0)
    reason: str
    min_hits: int = Field(default=1, ge=1)
    title_keywords: tuple[str, ...] = ()

    def applies_to(self, job_title: str) -> bool:
        title = job_title.lower()
        return not self.title_keywords or any(kw in title for kw in self.title_keywords)


class EducationTiers(_Frozen):
    """Keywords grading how relevant a degree is to a domain."""

    highly_relevant: tuple[str, ...] = ()
    somewhat_relevant: tuple[str, ...] = ()
    not_relevant: tuple[str, ...] = ()


class DomainSpec(_Frozen):
    """Everything the scorer needs to know about one domain."""

    name: str
    label: str
    primary_keywords: tuple[str, ...] = ()
    taxonomy: tuple[SkillCategory, ...] = ()
    bonuses: tuple[TextBonus, ...] = ()
    skill_cap: float | None = None
    mismatch: MismatchRule | None = None
    title_mismatches: tuple[MismatchRule, ...] = ()
    education: EducationTiers = Field(default_factory=EducationTiers)
    uses_required_skills: bool = False

    @model_validator(mode="after")
    def weights_sum_to_total(self) -> "DomainSpec":
        if self.uses_required_skills:
            return self
        total = sum(category.weight for category in self.taxonomy)
        if abs(total - TAXONOMY_TOTAL_WEIGHT) > 1e-9:
            msg = f"taxonomy weights for '{self.name}' sum to {total}, expected {TAXONOMY_TOTAL_WEIGHT}"
            raise ValueError(msg)
        return self


class DomainCatalog(_Frozen):
    """Ordered set of domains plus the fallback category."""

    domains: tuple[DomainSpec, ...]
    default_category: str = GENERAL
    semantic_aliases: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def default_is_known(self) -> "DomainCatalog":
        names = [d.name for d in self.domains]
        if len(set(names)) != len(names):
            msg = f"duplicate domain names in catalog: {names}"
            raise ValueError(msg)
        if self.default_category not in names:
            msg = f"default category '{self.default_category}' is not a catalog domain"
            raise ValueError(msg)
        return self

    def get(self, name: str) -> DomainSpec | None:
        for domain in self.domains:
            if domain.name == name:
                return domain
        return None

    @property
    def default(self) -> DomainSpec:
        domain = self.get(self.default_category)
        if domain is None:
            msg = f"default category '{self.default_category}' is not a catalog domain"
            raise KeyError(msg)
        return domain

    def names(self) -> list[str]:
        return [d.name for d in self.domains]

    def resolve_alias(self, label: str) -> str:
        """Map an external domain label onto a catalog domain name."""
        key = label.strip().lower()
        if self.get(key) is not None:
            return key
        return self.semantic_aliases.get(key, self.default_category)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DomainCatalog":
        """Load a catalog from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Catalog file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)


# ---------------------------------------------------------------------------
# Built-in tables
# ---------------------------------------------------------------------------

_NON_TECH_MARKERS = (
    "tally", "accounting", "finance", "excel", "office", "bookkeeping",
    "taxation", "digital marketing",
)
_TECH_MARKERS = (
    "javascript", "python", "java", "react", "node.js", "programming",
    "developer", "software", "coding",
)
_TECH_EDUCATION = EducationTiers(
    highly_relevant=(
        "computer science", "software engineering", "mca", "bca", "b.tech", "m.tech",
    ),
    somewhat_relevant=("engineering", "mathematics", "information technology"),
    not_relevant=("commerce", "finance", "accounting", "mba"),
)
_PROJECT_PATTERNS = (
    r"full.?stack", r"web.?app", r"restful", r"\bapi\b", r"frontend", r"backend",
    r"\bmern\b", r"\bmean stack\b",
)

NETWORK_ENGINEER = DomainSpec(
    name="network_engineer",
    label="Network Engineer",
    primary_keywords=("network", "cisco", "routing", "switching", "infrastructure"),
    taxonomy=(
        SkillCategory(
            name="protocols", weight=35,
            skills=("tcp/ip", "ospf", "hsrp", "vlan", "dhcp", "stp", "bgp", "snmp"),
        ),
        SkillCategory(
            name="tools", weight=30,
            skills=("cisco meraki", "thousandeyes", "ping", "traceroute", "tracert",
                    "network monitoring"),
        ),
        SkillCategory(
            name="technologies", weight=25,
            skills=("routing", "switching", "lan", "wan", "vpn", "firewalls", "load balancers"),
        ),
        SkillCategory(
            name="certifications", weight=10,
            skills=("ccna", "ccnp", "network security", "itil", "cloud networking"),
        ),
    ),
    bonuses=(
        TextBonus(
            patterns=(r"\bnetwork", r"\bengineer"), mode="all", points=20,
            reason="Current network engineering experience (+{points} bonus)",
        ),
        TextBonus(
            patterns=(r"cisco meraki", r"thousand\s?eyes"), mode="all", points=15,
            reason="Exact tool match: Cisco Meraki + ThousandEyes (+{points} bonus)",
        ),
    ),
    mismatch=MismatchRule(
        markers=(*_NON_TECH_MARKERS, "marketing"),
        below_skill_score=30,
        penalty=40,
        reason="Major domain mismatch: non-technical background for network engineering (-{penalty} penalty)",
    ),
    education=EducationTiers(
        highly_relevant=(
            "computer science", "information technology", "engineering", "b.tech",
            "m.tech", "mca", "bca",
        ),
        somewhat_relevant=("electronics", "telecommunications"),
        not_relevant=("commerce", "finance", "accounting", "mba", "bba"),
    ),
)

FULL_STACK_DEVELOPER = DomainSpec(
    name="full_stack_developer",
    label="Full Stack Developer",
    primary_keywords=("full stack", "developer", "web development", "frontend", "backend"),
    taxonomy=(
        SkillCategory(
            name="frontend", weight=25,
            skills=("javascript", "js", "html", "css", "react", "angular", "vue",
                    "bootstrap", "jquery"),
        ),
        SkillCategory(
            name="backend", weight=25,
            skills=("node.js", "express.js", "express", "python", "java", "php", "django",
                    "spring", "fastapi"),
        ),
        SkillCategory(
            name="database", weight=20,
            skills=("mongodb", "mysql", "postgresql", "nosql", "sql", "redis", "sqlite"),
        ),
        SkillCategory(
            name="tools", weight=15,
            skills=("git", "github", "aws", "docker", "postman", "rest", "api", "gitlab",
                    "npm", "yarn"),
        ),
        SkillCategory(
            name="concepts", weight=15,
            skills=("restful", "mvc", "microservices", "oop", "data structures",
                    "algorithms", "json", "ajax"),
        ),
    ),
    bonuses=(
        TextBonus(
            patterns=_PROJECT_PATTERNS, mode="each", points=4,
            reason="Project experience: {matches} (+{points} bonus)",
        ),
    ),
    skill_cap=70,
    mismatch=MismatchRule(
        markers=_NON_TECH_MARKERS,
        below_skill_score=25,
        penalty=35,
        reason="Major domain mismatch: non-technical background for development role (-{penalty} penalty)",
    ),
    education=_TECH_EDUCATION,
)

SOFTWARE_DEVELOPER = DomainSpec(
    name="software_developer",
    label="Software Developer",
    primary_keywords=("software", "developer", "programming", "coding", "intern"),
    taxonomy=(
        SkillCategory(
            name="programming", weight=40,
            skills=("javascript", "python", "java", "node.js", "express.js",
                    "programming fundamentals"),
        ),
        SkillCategory(
            name="web_tech", weight=25,
            skills=("html", "css", "web technologies", "api integration"),
        ),
        SkillCategory(
            name="database", weight=20,
            skills=("sql", "nosql", "mongodb", "database management"),
        ),
        SkillCategory(
            name="tools", weight=10,
            skills=("git", "version control", "jwt authentication", "agile methodologies"),
        ),
        SkillCategory(
            name="concepts", weight=5,
            skills=("software development principles", "debugging", "testing"),
        ),
    ),
    bonuses=(
        TextBonus(
            patterns=(r"software (?:developer|engineer|development)",), points=10,
            reason="Software development experience (+{points} bonus)",
        ),
        TextBonus(
            patterns=_PROJECT_PATTERNS, mode="each", points=2,
            reason="Project experience: {matches} (+{points} bonus)",
        ),
    ),
    skill_cap=70,
    mismatch=MismatchRule(
        markers=_NON_TECH_MARKERS,
        below_skill_score=25,
        penalty=35,
        reason="Major domain mismatch: non-technical background for development role (-{penalty} penalty)",
    ),
    education=_TECH_EDUCATION,
)

FINANCE = DomainSpec(
    name="finance",
    label="Finance",
    primary_keywords=(
        "finance", "accounting", "financial", "audit", "budget", "customs", "taxation",
        "tax", "hmrc", "due diligence", "compliance", "oracle erp", "sap",
        "general ledger", "reconciliation", "journal posting", "period end close",
    ),
    taxonomy=(
        SkillCategory(
            name="finance", weight=40,
            skills=("financial analysis", "accounting", "budgeting", "financial modeling",
                    "audit", "customs", "taxation", "compliance"),
        ),
        SkillCategory(
            name="software", weight=30,
            skills=("tally erp9", "excel", "power bi", "tableau", "ms office", "oracle erp",
                    "sap"),
        ),
        SkillCategory(
            name="domain", weight=20,
            skills=("gst", "taxation", "financial reporting", "accounts payable",
                    "accounts receivable", "general ledger", "journal posting"),
        ),
        SkillCategory(
            name="skills", weight=10,
            skills=("analytical skills", "attention to detail", "communication", "research"),
        ),
    ),
    bonuses=(
        TextBonus(
            patterns=(r"finance intern", r"\bfinancial\b"), points=25,
            reason="Finance internship/experience detected (+{points} bonus)",
        ),
        TextBonus(
            patterns=(r"\bmba\b", r"master of business"), points=15,
            reason="MBA degree (+{points} bonus)",
        ),
    ),
    mismatch=MismatchRule(
        markers=_TECH_MARKERS,
        below_skill_score=40,
        penalty=30,
        reason="Strong technical background - likely not suitable for finance role (-{penalty} penalty)",
    ),
    education=EducationTiers(
        highly_relevant=("finance", "accounting", "commerce", "mba", "bba", "b.com", "m.com"),
        somewhat_relevant=("economics", "business administration"),
        not_relevant=("computer science", "engineering", "technology"),
    ),
)

GENERAL_DOMAIN = DomainSpec(
    name=GENERAL,
    label="General",
    skill_cap=65,
    uses_required_skills=True,
    title_mismatches=(
        MismatchRule(
            title_keywords=("finance", "accounting", "audit"),
            markers=(*_TECH_MARKERS, "node", "html", "css", "angular", "vue"),
            penalty=30,
            reason="Technical skills not relevant for finance role (-{penalty} penalty)",
        ),
        MismatchRule(
            title_keywords=("developer", "engineer", "software"),
            markers=("tally", "accounting", "finance", "bookkeeping", "taxation", "audit", "gst"),
            penalty=30,
            reason="Finance skills not relevant for technical role (-{penalty} penalty)",
        ),
    ),
)

_SEMANTIC_ALIASES = {
    "software_development": "software_developer",
    "web_development": "full_stack_developer",
    "data_science": "software_developer",
    "network_engineering": "network_engineer",
    "accounting": "finance",
    "taxation": "finance",
    "customs": "finance",
    "marketing": GENERAL,
    "human_resources": GENERAL,
    "sales": GENERAL,
    "operations": GENERAL,
    "design": GENERAL,
}


@lru_cache(maxsize=1)
def default_catalog() -> DomainCatalog:
    """The built-in catalog. Built once and shared; it is immutable."""
    return DomainCatalog(
        domains=(NETWORK_ENGINEER, FULL_STACK_DEVELOPER, SOFTWARE_DEVELOPER, FINANCE, GENERAL_DOMAIN),
        default_category=GENERAL,
        semantic_aliases=_SEMANTIC_ALIASES,
    )
