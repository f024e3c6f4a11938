"""Curated vocabularies used by the Profile Extractor.

SKILL_VOCABULARY covers every skill named in the domain taxonomies plus
common tooling, so rule-based extraction can feed all domain scorers.
"""

import re

SKILL_VOCABULARY: tuple[str, ...] = (
    # languages
    "javascript", "js", "typescript", "python", "java", "c++", "c#", "php",
    "ruby", "golang", "swift", "kotlin", "dart", "scala", "rust",
    # web
    "html", "html5", "css", "css3", "sass", "react", "angular", "vue", "vue.js",
    "jquery", "bootstrap", "node.js", "nodejs", "express", "express.js",
    "django", "flask", "fastapi", "spring", "laravel", "codeigniter",
    "wordpress", "drupal", "webpack", "babel", "npm", "yarn", "gulp", "grunt",
    "rest api", "rest apis", "restful", "restful apis", "graphql",
    "json", "ajax", "mvc", "mvc architecture", "api integration",
    "web technologies", "jwt authentication",
    # data stores
    "sql", "nosql", "mongodb", "mysql", "postgresql", "sqlite", "redis",
    "elasticsearch", "database design", "database management",
    # tooling and platforms
    "git", "github", "gitlab", "version control", "docker", "kubernetes",
    "jenkins", "aws", "azure", "gcp", "linux", "ubuntu", "windows", "macos",
    "android", "ios", "flutter", "postman", "jira", "confluence",
    "ci/cd", "devops",
    # practices
    "microservices", "agile", "scrum", "oop", "data structures", "algorithms",
    "debugging", "testing", "testing frameworks", "agile methodologies",
    "programming fundamentals",
    # data and ml
    "machine learning", "ml", "deep learning", "tensorflow", "pytorch",
    "pandas", "numpy", "scikit-learn", "opencv", "nlp", "data science",
    "analytics", "big data", "spark",
    # design
    "photoshop", "illustrator", "figma", "sketch",
    # networking
    "tcp/ip", "ospf", "hsrp", "vlan", "dhcp", "stp", "bgp", "snmp",
    "cisco", "cisco meraki", "meraki", "thousandeyes", "ping", "traceroute",
    "tracert", "network monitoring", "routing", "switching", "lan", "wan",
    "vpn", "firewalls", "load balancers", "ccna", "ccnp", "network security",
    "itil", "cloud networking",
    # finance and office
    "accounting", "bookkeeping", "tally", "tally erp9", "taxation", "gst",
    "audit", "budgeting", "financial analysis", "financial modeling",
    "financial reporting", "accounts payable", "accounts receivable",
    "general ledger", "journal posting", "reconciliation", "customs",
    "compliance", "oracle erp", "sap", "excel", "ms office", "powerpoint",
    "power bi", "powerbi", "tableau", "salesforce",
    "analytical skills", "attention to detail", "communication", "research",
    "digital marketing", "marketing",
)

SKILL_SET: frozenset[str] = frozenset(SKILL_VOCABULARY)


def term_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching ``term`` not embedded in a longer word."""
    return re.compile(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])", re.IGNORECASE)


SKILL_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (term, term_pattern(term)) for term in SKILL_VOCABULARY
)

# Headers that open or close a résumé section.
SECTION_HEADERS: frozenset[str] = frozenset({
    "experience", "work experience", "professional experience", "employment",
    "employment history", "work history", "career", "career history",
    "education", "academic background", "qualifications", "projects",
    "academic projects", "objective", "career objective", "summary",
    "professional summary", "profile", "certifications", "certificates",
    "achievements", "awards", "languages", "hobbies", "interests",
    "references", "declaration", "personal details", "internships",
    "skills", "technical skills", "key skills", "core skills", "technologies",
    "tools", "technical proficiency",
})

SKILL_SECTION_HEADERS: frozenset[str] = frozenset({
    "skills", "technical skills", "key skills", "core skills", "technologies",
    "tools", "technical proficiency",
})

# Words that disqualify a line from being read as a candidate's name.
NAME_SKIP_WORDS: frozenset[str] = frozenset({
    # section headers and contact labels
    "resume", "cv", "curriculum", "vitae", "objective", "summary", "profile",
    "experience", "education", "skills", "projects", "contact", "address",
    "phone", "email", "mobile", "tel", "name", "linkedin", "references",
    "declaration", "certifications", "achievements", "languages", "hobbies",
    "interests", "personal", "details", "career", "work", "employment",
    "history", "technical", "professional", "about", "page",
    # degrees and institutions
    "bachelor", "bachelors", "master", "masters", "degree", "diploma", "phd",
    "b.tech", "btech", "m.tech", "mtech", "mba", "bca", "mca", "bsc", "msc",
    "b.com", "m.com", "engineering", "science", "arts", "commerce",
    "university", "college", "school", "institute", "academy",
    # job-title words
    "developer", "engineer", "intern", "internship", "manager", "analyst",
    "consultant", "designer", "architect", "administrator", "accountant",
    "executive", "officer", "specialist", "lead", "senior", "junior",
    "fresher", "trainee", "associate", "director", "assistant", "stack",
    "full", "software", "web", "network", "finance", "financial",
})

# Single-word tool names that never double as a personal name. Ambiguous
# vocabulary entries (ruby, swift, lan, ping, vue...) are left out so names
# like "Ruby Patel" survive.
NAME_SKIP_TOOLS: frozenset[str] = frozenset({
    "javascript", "typescript", "python", "java", "php", "golang", "kotlin",
    "html", "html5", "css", "css3", "react", "angular", "jquery", "bootstrap",
    "node.js", "nodejs", "express", "express.js", "django", "flask", "fastapi",
    "laravel", "graphql", "sql", "nosql", "mongodb", "mysql", "postgresql",
    "sqlite", "git", "github", "gitlab", "docker", "kubernetes", "jenkins",
    "aws", "azure", "gcp", "linux", "postman", "jira", "tensorflow", "pytorch",
    "pandas", "numpy", "figma", "photoshop", "ospf", "hsrp", "vlan", "dhcp",
    "tcp/ip", "cisco", "meraki", "thousandeyes", "ccna", "ccnp", "tally",
    "excel", "powerpoint", "tableau", "salesforce", "accounting",
    "bookkeeping", "taxation", "marketing", "analytics",
})
