"""Reference job postings selectable by key (``main.py screen --preset``)."""

from screener.core.schemas import JobRequirement

PREDEFINED_JOBS: dict[str, JobRequirement] = {
    "network_engineer": JobRequirement(
        title="Network Engineer",
        description=(
            "Network Engineer position requiring expertise in network infrastructure, "
            "routing protocols, and monitoring tools."
        ),
        required_skills=[
            "TCP/IP", "OSPF", "HSRP", "VLAN", "DHCP", "Cisco Meraki", "ThousandEyes",
            "Network Monitoring",
        ],
        min_experience=0,
        max_experience=3,
        education_preference="Computer Science, Information Technology, or related field",
        domain_category="network_engineer",
    ),
    "full_stack_developer": JobRequirement(
        title="Full Stack Developer",
        description=(
            "Full Stack Developer role focused on building scalable web applications "
            "using modern technologies."
        ),
        required_skills=[
            "JavaScript", "HTML5", "CSS3", "React", "Node.js", "Express.js", "MongoDB",
            "REST APIs",
        ],
        min_experience=0,
        max_experience=3,
        education_preference="Computer Science, Engineering, or related field",
        domain_category="full_stack_developer",
    ),
    "software_developer": JobRequirement(
        title="Software Development Intern",
        description=(
            "Software Development Internship offering hands-on experience in "
            "application development."
        ),
        required_skills=[
            "Programming", "JavaScript", "Python", "Java", "Git", "Databases",
            "Problem Solving",
        ],
        min_experience=0,
        max_experience=1,
        education_preference="Computer Science, Software Engineering, or related field",
        domain_category="software_developer",
    ),
    "finance_intern": JobRequirement(
        title="Finance Intern",
        description=(
            "Finance Internship providing experience in financial analysis and "
            "accounting processes."
        ),
        required_skills=[
            "Financial Analysis", "Accounting", "Tally ERP9", "Excel", "Power BI",
            "Financial Reporting",
        ],
        min_experience=0,
        max_experience=1,
        education_preference="Finance, Accounting, Commerce, or MBA",
        domain_category="finance",
    ),
}


def get_preset(key: str) -> JobRequirement:
    """Look up a predefined job by key.

    Raises:
        ValueError: If the key is unknown.
    """
    try:
        return PREDEFINED_JOBS[key]
    except KeyError:
        valid = ", ".join(sorted(PREDEFINED_JOBS))
        msg = f"Unknown preset '{key}'. Available: {valid}"
        raise ValueError(msg) from None
