"""Static skill mappings used to build source queries.

Skill tags come from the user as free text ("AI/ML", "web development").
Web search and directory sources want broader business category phrases,
and the OpenStreetMap source wants ``office=*`` / ``industrial=*`` values.
"""

SKILL_SEARCH_TERMS: dict[str, str] = {
    "ai/ml": "Artificial Intelligence Machine Learning Data Science",
    "machine learning": "Machine Learning Data Analytics AI",
    "artificial intelligence": "AI Artificial Intelligence ML",
    "data science": "Data Science Analytics Big Data",
    "software development": "Software Development IT Services Programming",
    "web development": "Web Development Digital Services Website Design",
    "app development": "Mobile App Development iOS Android",
    "mobile development": "Mobile Development App Development",
    "full stack": "Full Stack Development Web Development",
    "frontend": "Frontend Development UI Development",
    "backend": "Backend Development Server Development",
    "devops": "DevOps Cloud Computing Infrastructure",
    "cloud computing": "Cloud Services AWS Azure Google Cloud",
    "cybersecurity": "Cybersecurity Information Security",
    "blockchain": "Blockchain Cryptocurrency FinTech",
    "finance": "Financial Services Banking Investment",
    "fintech": "FinTech Financial Technology Banking",
    "marketing": "Digital Marketing Advertising Brand",
    "digital marketing": "Digital Marketing SEO SEM Social Media",
    "design": "Design UI UX Graphic Design Creative",
    "ui/ux": "UI UX Design User Experience Interface",
    "graphic design": "Graphic Design Creative Visual Design",
    "consulting": "IT Consulting Business Consulting Advisory",
    "business analyst": "Business Analysis Consulting Strategy",
    "project management": "Project Management Program Management",
    "sales": "Sales Business Development Marketing",
    "business development": "Business Development Sales Growth",
    "hr": "Human Resources HR Services Recruitment",
    "operations": "Operations Management Supply Chain",
}

SKILL_OFFICE_TYPES: dict[str, list[str]] = {
    # Technology
    "ai/ml": ["it", "research", "company"],
    "machine learning": ["it", "research", "company"],
    "data science": ["it", "research", "company"],
    "web development": ["it", "company", "advertising"],
    "app development": ["it", "company", "telecommunication"],
    "mobile development": ["it", "company", "telecommunication"],
    "software development": ["it", "company", "telecommunication"],
    "cybersecurity": ["it", "company", "research"],
    "cloud computing": ["it", "company", "telecommunication"],
    "devops": ["it", "company"],
    "blockchain": ["it", "company", "financial"],
    # Engineering
    "electronics": ["it", "company", "research"],
    "embedded systems": ["it", "company", "research"],
    "robotics": ["it", "company", "research"],
    "aerospace": ["research", "company"],
    "mechanical engineering": ["company", "research"],
    "civil engineering": ["architect", "company"],
    "electrical engineering": ["it", "company", "research"],
    # Business and finance
    "finance": ["financial", "accountant", "insurance", "company"],
    "fintech": ["it", "financial", "company"],
    "banking": ["financial", "company"],
    "accounting": ["accountant", "financial", "company"],
    "investment": ["financial", "company"],
    "insurance": ["insurance", "company"],
    # Marketing and design
    "marketing": ["advertising", "company"],
    "digital marketing": ["advertising", "company", "it"],
    "design": ["architect", "advertising", "company"],
    "ui/ux": ["it", "company", "advertising"],
    "graphic design": ["advertising", "company"],
    "content writing": ["advertising", "company"],
    "social media": ["advertising", "company"],
    # Professional services
    "consulting": ["consulting", "company"],
    "legal": ["lawyer", "company"],
    "law": ["lawyer", "company"],
    "hr": ["company"],
    "human resources": ["company"],
    "project management": ["company", "consulting"],
    # Life sciences and media
    "biotechnology": ["research", "company"],
    "pharmaceutical": ["research", "company"],
    "gaming": ["it", "company"],
    "animation": ["company", "it"],
    "ecommerce": ["it", "company"],
    "sales": ["company"],
    "business development": ["company"],
}

DEFAULT_OFFICE_TYPES = ["it", "company", "consulting", "research"]

SKILL_INDUSTRY_TYPES: dict[str, list[str]] = {
    "electronics": ["electronics", "semiconductor"],
    "robotics": ["electronics", "automotive"],
    "ai/ml": ["electronics", "semiconductor"],
    "embedded systems": ["electronics", "semiconductor"],
    "iot": ["electronics", "semiconductor"],
    "aerospace": ["aerospace"],
    "defense": ["aerospace"],
    "automotive": ["automotive"],
    "electric vehicles": ["automotive", "electronics"],
    "manufacturing": ["automotive", "electronics"],
    "mechanical engineering": ["automotive"],
    "renewable energy": ["electronics"],
    "biotechnology": ["pharmaceutical"],
    "pharmaceutical": ["pharmaceutical"],
    "chemistry": ["chemicals"],
}


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def search_term_for(skill: str) -> str:
    """Business category phrase for a skill; unmapped skills pass through unchanged."""
    return SKILL_SEARCH_TERMS.get(skill.strip().lower(), skill.strip())


def office_types_for(skills: list[str] | tuple[str, ...]) -> list[str]:
    offices: list[str] = []
    for skill in skills:
        offices.extend(SKILL_OFFICE_TYPES.get(skill.strip().lower(), []))
    return _dedupe(offices) or list(DEFAULT_OFFICE_TYPES)


def industry_types_for(skills: list[str] | tuple[str, ...]) -> list[str]:
    industries: list[str] = []
    for skill in skills:
        industries.extend(SKILL_INDUSTRY_TYPES.get(skill.strip().lower(), []))
    return _dedupe(industries)


def category_label(skill: str | None) -> str:
    """Short category tag stored on an entity found through ``skill``."""
    if not skill:
        return "General"
    return skill.strip().title() if skill.strip().islower() else skill.strip()
