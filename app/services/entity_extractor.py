"""
Company extraction from free-text search snippets.

Search APIs and job boards hand back short human-readable snippets such as
"Acme Technologies is hiring Python interns in Pune - call 9876543210".
This module pulls a company name plus best-effort contact details out of
such text. Nothing here touches the network and every function is
deterministic.
"""

import logging
import re

from app.models import UNKNOWN_ADDRESS, Company, Contact
from app.services.regions import INDIAN_CITIES

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 80

# All-caps names up to this length are treated as acronyms ("TCS", "HCLTECH")
SHORT_ACRONYM_LENGTH = 6

# Institutions, portals and navigation text that look like names but aren't companies
NAME_DENYLIST = [
    # Education
    "university", "college", "school", "academy", "institute", "education",
    # Portals and directories
    "wikipedia", "google", "facebook", "linkedin", "indeed", "naukri",
    "justdial", "sulekha", "monster", "timesjobs", "shine", "foundit", "glassdoor",
    # Listicle and question phrasing
    "the best", "how to", "what is", "where to", "when to", "top 10",
    # Government
    "government", "ministry", "department", "authority", "commission",
    # Navigation
    "apply now", "click here", "read more", "view all", "see all",
]

_DENYLIST_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in NAME_DENYLIST) + r")\b",
    re.IGNORECASE,
)

# A capitalised token, optionally joined to the next by "&"
_WORD = r"[A-Z][A-Za-z0-9&'.\-]*"
_NAME = rf"{_WORD}(?:\s+(?:&\s+)?{_WORD}){{0,5}}"

_LEGAL_SUFFIX = (
    r"(?i:Pvt\.?\s?Ltd\.?|Private\s+Limited|Pvt\.?\s+Limited|Private\s+Ltd\.?"
    r"|Ltd\.?|Limited|Inc\.?|LLC|LLP|Corporation|Corp\.?|Company|Co\.)"
)

_DOMAIN_SUFFIX = (
    r"(?:Technologies|Technology|Tech|Infotech|Software|Solutions|Systems|Services"
    r"|Consultancy|Digital|Innovations?|Labs|Works|Studios|Dynamics|Analytics"
    r"|Enterprises|Group|Associates|Partners|Consulting|Advisory|Ventures|Holdings)"
)

_END = r"(?![A-Za-z0-9])"

# Ordered from most to least specific; the first set with an accepted name wins
NAME_RULE_SETS: list[tuple[str, list[re.Pattern[str]]]] = [
    ("legal", [
        re.compile(rf"({_NAME}\s+{_LEGAL_SUFFIX}){_END}"),
    ]),
    ("domain", [
        re.compile(rf"({_NAME}\s+{_DOMAIN_SUFFIX}){_END}"),
    ]),
    ("contextual", [
        re.compile(rf"\b(?i:at|with|join|joining)\s+({_NAME})"),
        re.compile(rf"({_NAME})\s+(?i:is\s+)?(?i:now\s+)?(?i:hiring|recruiting|seeking|looking\s+for)\b"),
        re.compile(rf"({_NAME})\s+(?i:careers|jobs|internships?)\b"),
    ]),
]

_LEADING_CONNECTIVES = {"at", "with", "join", "joining", "for", "by"}
_TRAILING_CONNECTIVES = {"is", "are", "now", "hiring", "careers", "jobs", "internship", "internships"}

# Never part of a name; title-case titles run the name pattern straight through them
_BOUNDARY_WORDS = {
    "at", "in", "with", "join", "joining", "work", "is", "are", "now",
    "hiring", "careers", "jobs", "internship", "internships",
}

PHONE_PATTERNS = [
    re.compile(r"\+91[-.\s]?[6-9]\d{9}(?!\d)"),
    re.compile(r"(?<![\d+])91[-.\s]?[6-9]\d{9}(?!\d)"),
    re.compile(r"(?<!\d)[6-9]\d{9}(?!\d)"),
    re.compile(r"(?<!\d)0\d{2,4}[-.\s]?\d{6,8}(?!\d)"),
    re.compile(r"\+\d{1,3}[-.\s]?\(?\d{1,4}\)?(?:[-.\s]?\d{2,4}){2,4}(?!\d)"),
]

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

URL_PATTERN = re.compile(r"https?://[^\s<>\"']+")

_PLACE = r"[A-Z][a-zA-Z]+(?:\s[A-Z][a-zA-Z]+)*"

ADDRESS_PATTERNS = [
    re.compile(rf"{_PLACE},\s*{_PLACE},?\s*India\b"),
    re.compile(rf"{_PLACE}\s*-?\s*(?<!\d)\d{{6}}(?!\d)"),
    re.compile(
        r"\b(?:" + "|".join(re.escape(city) for city in INDIAN_CITIES) + r")\b",
        re.IGNORECASE,
    ),
]


def normalize_name_key(name: str) -> str:
    """Dedup key for a company name: lowercase, no punctuation, single spaces."""
    lowered = name.lower().strip()
    without_punctuation = re.sub(r"[^\w\s]", "", lowered)
    return re.sub(r"\s+", " ", without_punctuation).strip()


def is_valid_name(name: str | None) -> bool:
    """Check whether a candidate string is plausibly a company name."""
    if not name:
        return False
    name = name.strip()
    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        return False
    if not re.search(r"[A-Za-z]", name):
        return False
    if name == name.upper() and len(name) > SHORT_ACRONYM_LENGTH:
        return False
    if _DENYLIST_PATTERN.search(name):
        return False
    return True


def _strip_connectives(candidate: str) -> str:
    words = candidate.split()
    while words and words[-1].lower() in _TRAILING_CONNECTIVES:
        words.pop()
    # "Python Jobs In Pune At Acme Solutions" keeps only "Acme Solutions"
    for index in range(len(words) - 1, -1, -1):
        if words[index].lower() in _BOUNDARY_WORDS:
            words = words[index + 1:]
            break
    while words and words[0].lower() in _LEADING_CONNECTIVES:
        words.pop(0)
    return " ".join(words).strip(" ,;:-")


def extract_name(text: str) -> str | None:
    """First acceptable company name in ``text``, or None."""
    if not text:
        return None

    for rule_name, patterns in NAME_RULE_SETS:
        candidates: list[tuple[int, str]] = []
        for pattern in patterns:
            for match in pattern.finditer(text):
                candidates.append((match.start(1), match.group(1)))

        # Text order across every pattern in the set
        for _, raw in sorted(candidates, key=lambda c: c[0]):
            candidate = _strip_connectives(raw.strip())
            if is_valid_name(candidate):
                logger.debug(f"Extracted {candidate!r} with {rule_name} rules")
                return candidate

    return None


def extract_phone(text: str) -> str | None:
    if not text:
        return None
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return None


def extract_email(text: str) -> str | None:
    if not text:
        return None
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def extract_website(text: str, hint: str | None = None) -> str | None:
    """First URL in the text, else the hint (usually the result's own link)."""
    if text:
        match = URL_PATTERN.search(text)
        if match:
            return match.group(0).rstrip(".,;:)")
    return hint or None


def extract_address(text: str) -> str | None:
    """Best-effort location fragment: "City, State, India", "City - PIN" or a city name."""
    if not text:
        return None
    for pattern in ADDRESS_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return None


def extract(
    text: str,
    source_label: str,
    *,
    fallback_address: str = UNKNOWN_ADDRESS,
    category: str = "General",
    website_hint: str | None = None,
) -> Company | None:
    """Build a Company from a text snippet.

    Args:
        text: Arbitrary snippet; usually a search result title or summary.
        source_label: Label of the adapter the snippet came from.
        fallback_address: Address used when no location is found in the text.
        category: Category tag for the resulting entity.
        website_hint: URL to use when the text itself contains none.

    Returns:
        The extracted Company, or None when no valid name is present.
    """
    name = extract_name(text)
    if name is None:
        return None

    return Company(
        name=name,
        address=extract_address(text) or fallback_address,
        contact=Contact(
            phone=extract_phone(text),
            email=extract_email(text),
            website=extract_website(text, website_hint),
        ),
        category=category,
        source=source_label,
    )
