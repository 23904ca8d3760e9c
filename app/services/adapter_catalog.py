"""Declarative catalog of data sources and the bundles searches use.

Adding a source means adding a row to ``ADAPTER_DEFINITIONS`` and naming it
in a bundle; no new adapter code is needed.
"""

import logging
from urllib.parse import quote_plus

from app.core.config import Settings
from app.services.regions import REGION_INDIA
from app.services.source_adapter import (
    AdapterDefinition,
    ClientKind,
    QueryTemplate,
    SourceAdapter,
)
from app.services.source_clients import ListingSelectors, SourceClients

logger = logging.getLogger(__name__)

# High-volume job portals get one extra skill tag
JOB_PORTAL_MAX_SKILLS = 3


def _portal(site: str, extra: str = "") -> QueryTemplate:
    def template(term: str, location: str) -> str:
        return f'site:{site} "{term}" jobs "{location}"{extra}'
    return template


def _directory(site: str) -> QueryTemplate:
    def template(term: str, location: str) -> str:
        return f'site:{site} "{term}" "{location}"'
    return template


def _job_board(site: str) -> QueryTemplate:
    def template(term: str, location: str) -> str:
        return f'site:{site} "{term}" {location} jobs OR careers OR hiring'
    return template


def _linkedin_companies(term: str, location: str) -> str:
    return f'site:linkedin.com/company "{term}" companies "{location}" India'


def _angel_startups(term: str, location: str) -> str:
    return f'site:angel.co "{term}" startups "{location}" India'


def _indian_startups(term: str, location: str) -> str:
    return f'"{term}" startups "{location}" India hiring'


def _crunchbase(term: str, location: str) -> str:
    return f'site:crunchbase.com "{term}" companies "{location}"'


def _company_websites(term: str, location: str) -> str:
    return f'"{term}" companies {location} -university -college -school'


def _indeed_listing_url(term: str, location: str) -> str:
    return f"https://www.indeed.com/jobs?q={quote_plus(term + ' jobs')}&l={quote_plus(location)}"


def _remoteok_listing_url(term: str, location: str) -> str:
    slug = "-".join(term.lower().split())
    return f"https://remoteok.com/remote-{quote_plus(slug)}-jobs"


INDEED_SELECTORS = ListingSelectors(
    cards=['[data-testid="job-tile"]', ".jobsearch-SerpJobCard", ".job_seen_beacon", ".slider_item"],
    name=['[data-testid="company-name"]', ".companyName", "span[title]"],
    location=['[data-testid="text-location"]', '[data-testid="job-location"]', ".companyLocation"],
)

REMOTEOK_SELECTORS = ListingSelectors(
    cards=["tr.job", ".job"],
    name=[".company h3", ".company", '[class*="company"]'],
    location=[".location"],
)

ADAPTER_DEFINITIONS: tuple[AdapterDefinition, ...] = (
    # Indian job portals
    AdapterDefinition(
        label="Naukri",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_portal("naukri.com", " hiring"),),
        max_skills=JOB_PORTAL_MAX_SKILLS,
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Indeed India",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_portal("indeed.co.in", " -university -college"),),
        max_skills=JOB_PORTAL_MAX_SKILLS,
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Monster India",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_portal("monsterindia.com"),),
        fallback_address="India",
    ),
    AdapterDefinition(
        label="TimesJobs",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_portal("timesjobs.com"),),
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Foundit",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_portal("foundit.in"),),
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Shine",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_portal("shine.com"),),
        fallback_address="India",
    ),
    # Indian business directories
    AdapterDefinition(
        label="JustDial",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_directory("justdial.com"),),
        map_skills=True,
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Sulekha",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_directory("sulekha.com"),),
        map_skills=True,
        fallback_address="India",
    ),
    AdapterDefinition(
        label="IndiaMART",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_directory("indiamart.com"),),
        map_skills=True,
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Yellow Pages India",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_directory("yellowpages.co.in"),),
        map_skills=True,
        fallback_address="India",
    ),
    AdapterDefinition(
        label="TradeIndia",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_directory("tradeindia.com"),),
        map_skills=True,
        fallback_address="India",
    ),
    # Indian company profiles and startups
    AdapterDefinition(
        label="LinkedIn India",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_linkedin_companies,),
        fallback_address="India",
    ),
    AdapterDefinition(
        label="AngelList India",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_angel_startups,),
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Indian Startups",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_indian_startups,),
        fallback_address="India",
    ),
    AdapterDefinition(
        label="Verified Companies",
        kind=ClientKind.CURATED,
        fallback_address="India",
    ),
    # Map overlay, used by both bundles
    AdapterDefinition(
        label="OpenStreetMap",
        kind=ClientKind.OVERPASS,
        requires_coordinates=True,
    ),
    # General web sources
    AdapterDefinition(
        label="LinkedIn Jobs",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_job_board("linkedin.com/jobs"),),
    ),
    AdapterDefinition(
        label="Glassdoor",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_job_board("glassdoor.com/Jobs"),),
    ),
    AdapterDefinition(
        label="Wellfound",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_job_board("wellfound.com"), _job_board("angel.co")),
    ),
    AdapterDefinition(
        label="Stack Overflow Jobs",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_job_board("stackoverflow.com/jobs"),),
    ),
    AdapterDefinition(
        label="RemoteOK",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_job_board("remoteok.io"),),
        fallback_address="Remote Company",
    ),
    AdapterDefinition(
        label="Crunchbase",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_crunchbase,),
    ),
    AdapterDefinition(
        label="Yellow Pages",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_directory("yellowpages.com"),),
        map_skills=True,
    ),
    AdapterDefinition(
        label="Company Websites",
        kind=ClientKind.WEB_SEARCH,
        query_templates=(_company_websites,),
    ),
    # Job board pages
    AdapterDefinition(
        label="Indeed",
        kind=ClientKind.HTML_LISTING,
        query_templates=(_indeed_listing_url,),
        max_skills=JOB_PORTAL_MAX_SKILLS,
        fallback_address="Location not specified",
        selectors=INDEED_SELECTORS,
    ),
    AdapterDefinition(
        label="RemoteOK Listings",
        kind=ClientKind.HTML_LISTING,
        query_templates=(_remoteok_listing_url,),
        fallback_address="Remote Company",
        selectors=REMOTEOK_SELECTORS,
    ),
)

REGIONAL_BUNDLE: tuple[str, ...] = (
    "Naukri",
    "Indeed India",
    "Monster India",
    "TimesJobs",
    "Foundit",
    "Shine",
    "JustDial",
    "Sulekha",
    "IndiaMART",
    "Yellow Pages India",
    "TradeIndia",
    "LinkedIn India",
    "AngelList India",
    "Indian Startups",
    "OpenStreetMap",
    "Verified Companies",
)

GENERAL_BUNDLE: tuple[str, ...] = (
    "OpenStreetMap",
    "LinkedIn Jobs",
    "Glassdoor",
    "Wellfound",
    "Stack Overflow Jobs",
    "RemoteOK",
    "Crunchbase",
    "Yellow Pages",
    "Company Websites",
    "Indeed",
    "RemoteOK Listings",
)

_DEFINITIONS_BY_LABEL = {definition.label: definition for definition in ADAPTER_DEFINITIONS}


def get_definition(label: str) -> AdapterDefinition:
    return _DEFINITIONS_BY_LABEL[label]


def bundle_for(region: str, settings: Settings) -> list[AdapterDefinition]:
    """Adapter definitions for a region, in invocation order."""
    labels = REGIONAL_BUNDLE if region == REGION_INDIA else GENERAL_BUNDLE
    definitions = [get_definition(label) for label in labels]
    if not settings.enable_html_listings:
        definitions = [d for d in definitions if d.kind is not ClientKind.HTML_LISTING]
    return definitions


def bundle_requires_coordinates(definitions: list[AdapterDefinition]) -> bool:
    """True when no adapter in the bundle can run without query coordinates."""
    return bool(definitions) and all(d.requires_coordinates for d in definitions)


def build_adapters(
    definitions: list[AdapterDefinition],
    clients: SourceClients,
    settings: Settings,
) -> list[SourceAdapter]:
    """Instantiate one SourceAdapter per definition."""
    return [SourceAdapter(definition, clients, settings) for definition in definitions]
