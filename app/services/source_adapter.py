"""One parameterized adapter for every data source.

An ``AdapterDefinition`` row says which client a source uses, how its query
strings (or URLs) are built and how many skill tags it may spend requests
on. ``SourceAdapter`` turns that row into entities for a query: it issues
the sub-requests one after another with a fixed pause between them, runs
text through the entity extractor and maps structured payloads directly.
A failed sub-request is logged and skipped; whatever was collected is
returned.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from app.core.config import Settings
from app.models import UNKNOWN_ADDRESS, Company, Contact, Coordinates, SearchQuery
from app.services.categories import (
    category_label,
    industry_types_for,
    office_types_for,
    search_term_for,
)
from app.services.entity_extractor import extract, is_valid_name
from app.services.errors import SourceUnavailableError
from app.services.source_clients import (
    ListingRow,
    ListingSelectors,
    SearchSnippet,
    SourceClients,
)

logger = logging.getLogger(__name__)

# Rendered as (search term, location text) -> query string or URL
QueryTemplate = Callable[[str, str], str]

# Used when a query carries no skill tags
DEFAULT_SKILL_TAGS = ("internship",)

# Web search answers link back to the search engine itself; that is not a company site
IGNORED_HINT_HOSTS = {"duckduckgo.com", "www.duckduckgo.com"}


class ClientKind(str, Enum):
    """Which client a source adapter talks to."""

    WEB_SEARCH = "web_search"
    OVERPASS = "overpass"
    HTML_LISTING = "html_listing"
    CURATED = "curated"


@dataclass(frozen=True)
class AdapterDefinition:
    """Declarative description of one data source.

    Attributes:
        label: Source label stamped on every entity the adapter produces.
        kind: Client the adapter uses.
        query_templates: Functions rendering a search term and location into
            a query string (web search) or page URL (HTML listing).
        max_skills: How many of the query's skill tags the adapter uses.
        map_skills: Whether skills go through the category table first.
        requires_coordinates: Whether the adapter needs query coordinates.
        fallback_address: Address for entities with no location of their own.
        selectors: CSS selectors for HTML listing pages.
        delay_seconds: Pause between sub-requests; None means the
            configured default.
    """

    label: str
    kind: ClientKind
    query_templates: tuple[QueryTemplate, ...] = ()
    max_skills: int = 2
    map_skills: bool = False
    requires_coordinates: bool = False
    fallback_address: str = UNKNOWN_ADDRESS
    selectors: ListingSelectors | None = None
    delay_seconds: float | None = None


def _website_hint(url: str | None) -> str | None:
    if not url:
        return None
    if urlparse(url).netloc.lower() in IGNORED_HINT_HOSTS:
        return None
    return url


def company_from_osm_element(element: dict[str, Any], source_label: str) -> Company | None:
    """Map an Overpass element to a Company using its OSM tags."""
    tags = element.get("tags") or {}
    name = (tags.get("name") or "").strip()
    if not is_valid_name(name):
        return None

    center = element.get("center") or {}
    lat = center.get("lat", element.get("lat"))
    lng = center.get("lon", element.get("lon"))
    coordinates = Coordinates(lat=lat, lng=lng) if lat is not None and lng is not None else None

    address_parts = [
        tags.get("addr:housenumber"),
        tags.get("addr:street"),
        tags.get("addr:city"),
        tags.get("addr:postcode"),
    ]
    address = ", ".join(part for part in address_parts if part)

    category = tags.get("office") or tags.get("amenity") or tags.get("shop") or "business"

    return Company(
        name=name,
        address=address or UNKNOWN_ADDRESS,
        contact=Contact(
            phone=tags.get("phone") or tags.get("contact:phone"),
            email=tags.get("email") or tags.get("contact:email"),
            website=tags.get("website") or tags.get("contact:website"),
        ),
        category=category.replace("_", " "),
        coordinates=coordinates,
        source=source_label,
    )


def company_from_curated_entry(entry: dict[str, Any], source_label: str) -> Company | None:
    """Map a curated directory entry to a Company."""
    name = entry.get("name", "")
    if not is_valid_name(name):
        return None
    coordinates = None
    if entry.get("lat") is not None and entry.get("lng") is not None:
        coordinates = Coordinates(lat=entry["lat"], lng=entry["lng"])
    return Company(
        name=name,
        address=entry.get("address"),
        contact=Contact(
            phone=entry.get("phone"),
            email=entry.get("email"),
            website=entry.get("website"),
        ),
        category=entry.get("category") or "General",
        coordinates=coordinates,
        source=source_label,
    )


class SourceAdapter:
    """Runs one AdapterDefinition against a search query."""

    def __init__(
        self,
        definition: AdapterDefinition,
        clients: SourceClients,
        settings: Settings,
    ) -> None:
        self.definition = definition
        self._clients = clients
        self._delay = (
            definition.delay_seconds
            if definition.delay_seconds is not None
            else settings.adapter_delay_seconds
        )

    @property
    def label(self) -> str:
        return self.definition.label

    def __repr__(self) -> str:
        return f"SourceAdapter({self.label!r}, kind={self.definition.kind.value})"

    def _skills(self, query: SearchQuery) -> list[str]:
        skills = list(query.skill_tags) or list(DEFAULT_SKILL_TAGS)
        return skills[: self.definition.max_skills]

    async def search(self, query: SearchQuery) -> list[Company]:
        """Collect entities for the query from this source.

        Args:
            query: The search to run.

        Returns:
            Entities in the order the source produced them; empty when the
            source needs coordinates the query does not have.
        """
        definition = self.definition

        if definition.requires_coordinates and not query.has_coordinates:
            logger.info(f"{self.label}: skipped, query has no coordinates")
            return []

        sub_requests = self._plan(query)
        entities: list[Company] = []

        for index, (description, run) in enumerate(sub_requests):
            if index > 0 and self._delay > 0:
                await asyncio.sleep(self._delay)
            try:
                found = await run()
            except SourceUnavailableError as e:
                logger.warning(f"{self.label}: {description} unavailable: {e}")
                continue
            except Exception as e:
                logger.error(f"{self.label}: {description} failed: {e}")
                continue
            logger.debug(f"{self.label}: {description} gave {len(found)} entities")
            entities.extend(found)

        logger.info(f"{self.label}: {len(entities)} entities from {len(sub_requests)} requests")
        return entities

    def _plan(self, query: SearchQuery) -> list[tuple[str, Callable[[], Awaitable[list[Company]]]]]:
        """Sub-requests for the query, as (description, coroutine factory) pairs."""
        kind = self.definition.kind

        if kind is ClientKind.OVERPASS:
            return [("map query", lambda: self._run_overpass(query))]
        if kind is ClientKind.CURATED:
            return [("directory lookup", lambda: self._run_curated(query))]

        plan: list[tuple[str, Callable[[], Awaitable[list[Company]]]]] = []
        for skill in self._skills(query):
            term = search_term_for(skill) if self.definition.map_skills else skill
            for template in self.definition.query_templates:
                rendered = template(term, query.location_text)
                if kind is ClientKind.WEB_SEARCH:
                    plan.append((
                        f"query {rendered!r}",
                        self._web_search_runner(rendered, skill),
                    ))
                else:
                    plan.append((
                        f"page {rendered}",
                        self._html_listing_runner(rendered, skill),
                    ))
        return plan

    def _web_search_runner(self, rendered: str, skill: str) -> Callable[[], Awaitable[list[Company]]]:
        async def run() -> list[Company]:
            snippets = await self._clients.web_search(rendered)
            return self._from_snippets(snippets, skill)
        return run

    def _html_listing_runner(self, url: str, skill: str) -> Callable[[], Awaitable[list[Company]]]:
        async def run() -> list[Company]:
            if self.definition.selectors is None:
                raise SourceUnavailableError(self.label, "no selectors configured")
            rows = await self._clients.html_listing(url, self.definition.selectors)
            return self._from_listing_rows(rows, skill)
        return run

    def _from_snippets(self, snippets: list[SearchSnippet], skill: str) -> list[Company]:
        entities: list[Company] = []
        for snippet in snippets:
            entity = extract(
                snippet.text,
                self.label,
                fallback_address=self.definition.fallback_address,
                category=category_label(skill),
                website_hint=_website_hint(snippet.url),
            )
            if entity is not None:
                entities.append(entity)
        return entities

    def _from_listing_rows(self, rows: list[ListingRow], skill: str) -> list[Company]:
        entities: list[Company] = []
        for row in rows:
            if not is_valid_name(row.name):
                continue
            entities.append(Company(
                name=row.name,
                address=row.address or self.definition.fallback_address,
                contact=Contact(phone=row.phone),
                category=category_label(skill),
                source=self.label,
            ))
        return entities

    async def _run_overpass(self, query: SearchQuery) -> list[Company]:
        skills = list(query.skill_tags)
        elements = await self._clients.overpass(
            query.coordinates,
            query.radius_meters,
            office_types_for(skills),
            industry_types_for(skills),
        )
        entities: list[Company] = []
        for element in elements:
            entity = company_from_osm_element(element, self.label)
            if entity is not None:
                entities.append(entity)
        return entities

    async def _run_curated(self, query: SearchQuery) -> list[Company]:
        entries = await self._clients.curated(query.location_text, query.skill_tags)
        entities: list[Company] = []
        for entry in entries:
            entity = company_from_curated_entry(entry, self.label)
            if entity is not None:
                entities.append(entity)
        return entities
