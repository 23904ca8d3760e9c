"""Clients for the external data sources a search fans out to.

Every client turns transport problems (timeouts, non-2xx answers, bodies
that are not the expected JSON or HTML) into ``SourceUnavailableError`` so
the adapters only ever deal with one failure type.

Sources:
- DuckDuckGo Instant Answer API (free web search, no key)
- OpenStreetMap Overpass API (offices and businesses around a point)
- Job board HTML pages fetched through a read-only proxy
- A bundled directory of verified companies (no network)
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx
from bs4 import BeautifulSoup
from rapidfuzz import fuzz

from app.core.config import Settings, get_settings
from app.models import Coordinates
from app.services.errors import SourceUnavailableError
from app.services.regions import primary_city

logger = logging.getLogger(__name__)

DUCKDUCKGO_API_URL = "https://api.duckduckgo.com/"
OVERPASS_API_URL = "https://overpass-api.de/api/interpreter"

# Server-side Overpass timeout, separate from the client timeout
OVERPASS_QUERY_TIMEOUT = 30

CURATED_DIRECTORY_PATH = Path(__file__).resolve().parent.parent / "data" / "curated_companies.json"

# rapidfuzz partial_ratio score needed for a curated skill to count as a match
SKILL_MATCH_THRESHOLD = 80

# Named places that are never employers
EXCLUDED_AMENITIES = {
    "restaurant", "cafe", "fast_food", "bar", "pub", "fuel", "atm", "pharmacy",
    "hospital", "clinic", "dentist", "veterinary", "place_of_worship", "parking",
    "toilets", "university", "college", "school", "research_institute",
}
EXCLUDED_SHOPS = {
    "supermarket", "convenience", "clothes", "shoes", "bakery", "butcher",
    "greengrocer", "hairdresser", "beauty", "jewelry", "florist", "gift", "toys",
}


@dataclass
class SearchSnippet:
    """One text item from a web search answer."""

    text: str
    url: str | None = None


@dataclass
class ListingSelectors:
    """CSS selectors for one job board's result page.

    Each field holds alternatives tried in order; the first selector that
    finds something wins.
    """

    cards: list[str]
    name: list[str]
    location: list[str] = field(default_factory=list)
    phone: list[str] = field(default_factory=list)


@dataclass
class ListingRow:
    """One company row scraped from a listing page."""

    name: str
    address: str | None = None
    phone: str | None = None


def flatten_related_topics(topics: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten DuckDuckGo RelatedTopics, which nest groups under ``Topics``."""
    flat: list[dict[str, Any]] = []
    for topic in topics or []:
        if not isinstance(topic, dict):
            continue
        if "Topics" in topic:
            flat.extend(flatten_related_topics(topic.get("Topics") or []))
        else:
            flat.append(topic)
    return flat


def parse_instant_answer(data: dict[str, Any]) -> list[SearchSnippet]:
    """Collect text snippets from a DuckDuckGo Instant Answer payload."""
    snippets: list[SearchSnippet] = []

    for item in data.get("Results") or []:
        if isinstance(item, dict) and item.get("Text"):
            snippets.append(SearchSnippet(text=item["Text"], url=item.get("FirstURL")))

    for topic in flatten_related_topics(data.get("RelatedTopics") or []):
        if topic.get("Text"):
            snippets.append(SearchSnippet(text=topic["Text"], url=topic.get("FirstURL")))

    abstract = data.get("AbstractText") or data.get("Abstract")
    if abstract:
        snippets.append(SearchSnippet(text=abstract, url=data.get("AbstractURL") or None))

    return snippets


def build_overpass_query(
    coordinates: Coordinates,
    radius_meters: int,
    office_types: list[str],
    industries: list[str],
) -> str:
    """Build an Overpass QL query for named businesses around a point."""
    around = f"(around:{radius_meters},{coordinates.lat},{coordinates.lng})"
    filters: list[str] = []

    for office in office_types:
        filters.append(f'["office"="{office}"]')
    for industry in industries:
        filters.append(f'["industrial"="{industry}"]')
        filters.append(f'["craft"="{industry}"]')

    filters.extend([
        '["name"]["office"]',
        '["name"]["building"="office"]',
        '["name"]["building"="commercial"]',
        '["name"~"(company|corp|inc|ltd|llc|pvt|technologies|tech|solutions|systems|services|group|enterprises)",i]',
    ])

    statements = "".join(
        f"{element}{tag_filter}{around};"
        for tag_filter in filters
        for element in ("node", "way")
    )
    return f"[out:json][timeout:{OVERPASS_QUERY_TIMEOUT}];({statements});out center;"


def is_business_element(tags: dict[str, str]) -> bool:
    """Check whether OSM tags describe a named business rather than a shop or school."""
    name = tags.get("name", "")
    if len(name) <= 2:
        return False
    if tags.get("amenity") in EXCLUDED_AMENITIES:
        return False
    if tags.get("shop") in EXCLUDED_SHOPS:
        return False
    return True


def parse_listing_html(html: str, selectors: ListingSelectors) -> list[ListingRow]:
    """Extract company rows from a job board page."""
    soup = BeautifulSoup(html, "lxml")

    cards = []
    for card_selector in selectors.cards:
        cards = soup.select(card_selector)
        if cards:
            break

    def first_text(card, options: list[str]) -> str | None:
        for selector in options:
            element = card.select_one(selector)
            if element is not None:
                text = element.get_text(" ", strip=True)
                if text:
                    return text
        return None

    rows: list[ListingRow] = []
    for card in cards:
        name = first_text(card, selectors.name)
        if not name:
            continue
        rows.append(ListingRow(
            name=name,
            address=first_text(card, selectors.location),
            phone=first_text(card, selectors.phone),
        ))
    return rows


@lru_cache(maxsize=1)
def load_curated_directory(path: str = str(CURATED_DIRECTORY_PATH)) -> list[dict[str, Any]]:
    """Load the bundled company directory."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _city_matches(entry: dict[str, Any], location_text: str) -> bool:
    lowered = location_text.lower()
    primary = primary_city(lowered)
    return any(
        city in lowered or (primary and primary in city)
        for city in entry.get("cities", [])
    )


def _skill_matches(entry: dict[str, Any], skills: list[str] | tuple[str, ...]) -> bool:
    if not skills:
        return True
    return any(
        fuzz.partial_ratio(skill.lower(), known.lower()) >= SKILL_MATCH_THRESHOLD
        for skill in skills
        for known in entry.get("skills", [])
    )


class SourceClients:
    """Outbound clients sharing one httpx.AsyncClient.

    Example usage:
        clients = SourceClients()
        snippets = await clients.web_search('"python" companies Pune')
        await clients.close()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self._settings.request_timeout_seconds,
                headers={"User-Agent": self._settings.user_agent},
                follow_redirects=True,
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def _request_json(self, source: str, method: str, url: str, **kwargs) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise SourceUnavailableError(source, f"timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise SourceUnavailableError(source, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceUnavailableError(source, f"request failed: {e}") from e
        except ValueError as e:
            raise SourceUnavailableError(source, f"malformed JSON: {e}") from e

    async def web_search(self, query: str) -> list[SearchSnippet]:
        """Run one DuckDuckGo Instant Answer query."""
        data = await self._request_json(
            "DuckDuckGo",
            "GET",
            DUCKDUCKGO_API_URL,
            params={"q": query, "format": "json", "no_html": 1, "skip_disambig": 1},
        )
        if not isinstance(data, dict):
            raise SourceUnavailableError("DuckDuckGo", "unexpected payload")
        snippets = parse_instant_answer(data)
        logger.debug(f"DuckDuckGo returned {len(snippets)} snippets for {query!r}")
        return snippets

    async def overpass(
        self,
        coordinates: Coordinates,
        radius_meters: int,
        office_types: list[str],
        industries: list[str],
    ) -> list[dict[str, Any]]:
        """Fetch named business elements around a point."""
        query = build_overpass_query(coordinates, radius_meters, office_types, industries)
        data = await self._request_json(
            "Overpass",
            "POST",
            OVERPASS_API_URL,
            data={"data": query},
        )
        if not isinstance(data, dict):
            raise SourceUnavailableError("Overpass", "unexpected payload")
        elements = [
            element for element in data.get("elements") or []
            if is_business_element(element.get("tags") or {})
        ]
        logger.debug(f"Overpass returned {len(elements)} business elements")
        return elements

    async def html_listing(self, url: str, selectors: ListingSelectors) -> list[ListingRow]:
        """Fetch a job board page through the proxy and parse its rows."""
        data = await self._request_json(
            "HTML proxy",
            "GET",
            self._settings.html_proxy_url,
            params={"url": url},
        )
        contents = data.get("contents") if isinstance(data, dict) else None
        if not contents:
            raise SourceUnavailableError("HTML proxy", f"no page contents for {url}")
        return parse_listing_html(contents, selectors)

    async def curated(
        self,
        location_text: str,
        skills: list[str] | tuple[str, ...],
    ) -> list[dict[str, Any]]:
        """Curated companies in the location whose skills overlap the query."""
        try:
            directory = load_curated_directory()
        except (OSError, ValueError) as e:
            raise SourceUnavailableError("Curated directory", str(e)) from e
        return [
            entry for entry in directory
            if _city_matches(entry, location_text) and _skill_matches(entry, skills)
        ]


_source_clients: SourceClients | None = None


def get_source_clients() -> SourceClients:
    """Get the singleton SourceClients instance."""
    global _source_clients
    if _source_clients is None:
        _source_clients = SourceClients()
    return _source_clients
