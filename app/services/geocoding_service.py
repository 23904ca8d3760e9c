"""Geocoding through OpenStreetMap Nominatim.

Nominatim is free and keyless but requires a descriptive User-Agent and
allows about one request per second; each lookup here is a single request
with no retries. Indian locations fall back to a table of known city
coordinates when Nominatim has no answer.
"""

import logging

import httpx

from app.core.config import Settings, get_settings
from app.models import Coordinates
from app.services.errors import LocationNotFoundError
from app.services.regions import is_indian_location, known_coordinates, normalize_location

logger = logging.getLogger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"


def format_coordinates(lat: float, lng: float) -> str:
    return f"{lat:.4f}, {lng:.4f}"


class GeocodingService:
    """Forward and reverse geocoding for search locations."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with proper headers."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self._settings.request_timeout_seconds,
                headers={
                    "User-Agent": self._settings.user_agent,
                    "Accept": "application/json",
                },
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def _nominatim_search(self, query: str, country_code: str | None) -> Coordinates | None:
        params = {"format": "json", "q": query, "limit": 1}
        if country_code:
            params["countrycodes"] = country_code

        client = await self._get_client()
        try:
            response = await client.get(NOMINATIM_SEARCH_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Nominatim search failed for {query!r}: {e}")
            return None

        if not data:
            return None
        try:
            coordinates = Coordinates(lat=float(data[0]["lat"]), lng=float(data[0]["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unexpected Nominatim payload for {query!r}: {e}")
            return None
        return None if coordinates.is_sentinel else coordinates

    async def geocode(self, location_text: str) -> Coordinates:
        """Resolve a location to coordinates.

        Args:
            location_text: Free-text location, e.g. "Pune" or "Berlin, Germany".

        Returns:
            Coordinates of the best match.

        Raises:
            LocationNotFoundError: Neither Nominatim nor the fallback table
                knows the location.
        """
        location_text = (location_text or "").strip()
        if not location_text:
            raise LocationNotFoundError(location_text)

        if is_indian_location(location_text):
            normalized = normalize_location(location_text)
            query = normalized if "india" in normalized.lower() else f"{normalized}, India"
            coordinates = await self._nominatim_search(query, "in")
            if coordinates is None:
                coordinates = known_coordinates(location_text) or known_coordinates(normalized)
                if coordinates is not None:
                    logger.info(f"Using known coordinates for {location_text!r}")
        else:
            coordinates = await self._nominatim_search(location_text, None)

        if coordinates is None:
            raise LocationNotFoundError(location_text)

        logger.info(f"Geocoded {location_text!r} to {format_coordinates(coordinates.lat, coordinates.lng)}")
        return coordinates

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        """Describe a point as a place name, or as "lat, lng" when unknown."""
        fallback = format_coordinates(lat, lng)
        client = await self._get_client()
        try:
            response = await client.get(
                NOMINATIM_REVERSE_URL,
                params={"format": "json", "lat": lat, "lon": lng},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Nominatim reverse lookup failed for {fallback}: {e}")
            return fallback

        if isinstance(data, dict) and data.get("display_name"):
            return data["display_name"]
        return fallback


_geocoding_service: GeocodingService | None = None


def get_geocoding_service() -> GeocodingService:
    """Get the singleton GeocodingService instance."""
    global _geocoding_service
    if _geocoding_service is None:
        _geocoding_service = GeocodingService()
    return _geocoding_service
