"""Search orchestration: routing, fan-out, bounded retries and ranking.

A search moves Idle -> Searching and ends Succeeded (ranked entities),
EmptyRetry -> Failed (no entities, advisory set) or, only for queries the
chosen bundle cannot run at all, raises ``PreconditionViolation``.
"""

import logging
from collections.abc import Callable

from app.core.config import Settings, get_settings
from app.models import Company, SearchQuery, SearchRunResult
from app.services.adapter_catalog import (
    build_adapters,
    bundle_for,
    bundle_requires_coordinates,
)
from app.services.deduplication import resolve
from app.services.errors import PreconditionViolation
from app.services.fan_out import Adapter, FanOutReport, run_all
from app.services.regions import (
    REGION_INDIA,
    classify_region,
    known_coordinates,
    nearby_cities,
)
from app.services.source_adapter import AdapterDefinition
from app.services.source_clients import SourceClients, get_source_clients

logger = logging.getLogger(__name__)

EMPTY_ADVISORY = (
    "No companies found. Try expanding your search radius or selecting different skills."
)

MAX_RADIUS_METERS = 50_000
RADIUS_MULTIPLIERS = (2, 4)

# Nearby-city retries use fewer skills to keep request volume down
RETRY_SKILL_LIMIT = 2

AdapterFactory = Callable[[list[AdapterDefinition]], list[Adapter]]


def describe_query(query: SearchQuery) -> str:
    return f"{query.location_text} ({query.radius_meters} m)"


class SearchOrchestrator:
    """Runs a search query end to end.

    Example usage:
        orchestrator = SearchOrchestrator()
        result = await orchestrator.search(SearchQuery(location_text="Pune", skill_tags=("python",)))
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clients: SourceClients | None = None,
        adapter_factory: AdapterFactory | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clients = clients
        self._adapter_factory = adapter_factory or self._build_default_adapters
        self.last_reports: list[FanOutReport] = []

    @property
    def last_report(self) -> FanOutReport | None:
        """Report for the most recent fan-out pass."""
        return self.last_reports[-1] if self.last_reports else None

    def _build_default_adapters(self, definitions: list[AdapterDefinition]) -> list[Adapter]:
        clients = self._clients or get_source_clients()
        return build_adapters(definitions, clients, self._settings)

    async def _run_attempt(self, adapters: list[Adapter], query: SearchQuery) -> list[Company]:
        report = FanOutReport()
        self.last_reports.append(report)
        return await run_all(adapters, query, report)

    def retry_variants(self, query: SearchQuery, region: str) -> list[SearchQuery]:
        """Broadened queries to try when the first pass finds nothing.

        Regional searches move to nearby tech cities; general searches widen
        the radius. At most ``max_retry_variants`` are returned.
        """
        limit = self._settings.max_retry_variants
        variants: list[SearchQuery] = []

        if region == REGION_INDIA:
            for city in nearby_cities(query.location_text):
                variants.append(query.model_copy(update={
                    "location_text": f"{city}, India",
                    "coordinates": known_coordinates(city),
                    "skill_tags": query.skill_tags[:RETRY_SKILL_LIMIT],
                }))
        else:
            last_radius = query.radius_meters
            for multiplier in RADIUS_MULTIPLIERS:
                radius = min(query.radius_meters * multiplier, MAX_RADIUS_METERS)
                if radius <= last_radius:
                    continue
                variants.append(query.model_copy(update={"radius_meters": radius}))
                last_radius = radius

        return variants[:limit]

    async def search(self, query: SearchQuery) -> SearchRunResult:
        """Run a search and return ranked, deduplicated entities.

        Each pass gets its own FanOutReport in ``last_reports``, in the same
        order as ``attempts``.

        Raises:
            PreconditionViolation: Every adapter in the routed bundle needs
                coordinates and the query has none.
        """
        region = classify_region(query.location_text)
        definitions = bundle_for(region, self._settings)

        if bundle_requires_coordinates(definitions) and not query.has_coordinates:
            raise PreconditionViolation(
                f"Coordinates are required to search around {query.location_text!r}"
            )

        adapters = self._adapter_factory(definitions)
        self.last_reports = []

        logger.info(
            f"Searching {describe_query(query)} with {len(adapters)} {region} adapters "
            f"for skills {list(query.skill_tags)}"
        )

        attempts = [describe_query(query)]
        pool = await self._run_attempt(adapters, query)

        if not pool:
            for variant in self.retry_variants(query, region):
                attempts.append(describe_query(variant))
                logger.info(f"No results; retrying with {describe_query(variant)}")
                pool = await self._run_attempt(adapters, variant)
                if pool:
                    break

        entities = resolve(pool, max_results=self._settings.max_results) if pool else []

        if not entities:
            logger.info(f"No companies found after {len(attempts)} attempts")
            return SearchRunResult(
                entities=[],
                advisory=EMPTY_ADVISORY,
                region=region,
                attempts=attempts,
            )

        return SearchRunResult(entities=entities, region=region, attempts=attempts)


_search_orchestrator: SearchOrchestrator | None = None


def get_search_orchestrator() -> SearchOrchestrator:
    """Get the singleton SearchOrchestrator instance."""
    global _search_orchestrator
    if _search_orchestrator is None:
        _search_orchestrator = SearchOrchestrator()
    return _search_orchestrator
