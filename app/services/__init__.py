"""Services package for the company finder."""

from app.services.deduplication import resolve
from app.services.entity_extractor import extract, is_valid_name, normalize_name_key
from app.services.errors import LocationNotFoundError, PreconditionViolation, SourceUnavailableError
from app.services.fan_out import FanOutReport, run_all
from app.services.geocoding_service import GeocodingService, get_geocoding_service
from app.services.search_orchestrator import SearchOrchestrator, get_search_orchestrator
from app.services.source_adapter import AdapterDefinition, ClientKind, SourceAdapter
from app.services.source_clients import SourceClients, get_source_clients

__all__ = [
    "extract",
    "is_valid_name",
    "normalize_name_key",
    "resolve",
    "run_all",
    "FanOutReport",
    "AdapterDefinition",
    "ClientKind",
    "SourceAdapter",
    "SourceClients",
    "get_source_clients",
    "SearchOrchestrator",
    "get_search_orchestrator",
    "GeocodingService",
    "get_geocoding_service",
    "SourceUnavailableError",
    "PreconditionViolation",
    "LocationNotFoundError",
]
