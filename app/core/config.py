"""Application configuration.

Settings are read once from the environment (and an optional ``.env`` file)
and passed explicitly into the search pipeline, so services never read
environment variables on their own.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./company_finder.db"
DEFAULT_HTML_PROXY_URL = "https://api.allorigins.win/get"
DEFAULT_USER_AGENT = "CompanyFinder/1.0 (https://github.com/company-finder)"

_default_origins = [
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the search API.

    Attributes:
        database_url: SQLAlchemy URL for the search history store.
        adapter_delay_seconds: Pause between sequential sub-requests issued
            by one source adapter.
        request_timeout_seconds: Timeout applied to every outbound request.
        max_results: Upper bound on the ranked result list.
        max_retry_variants: How many broadened queries to try when the
            first pass finds nothing.
        default_radius_meters: Radius used when a request does not send one.
        user_agent: User-Agent sent to public APIs (Nominatim, Overpass).
        html_proxy_url: Read-only proxy used to fetch job board HTML.
        enable_html_listings: Whether HTML listing adapters take part.
        log_level: Root logging level name.
        cors_origins: Allowed browser origins.
    """

    database_url: str = DEFAULT_DATABASE_URL
    adapter_delay_seconds: float = 1.5
    request_timeout_seconds: float = 20.0
    max_results: int = 50
    max_retry_variants: int = 2
    default_radius_meters: int = 10_000
    user_agent: str = DEFAULT_USER_AGENT
    html_proxy_url: str = DEFAULT_HTML_PROXY_URL
    enable_html_listings: bool = True
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = tuple(_default_origins)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}; using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}; using {default}")
        return default


def load_settings() -> Settings:
    """Build a Settings instance from environment variables."""
    load_dotenv()

    cors_env = os.getenv("CORS_ORIGINS", "")
    if cors_env:
        cors_origins = tuple(origin.strip() for origin in cors_env.split(",") if origin.strip())
    else:
        cors_origins = tuple(_default_origins)

    settings = Settings(
        database_url=os.getenv("DATABASE_URL", "") or DEFAULT_DATABASE_URL,
        adapter_delay_seconds=max(_env_float("ADAPTER_DELAY_SECONDS", 1.5), 0.0),
        request_timeout_seconds=_env_float("REQUEST_TIMEOUT_SECONDS", 20.0),
        max_results=_env_int("MAX_RESULTS", 50),
        max_retry_variants=max(_env_int("MAX_RETRY_VARIANTS", 2), 0),
        default_radius_meters=_env_int("DEFAULT_RADIUS_METERS", 10_000),
        user_agent=os.getenv("NOMINATIM_USER_AGENT", "") or DEFAULT_USER_AGENT,
        html_proxy_url=os.getenv("HTML_PROXY_URL", "") or DEFAULT_HTML_PROXY_URL,
        enable_html_listings=_env_bool("ENABLE_HTML_LISTINGS", True),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=cors_origins,
    )

    if not os.getenv("DATABASE_URL"):
        logger.info(f"DATABASE_URL not set; using {DEFAULT_DATABASE_URL}")

    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide Settings instance."""
    return load_settings()
