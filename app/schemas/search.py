from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models import Company, Coordinates, SearchQuery, SearchRecord, to_camel

_camel_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    serialize_by_alias=True,
)


class SearchRequest(BaseModel):
    """Request body for a company search.

    Attributes:
        location: Free-text location, e.g. "Jaipur" or "Berlin, Germany".
        skills: Skill tags; the first few drive the source queries.
        radius_meters: Search radius around the location's coordinates.
        coordinates: Optional coordinates; looked up from the location
            when omitted.
    """

    model_config = _camel_config

    location: str = Field(..., min_length=1, max_length=200)
    skills: list[str] = Field(default_factory=list, max_length=20)
    radius_meters: int | None = Field(default=None, ge=100, le=100_000)
    coordinates: Coordinates | None = None


class SearchResponse(BaseModel):
    """Ranked results of one search run."""

    model_config = _camel_config

    results: list[Company]
    total: int
    query: SearchQuery
    region: str
    advisory: str | None = None
    attempts: list[str] = Field(default_factory=list)


class SourceStatus(BaseModel):
    model_config = _camel_config

    label: str
    kind: str
    requires_coordinates: bool


class SearchStatusResponse(BaseModel):
    """Configured sources and which bundle each region uses."""

    model_config = _camel_config

    sources: list[SourceStatus]
    bundles: dict[str, list[str]]
    html_listings_enabled: bool
    adapter_delay_seconds: float
    max_results: int


class SearchHistoryResponse(BaseModel):
    model_config = _camel_config

    records: list[SearchRecord]
    total: int


ExportFormat = Literal["csv", "xlsx"]
