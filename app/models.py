"""Pydantic models for the company finder.

Companies are produced by source adapters during a single search run,
merged by the deduplication engine and handed to the API, export and
persistence layers as plain field values.
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_ADDRESS = "Unknown"

# Placeholder addresses that mean "location unknown" rather than a real place.
FALLBACK_ADDRESSES: frozenset[str] = frozenset({
    "unknown",
    "india",
    "location not specified",
    "web search result",
    "remote company",
    "remote",
})

DEFAULT_BUSINESS_STATUS = "operational"


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


def is_fallback_address(address: str | None) -> bool:
    """Check whether an address is empty or one of the coarse placeholders."""
    if not address or not address.strip():
        return True
    return address.strip().lower() in FALLBACK_ADDRESSES


class Coordinates(BaseModel):
    """Geographic point in decimal degrees.

    ``(0, 0)`` is reserved as the "unknown" sentinel; models that hold
    coordinates drop it on construction.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    @property
    def is_sentinel(self) -> bool:
        return self.lat == 0 and self.lng == 0


def _drop_sentinel(value: Coordinates | None) -> Coordinates | None:
    if value is not None and value.is_sentinel:
        return None
    return value


class Contact(BaseModel):
    """Optional contact channels for a company."""

    phone: str | None = None
    email: str | None = None
    website: str | None = None

    @field_validator("phone", "email", "website", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class Company(BaseModel):
    """A business candidate found by one source adapter.

    Attributes:
        id: Identifier unique within one search run.
        name: Display name as extracted; validated before it gets here.
        address: Free-text location, a coarse fallback when unknown.
        contact: Phone, email and website, each optional.
        category: Tag inferred from the skill/category mapping.
        coordinates: Optional location; the (0, 0) sentinel becomes None.
        source: Label of the adapter that produced this candidate.
        business_status: Coarse operational status.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(default=UNKNOWN_ADDRESS)
    contact: Contact = Field(default_factory=Contact)
    category: str = Field(default="General")
    coordinates: Coordinates | None = None
    source: str = Field(default="unknown")
    business_status: str = Field(default=DEFAULT_BUSINESS_STATUS)

    @field_validator("address", mode="before")
    @classmethod
    def address_never_empty(cls, v: str | None) -> str:
        if v is None or not str(v).strip():
            return UNKNOWN_ADDRESS
        return str(v).strip()

    @field_validator("business_status", mode="before")
    @classmethod
    def status_default(cls, v: str | None) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_BUSINESS_STATUS
        return str(v)

    @field_validator("coordinates")
    @classmethod
    def coordinates_not_sentinel(cls, v: Coordinates | None) -> Coordinates | None:
        return _drop_sentinel(v)

    @property
    def has_specific_address(self) -> bool:
        return not is_fallback_address(self.address)


class SearchQuery(BaseModel):
    """One user search submission.

    Frozen: variants for retries are derived with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    location_text: str = Field(..., min_length=1, max_length=200)
    skill_tags: tuple[str, ...] = Field(default=())
    radius_meters: int = Field(default=10_000, ge=100, le=100_000)
    coordinates: Coordinates | None = None

    @field_validator("location_text")
    @classmethod
    def strip_location(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("location_text cannot be blank")
        return v

    @field_validator("skill_tags", mode="before")
    @classmethod
    def clean_skills(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(s.strip() for s in v if isinstance(s, str) and s.strip())

    @field_validator("coordinates")
    @classmethod
    def coordinates_not_sentinel(cls, v: Coordinates | None) -> Coordinates | None:
        return _drop_sentinel(v)

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None


class SearchRunResult(BaseModel):
    """Ranked, deduplicated outcome of one search run."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    entities: list[Company] = Field(default_factory=list)
    advisory: str | None = None
    region: str = "global"
    attempts: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entities


class SearchRecord(BaseModel):
    """A search run as stored by the history repository."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    id: str
    query: SearchQuery
    entities: list[Company] = Field(default_factory=list)
    total_results: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
