"""Deduplication and ranking of the pooled search candidates."""

import logging

from app.models import Company, is_fallback_address
from app.services.entity_extractor import is_valid_name, normalize_name_key

logger = logging.getLogger(__name__)

MAX_RESULTS = 50

# Sources whose provenance is preferred over a generic web search hit
PREFERRED_SOURCES = ("naukri", "indeed", "openstreetmap", "verified companies")

CONTACT_FIELDS = ("website", "phone", "email")


def is_preferred_source(source: str | None) -> bool:
    if not source:
        return False
    lowered = source.lower()
    return any(preferred in lowered for preferred in PREFERRED_SOURCES)


def completeness_score(company: Company) -> int:
    """Count of website, phone, email and a specific address (0-4)."""
    score = sum(1 for name in CONTACT_FIELDS if getattr(company.contact, name))
    if company.has_specific_address:
        score += 1
    return score


def merge_into(canonical: Company, duplicate: Company) -> None:
    """Fill the canonical's missing fields from a duplicate, in place.

    Fields are only ever filled, never cleared. ``canonical`` must be a
    copy owned by the resolver.
    """
    for name in CONTACT_FIELDS:
        if not getattr(canonical.contact, name) and getattr(duplicate.contact, name):
            setattr(canonical.contact, name, getattr(duplicate.contact, name))

    if is_fallback_address(canonical.address) and not is_fallback_address(duplicate.address):
        canonical.address = duplicate.address

    if canonical.coordinates is None and duplicate.coordinates is not None:
        canonical.coordinates = duplicate.coordinates

    if is_preferred_source(duplicate.source):
        canonical.source = duplicate.source


def resolve(pool: list[Company], *, max_results: int = MAX_RESULTS) -> list[Company]:
    """Merge duplicates, drop invalid names and rank by completeness.

    Args:
        pool: Candidates in adapter order. Not modified.
        max_results: Upper bound on the returned list.

    Returns:
        One entity per normalized name, most complete first; ties keep
        pool order.
    """
    canonicals: dict[str, Company] = {}

    for entity in pool:
        key = normalize_name_key(entity.name)
        if not key:
            continue
        existing = canonicals.get(key)
        if existing is None:
            canonicals[key] = entity.model_copy(deep=True)
        else:
            merge_into(existing, entity)

    valid = [entity for entity in canonicals.values() if is_valid_name(entity.name)]
    dropped = len(canonicals) - len(valid)
    if dropped:
        logger.debug(f"Dropped {dropped} entities with invalid names after merge")

    # sorted() is stable, so equal scores keep pool order
    ranked = sorted(valid, key=completeness_score, reverse=True)

    logger.info(
        f"Resolved {len(pool)} candidates into {len(valid)} entities "
        f"(returning {min(len(ranked), max_results)})"
    )
    return ranked[:max_results]
