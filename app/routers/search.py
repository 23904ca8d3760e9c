"""Search router for the company finder.

Provides endpoints for running a company search, inspecting the configured
sources, browsing stored searches and exporting results.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.deps import get_db
from app.db.session import SessionLocal
from app.models import SearchQuery, SearchRunResult
from app.repositories.search_result_repository import (
    SearchResultRepository,
    save_search_in_background,
)
from app.schemas.search import (
    ExportFormat,
    SearchHistoryResponse,
    SearchRequest,
    SearchResponse,
    SearchStatusResponse,
    SourceStatus,
)
from app.services import export_service
from app.services.adapter_catalog import ADAPTER_DEFINITIONS, GENERAL_BUNDLE, REGIONAL_BUNDLE
from app.services.errors import LocationNotFoundError, PreconditionViolation
from app.services.geocoding_service import get_geocoding_service
from app.services.regions import REGION_GLOBAL, REGION_INDIA
from app.services.search_orchestrator import get_search_orchestrator

logger = logging.getLogger(__name__)


def _sanitize_for_log(value: str, max_length: int = 100) -> str:
    """Sanitize a string for safe logging to prevent log injection."""
    # Remove newlines, carriage returns, and other control characters
    sanitized = "".join(c if c.isprintable() and c not in "\n\r\t" else " " for c in value)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."
    return sanitized


router = APIRouter()


async def _build_query(request: SearchRequest) -> SearchQuery:
    """Validate the request and fill in coordinates when they are missing."""
    location = request.location.strip()
    if not location:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Location cannot be empty",
        )

    settings = get_settings()
    query = SearchQuery(
        location_text=location,
        skill_tags=tuple(request.skills),
        radius_meters=request.radius_meters or settings.default_radius_meters,
        coordinates=request.coordinates,
    )

    if not query.has_coordinates:
        try:
            coordinates = await get_geocoding_service().geocode(location)
            query = query.model_copy(update={"coordinates": coordinates})
        except LocationNotFoundError:
            logger.warning("Could not geocode %s; searching without coordinates", _sanitize_for_log(location))

    return query


async def _run_search(query: SearchQuery) -> SearchRunResult:
    try:
        return await get_search_orchestrator().search(query)
    except PreconditionViolation as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.post(
    "/search",
    response_model=SearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search companies",
    description="Search companies around a location, filtered by skill tags.",
    responses={400: {"description": "Empty location or missing coordinates"}},
)
async def search_companies(
    request: SearchRequest,
    background_tasks: BackgroundTasks,
) -> SearchResponse:
    """Run a company search.

    Args:
        request: Location, skills, radius and optional coordinates.
        background_tasks: Used to store the run after the response is sent.

    Returns:
        SearchResponse with ranked results, or an empty list plus advisory.

    Raises:
        HTTPException: 400 if the location is empty or the search needs
            coordinates that could not be determined.
    """
    query = await _build_query(request)
    logger.info("Company search for %s", _sanitize_for_log(query.location_text))

    result = await _run_search(query)

    if not result.is_empty:
        background_tasks.add_task(save_search_in_background, SessionLocal, query, result)

    return SearchResponse(
        results=result.entities,
        total=len(result.entities),
        query=query,
        region=result.region,
        advisory=result.advisory,
        attempts=result.attempts,
    )


@router.get(
    "/search/status",
    response_model=SearchStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Get search configuration",
    description="List the configured data sources and the bundle used for each region.",
)
async def get_search_status() -> SearchStatusResponse:
    settings = get_settings()
    return SearchStatusResponse(
        sources=[
            SourceStatus(
                label=definition.label,
                kind=definition.kind.value,
                requires_coordinates=definition.requires_coordinates,
            )
            for definition in ADAPTER_DEFINITIONS
        ],
        bundles={
            REGION_INDIA: list(REGIONAL_BUNDLE),
            REGION_GLOBAL: list(GENERAL_BUNDLE),
        },
        html_listings_enabled=settings.enable_html_listings,
        adapter_delay_seconds=settings.adapter_delay_seconds,
        max_results=settings.max_results,
    )


@router.get(
    "/search/history",
    response_model=SearchHistoryResponse,
    status_code=status.HTTP_200_OK,
    summary="List stored searches",
    description="Stored search runs, newest first.",
)
def get_search_history(
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    location: Annotated[str | None, Query(max_length=200)] = None,
    db: Session = Depends(get_db),
) -> SearchHistoryResponse:
    records = SearchResultRepository(db).load(limit=limit, location=location)
    return SearchHistoryResponse(records=records, total=len(records))


@router.delete(
    "/search/history/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stored search",
    responses={404: {"description": "Search not found"}},
)
def delete_search_history(
    record_id: Annotated[str, Path(min_length=1, max_length=64)],
    db: Session = Depends(get_db),
) -> None:
    if not SearchResultRepository(db).delete(record_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Search with id '{record_id}' not found",
        )


@router.post(
    "/search/export",
    status_code=status.HTTP_200_OK,
    summary="Export search results",
    description="Run a search and download the results as CSV or XLSX.",
    responses={400: {"description": "Empty location or missing coordinates"}},
)
async def export_search(
    request: SearchRequest,
    format: Annotated[ExportFormat, Query()] = "csv",
) -> StreamingResponse:
    """Run a search and stream the results as a spreadsheet file."""
    query = await _build_query(request)
    result = await _run_search(query)

    if format == "xlsx":
        content = export_service.to_xlsx_bytes(result.entities)
        media_type = export_service.XLSX_MEDIA_TYPE
    else:
        content = export_service.to_csv_bytes(result.entities)
        media_type = export_service.CSV_MEDIA_TYPE

    filename = export_service.export_filename(query.location_text, query.skill_tags, format)
    logger.info(f"Exporting {len(result.entities)} results as {format}")

    return StreamingResponse(
        iter([content]),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
