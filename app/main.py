"""FastAPI application for the company finder.

This module provides the main FastAPI application instance with CORS
middleware configuration and router registration.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "Company Finder API"
API_DESCRIPTION = """
Company Finder API.

This API provides endpoints for:
- Searching companies and internship openings by location and skills
- Aggregating and deduplicating results from many public sources
- Browsing and deleting stored searches
- Exporting results as CSV or Excel
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Creates the search history tables on startup and closes the shared
    HTTP clients on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    # Startup: Initialize resources
    from app.db.session import init_db

    init_db()
    logger.info(
        f"Search configured: delay={settings.adapter_delay_seconds}s, "
        f"timeout={settings.request_timeout_seconds}s, max_results={settings.max_results}"
    )
    if not settings.enable_html_listings:
        logger.info("HTML listing sources are disabled")
    logger.info("Application startup complete")

    yield

    # Shutdown: Clean up resources
    logger.info("Shutting down application...")
    from app.services import get_geocoding_service, get_source_clients

    await get_source_clients().close()
    await get_geocoding_service().close()
    logger.info("HTTP clients closed")


# Create FastAPI application instance
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type", "Content-Disposition"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """Root endpoint returning API information.

    Returns:
        Dict containing API metadata including name, version,
        description, and available documentation URLs.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Multi-source company and internship search",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        Dict with status indicating the API is healthy.
    """
    return {"status": "healthy"}


# Router registration
from app.routers import search

app.include_router(search.router, prefix="/api", tags=["search"])
