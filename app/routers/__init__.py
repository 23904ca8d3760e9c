"""Routers package for API endpoints.

This package contains the FastAPI routers for the company finder.
"""

from app.routers import search

__all__ = ["search"]
