"""Routers package for API endpoints.

This package contains the FastAPI routers for the Decision-Maker Discovery service.
"""

from app.routers import enrichment

__all__ = ["enrichment"]
