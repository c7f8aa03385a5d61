"""FastAPI application for Decision-Maker Discovery.

This module provides the main FastAPI application instance with CORS
middleware configuration and router registration.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.routers import enrichment

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "Decision-Maker Discovery API"
API_DESCRIPTION = """
Decision-Maker Discovery API.

This API provides endpoints for:
- Finding a company's official LinkedIn page
- Discovering current executives and founders from LinkedIn-first web search
- Filling other requested company fields from web evidence
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Logs provider configuration on startup and closes the shared HTTP and
    SDK clients on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    from app.services import get_firecrawl_service, get_openrouter_service

    firecrawl = get_firecrawl_service()
    openrouter = get_openrouter_service()
    logger.info(f"Firecrawl configured: {firecrawl.is_configured}")
    logger.info(f"OpenRouter configured: {openrouter.is_configured}")
    if not firecrawl.is_configured:
        logger.warning("Firecrawl not configured - searches will return no evidence")
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    from app.services import get_website_fetcher

    await firecrawl.close()
    await openrouter.close()
    await get_website_fetcher().close()
    logger.info("Provider clients closed")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# Comma-separated list of allowed origins; defaults to local dev servers
_default_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
if _cors_origins_env:
    ALLOWED_ORIGINS = [
        origin.strip() for origin in _cors_origins_env.split(",") if origin.strip()
    ]
else:
    ALLOWED_ORIGINS = _default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type"],
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
        "description": "LinkedIn-first decision-maker discovery",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "healthy"}


app.include_router(enrichment.router, prefix="/api", tags=["enrichment"])
