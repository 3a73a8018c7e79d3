"""FastAPI application for the docmark REST API.

Provides REST endpoints for crawling documentation sites, inspecting the
output store, and health monitoring.

Example:
    uvicorn docmark.api.app:app --host 0.0.0.0 --port 3000
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from docmark.api.routes.crawl import get_crawl_service
from docmark.api.routes.crawl import router as crawl_router
from docmark.api.routes.health import router as health_router
from docmark.core.logger import setup_logging

# API key authentication
API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str | None = Security(API_KEY_HEADER)) -> str:
    """Verify API key from request header.

    Args:
        api_key: API key from X-API-Key header

    Returns:
        Validated API key

    Raises:
        HTTPException: 401 if API key is missing or invalid
    """
    expected_key = os.getenv("DOCMARK_API_KEY")

    # Allow unauthenticated access if no API key is configured
    if not expected_key:
        return ""

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and prepare the output directory on startup.

    Args:
        app: FastAPI application instance

    Yields:
        None during application runtime
    """
    service = app.dependency_overrides.get(get_crawl_service, get_crawl_service)()
    setup_logging(service.settings)
    service.store.ensure_dir()
    yield


app = FastAPI(
    title="docmark API",
    description="Crawl documentation sites into linked markdown files",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(
    crawl_router, prefix="/api/scrape", dependencies=[Depends(verify_api_key)]
)
app.include_router(
    crawl_router, prefix="/api/url/scrape", dependencies=[Depends(verify_api_key)]
)
