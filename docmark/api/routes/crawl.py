"""Crawl endpoints.

Example:
    POST /api/scrape {"url": "https://docs.example.com/docs", "maxDepth": 2}
    GET /api/scrape/status
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from docmark.api.models.responses import (
    CrawlRequest,
    CrawlResponse,
    ErrorResponse,
    FileInfo,
    StatusResponse,
)
from docmark.core.errors import CrawlJobError, DocmarkError, ValidationError
from docmark.services.crawl import CrawlService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["crawl"])


@lru_cache(maxsize=1)
def get_crawl_service() -> CrawlService:
    """Return the process-wide crawl service.

    The service holds configuration and collaborators only; crawl state is
    created per request by the service.
    """
    return CrawlService()


def _error(code: int, message: str, url: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, start_url=url)
    return JSONResponse(
        status_code=code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("", response_model=CrawlResponse)
async def scrape(
    request: CrawlRequest,
    service: CrawlService = Depends(get_crawl_service),
) -> JSONResponse:
    """Crawl a documentation site and persist its pages as markdown."""
    try:
        report = await service.submit(
            request.url, max_depth=request.max_depth, force=request.force
        )
    except ValidationError as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except CrawlJobError as exc:
        logger.error(f"Crawl of {exc.url} failed: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), exc.url)
    except DocmarkError as exc:
        logger.error(f"Crawl of {request.url} could not start: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), request.url)

    body = CrawlResponse(
        start_url=report.start_url,
        max_depth=report.max_depth,
        time_elapsed=f"{report.time_elapsed:.3f} seconds",
        files_processed=report.files_processed,
        result=report.result.to_dict(),
    )
    return JSONResponse(content=body.model_dump(by_alias=True))


@router.get("/status", response_model=StatusResponse)
async def store_status(
    service: CrawlService = Depends(get_crawl_service),
) -> StatusResponse:
    """List persisted markdown files, newest first."""
    snapshot = service.status()
    return StatusResponse(
        total_files=snapshot.total_files,
        files=[
            FileInfo(name=f.name, size=f.size, last_modified=f.last_modified)
            for f in snapshot.files
        ],
    )
