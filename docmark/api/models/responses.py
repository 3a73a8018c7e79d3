"""Request and response models for API endpoints.

Pydantic models defining the structure of API payloads. Field aliases keep
the camelCase wire format used by the web frontend.

Example:
    from docmark.api.models.responses import HealthResponse

    response = HealthResponse(status="healthy")
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Current health status ('healthy' or 'unhealthy')
    """

    status: str


class CrawlRequest(BaseModel):
    """Crawl request body.

    The URL is optional at the schema level so a missing URL is reported as
    a crawl validation error rather than a schema error.

    Attributes:
        url: Seed URL
        max_depth: Maximum crawl depth (wire name ``maxDepth``)
        force: Clear persisted documents before crawling
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    max_depth: int = Field(default=3, alias="maxDepth")
    force: bool = False


class CrawlResponse(BaseModel):
    """Crawl completion response.

    Attributes:
        message: Human-readable summary
        start_url: Seed URL
        max_depth: Depth limit used
        time_elapsed: Elapsed time, e.g. ``"1.234 seconds"``
        files_processed: Markdown files in the store after the crawl
        result: Result tree for the seed URL
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Scraping completed"
    start_url: str = Field(alias="startUrl")
    max_depth: int = Field(alias="maxDepth")
    time_elapsed: str = Field(alias="timeElapsed")
    files_processed: int = Field(alias="filesProcessed")
    result: dict[str, Any]


class ErrorResponse(BaseModel):
    """Error response body.

    Attributes:
        error: Always True
        message: Error message
        start_url: Seed URL when the request carried one
    """

    model_config = ConfigDict(populate_by_name=True)

    error: bool = True
    message: str
    start_url: str | None = Field(default=None, alias="startUrl")


class FileInfo(BaseModel):
    """Persisted file listing entry."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    size: int
    last_modified: datetime = Field(alias="lastModified")


class StatusResponse(BaseModel):
    """Output store snapshot.

    Attributes:
        total_files: Number of markdown files
        files: Files sorted newest first
    """

    model_config = ConfigDict(populate_by_name=True)

    total_files: int = Field(alias="totalFiles")
    files: list[FileInfo]
