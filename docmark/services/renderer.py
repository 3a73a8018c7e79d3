"""Renderer backed by the Crawl4AI service.

Crawl4AI runs headless Chromium behind an HTTP API. A render acquires a
session (an HTTP client verified against the service health endpoint), asks
the service to load the page, then extracts content blocks and outbound links
from the rendered HTML. Session acquisition and page loading each run under
their own RetryPolicy, and the session is closed on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from docmark.core.errors import ExtractionEmptyError, RenderError
from docmark.processing.extractor import extract_blocks, extract_links
from docmark.resilience.retry import RetryPolicy
from docmark.services.models import RenderedPage

logger = logging.getLogger(__name__)

# Transport-level failures worth another attempt
TRANSIENT_HTTP_ERRORS = (httpx.TransportError, httpx.HTTPStatusError)


class LaunchError(RenderError):
    """Raised when a renderer session cannot be acquired."""

    pass


class PageLoadError(RenderError):
    """Raised when the service reports that a page failed to load."""

    pass


class Crawl4AIRenderer:
    """Render pages through the Crawl4AI /crawl endpoint.

    Attributes:
        endpoint_url: Base URL for the Crawl4AI service.

    Example:
        >>> renderer = Crawl4AIRenderer("http://localhost:52004")
        >>> page = await renderer.render(
        ...     "https://docs.example.com/docs", deadline=loop.time() + 60
        ... )
        >>> len(page.blocks)
        12
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 30.0,
        health_endpoint: str = "/health",
        launch_policy: RetryPolicy | None = None,
        load_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            endpoint_url: Base URL for the Crawl4AI service
            timeout: Upper bound for a single service request in seconds
            health_endpoint: Path checked when a session is acquired
            launch_policy: Retry policy for session acquisition
            load_policy: Retry policy for page loading
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint_url = endpoint_url.rstrip("/")
        self._timeout = timeout
        self._health_endpoint = health_endpoint
        self._launch_policy = launch_policy or RetryPolicy(max_attempts=3, delay=2.0)
        self._load_policy = load_policy or RetryPolicy(max_attempts=3, delay=2.0)
        self._transport = transport

    async def render(self, url: str, deadline: float) -> RenderedPage:
        """Render a page and extract its content.

        Args:
            url: Absolute URL to render
            deadline: Event loop time by which the render must finish

        Returns:
            RenderedPage with content blocks and candidate links

        Raises:
            RenderError: If the session cannot be acquired or the page fails
                to load after retries
            ExtractionEmptyError: If the page rendered without content blocks
        """
        async with self._session(deadline) as client:
            try:
                result = await self._load_policy.execute_async(
                    lambda: self._load(client, url, deadline),
                    retryable_exceptions=(*TRANSIENT_HTTP_ERRORS, PageLoadError),
                    operation_name=f"Page load {url}",
                )
            except TRANSIENT_HTTP_ERRORS as exc:
                raise RenderError(f"Failed to load {url}: {exc}") from exc

        html = result.get("html") or result.get("cleaned_html") or ""
        blocks = extract_blocks(html)
        if not blocks:
            raise ExtractionEmptyError(f"No content found at {url}")

        return RenderedPage(
            url=url,
            blocks=tuple(blocks),
            links=tuple(extract_links(html, url)),
        )

    @asynccontextmanager
    async def _session(self, deadline: float) -> AsyncIterator[httpx.AsyncClient]:
        client = await self._launch_policy.execute_async(
            lambda: self._launch(deadline),
            retryable_exceptions=(LaunchError,),
            operation_name="Renderer launch",
        )
        try:
            yield client
        finally:
            try:
                await client.aclose()
            except Exception as exc:  # noqa: BLE001
                logger.warning(f"Failed to release renderer session: {exc}")

    async def _launch(self, deadline: float) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            base_url=self.endpoint_url,
            timeout=self._remaining(deadline),
            transport=self._transport,
        )
        try:
            response = await client.get(
                self._health_endpoint, timeout=min(5.0, self._remaining(deadline))
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            await client.aclose()
            raise LaunchError(f"Crawl4AI service unavailable: {exc}") from exc
        except BaseException:
            await client.aclose()
            raise
        return client

    async def _load(
        self, client: httpx.AsyncClient, url: str, deadline: float
    ) -> dict[str, Any]:
        # Crawl4AI v0.5.1 API expects {"urls": [...]} (plural, array format)
        payload = {"urls": [url]}
        response = await client.post(
            "/crawl", json=payload, timeout=self._remaining(deadline)
        )

        if response.status_code >= 500:
            raise httpx.HTTPStatusError(
                "Server error from Crawl4AI",
                request=response.request,
                response=response,
            )
        if response.status_code >= 400:
            # Client error, no retry
            raise RenderError(
                f"Crawl4AI rejected {url} with status {response.status_code}"
            )

        return self._parse_result(url, response)

    def _parse_result(self, url: str, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise RenderError(f"Malformed Crawl4AI response for {url}") from exc

        # Crawl4AI v0.5.1 returns {"results": [{...}]} (array format)
        results = data.get("results") or []
        if not results:
            raise PageLoadError(f"Crawl4AI returned no result for {url}")

        result = results[0]
        if not result.get("success", True):
            message = result.get("error_message") or "page load failed"
            raise PageLoadError(f"Failed to load {url}: {message}")
        return result

    def _remaining(self, deadline: float) -> float:
        remaining = deadline - asyncio.get_running_loop().time()
        return max(0.001, min(self._timeout, remaining))
