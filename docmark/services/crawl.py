"""Crawl service handling crawl requests and store status."""

from __future__ import annotations

import logging
import time

from docmark.core.config import Settings
from docmark.core.errors import CrawlJobError, ValidationError
from docmark.core.interfaces import RendererProtocol
from docmark.core.url_validation import validate_url
from docmark.resilience.failure_log import FailureLog
from docmark.resilience.retry import RetryPolicy
from docmark.services.models import CrawlReport, NodeStatus, StoreStatus
from docmark.services.orchestrator import CrawlOrchestrator
from docmark.services.renderer import Crawl4AIRenderer
from docmark.storage.cache import IncrementalCache
from docmark.storage.store import PersistenceStore

logger = logging.getLogger(__name__)


class CrawlService:
    """Validate crawl requests and run each one in a fresh session."""

    def __init__(
        self,
        settings: Settings | None = None,
        renderer: RendererProtocol | None = None,
        allow_private: bool = False,
    ) -> None:
        """Initialize crawl service dependencies.

        Args:
            settings: Crawler settings (loaded from the environment if omitted)
            renderer: Rendering backend (Crawl4AI renderer if omitted)
            allow_private: Accept seed URLs on localhost or private addresses
        """
        self.settings = settings or Settings()
        self.renderer = renderer or Crawl4AIRenderer(
            endpoint_url=self.settings.crawl4ai_base_url,
            timeout=self.settings.render_timeout,
            launch_policy=RetryPolicy(
                max_attempts=self.settings.launch_attempts,
                delay=self.settings.launch_retry_delay,
            ),
            load_policy=RetryPolicy(
                max_attempts=self.settings.load_attempts,
                delay=self.settings.load_retry_delay,
            ),
        )
        self.allow_private = allow_private
        self.store = PersistenceStore(self.settings.output_dir)
        self.cache = IncrementalCache(self.settings.output_dir)
        self.failure_log = FailureLog(self.settings.failure_log)

    def create_orchestrator(self) -> CrawlOrchestrator:
        """Build a session-scoped orchestrator for one crawl request."""
        return CrawlOrchestrator(
            renderer=self.renderer,
            store=self.store,
            cache=self.cache,
            failure_log=self.failure_log,
            scope_prefix=self.settings.scope_prefix,
            task_timeout=self.settings.task_timeout,
            max_concurrency=self.settings.max_concurrency,
            page_delay=self.settings.page_delay,
        )

    async def submit(
        self, url: str | None, max_depth: int | None = None, force: bool = False
    ) -> CrawlReport:
        """Crawl a documentation site from a seed URL.

        Args:
            url: Absolute HTTP(S) seed URL
            max_depth: Maximum crawl depth (settings default if omitted)
            force: Clear persisted documents before crawling

        Returns:
            CrawlReport with timing, file count, and the result tree

        Raises:
            ValidationError: If the URL or depth is invalid
            CrawlJobError: If the seed page itself fails
        """
        if not url:
            raise ValidationError("URL is required")
        url = url.strip()
        if not validate_url(url, allow_private=self.allow_private):
            raise ValidationError(f"Invalid URL: {url}")

        depth = self.settings.max_depth if max_depth is None else max_depth
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise ValidationError("maxDepth must be a non-negative integer")

        logger.info(f"Starting scrape: url={url} max_depth={depth} force={force}")
        started = time.perf_counter()
        root = await self.create_orchestrator().run(url, max_depth=depth, force=force)
        elapsed = time.perf_counter() - started

        if root.status is NodeStatus.ERROR:
            raise CrawlJobError(url, root.error or "Seed page failed")

        return CrawlReport(
            start_url=url,
            max_depth=depth,
            time_elapsed=elapsed,
            files_processed=self.store.count(),
            result=root,
        )

    def status(self) -> StoreStatus:
        """Return a snapshot of the output store, newest files first."""
        return self.store.status()
