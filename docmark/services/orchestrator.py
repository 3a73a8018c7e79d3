"""Crawl orchestration for documentation sites.

The orchestrator drives one crawl session: it walks in-scope links from a
seed URL up to a maximum depth, renders each page at most once, skips pages
already persisted by earlier sessions, writes a finalized markdown document
per page, and returns a tree describing the outcome for every visited URL.

Per-page lifecycle:
    Pending -> SkippedDepth     depth exceeds the maximum (no result node)
    Pending -> SkippedVisited   URL already admitted this session (no node)
    Pending -> Existing         file name present in the cache snapshot
    Pending -> Rendering -> Success | Error

Traversal uses an explicit stack of frames rather than recursion. Children
of a page are admitted in discovery order; with ``max_concurrency > 1`` up
to that many siblings render concurrently. Admission (visited check, visited
insert, navigation index insert) runs without suspending, so it is atomic
on the event loop.

Example:
    >>> orchestrator = CrawlOrchestrator(
    ...     renderer=Crawl4AIRenderer("http://localhost:52004"),
    ...     store=PersistenceStore(Path("uploads")),
    ...     cache=IncrementalCache(Path("uploads")),
    ...     failure_log=FailureLog(Path("failed_pages.jsonl")),
    ... )
    >>> root = await orchestrator.run("https://docs.example.com/docs", max_depth=2)
    >>> root.status
    <NodeStatus.SUCCESS: 'success'>
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field

from docmark.core.errors import DocmarkError, PersistenceError, SessionTimeoutError
from docmark.core.interfaces import RendererProtocol
from docmark.processing.extractor import blocks_to_markdown
from docmark.processing.navigation import NavigationLinker
from docmark.processing.scope import LinkScope
from docmark.resilience.failure_log import FailureLog
from docmark.services.models import CrawlTask, FileRecord, NodeStatus, ResultNode
from docmark.storage.cache import IncrementalCache
from docmark.storage.filenames import url_to_filename
from docmark.storage.store import PersistenceStore

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """A page whose scoped links are still being scheduled."""

    node: ResultNode
    depth: int
    pending: deque[str] = field(default_factory=deque)


class CrawlOrchestrator:
    """Session-scoped crawl state machine.

    Visited URLs and the navigation index are reset at the start of every
    ``run()`` and belong to that session only. The output directory is the
    only state shared across sessions.

    Attributes:
        renderer: Page rendering capability
        store: Output store for finalized and error documents
        cache: Incremental cache over the output store
        failure_log: Append-only failure log
        scope_prefix: Path prefix for recursion (derived from seed if None)
        task_timeout: Deadline in seconds for each page's full pipeline
        max_concurrency: Siblings rendered concurrently
        page_delay: Pacing delay before each render, inside the deadline
    """

    def __init__(
        self,
        renderer: RendererProtocol,
        store: PersistenceStore,
        cache: IncrementalCache,
        failure_log: FailureLog,
        scope_prefix: str | None = None,
        task_timeout: float = 60.0,
        max_concurrency: int = 1,
        page_delay: float = 0.0,
    ) -> None:
        if task_timeout <= 0:
            raise ValueError("task_timeout must be positive")
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")

        self.renderer = renderer
        self.store = store
        self.cache = cache
        self.failure_log = failure_log
        self.scope_prefix = scope_prefix
        self.task_timeout = task_timeout
        self.max_concurrency = max_concurrency
        self.page_delay = page_delay

        self._visited: set[str] = set()
        self._claimed_files: set[str] = set()
        self._index: dict[str, str] = {}
        self._linker = NavigationLinker(self._index)
        self._snapshot: dict[str, FileRecord] = {}
        self._scope: LinkScope | None = None
        self._max_depth = 0

    @property
    def visited(self) -> frozenset[str]:
        """URLs admitted in the current session."""
        return frozenset(self._visited)

    @property
    def navigation_index(self) -> dict[str, str]:
        """Copy of the session URL to filename index, in discovery order."""
        return dict(self._index)

    async def run(self, url: str, max_depth: int = 3, force: bool = False) -> ResultNode:
        """Crawl from a seed URL.

        Page-level failures never propagate: they become ERROR nodes in the
        returned tree and entries in the failure log.

        Args:
            url: Validated absolute seed URL
            max_depth: Maximum link distance from the seed (0 = seed only)
            force: Delete persisted documents and re-render everything

        Returns:
            Result node for the seed URL with its subtree

        Raises:
            PersistenceError: If the output directory cannot be prepared
        """
        self._visited.clear()
        self._claimed_files.clear()
        self._index.clear()
        self._max_depth = max_depth
        self._scope = LinkScope(url, self.scope_prefix)

        self.store.ensure_dir()
        if force:
            try:
                self.cache.clear()
            except OSError as exc:
                raise PersistenceError(f"Failed to clear output directory: {exc}") from exc
            self._snapshot = {}
        else:
            self._snapshot = self.cache.load()

        logger.info(
            f"Starting crawl of {url} (max_depth={max_depth}, force={force}, "
            f"scope={self._scope.prefix}, cached={len(self._snapshot)})"
        )

        root = await self._traverse(CrawlTask(url=url, depth=0))

        nodes = root.walk()
        failed = sum(1 for node in nodes if node.status is NodeStatus.ERROR)
        logger.info(f"Crawl of {url} finished: {len(nodes)} pages, {failed} failed")
        return root

    async def _traverse(self, seed: CrawlTask) -> ResultNode:
        filename = self._admit(seed)
        if filename is None:
            raise DocmarkError(f"Seed {seed.url} was not admitted")

        root, links = await self._process(seed, filename)
        stack = [_Frame(node=root, depth=seed.depth, pending=deque(links))]

        while stack:
            frame = stack[-1]
            if not frame.pending:
                stack.pop()
                continue

            batch: list[tuple[CrawlTask, str]] = []
            while frame.pending and len(batch) < self.max_concurrency:
                task = CrawlTask(url=frame.pending.popleft(), depth=frame.depth + 1)
                child_filename = self._admit(task)
                if child_filename is not None:
                    batch.append((task, child_filename))
            if not batch:
                continue

            outcomes = await asyncio.gather(
                *(self._process(task, name) for task, name in batch)
            )

            frames: list[_Frame] = []
            for (task, _), (node, child_links) in zip(batch, outcomes):
                frame.node.children.append(node)
                if child_links:
                    frames.append(
                        _Frame(node=node, depth=task.depth, pending=deque(child_links))
                    )
            # Reversed so the first sibling's subtree is explored first
            stack.extend(reversed(frames))

        return root

    def _admit(self, task: CrawlTask) -> str | None:
        """Admit a task into the session, or return None if it is skipped.

        Must not await: the check-then-insert on session state is atomic only
        because nothing else runs on the loop in between.
        """
        if task.depth > self._max_depth:
            logger.debug(f"Skipping {task.url}: depth {task.depth} > {self._max_depth}")
            return None
        if task.url in self._visited:
            logger.debug(f"Skipping {task.url}: already visited")
            return None

        filename = url_to_filename(task.url)
        if filename in self._claimed_files:
            # Distinct URL spelling of a page already written this session
            logger.debug(f"Skipping {task.url}: {filename} already claimed")
            self._visited.add(task.url)
            return None

        self._visited.add(task.url)
        self._claimed_files.add(filename)
        self._index[task.url] = filename
        return filename

    async def _process(
        self, task: CrawlTask, filename: str
    ) -> tuple[ResultNode, list[str]]:
        """Run an admitted task to a terminal state.

        Returns:
            Result node and the scoped links to schedule as children
        """
        if filename in self._snapshot:
            logger.info(f"Skipping existing file: {filename}")
            return ResultNode(task.url, filename, NodeStatus.EXISTING), []

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.task_timeout
        try:
            async with asyncio.timeout_at(deadline):
                if self.page_delay:
                    await asyncio.sleep(self.page_delay)
                page = await self.renderer.render(task.url, deadline)
                links = self._scope.filter(page.links) if self._scope else []
                document = self._linker.render(task.url, blocks_to_markdown(page.blocks))
                self.store.write(filename, document)
        except TimeoutError:
            timeout_error = SessionTimeoutError(
                f"Timed out after {self.task_timeout:.1f}s processing {task.url}"
            )
            return self._fail(task, filename, timeout_error), []
        except Exception as exc:  # noqa: BLE001
            return self._fail(task, filename, exc), []

        if task.depth >= self._max_depth:
            links = []
        logger.info(f"Rendered {task.url} -> {filename} ({len(links)} scoped links)")
        return ResultNode(task.url, filename, NodeStatus.SUCCESS), links

    def _fail(self, task: CrawlTask, filename: str, error: BaseException) -> ResultNode:
        message = str(error) or type(error).__name__
        logger.error(f"Error scraping {task.url}: {message}")
        self.failure_log.log_failure(task.url, error)

        # Error stub keeps later sessions from retrying until forced
        try:
            self.store.write_error(filename, task.url, message)
        except PersistenceError as exc:
            logger.error(f"Could not persist error document for {task.url}: {exc}")

        return ResultNode(task.url, filename, NodeStatus.ERROR, error=message)
