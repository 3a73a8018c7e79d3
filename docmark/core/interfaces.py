"""Core protocol definitions for docmark components.

This module provides the renderer capability consumed by the crawl
orchestrator, so orchestration can be driven by any rendering backend
(Crawl4AI, a local browser, or a deterministic fake in tests).
"""

from typing import Protocol

from docmark.services.models import RenderedPage


class RendererProtocol(Protocol):
    """Protocol defining the page rendering capability.

    Implementations load a URL, extract its content blocks and candidate
    outbound links, and raise RenderError (or a subclass) on failure. Any session
    acquired for the render must be released before returning, including
    when the calling task is cancelled.
    """

    async def render(self, url: str, deadline: float) -> RenderedPage:
        """Render a page.

        Args:
            url: Absolute URL to render
            deadline: Event loop time (``loop.time()``) by which the render
                must finish

        Returns:
            RenderedPage with content blocks and candidate links
        """
        ...
