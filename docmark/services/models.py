"""Service-layer data models for crawl operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, TypedDict


class NodeStatus(str, Enum):
    """Outcome of a visited URL within a crawl session."""

    EXISTING = "existing"
    SUCCESS = "success"
    ERROR = "error"


class BlockKind(str, Enum):
    """Semantic kind of an extracted content block."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"


@dataclass(frozen=True)
class CrawlTask:
    """A URL scheduled for visiting at a given depth.

    Args:
        url: Absolute URL to visit
        depth: Distance from the seed URL (seed is 0)
    """

    url: str
    depth: int


@dataclass(frozen=True)
class ContentBlock:
    """One semantic block of page content.

    Args:
        kind: Block kind
        text: Block text (trimmed)
        level: Heading level 1-3 for headings, None otherwise
    """

    kind: BlockKind
    text: str
    level: int | None = None


@dataclass(frozen=True)
class RenderedPage:
    """Content and candidate links produced by a renderer.

    Args:
        url: URL that was rendered
        blocks: Content blocks in document order
        links: Candidate outbound links, absolute, de-duplicated in
            discovery order
    """

    url: str
    blocks: tuple[ContentBlock, ...]
    links: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileRecord:
    """Snapshot entry for a persisted markdown file.

    Args:
        filename: File name within the output directory
        last_modified: File modification time
    """

    filename: str
    last_modified: datetime


@dataclass
class ResultNode:
    """Outcome of one visited URL, with the outcomes of its children.

    Args:
        url: Visited URL
        filename: File the URL maps to
        status: Terminal status of the page
        error: Error message when status is ERROR
        children: Child outcomes in link discovery order
    """

    url: str
    filename: str
    status: NodeStatus
    error: str | None = None
    children: list[ResultNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the node and its subtree to plain data."""
        data: dict[str, Any] = {
            "url": self.url,
            "filename": self.filename,
            "status": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error
        data["children"] = [child.to_dict() for child in self.children]
        return data

    def walk(self) -> list[ResultNode]:
        """Return this node and all descendants in pre-order."""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.walk())
        return nodes


class ErrorLogEntry(TypedDict):
    """Schema for JSONL failure log entries.

    Attributes:
        timestamp: ISO 8601 timestamp with timezone (UTC)
        url: Page that failed
        error_type: Exception class name
        message: Human-readable error message
        traceback: Formatted traceback, empty when unavailable
    """

    timestamp: str
    url: str
    error_type: str
    message: str
    traceback: str


@dataclass(frozen=True)
class StoredFile:
    """Listing entry for a file in the output store.

    Args:
        name: File name
        size: File size in bytes
        last_modified: File modification time
    """

    name: str
    size: int
    last_modified: datetime


@dataclass(frozen=True)
class StoreStatus:
    """Read-only snapshot of the output store.

    Args:
        total_files: Number of markdown files
        files: Files sorted newest first
    """

    total_files: int
    files: list[StoredFile]


@dataclass(frozen=True)
class CrawlReport:
    """Result of a crawl request.

    Args:
        start_url: Seed URL
        max_depth: Depth limit used
        time_elapsed: Wall-clock seconds spent crawling
        files_processed: Markdown files in the store after the crawl
        result: Root of the result tree
    """

    start_url: str
    max_depth: int
    time_elapsed: float
    files_processed: int
    result: ResultNode
