"""Persistence of crawled pages to a flat markdown directory."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from docmark.core.errors import PersistenceError
from docmark.services.models import StoredFile, StoreStatus
from docmark.storage.filenames import MARKDOWN_EXTENSION

logger = logging.getLogger(__name__)


def format_error_document(url: str, message: str, timestamp: datetime | None = None) -> str:
    """Build the minimal document persisted for a failed page.

    Args:
        url: Page that failed
        message: Error message
        timestamp: Failure time (defaults to now, UTC)

    Returns:
        Markdown error document
    """
    when = (timestamp or datetime.now(timezone.utc)).isoformat()
    return (
        f"# Error scraping {url}\n\n"
        f"- Timestamp: {when}\n"
        f"- Error: {message}\n"
    )


class PersistenceStore:
    """Writes page documents into the output directory.

    Attributes:
        output_dir: Directory receiving one markdown file per URL
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def ensure_dir(self) -> None:
        """Create the output directory if it is missing."""
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                f"Cannot create output directory {self.output_dir}: {exc}"
            ) from exc

    def write(self, filename: str, content: str) -> Path:
        """Write a document.

        Args:
            filename: File name produced by the filename mapper
            content: Markdown content

        Returns:
            Path of the written file

        Raises:
            PersistenceError: If the file cannot be written, including names
                the filesystem rejects outright
        """
        path = self.output_dir / filename
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc
        logger.info(f"Content saved to {path}")
        return path

    def write_error(self, filename: str, url: str, message: str) -> Path:
        """Write the minimal error document for a failed page.

        Raises:
            PersistenceError: If the file cannot be written
        """
        return self.write(filename, format_error_document(url, message))

    def count(self) -> int:
        """Return the number of markdown files in the store."""
        if not self.output_dir.is_dir():
            return 0
        return sum(
            1 for path in self.output_dir.glob(f"*{MARKDOWN_EXTENSION}") if path.is_file()
        )

    def status(self) -> StoreStatus:
        """Snapshot the store, newest files first.

        Returns:
            StoreStatus listing every markdown file with size and mtime
        """
        files: list[StoredFile] = []
        if self.output_dir.is_dir():
            for path in self.output_dir.glob(f"*{MARKDOWN_EXTENSION}"):
                if not path.is_file():
                    continue
                stat = path.stat()
                files.append(
                    StoredFile(
                        name=path.name,
                        size=stat.st_size,
                        last_modified=datetime.fromtimestamp(stat.st_mtime),
                    )
                )
        files.sort(key=lambda f: f.last_modified, reverse=True)
        return StoreStatus(total_files=len(files), files=files)
