"""Incremental cache over the persisted output directory.

The cache is a snapshot of which markdown files already exist, taken once at
the start of a crawl. A page whose file name is present is not rendered again.
Presence alone counts as fresh: content and source-page modification times
are not compared, so a stale page is only refreshed by a forced crawl.

Example:
    >>> cache = IncrementalCache(Path("uploads"))
    >>> snapshot = cache.load()
    >>> "docs_index.md" in snapshot
    True
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from docmark.services.models import FileRecord
from docmark.storage.filenames import MARKDOWN_EXTENSION

logger = logging.getLogger(__name__)


class IncrementalCache:
    """Filename-presence cache for the output directory.

    Attributes:
        output_dir: Directory holding persisted markdown files
    """

    def __init__(self, output_dir: Path) -> None:
        """Initialize the cache.

        Args:
            output_dir: Directory holding persisted markdown files
        """
        self.output_dir = output_dir

    def load(self) -> dict[str, FileRecord]:
        """Scan the output directory for markdown files.

        Returns:
            Mapping from file name to its FileRecord. Empty if the directory
            does not exist.
        """
        records: dict[str, FileRecord] = {}

        if not self.output_dir.is_dir():
            return records

        for md_file in self.output_dir.glob(f"*{MARKDOWN_EXTENSION}"):
            if not md_file.is_file():
                continue
            mod_time = datetime.fromtimestamp(md_file.stat().st_mtime)
            records[md_file.name] = FileRecord(
                filename=md_file.name, last_modified=mod_time
            )

        logger.debug(f"Cache snapshot: {len(records)} files in {self.output_dir}")
        return records

    def clear(self) -> int:
        """Delete all persisted markdown files.

        Returns:
            Number of files deleted
        """
        if not self.output_dir.is_dir():
            return 0

        removed = 0
        for md_file in self.output_dir.glob(f"*{MARKDOWN_EXTENSION}"):
            if md_file.is_file():
                md_file.unlink()
                removed += 1

        logger.info(f"Cleared {removed} existing files from {self.output_dir}")
        return removed
