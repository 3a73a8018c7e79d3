"""Failed page logging for the crawler.

Provides structured JSONL logging for pages that fail during a crawl. Each
failure is appended with a UTC timestamp, the page URL, the error type and
message, and the traceback when one is available. The log is independent of
the result tree returned to the caller and is never truncated by a crawl.

Example:
    >>> from pathlib import Path
    >>> from docmark.resilience.failure_log import FailureLog
    >>>
    >>> failure_log = FailureLog(Path("failed_pages.jsonl"))
    >>> failure_log.log_failure("https://docs.example.com/docs/a", error)
"""

import json
import logging
import traceback as tb
from datetime import datetime, timezone
from pathlib import Path

from docmark.services.models import ErrorLogEntry

logger = logging.getLogger(__name__)


class FailureLog:
    """Append-only log of non-fatal page failures.

    Attributes:
        log_path: Path to the JSONL log file
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the failure log.

        Args:
            log_path: Path to the JSONL log file where failures will be recorded
        """
        self.log_path = log_path

    def log_failure(self, url: str, error: BaseException) -> ErrorLogEntry:
        """Append a failure entry for a page.

        A failure to write the entry is logged and swallowed; the failure log
        must never take down the crawl that is reporting into it.

        Args:
            url: Page that failed
            error: Exception that caused the failure

        Returns:
            The entry that was recorded
        """
        trace = ""
        if error.__traceback__ is not None:
            trace = "".join(
                tb.format_exception(type(error), error, error.__traceback__)
            )

        entry: ErrorLogEntry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "url": url,
            "error_type": type(error).__name__,
            "message": str(error) or type(error).__name__,
            "traceback": trace,
        }

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as exc:
            logger.error(f"Could not write failure log {self.log_path}: {exc}")

        return entry

    def read_entries(self) -> list[ErrorLogEntry]:
        """Read all recorded entries, skipping malformed lines.

        Returns:
            Entries in the order they were written
        """
        if not self.log_path.exists():
            return []
        entries: list[ErrorLogEntry] = []
        with open(self.log_path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning(f"Skipping malformed failure log line: {line[:80]}")
        return entries
