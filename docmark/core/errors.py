"""Exception hierarchy for crawl operations.

Task-level errors (render, extraction, persistence, timeout) are recorded on
the result tree and never abort sibling or ancestor pages. Request-level
errors (validation, seed failure) surface to the caller.
"""


class DocmarkError(Exception):
    """Base class for all docmark errors."""

    pass


class ValidationError(DocmarkError):
    """Raised when a crawl request is malformed.

    Rejected before any crawl work begins and never written to the failure log.
    """

    pass


class RenderError(DocmarkError):
    """Raised when renderer session acquisition or page navigation fails."""

    pass


class ExtractionEmptyError(RenderError):
    """Raised when a page rendered but yielded no content blocks."""

    pass


class PersistenceError(DocmarkError):
    """Raised when a document cannot be written to the output store."""

    pass


class SessionTimeoutError(DocmarkError):
    """Raised when a page exceeds its per-task deadline."""

    pass


class CrawlJobError(DocmarkError):
    """Raised when the seed page of a crawl request fails outright."""

    def __init__(self, url: str, message: str) -> None:
        """Initialize the job error.

        Args:
            url: Seed URL of the failed request
            message: Error recorded for the seed page
        """
        super().__init__(message)
        self.url = url
