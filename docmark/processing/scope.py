"""Link scope filtering for recursive crawling.

A link is in scope when it is an HTTP(S) URL on the seed's host whose path
starts with the scope prefix. Links that cannot be parsed are dropped
silently; a bad href never fails the page it appears on.
"""

from __future__ import annotations

from urllib.parse import urldefrag, urlparse

ALLOWED_SCHEMES = {"http", "https"}


def default_scope_prefix(seed_url: str) -> str:
    """Derive the scope prefix from a seed URL.

    The prefix is the seed's first path segment, taken as the documentation
    root: ``/docs``, ``/docs/`` and ``/docs/intro`` all scope to ``/docs``.

    Args:
        seed_url: Absolute seed URL

    Returns:
        Path prefix, ``/`` when the seed sits at the site root
    """
    segments = [segment for segment in urlparse(seed_url).path.split("/") if segment]
    # A lone file name such as /index.html sits at the site root
    if not segments or (len(segments) == 1 and "." in segments[0]):
        return "/"
    return "/" + segments[0]


class LinkScope:
    """Predicate selecting links eligible for recursion.

    Attributes:
        host: Lower-cased host of the seed URL
        prefix: Path prefix a link must start with

    Example:
        >>> scope = LinkScope("https://docs.example.com/docs/", "/docs")
        >>> scope.accepts("https://docs.example.com/docs/setup")
        True
        >>> scope.accepts("https://docs.example.com/blog/post")
        False
    """

    def __init__(self, seed_url: str, prefix: str | None = None) -> None:
        """Initialize the scope.

        Args:
            seed_url: Crawl seed URL; its host bounds the crawl
            prefix: Path prefix; derived from the seed when omitted
        """
        self.host = (urlparse(seed_url).hostname or "").lower()
        self.prefix = prefix if prefix is not None else default_scope_prefix(seed_url)

    def accepts(self, link: str) -> bool:
        """Return True if the link should be crawled."""
        try:
            parsed = urlparse(link)
            host = parsed.hostname
        except ValueError:
            return False
        if parsed.scheme.lower() not in ALLOWED_SCHEMES or not host:
            return False
        if host.lower() != self.host:
            return False
        return (parsed.path or "/").startswith(self.prefix)

    def filter(self, links: list[str] | tuple[str, ...]) -> list[str]:
        """Keep in-scope links, fragment-stripped and de-duplicated in order."""
        scoped: list[str] = []
        seen: set[str] = set()
        for link in links:
            try:
                link = urldefrag(link).url
            except ValueError:
                continue
            if link in seen or not self.accepts(link):
                continue
            seen.add(link)
            scoped.append(link)
        return scoped
