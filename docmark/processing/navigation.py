"""Cross-page navigation for crawled documents.

Every page written during a crawl starts with a navigation block listing the
current URL and every page discovered so far in the session. Absolute URLs in
the page body that exactly match a discovered page are rewritten to relative
file references so the output directory browses offline.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

# Absolute URL token: stops at whitespace, quotes, brackets and backticks
URL_PATTERN = re.compile(r"https?://[^\s<>()\[\]\"'`]+")

# Sentence punctuation that may trail a URL without belonging to it
TRAILING_PUNCTUATION = ".,;:!?"


def relative_ref(filename: str) -> str:
    """Return the relative reference used to link to a sibling file."""
    return f"./{filename}"


class NavigationLinker:
    """Builds finalized page documents from the session navigation index.

    The index is shared with the orchestrator and read at render time, so a
    page sees every URL registered before it was finalized.

    Attributes:
        index: URL to filename mapping in discovery order
    """

    def __init__(self, index: Mapping[str, str]) -> None:
        self.index = index

    def header(self, url: str) -> str:
        """Build the navigation block for a page.

        Args:
            url: URL of the page being finalized

        Returns:
            Markdown navigation block ending with a horizontal rule
        """
        lines = [
            "# Navigation",
            "",
            f"Current page: {url}",
            "",
            "## Related pages",
            "",
        ]
        for page_url, filename in self.index.items():
            marker = " (current)" if page_url == url else ""
            lines.append(f"- [{page_url}]({relative_ref(filename)}){marker}")
        lines.extend(["", "---", ""])
        return "\n".join(lines)

    def rewrite_links(self, content: str) -> str:
        """Rewrite absolute URLs that exactly match an indexed page.

        A URL that only shares a prefix with an indexed page is left as is.
        """

        def _replace(match: re.Match[str]) -> str:
            token = match.group(0)
            if token in self.index:
                return relative_ref(self.index[token])
            url = token.rstrip(TRAILING_PUNCTUATION)
            suffix = token[len(url):]
            filename = self.index.get(url)
            if filename is None:
                return token
            return relative_ref(filename) + suffix

        return URL_PATTERN.sub(_replace, content)

    def render(self, url: str, content: str) -> str:
        """Produce the finalized document for a page.

        Args:
            url: Page URL
            content: Page markdown content

        Returns:
            Navigation block followed by the rewritten content
        """
        return self.header(url) + "\n" + self.rewrite_links(content) + "\n"
