"""Content and link extraction from rendered HTML.

Turns the content-bearing part of a rendered page into an ordered list of
semantic blocks (headings 1-3, paragraphs, code) and collects the page's
outbound links resolved against the page URL.

Example:
    >>> blocks = extract_blocks("<main><h1>Intro</h1><p>Hello</p></main>")
    >>> blocks_to_markdown(blocks)
    '# Intro\\n\\nHello'
"""

from __future__ import annotations

from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup, Tag

from docmark.services.models import BlockKind, ContentBlock

# Tried in order; the first match is treated as the page's content subtree
MAIN_CONTENT_SELECTORS = [
    "main",
    "article",
    'div[role="main"]',
    "body",
]

BLOCK_TAGS = ["h1", "h2", "h3", "p", "pre"]
HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3}


def _content_root(soup: BeautifulSoup) -> Tag | BeautifulSoup:
    for selector in MAIN_CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is not None:
            return node
    return soup


def _nested_in_block(node: Tag, root: Tag | BeautifulSoup) -> bool:
    """Return True if node sits inside another block element below root."""
    for parent in node.parents:
        if parent is root:
            return False
        if parent.name in BLOCK_TAGS:
            return True
    return False


def extract_blocks(html: str) -> list[ContentBlock]:
    """Extract semantic content blocks in document order.

    Only h1-h3, p and pre elements are considered. Blocks whose trimmed text
    is empty are dropped. Whitespace is collapsed everywhere except in code.

    Args:
        html: Rendered page HTML

    Returns:
        Ordered content blocks, possibly empty
    """
    soup = BeautifulSoup(html or "", "html.parser")
    root = _content_root(soup)

    blocks: list[ContentBlock] = []
    for node in root.find_all(BLOCK_TAGS):
        if _nested_in_block(node, root):
            continue

        if node.name == "pre":
            text = node.get_text().strip("\n").rstrip()
            if text.strip():
                blocks.append(ContentBlock(kind=BlockKind.CODE, text=text))
            continue

        text = " ".join(node.get_text().split())
        if not text:
            continue
        if node.name in HEADING_LEVELS:
            blocks.append(
                ContentBlock(
                    kind=BlockKind.HEADING,
                    text=text,
                    level=HEADING_LEVELS[node.name],
                )
            )
        else:
            blocks.append(ContentBlock(kind=BlockKind.PARAGRAPH, text=text))

    return blocks


def extract_links(html: str, page_url: str) -> list[str]:
    """Collect outbound links from anchor elements.

    Hrefs are resolved against the page URL and stripped of fragments.
    Hrefs that cannot be resolved are skipped.

    Args:
        html: Rendered page HTML
        page_url: URL the HTML was loaded from

    Returns:
        Absolute links, de-duplicated in first-seen order
    """
    soup = BeautifulSoup(html or "", "html.parser")
    links: list[str] = []
    seen: set[str] = set()
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.startswith(("javascript:", "mailto:", "tel:")):
            continue
        try:
            absolute = urldefrag(urljoin(page_url, href)).url
        except ValueError:
            continue
        if absolute and absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return links


def block_to_markdown(block: ContentBlock) -> str:
    """Render a single block as markdown."""
    if block.kind is BlockKind.HEADING:
        return f"{'#' * (block.level or 1)} {block.text}"
    if block.kind is BlockKind.CODE:
        return f"```\n{block.text}\n```"
    return block.text


def blocks_to_markdown(blocks: list[ContentBlock] | tuple[ContentBlock, ...]) -> str:
    """Render blocks as markdown separated by blank lines."""
    return "\n\n".join(block_to_markdown(block) for block in blocks)
