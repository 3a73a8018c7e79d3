"""Deterministic mapping from page URLs to output file names.

The mapping depends only on the URL path, never on crawl order or session
state, so a page keeps the same file name across crawls and the incremental
cache can recognise it. The path is used as sent, still percent-encoded, so
``/docs/a%2Fb`` and ``/docs/a/b`` stay distinct files.

Examples:
    >>> url_to_filename("https://docs.example.com/")
    'index.md'
    >>> url_to_filename("https://docs.example.com/docs")
    'docs_index.md'
    >>> url_to_filename("https://docs.example.com/docs/guide/setup")
    'docs_guide_setup.md'
"""

import hashlib
import re
from urllib.parse import urlparse

JOIN_CHAR = "_"
MARKDOWN_EXTENSION = ".md"
INDEX_NAME = "index"

# Documentation root gets its own index so it never collides with the site root
DOCS_ROOT = "docs"
DOCS_INDEX_NAME = "docs_index"

# Common filesystems cap a name at 255 bytes
MAX_FILENAME_BYTES = 200
DIGEST_LENGTH = 12

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _shorten(name: str) -> str:
    """Truncate an overlong stem and suffix it with a digest of the full stem."""
    digest = hashlib.sha1(name.encode("utf-8", "surrogatepass")).hexdigest()
    budget = MAX_FILENAME_BYTES - len(MARKDOWN_EXTENSION) - DIGEST_LENGTH - 1
    prefix = name.encode("utf-8", "surrogatepass")[:budget].decode("utf-8", "ignore")
    return f"{prefix}{JOIN_CHAR}{digest[:DIGEST_LENGTH]}"


def url_to_filename(url: str) -> str:
    """Map a URL to a stable markdown file name.

    Query strings and fragments are ignored. Unparseable input falls back to
    its raw text, so the function never raises. Control characters are
    replaced and names longer than ``MAX_FILENAME_BYTES`` are truncated with
    a content digest, so every result can be written to disk.

    Args:
        url: Absolute page URL

    Returns:
        File name ending in ``.md``
    """
    try:
        path = urlparse(url).path
    except (ValueError, TypeError):
        path = str(url)

    name = CONTROL_CHARS.sub(JOIN_CHAR, path.replace("/", JOIN_CHAR))
    if name.startswith(JOIN_CHAR):
        name = name[1:]
    if name.endswith(JOIN_CHAR):
        name = name[:-1]

    if not name:
        name = INDEX_NAME
    elif name == DOCS_ROOT:
        name = DOCS_INDEX_NAME

    if name.endswith(MARKDOWN_EXTENSION):
        name = name[: -len(MARKDOWN_EXTENSION)]
    encoded_length = len((name + MARKDOWN_EXTENSION).encode("utf-8", "surrogatepass"))
    if encoded_length > MAX_FILENAME_BYTES:
        name = _shorten(name)
    return name + MARKDOWN_EXTENSION
