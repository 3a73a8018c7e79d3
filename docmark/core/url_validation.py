"""URL validation utilities for crawl requests.

Seed URLs must be well-formed absolute HTTP(S) URLs. Literal private,
loopback, and link-local addresses are rejected unless explicitly allowed,
so a crawl request cannot be pointed at internal resources.
"""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import urlparse

# Blocked hostnames (case-insensitive)
BLOCKED_HOSTNAMES = {
    "metadata.google.internal",
    "metadata",
}

ALLOWED_SCHEMES = {"http", "https"}

# Dotted or bare numeric hosts in decimal, hex or octal parts
NUMERIC_HOST = re.compile(
    r"^(0x[0-9a-f]*|[0-9]+)(\.(0x[0-9a-f]*|[0-9]+))*$", re.IGNORECASE
)


def validate_url(url: str | None, allow_private: bool = False) -> bool:
    """Validate that a URL is a well-formed absolute HTTP(S) URL.

    Args:
        url: URL to validate.
        allow_private: Accept localhost and private/loopback IP literals
            (useful for crawling a docs site served locally).

    Returns:
        True if URL is acceptable as a seed, False otherwise.

    Examples:
        >>> validate_url("https://docs.example.com/docs/")
        True
        >>> validate_url("/docs/intro")
        False
        >>> validate_url("http://169.254.169.254/")
        False
    """
    if not url or not isinstance(url, str):
        return False

    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False

    if not parsed.scheme or parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    try:
        hostname = parsed.hostname
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if not hostname:
        return False

    hostname_lower = hostname.lower()
    if hostname_lower in BLOCKED_HOSTNAMES:
        return False
    if allow_private:
        return True
    if hostname_lower == "localhost":
        return False

    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        # Decimal/hex/octal IP notations (2130706433, 0x7f000001, 0177.0.0.1)
        return not NUMERIC_HOST.match(hostname)

    return not (ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved)
