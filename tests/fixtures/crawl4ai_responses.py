"""
Test fixtures for Crawl4AI API response mocking.

This module provides realistic mock data for Crawl4AI /crawl responses used
by renderer tests. Fixtures cover rendered documentation pages, pages without
content, failed page loads, and empty result sets.

Usage:
    from tests.fixtures.crawl4ai_responses import MOCK_CRAWL_DOCS_PAGE

    # In test with respx:
    respx.post("http://localhost:52004/crawl").mock(
        return_value=httpx.Response(200, json=MOCK_CRAWL_DOCS_PAGE)
    )
"""

from typing import Any

DOCS_PAGE_HTML = """
<html>
  <head><title>Getting Started</title></head>
  <body>
    <nav>
      <a href="/docs/">Docs home</a>
      <a href="https://blog.example.com/">Blog</a>
    </nav>
    <main>
      <h1>Getting Started</h1>
      <p>Install the package and run the setup command.</p>
      <h2>Installation</h2>
      <pre>pip install example</pre>
      <p>Continue with <a href="/docs/configuration#options">configuration</a>.</p>
      <p>   </p>
    </main>
  </body>
</html>
"""

# Success case: page rendered with content and links
MOCK_CRAWL_DOCS_PAGE = {
    "success": True,
    "results": [
        {
            "url": "https://docs.example.com/docs/getting-started",
            "success": True,
            "status_code": 200,
            "html": DOCS_PAGE_HTML,
            "links": {
                "internal": [
                    {"href": "https://docs.example.com/docs/"},
                    {"href": "https://docs.example.com/docs/configuration"},
                ],
                "external": [{"href": "https://blog.example.com/"}],
            },
        }
    ],
}

# Page rendered but carries no headings, paragraphs or code
MOCK_CRAWL_EMPTY_PAGE = {
    "success": True,
    "results": [
        {
            "url": "https://docs.example.com/docs/empty",
            "success": True,
            "status_code": 200,
            "html": "<html><body><div>   </div><h4>Footer</h4></body></html>",
            "links": {"internal": [], "external": []},
        }
    ],
}

# Browser failed to load the page (navigation timeout inside Crawl4AI)
MOCK_CRAWL_LOAD_FAILED = {
    "success": True,
    "results": [
        {
            "url": "https://docs.example.com/docs/slow",
            "success": False,
            "status_code": None,
            "error_message": "Timeout 30000ms exceeded",
        }
    ],
}

# Service accepted the request but returned no results
MOCK_CRAWL_NO_RESULTS: dict[str, Any] = {"success": True, "results": []}


def get_docs_page_response() -> dict[str, Any]:
    """Get a fresh copy of the rendered documentation page response.

    Returns:
        Mock /crawl response for a page with content and links
    """
    return {
        "success": True,
        "results": [dict(MOCK_CRAWL_DOCS_PAGE["results"][0])],
    }
