"""REST API for crawl requests."""
