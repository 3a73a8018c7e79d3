"""Service layer for crawl operations."""
