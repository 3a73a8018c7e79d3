"""Crawl documentation sites into linked markdown files."""

__version__ = "0.1.0"
