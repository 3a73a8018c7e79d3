"""Content extraction, link scoping, and navigation linking."""
