"""Retry policy and failure logging."""
