"""Shared pytest fixtures for docmark unit tests."""

from pathlib import Path

import pytest

from docmark.resilience.failure_log import FailureLog
from docmark.storage.cache import IncrementalCache
from docmark.storage.store import PersistenceStore


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Empty output directory for persisted markdown."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def store(output_dir: Path) -> PersistenceStore:
    return PersistenceStore(output_dir)


@pytest.fixture
def cache(output_dir: Path) -> IncrementalCache:
    return IncrementalCache(output_dir)


@pytest.fixture
def failure_log(tmp_path: Path) -> FailureLog:
    return FailureLog(tmp_path / "failed_pages.jsonl")
