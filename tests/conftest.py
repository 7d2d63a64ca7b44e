"""Pytest configuration and fixtures for s3ninja tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from s3ninja.storage.settings import (
    S3NINJA_DISPLAY_DATETIME_FORMAT_ENV,
    S3NINJA_HASH_CHUNK_SIZE_ENV,
)


@pytest.fixture(autouse=True)
def clear_storage_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test with default storage settings."""
    monkeypatch.delenv(S3NINJA_HASH_CHUNK_SIZE_ENV, raising=False)
    monkeypatch.delenv(S3NINJA_DISPLAY_DATETIME_FORMAT_ENV, raising=False)


@pytest.fixture
def bucket_dir() -> Iterator[Path]:
    """Create a temporary bucket directory holding objects and sidecars."""
    with tempfile.TemporaryDirectory(prefix="s3ninja_test_bucket_") as tmpdir:
        yield Path(tmpdir)
