"""Shared fixtures for integration tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture
def plaintext() -> bytes:
    """10,000 random bytes, an exact multiple of the AES block size."""
    return os.urandom(10_000)


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Empty temp directory on the same volume as the test files."""
    directory = tmp_path / "scratch"
    directory.mkdir()
    return directory
