"""Shared test fixtures for respcache.

Provides an isolated cache directory, a clean configuration environment,
and a helper for back-dating entries. Fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from respcache.output import reset_output


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A not-yet-existing cache directory under tmp_path."""
    return tmp_path / "cache"


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Clear RESPCACHE_* variables and chdir into tmp_path.

    Returns:
        The tmp_path root, for writing a ``respcache.json``.
    """
    for var in ["RESPCACHE_DIR", "RESPCACHE_DURATION", "RESPCACHE_BYPASS_PARAM"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def age_file():
    """Return a helper that back-dates a file's mtime by N seconds."""

    def _age(path: Path, seconds: float) -> None:
        past = time.time() - seconds
        os.utime(path, (past, past))

    return _age
