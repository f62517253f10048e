"""Pytest configuration for test isolation.

File storage defaults to ``./.gofinances`` under the working directory and the
SQL backend shares one process-wide engine. Tests that touch either must not
see each other's state, so every test gets its own data directory and a fresh
engine, and ``GOFINANCES_*``/``DATABASE_URL`` settings from the developer's
shell are cleared.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from db.client import dispose_engine

_ENV_VARS = (
    "GOFINANCES_STORAGE",
    "GOFINANCES_LOCALE",
    "GOFINANCES_TIMEZONE",
    "GOFINANCES_LOG_LEVEL",
    "DATABASE_URL",
)


@pytest.fixture(autouse=True)
def _isolate_data_dir(
    tmp_path: Path, tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Point ``GOFINANCES_DATA_DIR`` at the test's temporary directory."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Kept outside ``tmp_path`` so tests that inspect ``tmp_path`` see only their own files.
    data_dir = tmp_path_factory.mktemp("data")
    monkeypatch.setenv("GOFINANCES_DATA_DIR", os.fspath(data_dir))
    # Keep a developer's .env out of CLI tests.
    monkeypatch.chdir(tmp_path)
    yield
    dispose_engine()
