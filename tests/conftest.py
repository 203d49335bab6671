# tests/conftest.py

"""Shared pytest fixtures for all price_trends tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_data_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Point the default database at a per-test temp directory."""
    monkeypatch.setattr(Settings, "DATA_DIR", tmp_path)
    monkeypatch.setattr(
        Settings, "PRICE_DB_PATH", tmp_path / "price_history.db",
    )
    yield tmp_path
