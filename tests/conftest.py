# tests/conftest.py

"""Shared pytest fixtures for all soldfeed tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from soldfeed.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Point data and log directories at a per-test temp dir."""
    monkeypatch.setattr(Settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    yield
    root_logger = logging.getLogger("soldfeed")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
