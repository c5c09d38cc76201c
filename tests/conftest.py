# tests/conftest.py

"""Shared pytest fixtures for the spotlight tests."""

import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path: Path) -> Generator[None, None, None]:
    """Send per-run log files to a temp ``logs/`` dir and reset handlers."""
    root_logger = logging.getLogger("price_spotlight")
    with patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
        yield
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
