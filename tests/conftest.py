"""
Pytest configuration and fixtures for tempstore tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from tempstore.config import Settings, clear_settings_cache
from tempstore.medium import FileMedium
from tempstore.providers import JSONProvider

EPOCH_2024 = 1_704_067_200_000  # 2024-01-01T00:00:00Z in epoch ms


class FakeClock:
    """Settable epoch-ms clock for expiration tests."""

    def __init__(self, now: int = EPOCH_2024) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FailingMedium(FileMedium):
    """FileMedium whose writes fail on demand.

    With ``fail_reset=False`` only writes of real data fail, so the reset to
    an empty object succeeds. With ``fail_reset=True`` every write fails.
    """

    def __init__(self, fail_reset: bool = False) -> None:
        self.failing = False
        self.fail_reset = fail_reset
        self.writes: list[str] = []

    def write(self, path: Path, text: str) -> None:
        self.writes.append(text)
        if self.failing and (self.fail_reset or text != "{}"):
            raise PermissionError(13, "Permission denied", str(path))
        super().write(path, text)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Path for a backing file that does not exist yet."""
    return temp_dir / "store.json"


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at 2024-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def failing_medium() -> FailingMedium:
    """Medium whose data writes fail once ``failing`` is set; resets succeed."""
    return FailingMedium()


@pytest.fixture
def broken_medium() -> FailingMedium:
    """Medium whose writes, resets included, fail once ``failing`` is set."""
    return FailingMedium(fail_reset=True)


@pytest.fixture
async def json_provider(db_path: Path) -> JSONProvider:
    """Provide a JSONProvider over a fresh backing file."""
    return await JSONProvider.create(db_path, recursive=True)


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock TEMPSTORE_ environment variables for testing."""
    env_vars = {
        "TEMPSTORE_DATABASE_PATH": str(temp_dir / "env_store.json"),
        "TEMPSTORE_ENCODING": "tagged",
        "TEMPSTORE_LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance built from the mock environment."""
    from tempstore.config import get_settings

    settings = get_settings()
    yield settings
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
