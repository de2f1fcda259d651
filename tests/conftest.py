from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import Settings  # noqa: E402
from redis_db.store import MemoryStore, StoreError  # noqa: E402
from services.stats import StatsStore  # noqa: E402


class FakeClock:
    """Управляемая дата для тестов."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(date(2024, 3, 15))


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore("stats")


@pytest.fixture()
def stats(memory_store: MemoryStore, clock: FakeClock) -> StatsStore:
    return StatsStore(memory_store, today=clock)


@pytest.fixture()
def failing_store() -> MemoryStore:
    """Хранилище, у которого падает любой вызов."""
    store = MemoryStore("stats")
    store.has = AsyncMock(side_effect=StoreError("has", "*", ConnectionError("down")))
    store.get = AsyncMock(side_effect=StoreError("get", "*", ConnectionError("down")))
    store.set = AsyncMock(side_effect=StoreError("set", "*", ConnectionError("down")))
    return store


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(download_dir=str(tmp_path), log_dir=str(tmp_path / "logs"))


@pytest.fixture()
def auth_settings(tmp_path: Path) -> Settings:
    return Settings(
        api_key_url="file:///keys.json",
        auth_required=True,
        download_dir=str(tmp_path),
    )
