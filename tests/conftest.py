from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from adapters.memory_store import InMemoryRecordStore
from adapters.static_dataset import load_static_catalog
from core.config import AppSettings
from core.domain.language import Locale
from core.errors import TransportError
from core.resources_loader import bundled_catalog_path
from core.services.catalog import build_catalog_repositories
from core.services.context import Preferences


class MutableDate:
    """Reloj de calendario controlable (`clock()` -> `date`)."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today = self.today + timedelta(days=days)


class TickingClock:
    """Reloj que avanza un segundo por llamada (orden determinista)."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now = self._now + timedelta(seconds=1)
        return self._now


class FailingStore:
    """Store que falla siempre con `TransportError` (backend caído)."""

    def __init__(self, message: str = "backend unreachable") -> None:
        self.message = message
        self.calls: list[str] = []

    async def _fail(self, op: str):
        self.calls.append(op)
        raise TransportError(self.message, status_code=503)

    async def select(self, table, *, where=None, order_by=None, descending=False, limit=None):
        return await self._fail("select")

    async def insert(self, table, row):
        return await self._fail("insert")

    async def update(self, table, values, *, where):
        return await self._fail("update")

    async def delete(self, table, *, where):
        return await self._fail("delete")


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(_env_file=None, backend_url=None, data_dir=tmp_path)


@pytest.fixture
def static_store() -> InMemoryRecordStore:
    return load_static_catalog(path=bundled_catalog_path())


@pytest.fixture
def preferences() -> Preferences:
    return Preferences(locale=Locale.ENGLISH)


@pytest.fixture
def catalog(static_store, preferences):
    return build_catalog_repositories(static_store, preferences)


@pytest.fixture
def today() -> MutableDate:
    return MutableDate(date(2025, 6, 10))


@pytest.fixture
def ticking_clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
