from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from adapters.memory_store import InMemoryRecordStore
from core.errors import TransportError
from core.interfaces.store import Tables
from core.services.catalog import build_catalog, build_catalog_repositories
from core.services.favorites import FavoritesStore
from core.services.fallback import StaticFallback, with_static_fallback
from core.services.repositories import BrandRepository

F28_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e01"


class _Repo:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.label = "primary-label"

    async def get_by_id(self, entity_id):
        if self.error is not None:
            raise self.error
        return self.result

    async def delete_everything(self):
        raise TransportError("not a catalog read")


@pytest.mark.asyncio
async def test_transport_error_falls_back_and_logs_warning():
    primary = _Repo(error=TransportError("down", status_code=503))
    fallback = _Repo(result="static")
    repo = with_static_fallback(primary, fallback)

    with capture_logs() as logs:
        result = await repo.get_by_id("x")

    assert result == "static"
    assert logs[0]["event"] == "catalog.static_fallback"
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["operation"] == "get_by_id"
    assert logs[0]["status_code"] == 503


@pytest.mark.asyncio
async def test_not_found_is_not_a_fallback_trigger():
    primary = _Repo(result=None)
    fallback = _Repo(result="static")

    assert await with_static_fallback(primary, fallback).get_by_id("x") is None


@pytest.mark.asyncio
async def test_other_errors_propagate():
    primary = _Repo(error=ValueError("bad row"))
    repo = with_static_fallback(primary, _Repo(result="static"))

    with pytest.raises(ValueError):
        await repo.get_by_id("x")


@pytest.mark.asyncio
async def test_operations_outside_allow_list_do_not_fall_back():
    repo = with_static_fallback(_Repo(), _Repo())

    with pytest.raises(TransportError):
        await repo.delete_everything()


def test_plain_attributes_pass_through():
    primary = _Repo()
    repo = StaticFallback(primary, _Repo())

    assert repo.label == "primary-label"
    assert repo.primary is primary


@pytest.mark.asyncio
async def test_catalog_falls_back_to_static_dataset(settings, preferences, static_store, failing_store):
    catalog = build_catalog(settings, preferences, remote_store=failing_store, static_store=static_store)

    brands = await catalog.brands.list_all()
    detail = await catalog.faults.get_detail(F28_ID)
    models = await catalog.models.get_models_by_brand("baxi")
    recent = await catalog.faults.get_recent(1)

    assert len(brands) == 7
    assert detail is not None and [s.order for s in detail.steps] == [1, 2, 4]
    assert len(models) == 2
    assert len(recent) == 1
    assert "select" in failing_store.calls


@pytest.mark.asyncio
async def test_catalog_prefers_remote_data_when_available(settings, preferences, static_store):
    remote = InMemoryRecordStore({Tables.BRANDS: [{"id": "remote-brand", "name": {"en": "Remote", "tr": "Uzak"}}]})
    catalog = build_catalog(settings, preferences, remote_store=remote, static_store=static_store)

    brands = await catalog.brands.list_all()

    assert [b.id for b in brands] == ["remote-brand"]


def test_catalog_without_backend_uses_static_repositories(settings, preferences, static_store):
    catalog = build_catalog(settings, preferences, static_store=static_store)

    assert isinstance(catalog.brands, BrandRepository)


@pytest.mark.asyncio
async def test_favorites_never_fall_back(static_store, preferences, failing_store):
    faults = build_catalog_repositories(static_store, preferences).faults
    favorites = FavoritesStore(failing_store, faults)

    with pytest.raises(TransportError):
        await favorites.add("user-1", F28_ID)
    with pytest.raises(TransportError):
        await favorites.list("user-1")
