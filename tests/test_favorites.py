from __future__ import annotations

import pytest

from adapters.memory_store import InMemoryRecordStore
from core.domain.language import Locale
from core.errors import ConflictError, InvalidIdentifierError, TransportError
from core.interfaces.store import Tables
from core.services.favorites import AddResult, FavoritesStore, RemoveResult

F28_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e01"
F22_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e02"
E03_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e09"
ORPHAN_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def user_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def favorites(user_store, catalog, ticking_clock) -> FavoritesStore:
    return FavoritesStore(user_store, catalog.faults, clock=ticking_clock)


class _ConflictingStore(InMemoryRecordStore):
    """Simula el 409 del backend REST en cada insert."""

    async def insert(self, table, row):
        raise ConflictError("duplicate key value violates unique constraint", status_code=409)


@pytest.mark.asyncio
async def test_add_is_idempotent(favorites):
    first = await favorites.add("user-1", F28_ID)
    second = await favorites.add("user-1", F28_ID)

    assert first == AddResult(created=True)
    assert second == AddResult(created=False)
    assert [f.id for f in await favorites.list("user-1")] == [F28_ID]
    assert await favorites.count("user-1") == 1


@pytest.mark.asyncio
async def test_remove_never_added_is_not_an_error(favorites):
    result = await favorites.remove("user-1", F28_ID)

    assert result == RemoveResult(removed=False, error=None)


@pytest.mark.asyncio
async def test_remove_existing(favorites):
    await favorites.add("user-1", F28_ID)

    result = await favorites.remove("user-1", F28_ID)

    assert result.removed is True
    assert await favorites.is_favorited("user-1", F28_ID) is False


@pytest.mark.asyncio
async def test_list_is_most_recent_first(favorites):
    for fault_id in (F22_ID, E03_ID, F28_ID):
        await favorites.add("user-1", fault_id)

    assert [f.id for f in await favorites.list("user-1")] == [F28_ID, E03_ID, F22_ID]


@pytest.mark.asyncio
async def test_lists_are_per_user(favorites):
    await favorites.add("user-1", F28_ID)
    await favorites.add("user-2", F22_ID)

    assert [f.id for f in await favorites.list("user-2")] == [F22_ID]
    assert await favorites.is_favorited("user-2", F28_ID) is False


@pytest.mark.asyncio
async def test_list_is_resolved_to_active_locale(favorites, preferences):
    await favorites.add("user-1", F28_ID)
    preferences.set_locale(Locale.TURKISH)

    faults = await favorites.list("user-1")

    assert faults[0].title == "Ateşleme hatası"


@pytest.mark.asyncio
async def test_list_skips_faults_missing_from_catalog(favorites):
    await favorites.add("user-1", ORPHAN_ID)
    await favorites.add("user-1", F28_ID)

    assert [f.id for f in await favorites.list("user-1")] == [F28_ID]
    assert [e.fault_code_id for e in await favorites.entries("user-1")] == [F28_ID, ORPHAN_ID]


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["", "F28", "not-a-uuid", "8b0f6c1e2d4a4c5b9e710a1b2c3d4e01"])
async def test_malformed_fault_id_rejected_before_mutation(favorites, user_store, bad_id):
    with pytest.raises(InvalidIdentifierError) as excinfo:
        await favorites.add("user-1", bad_id)

    assert excinfo.value.field == "fault_code_id"
    assert user_store.snapshot().get(Tables.FAVORITES, []) == []


@pytest.mark.asyncio
async def test_blank_user_id_rejected(favorites):
    with pytest.raises(InvalidIdentifierError):
        await favorites.add("  ", F28_ID)
    with pytest.raises(InvalidIdentifierError):
        await favorites.remove("", F28_ID)


@pytest.mark.asyncio
async def test_backend_conflict_is_normalized(catalog):
    favorites = FavoritesStore(_ConflictingStore(), catalog.faults)

    assert await favorites.add("user-1", F28_ID) == AddResult(created=False)


@pytest.mark.asyncio
async def test_transport_errors_propagate(catalog, failing_store):
    favorites = FavoritesStore(failing_store, catalog.faults)

    with pytest.raises(TransportError):
        await favorites.remove("user-1", F28_ID)
    with pytest.raises(TransportError):
        await favorites.count("user-1")
