"""Application facade: catalog, search, quota gating and favorites.

The CLI (and any future entry-point) talks to `LookupService` only. Printing
and prompting stay outside; every method returns domain objects or typed
results.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path

from adapters.json_store import JsonFileRecordStore
from adapters.rest_store import RestRecordStore
from core.config import AppSettings
from core.domain.language import Locale
from core.domain.models import BoilerModel, Brand, FaultCode, FaultDetail, SearchFilters
from core.errors import InvalidIdentifierError
from core.interfaces.store import RecordStore
from core.logging import get_logger
from core.services.access_control import (
    GUEST_ACCOUNT_ID,
    AccessSession,
    AccountRepository,
    GatedResult,
    require_favorites_access,
)
from core.services.catalog import Catalog, build_catalog
from core.services.context import Preferences
from core.services.favorites import AddResult, FavoritesStore, RemoveResult, utc_now
from core.services.fallback import StaticFallback
from core.services.search import FaultSearchEngine

logger = get_logger(__name__)

USER_DATA_FILENAME = "user_data.json"


def local_user_store_path(settings: AppSettings) -> Path:
    return settings.resolved_data_dir() / USER_DATA_FILENAME


class LookupService:
    def __init__(
        self,
        catalog: Catalog,
        session: AccessSession,
        favorites: FavoritesStore,
        preferences: Preferences,
    ) -> None:
        self.catalog = catalog
        self.session = session
        self.preferences = preferences
        self._favorites = favorites
        self._engine = FaultSearchEngine(catalog.faults)

    @property
    def locale(self) -> Locale:
        return self.preferences.locale

    def switch_locale(self, value: Locale | str) -> Locale:
        """Change the active locale. Never touches the quota."""

        locale = self.preferences.set_locale(value)
        logger.debug("preferences.locale_changed", locale=locale.value)
        return locale

    async def search(
        self,
        q: str | None = None,
        *,
        brand_id: str | None = None,
        model_id: str | None = None,
    ) -> list[FaultCode]:
        return await self._engine.search_faults(SearchFilters(q=q, brand_id=brand_id, model_id=model_id))

    async def open_fault(self, fault_id: str) -> GatedResult[FaultDetail]:
        return await self.session.gated_read(fault_id, lambda: self.catalog.faults.get_detail(fault_id))

    async def list_brands(self, query: str | None = None) -> list[Brand]:
        if query:
            return await self.catalog.brands.search(query)
        return await self.catalog.brands.list_all()

    async def list_models(self, brand_id: str | None = None) -> list[BoilerModel]:
        if brand_id:
            return await self.catalog.models.get_models_by_brand(brand_id)
        return await self.catalog.models.list_all()

    async def recent_faults(self, limit: int = 10) -> list[FaultCode]:
        return await self.catalog.faults.get_recent(limit)

    async def add_favorite(self, fault_id: str) -> AddResult:
        user_id = require_favorites_access(self.session)
        return await self._favorites.add(user_id, fault_id)

    async def remove_favorite(self, fault_id: str) -> RemoveResult:
        user_id = require_favorites_access(self.session)
        return await self._favorites.remove(user_id, fault_id)

    async def list_favorites(self) -> list[FaultCode]:
        user_id = require_favorites_access(self.session)
        return await self._favorites.list(user_id)

    async def is_favorited(self, fault_id: str) -> bool:
        user_id = require_favorites_access(self.session)
        return await self._favorites.is_favorited(user_id, fault_id)

    async def toggle_favorite(self, fault_id: str) -> bool:
        """Flip the saved state of `fault_id`; returns the new state."""

        user_id = require_favorites_access(self.session)
        if await self._favorites.is_favorited(user_id, fault_id):
            await self._favorites.remove(user_id, fault_id)
            return False
        await self._favorites.add(user_id, fault_id)
        return True


async def open_lookup_service(
    settings: AppSettings,
    *,
    user_id: str | None,
    locale: Locale | None = None,
    user_store: RecordStore | None = None,
    remote_store: RecordStore | None = None,
    static_store: RecordStore | None = None,
    today: Callable[[], date] = date.today,
    now: Callable[[], datetime] = utc_now,
) -> LookupService:
    """Wire a `LookupService` from settings.

    User data (account state, favorites) goes to the remote backend when one
    is configured, otherwise to a local JSON file. It never falls back to the
    static catalog. Without a user id the quota is still tracked, under
    `GUEST_ACCOUNT_ID` in the local store.
    """

    if user_id == GUEST_ACCOUNT_ID:
        raise InvalidIdentifierError("user_id", user_id, "a user id other than the reserved guest key")

    preferences = Preferences(locale=locale or settings.default_locale)

    if remote_store is None and settings.remote_configured:
        remote_store = RestRecordStore(settings)
    catalog = build_catalog(settings, preferences, remote_store=remote_store, static_store=static_store)

    if user_store is None:
        user_store = remote_store or JsonFileRecordStore(local_user_store_path(settings))

    if user_id:
        accounts = AccountRepository(user_store)
    elif user_store is remote_store:
        accounts = AccountRepository(JsonFileRecordStore(local_user_store_path(settings)))
    else:
        accounts = AccountRepository(user_store)
    session = await AccessSession.open(
        user_id,
        accounts,
        quota_limit=settings.daily_quota_limit,
        clock=today,
        account_key=user_id or GUEST_ACCOUNT_ID,
    )

    # Favorites resolve against the primary catalog only.
    faults = catalog.faults.primary if isinstance(catalog.faults, StaticFallback) else catalog.faults
    favorites = FavoritesStore(user_store, faults, clock=now)
    return LookupService(catalog, session, favorites, preferences)
