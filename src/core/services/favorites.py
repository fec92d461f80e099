"""Favorites store: saved fault codes per user.

Contract:
- `add` is idempotent: a duplicate pair comes back as `created=False`.
- `remove` of a missing favorite is `removed=False`, not an error.
- `list` returns resolved `FaultCode`s, most recently favorited first.
- Identifiers are validated before any mutation (`InvalidIdentifierError`).
- Store failures propagate. Plan checks belong to the access layer
  (`require_favorites_access`), not to this store.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from core.domain.models import Favorite, FaultCode
from core.errors import ConflictError, InvalidIdentifierError
from core.interfaces.store import RecordStore, Tables
from core.logging import get_logger
from core.services.repositories import FaultRepository

logger = get_logger(__name__)

FAULT_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_user_id(user_id: str) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidIdentifierError("user_id", str(user_id), "a non-empty string")
    return user_id


def validate_fault_id(fault_code_id: str) -> str:
    if not isinstance(fault_code_id, str) or not FAULT_ID_PATTERN.match(fault_code_id):
        raise InvalidIdentifierError("fault_code_id", str(fault_code_id), "UUID format")
    return fault_code_id


@dataclass(frozen=True)
class AddResult:
    created: bool


@dataclass(frozen=True)
class RemoveResult:
    removed: bool
    error: str | None = None


class FavoritesStore:
    table = Tables.FAVORITES

    def __init__(
        self,
        store: RecordStore,
        faults: FaultRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._faults = faults
        self._clock = clock

    async def add(self, user_id: str, fault_code_id: str) -> AddResult:
        validate_user_id(user_id)
        validate_fault_id(fault_code_id)
        try:
            await self._store.insert(
                self.table,
                {
                    "user_id": user_id,
                    "fault_code_id": fault_code_id,
                    "created_at": self._clock().isoformat(),
                },
            )
        except ConflictError:
            logger.info("favorites.already_saved", user_id=user_id, fault_code_id=fault_code_id)
            return AddResult(created=False)
        logger.info("favorites.added", user_id=user_id, fault_code_id=fault_code_id)
        return AddResult(created=True)

    async def remove(self, user_id: str, fault_code_id: str) -> RemoveResult:
        validate_user_id(user_id)
        validate_fault_id(fault_code_id)
        deleted = await self._store.delete(
            self.table,
            where={"user_id": user_id, "fault_code_id": fault_code_id},
        )
        if deleted:
            logger.info("favorites.removed", user_id=user_id, fault_code_id=fault_code_id)
        return RemoveResult(removed=bool(deleted))

    async def list(self, user_id: str) -> list[FaultCode]:
        faults: list[FaultCode] = []
        for entry in await self.entries(user_id):
            fault = await self._faults.get_by_id(entry.fault_code_id)
            if fault is None:
                logger.warning("favorites.missing_fault", user_id=user_id, fault_code_id=entry.fault_code_id)
                continue
            faults.append(fault)
        return faults

    async def entries(self, user_id: str) -> list[Favorite]:
        """Raw associations, most recent first (no catalog lookup)."""

        validate_user_id(user_id)
        rows = await self._store.select(
            self.table,
            where={"user_id": user_id},
            order_by="created_at",
            descending=True,
        )
        return [Favorite.model_validate(row) for row in rows]

    async def is_favorited(self, user_id: str, fault_code_id: str) -> bool:
        validate_user_id(user_id)
        validate_fault_id(fault_code_id)
        rows = await self._store.select(
            self.table,
            where={"user_id": user_id, "fault_code_id": fault_code_id},
            limit=1,
        )
        return bool(rows)

    async def count(self, user_id: str) -> int:
        validate_user_id(user_id)
        rows = await self._store.select(self.table, where={"user_id": user_id})
        return len(rows)
