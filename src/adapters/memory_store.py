"""Store en memoria (implementa `core.interfaces.store.RecordStore`).

Se usa para el dataset estático del catálogo, para los datos de usuario
offline (vía `JsonFileRecordStore`) y en tests.

Reglas:
- Claves únicas declaradas por tabla: `insert` lanza `ConflictError`.
- Las filas se copian al entrar y al salir; el estado interno no se expone.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from core.errors import ConflictError
from core.interfaces.store import Row, Tables, Where


DEFAULT_UNIQUE_KEYS: dict[str, tuple[tuple[str, ...], ...]] = {
    Tables.BRANDS: (("id",),),
    Tables.MODELS: (("id",),),
    Tables.FAULTS: (("id",),),
    Tables.STEPS: (("id",),),
    Tables.FAVORITES: (("id",), ("user_id", "fault_code_id")),
    Tables.USER_ACCESS: (("user_id",),),
}


def _matches(row: Row, where: Where | None) -> bool:
    if not where:
        return True
    return all(row.get(key) == value for key, value in where.items())


def _order_rows(rows: list[Row], order_by: str | None, descending: bool) -> list[Row]:
    if not order_by:
        return rows
    present = [r for r in rows if r.get(order_by) is not None]
    missing = [r for r in rows if r.get(order_by) is None]
    present.sort(key=lambda r: r[order_by], reverse=descending)
    return present + missing


class InMemoryRecordStore:
    def __init__(
        self,
        tables: Mapping[str, Iterable[Row]] | None = None,
        *,
        unique_keys: Mapping[str, tuple[tuple[str, ...], ...]] | None = None,
    ) -> None:
        self._tables: dict[str, list[Row]] = {}
        self._unique_keys = dict(DEFAULT_UNIQUE_KEYS if unique_keys is None else unique_keys)
        for table, rows in (tables or {}).items():
            self._tables[table] = [copy.deepcopy(dict(r)) for r in rows]

    def _rows(self, table: str) -> list[Row]:
        return self._tables.setdefault(table, [])

    def _check_unique(self, table: str, candidate: Row, *, ignore: Row | None = None) -> None:
        for key in self._unique_keys.get(table, ()):
            if any(candidate.get(col) is None for col in key):
                continue
            for existing in self._rows(table):
                if existing is ignore:
                    continue
                if all(existing.get(col) == candidate.get(col) for col in key):
                    raise ConflictError(
                        f"duplicate key {key} in {table}: "
                        + ", ".join(f"{col}={candidate.get(col)!r}" for col in key),
                        status_code=409,
                    )

    async def select(
        self,
        table: str,
        *,
        where: Where | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        rows = [r for r in self._rows(table) if _matches(r, where)]
        rows = _order_rows(rows, order_by, descending)
        if limit is not None:
            rows = rows[: max(0, limit)]
        return copy.deepcopy(rows)

    async def insert(self, table: str, row: Row) -> Row:
        stored: dict[str, Any] = copy.deepcopy(dict(row))
        if "id" in self._unique_keys_columns(table) and not stored.get("id"):
            stored["id"] = str(uuid.uuid4())
        self._check_unique(table, stored)
        await self._replace(table, [*self._rows(table), stored])
        return copy.deepcopy(stored)

    async def update(self, table: str, values: Row, *, where: Where) -> list[Row]:
        rows: list[Row] = []
        updated: list[Row] = []
        for row in self._rows(table):
            if not _matches(row, where):
                rows.append(row)
                continue
            candidate = {**row, **copy.deepcopy(dict(values))}
            self._check_unique(table, candidate, ignore=row)
            rows.append(candidate)
            updated.append(candidate)
        if updated:
            await self._replace(table, rows)
        return copy.deepcopy(updated)

    async def delete(self, table: str, *, where: Where) -> list[Row]:
        rows = self._rows(table)
        kept = [r for r in rows if not _matches(r, where)]
        removed = [r for r in rows if _matches(r, where)]
        if removed:
            await self._replace(table, kept)
        return copy.deepcopy(removed)

    def snapshot(self) -> dict[str, list[Row]]:
        return copy.deepcopy(self._tables)

    def _unique_keys_columns(self, table: str) -> set[str]:
        return {col for key in self._unique_keys.get(table, ()) for col in key}

    async def _replace(self, table: str, rows: list[Row]) -> None:
        """Sustituye la tabla y persiste; si la escritura falla, se restaura la anterior."""

        previous = self._tables.get(table)
        self._tables[table] = rows
        try:
            await self._after_mutation()
        except BaseException:
            if previous is None:
                self._tables.pop(table, None)
            else:
                self._tables[table] = previous
            raise

    async def _after_mutation(self) -> None:
        """Hook para subclases persistentes."""
