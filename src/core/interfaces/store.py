"""Contrato del backing store.

Los repositorios consultan tablas lógicas mediante predicados de igualdad,
orden y límite. Las implementaciones (memoria, JSON local, REST) son
intercambiables y los repositorios no saben cuál está activa.

Errores:
- Fallos de transporte/almacenamiento -> `core.errors.TransportError`.
- Violación de unicidad en `insert` -> `core.errors.ConflictError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

Row = dict[str, Any]
Where = Mapping[str, Any]


class Tables:
    BRANDS = "brands"
    MODELS = "boiler_models"
    FAULTS = "fault_codes"
    STEPS = "resolution_steps"
    FAVORITES = "favorites"
    USER_ACCESS = "user_access"

    CATALOG = (BRANDS, MODELS, FAULTS, STEPS)


@runtime_checkable
class RecordStore(Protocol):
    """Interfaz genérica de consulta de registros (asíncrona)."""

    async def select(
        self,
        table: str,
        *,
        where: Where | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Filas que cumplen `where` (igualdad), ordenadas y limitadas.

        Los valores `None` de `order_by` van siempre al final.
        """

        ...

    async def insert(self, table: str, row: Row) -> Row:
        """Inserta y devuelve la fila almacenada."""

        ...

    async def update(self, table: str, values: Row, *, where: Where) -> list[Row]:
        """Actualiza las filas que cumplen `where` y las devuelve."""

        ...

    async def delete(self, table: str, *, where: Where) -> list[Row]:
        """Borra las filas que cumplen `where` y devuelve las borradas."""

        ...
