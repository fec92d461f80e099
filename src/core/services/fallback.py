"""Fallback al dataset estático para repositorios de datos públicos.

`with_static_fallback(primary, fallback, operations=...)` envuelve un
repositorio del catálogo: si una operación permitida del primario lanza
`TransportError`, se registra un warning y se responde con el mismo método
del repositorio estático. Las demás operaciones y atributos pasan tal cual.

Solo se aplica al catálogo. Favoritos y estado de cuenta nunca se envuelven:
un fallo ahí debe llegar al llamador.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from typing import Any, TypeVar, cast

from core.errors import TransportError
from core.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

CATALOG_READ_OPERATIONS: frozenset[str] = frozenset(
    {
        "get_by_id",
        "list_all",
        "search",
        "get_models_by_brand",
        "list_by_brand",
        "list_by_fault",
        "get_recent",
        "get_detail",
    }
)


class StaticFallback:
    def __init__(
        self,
        primary: Any,
        fallback: Any,
        *,
        operations: Iterable[str] = CATALOG_READ_OPERATIONS,
        name: str | None = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._operations = frozenset(operations)
        self._name = name or type(primary).__name__

    @property
    def primary(self) -> Any:
        return self._primary

    @property
    def fallback(self) -> Any:
        return self._fallback

    def __getattr__(self, attr: str) -> Any:
        target = getattr(self._primary, attr)
        if attr not in self._operations or not callable(target):
            return target
        fallback_target = getattr(self._fallback, attr)

        @functools.wraps(target)
        async def call_with_fallback(*args: Any, **kwargs: Any) -> Any:
            try:
                return await target(*args, **kwargs)
            except TransportError as exc:
                logger.warning(
                    "catalog.static_fallback",
                    repository=self._name,
                    operation=attr,
                    status_code=exc.status_code,
                    error=str(exc),
                )
                return await fallback_target(*args, **kwargs)

        return call_with_fallback


def with_static_fallback(
    primary: R,
    fallback: R,
    *,
    operations: Iterable[str] = CATALOG_READ_OPERATIONS,
) -> R:
    return cast(R, StaticFallback(primary, fallback, operations=operations))
