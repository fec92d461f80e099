"""Resolución de contenido bilingüe.

`resolve(value, locale)` es una función pura:
- `NativeBilingual`: valor del locale pedido; si falta, el de `en`.
- `DerivedBilingual`: en `en` devuelve la base; en `tr` aplica la
  transformación (elemento a elemento en listas, preservando el orden).
"""

from __future__ import annotations

from typing import Any, overload

from core.domain.bilingual import BilingualValue, DerivedBilingual, NativeBilingual
from core.domain.language import Locale


def _derive(value: DerivedBilingual[Any]) -> Any:
    if isinstance(value.base, str):
        return value.transform(value.base)
    return [value.transform(item) for item in value.base]


@overload
def resolve(value: BilingualValue[str], locale: Locale | str) -> str: ...
@overload
def resolve(value: BilingualValue[list[str]], locale: Locale | str) -> list[str]: ...
def resolve(value: BilingualValue[Any], locale: Locale | str) -> Any:
    code = Locale.parse(locale).value

    if value.kind == "native":
        resolved = value.get(code)
        if resolved is None or resolved == "" or resolved == []:
            resolved = value.en
        return list(resolved) if isinstance(resolved, list) else resolved

    if value.kind == "derived":
        if code == Locale.ENGLISH.value:
            return list(value.base) if isinstance(value.base, list) else value.base
        return _derive(value)

    raise TypeError(f"Unknown bilingual kind: {value.kind!r}")


def resolve_optional(value: BilingualValue[Any] | None, locale: Locale | str) -> Any:
    if value is None:
        return None
    return resolve(value, locale)
