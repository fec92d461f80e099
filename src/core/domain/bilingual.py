"""Valores bilingües (en/tr) como variante etiquetada.

Dos formas:
- `NativeBilingual`: el store guarda ambos idiomas (`{"en": ..., "tr": ...}`).
- `DerivedBilingual`: solo hay texto en inglés y el turco se deriva bajo
  demanda con una transformación de texto determinista.

`kind` es la etiqueta sobre la que despacha el resolver.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

T = TypeVar("T", str, list[str])

TextTransform = Callable[[str], str]


@dataclass(frozen=True)
class NativeBilingual(Generic[T]):
    en: T
    tr: T | None = None
    kind: Literal["native"] = "native"

    def get(self, code: str) -> T | None:
        if code == "tr":
            return self.tr
        if code == "en":
            return self.en
        return None


@dataclass(frozen=True)
class DerivedBilingual(Generic[T]):
    base: T
    transform: TextTransform
    kind: Literal["derived"] = "derived"


BilingualValue = Union[NativeBilingual[T], DerivedBilingual[T]]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def bilingual_from_column(value: Any, transform: TextTransform) -> BilingualValue | None:
    """Construye la variante a partir de una columna cruda del store.

    - Mapping con claves de locale -> `NativeBilingual` (si falta `en`, el
      primer valor presente hace de `en`).
    - `str` o lista -> `DerivedBilingual` con `transform`.
    - `None` -> `None` (campos opcionales).
    """

    if value is None:
        return None
    if isinstance(value, Mapping):
        en = value.get("en")
        tr = value.get("tr")
        if _is_empty(en):
            en = tr
        if en is None:
            return None
        if isinstance(en, Sequence) and not isinstance(en, str):
            return NativeBilingual(
                en=[str(v) for v in en],
                tr=None if _is_empty(tr) else [str(v) for v in tr],
            )
        return NativeBilingual(en=str(en), tr=None if _is_empty(tr) else str(tr))
    if isinstance(value, str):
        return DerivedBilingual(base=value, transform=transform)
    if isinstance(value, Sequence):
        return DerivedBilingual(base=[str(v) for v in value], transform=transform)
    raise TypeError(f"Unsupported bilingual column value: {type(value).__name__}")
