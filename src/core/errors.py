"""Errores del Core.

Taxonomía:
- `InvalidIdentifierError`: identificador mal formado, se rechaza antes de
  tocar el store.
- `TransportError`: el backend no responde o devuelve un fallo no recuperable.
  El catálogo público cae al dataset estático; los datos del usuario no.
- `ConflictError`: violación de unicidad en el store. El store de favoritos la
  normaliza a un no-op.
- `AccessDeniedError`: operación premium sin sesión o con plan free.

"No encontrado" no es un error: los repositorios devuelven `None`.
"""

from __future__ import annotations


class FaultCodeError(Exception):
    """Base de todos los errores de la aplicación."""


class InvalidIdentifierError(FaultCodeError):
    def __init__(self, field: str, value: str, expected: str) -> None:
        super().__init__(f"Invalid {field}: {value!r} (expected {expected})")
        self.field = field
        self.value = value
        self.expected = expected


class TransportError(FaultCodeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendNotConfiguredError(TransportError):
    pass


class ConflictError(TransportError):
    pass


class AccessDeniedError(FaultCodeError):
    def __init__(self, message: str, *, reason: str) -> None:
        super().__init__(message)
        self.reason = reason
