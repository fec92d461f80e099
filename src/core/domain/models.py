"""Modelos del dominio (Pydantic v2).

Estas entidades ya están resueltas al locale activo: los textos son `str` y
las listas `list[str]`. La forma bilingüe cruda vive en `core.domain.bilingual`
y solo la ven los repositorios.

Nota:
- `FaultCode.code` no es único globalmente; la unicidad es por (brand_id, code).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Brand(BaseModel):
    """Marca de calderas. El nombre es nombre propio: no se traduce."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, description="Nombre comercial (invariante por locale).")
    aliases: list[str] = Field(
        default_factory=list,
        description="Nombres/grafías alternativas usadas en la búsqueda.",
    )
    country: str | None = None


class YearRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=1900, le=2100)
    end: int | None = Field(default=None, ge=1900, le=2100)

    @model_validator(mode="after")
    def _check_order(self) -> "YearRange":
        if self.end is not None and self.end < self.start:
            raise ValueError("year range end precedes start")
        return self

    def label(self) -> str:
        if self.end is None or self.end == self.start:
            return str(self.start)
        return f"{self.start}-{self.end}"


class BoilerModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    brand_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    years: YearRange | None = None


class FaultCode(BaseModel):
    """Código de avería resuelto al locale activo.

    `model_id` ausente significa que aplica a todos los modelos de la marca.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str = Field(..., min_length=1)
    brand_id: str = Field(..., min_length=1)
    model_id: str | None = None
    code: str = Field(..., min_length=1, max_length=32, description="Código corto, p.ej. 'E03'.")
    title: str
    severity: Severity
    summary: str
    causes: list[str] = Field(default_factory=list)
    safety_notice: str | None = None
    last_verified_at: datetime | None = None


class ResolutionStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    fault_code_id: str = Field(..., min_length=1)
    order: int = Field(..., ge=1, description="Posición 1-based; no tiene por qué ser contigua.")
    text: str
    estimated_minutes: int | None = Field(default=None, ge=0)
    requires_professional: bool = False
    tools: list[str] = Field(default_factory=list)
    image_url: str | None = None


class FaultDetail(BaseModel):
    """Ficha completa: avería + pasos en orden ascendente."""

    model_config = ConfigDict(frozen=True)

    fault: FaultCode
    steps: list[ResolutionStep] = Field(default_factory=list)


class SearchFilters(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    q: str | None = None
    brand_id: str | None = None
    model_id: str | None = None


class Favorite(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    fault_code_id: str = Field(..., min_length=1)
    created_at: datetime
