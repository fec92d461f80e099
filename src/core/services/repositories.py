"""Repositorios del catálogo (marcas, modelos, averías, pasos).

Cada repositorio consulta un `RecordStore` y devuelve entidades ya resueltas
al locale activo de `Preferences`. No saben si el store es remoto o el
dataset estático.

Reglas:
- `get_by_id` devuelve `None` si el id no existe; solo los fallos de
  transporte/almacenamiento propagan (`TransportError`).
- Columnas bilingües: `{"en", "tr"}` (store remoto) o texto solo en inglés
  (dataset estático), ver `core.domain.bilingual.bilingual_from_column`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core.domain.bilingual import TextTransform, bilingual_from_column
from core.domain.language import Locale
from core.domain.models import (
    BoilerModel,
    Brand,
    FaultCode,
    FaultDetail,
    ResolutionStep,
    Severity,
    YearRange,
)
from core.interfaces.store import RecordStore, Row, Tables
from core.services.content_resolver import resolve, resolve_optional
from core.services.context import Preferences
from core.services.search import normalize_query


def _identity(text: str) -> str:
    return text


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def brand_from_row(row: Row, locale: Locale) -> Brand:
    # Nombre propio: un nombre plano nunca pasa por la transformación.
    name = resolve(bilingual_from_column(row["name"], _identity), locale)
    return Brand(
        id=str(row["id"]),
        name=name,
        aliases=[str(a) for a in row.get("aliases") or []],
        country=row.get("country") or None,
    )


def model_from_row(row: Row) -> BoilerModel:
    start = _optional_int(row.get("year_start"))
    years = None
    if start is not None:
        years = YearRange(start=start, end=_optional_int(row.get("year_end")))
    return BoilerModel(
        id=str(row["id"]),
        brand_id=str(row["brand_id"]),
        name=str(row.get("model_name") or row.get("name")),
        years=years,
    )


def fault_from_row(row: Row, locale: Locale, transform: TextTransform) -> FaultCode:
    def text(column: str) -> Any:
        return resolve_optional(bilingual_from_column(row.get(column), transform), locale)

    return FaultCode(
        id=str(row["id"]),
        brand_id=str(row["brand_id"]),
        model_id=row.get("boiler_model_id") or None,
        code=str(row["code"]),
        title=text("title") or "",
        severity=Severity(row.get("severity") or Severity.INFO.value),
        summary=text("summary") or "",
        causes=text("causes") or [],
        safety_notice=text("safety_notice"),
        last_verified_at=_parse_datetime(row.get("last_verified_at")),
    )


def step_from_row(row: Row, locale: Locale, transform: TextTransform) -> ResolutionStep:
    def text(column: str) -> Any:
        return resolve_optional(bilingual_from_column(row.get(column), transform), locale)

    return ResolutionStep(
        id=str(row["id"]),
        fault_code_id=str(row["fault_code_id"]),
        order=int(row["order_number"]),
        text=text("text") or "",
        estimated_minutes=_optional_int(row.get("estimated_time_min")),
        requires_professional=bool(row.get("requires_pro")),
        tools=text("tools") or [],
        image_url=row.get("image_url") or None,
    )


class _CatalogRepository:
    table: str

    def __init__(
        self,
        store: RecordStore,
        preferences: Preferences,
        *,
        transform: TextTransform = _identity,
    ) -> None:
        self._store = store
        self._preferences = preferences
        self._transform = transform

    @property
    def locale(self) -> Locale:
        return self._preferences.locale

    async def _get_row(self, entity_id: str) -> Row | None:
        rows = await self._store.select(self.table, where={"id": entity_id}, limit=1)
        return rows[0] if rows else None


class BrandRepository(_CatalogRepository):
    table = Tables.BRANDS

    def _convert(self, row: Row) -> Brand:
        return brand_from_row(row, self.locale)

    async def get_by_id(self, brand_id: str) -> Brand | None:
        row = await self._get_row(brand_id)
        return self._convert(row) if row else None

    async def list_all(self) -> list[Brand]:
        rows = await self._store.select(self.table)
        return sorted((self._convert(r) for r in rows), key=lambda b: b.name.lower())

    async def search(self, query: str) -> list[Brand]:
        """Marcas cuyo nombre o algún alias contiene la consulta normalizada."""

        brands = await self.list_all()
        needle = normalize_query(query)
        if not needle:
            return brands
        return [
            brand
            for brand in brands
            if needle in normalize_query(brand.name)
            or any(needle in normalize_query(alias) for alias in brand.aliases)
        ]


class ModelRepository(_CatalogRepository):
    table = Tables.MODELS

    async def get_by_id(self, model_id: str) -> BoilerModel | None:
        row = await self._get_row(model_id)
        return model_from_row(row) if row else None

    async def list_all(self) -> list[BoilerModel]:
        rows = await self._store.select(self.table, order_by="model_name")
        return [model_from_row(r) for r in rows]

    async def get_models_by_brand(self, brand_id: str) -> list[BoilerModel]:
        rows = await self._store.select(self.table, where={"brand_id": brand_id}, order_by="model_name")
        return [model_from_row(r) for r in rows]


class StepRepository(_CatalogRepository):
    table = Tables.STEPS

    def _convert(self, row: Row) -> ResolutionStep:
        return step_from_row(row, self.locale, self._transform)

    async def get_by_id(self, step_id: str) -> ResolutionStep | None:
        row = await self._get_row(step_id)
        return self._convert(row) if row else None

    async def list_all(self) -> list[ResolutionStep]:
        rows = await self._store.select(self.table)
        return [self._convert(r) for r in rows]

    async def list_by_fault(self, fault_id: str) -> list[ResolutionStep]:
        rows = await self._store.select(self.table, where={"fault_code_id": fault_id}, order_by="order_number")
        steps = [self._convert(r) for r in rows]
        steps.sort(key=lambda s: s.order)
        return steps


class FaultRepository(_CatalogRepository):
    table = Tables.FAULTS

    def __init__(
        self,
        store: RecordStore,
        preferences: Preferences,
        steps: StepRepository,
        *,
        transform: TextTransform = _identity,
    ) -> None:
        super().__init__(store, preferences, transform=transform)
        self._steps = steps

    def _convert(self, row: Row) -> FaultCode:
        return fault_from_row(row, self.locale, self._transform)

    async def get_by_id(self, fault_id: str) -> FaultCode | None:
        row = await self._get_row(fault_id)
        return self._convert(row) if row else None

    async def list_all(self) -> list[FaultCode]:
        rows = await self._store.select(self.table)
        return [self._convert(r) for r in rows]

    async def list_by_brand(self, brand_id: str) -> list[FaultCode]:
        rows = await self._store.select(self.table, where={"brand_id": brand_id})
        return [self._convert(r) for r in rows]

    async def get_recent(self, limit: int = 10) -> list[FaultCode]:
        """Averías verificadas más recientemente (las no verificadas al final)."""

        rows = await self._store.select(
            self.table,
            order_by="last_verified_at",
            descending=True,
            limit=limit,
        )
        return [self._convert(r) for r in rows]

    async def get_detail(self, fault_id: str) -> FaultDetail | None:
        fault = await self.get_by_id(fault_id)
        if fault is None:
            return None
        steps = await self._steps.list_by_fault(fault_id)
        return FaultDetail(fault=fault, steps=steps)
