"""Dataset estático del catálogo.

Valida el JSON del catálogo (Pydantic) y lo carga en un
`InMemoryRecordStore` con las cuatro tablas públicas. Los textos están solo
en inglés; el turco se deriva al resolver.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from adapters.memory_store import InMemoryRecordStore
from core.config import AppSettings
from core.domain.models import Severity
from core.interfaces.store import Tables
from core.resources_loader import load_catalog_data


class _Row(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)


class BrandRow(_Row):
    name: Any
    aliases: list[str] = Field(default_factory=list)
    country: str | None = None


class ModelRow(_Row):
    brand_id: str = Field(..., min_length=1)
    model_name: str = Field(..., min_length=1)
    year_start: int | None = None
    year_end: int | None = None


class FaultRow(_Row):
    brand_id: str = Field(..., min_length=1)
    boiler_model_id: str | None = None
    code: str = Field(..., min_length=1)
    title: Any
    severity: Severity
    summary: Any
    causes: Any = Field(default_factory=list)
    safety_notice: Any = None
    last_verified_at: str | None = None


class StepRow(_Row):
    fault_code_id: str = Field(..., min_length=1)
    order_number: int = Field(..., ge=1)
    text: Any
    estimated_time_min: int | None = None
    requires_pro: bool = False
    tools: Any = Field(default_factory=list)
    image_url: str | None = None


class CatalogFile(BaseModel):
    brands: list[BrandRow] = Field(default_factory=list)
    boiler_models: list[ModelRow] = Field(default_factory=list)
    fault_codes: list[FaultRow] = Field(default_factory=list)
    resolution_steps: list[StepRow] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "CatalogFile":
        brand_ids = {b.id for b in self.brands}
        model_ids = {m.id for m in self.boiler_models}
        fault_ids = {f.id for f in self.fault_codes}
        for model in self.boiler_models:
            if model.brand_id not in brand_ids:
                raise ValueError(f"model {model.id} references unknown brand {model.brand_id}")
        for fault in self.fault_codes:
            if fault.brand_id not in brand_ids:
                raise ValueError(f"fault {fault.id} references unknown brand {fault.brand_id}")
            if fault.boiler_model_id and fault.boiler_model_id not in model_ids:
                raise ValueError(f"fault {fault.id} references unknown model {fault.boiler_model_id}")
        for step in self.resolution_steps:
            if step.fault_code_id not in fault_ids:
                raise ValueError(f"step {step.id} references unknown fault {step.fault_code_id}")
        return self


def build_catalog_store(data: dict[str, Any]) -> InMemoryRecordStore:
    catalog = CatalogFile.model_validate(data)
    return InMemoryRecordStore(
        {
            Tables.BRANDS: [r.model_dump(mode="json") for r in catalog.brands],
            Tables.MODELS: [r.model_dump(mode="json") for r in catalog.boiler_models],
            Tables.FAULTS: [r.model_dump(mode="json") for r in catalog.fault_codes],
            Tables.STEPS: [r.model_dump(mode="json") for r in catalog.resolution_steps],
        }
    )


def load_static_catalog(
    settings: AppSettings | None = None,
    *,
    path: Path | None = None,
) -> InMemoryRecordStore:
    return build_catalog_store(load_catalog_data(settings, path=path))
