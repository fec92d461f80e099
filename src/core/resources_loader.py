"""Cargador del catálogo estático.

Este módulo vive en `core/` porque decide *qué* catálogo se usa como
respaldo, sin acoplarse a la CLI ni al store que lo sirve.

Orden de búsqueda:
1) `<data_dir>/catalog.json` si existe (override del usuario o de
   FAULTCODE_DATA_DIR).
2) El catálogo empaquetado en `core/resources/catalog.json`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.config import AppSettings


CATALOG_FILENAME = "catalog.json"


def bundled_catalog_path() -> Path:
    return Path(__file__).resolve().parent / "resources" / CATALOG_FILENAME


def get_catalog_path(settings: AppSettings | None = None) -> Path:
    settings = settings or AppSettings()
    candidate = settings.resolved_data_dir() / CATALOG_FILENAME
    if candidate.exists() and candidate.is_file():
        return candidate
    return bundled_catalog_path()


def load_catalog_data(settings: AppSettings | None = None, *, path: Path | None = None) -> dict[str, Any]:
    """Lee el JSON del catálogo (brands, boiler_models, fault_codes, resolution_steps)."""

    catalog_path = path or get_catalog_path(settings)
    return json.loads(catalog_path.read_text(encoding="utf-8"))
