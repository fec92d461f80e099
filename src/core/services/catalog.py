"""Composición del catálogo público.

- Sin backend remoto: los repositorios leen directamente el dataset estático.
- Con backend remoto: cada repositorio lee del store remoto y, ante un
  `TransportError`, responde desde el mismo repositorio sobre el dataset
  estático (`with_static_fallback`).

El dataset estático es solo inglés; el texto turco se deriva con
`transform` (diccionario técnico por defecto).
"""

from __future__ import annotations

from dataclasses import dataclass

from adapters.rest_store import RestRecordStore
from adapters.static_dataset import load_static_catalog
from adapters.term_dictionary import translate_text
from core.config import AppSettings
from core.domain.bilingual import TextTransform
from core.interfaces.store import RecordStore
from core.logging import get_logger
from core.services.context import Preferences
from core.services.fallback import with_static_fallback
from core.services.repositories import (
    BrandRepository,
    FaultRepository,
    ModelRepository,
    StepRepository,
)

logger = get_logger(__name__)


@dataclass
class Catalog:
    brands: BrandRepository
    models: ModelRepository
    faults: FaultRepository
    steps: StepRepository


def build_catalog_repositories(
    store: RecordStore,
    preferences: Preferences,
    *,
    transform: TextTransform = translate_text,
) -> Catalog:
    steps = StepRepository(store, preferences, transform=transform)
    return Catalog(
        brands=BrandRepository(store, preferences, transform=transform),
        models=ModelRepository(store, preferences, transform=transform),
        faults=FaultRepository(store, preferences, steps, transform=transform),
        steps=steps,
    )


def build_catalog(
    settings: AppSettings,
    preferences: Preferences,
    *,
    remote_store: RecordStore | None = None,
    static_store: RecordStore | None = None,
    transform: TextTransform = translate_text,
) -> Catalog:
    static = build_catalog_repositories(
        static_store if static_store is not None else load_static_catalog(settings),
        preferences,
        transform=transform,
    )

    if remote_store is None:
        if not settings.remote_configured:
            logger.info("catalog.static_only")
            return static
        remote_store = RestRecordStore(settings)

    remote = build_catalog_repositories(remote_store, preferences, transform=transform)
    return Catalog(
        brands=with_static_fallback(remote.brands, static.brands),
        models=with_static_fallback(remote.models, static.models),
        faults=with_static_fallback(remote.faults, static.faults),
        steps=with_static_fallback(remote.steps, static.steps),
    )
