from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from adapters.static_dataset import CatalogFile, build_catalog_store, load_static_catalog
from core.interfaces.store import Tables
from core.resources_loader import bundled_catalog_path, get_catalog_path, load_catalog_data


def _minimal_catalog() -> dict:
    return {
        "brands": [{"id": "b1", "name": "Brand"}],
        "boiler_models": [{"id": "m1", "brand_id": "b1", "model_name": "Model"}],
        "fault_codes": [
            {"id": "f1", "brand_id": "b1", "code": "E1", "title": "T", "severity": "info", "summary": "S"}
        ],
        "resolution_steps": [{"id": "s1", "fault_code_id": "f1", "order_number": 1, "text": "Do it"}],
    }


def test_bundled_catalog_is_consistent():
    catalog = CatalogFile.model_validate(load_catalog_data(path=bundled_catalog_path()))

    assert len(catalog.brands) == 7
    assert len(catalog.boiler_models) == 10
    assert len(catalog.fault_codes) == 13
    assert len(catalog.resolution_steps) == 14


def test_brand_code_pairs_are_unique_but_codes_repeat_across_brands():
    catalog = CatalogFile.model_validate(load_catalog_data(path=bundled_catalog_path()))
    pairs = [(f.brand_id, f.code) for f in catalog.fault_codes]

    assert len(pairs) == len(set(pairs))


@pytest.mark.asyncio
async def test_static_store_serves_catalog_tables():
    store = load_static_catalog(path=bundled_catalog_path())

    assert len(await store.select(Tables.BRANDS)) == 7
    assert await store.select(Tables.FAVORITES) == []


@pytest.mark.parametrize(
    ("table", "patch"),
    [
        ("boiler_models", {"brand_id": "ghost"}),
        ("fault_codes", {"brand_id": "ghost"}),
        ("fault_codes", {"boiler_model_id": "ghost"}),
        ("resolution_steps", {"fault_code_id": "ghost"}),
        ("resolution_steps", {"order_number": 0}),
        ("fault_codes", {"severity": "fatal"}),
    ],
)
def test_broken_references_are_rejected(table, patch):
    data = _minimal_catalog()
    data[table][0].update(patch)

    with pytest.raises(ValidationError):
        build_catalog_store(data)


def test_data_dir_catalog_overrides_bundled(settings):
    override = settings.resolved_data_dir() / "catalog.json"
    override.write_text(json.dumps(_minimal_catalog()), encoding="utf-8")

    assert get_catalog_path(settings) == override
    assert load_catalog_data(settings)["brands"][0]["id"] == "b1"


def test_without_override_the_bundled_catalog_is_used(settings):
    assert get_catalog_path(settings) == bundled_catalog_path()
