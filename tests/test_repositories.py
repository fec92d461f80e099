from __future__ import annotations

import pytest

from adapters.memory_store import InMemoryRecordStore
from core.domain.language import Locale
from core.interfaces.store import Tables
from core.services.catalog import build_catalog_repositories
from core.services.context import Preferences

F28_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e01"
F22_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e02"
F75_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e03"
E03_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e09"
E02_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e10"
E01_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e11"
MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.mark.asyncio
async def test_brand_get_by_id_and_unknown(catalog):
    brand = await catalog.brands.get_by_id("vaillant")

    assert brand is not None
    assert brand.name == "Vaillant"
    assert "ecotec" in brand.aliases
    assert await catalog.brands.get_by_id("nope") is None


@pytest.mark.asyncio
async def test_brands_are_listed_by_name(catalog):
    brands = await catalog.brands.list_all()

    assert [b.id for b in brands] == [
        "baxi",
        "demirdokum",
        "eca",
        "ideal",
        "vaillant",
        "viessmann",
        "worcester-bosch",
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("query", "expected"),
    [("bosch", ["worcester-bosch"]), ("ECO", ["vaillant"]), ("demir", ["demirdokum"]), ("zzz", [])],
)
async def test_brand_search_matches_name_or_alias(catalog, query, expected):
    brands = await catalog.brands.search(query)

    assert [b.id for b in brands] == expected


@pytest.mark.asyncio
async def test_brand_name_is_not_translated(static_store):
    repos = build_catalog_repositories(static_store, Preferences(locale=Locale.TURKISH))

    brand = await repos.brands.get_by_id("demirdokum")

    assert brand.name == "DemirDöküm"


@pytest.mark.asyncio
async def test_models_by_brand_ordered_by_name(catalog):
    models = await catalog.models.get_models_by_brand("baxi")

    assert [m.name for m in models] == ["Duo-tec", "Platinum Combi"]
    assert models[0].years.label() == "2009-2020"
    assert models[1].years.label() == "2015"


@pytest.mark.asyncio
async def test_single_year_model_label(catalog):
    model = await catalog.models.get_by_id("demirdokum-nitromix")

    assert model.years.label() == "2013"
    assert await catalog.models.get_by_id("missing") is None


@pytest.mark.asyncio
async def test_fault_is_resolved_to_active_locale(static_store, preferences):
    repos = build_catalog_repositories(static_store, preferences)

    english = await repos.faults.get_by_id(F28_ID)
    preferences.set_locale(Locale.TURKISH)
    turkish = await repos.faults.get_by_id(F28_ID)

    assert english.title == "Ignition failure"
    assert turkish.title == "Ateşleme hatası"
    assert turkish.causes[1:] == ["Arızalı ateşleme elektrotu", "Gaz hattında hava"]
    assert turkish.code == "F28"


@pytest.mark.asyncio
async def test_fault_without_model_and_unknown_id(catalog):
    fault = await catalog.faults.get_by_id(F28_ID)

    assert fault.model_id is None
    assert fault.last_verified_at is not None
    assert await catalog.faults.get_by_id(MISSING_ID) is None


@pytest.mark.asyncio
async def test_native_bilingual_columns_are_used_verbatim():
    store = InMemoryRecordStore(
        {
            Tables.BRANDS: [{"id": "b1", "name": "Brand"}],
            Tables.FAULTS: [
                {
                    "id": "f1",
                    "brand_id": "b1",
                    "code": "E9",
                    "title": {"en": "Fan fault", "tr": "Fan hatası (el ile)"},
                    "severity": "warning",
                    "summary": {"en": "Fan stopped.", "tr": ""},
                    "causes": {"en": ["Faulty fan"], "tr": ["Bozuk fan"]},
                }
            ],
        }
    )
    repos = build_catalog_repositories(store, Preferences(locale=Locale.TURKISH))

    fault = await repos.faults.get_by_id("f1")

    assert fault.title == "Fan hatası (el ile)"
    assert fault.summary == "Fan stopped."
    assert fault.causes == ["Bozuk fan"]


@pytest.mark.asyncio
async def test_detail_steps_ascending_with_gaps(catalog):
    detail = await catalog.faults.get_detail(F28_ID)

    assert detail.fault.id == F28_ID
    assert [s.order for s in detail.steps] == [1, 2, 4]
    assert detail.steps[-1].requires_professional is True


@pytest.mark.asyncio
async def test_steps_sorted_even_when_stored_out_of_order(preferences):
    store = InMemoryRecordStore(
        {
            Tables.STEPS: [
                {"id": "s5", "fault_code_id": "f1", "order_number": 5, "text": "Last"},
                {"id": "s1", "fault_code_id": "f1", "order_number": 1, "text": "First"},
                {"id": "s3", "fault_code_id": "f1", "order_number": 3, "text": "Middle"},
            ]
        }
    )
    repos = build_catalog_repositories(store, preferences)

    steps = await repos.steps.list_by_fault("f1")

    assert [s.text for s in steps] == ["First", "Middle", "Last"]


@pytest.mark.asyncio
async def test_detail_for_fault_without_steps_and_unknown(catalog):
    detail = await catalog.faults.get_detail(F75_ID)

    assert detail is not None
    assert detail.steps == []
    assert await catalog.faults.get_detail(MISSING_ID) is None


@pytest.mark.asyncio
async def test_recent_orders_by_verification_date(catalog):
    recent = await catalog.faults.get_recent(3)

    assert [f.id for f in recent] == [E03_ID, F22_ID, E02_ID]


@pytest.mark.asyncio
async def test_recent_puts_unverified_last(catalog):
    recent = await catalog.faults.get_recent(13)

    assert {f.id for f in recent[-2:]} == {F75_ID, E01_ID}


@pytest.mark.asyncio
async def test_list_by_brand(catalog):
    faults = await catalog.faults.list_by_brand("demirdokum")

    assert [f.code for f in faults] == ["E03", "E02"]


@pytest.mark.asyncio
async def test_step_tools_are_translated(static_store):
    repos = build_catalog_repositories(static_store, Preferences(locale=Locale.TURKISH))

    steps = await repos.steps.list_by_fault(F22_ID)

    assert steps[1].tools == ["Tornavida"]
    assert steps[1].estimated_minutes == 10


@pytest.mark.asyncio
async def test_step_get_by_id_and_list_all(catalog):
    step = await catalog.steps.get_by_id("5a7d0c2b-1e3f-4a6b-8c9d-100000000903")

    assert step.order == 5
    assert step.tools == ["Multimeter"]
    assert len(await catalog.steps.list_all()) == 14
    assert await catalog.steps.get_by_id("missing") is None
