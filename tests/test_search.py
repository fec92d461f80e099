from __future__ import annotations

import pytest

from core.domain.models import FaultCode, SearchFilters, Severity
from core.services.search import (
    DEFAULT_RULES,
    FaultSearchEngine,
    ScoringRule,
    normalize_query,
    rank_faults,
    score_fault,
)

E03_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e09"
E02_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e10"
E133_ID = "8b0f6c1e-2d4a-4c5b-9e71-0a1b2c3d4e04"


def _fault(
    fault_id: str,
    code: str,
    *,
    brand_id: str = "B1",
    model_id: str | None = None,
    title: str = "Generic fault",
    summary: str = "Nothing special.",
) -> FaultCode:
    return FaultCode(
        id=fault_id,
        brand_id=brand_id,
        model_id=model_id,
        code=code,
        title=title,
        severity=Severity.WARNING,
        summary=summary,
    )


def test_normalize_query_lowercases_and_trims():
    assert normalize_query("  E03 \n") == "e03"
    assert normalize_query(None) == ""


def test_default_rules_weights():
    assert [(r.name, r.weight) for r in DEFAULT_RULES] == [
        ("brand_filter", 10),
        ("code_exact", 8),
        ("title_contains", 4),
        ("summary_contains", 2),
    ]


def test_exact_code_outranks_title_substring():
    sensor = _fault("x1", "X1", brand_id="B2", title="Faulty E03 sensor")
    ignition = _fault("e03", "E03", brand_id="B1", title="Ignition failure")

    results = rank_faults([sensor, ignition], SearchFilters(q="E03"))

    assert [f.id for f in results] == ["e03", "x1"]


@pytest.mark.parametrize("query", ["e03", " E03 ", "E03\t"])
def test_exact_code_scores_at_least_eight(query):
    fault = _fault("e03", "E03")

    assert score_fault(fault, SearchFilters(q=query)) >= 8


def test_brand_filter_plus_exact_code_scores_eighteen_and_ranks_first():
    other = _fault("o1", "E01", brand_id="B1", title="E03 follow-up", summary="See E03.")
    target = _fault("t1", "E03", brand_id="B1")
    filters = SearchFilters(q="E03", brand_id="B1")

    assert score_fault(target, filters) == 18
    assert rank_faults([other, target], filters)[0].id == "t1"


def test_zero_scores_are_discarded():
    match = _fault("m", "F22", title="Low water pressure")
    miss = _fault("n", "F28", title="Ignition failure")

    results = rank_faults([match, miss], SearchFilters(q="pressure"))

    assert [f.id for f in results] == ["m"]


def test_ties_keep_dataset_order():
    faults = [_fault(f"f{i}", f"C{i}", title="Fan fault") for i in range(5)]

    results = rank_faults(faults, SearchFilters(q="fan"))

    assert [f.id for f in results] == ["f0", "f1", "f2", "f3", "f4"]


def test_empty_query_returns_structural_set_in_dataset_order():
    faults = [
        _fault("a", "A1", brand_id="B2"),
        _fault("b", "B1", brand_id="B1"),
        _fault("c", "C1", brand_id="B1"),
    ]

    assert [f.id for f in rank_faults(faults, SearchFilters(q="   "))] == ["a", "b", "c"]
    assert [f.id for f in rank_faults(faults, SearchFilters(brand_id="B1"))] == ["b", "c"]


def test_model_filter_keeps_brand_wide_faults():
    faults = [
        _fault("generic", "E1", model_id=None),
        _fault("mine", "E2", model_id="M1"),
        _fault("other", "E3", model_id="M2"),
    ]

    results = rank_faults(faults, SearchFilters(model_id="M1"))

    assert [f.id for f in results] == ["generic", "mine"]


def test_no_diacritic_folding():
    fault = _fault("v", "F28", title="vaillant ignition")

    assert rank_faults([fault], SearchFilters(q="vaillánt")) == []


def test_custom_rules_can_be_appended():
    def is_f_series(fault, ctx):
        return fault.code.startswith("F")

    rules = (*DEFAULT_RULES, ScoringRule("f_series", is_f_series, 1))
    fault = _fault("x", "F28", title="Ignition failure")

    assert score_fault(fault, SearchFilters(q="ignition"), rules) == 5


@pytest.mark.asyncio
async def test_engine_ranks_static_catalog_e03_scenario(catalog):
    engine = FaultSearchEngine(catalog.faults)

    results = await engine.search_faults(SearchFilters(q="E03"))

    # E03 por código exacto (8); E02 solo lo menciona en el resumen (2).
    assert [f.id for f in results] == [E03_ID, E02_ID]


@pytest.mark.asyncio
async def test_engine_brand_filter_scores_every_brand_candidate(catalog):
    engine = FaultSearchEngine(catalog.faults)

    results = await engine.search_faults(SearchFilters(q="ignition", brand_id="baxi"))

    assert results[0].id == E133_ID
    assert {f.brand_id for f in results} == {"baxi"}
    assert len(results) == 3


@pytest.mark.asyncio
async def test_engine_without_filters_returns_whole_catalog(catalog):
    engine = FaultSearchEngine(catalog.faults)

    results = await engine.search_faults()

    assert len(results) == 13
