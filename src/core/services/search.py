"""Search and relevancy ranking for fault codes.

Structural filters run first (brand, then model where a fault without a
model applies to every model of its brand). With a free-text query every
remaining candidate is scored by an ordered list of `ScoringRule`s; zero
scores are dropped and the rest are sorted by descending score. Python's
sort is stable, so ties keep the filtered dataset order.

Normalization is lower-case + trim only. There is no diacritic folding:
"vaillánt" does not match "vaillant".
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.domain.models import FaultCode, SearchFilters

if TYPE_CHECKING:
    from core.services.repositories import FaultRepository


def normalize_query(value: str | None) -> str:
    return (value or "").strip().lower()


@dataclass(frozen=True)
class ScoringContext:
    query: str
    filters: SearchFilters


@dataclass(frozen=True)
class ScoringRule:
    name: str
    predicate: Callable[[FaultCode, ScoringContext], bool]
    weight: int


def _brand_filter_match(fault: FaultCode, ctx: ScoringContext) -> bool:
    return bool(ctx.filters.brand_id) and fault.brand_id == ctx.filters.brand_id


def _code_exact(fault: FaultCode, ctx: ScoringContext) -> bool:
    return normalize_query(fault.code) == ctx.query


def _title_contains(fault: FaultCode, ctx: ScoringContext) -> bool:
    return ctx.query in normalize_query(fault.title)


def _summary_contains(fault: FaultCode, ctx: ScoringContext) -> bool:
    return ctx.query in normalize_query(fault.summary)


DEFAULT_RULES: tuple[ScoringRule, ...] = (
    ScoringRule("brand_filter", _brand_filter_match, 10),
    ScoringRule("code_exact", _code_exact, 8),
    ScoringRule("title_contains", _title_contains, 4),
    ScoringRule("summary_contains", _summary_contains, 2),
)


def apply_structural_filters(faults: Iterable[FaultCode], filters: SearchFilters) -> list[FaultCode]:
    results = list(faults)
    if filters.brand_id:
        results = [f for f in results if f.brand_id == filters.brand_id]
    if filters.model_id:
        results = [f for f in results if f.model_id is None or f.model_id == filters.model_id]
    return results


def score_fault(
    fault: FaultCode,
    filters: SearchFilters,
    rules: Sequence[ScoringRule] = DEFAULT_RULES,
) -> int:
    ctx = ScoringContext(query=normalize_query(filters.q), filters=filters)
    return sum(rule.weight for rule in rules if rule.predicate(fault, ctx))


def rank_faults(
    faults: Iterable[FaultCode],
    filters: SearchFilters,
    rules: Sequence[ScoringRule] = DEFAULT_RULES,
) -> list[FaultCode]:
    """Pure ranking over an in-memory candidate list."""

    candidates = apply_structural_filters(faults, filters)
    query = normalize_query(filters.q)
    if not query:
        return candidates

    ctx = ScoringContext(query=query, filters=filters)
    scored = [(sum(rule.weight for rule in rules if rule.predicate(f, ctx)), f) for f in candidates]
    scored = [item for item in scored if item[0] > 0]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [fault for _, fault in scored]


class FaultSearchEngine:
    def __init__(
        self,
        faults: "FaultRepository",
        rules: Sequence[ScoringRule] = DEFAULT_RULES,
    ) -> None:
        self._faults = faults
        self._rules = tuple(rules)

    async def search_faults(self, filters: SearchFilters | None = None) -> list[FaultCode]:
        filters = filters or SearchFilters()
        if filters.brand_id:
            candidates = await self._faults.list_by_brand(filters.brand_id)
        else:
            candidates = await self._faults.list_all()
        return rank_faults(candidates, filters, self._rules)
