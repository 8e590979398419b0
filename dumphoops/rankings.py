"""Category rankings and the composite rating index (CRI / wCRI).

Each entity is ranked per category among its peers. Ranks are inverted so a
higher number is better (N + 1 - rank), then summed into CRI. wCRI multiplies
each inverted rank by that category's weight before summing.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from dumphoops.categories import (
    CATEGORIES,
    DEFAULT_CATEGORY_WEIGHTS,
    INVERSE_CATS,
    CategoryStats,
)


@dataclass
class RankResult:
    """Composite scores for one ranked entity."""
    entity_id: str
    cri: float = 0.0
    wcri: float = 0.0
    category_ranks: dict[str, int] = field(default_factory=dict)

    def inverted_rank(self, cat: str, total: int) -> int:
        return total + 1 - self.category_ranks[cat]


def category_ranks(values: Sequence[float], inverse: bool = False) -> list[int]:
    """Rank values 1..N, best first, aligned with the input order.

    Sorting is stable. Equal values share the rank of the first entity in
    their group (1, 1, 3), so the rank after a tie skips ahead.
    """
    order = sorted(range(len(values)), key=lambda i: values[i], reverse=not inverse)
    ranks = [0] * len(values)
    prev_value: float | None = None
    prev_rank = 0
    for position, i in enumerate(order, 1):
        if prev_value is not None and values[i] == prev_value:
            ranks[i] = prev_rank
        else:
            ranks[i] = position
            prev_rank = position
            prev_value = values[i]
    return ranks


def rank_entities(
    entities: Sequence[tuple[str, CategoryStats]],
    weights: Mapping[str, float] | None = None,
) -> list[RankResult]:
    """Compute CRI and wCRI for every entity, in input order.

    ``entities`` is a list of (id, stats) pairs so that duplicate names and
    input order are both preserved. Weights default to the standard
    category weights; missing categories weigh 1.0.
    """
    if weights is None:
        weights = DEFAULT_CATEGORY_WEIGHTS

    n = len(entities)
    results = [RankResult(entity_id=eid) for eid, _ in entities]
    if n == 0:
        return results

    for cat in CATEGORIES:
        values = [stats.value(cat) for _, stats in entities]
        ranks = category_ranks(values, inverse=cat in INVERSE_CATS)
        weight = weights.get(cat, 1.0)
        for result, rank in zip(results, ranks):
            inverted = n + 1 - rank
            result.category_ranks[cat] = rank
            result.cri += inverted
            result.wcri += inverted * weight

    return results


def cri_standings(
    results: Sequence[RankResult],
    weighted: bool = False,
) -> list[tuple[int, RankResult]]:
    """Order results by CRI (or wCRI) into 1-indexed standings.

    Equal scores keep their input order.
    """
    key = (lambda r: r.wcri) if weighted else (lambda r: r.cri)
    ordered = sorted(results, key=key, reverse=True)
    return list(enumerate(ordered, 1))
