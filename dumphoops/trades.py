"""Trade and roster-swap impact on team category totals and CRI.

A trade is scored two ways. The trade-only view swaps the outgoing players
for the incoming ones. The real view also adds pickups and removes the
players that get dropped to make room. Category deltas are taken between
the current roster aggregate and each new aggregate; CRI deltas sum the
composite scores of the players that move.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import reduce

from dumphoops.categories import (
    CATEGORIES,
    DEFAULT_CATEGORY_WEIGHTS,
    INVERSE_CATS,
    PCT_CATS,
    CategoryStats,
    add_totals,
)
from dumphoops.forecast import PACE_SCALE
from dumphoops.rankings import RankResult, rank_entities
from dumphoops.roster import Player

# Net CRI within this many points either way is an even trade
FAIRNESS_THRESHOLD = 5.0
# Weights below this mark a category the build is punting
PUNT_WEIGHT = 0.5

YOU_WIN = "you-win"
THEY_WIN = "they-win"
EVEN = "even"


@dataclass
class TradeScenario:
    giving: list[Player] = field(default_factory=list)
    getting: list[Player] = field(default_factory=list)
    replacements: list[Player] = field(default_factory=list)
    drops: list[Player] = field(default_factory=list)
    include_replacements: bool = True
    assume_drops: bool = True


@dataclass(frozen=True)
class CategoryDelta:
    category: str
    per_game: float
    per_40: float
    contribution: float
    weighted_contribution: float

    @property
    def improves(self) -> bool:
        return self.contribution > 0

    @property
    def hurts(self) -> bool:
        return self.contribution < 0


@dataclass
class TradeImpact:
    delta_cri: float
    delta_wcri: float
    category_deltas: list[CategoryDelta]
    fg_pct: float
    ft_pct: float

    @property
    def improved(self) -> list[str]:
        return [d.category for d in self.category_deltas if d.improves]

    @property
    def hurt(self) -> list[str]:
        return [d.category for d in self.category_deltas if d.hurts]


@dataclass
class TradeResult:
    trade_only: TradeImpact
    real_impact: TradeImpact
    your_net_cri: float
    your_net_wcri: float
    fairness: str
    verdict: str
    fit: str
    net_players: int

    @property
    def their_net_cri(self) -> float:
        return -self.your_net_cri

    @property
    def their_net_wcri(self) -> float:
        return -self.your_net_wcri


# ── Aggregation ─────────────────────────────────────────────────────────

def team_aggregate(players: Sequence[Player]) -> CategoryStats:
    """Sum a roster's per-game lines, with FG%/FT% from summed makes/attempts."""
    return reduce(add_totals, (p.stats for p in players), CategoryStats())


def score_pool(
    players: Sequence[Player],
    weights: Mapping[str, float] | None = None,
) -> dict[str, RankResult]:
    """Rank a player pool and key the CRI/wCRI results by player id."""
    results = rank_entities([(p.id, p.stats) for p in players], weights)
    return {r.entity_id: r for r in results}


def category_deltas(
    before: CategoryStats,
    after: CategoryStats,
    weights: Mapping[str, float] | None = None,
) -> list[CategoryDelta]:
    """Per-category change from one aggregate to another.

    Contributions are signed so positive always helps; a rise in TO is a
    negative contribution. Percentage deltas are not scaled per 40.
    """
    if weights is None:
        weights = DEFAULT_CATEGORY_WEIGHTS
    deltas = []
    for cat in CATEGORIES:
        per_game = after.value(cat) - before.value(cat)
        per_40 = per_game if cat in PCT_CATS else per_game * PACE_SCALE
        contribution = -per_game if cat in INVERSE_CATS else per_game
        deltas.append(CategoryDelta(
            category=cat,
            per_game=per_game,
            per_40=per_40,
            contribution=contribution,
            weighted_contribution=contribution * weights.get(cat, 1.0),
        ))
    return deltas


def _sum_scores(players: Sequence[Player], scores: Mapping[str, RankResult]) -> tuple[float, float]:
    cri = wcri = 0.0
    for p in players:
        if p.id not in scores:
            raise ValueError(f"No CRI score for player {p.name!r} ({p.id})")
        cri += scores[p.id].cri
        wcri += scores[p.id].wcri
    return cri, wcri


def _without(roster: list[Player], leaving: Sequence[Player]) -> list[Player]:
    ids = {p.id for p in leaving}
    return [p for p in roster if p.id not in ids]


# ── Trade evaluation ────────────────────────────────────────────────────

def fairness_label(your_net: float, threshold: float = FAIRNESS_THRESHOLD) -> str:
    if your_net > threshold:
        return YOU_WIN
    if -your_net > threshold:
        return THEY_WIN
    return EVEN


def trade_verdict(improved: list[str], hurt: list[str]) -> str:
    if improved and hurt:
        return f"This trade improves {'/'.join(improved[:3])} but hurts {'/'.join(hurt[:3])}"
    if improved:
        return f"This trade improves {'/'.join(improved[:4])}"
    if hurt:
        return f"This trade hurts {'/'.join(hurt[:4])}"
    return "This trade has minimal impact"


def build_fit(hurt: list[str], weights: Mapping[str, float]) -> str:
    """Read the categories a trade hurts against the build's weights."""
    punted = [cat for cat in hurt if weights.get(cat, 1.0) < PUNT_WEIGHT]
    if punted:
        return f"Fits punt {'/'.join(punted)} build"
    if hurt:
        return "May conflict with your build priorities"
    return "Aligns well with your category priorities"


def evaluate_trade(
    scenario: TradeScenario,
    roster: list[Player],
    scores: Mapping[str, RankResult],
    weights: Mapping[str, float] | None = None,
    weighted: bool = False,
) -> TradeResult:
    """Score a trade against the current roster.

    ``scores`` maps player id to a CRI/wCRI result from the same pool
    (see ``score_pool``); every moving player must have one. Players are
    matched by id. ``weighted`` picks wCRI rather than CRI for the
    fairness label.
    """
    if weights is None:
        weights = DEFAULT_CATEGORY_WEIGHTS

    current = team_aggregate(roster)

    trade_roster = _without(roster, scenario.giving) + list(scenario.getting)
    real_roster = list(trade_roster)
    if scenario.include_replacements:
        real_roster += scenario.replacements
    if scenario.assume_drops:
        real_roster = _without(real_roster, scenario.drops)
    trade_agg = team_aggregate(trade_roster)
    real_agg = team_aggregate(real_roster)

    give_cri, give_wcri = _sum_scores(scenario.giving, scores)
    get_cri, get_wcri = _sum_scores(scenario.getting, scores)
    net_cri = get_cri - give_cri
    net_wcri = get_wcri - give_wcri

    real_cri, real_wcri = net_cri, net_wcri
    if scenario.include_replacements:
        add_cri, add_wcri = _sum_scores(scenario.replacements, scores)
        real_cri += add_cri
        real_wcri += add_wcri
    if scenario.assume_drops:
        drop_cri, drop_wcri = _sum_scores(scenario.drops, scores)
        real_cri -= drop_cri
        real_wcri -= drop_wcri

    trade_only = TradeImpact(
        delta_cri=net_cri,
        delta_wcri=net_wcri,
        category_deltas=category_deltas(current, trade_agg, weights),
        fg_pct=trade_agg.fg_pct,
        ft_pct=trade_agg.ft_pct,
    )
    real_impact = TradeImpact(
        delta_cri=real_cri,
        delta_wcri=real_wcri,
        category_deltas=category_deltas(current, real_agg, weights),
        fg_pct=real_agg.fg_pct,
        ft_pct=real_agg.ft_pct,
    )

    return TradeResult(
        trade_only=trade_only,
        real_impact=real_impact,
        your_net_cri=net_cri,
        your_net_wcri=net_wcri,
        fairness=fairness_label(net_wcri if weighted else net_cri),
        verdict=trade_verdict(real_impact.improved, real_impact.hurt),
        fit=build_fit(real_impact.hurt, weights),
        net_players=len(scenario.getting) - len(scenario.giving),
    )


# ── Target search ───────────────────────────────────────────────────────

def find_targets(
    candidates: Sequence[Player],
    scores: Mapping[str, RankResult],
    need: str,
    avoid: str | None = None,
    weighted: bool = False,
    limit: int = 10,
) -> list[Player]:
    """Rank candidates by how much of ``need`` they bring per point of CRI.

    A candidate whose ``avoid`` percentage sits below .500 is penalised in
    proportion to the shortfall. Candidates without a score are skipped.
    """
    scored: list[tuple[float, Player]] = []
    for p in candidates:
        result = scores.get(p.id)
        if result is None:
            continue
        cost = result.wcri if weighted else result.cri
        score = p.stats.value(need) / cost if cost > 0 else 0.0
        if avoid in PCT_CATS and p.stats.value(avoid) < 0.5:
            score -= (0.5 - p.stats.value(avoid)) * 100
        scored.append((score, p))
    scored.sort(key=lambda s: s[0], reverse=True)
    return [p for _, p in scored[:limit]]
