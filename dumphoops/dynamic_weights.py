"""Need-based adjustment of wCRI category weights.

effective weight = base weight × need multiplier

Matchup mode derives the multiplier from how safe each category's projected
margin is; standings mode derives it from the team's league rank in the
category. Multipliers can be smoothed against the previous run with an EMA.
The previous multipliers live in a ``SmoothingState`` the caller keeps and
passes back in; this module stores nothing between calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from dumphoops.categories import (
    CATEGORIES,
    DEFAULT_CATEGORY_WEIGHTS,
    INVERSE_CATS,
    PCT_CATS,
    CategoryStats,
)
from dumphoops.results import CONTEXT_MISSING, Unavailable

MATCHUP = "matchup"
STANDINGS = "standings"

# Margin bands
LOCKED = "locked"
SAFE = "safe"
TOSSUP = "tossup"
CLOSE = "close"
LOSING = "losing"

# Standings opportunity levels
PUNT = "punt"
OPPORTUNITY = "opportunity"
HIGH_OPPORTUNITY = "high-opportunity"

COUNTING_THRESHOLDS = {LOCKED: 30.0, SAFE: 15.0, TOSSUP: 8.0, LOSING: -15.0}
PERCENTAGE_THRESHOLDS = {LOCKED: 0.040, SAFE: 0.020, TOSSUP: 0.012, LOSING: -0.020}

MULTIPLIER_BANDS: dict[str, tuple[float, float]] = {
    LOCKED: (0.25, 0.50),
    SAFE: (0.60, 0.90),
    TOSSUP: (1.00, 1.10),
    CLOSE: (1.15, 1.30),
    LOSING: (1.30, 1.50),
}

OPPORTUNITY_MULTIPLIERS: dict[str, float] = {
    HIGH_OPPORTUNITY: 1.35,
    OPPORTUNITY: 1.20,
    SAFE: 0.90,
    LOCKED: 0.70,
    PUNT: 0.60,
}

TO_CLAMP = (0.50, 1.20)
GENERAL_CLAMP = (0.25, 1.50)
SMOOTHING_ALPHA = 0.7
INTENSITY_EXPONENTS = {"low": 0.5, "medium": 1.0, "high": 1.25}

# Base max × clamp max
MAX_EFFECTIVE_WEIGHT = 1.5 * 1.5


@dataclass(frozen=True)
class SmoothingState:
    """Multipliers from the previous run, keyed by category."""
    multipliers: dict[str, float] = field(default_factory=dict)
    last_updated: datetime | None = None


@dataclass(frozen=True)
class CategoryMargin:
    """Projected margin in one category; positive is good, TO included."""
    category: str
    margin: float
    band: str
    projected_mine: float
    projected_opp: float


@dataclass(frozen=True)
class CategoryStanding:
    category: str
    rank: int
    total_teams: int
    gap: float
    opportunity: str


@dataclass
class MatchupContext:
    margins: list[CategoryMargin]
    days_remaining: int = 7


@dataclass
class StandingsContext:
    ranks: list[CategoryStanding]
    allow_punt: bool = True


@dataclass(frozen=True)
class WeightDetail:
    base_weight: float
    need_multiplier: float
    effective_weight: float
    reason: str


@dataclass
class EffectiveWeights:
    """Adjusted weights plus the smoothing state to keep for next time."""
    weights: dict[str, float]
    details: dict[str, WeightDetail] = field(default_factory=dict)
    mode: str = MATCHUP
    smoothing_state: SmoothingState = field(default_factory=SmoothingState)
    unavailable: Unavailable | None = None

    @property
    def is_active(self) -> bool:
        return self.unavailable is None


# ── Band math ───────────────────────────────────────────────────────────

def confidence_band(margin: float, is_pct: bool) -> str:
    """Classify a margin (positive = ahead) into a confidence band."""
    t = PERCENTAGE_THRESHOLDS if is_pct else COUNTING_THRESHOLDS
    if margin >= t[LOCKED]:
        return LOCKED
    if margin >= t[SAFE]:
        return SAFE
    if -t[TOSSUP] <= margin <= t[TOSSUP]:
        return TOSSUP
    if margin >= t[LOSING]:
        return CLOSE
    return LOSING


def band_multiplier(band: str, margin: float, is_pct: bool) -> float:
    """Interpolate a multiplier inside the band's range by where the margin sits."""
    t = PERCENTAGE_THRESHOLDS if is_pct else COUNTING_THRESHOLDS
    lo, hi = MULTIPLIER_BANDS[band]
    if band == LOCKED:
        pos = (margin - t[LOCKED]) / (t[LOCKED] * 0.5)
    elif band == SAFE:
        pos = (margin - t[SAFE]) / (t[LOCKED] - t[SAFE])
    elif band == TOSSUP:
        pos = 0.5 + margin / (t[TOSSUP] * 2)
    elif band == CLOSE:
        pos = 1 - abs(margin) / abs(t[LOSING])
    else:
        pos = abs(margin - t[LOSING]) / abs(t[LOSING])
    pos = max(0.0, min(1.0, pos))
    return lo + pos * (hi - lo)


def apply_intensity(multiplier: float, intensity: str) -> float:
    """Stretch (high) or compress (low) a multiplier's distance from 1.0."""
    exp = INTENSITY_EXPONENTS[intensity]
    if multiplier >= 1:
        return 1 + (multiplier - 1) ** exp
    return 1 - (1 - multiplier) ** exp


def clamp_multiplier(multiplier: float, cat: str) -> float:
    lo, hi = TO_CLAMP if cat in INVERSE_CATS else GENERAL_CLAMP
    return max(lo, min(hi, multiplier))


def _smooth(current: float, previous: float | None) -> float:
    if previous is None:
        return current
    return SMOOTHING_ALPHA * previous + (1 - SMOOTHING_ALPHA) * current


# ── Context builders ────────────────────────────────────────────────────

def build_matchup_context(
    my_projected: CategoryStats,
    opp_projected: CategoryStats,
    days_remaining: int = 7,
) -> MatchupContext:
    """Margins per category from two projected final lines. TO is flipped."""
    margins = []
    for cat in CATEGORIES:
        mine = my_projected.value(cat)
        opp = opp_projected.value(cat)
        margin = opp - mine if cat in INVERSE_CATS else mine - opp
        margins.append(CategoryMargin(
            category=cat,
            margin=margin,
            band=confidence_band(margin, cat in PCT_CATS),
            projected_mine=mine,
            projected_opp=opp,
        ))
    return MatchupContext(margins=margins, days_remaining=days_remaining)


def opportunity_for_rank(rank: int, total: int, gap: float, allow_punt: bool = True) -> str:
    """Map a league rank to an opportunity level.

    Thresholds are relative so they scale with league size (top 2 of 12,
    top 4 of 12, and so on).
    """
    relative = rank / total
    if relative <= 0.17:
        return LOCKED if abs(gap) > 5 else SAFE
    if relative <= 0.33:
        return SAFE
    if relative <= 0.67:
        return HIGH_OPPORTUNITY if abs(gap) < 3 else OPPORTUNITY
    return PUNT if allow_punt else OPPORTUNITY


def build_standings_context(
    category_ranks: Mapping[str, tuple[int, int, float]],
    allow_punt: bool = True,
) -> StandingsContext:
    """category_ranks maps category → (rank, total teams, gap to next team).

    Categories without data default to mid-table in a 12-team league.
    """
    ranks = []
    for cat in CATEGORIES:
        rank, total, gap = category_ranks.get(cat, (6, 12, 0.0))
        ranks.append(CategoryStanding(
            category=cat,
            rank=rank,
            total_teams=total,
            gap=gap,
            opportunity=opportunity_for_rank(rank, total, gap, allow_punt),
        ))
    return StandingsContext(ranks=ranks, allow_punt=allow_punt)


# ── Effective weights ───────────────────────────────────────────────────

def _raw_multipliers(context: MatchupContext | StandingsContext) -> dict[str, tuple[float, str]]:
    raw: dict[str, tuple[float, str]] = {}
    if isinstance(context, MatchupContext):
        for m in context.margins:
            value = band_multiplier(m.band, m.margin, m.category in PCT_CATS)
            raw[m.category] = (value, f"{m.band.capitalize()} ({context.days_remaining} days left)")
    else:
        for r in context.ranks:
            if r.opportunity == PUNT and not context.allow_punt:
                value = 1.0
            else:
                value = OPPORTUNITY_MULTIPLIERS.get(r.opportunity, 1.0)
            raw[r.category] = (value, r.opportunity.replace("-", " ").capitalize())
    return raw


def effective_weights(
    context: MatchupContext | StandingsContext | None,
    base_weights: Mapping[str, float] | None = None,
    intensity: str = "medium",
    smoothing: bool = True,
    previous: SmoothingState | None = None,
    now: datetime | None = None,
) -> EffectiveWeights:
    """Scale base weights by each category's need multiplier.

    Without a context the base weights come back unchanged, tagged
    unavailable, and the previous smoothing state is returned as-is.
    """
    if base_weights is None:
        base_weights = DEFAULT_CATEGORY_WEIGHTS
    if intensity not in INTENSITY_EXPONENTS:
        raise ValueError(f"Unknown intensity: {intensity!r}")
    previous = previous or SmoothingState()
    mode = STANDINGS if isinstance(context, StandingsContext) else MATCHUP

    if context is None:
        return EffectiveWeights(
            weights=dict(base_weights),
            mode=mode,
            smoothing_state=previous,
            unavailable=Unavailable(CONTEXT_MISSING, "Required context data not available"),
        )

    weights: dict[str, float] = {}
    details: dict[str, WeightDetail] = {}
    multipliers: dict[str, float] = {}
    raw = _raw_multipliers(context)

    for cat, base in base_weights.items():
        if cat not in raw:
            weights[cat] = base
            continue
        value, reason = raw[cat]
        value = apply_intensity(value, intensity)
        if smoothing:
            value = _smooth(value, previous.multipliers.get(cat))
        need = clamp_multiplier(value, cat)
        multipliers[cat] = need
        weights[cat] = base * need
        details[cat] = WeightDetail(
            base_weight=base,
            need_multiplier=need,
            effective_weight=base * need,
            reason=reason,
        )

    state = SmoothingState(
        multipliers=multipliers,
        last_updated=now or datetime.now(timezone.utc),
    )
    return EffectiveWeights(weights=weights, details=details, mode=mode, smoothing_state=state)
