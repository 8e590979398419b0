"""Head-to-head forecasting: linear projection, category comparison, matchup outlook.

Every projection here is a per-unit baseline multiplied by a number of units
(starts, games, or a fixed simulation scale). There is no randomness.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from dumphoops.categories import (
    CATEGORIES,
    DEFAULT_CATEGORY_WEIGHTS,
    INVERSE_CATS,
    PCT_CATS,
    CategoryStats,
    add_totals,
)
from dumphoops.league_schedule import LeagueSchedule, LeagueTeam, resolve_team_name
from dumphoops.results import (
    OPP_ROSTER_MISSING,
    SCHEDULE_MAPPING_FAILED,
    TEAM_STATS_MISSING,
    Unavailable,
)
from dumphoops.roster import RosterSlot, compute_baseline_stats

logger = logging.getLogger(__name__)

PCT_TOSSUP_THRESHOLD = 0.015
COUNTING_TOSSUP_THRESHOLD = 5.0
PACE_SCALE = 40
SWING_CATEGORY_COUNT = 3

# Winners
MINE = "mine"
OPPONENT = "opponent"
TIE = "tie"


@dataclass(frozen=True)
class ForecastSettings:
    """Knobs shared by matchup, standings and bracket forecasts."""
    use_composite_index: bool = True
    simulation_scale_units: float = 40
    include_completed_weeks: bool = False
    start_from_current_records: bool = True
    completed_weeks: tuple[int, ...] = ()
    current_week_cutoff: int = 0
    pct_threshold: float = PCT_TOSSUP_THRESHOLD
    counting_threshold: float = COUNTING_TOSSUP_THRESHOLD
    category_weights: Mapping[str, float] | None = None

    def is_relevant_week(self, week: int) -> bool:
        """Whether a schedule week still needs forecasting."""
        if self.include_completed_weeks:
            return True
        return week > self.current_week_cutoff and week not in self.completed_weeks


@dataclass(frozen=True)
class CategoryResult:
    category: str
    my_value: float
    opp_value: float
    winner: str  # MINE, OPPONENT or TIE (toss-up)
    margin: float
    margin_pct: float


@dataclass
class MatchupPrediction:
    """Projected result of one head-to-head week."""
    my_projected: CategoryStats
    opp_projected: CategoryStats
    results: list[CategoryResult]
    week: int = 0
    date_range: str = ""
    opponent: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    swing_categories: list[str] = field(default_factory=list)
    edge: float = 0.0
    confidence: str = "low"

    @property
    def outcome(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"

    @property
    def won(self) -> bool:
        return self.wins > self.losses

    @property
    def result(self) -> str:
        if self.wins > self.losses:
            return "win"
        if self.losses > self.wins:
            return "loss"
        return "tie"


# ── Projection ──────────────────────────────────────────────────────────

def project_stats(baseline: CategoryStats, units: float) -> CategoryStats:
    """Scale a per-unit line by units; FG% and FT% pass through."""
    return baseline.scaled(units)


def project_final_totals(
    current: CategoryStats,
    baseline: CategoryStats,
    remaining_units: float,
) -> CategoryStats:
    """Current totals plus the projected rest of the week."""
    return add_totals(current, project_stats(baseline, remaining_units))


def pace_stats(
    current: CategoryStats,
    starts_so_far: int,
    scale: float = PACE_SCALE,
) -> CategoryStats | None:
    """Current totals normalised to a per-`scale`-starts pace.

    Returns None before the first start.
    """
    if starts_so_far <= 0:
        return None
    return current.scaled(scale / starts_so_far)


# ── Comparison ──────────────────────────────────────────────────────────

def compare_category(
    cat: str,
    my_val: float,
    opp_val: float,
    pct_threshold: float = PCT_TOSSUP_THRESHOLD,
    counting_threshold: float = COUNTING_TOSSUP_THRESHOLD,
) -> CategoryResult:
    """Classify one category. A gap at or under the threshold is a toss-up."""
    threshold = pct_threshold if cat in PCT_CATS else counting_threshold
    margin = abs(my_val - opp_val)
    if margin <= threshold:
        winner = TIE
    elif cat in INVERSE_CATS:
        winner = MINE if my_val < opp_val else OPPONENT
    else:
        winner = MINE if my_val > opp_val else OPPONENT

    avg = (my_val + opp_val) / 2
    margin_pct = margin / avg if avg > 0 else 0.0
    return CategoryResult(
        category=cat,
        my_value=my_val,
        opp_value=opp_val,
        winner=winner,
        margin=margin,
        margin_pct=margin_pct,
    )


def compare_categories(
    mine: CategoryStats,
    opp: CategoryStats,
    pct_threshold: float = PCT_TOSSUP_THRESHOLD,
    counting_threshold: float = COUNTING_TOSSUP_THRESHOLD,
) -> list[CategoryResult]:
    """All nine categories, in category order."""
    return [
        compare_category(cat, mine.value(cat), opp.value(cat), pct_threshold, counting_threshold)
        for cat in CATEGORIES
    ]


def swing_categories(results: list[CategoryResult], limit: int = SWING_CATEGORY_COUNT) -> list[str]:
    """Categories most likely to flip: toss-ups first, then the narrowest decided ones."""
    tossups = [r.category for r in results if r.winner == TIE]
    decided = sorted((r for r in results if r.winner != TIE), key=lambda r: r.margin_pct)
    swing = tossups + [r.category for r in decided]
    return swing[:max(limit, len(tossups))]


def _confidence(wins: int, losses: int) -> str:
    gap = abs(wins - losses)
    if gap >= 3:
        return "high"
    if gap >= 1:
        return "medium"
    return "low"


def _edge(results: list[CategoryResult], weights: Mapping[str, float] | None) -> float:
    """Signed sum of category margins in percentage points, optionally weighted."""
    edge = 0.0
    for r in results:
        w = weights.get(r.category, 1.0) if weights else 1.0
        if r.winner == MINE:
            edge += r.margin_pct * w
        elif r.winner == OPPONENT:
            edge -= r.margin_pct * w
    return edge * 100


def evaluate_matchup(
    my_projected: CategoryStats,
    opp_projected: CategoryStats,
    settings: ForecastSettings | None = None,
    week: int = 0,
    date_range: str = "",
    opponent: str = "",
) -> MatchupPrediction:
    """Compare two already-projected lines and summarise the outlook.

    With ``use_composite_index`` off the edge score weights each category
    by the wCRI weights.
    """
    settings = settings or ForecastSettings()
    results = compare_categories(
        my_projected, opp_projected, settings.pct_threshold, settings.counting_threshold
    )
    wins = sum(1 for r in results if r.winner == MINE)
    losses = sum(1 for r in results if r.winner == OPPONENT)
    ties = len(results) - wins - losses

    weights = None
    if not settings.use_composite_index:
        weights = settings.category_weights or DEFAULT_CATEGORY_WEIGHTS

    return MatchupPrediction(
        my_projected=my_projected,
        opp_projected=opp_projected,
        results=results,
        week=week,
        date_range=date_range,
        opponent=opponent,
        wins=wins,
        losses=losses,
        ties=ties,
        swing_categories=swing_categories(results),
        edge=_edge(results, weights),
        confidence=_confidence(wins, losses),
    )


def predict_matchup(
    my_stats: CategoryStats,
    opp_stats: CategoryStats,
    settings: ForecastSettings | None = None,
    week: int = 0,
    date_range: str = "",
    opponent: str = "",
) -> MatchupPrediction:
    """Project both per-unit lines by the simulation scale, then compare."""
    settings = settings or ForecastSettings()
    units = settings.simulation_scale_units
    return evaluate_matchup(
        project_stats(my_stats, units),
        project_stats(opp_stats, units),
        settings,
        week=week,
        date_range=date_range,
        opponent=opponent,
    )


# ── Current-week matchup model ──────────────────────────────────────────

def project_current_matchup(
    my_roster: list[RosterSlot],
    opp_roster: list[RosterSlot],
    my_current: CategoryStats,
    opp_current: CategoryStats,
    my_remaining_starts: float,
    opp_remaining_starts: float,
    settings: ForecastSettings | None = None,
    opponent: str = "",
) -> MatchupPrediction | Unavailable:
    """Final-week outlook: current totals plus each roster's remaining starts.

    Remaining starts usually come from the weekly cap allocation. Without an
    opponent roster there is nothing to project, so the result is
    unavailable.
    """
    if not opp_roster:
        return Unavailable(OPP_ROSTER_MISSING, "Opponent roster not loaded")
    my_baseline = compute_baseline_stats(my_roster)
    opp_baseline = compute_baseline_stats(opp_roster)
    if opp_baseline is None:
        return Unavailable(OPP_ROSTER_MISSING, "Opponent roster has no active players")
    if my_baseline is None:
        return Unavailable(TEAM_STATS_MISSING, "Roster has no active players")

    return evaluate_matchup(
        project_final_totals(my_current, my_baseline, my_remaining_starts),
        project_final_totals(opp_current, opp_baseline, opp_remaining_starts),
        settings,
        opponent=opponent,
    )


# ── Season schedule ─────────────────────────────────────────────────────

def find_team(
    name: str,
    teams: list[LeagueTeam],
    aliases: dict[str, str] | None = None,
) -> LeagueTeam | None:
    """Look a team up by name: case-insensitive, then alias, then fuzzy."""
    resolved = resolve_team_name(name, [t.name for t in teams], aliases)
    if resolved is None:
        return None
    return next(t for t in teams if t.name == resolved)


def forecast_team_matchups(
    schedule: LeagueSchedule,
    focus_team: str,
    teams: list[LeagueTeam],
    settings: ForecastSettings | None = None,
    aliases: dict[str, str] | None = None,
) -> list[MatchupPrediction | Unavailable]:
    """Predict every relevant scheduled week for one team, in week order.

    Both sides of each scheduled matchup are resolved against the known
    teams, so schedule spellings that differ from the team list still
    count. Weeks whose opponent can't be matched to a known team are
    returned as unavailable entries in their place.
    """
    settings = settings or ForecastSettings()
    focus = find_team(focus_team, teams, aliases)
    if focus is None:
        return [Unavailable(SCHEDULE_MAPPING_FAILED, f"Unknown team {focus_team!r}")]

    predictions: list[MatchupPrediction | Unavailable] = []
    for m in sorted(schedule.matchups, key=lambda m: m.week):
        if not settings.is_relevant_week(m.week):
            continue
        away = find_team(m.away_team, teams, aliases)
        home = find_team(m.home_team, teams, aliases)
        if away is focus:
            opp_name, opp = m.home_team, home
        elif home is focus:
            opp_name, opp = m.away_team, away
        else:
            continue
        if opp is None:
            logger.warning("Week %d: no stats for opponent %r", m.week, opp_name)
            predictions.append(Unavailable(
                SCHEDULE_MAPPING_FAILED, f"Week {m.week}: unknown opponent {opp_name!r}"
            ))
            continue
        predictions.append(predict_matchup(
            focus.stats, opp.stats, settings,
            week=m.week, date_range=m.date_range_text, opponent=opp.name,
        ))
    if not predictions:
        logger.warning("No scheduled matchups found for %s", focus.name)
    return predictions
