"""Data quality checks for rosters, league schedules and effective weights.

Each check run adds a named pass/fail line to a DataQualityReport so a
caller can print a summary before trusting the projections built on the data.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from dumphoops.dynamic_weights import MAX_EFFECTIVE_WEIGHT
from dumphoops.league_schedule import LeagueSchedule, resolve_team_name
from dumphoops.roster import Player, RosterSlot, normalize_team_code

# Per-game sanity ceilings
MAX_BLOCKS = 10
MAX_STEALS = 6
MAX_POINTS = 60
MAX_MINUTES = 55


@dataclass
class DataQualityReport:
    """Summary of data quality checks."""
    checks: list[dict] = field(default_factory=list)

    def add(self, name: str, passed: bool, detail: str = ""):
        self.checks.append({"name": name, "passed": passed, "detail": detail})

    @property
    def all_passed(self) -> bool:
        return all(c["passed"] for c in self.checks)

    @property
    def summary(self) -> str:
        passed = sum(1 for c in self.checks if c["passed"])
        total = len(self.checks)
        return f"{passed}/{total} checks passed"

    @property
    def failures(self) -> list[dict]:
        return [c for c in self.checks if not c["passed"]]


def validate_player_stats(player: Player) -> str | None:
    """Return a description of the first unrealistic per-game stat, or None."""
    s = player.stats
    if s.blocks > MAX_BLOCKS:
        return f"BLK={s.blocks} is unrealistic"
    if s.steals > MAX_STEALS:
        return f"STL={s.steals} is unrealistic"
    if not 0 <= s.fg_pct <= 1:
        return f"FG%={s.fg_pct} out of range [0,1]"
    if not 0 <= s.ft_pct <= 1:
        return f"FT%={s.ft_pct} out of range [0,1]"
    if s.points > MAX_POINTS:
        return f"PTS={s.points} is unrealistic"
    if player.minutes > MAX_MINUTES:
        return f"MIN={player.minutes} is unrealistic"
    return None


def run_roster_quality(roster: list[RosterSlot]) -> DataQualityReport:
    """Run data quality checks on a fantasy roster."""
    report = DataQualityReport()
    players = [rs.player for rs in roster]

    bad_stats = []
    for p in players:
        problem = validate_player_stats(p)
        if problem:
            bad_stats.append(f"{p.name}: {problem}")
    report.add(
        "Player stats within realistic ranges",
        not bad_stats,
        "; ".join(bad_stats) if bad_stats else f"{len(players)} players checked",
    )

    active = [rs.player for rs in roster if not rs.is_reserve]
    unmapped = [p.name for p in active if normalize_team_code(p.team) is None]
    report.add(
        "Active players map to an NBA team",
        not unmapped,
        f"Unmapped: {unmapped}" if unmapped else "All mapped",
    )

    no_pos = [p.name for p in active if not p.positions]
    report.add(
        "Active players have positions",
        not no_pos,
        f"Missing positions: {no_pos}" if no_pos else "All have positions",
    )

    dupes = [pid for pid, n in Counter(p.id for p in players).items() if n > 1]
    report.add(
        "Player ids unique",
        not dupes,
        f"Duplicates: {dupes}" if dupes else f"{len(players)} unique",
    )
    return report


def run_schedule_quality(
    schedule: LeagueSchedule,
    known_teams: list[str],
    aliases: dict[str, str] | None = None,
) -> DataQualityReport:
    """Run data quality checks on an imported league schedule."""
    report = DataQualityReport()

    report.add(
        "Schedule has matchups",
        len(schedule.matchups) > 0,
        f"{len(schedule.matchups)} matchups over {len(schedule.weeks())} weeks",
    )

    unresolved = sorted(
        name for name in schedule.teams()
        if resolve_team_name(name, known_teams, aliases) is None
    )
    report.add(
        "All schedule teams resolve to known teams",
        not unresolved,
        f"Unresolved: {unresolved}" if unresolved else "All resolved",
    )

    double_booked = []
    for week in schedule.weeks():
        counts = Counter()
        for m in schedule.matchups:
            if m.week == week:
                counts[m.away_team.lower()] += 1
                counts[m.home_team.lower()] += 1
        double_booked.extend(f"week {week}: {t}" for t, n in counts.items() if n > 1)
    report.add(
        "No team plays twice in a week",
        not double_booked,
        "; ".join(double_booked) if double_booked else "OK",
    )
    return report


def validate_effective_weights(weights: dict[str, float]) -> list[str]:
    """Return errors for weights that are negative or above the maximum."""
    errors = []
    for cat, value in weights.items():
        if value < 0:
            errors.append(f"{cat}: negative weight ({value})")
        if value > MAX_EFFECTIVE_WEIGHT:
            errors.append(f"{cat}: exceeds max ({value} > {MAX_EFFECTIVE_WEIGHT})")
    return errors
