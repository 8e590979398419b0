"""Season standings projection from the remaining league schedule."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dumphoops.forecast import ForecastSettings, MINE, OPPONENT, find_team, predict_matchup
from dumphoops.league_schedule import LeagueSchedule, LeagueTeam, parse_record
from dumphoops.results import SCHEDULE_MAPPING_FAILED, Unavailable

logger = logging.getLogger(__name__)


@dataclass
class TeamStanding:
    """Current plus projected record for one team."""
    team_name: str
    current_wins: int = 0
    current_losses: int = 0
    current_ties: int = 0
    projected_wins: int = 0
    projected_losses: int = 0
    projected_ties: int = 0
    category_wins: int = 0
    category_losses: int = 0
    category_ties: int = 0
    projected_rank: int = 0

    @property
    def total_wins(self) -> int:
        return self.current_wins + self.projected_wins

    @property
    def total_losses(self) -> int:
        return self.current_losses + self.projected_losses

    @property
    def total_ties(self) -> int:
        return self.current_ties + self.projected_ties

    @property
    def category_win_pct(self) -> float:
        total = self.category_wins + self.category_losses + self.category_ties
        if total == 0:
            return 0.0
        return self.category_wins / total

    @property
    def record_str(self) -> str:
        return f"{self.total_wins}-{self.total_losses}-{self.total_ties}"


@dataclass
class StandingsProjection:
    standings: list[TeamStanding] = field(default_factory=list)
    skipped: list[Unavailable] = field(default_factory=list)

    def for_team(self, name: str) -> TeamStanding | None:
        for s in self.standings:
            if s.team_name.lower() == name.lower():
                return s
        return None


def project_final_standings(
    schedule: LeagueSchedule,
    teams: list[LeagueTeam],
    settings: ForecastSettings | None = None,
    aliases: dict[str, str] | None = None,
) -> StandingsProjection:
    """Play out every remaining scheduled matchup and rank the league.

    Each matchup counts one W/L/T for both sides, decided by category wins
    after projecting each team's stats by the simulation scale. Category
    toss-ups accumulate as category ties. Teams are ordered by total wins,
    then category win percentage; equal teams keep their input order.
    """
    settings = settings or ForecastSettings()
    by_name: dict[str, TeamStanding] = {}
    for t in teams:
        standing = TeamStanding(team_name=t.name)
        if settings.start_from_current_records:
            w, l, tie = parse_record(t.record)
            standing.current_wins = w
            standing.current_losses = l
            standing.current_ties = tie
        by_name[t.name] = standing

    projection = StandingsProjection()

    for m in schedule.matchups:
        if not settings.is_relevant_week(m.week):
            continue
        away = find_team(m.away_team, teams, aliases)
        home = find_team(m.home_team, teams, aliases)
        if away is None or home is None:
            missing = m.away_team if away is None else m.home_team
            logger.warning("Week %d: skipping matchup, unknown team %r", m.week, missing)
            projection.skipped.append(Unavailable(
                SCHEDULE_MAPPING_FAILED, f"Week {m.week}: unknown team {missing!r}"
            ))
            continue

        pred = predict_matchup(away.stats, home.stats, settings, week=m.week, opponent=home.name)
        a, h = by_name[away.name], by_name[home.name]

        if pred.wins > pred.losses:
            a.projected_wins += 1
            h.projected_losses += 1
        elif pred.losses > pred.wins:
            a.projected_losses += 1
            h.projected_wins += 1
        else:
            a.projected_ties += 1
            h.projected_ties += 1

        for r in pred.results:
            if r.winner == MINE:
                a.category_wins += 1
                h.category_losses += 1
            elif r.winner == OPPONENT:
                a.category_losses += 1
                h.category_wins += 1
            else:
                a.category_ties += 1
                h.category_ties += 1

    ordered = sorted(
        by_name.values(),
        key=lambda s: (-s.total_wins, -s.category_win_pct),
    )
    for rank, s in enumerate(ordered, 1):
        s.projected_rank = rank
    projection.standings = ordered
    return projection
