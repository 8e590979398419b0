"""Fantasy league schedule: matchups, team records, name resolution, week dates."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from dumphoops.categories import CategoryStats

logger = logging.getLogger(__name__)

MONTH_INDEX = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_FUZZY_MIN_LENGTH = 4


@dataclass(frozen=True)
class ScheduleMatchup:
    """One head-to-head pairing in a matchup week."""
    week: int
    date_range_text: str
    away_team: str
    home_team: str

    def involves(self, team: str) -> bool:
        t = team.lower()
        return self.away_team.lower() == t or self.home_team.lower() == t

    def opponent_of(self, team: str) -> str:
        return self.home_team if self.away_team.lower() == team.lower() else self.away_team


@dataclass
class LeagueSchedule:
    season: str
    matchups: list[ScheduleMatchup] = field(default_factory=list)

    @property
    def season_year(self) -> int:
        """Calendar year the season ends in ("2025-26" → 2026)."""
        m = re.match(r"(\d{4})(?:\s*-\s*(\d{2,4}))?", self.season or "")
        if not m:
            return date.today().year
        if m.group(2):
            end = m.group(2)
            return int(end) if len(end) == 4 else int(m.group(1)[:2] + end)
        return int(m.group(1))

    def teams(self) -> list[str]:
        names: set[str] = set()
        for m in self.matchups:
            names.add(m.away_team)
            names.add(m.home_team)
        return sorted(names)

    def team_matchups(self, team: str) -> list[ScheduleMatchup]:
        return sorted((m for m in self.matchups if m.involves(team)), key=lambda m: m.week)

    def weeks(self) -> list[int]:
        return sorted({m.week for m in self.matchups})


@dataclass(frozen=True)
class LeagueTeam:
    """A fantasy team with its season stat line and current W-L-T record."""
    name: str
    stats: CategoryStats
    record: str = "0-0-0"
    manager: str = ""


def parse_record(record: str | None) -> tuple[int, int, int]:
    """Parse "W-L-T" (or "W-L") into a tuple; anything unreadable is 0-0-0."""
    if not record:
        return 0, 0, 0
    m = re.search(r"(\d+)\s*-\s*(\d+)(?:\s*-\s*(\d+))?", record)
    if not m:
        return 0, 0, 0
    return int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)


# ── Team name resolution ────────────────────────────────────────────────

def normalize_name(name: str) -> str:
    """Lowercase, unify curly quotes, turn anything non-alphanumeric into spaces."""
    if not name:
        return ""
    n = name.lower().strip()
    n = re.sub(r"[‘’‛❛❜]", "'", n)
    n = re.sub(r"[“”]", '"', n)
    n = re.sub(r"[^a-z0-9]+", " ", n)
    return re.sub(r"\s+", " ", n).strip()


def fuzzy_name_match(a: str, b: str) -> bool:
    """Equal after normalisation, or one contains the other (4+ chars each)."""
    na, nb = normalize_name(a), normalize_name(b)
    if not na or not nb:
        return False
    if na == nb:
        return True
    if len(na) < _FUZZY_MIN_LENGTH or len(nb) < _FUZZY_MIN_LENGTH:
        return False
    return na in nb or nb in na


def resolve_team_name(
    name: str,
    known_names: list[str],
    aliases: dict[str, str] | None = None,
) -> str | None:
    """Find which known team a schedule name refers to.

    Priority: exact (normalised) match, then a manual alias, then fuzzy
    containment. Returns None when nothing matches.
    """
    key = normalize_name(name)
    by_key = {normalize_name(k): k for k in known_names}
    if key in by_key:
        return by_key[key]

    if aliases:
        for alias, target in aliases.items():
            if normalize_name(alias) == key:
                resolved = by_key.get(normalize_name(target))
                if resolved is not None:
                    return resolved

    for known in known_names:
        if fuzzy_name_match(name, known):
            return known
    return None


def resolve_schedule(
    schedule: LeagueSchedule,
    known_names: list[str],
    aliases: dict[str, str] | None = None,
) -> tuple[LeagueSchedule, list[str]]:
    """Rewrite schedule team names to known team names.

    Returns (resolved schedule, unresolved names). Matchups with an
    unresolved side keep the original text for that side.
    """
    cache: dict[str, str | None] = {}
    unresolved: list[str] = []

    def resolve(raw: str) -> str:
        if raw not in cache:
            cache[raw] = resolve_team_name(raw, known_names, aliases)
            if cache[raw] is None:
                unresolved.append(raw)
                logger.warning("Could not resolve schedule team %r", raw)
        return cache[raw] or raw

    matchups = [
        replace(m, away_team=resolve(m.away_team), home_team=resolve(m.home_team))
        for m in schedule.matchups
    ]
    return LeagueSchedule(season=schedule.season, matchups=matchups), unresolved


# ── Matchup week dates ──────────────────────────────────────────────────

def parse_date_range_text(text: str, season_year: int) -> tuple[date, date] | None:
    """Parse "Feb 9 - 22" or "Dec 29 - Jan 4" into (start, end).

    Seasons span the new year: October through December fall in
    season_year - 1.
    """
    m = re.match(r"^\s*(\w{3})\w*\s+(\d{1,2})\s*-\s*(?:(\w{3})\w*\s+)?(\d{1,2})", text or "")
    if not m:
        return None
    start_month = MONTH_INDEX.get(m.group(1).lower())
    end_month = MONTH_INDEX.get(m.group(3).lower()) if m.group(3) else start_month
    if start_month is None or end_month is None:
        return None

    start_year = season_year - 1 if start_month >= 10 else season_year
    end_year = season_year - 1 if end_month >= 10 else season_year
    try:
        return (
            date(start_year, start_month, int(m.group(2))),
            date(end_year, end_month, int(m.group(4))),
        )
    except ValueError:
        return None


@dataclass(frozen=True)
class MatchupWeek:
    week: int
    start: date
    end: date
    date_range_text: str

    def dates(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range((self.end - self.start).days + 1)]


def matchup_weeks(schedule: LeagueSchedule) -> list[MatchupWeek]:
    """One entry per week whose date range parses, in week order."""
    year = schedule.season_year
    seen: set[int] = set()
    weeks: list[MatchupWeek] = []
    for m in schedule.matchups:
        if m.week in seen:
            continue
        seen.add(m.week)
        parsed = parse_date_range_text(m.date_range_text, year)
        if parsed is None:
            continue
        weeks.append(MatchupWeek(m.week, parsed[0], parsed[1], m.date_range_text))
    return sorted(weeks, key=lambda w: w.week)


def current_matchup_week(schedule: LeagueSchedule, today: date) -> MatchupWeek | None:
    """The week containing today, else the next upcoming week, else the last week."""
    weeks = matchup_weeks(schedule)
    if not weeks:
        return None
    for w in weeks:
        if w.start <= today <= w.end:
            return w
    for w in weeks:
        if w.start > today:
            return w
    return weeks[-1]


def matchup_week_dates(schedule: LeagueSchedule | None, today: date) -> list[date]:
    """Dates of the current matchup week; Monday-Sunday when no schedule applies.

    Schedule-based weeks may be longer than seven days (All-Star break).
    """
    if schedule is not None:
        week = current_matchup_week(schedule, today)
        if week is not None:
            return week.dates()
    monday = today - timedelta(days=today.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def completed_weeks(schedule: LeagueSchedule, today: date) -> list[int]:
    """Weeks whose date range ended before today."""
    return [w.week for w in matchup_weeks(schedule) if w.end < today]
