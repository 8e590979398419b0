"""Scan NBA game dates from the ESPN scoreboard into the game calendar.

Team display names are mapped to the standard 2-3 letter codes the lineup
evaluator matches roster teams against. Fetched days go through a
caller-owned ScheduleCache so repeated scans inside the TTL stay offline.
"""

import logging
import time
from datetime import date, datetime, timedelta

import requests

from dumphoops import nba_client
from dumphoops.schedule import IN_PROGRESS, Game, ScheduleCache, parse_game_status

logger = logging.getLogger(__name__)

# ESPN display name → calendar team code
TEAM_ABBR: dict[str, str] = {
    "Atlanta Hawks": "ATL",
    "Boston Celtics": "BOS",
    "Brooklyn Nets": "BKN",
    "Charlotte Hornets": "CHA",
    "Chicago Bulls": "CHI",
    "Cleveland Cavaliers": "CLE",
    "Dallas Mavericks": "DAL",
    "Denver Nuggets": "DEN",
    "Detroit Pistons": "DET",
    "Golden State Warriors": "GSW",
    "Houston Rockets": "HOU",
    "Indiana Pacers": "IND",
    "LA Clippers": "LAC",
    "Los Angeles Clippers": "LAC",
    "Los Angeles Lakers": "LAL",
    "Memphis Grizzlies": "MEM",
    "Miami Heat": "MIA",
    "Milwaukee Bucks": "MIL",
    "Minnesota Timberwolves": "MIN",
    "New Orleans Pelicans": "NOP",
    "New York Knicks": "NYK",
    "Oklahoma City Thunder": "OKC",
    "Orlando Magic": "ORL",
    "Philadelphia 76ers": "PHI",
    "Phoenix Suns": "PHX",
    "Portland Trail Blazers": "POR",
    "Sacramento Kings": "SAC",
    "San Antonio Spurs": "SAS",
    "Toronto Raptors": "TOR",
    "Utah Jazz": "UTA",
    "Washington Wizards": "WAS",
}

UNKNOWN_TEAM = "UNK"


def _team_code(competitor: dict) -> str:
    """Code for one side of a game: display name first, then ESPN's abbreviation."""
    team = competitor.get("team", {})
    name = team.get("displayName", "")
    if name in TEAM_ABBR:
        return TEAM_ABBR[name]
    return team.get("abbreviation") or UNKNOWN_TEAM


def _parse_start_time(raw: str | None) -> datetime | None:
    """Parse ESPN's "2026-01-05T00:30Z" timestamps."""
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def _status_text(event: dict) -> str:
    status_type = event.get("status", {}).get("type", {})
    if status_type.get("completed"):
        return "Final"
    detail = status_type.get("shortDetail", "")
    # ESPN marks live games with state "in"; keep its detail when it already reads as live
    if status_type.get("state") == "in" and parse_game_status(detail) != IN_PROGRESS:
        return "In Progress"
    return detail


def parse_event(event: dict) -> Game | None:
    """Convert one scoreboard event into a Game, or None if it has no two sides."""
    competitions = event.get("competitions", [])
    if not competitions:
        return None
    home = away = None
    for c in competitions[0].get("competitors", []):
        if c.get("homeAway") == "home":
            home = c
        elif c.get("homeAway") == "away":
            away = c
    if home is None or away is None:
        return None

    return Game(
        home_team=_team_code(home),
        away_team=_team_code(away),
        status=_status_text(event),
        start_time=_parse_start_time(event.get("date")),
        game_id=str(event.get("id", "")),
    )


def fetch_games(d: date) -> list[Game]:
    """Fetch and parse every game on a date. Network errors propagate."""
    data = nba_client.get_scoreboard(d)
    games = []
    for event in data.get("events", []):
        game = parse_event(event)
        if game is not None:
            games.append(game)
    return games


def scan_date(d: date, cache: ScheduleCache | None = None) -> list[Game]:
    """Games for one date, served from cache when fresh.

    A failed fetch is logged and returns no games without caching, so the
    next scan retries the date.
    """
    if cache is not None:
        cached = cache.get(d)
        if cached is not None:
            return cached
    try:
        games = fetch_games(d)
    except requests.RequestException as exc:
        logger.warning("Scoreboard fetch failed for %s: %s", d, exc)
        return []
    if cache is not None:
        cache.put(d, games)
    return games


def scan_dates(
    dates: list[date],
    cache: ScheduleCache | None = None,
    delay: float = 0.3,
) -> dict[date, list[Game]]:
    """Build the game calendar for a list of dates.

    Sleeps ``delay`` seconds between network fetches (not cache hits).
    """
    calendar: dict[date, list[Game]] = {}
    for d in dates:
        fetched = cache is None or d not in cache
        calendar[d] = scan_date(d, cache)
        if fetched and delay:
            time.sleep(delay)
    return calendar


def games_per_team(calendar: dict[date, list[Game]]) -> dict[str, int]:
    """Count game days per team code across the calendar."""
    counts: dict[str, int] = {}
    for games in calendar.values():
        for g in games:
            for team in (g.home_team, g.away_team):
                counts[team] = counts.get(team, 0) + 1
    return dict(sorted(counts.items()))


if __name__ == "__main__":
    today = date.today()
    monday = today - timedelta(days=today.weekday())
    week = [monday + timedelta(days=i) for i in range(7)]

    print(f"Scanning NBA games {week[0]} to {week[-1]}...")
    calendar = scan_dates(week, ScheduleCache())
    for d, games in calendar.items():
        print(f"\n  {d:%a %b %d}: {len(games)} games")
        for g in games:
            print(f"    {g.away_team} @ {g.home_team}  {g.status}")

    print("\n=== Games per team ===")
    for team, count in games_per_team(calendar).items():
        print(f"  {team}: {count}")
