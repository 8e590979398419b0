"""NBA game calendar types, game status parsing, and a TTL cache for fetched days."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

# Game states
NOT_STARTED = "NOT_STARTED"
IN_PROGRESS = "IN_PROGRESS"
FINAL = "FINAL"

_LIVE_MARKERS = ("qtr", "halftime", "1st", "2nd", "3rd", "4th", "ot", "overtime", "in progress")

DEFAULT_CACHE_TTL_SECONDS = 300.0


def parse_game_status(status: str | None) -> str:
    """Classify a free-text game status as NOT_STARTED, IN_PROGRESS or FINAL."""
    s = (status or "").strip().lower()
    if not s:
        return NOT_STARTED
    if "final" in s:
        return FINAL
    # "ot" and "1st" must be whole tokens so "7:30 PM" or "Scheduled" never match
    tokens = set(s.replace("-", " ").replace("/", " ").split())
    for marker in _LIVE_MARKERS:
        if " " in marker:
            if marker in s:
                return IN_PROGRESS
        elif marker in tokens:
            return IN_PROGRESS
    return NOT_STARTED


@dataclass(frozen=True)
class Game:
    """One scheduled NBA game between two team codes."""
    home_team: str
    away_team: str
    status: str = ""
    start_time: datetime | None = None
    game_id: str = ""

    @property
    def state(self) -> str:
        return parse_game_status(self.status)

    def involves(self, team_code: str) -> bool:
        return team_code in (self.home_team, self.away_team)


GamesByDate = Mapping[date, list[Game]]


def teams_playing(games: list[Game]) -> set[str]:
    """Every team code that appears on either side of a game."""
    codes: set[str] = set()
    for g in games:
        codes.add(g.home_team)
        codes.add(g.away_team)
    return codes


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class SlateStatus:
    """Progress of a single day's slate of games."""
    total: int = 0
    not_started: int = 0
    in_progress: int = 0
    final: int = 0
    earliest_start: datetime | None = None

    @property
    def has_begun(self) -> bool:
        return self.in_progress > 0 or self.final > 0


def build_slate_status(games: list[Game]) -> SlateStatus:
    slate = SlateStatus(total=len(games))
    for g in games:
        state = g.state
        if state == FINAL:
            slate.final += 1
        elif state == IN_PROGRESS:
            slate.in_progress += 1
        else:
            slate.not_started += 1
        if g.start_time is not None:
            start = _as_utc(g.start_time)
            if slate.earliest_start is None or start < slate.earliest_start:
                slate.earliest_start = start
    return slate


def today_has_begun(games: list[Game], now: datetime | None = None) -> bool:
    """True once any game today is live or final, or the first tip-off has passed.

    Naive datetimes are treated as UTC.
    """
    slate = build_slate_status(games)
    if slate.has_begun:
        return True
    if slate.earliest_start is None:
        return False
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return now >= slate.earliest_start


# ── Cache ───────────────────────────────────────────────────────────────

@dataclass
class _CacheEntry:
    games: list[Game]
    stored_at: float


@dataclass
class ScheduleCache:
    """Per-date cache of fetched games with a time-to-live.

    Owned and passed around by the caller; nothing in this package keeps
    one at module level. ``clock`` is injectable for tests.
    """
    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    clock: Callable[[], float] = time.monotonic
    _entries: dict[date, _CacheEntry] = field(default_factory=dict)

    def get(self, d: date) -> list[Game] | None:
        """Return cached games for d, or None when missing or expired."""
        entry = self._entries.get(d)
        if entry is None:
            return None
        if self.clock() - entry.stored_at > self.ttl_seconds:
            del self._entries[d]
            return None
        return list(entry.games)

    def put(self, d: date, games: list[Game]) -> None:
        self._entries[d] = _CacheEntry(games=list(games), stored_at=self.clock())

    def invalidate(self, d: date | None = None) -> None:
        """Drop one date, or everything when d is None."""
        if d is None:
            self._entries.clear()
        else:
            self._entries.pop(d, None)

    def __contains__(self, d: date) -> bool:
        return self.get(d) is not None

    def __len__(self) -> int:
        return len(self._entries)
