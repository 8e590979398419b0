"""Roster data model: players, roster slots, and lineup slot configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from dumphoops.categories import (
    COUNTING_CATS,
    CATEGORY_FIELDS,
    VOLUME_FIELDS,
    CategoryStats,
    safe_pct,
)

# Roster slot kinds
STARTER = "starter"
BENCH = "bench"
RESERVE = "ir"

POSITIONS = ["PG", "SG", "SF", "PF", "C"]

# ── Team code normalization ─────────────────────────────────────────────
# Roster exports sometimes use non-standard team codes; the game calendar
# uses standard 2-3 letter NBA abbreviations.
TEAM_CODE_ALIASES: dict[str, str] = {
    "UTAH": "UTA",
    "GS": "GSW",
    "NY": "NYK",
    "SA": "SAS",
    "NO": "NOP",
    "WSH": "WAS",
    "PHO": "PHX",
}


def normalize_team_code(team: str | None) -> str | None:
    """Map a roster team code to the calendar's abbreviation.

    Handles aliases ("GS" → "GSW") and decorated codes ("UTAH•" → "UTA").
    Returns None when no 2-3 letter code can be recovered.
    """
    if not team:
        return None
    raw = team.upper().strip()
    if not raw:
        return None

    if re.fullmatch(r"[A-Z]{2,3}", raw):
        return TEAM_CODE_ALIASES.get(raw, raw)

    # Take the first 2-4 letter block ("UTAH ", "UTAH•", "(GS)")
    m = re.match(r"[A-Z]{2,4}", raw) or re.search(r"[A-Z]{2,4}", raw)
    if not m:
        return None
    extracted = m.group(0)
    if extracted in TEAM_CODE_ALIASES:
        return TEAM_CODE_ALIASES[extracted]
    if len(extracted) <= 3:
        return extracted
    return None


def parse_positions(text: str | None) -> tuple[str, ...]:
    """Split a position string like "PG, SG" or "SF/PF" into codes."""
    if not text:
        return ()
    parts = re.split(r"[,/\s]+", text.upper())
    return tuple(p for p in parts if p)


# ── Data model ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Player:
    """A rostered NBA player with per-game averages."""
    id: str
    name: str
    team: str
    positions: tuple[str, ...] = ()
    status: str = ""
    stats: CategoryStats = field(default_factory=CategoryStats)
    minutes: float = 0.0
    games_played: int = 0


@dataclass(frozen=True)
class RosterSlot:
    """A player placed in one of the fantasy team's roster slots."""
    slot: str
    slot_type: str
    player: Player

    @property
    def is_reserve(self) -> bool:
        return self.slot_type == RESERVE


@dataclass(frozen=True)
class LineupSlotConfig:
    """A lineup slot and the positions allowed to fill it."""
    slot: str
    eligible_positions: tuple[str, ...]

    def accepts(self, positions: tuple[str, ...] | list[str]) -> bool:
        allowed = {p.upper() for p in self.eligible_positions}
        return any(p.upper() in allowed for p in positions)


STANDARD_LINEUP_SLOTS: list[LineupSlotConfig] = [
    LineupSlotConfig("PG", ("PG",)),
    LineupSlotConfig("SG", ("SG",)),
    LineupSlotConfig("SF", ("SF",)),
    LineupSlotConfig("PF", ("PF",)),
    LineupSlotConfig("C", ("C",)),
    LineupSlotConfig("G", ("PG", "SG")),
    LineupSlotConfig("F", ("SF", "PF")),
    LineupSlotConfig("UTIL", ("PG", "SG", "SF", "PF", "C")),
]


def player_from_dict(p: dict) -> Player:
    """Build a Player from a parsed roster row.

    Accepts positions either as a list or as a "PG, SG" string.
    """
    positions = p.get("positions", ())
    if isinstance(positions, str):
        positions = parse_positions(positions)
    return Player(
        id=str(p.get("id") or p.get("name", "")),
        name=p.get("name", ""),
        team=p.get("team", ""),
        positions=tuple(positions),
        status=p.get("status", ""),
        stats=CategoryStats.from_dict(p.get("stats", {})),
        minutes=float(p.get("minutes", 0.0)),
        games_played=int(p.get("games_played", 0)),
    )


def active_players(roster: list[RosterSlot]) -> list[Player]:
    """Players outside reserve (IR) slots, in roster order."""
    return [rs.player for rs in roster if not rs.is_reserve]


def compute_baseline_stats(roster: list[RosterSlot]) -> CategoryStats | None:
    """Average per-game line of one active roster player.

    This is the per-start unit that projections multiply by a start count.
    Counting categories and shot volume are averaged across non-reserve
    players; FG% and FT% come from the summed makes and attempts.
    Returns None when the roster has no active players.
    """
    players = active_players(roster)
    if not players:
        return None

    n = len(players)
    totals: dict[str, float] = {}
    for cat in COUNTING_CATS:
        name = CATEGORY_FIELDS[cat]
        totals[name] = sum(p.stats.value(cat) for p in players) / n
    for name in VOLUME_FIELDS:
        totals[name] = sum(getattr(p.stats, name) for p in players) / n

    totals["fg_pct"] = safe_pct(totals["fgm"], totals["fga"])
    totals["ft_pct"] = safe_pct(totals["ftm"], totals["fta"])
    return CategoryStats(**totals)
