"""Daily lineup optimisation: fill position slots with players who have a game.

The slot problem is a bipartite matching between players and slots, solved
exactly with augmenting paths (Kuhn's algorithm). A greedy fill can strand a
flexible player in a slot a rigid one needed; augmenting paths move players
around until no further player can be seated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from dumphoops.roster import (
    STANDARD_LINEUP_SLOTS,
    LineupSlotConfig,
    Player,
    RosterSlot,
    normalize_team_code,
)
from dumphoops.schedule import Game, teams_playing

logger = logging.getLogger(__name__)

# Exclusion reasons
REASON_RESERVE_SLOT = "reserve slot"
REASON_NO_POSITIONS = "no positions"
REASON_MISSING_TEAM = "missing team mapping"
REASON_DUPLICATE = "duplicate roster entry"


@dataclass(frozen=True)
class SlotAssignment:
    slot: str
    player: Player


@dataclass
class MatchResult:
    """Outcome of a maximum matching."""
    matched: int = 0
    assignments: list[SlotAssignment] = field(default_factory=list)


@dataclass(frozen=True)
class ExcludedPlayer:
    player: Player
    reason: str


@dataclass
class DayStartsBreakdown:
    """How many starts one day's slate allows for a roster."""
    date: date | None
    slots_count: int
    games_count: int
    candidates: list[Player] = field(default_factory=list)
    excluded: list[ExcludedPlayer] = field(default_factory=list)
    assignments: list[SlotAssignment] = field(default_factory=list)
    starts_used: int = 0
    overflow: int = 0
    unused_slots: int = 0
    missing_team_count: int = 0

    @property
    def candidate_count(self) -> int:
        return len(self.candidates)

    @property
    def benched(self) -> list[Player]:
        """Candidates with a game who could not be seated."""
        seated = {id(a.player) for a in self.assignments}
        return [p for p in self.candidates if id(p) not in seated]


# ── Matching ────────────────────────────────────────────────────────────

def _eligible_slot_indices(player: Player, slots: list[LineupSlotConfig]) -> list[int]:
    return [i for i, slot in enumerate(slots) if slot.accepts(player.positions)]


def find_maximum_matching(
    candidates: list[Player],
    slots: list[LineupSlotConfig] | None = None,
) -> MatchResult:
    """Seat as many candidates as possible, at most one per slot.

    Candidates are processed in (id, name) order and slots in configured
    order, so the same input always produces the same assignment. The
    returned assignments are listed in slot order.
    """
    if slots is None:
        slots = STANDARD_LINEUP_SLOTS
    if not candidates or not slots:
        return MatchResult()

    players = sorted(candidates, key=lambda p: (p.id, p.name))
    eligible = [_eligible_slot_indices(p, slots) for p in players]
    # slot index -> player index, or -1 when the slot is open
    slot_match = [-1] * len(slots)

    def try_assign(pi: int, visited: list[bool]) -> bool:
        for si in eligible[pi]:
            if visited[si]:
                continue
            visited[si] = True
            if slot_match[si] == -1 or try_assign(slot_match[si], visited):
                slot_match[si] = pi
                return True
        return False

    matched = 0
    for pi in range(len(players)):
        if try_assign(pi, [False] * len(slots)):
            matched += 1

    seated = [pi for pi in slot_match if pi != -1]
    assert len({players[pi].id for pi in seated}) == len(seated), "player assigned to two slots"
    assert len(seated) == matched <= len(slots), "assignment count mismatch"

    assignments = [
        SlotAssignment(slot=slots[si].slot, player=players[pi])
        for si, pi in enumerate(slot_match)
        if pi != -1
    ]
    return MatchResult(matched=matched, assignments=assignments)


# ── Daily evaluation ────────────────────────────────────────────────────

def evaluate_day(
    roster: list[RosterSlot],
    games: list[Game],
    slots: list[LineupSlotConfig] | None = None,
    day: date | None = None,
) -> DayStartsBreakdown:
    """Work out how many of the roster's players can start on one day.

    Reserve-slot players, players with no positions and players whose team
    cannot be mapped are excluded with a reason. Everyone else whose team
    plays today is a candidate for the maximum matching.
    """
    if slots is None:
        slots = STANDARD_LINEUP_SLOTS

    playing = teams_playing(games)
    candidates: list[Player] = []
    excluded: list[ExcludedPlayer] = []
    missing_team = 0
    seen_ids: set[str] = set()

    for rs in roster:
        player = rs.player
        if player.id in seen_ids:
            excluded.append(ExcludedPlayer(player, REASON_DUPLICATE))
            logger.debug("%s listed twice on roster, ignoring repeat", player.name)
            continue
        seen_ids.add(player.id)
        if rs.is_reserve:
            excluded.append(ExcludedPlayer(player, REASON_RESERVE_SLOT))
            continue
        if not player.positions:
            excluded.append(ExcludedPlayer(player, REASON_NO_POSITIONS))
            continue
        code = normalize_team_code(player.team)
        if code is None:
            missing_team += 1
            excluded.append(ExcludedPlayer(player, REASON_MISSING_TEAM))
            logger.debug("No team mapping for %s (%r)", player.name, player.team)
            continue
        if code in playing:
            candidates.append(player)

    result = find_maximum_matching(candidates, slots)

    breakdown = DayStartsBreakdown(
        date=day,
        slots_count=len(slots),
        games_count=len(games),
        candidates=candidates,
        excluded=excluded,
        assignments=result.assignments,
        starts_used=result.matched,
        overflow=max(0, len(candidates) - result.matched),
        unused_slots=max(0, len(slots) - result.matched),
        missing_team_count=missing_team,
    )
    assert breakdown.starts_used <= breakdown.candidate_count
    return breakdown
