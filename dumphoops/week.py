"""Weekly start accounting: elapsed vs remaining days and the weekly start cap."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from dumphoops.lineup import DayStartsBreakdown, evaluate_day
from dumphoops.roster import STANDARD_LINEUP_SLOTS, LineupSlotConfig, RosterSlot
from dumphoops.schedule import GamesByDate, today_has_begun

logger = logging.getLogger(__name__)

DEFAULT_WEEKLY_START_CAP = 32


# ── Week aggregation ────────────────────────────────────────────────────

@dataclass
class WeekStats:
    """Per-day breakdowns for one matchup week, split at "now"."""
    elapsed_days: list[DayStartsBreakdown] = field(default_factory=list)
    remaining_days: list[DayStartsBreakdown] = field(default_factory=list)
    elapsed_starts: int = 0
    elapsed_overflow: int = 0
    elapsed_unused: int = 0
    elapsed_roster_games: int = 0
    remaining_starts: int = 0
    remaining_overflow: int = 0
    remaining_unused: int = 0
    remaining_roster_games: int = 0
    max_possible_starts: int = 0
    today_is_elapsed: bool = False

    @property
    def all_days(self) -> list[DayStartsBreakdown]:
        return sorted(
            self.elapsed_days + self.remaining_days,
            key=lambda d: d.date or date.min,
        )

    @property
    def total_starts(self) -> int:
        return self.elapsed_starts + self.remaining_starts

    @property
    def total_overflow(self) -> int:
        return self.elapsed_overflow + self.remaining_overflow

    @property
    def total_roster_games(self) -> int:
        return self.elapsed_roster_games + self.remaining_roster_games


def aggregate_week(
    roster: list[RosterSlot],
    dates: list[date],
    games_by_date: GamesByDate,
    slots: list[LineupSlotConfig] | None = None,
    today: date | None = None,
    now: datetime | None = None,
) -> WeekStats:
    """Evaluate every date of the week and total starts per partition.

    A date is elapsed when it is before today, or is today and today's slate
    has begun. Dates with no calendar entry count as days without games.
    ``max_possible_starts`` is slots × remaining days.
    """
    if slots is None:
        slots = STANDARD_LINEUP_SLOTS
    if today is None:
        today = date.today()

    stats = WeekStats()
    todays_games = games_by_date.get(today, [])
    stats.today_is_elapsed = today in dates and today_has_begun(todays_games, now)

    for d in sorted(dates):
        day = evaluate_day(roster, games_by_date.get(d, []), slots, day=d)
        elapsed = d < today or (d == today and stats.today_is_elapsed)
        if elapsed:
            stats.elapsed_days.append(day)
            stats.elapsed_starts += day.starts_used
            stats.elapsed_overflow += day.overflow
            stats.elapsed_unused += day.unused_slots
            stats.elapsed_roster_games += day.candidate_count
        else:
            stats.remaining_days.append(day)
            stats.remaining_starts += day.starts_used
            stats.remaining_overflow += day.overflow
            stats.remaining_unused += day.unused_slots
            stats.remaining_roster_games += day.candidate_count

    stats.max_possible_starts = len(slots) * len(stats.remaining_days)
    logger.debug(
        "Week %s..%s: %d elapsed starts, %d remaining starts",
        min(dates) if dates else None,
        max(dates) if dates else None,
        stats.elapsed_starts,
        stats.remaining_starts,
    )
    return stats


# ── Weekly cap ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CapDay:
    """One remaining day after the weekly cap is applied.

    cap_before/cap_after are None when starts so far is unknown.
    """
    date: date | None
    optimized_starts: int
    used: int
    overflow_by_cap: int
    cap_before: int | None
    cap_after: int | None


@dataclass
class CapAllocation:
    days: list[CapDay] = field(default_factory=list)
    weekly_cap: int = DEFAULT_WEEKLY_START_CAP
    starts_so_far: int | None = None
    remaining_cap: int | None = None
    projected_additional_starts: int = 0
    projected_final_starts: int | None = None
    total_cap_overflow: int = 0

    @property
    def cap_known(self) -> bool:
        return self.starts_so_far is not None


def allocate_weekly_cap(
    remaining_days: list[DayStartsBreakdown],
    starts_so_far: int | None,
    weekly_cap: int = DEFAULT_WEEKLY_START_CAP,
) -> CapAllocation:
    """Spend the remaining weekly starts greedily in date order.

    Each day uses min(optimised starts, cap left); anything beyond that is
    overflow by cap. With starts_so_far unknown nothing is clamped and every
    day keeps its optimised starts.
    """
    if weekly_cap < 0:
        raise ValueError(f"weekly_cap must be non-negative, got {weekly_cap}")
    if starts_so_far is not None and starts_so_far < 0:
        raise ValueError(f"starts_so_far must be non-negative, got {starts_so_far}")

    days = sorted(remaining_days, key=lambda d: d.date or date.min)
    alloc = CapAllocation(weekly_cap=weekly_cap, starts_so_far=starts_so_far)

    if starts_so_far is None:
        for day in days:
            alloc.days.append(CapDay(
                date=day.date,
                optimized_starts=day.starts_used,
                used=day.starts_used,
                overflow_by_cap=0,
                cap_before=None,
                cap_after=None,
            ))
            alloc.projected_additional_starts += day.starts_used
        return alloc

    remaining = max(0, weekly_cap - starts_so_far)
    alloc.remaining_cap = remaining
    for day in days:
        used = min(day.starts_used, remaining)
        overflow = day.starts_used - used
        alloc.days.append(CapDay(
            date=day.date,
            optimized_starts=day.starts_used,
            used=used,
            overflow_by_cap=overflow,
            cap_before=remaining,
            cap_after=remaining - used,
        ))
        remaining -= used
        alloc.projected_additional_starts += used
        alloc.total_cap_overflow += overflow

    alloc.projected_final_starts = starts_so_far + alloc.projected_additional_starts
    assert alloc.projected_additional_starts <= alloc.remaining_cap
    return alloc
