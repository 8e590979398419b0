"""Tagged results for data gaps.

A missing opponent roster or an unmappable schedule entry is an expected
condition, not a crash. Functions that can hit one return an ``Unavailable``
value instead of raising, and callers branch on it.
"""

from __future__ import annotations

from dataclasses import dataclass

# Reason codes
OPP_ROSTER_MISSING = "OPP_ROSTER_MISSING"
SCHEDULE_MAPPING_FAILED = "SCHEDULE_MAPPING_FAILED"
TEAM_STATS_MISSING = "TEAM_STATS_MISSING"
STARTS_SO_FAR_UNKNOWN = "STARTS_SO_FAR_UNKNOWN"
NOT_ENOUGH_TEAMS = "NOT_ENOUGH_TEAMS"
CONTEXT_MISSING = "CONTEXT_MISSING"


@dataclass(frozen=True)
class Unavailable:
    """A result that could not be computed, with the reason why."""
    reason: str
    message: str = ""


def is_available(result: object) -> bool:
    """True unless result is an Unavailable marker."""
    return not isinstance(result, Unavailable)
