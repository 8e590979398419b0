"""Load league configuration from config.toml with hardcoded fallbacks.

The config path can be overridden with DUMPHOOPS_CONFIG, either in the
environment or in a .env file at the repository root.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from dumphoops.categories import DEFAULT_CATEGORY_WEIGHTS
from dumphoops.forecast import (
    COUNTING_TOSSUP_THRESHOLD,
    PCT_TOSSUP_THRESHOLD,
    ForecastSettings,
)
from dumphoops.roster import STANDARD_LINEUP_SLOTS, LineupSlotConfig
from dumphoops.schedule import DEFAULT_CACHE_TTL_SECONDS
from dumphoops.week import DEFAULT_WEEKLY_START_CAP

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11

_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_ROOT / ".env")

_DEFAULT_CONFIG_PATH = _ROOT / "config.toml"

_FALLBACK_TEAM = ""
_FALLBACK_PLAYOFF_TEAMS = 6


def _config_path() -> Path:
    override = os.environ.get("DUMPHOOPS_CONFIG")
    return Path(override) if override else _DEFAULT_CONFIG_PATH


def _load_config() -> dict:
    """Load and return the parsed config.toml, or empty dict if missing."""
    try:
        with open(_config_path(), "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}


def get_my_team() -> str:
    """Return the user's fantasy team name."""
    cfg = _load_config()
    return cfg.get("league", {}).get("team", _FALLBACK_TEAM)


def get_weekly_start_cap() -> int:
    """Return the maximum number of starts per matchup week."""
    cfg = _load_config()
    return int(cfg.get("league", {}).get("weekly_start_cap", DEFAULT_WEEKLY_START_CAP))


def get_playoff_teams() -> int:
    cfg = _load_config()
    return int(cfg.get("league", {}).get("playoff_teams", _FALLBACK_PLAYOFF_TEAMS))


def get_lineup_slots() -> list[LineupSlotConfig]:
    """Return configured lineup slots, in order.

    Each [[lineup.slots]] table has a ``slot`` label and an
    ``eligible`` list of positions.
    """
    cfg = _load_config()
    slots_cfg = cfg.get("lineup", {}).get("slots", [])
    if not slots_cfg:
        return list(STANDARD_LINEUP_SLOTS)
    return [
        LineupSlotConfig(s["slot"], tuple(p.upper() for p in s["eligible"]))
        for s in slots_cfg
    ]


def get_category_weights() -> dict[str, float]:
    """Return wCRI weights, with configured values overriding defaults."""
    cfg = _load_config()
    weights = dict(DEFAULT_CATEGORY_WEIGHTS)
    for cat, val in cfg.get("weights", {}).items():
        if cat in weights:
            weights[cat] = float(val)
    return weights


def get_forecast_settings() -> ForecastSettings:
    """Return ForecastSettings built from the [forecast] table."""
    cfg = _load_config()
    f = cfg.get("forecast", {})
    return ForecastSettings(
        use_composite_index=f.get("use_composite_index", True),
        simulation_scale_units=f.get("simulation_scale_units", 40),
        include_completed_weeks=f.get("include_completed_weeks", False),
        start_from_current_records=f.get("start_from_current_records", True),
        completed_weeks=tuple(f.get("completed_weeks", ())),
        current_week_cutoff=f.get("current_week_cutoff", 0),
        pct_threshold=f.get("pct_threshold", PCT_TOSSUP_THRESHOLD),
        counting_threshold=f.get("counting_threshold", COUNTING_TOSSUP_THRESHOLD),
        category_weights=get_category_weights(),
    )


def get_cache_ttl() -> float:
    """Return the schedule cache time-to-live in seconds."""
    cfg = _load_config()
    return float(cfg.get("schedule", {}).get("cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS))


def get_team_aliases() -> dict[str, str]:
    """Return manual schedule-name → team-name aliases from [aliases]."""
    cfg = _load_config()
    return dict(cfg.get("aliases", {}))
