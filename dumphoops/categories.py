"""Nine-category stat vectors and the percentage math shared by every component."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

# ── Fantasy categories (order matches the league scoreboard) ────────────
CATEGORIES = ["FG%", "FT%", "3PM", "REB", "AST", "STL", "BLK", "TO", "PTS"]
PCT_CATS = ["FG%", "FT%"]
COUNTING_CATS = ["3PM", "REB", "AST", "STL", "BLK", "TO", "PTS"]
INVERSE_CATS = ["TO"]  # lower is better

# Category label → CategoryStats attribute
CATEGORY_FIELDS: dict[str, str] = {
    "FG%": "fg_pct",
    "FT%": "ft_pct",
    "3PM": "threepm",
    "REB": "rebounds",
    "AST": "assists",
    "STL": "steals",
    "BLK": "blocks",
    "TO": "turnovers",
    "PTS": "points",
}

# Shot volume carried alongside the categories so percentages can be recombined.
VOLUME_FIELDS = ["fgm", "fga", "ftm", "fta"]

# Default weights for the weighted composite (wCRI). Points anchor the scale.
DEFAULT_CATEGORY_WEIGHTS: dict[str, float] = {
    "FG%": 0.65,
    "FT%": 0.60,
    "3PM": 0.85,
    "REB": 0.80,
    "AST": 0.75,
    "STL": 0.45,
    "BLK": 0.55,
    "TO": 0.35,
    "PTS": 1.00,
}


def safe_pct(makes: int | float, attempts: int | float) -> float:
    """Return makes/attempts, or 0.0 when there are no attempts."""
    if attempts <= 0:
        return 0.0
    return makes / attempts


@dataclass(frozen=True)
class CategoryStats:
    """A 9-category stat line, either per game or accumulated."""
    fg_pct: float = 0.0
    ft_pct: float = 0.0
    threepm: float = 0.0
    rebounds: float = 0.0
    assists: float = 0.0
    steals: float = 0.0
    blocks: float = 0.0
    turnovers: float = 0.0
    points: float = 0.0
    fgm: float = 0.0
    fga: float = 0.0
    ftm: float = 0.0
    fta: float = 0.0

    def value(self, cat: str) -> float:
        """Return the value for a category label like "3PM" or "FG%"."""
        try:
            return getattr(self, CATEGORY_FIELDS[cat])
        except KeyError:
            raise ValueError(f"Unknown category: {cat!r}") from None

    def as_dict(self) -> dict[str, float]:
        return {cat: self.value(cat) for cat in CATEGORIES}

    @property
    def has_volume(self) -> bool:
        return self.fga > 0 or self.fta > 0

    def scaled(self, units: float) -> CategoryStats:
        """Multiply counting categories and shot volume by units.

        FG% and FT% are rates, so they pass through unchanged.
        """
        changes = {CATEGORY_FIELDS[cat]: self.value(cat) * units for cat in COUNTING_CATS}
        for name in VOLUME_FIELDS:
            changes[name] = getattr(self, name) * units
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict) -> CategoryStats:
        """Build from a dict keyed by category label or attribute name.

        Missing keys default to 0. When shot volume is present but the
        percentage is not, the percentage is derived from the volume.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, float] = {}
        for key, val in data.items():
            name = CATEGORY_FIELDS.get(key, key)
            if name in known and val is not None:
                kwargs[name] = float(val)
        if "fg_pct" not in kwargs and kwargs.get("fga"):
            kwargs["fg_pct"] = safe_pct(kwargs.get("fgm", 0.0), kwargs["fga"])
        if "ft_pct" not in kwargs and kwargs.get("fta"):
            kwargs["ft_pct"] = safe_pct(kwargs.get("ftm", 0.0), kwargs["fta"])
        return cls(**kwargs)


def add_totals(current: CategoryStats, projected: CategoryStats) -> CategoryStats:
    """Combine accumulated totals with a projection of the rest of the period.

    Counting categories and shot volume add. Percentages are recomputed from
    the combined makes/attempts; without any volume the current percentage
    is kept.
    """
    combined = {
        CATEGORY_FIELDS[cat]: current.value(cat) + projected.value(cat)
        for cat in COUNTING_CATS
    }
    for name in VOLUME_FIELDS:
        combined[name] = getattr(current, name) + getattr(projected, name)

    if combined["fga"] > 0:
        combined["fg_pct"] = safe_pct(combined["fgm"], combined["fga"])
    else:
        combined["fg_pct"] = current.fg_pct
    if combined["fta"] > 0:
        combined["ft_pct"] = safe_pct(combined["ftm"], combined["fta"])
    else:
        combined["ft_pct"] = current.ft_pct
    return CategoryStats(**combined)
