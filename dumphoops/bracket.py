"""Single-elimination playoff simulation over projected standings.

The bracket is a small tree: leaves are seeds, inner nodes are games. Each
game is decided by the category majority of a forecast between its two
sides' winners, so resolving the root resolves the whole bracket.

Six teams::

    Finals( Semifinal(1, Round 1(3, 6)),  Semifinal(2, Round 1(4, 5)) )

Four teams::

    Finals( Semifinal(1, 4),  Semifinal(2, 3) )
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from dumphoops.categories import CategoryStats
from dumphoops.forecast import ForecastSettings, predict_matchup
from dumphoops.results import NOT_ENOUGH_TEAMS, Unavailable
from dumphoops.standings import TeamStanding

SUPPORTED_BRACKET_SIZES = (4, 6)
ROUND_LABELS = {1: "Round 1", 2: "Semifinal", 3: "Finals"}


@dataclass(frozen=True)
class Seed:
    seed: int
    team: str


@dataclass(frozen=True)
class BracketMatchup:
    round: str
    seed_a: int
    seed_b: int
    team_a: str
    team_b: str
    winner: str
    winner_seed: int
    outcome: str | None = None  # "W-L-T" for team A; None when stats were missing


@dataclass
class Bracket:
    seeds: list[Seed] = field(default_factory=list)
    rounds: list[list[BracketMatchup]] = field(default_factory=list)
    champion: str | None = None


@dataclass(frozen=True)
class _Game:
    """An inner bracket node; sides are either a seed number or another game."""
    label: str
    side_a: int | _Game
    side_b: int | _Game


def _bracket_tree(size: int) -> _Game:
    if size == 6:
        return _Game(
            ROUND_LABELS[3],
            _Game(ROUND_LABELS[2], 1, _Game(ROUND_LABELS[1], 3, 6)),
            _Game(ROUND_LABELS[2], 2, _Game(ROUND_LABELS[1], 4, 5)),
        )
    return _Game(
        ROUND_LABELS[3],
        _Game(ROUND_LABELS[2], 1, 4),
        _Game(ROUND_LABELS[2], 2, 3),
    )


def simulate_bracket(
    standings: list[TeamStanding],
    team_stats: Mapping[str, CategoryStats],
    settings: ForecastSettings | None = None,
    size: int = 6,
) -> Bracket | Unavailable:
    """Seed the top teams of ``standings`` and play the bracket out.

    Standings are taken in the order given (rank 1 first). A game goes to
    the side winning more categories; an even split goes to the better
    seed, as does a game where either side has no stats.
    """
    if size not in SUPPORTED_BRACKET_SIZES:
        raise ValueError(f"Bracket size must be one of {SUPPORTED_BRACKET_SIZES}, got {size}")
    if len(standings) < size:
        return Unavailable(
            NOT_ENOUGH_TEAMS, f"Need {size} teams for the bracket, have {len(standings)}"
        )

    settings = settings or ForecastSettings(simulation_scale_units=1)
    lookup = {name.lower(): stats for name, stats in team_stats.items()}
    seeds = [Seed(i + 1, s.team_name) for i, s in enumerate(standings[:size])]
    by_seed = {s.seed: s for s in seeds}
    played: dict[int, list[BracketMatchup]] = {}

    def play(node: int | _Game, depth: int) -> Seed:
        if isinstance(node, int):
            return by_seed[node]
        a = play(node.side_a, depth + 1)
        b = play(node.side_b, depth + 1)
        # Team A is the better seed
        if b.seed < a.seed:
            a, b = b, a

        stats_a = lookup.get(a.team.lower())
        stats_b = lookup.get(b.team.lower())
        if stats_a is None or stats_b is None:
            winner, outcome = a, None
        else:
            pred = predict_matchup(stats_a, stats_b, settings, opponent=b.team)
            winner = a if pred.wins >= pred.losses else b
            outcome = pred.outcome

        played.setdefault(depth, []).append(BracketMatchup(
            round=node.label,
            seed_a=a.seed,
            seed_b=b.seed,
            team_a=a.team,
            team_b=b.team,
            winner=winner.team,
            winner_seed=winner.seed,
            outcome=outcome,
        ))
        return winner

    champion = play(_bracket_tree(size), 0)
    # Deepest games are played first
    rounds = [played[d] for d in sorted(played, reverse=True)]
    return Bracket(seeds=seeds, rounds=rounds, champion=champion.team)
