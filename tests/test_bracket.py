"""Tests for the playoff bracket simulator."""

import pytest

from dumphoops.bracket import simulate_bracket
from dumphoops.categories import CategoryStats
from dumphoops.results import NOT_ENOUGH_TEAMS, Unavailable
from dumphoops.standings import TeamStanding


def _standings(*names):
    return [TeamStanding(team_name=n, projected_rank=i + 1) for i, n in enumerate(names)]


def _line(points=100.0):
    return CategoryStats(fg_pct=0.47, ft_pct=0.78, rebounds=40, assists=25, points=points)


SIX = ["S1", "S2", "S3", "S4", "S5", "S6"]


class TestSixTeamBracket:
    def test_equal_teams_top_seed_wins(self):
        stats = {n: _line() for n in SIX}
        bracket = simulate_bracket(_standings(*SIX), stats)
        assert bracket.champion == "S1"
        assert len(bracket.rounds) == 3

    def test_round_structure(self):
        stats = {n: _line() for n in SIX}
        bracket = simulate_bracket(_standings(*SIX), stats)
        r1, semis, final = bracket.rounds
        assert [(m.seed_a, m.seed_b) for m in r1] == [(3, 6), (4, 5)]
        assert [(m.seed_a, m.seed_b) for m in semis] == [(1, 3), (2, 4)]
        assert [(m.seed_a, m.seed_b) for m in final] == [(1, 2)]
        assert {m.round for m in r1} == {"Round 1"}
        assert {m.round for m in semis} == {"Semifinal"}
        assert final[0].round == "Finals"

    def test_lower_seed_upset(self):
        stats = {n: _line() for n in SIX}
        stats["S6"] = _line(points=200)
        bracket = simulate_bracket(_standings(*SIX), stats)
        r1, semis, final = bracket.rounds
        assert r1[0].winner == "S6"
        assert r1[0].winner_seed == 6
        # Seed 1 is still team A against the 6 seed
        assert (semis[0].seed_a, semis[0].seed_b) == (1, 6)
        assert bracket.champion == "S6"

    def test_only_top_six_seeded(self):
        names = SIX + ["S7", "S8"]
        stats = {n: _line() for n in names}
        bracket = simulate_bracket(_standings(*names), stats)
        assert [s.team for s in bracket.seeds] == SIX

    def test_outcome_label(self):
        stats = {n: _line() for n in SIX}
        stats["S2"] = _line(points=50)
        bracket = simulate_bracket(_standings(*SIX), stats)
        final = bracket.rounds[-1][0]
        # Finals: S1 vs S4 (S4 beat S2 in the semifinal)
        assert (final.team_a, final.team_b) == ("S1", "S4")
        assert bracket.rounds[1][1].outcome == "0-1-8"


class TestFourTeamBracket:
    def test_structure(self):
        names = SIX[:4]
        bracket = simulate_bracket(_standings(*names), {n: _line() for n in names}, size=4)
        semis, final = bracket.rounds
        assert [(m.seed_a, m.seed_b) for m in semis] == [(1, 4), (2, 3)]
        assert final[0].round == "Finals"
        assert bracket.champion == "S1"


class TestBracketEdgeCases:
    def test_not_enough_teams(self):
        result = simulate_bracket(_standings("A", "B", "C"), {})
        assert isinstance(result, Unavailable)
        assert result.reason == NOT_ENOUGH_TEAMS

    def test_unsupported_size(self):
        with pytest.raises(ValueError):
            simulate_bracket(_standings(*SIX), {}, size=8)

    def test_missing_stats_advance_higher_seed(self):
        stats = {n: _line() for n in SIX}
        stats["S3"] = _line(points=200)
        del stats["S6"]
        bracket = simulate_bracket(_standings(*SIX), stats)
        r1 = bracket.rounds[0]
        assert r1[0].winner == "S3"
        assert r1[0].outcome is None

    def test_stats_lookup_case_insensitive(self):
        stats = {n.lower(): _line() for n in SIX}
        stats["s5"] = _line(points=200)
        bracket = simulate_bracket(_standings(*SIX), stats)
        assert bracket.rounds[0][1].winner == "S5"

    def test_exactly_one_champion(self):
        stats = {n: _line(points=100 + i * 10) for i, n in enumerate(SIX)}
        bracket = simulate_bracket(_standings(*SIX), stats)
        assert bracket.champion in SIX
        assert len(bracket.rounds[-1]) == 1
