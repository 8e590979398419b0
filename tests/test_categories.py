"""Tests for category stat vectors and roster helpers."""

import pytest

from dumphoops.categories import (
    CATEGORIES,
    COUNTING_CATS,
    INVERSE_CATS,
    PCT_CATS,
    CategoryStats,
    add_totals,
    safe_pct,
)
from dumphoops.roster import (
    RESERVE,
    STARTER,
    Player,
    RosterSlot,
    compute_baseline_stats,
    normalize_team_code,
    parse_positions,
    player_from_dict,
)


class TestCategoryConstants:
    def test_nine_categories(self):
        assert len(CATEGORIES) == 9
        assert set(PCT_CATS) | set(COUNTING_CATS) == set(CATEGORIES)

    def test_turnovers_inverse(self):
        assert INVERSE_CATS == ["TO"]


class TestSafePct:
    def test_normal(self):
        assert safe_pct(45, 100) == pytest.approx(0.45)

    def test_zero_attempts(self):
        assert safe_pct(0, 0) == 0.0


class TestCategoryStats:
    def test_value_by_label(self):
        s = CategoryStats(threepm=2.5, turnovers=1.0)
        assert s.value("3PM") == 2.5
        assert s.value("TO") == 1.0

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            CategoryStats().value("MIN")

    def test_as_dict_order(self):
        assert list(CategoryStats().as_dict()) == CATEGORIES

    def test_from_dict_labels_and_names(self):
        s = CategoryStats.from_dict({"PTS": 20, "rebounds": 8, "junk": 3})
        assert s.points == 20
        assert s.rebounds == 8

    def test_from_dict_derives_pct_from_volume(self):
        s = CategoryStats.from_dict({"fgm": 9, "fga": 20, "ftm": 0, "fta": 0})
        assert s.fg_pct == pytest.approx(0.45)
        assert s.ft_pct == 0.0

    def test_scaled_leaves_input_untouched(self):
        s = CategoryStats(points=10, fg_pct=0.5, fgm=4, fga=8)
        doubled = s.scaled(2)
        assert doubled.points == 20
        assert doubled.fga == 16
        assert doubled.fg_pct == 0.5
        assert s.points == 10


class TestAddTotals:
    def test_counting_add(self):
        total = add_totals(CategoryStats(points=100, turnovers=10), CategoryStats(points=50, turnovers=4))
        assert total.points == 150
        assert total.turnovers == 14

    def test_ft_pct_recomputed(self):
        total = add_totals(
            CategoryStats(ftm=8, fta=10, ft_pct=0.8),
            CategoryStats(ftm=2, fta=10, ft_pct=0.2),
        )
        assert total.ft_pct == pytest.approx(0.5)


class TestNormalizeTeamCode:
    @pytest.mark.parametrize("raw, expected", [
        ("BOS", "BOS"),
        ("bos", "BOS"),
        ("UTAH", "UTA"),
        ("GS", "GSW"),
        ("NY", "NYK"),
        ("SA", "SAS"),
        ("NO", "NOP"),
        ("WSH", "WAS"),
        ("PHO", "PHX"),
        ("UTAH•", "UTA"),
        (" LAL ", "LAL"),
        ("(GS)", "GSW"),
    ])
    def test_mapped(self, raw, expected):
        assert normalize_team_code(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "--", "ABCDE1"])
    def test_unmapped(self, raw):
        assert normalize_team_code(raw) is None


class TestParsePositions:
    def test_comma(self):
        assert parse_positions("PG, SG") == ("PG", "SG")

    def test_slash(self):
        assert parse_positions("sf/pf") == ("SF", "PF")

    def test_empty(self):
        assert parse_positions("") == ()


class TestPlayerFromDict:
    def test_string_positions(self):
        p = player_from_dict({"name": "A", "team": "BOS", "positions": "PG,SG", "stats": {"PTS": 20}})
        assert p.positions == ("PG", "SG")
        assert p.id == "A"
        assert p.stats.points == 20


def _slot(pid, slot_type=STARTER, **stats):
    return RosterSlot("UTIL", slot_type, Player(id=pid, name=pid, team="BOS", stats=CategoryStats(**stats)))


class TestBaselineStats:
    def test_average_of_active_players(self):
        roster = [
            _slot("a", points=20, fgm=8, fga=16),
            _slot("b", points=10, fgm=2, fga=8),
            _slot("c", slot_type=RESERVE, points=40, fgm=15, fga=20),
        ]
        base = compute_baseline_stats(roster)
        assert base.points == pytest.approx(15)
        # (8 + 2) / (16 + 8)
        assert base.fg_pct == pytest.approx(10 / 24)

    def test_zero_attempts_pct_zero(self):
        base = compute_baseline_stats([_slot("a", points=5)])
        assert base.ft_pct == 0.0

    def test_no_active_players(self):
        assert compute_baseline_stats([_slot("a", slot_type=RESERVE)]) is None
