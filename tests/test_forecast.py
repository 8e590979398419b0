"""Tests for projection, category comparison and matchup forecasts."""

import pytest

from dumphoops.categories import CATEGORIES, CategoryStats
from dumphoops.forecast import (
    MINE,
    OPPONENT,
    TIE,
    ForecastSettings,
    compare_categories,
    compare_category,
    evaluate_matchup,
    forecast_team_matchups,
    pace_stats,
    predict_matchup,
    project_current_matchup,
    project_final_totals,
    project_stats,
    swing_categories,
)
from dumphoops.league_schedule import LeagueSchedule, LeagueTeam, ScheduleMatchup
from dumphoops.results import OPP_ROSTER_MISSING, SCHEDULE_MAPPING_FAILED, Unavailable, is_available
from dumphoops.roster import RESERVE, STARTER, Player, RosterSlot


def _line(**kw):
    base = dict(
        fg_pct=0.470, ft_pct=0.780, threepm=1.5, rebounds=5.0, assists=3.0,
        steals=1.0, blocks=0.5, turnovers=2.0, points=15.0,
    )
    base.update(kw)
    return CategoryStats(**base)


def _roster_slot(pid, stats, slot_type=STARTER):
    return RosterSlot("UTIL", slot_type, Player(id=pid, name=pid, team="BOS", positions=("PG",), stats=stats))


class TestProjection:
    def test_counting_scaled_percentages_pass_through(self):
        proj = project_stats(_line(), 40)
        assert proj.points == pytest.approx(600)
        assert proj.turnovers == pytest.approx(80)
        assert proj.fg_pct == 0.470
        assert proj.ft_pct == 0.780

    def test_zero_units(self):
        proj = project_stats(_line(), 0)
        assert proj.points == 0
        assert proj.fg_pct == 0.470

    def test_final_totals_recompute_percentages(self):
        current = CategoryStats(fgm=40, fga=100, fg_pct=0.40, points=100)
        baseline = CategoryStats(fgm=5, fga=10, fg_pct=0.50, points=12)
        final = project_final_totals(current, baseline, 10)
        # (40 + 50) / (100 + 100)
        assert final.fg_pct == pytest.approx(0.45)
        assert final.points == pytest.approx(220)

    def test_final_totals_keep_pct_without_volume(self):
        final = project_final_totals(_line(fg_pct=0.48), _line(fg_pct=0.40), 5)
        assert final.fg_pct == 0.48

    def test_pace(self):
        pace = pace_stats(CategoryStats(points=300, fg_pct=0.5), starts_so_far=20)
        # 300 / 20 × 40
        assert pace.points == pytest.approx(600)
        assert pace.fg_pct == 0.5

    def test_pace_before_any_start(self):
        assert pace_stats(CategoryStats(points=10), 0) is None


class TestCompareCategory:
    def test_pct_within_threshold_is_tossup(self):
        r = compare_category("FG%", 0.500, 0.490)
        assert r.winner == TIE

    def test_pct_beyond_threshold(self):
        assert compare_category("FG%", 0.500, 0.480).winner == MINE

    def test_counting_threshold_inclusive(self):
        assert compare_category("PTS", 105.0, 100.0).winner == TIE
        assert compare_category("PTS", 106.0, 100.0).winner == MINE

    def test_turnovers_inverted(self):
        assert compare_category("TO", 50.0, 60.0).winner == MINE
        assert compare_category("TO", 60.0, 50.0).winner == OPPONENT

    def test_margin_pct(self):
        r = compare_category("REB", 110.0, 90.0)
        assert r.margin == pytest.approx(20.0)
        assert r.margin_pct == pytest.approx(0.2)

    def test_margin_pct_zero_values(self):
        assert compare_category("BLK", 0.0, 0.0).margin_pct == 0.0

    def test_custom_thresholds(self):
        assert compare_category("PTS", 102, 100, counting_threshold=1).winner == MINE

    def test_every_category_classified_once(self):
        results = compare_categories(_line(points=20), _line())
        assert [r.category for r in results] == CATEGORIES
        assert all(r.winner in (MINE, OPPONENT, TIE) for r in results)


class TestSwingCategories:
    def test_tossups_first_then_narrowest(self):
        results = compare_categories(
            CategoryStats(points=100, rebounds=200, assists=120, steals=40),
            CategoryStats(points=102, rebounds=100, assists=100, steals=30),
        )
        swing = swing_categories(results)
        # PTS and the all-zero categories are toss-ups
        assert swing[0] == "FG%"
        assert "PTS" in swing
        assert "REB" not in swing

    def test_limit_when_no_tossups(self):
        results = compare_categories(
            _line(fg_pct=0.6, ft_pct=0.9, threepm=100, rebounds=300, assists=200,
                  steals=50, blocks=40, turnovers=10, points=900),
            _line(fg_pct=0.4, ft_pct=0.7, threepm=50, rebounds=200, assists=150,
                  steals=30, blocks=20, turnovers=30, points=700),
        )
        assert len(swing_categories(results)) == 3


class TestPredictMatchup:
    def test_identical_teams_all_tossups(self):
        pred = predict_matchup(_line(), _line())
        assert pred.wins == pred.losses == 0
        assert pred.ties == 9
        assert pred.outcome == "0-0-9"
        assert pred.confidence == "low"
        assert pred.result == "tie"
        assert not pred.won

    def test_stronger_team_wins(self):
        pred = predict_matchup(
            _line(points=20, rebounds=8, assists=5, threepm=3, fg_pct=0.52),
            _line(),
            ForecastSettings(simulation_scale_units=40),
        )
        assert pred.wins == 5
        assert pred.losses == 0
        assert pred.won
        assert pred.confidence == "high"
        assert pred.edge > 0

    def test_scale_changes_tossups(self):
        mine, opp = _line(points=15.5), _line(points=15.0)
        # 0.5 point gap: toss-up at 1 unit, decided at 40 units
        assert predict_matchup(mine, opp, ForecastSettings(simulation_scale_units=1)).ties == 9
        assert predict_matchup(mine, opp, ForecastSettings(simulation_scale_units=40)).wins == 1

    def test_weighted_edge(self):
        mine, opp = CategoryStats(points=100), CategoryStats(points=50)
        plain = evaluate_matchup(mine, opp, ForecastSettings(use_composite_index=True))
        weighted = evaluate_matchup(
            mine, opp,
            ForecastSettings(use_composite_index=False, category_weights={"PTS": 0.5}),
        )
        assert weighted.edge == pytest.approx(plain.edge * 0.5)


class TestCurrentMatchup:
    def test_missing_opponent_roster(self):
        my_roster = [_roster_slot("a", _line())]
        result = project_current_matchup(
            my_roster, [], CategoryStats(), CategoryStats(), 10, 10
        )
        assert isinstance(result, Unavailable)
        assert result.reason == OPP_ROSTER_MISSING

    def test_opponent_roster_all_reserve(self):
        opp = [_roster_slot("b", _line(), slot_type=RESERVE)]
        result = project_current_matchup(
            [_roster_slot("a", _line())], opp, CategoryStats(), CategoryStats(), 10, 10
        )
        assert result.reason == OPP_ROSTER_MISSING

    def test_more_remaining_starts_wins_counting(self):
        roster = [_roster_slot("a", _line())]
        result = project_current_matchup(
            roster, roster, _line(fg_pct=0.47), _line(fg_pct=0.47), 20, 5,
            ForecastSettings(), opponent="Rival",
        )
        assert is_available(result)
        assert result.opponent == "Rival"
        assert result.wins > result.losses


def _teams():
    return [
        LeagueTeam("Alpha", _line(points=20)),
        LeagueTeam("Bravo", _line()),
        LeagueTeam("Charlie", _line(points=10)),
    ]


class TestForecastTeamMatchups:
    def test_relevant_weeks_in_order(self):
        schedule = LeagueSchedule("2025-26", [
            ScheduleMatchup(3, "Nov 3 - 9", "Charlie", "Alpha"),
            ScheduleMatchup(1, "Oct 21 - 26", "Alpha", "Bravo"),
            ScheduleMatchup(2, "Oct 27 - Nov 2", "Bravo", "Alpha"),
        ])
        preds = forecast_team_matchups(
            schedule, "alpha", _teams(), ForecastSettings(current_week_cutoff=1)
        )
        assert [p.week for p in preds] == [2, 3]
        assert [p.opponent for p in preds] == ["Bravo", "Charlie"]
        assert all(p.won for p in preds)

    def test_completed_weeks_skipped(self):
        schedule = LeagueSchedule("2025-26", [
            ScheduleMatchup(1, "Oct 21 - 26", "Alpha", "Bravo"),
            ScheduleMatchup(2, "Oct 27 - Nov 2", "Alpha", "Charlie"),
        ])
        preds = forecast_team_matchups(
            schedule, "Alpha", _teams(), ForecastSettings(completed_weeks=(1,))
        )
        assert [p.week for p in preds] == [2]

    def test_include_completed_weeks(self):
        schedule = LeagueSchedule("2025-26", [ScheduleMatchup(1, "Oct 21 - 26", "Alpha", "Bravo")])
        settings = ForecastSettings(completed_weeks=(1,), include_completed_weeks=True)
        assert len(forecast_team_matchups(schedule, "Alpha", _teams(), settings)) == 1

    def test_unknown_opponent_is_unavailable(self):
        schedule = LeagueSchedule("2025-26", [ScheduleMatchup(1, "Oct 21 - 26", "Alpha", "Zulu")])
        (result,) = forecast_team_matchups(schedule, "Alpha", _teams())
        assert isinstance(result, Unavailable)
        assert result.reason == SCHEDULE_MAPPING_FAILED

    def test_fuzzy_opponent_name(self):
        schedule = LeagueSchedule("2025-26", [
            ScheduleMatchup(1, "Oct 21 - 26", "Alpha", "Team Charlie"),
        ])
        (pred,) = forecast_team_matchups(schedule, "Alpha", _teams())
        assert pred.opponent == "Charlie"

    def test_unknown_focus_team(self):
        (result,) = forecast_team_matchups(LeagueSchedule("2025-26"), "Nobody", _teams())
        assert result.reason == SCHEDULE_MAPPING_FAILED

    def test_focus_team_spelled_differently_in_schedule(self):
        schedule = LeagueSchedule("2025-26", [
            ScheduleMatchup(1, "Oct 21 - 26", "Alpha FC", "Bravo"),
            ScheduleMatchup(2, "Oct 27 - Nov 2", "Charlie", "Alpha FC"),
        ])
        preds = forecast_team_matchups(schedule, "Alpha", _teams())
        assert [p.opponent for p in preds] == ["Bravo", "Charlie"]

    def test_aliases_resolve_schedule_names(self):
        schedule = LeagueSchedule("2025-26", [ScheduleMatchup(1, "Oct 21 - 26", "AL", "BRV")])
        preds = forecast_team_matchups(
            schedule, "Alpha", _teams(), aliases={"AL": "Alpha", "BRV": "Bravo"}
        )
        assert [p.opponent for p in preds] == ["Bravo"]

    def test_alias_missing_leaves_week_out(self):
        schedule = LeagueSchedule("2025-26", [ScheduleMatchup(1, "Oct 21 - 26", "AL", "Bravo")])
        assert forecast_team_matchups(schedule, "Alpha", _teams()) == []
