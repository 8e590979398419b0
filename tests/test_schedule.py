"""Tests for game status parsing, slate status and the schedule cache."""

from datetime import date, datetime, timezone

import pytest

from dumphoops.schedule import (
    FINAL,
    IN_PROGRESS,
    NOT_STARTED,
    Game,
    ScheduleCache,
    build_slate_status,
    parse_game_status,
    teams_playing,
    today_has_begun,
)

D = date(2026, 2, 9)
TIP = datetime(2026, 2, 10, 0, 30, tzinfo=timezone.utc)


class TestParseGameStatus:
    @pytest.mark.parametrize("status", ["Final", "final", "Final/OT", "FINAL"])
    def test_final(self, status):
        assert parse_game_status(status) == FINAL

    @pytest.mark.parametrize("status", [
        "3rd Qtr 5:21", "Halftime", "End of 1st", "OT 2:00", "Overtime", "In Progress", "4th - 0:45",
    ])
    def test_in_progress(self, status):
        assert parse_game_status(status) == IN_PROGRESS

    @pytest.mark.parametrize("status", ["", None, "7:30 PM ET", "Scheduled", "2/9 - 7:00 PM EST", "Postponed"])
    def test_not_started(self, status):
        assert parse_game_status(status) == NOT_STARTED


class TestGame:
    def test_state_property(self):
        assert Game("BOS", "NYK", status="Final").state == FINAL

    def test_involves(self):
        g = Game("BOS", "NYK")
        assert g.involves("NYK")
        assert not g.involves("LAL")

    def test_teams_playing(self):
        assert teams_playing([Game("BOS", "NYK"), Game("LAL", "GSW")]) == {"BOS", "NYK", "LAL", "GSW"}


class TestSlateStatus:
    def test_counts(self):
        slate = build_slate_status([
            Game("BOS", "NYK", status="Final"),
            Game("LAL", "GSW", status="2nd Qtr"),
            Game("MIA", "ORL", status="7:30 PM", start_time=TIP),
        ])
        assert (slate.final, slate.in_progress, slate.not_started) == (1, 1, 1)
        assert slate.earliest_start == TIP
        assert slate.has_begun

    def test_naive_start_treated_as_utc(self):
        slate = build_slate_status([Game("A", "B", start_time=datetime(2026, 2, 10, 0, 30))])
        assert slate.earliest_start == TIP


class TestTodayHasBegun:
    def test_no_games(self):
        assert today_has_begun([], TIP) is False

    def test_before_tipoff(self):
        games = [Game("BOS", "NYK", start_time=TIP)]
        assert today_has_begun(games, datetime(2026, 2, 9, 20, 0, tzinfo=timezone.utc)) is False

    def test_at_tipoff(self):
        assert today_has_begun([Game("BOS", "NYK", start_time=TIP)], TIP) is True

    def test_live_game_without_start_time(self):
        assert today_has_begun([Game("BOS", "NYK", status="Halftime")], TIP) is True

    def test_unknown_start_not_begun(self):
        assert today_has_begun([Game("BOS", "NYK")], TIP) is False


class _FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestScheduleCache:
    def test_hit_within_ttl(self):
        clock = _FakeClock()
        cache = ScheduleCache(ttl_seconds=300, clock=clock)
        cache.put(D, [Game("BOS", "NYK")])
        clock.now += 299
        assert cache.get(D) == [Game("BOS", "NYK")]
        assert D in cache

    def test_expired(self):
        clock = _FakeClock()
        cache = ScheduleCache(ttl_seconds=300, clock=clock)
        cache.put(D, [Game("BOS", "NYK")])
        clock.now += 301
        assert cache.get(D) is None
        assert len(cache) == 0

    def test_miss(self):
        assert ScheduleCache().get(D) is None

    def test_empty_day_cached(self):
        cache = ScheduleCache()
        cache.put(D, [])
        assert cache.get(D) == []
        assert D in cache

    def test_returned_list_is_a_copy(self):
        cache = ScheduleCache()
        cache.put(D, [Game("BOS", "NYK")])
        cache.get(D).clear()
        assert len(cache.get(D)) == 1

    def test_invalidate(self):
        cache = ScheduleCache()
        cache.put(D, [])
        cache.put(date(2026, 2, 10), [])
        cache.invalidate(D)
        assert D not in cache
        cache.invalidate()
        assert len(cache) == 0

    def test_separate_instances_do_not_share(self):
        a, b = ScheduleCache(), ScheduleCache()
        a.put(D, [])
        assert D not in b
