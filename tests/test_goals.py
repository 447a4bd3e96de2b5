from datetime import datetime, timedelta, timezone

from studyplanner.goals import (
    completed_dates,
    current_streak,
    goals_summary,
    longest_streak,
    percentage,
    today_progress,
    week_progress,
    week_start,
)
from studyplanner.models.study_session import Goals

from conftest import make_session

# 2026-10-14 은 수요일, 이번 주 일요일은 10-11
NOW = datetime(2026, 10, 14, 18, 30)


def done(day_offset, hour=9, duration=60):
    start = NOW.replace(hour=hour, minute=0) + timedelta(days=day_offset)
    return make_session(start_time=start, duration=duration, completed=True)


class TestStreaks:
    def test_no_sessions(self):
        assert current_streak([], NOW) == 0
        assert longest_streak([]) == 0

    def test_uncompleted_sessions_do_not_count(self):
        sessions = [make_session(start_time=NOW, completed=False)]
        assert current_streak(sessions, NOW) == 0

    def test_single_session_today(self):
        assert current_streak([done(0)], NOW) == 1

    def test_today_and_yesterday(self):
        assert current_streak([done(0), done(-1)], NOW) == 2

    def test_streak_anchored_at_yesterday(self):
        assert current_streak([done(-1), done(-2), done(-3)], NOW) == 3

    def test_gap_breaks_streak(self):
        assert current_streak([done(-2), done(-3)], NOW) == 0
        assert current_streak([done(0), done(-2), done(-3)], NOW) == 1

    def test_multiple_sessions_same_day_count_once(self):
        sessions = [done(0, hour=8), done(0, hour=20), done(-1)]
        assert current_streak(sessions, NOW) == 2
        assert len(completed_dates(sessions)) == 2

    def test_future_completed_sessions_ignored(self):
        assert current_streak([done(2), done(0)], NOW) == 1

    def test_longest_streak(self):
        sessions = [done(-10), done(-9), done(-8), done(-7), done(-1), done(0)]
        assert longest_streak(sessions) == 4
        assert current_streak(sessions, NOW) == 2

    def test_longest_at_least_current(self):
        for sessions in ([done(0)], [done(-1), done(-2)], [done(0), done(-1), done(-5)]):
            assert longest_streak(sessions) >= current_streak(sessions, NOW)

    def test_aware_start_times_use_local_date(self):
        local = NOW.replace(hour=12).astimezone()
        session = make_session(start_time=local.astimezone(timezone.utc), completed=True)
        assert completed_dates([session]) == [NOW.date()]


class TestProgress:
    def test_today_progress_percentage(self):
        goals = Goals(daily_minutes=120)
        progress = today_progress([done(0, duration=60)], goals, NOW)
        assert progress.current == 60
        assert progress.percentage == 50
        assert not progress.achieved

    def test_today_ignores_other_days_and_uncompleted(self):
        sessions = [done(-1), make_session(start_time=NOW, duration=30)]
        assert today_progress(sessions, Goals(), NOW).current == 0

    def test_zero_target_does_not_divide(self):
        assert percentage(0, 0) == 100.0
        assert percentage(30, 0) == 100.0
        progress = today_progress([], Goals(daily_minutes=0), NOW)
        assert progress.percentage == 100.0
        assert progress.achieved

    def test_percentage_capped(self):
        assert percentage(300, 120) == 100.0

    def test_week_start_is_sunday_midnight(self):
        assert week_start(NOW) == datetime(2026, 10, 11)
        assert week_start(datetime(2026, 10, 11, 7, 0)) == datetime(2026, 10, 11)
        assert week_start(datetime(2026, 10, 17, 23, 59)) == datetime(2026, 10, 11)

    def test_week_boundaries(self):
        saturday_before = make_session(
            start_time=datetime(2026, 10, 10, 23, 59, 59), duration=20, completed=True)
        sunday_start = make_session(
            start_time=datetime(2026, 10, 11, 0, 0, 0), duration=30, completed=True)
        saturday_end = make_session(
            start_time=datetime(2026, 10, 17, 23, 59, 59), duration=40, completed=True)
        next_sunday = make_session(
            start_time=datetime(2026, 10, 18, 0, 0, 0), duration=50, completed=True)
        sessions = [saturday_before, sunday_start, saturday_end, next_sunday]

        week = week_progress(sessions, Goals(weekly_minutes=140, weekly_sessions=4), NOW)
        assert week["minutes"].current == 70
        assert week["minutes"].percentage == 50
        assert week["sessions"].current == 2
        assert week["sessions"].percentage == 50

        previous = week_progress(sessions, Goals(), datetime(2026, 10, 10, 12, 0))
        assert previous["minutes"].current == 20

    def test_summary(self):
        summary = goals_summary([done(0), done(-1)], Goals(daily_minutes=120), NOW)
        assert summary["current_streak"] == 2
        assert summary["longest_streak"] == 2
        assert summary["today"]["percentage"] == 50
        assert summary["week"]["start"] == "2026-10-11"
        assert summary["week"]["sessions"]["current"] == 2
        assert summary["goals"]["daily_minutes"] == 120
