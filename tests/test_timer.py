from studyplanner.timer import (
    LONG_BREAK_SECONDS,
    POMODORO_STUDY_SECONDS,
    SHORT_BREAK_SECONDS,
    StudyTimer,
    TimerMode,
    TimerState,
    TimerType,
    break_length,
    format_time,
)

from conftest import make_session


def run_to_zero(timer):
    while timer.state == TimerState.RUNNING:
        timer.tick()


def complete_study(timer):
    timer.start()
    run_to_zero(timer)
    assert timer.state == TimerState.COMPLETED


class TestInitialState:
    def test_custom_duration_from_session(self):
        timer = StudyTimer(make_session(duration=45))
        assert timer.state == TimerState.IDLE
        assert timer.mode == TimerMode.STUDY
        assert timer.timer_type == TimerType.CUSTOM
        assert timer.time_left == timer.total_time == 45 * 60
        assert timer.pomodoro_count == 0

    def test_snapshot(self):
        snapshot = StudyTimer(make_session(duration=30)).snapshot()
        assert snapshot["state"] == "idle"
        assert snapshot["mode"] == "study"
        assert snapshot["display"] == "30:00"
        assert snapshot["progress"] == 0


class TestTransitions:
    def test_ticks_drive_custom_timer_to_completed(self):
        timer = StudyTimer(make_session(duration=2))
        timer.start()
        for _ in range(2 * 60):
            timer.tick()
        assert timer.state == TimerState.COMPLETED
        assert timer.time_left == 0

    def test_pause_and_resume(self):
        timer = StudyTimer(make_session(duration=1))
        timer.start()
        timer.tick()
        assert timer.pause()
        assert timer.state == TimerState.PAUSED
        assert not timer.tick()
        assert timer.time_left == 59
        assert timer.start()
        assert timer.state == TimerState.RUNNING

    def test_invalid_events_are_ignored(self):
        timer = StudyTimer(make_session(duration=1))
        assert not timer.pause()
        assert not timer.reset()
        assert not timer.stop()
        assert not timer.start_break()
        assert not timer.skip_break()
        assert not timer.mark_complete()
        assert not timer.tick()
        assert timer.state == TimerState.IDLE
        timer.start()
        assert not timer.start()

    def test_reset_restores_full_time(self):
        timer = StudyTimer(make_session(duration=10))
        timer.start()
        for _ in range(30):
            timer.tick()
        assert timer.reset()
        assert timer.state == TimerState.IDLE
        assert timer.time_left == timer.total_time == 600

    def test_reset_during_break_restores_break_length(self):
        timer = StudyTimer(make_session(duration=1))
        complete_study(timer)
        timer.start_break()
        timer.tick()
        timer.pause()
        assert timer.reset()
        assert timer.mode == TimerMode.BREAK
        assert timer.time_left == timer.total_time == SHORT_BREAK_SECONDS

    def test_stop_returns_to_study(self):
        timer = StudyTimer(make_session(duration=1))
        complete_study(timer)
        timer.start_break()
        timer.tick()
        assert timer.stop()
        assert timer.state == TimerState.IDLE
        assert timer.mode == TimerMode.STUDY
        assert timer.time_left == timer.total_time == 60

    def test_break_end_returns_to_idle_study(self):
        timer = StudyTimer(make_session(duration=1))
        complete_study(timer)
        timer.start_break()
        run_to_zero(timer)
        assert timer.state == TimerState.IDLE
        assert timer.mode == TimerMode.STUDY
        assert timer.time_left == timer.total_time == 60
        assert timer.pomodoro_count == 1

    def test_skip_break_keeps_count(self):
        timer = StudyTimer(make_session(duration=1))
        complete_study(timer)
        assert timer.skip_break()
        assert timer.state == TimerState.IDLE
        assert timer.mode == TimerMode.STUDY
        assert timer.pomodoro_count == 0
        assert timer.time_left == 60


class TestTimerType:
    def test_pomodoro_ignores_session_duration(self):
        for duration in (10, 25, 90):
            timer = StudyTimer(make_session(duration=duration))
            assert timer.select_timer_type("pomodoro")
            assert timer.total_time == POMODORO_STUDY_SECONDS == 1500
            assert timer.time_left == 1500

    def test_cannot_change_type_while_running(self):
        timer = StudyTimer(make_session(duration=10))
        timer.start()
        assert not timer.select_timer_type(TimerType.POMODORO)
        assert timer.timer_type == TimerType.CUSTOM

    def test_changing_type_resets_count(self):
        timer = StudyTimer(make_session(duration=1))
        complete_study(timer)
        timer.start_break()
        run_to_zero(timer)
        assert timer.pomodoro_count == 1
        timer.select_timer_type("pomodoro")
        assert timer.pomodoro_count == 0
        timer.select_timer_type("custom")
        assert timer.time_left == 60

    def test_unknown_type_is_rejected(self):
        timer = StudyTimer(make_session())
        assert timer.select_timer_type("tomato") is False
        assert timer.timer_type == TimerType.CUSTOM
        assert timer.time_left == 3600


class TestBreaks:
    def test_every_fourth_break_is_long(self):
        timer = StudyTimer(make_session(duration=1))
        timer.select_timer_type("pomodoro")
        lengths = []
        for _ in range(8):
            complete_study(timer)
            timer.start_break()
            lengths.append(timer.total_time)
            run_to_zero(timer)
        assert lengths == [300, 300, 300, 900, 300, 300, 300, 900]
        assert timer.pomodoro_count == 8

    def test_fourth_break_after_count_three(self):
        timer = StudyTimer(make_session(duration=1))
        timer.pomodoro_count = 3
        assert timer.next_break_seconds == LONG_BREAK_SECONDS
        complete_study(timer)
        timer.start_break()
        assert timer.pomodoro_count == 4
        assert timer.time_left == timer.total_time == LONG_BREAK_SECONDS

    def test_break_length_helper(self):
        assert [break_length(n) for n in range(5)] == [300, 300, 300, 900, 300]


class TestCompletion:
    def test_mark_complete_invokes_callbacks_in_order(self):
        calls = []
        session = make_session(duration=1)
        timer = StudyTimer(
            session,
            on_complete=lambda sid: calls.append(("complete", sid)),
            on_close=lambda: calls.append(("close",)),
        )
        complete_study(timer)
        assert timer.mark_complete()
        assert calls == [("complete", session.id), ("close",)]
        assert timer.closed

    def test_expiry_does_not_complete_session(self):
        calls = []
        timer = StudyTimer(make_session(duration=1), on_complete=calls.append)
        complete_study(timer)
        assert calls == []

    def test_closed_timer_ignores_events(self):
        closes = []
        timer = StudyTimer(make_session(duration=1), on_close=lambda: closes.append(1))
        timer.close()
        timer.close()
        assert closes == [1]
        assert not timer.start()
        assert timer.state == TimerState.IDLE


def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(65) == "01:05"
    assert format_time(1500) == "25:00"
