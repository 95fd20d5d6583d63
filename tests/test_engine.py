"""Tests for the StudyScrum timer engine.

Covers: pause/resume accounting, drift-free elapsed time across stalled
polls, mode switching rules, completion thresholds, finish/skip
transitions, session emission, target-minute clamping and restoring a
running timer.
"""

import pytest

from studyscrum.state import SessionType, TimerMode, TimerState, date_key
from studyscrum.timer.engine import TimerEngine, elapsed_seconds, target_seconds

from helpers import FakeClock, SignalCollector


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state(self, engine):
        state = engine.get_state()
        assert state.mode == TimerMode.COUNTDOWN
        assert state.is_paused is True
        assert state.accumulated_seconds == 0
        assert state.last_start_time is None
        assert (state.study_minutes, state.break_minutes) == (25, 5)

    def test_resume_stamps_start_time(self, engine, clock):
        state = engine.resume()
        assert state.is_paused is False
        assert state.last_start_time == clock.now
        assert engine.is_polling

    def test_pause_banks_elapsed(self, engine, clock):
        engine.resume()
        clock.advance(42.5)
        state = engine.pause()
        assert state.is_paused is True
        assert state.last_start_time is None
        assert state.accumulated_seconds == pytest.approx(42.5)
        assert not engine.is_polling

    def test_resume_is_noop_when_running(self, engine, clock):
        engine.resume()
        started = engine.get_state().last_start_time
        clock.advance(10)
        engine.resume()
        assert engine.get_state().last_start_time == started

    def test_pause_is_noop_when_paused(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)
        before = engine.get_state()
        assert engine.pause() == before
        assert len(c) == 0

    def test_state_changed_fires_on_transitions(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)

        engine.resume()
        assert c.last.is_paused is False

        engine.pause()
        assert c.last.is_paused is True
        assert len(c) == 2

    def test_get_state_is_a_detached_copy(self, engine):
        snapshot = engine.get_state()
        snapshot.mode = TimerMode.BREAK
        snapshot.accumulated_seconds = 999
        assert engine.mode == TimerMode.COUNTDOWN
        assert engine.compute_elapsed() == 0

    def test_engine_mutates_the_shared_state(self, qapp, clock):
        shared = TimerState()
        engine = TimerEngine(shared, clock=clock)
        engine.resume()
        assert shared.is_paused is False
        assert shared.last_start_time == clock.now


# ═══════════════════════════════════════════════════════════════════════════
#  ELAPSED TIME
# ═══════════════════════════════════════════════════════════════════════════


class TestElapsed:

    def test_pause_resume_cycle_adds_exact_wall_delta(self, engine, clock):
        engine.resume()
        clock.advance(12.25)
        engine.pause()
        before = engine.compute_elapsed()

        clock.advance(300)  # paused time is never counted
        engine.resume()
        clock.advance(7.5)
        engine.pause()

        assert engine.compute_elapsed() == pytest.approx(before + 7.5)

    def test_many_cycles_never_drift(self, engine, clock):
        expected = 0.0
        for run in (0.3, 1.7, 59.9, 0.001, 120.0):
            engine.resume()
            clock.advance(run)
            engine.pause()
            expected += run
            clock.advance(5)
        assert engine.compute_elapsed() == pytest.approx(expected)

    def test_stalled_polling_loses_nothing(self, engine, clock):
        engine.switch_mode(TimerMode.STOPWATCH)
        engine.resume()
        clock.advance(3600)  # no ticks at all, e.g. a sleeping laptop
        assert engine.compute_elapsed() == pytest.approx(3600)
        assert engine.display_seconds() == 3600

    def test_running_elapsed_includes_live_segment(self, engine, clock):
        engine.resume()
        clock.advance(10)
        engine.pause()
        engine.resume()
        clock.advance(2.5)
        assert engine.compute_elapsed() == pytest.approx(12.5)

    def test_compute_elapsed_accepts_explicit_now(self, engine, clock):
        engine.resume()
        assert engine.compute_elapsed(clock.now + 4_000) == pytest.approx(4.0)

    def test_clock_going_backwards_never_goes_negative(self, engine, clock):
        engine.resume()
        assert engine.compute_elapsed(clock.now - 5_000) == 0

    def test_pure_helpers(self):
        state = TimerState(is_paused=False, accumulated_seconds=5,
                           last_start_time=1_000.0)
        assert elapsed_seconds(state, 3_000.0) == pytest.approx(7.0)
        assert target_seconds(state) == 1500
        state.mode = TimerMode.STOPWATCH
        assert target_seconds(state) is None


# ═══════════════════════════════════════════════════════════════════════════
#  DISPLAY
# ═══════════════════════════════════════════════════════════════════════════


class TestDisplay:

    def test_countdown_shows_floored_remaining(self, engine, clock):
        engine.resume()
        clock.advance(10.6)
        assert engine.display_seconds() == 1489

    def test_display_never_negative(self, engine, clock):
        engine.resume()
        clock.advance(2000)
        assert engine.display_seconds() == 0

    def test_break_counts_down_from_break_minutes(self, engine, clock):
        engine.switch_mode(TimerMode.BREAK)
        engine.resume()
        clock.advance(60)
        assert engine.display_seconds() == 240

    def test_progress(self, engine, clock):
        assert engine.progress() == pytest.approx(1.0)
        engine.resume()
        clock.advance(750)
        assert engine.progress() == pytest.approx(0.5)
        engine.pause()
        engine.switch_mode(TimerMode.STOPWATCH)
        assert engine.progress() == 1.0


# ═══════════════════════════════════════════════════════════════════════════
#  MODE SWITCHING
# ═══════════════════════════════════════════════════════════════════════════


class TestSwitchMode:

    def test_switch_while_running_is_noop(self, engine, clock):
        engine.resume()
        clock.advance(5)
        before = engine.get_state()
        c = SignalCollector()
        engine.state_changed.connect(c)

        after = engine.switch_mode(TimerMode.STOPWATCH)

        assert after == before
        assert engine.get_state() == before
        assert len(c) == 0

    def test_switch_while_paused_resets_progress(self, engine, clock):
        engine.resume()
        clock.advance(30)
        engine.pause()

        state = engine.switch_mode(TimerMode.STOPWATCH)

        assert state.mode == TimerMode.STOPWATCH
        assert state.accumulated_seconds == 0
        assert state.is_paused is True
        assert state.last_start_time is None

    def test_switch_to_same_mode_still_resets(self, engine, clock):
        engine.resume()
        clock.advance(30)
        engine.pause()
        assert engine.switch_mode(TimerMode.COUNTDOWN).accumulated_seconds == 0

    def test_switch_keeps_targets(self, engine):
        engine.set_target_minutes(TimerMode.COUNTDOWN, 50)
        engine.switch_mode(TimerMode.BREAK)
        assert engine.get_state().study_minutes == 50

    def test_switch_does_not_log_a_session(self, engine, clock):
        c = SignalCollector()
        engine.session_logged.connect(c)
        engine.resume()
        clock.advance(600)
        engine.pause()
        engine.switch_mode(TimerMode.BREAK)
        assert len(c) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_countdown_completes_exactly_at_target(self, engine, clock):
        engine.resume()
        clock.advance(ms=1_499_999)
        assert engine.check_completion() is False
        clock.advance(ms=1)
        assert engine.compute_elapsed() == pytest.approx(1500)
        assert engine.check_completion() is True

    def test_break_uses_break_minutes(self, engine, clock):
        engine.switch_mode(TimerMode.BREAK)
        engine.resume()
        clock.advance(299)
        assert engine.check_completion() is False
        clock.advance(1)
        assert engine.check_completion() is True

    def test_stopwatch_never_completes(self, engine, clock):
        engine.switch_mode(TimerMode.STOPWATCH)
        engine.resume()
        clock.advance(24 * 3600)
        assert engine.check_completion() is False

    def test_tick_auto_finishes_at_zero(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        engine.set_target_minutes(TimerMode.COUNTDOWN, 1)
        engine.resume()

        clock.advance(59)
        engine._on_tick()
        assert len(sessions) == 0

        clock.advance(1)
        engine._on_tick()
        assert len(sessions) == 1
        assert sessions.last.type == SessionType.STUDY
        assert sessions.last.duration == pytest.approx(60)
        assert engine.mode == TimerMode.BREAK
        assert engine.is_paused

    def test_tick_emits_display_seconds(self, engine, clock):
        ticks = SignalCollector()
        engine.tick.connect(ticks)
        engine.resume()
        clock.advance(10.6)
        engine._on_tick()
        assert ticks.last == 1489

    def test_paused_tick_does_not_finish(self, engine, clock):
        engine.set_target_minutes(TimerMode.COUNTDOWN, 1)
        engine.resume()
        clock.advance(61)
        engine.pause()
        engine.refresh()
        assert engine.mode == TimerMode.COUNTDOWN

    def test_refresh_after_backgrounding_finishes_overdue_run(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        engine.resume()
        clock.advance(2 * 3600)  # window hidden, no ticks delivered
        engine.refresh()
        assert len(sessions) == 1
        assert sessions.last.duration == pytest.approx(7200)


# ═══════════════════════════════════════════════════════════════════════════
#  FINISH / SKIP
# ═══════════════════════════════════════════════════════════════════════════


class TestFinish:

    def test_finish_countdown_logs_study_and_offers_break(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        engine.resume()
        clock.advance(600)
        expected = engine.compute_elapsed()

        state = engine.finish()

        assert len(sessions) == 1
        session = sessions.last
        assert session.type == SessionType.STUDY
        assert session.duration == pytest.approx(expected)
        assert session.date == date_key(clock.now)
        assert session.start_time == clock.now
        assert state.mode == TimerMode.BREAK
        assert state.is_paused is True
        assert state.accumulated_seconds == 0
        assert state.last_start_time is None
        assert not engine.is_polling

    def test_finish_stopwatch_logs_study_and_offers_break(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        engine.switch_mode(TimerMode.STOPWATCH)
        engine.resume()
        clock.advance(95)
        engine.pause()

        state = engine.finish()

        assert len(sessions) == 1
        assert sessions.last.type == SessionType.STUDY
        assert sessions.last.duration == pytest.approx(95)
        assert state.mode == TimerMode.BREAK

    def test_finish_break_logs_break_and_returns_to_countdown(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        engine.switch_mode(TimerMode.BREAK)
        engine.resume()
        clock.advance(120)

        state = engine.finish()

        assert len(sessions) == 1
        assert sessions.last.type == SessionType.BREAK
        assert sessions.last.duration == pytest.approx(120)
        assert state.mode == TimerMode.COUNTDOWN
        assert state.is_paused is True
        assert state.accumulated_seconds == 0

    def test_each_finish_emits_a_distinct_session(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        for _ in range(3):
            engine.resume()
            clock.advance(30)
            engine.finish()
        assert len(sessions) == 3
        assert len({s.id for s in sessions.items}) == 3
        assert [s.type for s in sessions.items] == [
            SessionType.STUDY, SessionType.BREAK, SessionType.STUDY,
        ]

    def test_finish_keeps_targets(self, engine, clock):
        engine.set_target_minutes(TimerMode.COUNTDOWN, 40)
        engine.set_target_minutes(TimerMode.BREAK, 10)
        engine.resume()
        clock.advance(5)
        state = engine.finish()
        assert (state.study_minutes, state.break_minutes) == (40, 10)

    def test_skip_break_returns_to_countdown_without_logging(self, engine, clock):
        sessions = SignalCollector()
        engine.session_logged.connect(sessions)
        engine.switch_mode(TimerMode.BREAK)
        engine.resume()
        clock.advance(100)

        state = engine.skip_break()

        assert len(sessions) == 0
        assert state.mode == TimerMode.COUNTDOWN
        assert state.is_paused is True
        assert state.accumulated_seconds == 0
        assert not engine.is_polling


# ═══════════════════════════════════════════════════════════════════════════
#  TARGET MINUTES
# ═══════════════════════════════════════════════════════════════════════════


class TestTargetMinutes:

    @pytest.mark.parametrize("given, expected", [
        (45, 45), (0, 1), (-10, 1), (500, 180), ("30", 30), ("abc", 1), (None, 1),
        (float("inf"), 180), (float("-inf"), 1), (float("nan"), 1),
    ])
    def test_study_minutes_are_clamped(self, engine, given, expected):
        assert engine.set_target_minutes(TimerMode.COUNTDOWN, given).study_minutes == expected

    def test_break_minutes(self, engine):
        state = engine.set_target_minutes(TimerMode.BREAK, 15)
        assert state.break_minutes == 15
        assert state.study_minutes == 25

    def test_stopwatch_has_no_target(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)
        before = engine.get_state()
        assert engine.set_target_minutes(TimerMode.STOPWATCH, 99) == before
        assert len(c) == 0

    def test_custom_bounds(self, qapp, clock):
        engine = TimerEngine(clock=clock, min_minutes=5, max_minutes=60)
        assert engine.target_bounds == (5, 60)
        assert engine.set_target_minutes(TimerMode.COUNTDOWN, 2).study_minutes == 5
        assert engine.set_target_minutes(TimerMode.COUNTDOWN, 90).study_minutes == 60


# ═══════════════════════════════════════════════════════════════════════════
#  RESTORE
# ═══════════════════════════════════════════════════════════════════════════


class TestRestore:

    def test_running_state_keeps_counting_from_stored_start(self, qapp):
        clock = FakeClock()
        state = TimerState(
            mode=TimerMode.STOPWATCH,
            is_paused=False,
            accumulated_seconds=10,
            last_start_time=clock.now - 90_000,
        )
        engine = TimerEngine(state, clock=clock)
        assert engine.is_polling
        assert engine.compute_elapsed() == pytest.approx(100)

    def test_paused_state_does_not_poll(self, qapp, clock):
        engine = TimerEngine(TimerState(accumulated_seconds=30), clock=clock)
        assert not engine.is_polling
        assert engine.compute_elapsed() == 30

    def test_stored_targets_are_clamped_to_bounds(self, qapp, clock):
        state = TimerState(study_minutes=500, break_minutes=-3)
        engine = TimerEngine(state, clock=clock, min_minutes=5, max_minutes=60)
        assert state.study_minutes == 60
        assert state.break_minutes == 5
        assert engine.get_state().study_minutes == 60

    def test_zero_stored_target_does_not_complete_on_resume(self, qapp, clock):
        engine = TimerEngine(TimerState(study_minutes=0), clock=clock)
        c = SignalCollector()
        engine.session_logged.connect(c)
        engine.resume()
        assert not engine.check_completion()
        engine.refresh()
        assert len(c) == 0
        assert engine.mode == TimerMode.COUNTDOWN
