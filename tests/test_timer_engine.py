import pytest

from core.timer_engine import TimerEngine
from domain.errors import ValidationError


def run_ticks(engine, start_ts, n):
    """Tick n times, one second apart; returns all emitted logs."""
    logs = []
    for i in range(1, n + 1):
        result = engine.tick(start_ts + i)
        if result.log is not None:
            logs.append(result.log)
    return logs


def test_start_work_without_task_is_rejected():
    engine = TimerEngine()
    with pytest.raises(ValidationError):
        engine.start(1000)
    assert engine.is_running is False
    assert engine.session_start_ts is None


def test_break_can_start_without_task():
    engine = TimerEngine()
    engine.switch_to("break")
    engine.start(1000)
    assert engine.is_running is True


def test_short_work_session_moves_to_break():
    engine = TimerEngine(work_sec=5)
    engine.select_task("t1")
    engine.start(1000)

    logs = run_ticks(engine, 1000, 5)

    assert len(logs) == 1
    assert logs[0].task_id == "t1"
    assert logs[0].duration == 0
    assert (logs[0].start_ts, logs[0].end_ts) == (1000, 1005)

    snap = engine.snapshot()
    assert snap.mode == "break"
    assert snap.elapsed_sec == 0
    assert snap.is_running is False
    assert snap.completed_pomodoros == 1


def test_transition_result_reports_previous_mode():
    engine = TimerEngine(work_sec=2)
    engine.select_task("t1")
    engine.start(0)

    first = engine.tick(1)
    assert first.mode_changed is False

    second = engine.tick(2)
    assert second.mode_changed is True
    assert second.previous_mode == "work"
    assert second.snapshot.mode == "break"


def test_fourth_pomodoro_goes_to_long_break():
    engine = TimerEngine(work_sec=1, break_sec=1, long_break_sec=1)
    engine.select_task("t1")
    now = 0

    for n in range(1, 5):
        engine.start(now)
        now += 1
        engine.tick(now)
        if n < 4:
            assert engine.mode == "break"
            engine.start(now)
            now += 1
            engine.tick(now)
            assert engine.mode == "work"

    assert engine.completed_pomodoros == 4
    assert engine.mode == "longBreak"

    engine.start(now)
    engine.tick(now + 1)
    assert engine.mode == "work"
    assert engine.is_running is False


def test_break_end_emits_no_log():
    engine = TimerEngine(break_sec=3)
    engine.select_task("t1")
    engine.switch_to("break")
    engine.start(0)

    logs = run_ticks(engine, 0, 3)

    assert logs == []
    assert engine.mode == "work"
    assert engine.completed_pomodoros == 0


def test_stop_emits_whole_minutes():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(100)
    run_ticks(engine, 100, 125)

    draft = engine.stop(400)

    assert draft is not None
    assert draft.duration == 2
    assert (draft.start_ts, draft.end_ts) == (100, 400)
    assert engine.elapsed_sec == 0
    assert engine.is_running is False
    assert engine.session_start_ts is None
    assert engine.mode == "work"


def test_stop_without_elapsed_time_emits_nothing():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(100)
    assert engine.stop(100) is None


def test_stop_in_break_emits_nothing():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.switch_to("break")
    engine.start(0)
    run_ticks(engine, 0, 90)

    assert engine.stop(90) is None
    assert engine.elapsed_sec == 0


def test_reset_never_emits():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(0)
    run_ticks(engine, 0, 120)

    engine.reset()

    assert engine.elapsed_sec == 0
    assert engine.is_running is False
    assert engine.session_start_ts is None


def test_pause_keeps_elapsed_and_ignores_ticks():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(0)
    run_ticks(engine, 0, 10)

    engine.pause()
    result = engine.tick(11)

    assert result.mode_changed is False
    assert engine.elapsed_sec == 10
    assert engine.is_running is False


def test_resume_records_new_start_instant():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(100)
    engine.tick(101)
    engine.start(150)  # already running: kept
    assert engine.session_start_ts == 100

    engine.pause()
    engine.start(200)
    assert engine.session_start_ts == 200
    assert engine.elapsed_sec == 1


def test_switch_is_rejected_while_running():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(0)
    run_ticks(engine, 0, 3)

    assert engine.switch_to("break") is False
    assert engine.mode == "work"
    assert engine.elapsed_sec == 3


def test_switch_resets_elapsed_when_stopped():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(0)
    run_ticks(engine, 0, 3)
    engine.pause()

    assert engine.switch_to("longBreak") is True
    assert engine.mode == "longBreak"
    assert engine.elapsed_sec == 0


def test_configuration_is_locked_while_running():
    engine = TimerEngine()
    engine.select_task("t1")
    engine.start(0)

    with pytest.raises(ValidationError):
        engine.set_duration("work", 60)
    with pytest.raises(ValidationError):
        engine.select_task("t2")
    assert engine.durations["work"] == 1500
    assert engine.selected_task_id == "t1"


def test_set_duration_validation():
    engine = TimerEngine()
    engine.set_duration("longBreak", 1200)
    assert engine.durations["longBreak"] == 1200

    with pytest.raises(ValidationError):
        engine.set_duration("work", 0)
    with pytest.raises(ValidationError):
        engine.set_duration("nap", 60)
    with pytest.raises(ValidationError):
        engine.switch_to("nap")


def test_defaults_and_snapshot():
    engine = TimerEngine()
    assert engine.durations == {"work": 1500, "break": 300, "longBreak": 900}

    engine.select_task("t1")
    engine.start(0)
    run_ticks(engine, 0, 300)
    snap = engine.snapshot()

    assert snap.remaining_sec == 1200
    assert snap.progress == pytest.approx(0.2)
    assert snap.is_idle is False
