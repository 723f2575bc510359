import pytest

from core.timer_engine import TimerEngine
from domain.errors import ValidationError
from services.timer_service import TimerService
from storage.repos import TaskRepo, TimeLogRepo


class FakeClock:
    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now


def make_service(db, clock, **engine_kwargs):
    return TimerService(
        TimeLogRepo(db),
        TaskRepo(db),
        "u",
        engine=TimerEngine(**engine_kwargs),
        clock=clock,
    )


def tick_n(service, clock, n):
    for _ in range(n):
        clock.now += 1
        service.tick()


def test_start_without_task_is_rejected(db):
    service = make_service(db, FakeClock())
    with pytest.raises(ValidationError):
        service.start()
    assert service.get_snapshot().is_running is False


def test_start_with_unknown_task_is_rejected(db):
    service = make_service(db, FakeClock())
    service.set_active_task("no-such-task")
    with pytest.raises(ValidationError):
        service.start()
    assert service.get_snapshot().is_running is False


def test_finished_pomodoro_is_stored(db):
    task = TaskRepo(db).create("u", "Write report")
    clock = FakeClock()
    service = make_service(db, clock, work_sec=5)

    phases = []
    saved = []
    service.set_on_phase_change(lambda snap, prev: phases.append((prev, snap.mode)))
    service.set_on_log_saved(saved.append)

    service.set_active_task(task.id)
    service.start()
    tick_n(service, clock, 5)

    logs = TimeLogRepo(db).list("u")
    assert len(logs) == 1
    assert logs[0].task_id == task.id
    assert logs[0].duration == 0
    assert logs[0].end_ts - logs[0].start_ts == 5
    assert saved == logs
    assert phases == [("work", "break")]
    assert service.get_snapshot().completed_pomodoros == 1


def test_stop_saves_elapsed_minutes(db):
    task = TaskRepo(db).create("u", "Deep work")
    clock = FakeClock()
    service = make_service(db, clock)

    service.set_active_task(task.id)
    service.start()
    tick_n(service, clock, 185)
    entry = service.stop()

    assert entry is not None
    assert entry.duration == 3
    assert TimeLogRepo(db).total_minutes("u") == 3
    assert service.get_snapshot().is_idle


def test_reset_and_break_sessions_store_nothing(db):
    task = TaskRepo(db).create("u", "Deep work")
    clock = FakeClock()
    service = make_service(db, clock, break_sec=60)

    service.set_active_task(task.id)
    service.start()
    tick_n(service, clock, 120)
    service.reset()

    assert service.switch_mode("break") is True
    service.start()
    tick_n(service, clock, 60)

    assert TimeLogRepo(db).list("u") == []
    assert service.get_snapshot().mode == "work"


def test_switch_mode_refused_while_running(db):
    task = TaskRepo(db).create("u", "Deep work")
    service = make_service(db, FakeClock())
    service.set_active_task(task.id)
    service.start()

    assert service.switch_mode("break") is False
    assert service.get_snapshot().mode == "work"


def test_mark_done_and_stop(db):
    repo = TaskRepo(db)
    task = repo.create("u", "Finish slides", status="inprogress")
    clock = FakeClock()
    service = make_service(db, clock)

    service.set_active_task(task.id)
    service.start()
    tick_n(service, clock, 60)
    entry = service.mark_done_and_stop(task.id)

    assert entry.duration == 1
    assert repo.get(task.id).status == "completed"
    assert service.get_snapshot().is_running is False


def test_state_callbacks_fire(db):
    task = TaskRepo(db).create("u", "Deep work")
    clock = FakeClock()
    service = make_service(db, clock)
    states = []
    ticks = []
    service.set_on_state_change(lambda snap: states.append(snap.is_running))
    service.set_on_tick(lambda snap: ticks.append(snap.elapsed_sec))

    service.set_active_task(task.id)
    service.start()
    tick_n(service, clock, 2)
    service.pause()

    assert states == [False, True, False]
    assert ticks[-3:] == [1, 2, 2]
