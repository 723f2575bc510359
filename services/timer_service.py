# -*- coding: utf-8 -*-

import logging
import time
from typing import Callable, Optional

from core.timer_engine import EngineSnapshot, TickResult, TimerEngine
from domain.errors import ValidationError
from domain.models import TimeLogDraft, TimeLogEntry
from storage.repos import TaskRepo, TimeLogRepo

logger = logging.getLogger(__name__)


def _now_ts() -> int:
    return int(time.time())


class TimerService:
    """
    Orchestrates:
    - TimerEngine state
    - SQLite time logging for finished work sessions
    - Task status on "done" from the timer
    - Callbacks for UI
    """

    def __init__(
        self,
        log_repo: TimeLogRepo,
        task_repo: TaskRepo,
        user_id: str,
        engine: Optional[TimerEngine] = None,
        clock: Callable[[], int] = _now_ts,
    ):
        self.log_repo = log_repo
        self.task_repo = task_repo
        self.user_id = user_id
        self.clock = clock

        self.engine = engine or TimerEngine()

        self._on_tick: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_phase_change: Optional[Callable[[EngineSnapshot, str], None]] = None
        self._on_state_change: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_log_saved: Optional[Callable[[TimeLogEntry], None]] = None

    # ----- Callbacks -----
    def set_on_tick(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_tick = fn

    def set_on_phase_change(self, fn: Callable[[EngineSnapshot, str], None]) -> None:
        self._on_phase_change = fn

    def set_on_state_change(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_state_change = fn

    def set_on_log_saved(self, fn: Callable[[TimeLogEntry], None]) -> None:
        self._on_log_saved = fn

    def _emit_tick(self) -> None:
        if self._on_tick:
            self._on_tick(self.engine.snapshot())

    def _emit_phase_change(self, previous_mode: str) -> None:
        if self._on_phase_change:
            self._on_phase_change(self.engine.snapshot(), previous_mode)

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.engine.snapshot())

    # ----- Public API -----
    def get_snapshot(self) -> EngineSnapshot:
        return self.engine.snapshot()

    def set_active_task(self, task_id: Optional[str]) -> None:
        self.engine.select_task(task_id)
        self._emit_state_change()

    def set_duration(self, mode: str, seconds: int) -> None:
        self.engine.set_duration(mode, seconds)
        self._emit_state_change()

    def switch_mode(self, mode: str) -> bool:
        switched = self.engine.switch_to(mode)
        if switched:
            self._emit_state_change()
        return switched

    def start(self) -> None:
        snap = self.engine.snapshot()
        if snap.mode == "work":
            task = self.task_repo.get(snap.selected_task_id) if snap.selected_task_id else None
            if task is None:
                logger.warning("start rejected: no task selected")
                raise ValidationError("Task must be selected before starting timer.")

        self.engine.start(self.clock())
        logger.debug("timer started in %s mode", snap.mode)
        self._emit_state_change()
        self._emit_tick()

    def pause(self) -> None:
        self.engine.pause()
        self._emit_state_change()
        self._emit_tick()

    def stop(self) -> Optional[TimeLogEntry]:
        """Stop & save: ends the session and stores a time log when eligible."""
        entry = self._save(self.engine.stop(self.clock()))
        self._emit_state_change()
        self._emit_tick()
        return entry

    def reset(self) -> None:
        self.engine.reset()
        self._emit_state_change()
        self._emit_tick()

    def mark_done_and_stop(self, task_id: str) -> Optional[TimeLogEntry]:
        entry = None
        if self.engine.selected_task_id == task_id:
            entry = self.stop()
        self.task_repo.update(task_id, {"status": "completed"})
        return entry

    def tick(self) -> TickResult:
        """
        Should be called once per second by the UI loop.
        Stores the time log of a finished work session and reports mode changes.
        """
        result = self.engine.tick(self.clock())

        self._emit_tick()

        if result.log is not None:
            self._save(result.log)
        if result.mode_changed:
            self._emit_phase_change(result.previous_mode)

        return result

    # ----- Time log persistence -----
    def _save(self, draft: Optional[TimeLogDraft]) -> Optional[TimeLogEntry]:
        if draft is None:
            return None
        entry = self.log_repo.create(self.user_id, draft)
        logger.info(
            "logged %d min for task %s (%s)", entry.duration, entry.task_id, entry.id
        )
        if self._on_log_saved:
            self._on_log_saved(entry)
        return entry
