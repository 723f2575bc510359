# -*- coding: utf-8 -*-

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from domain.errors import ValidationError
from domain.models import MODES, TimeLogDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSnapshot:
    mode: str  # "work" | "break" | "longBreak"
    elapsed_sec: int
    duration_sec: int
    is_running: bool
    selected_task_id: Optional[str]
    completed_pomodoros: int

    @property
    def remaining_sec(self) -> int:
        return max(0, self.duration_sec - self.elapsed_sec)

    @property
    def progress(self) -> float:
        if self.duration_sec <= 0:
            return 0.0
        return min(1.0, self.elapsed_sec / self.duration_sec)

    @property
    def is_idle(self) -> bool:
        return (not self.is_running) and self.elapsed_sec == 0


@dataclass(frozen=True)
class TickResult:
    snapshot: EngineSnapshot
    log: Optional[TimeLogDraft] = None
    mode_changed: bool = False
    previous_mode: Optional[str] = None


class TimerEngine:
    """
    Pomodoro state machine (no Tkinter, no clock).
    Elapsed time counts up; the caller ticks once per second and passes
    the current epoch second where an instant is needed.
    """

    def __init__(
        self,
        work_sec: int = 25 * 60,
        break_sec: int = 5 * 60,
        long_break_sec: int = 15 * 60,
        long_break_every: int = 4,
    ):
        self.durations: Dict[str, int] = {
            "work": int(work_sec),
            "break": int(break_sec),
            "longBreak": int(long_break_sec),
        }
        self.long_break_every = max(1, int(long_break_every))

        self.mode = "work"
        self.elapsed_sec = 0
        self.is_running = False
        self.selected_task_id: Optional[str] = None
        self.completed_pomodoros = 0
        self.session_start_ts: Optional[int] = None

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            mode=self.mode,
            elapsed_sec=self.elapsed_sec,
            duration_sec=self.durations[self.mode],
            is_running=self.is_running,
            selected_task_id=self.selected_task_id,
            completed_pomodoros=self.completed_pomodoros,
        )

    # ----- configuration (only while stopped) -----
    def select_task(self, task_id: Optional[str]) -> None:
        if self.is_running:
            raise ValidationError("Cannot change task while the timer is running.")
        self.selected_task_id = task_id or None

    def set_duration(self, mode: str, seconds: int) -> None:
        _check_mode(mode)
        if self.is_running:
            raise ValidationError("Cannot change durations while the timer is running.")
        seconds = int(seconds)
        if seconds <= 0:
            raise ValidationError("Duration must be positive.")
        self.durations[mode] = seconds

    def switch_to(self, mode: str) -> bool:
        """Returns False (and changes nothing) while running."""
        _check_mode(mode)
        if self.is_running:
            logger.warning("mode switch to %s ignored while running", mode)
            return False
        self.elapsed_sec = 0
        self.mode = mode
        return True

    # ----- transitions -----
    def start(self, now_ts: int) -> None:
        if self.mode == "work" and not self.selected_task_id:
            raise ValidationError("Task must be selected before starting timer.")
        if not self.is_running:
            self.session_start_ts = int(now_ts)
        self.is_running = True

    def pause(self) -> None:
        self.is_running = False

    def stop(self, now_ts: int) -> Optional[TimeLogDraft]:
        draft = None
        if self.mode == "work" and self.selected_task_id and self.elapsed_sec > 0:
            start_ts = self.session_start_ts if self.session_start_ts is not None else int(now_ts)
            draft = TimeLogDraft(
                task_id=self.selected_task_id,
                start_ts=start_ts,
                end_ts=max(start_ts, int(now_ts)),
                duration=self.elapsed_sec // 60,
            )
        self.reset()
        return draft

    def reset(self) -> None:
        self.elapsed_sec = 0
        self.is_running = False
        self.session_start_ts = None

    def tick(self, now_ts: int) -> TickResult:
        if not self.is_running:
            return TickResult(snapshot=self.snapshot())

        self.elapsed_sec += 1
        if self.elapsed_sec < self.durations[self.mode]:
            return TickResult(snapshot=self.snapshot())

        previous = self.mode
        log = None
        if previous == "work":
            log = self.stop(now_ts)
            self.completed_pomodoros += 1
            if self.completed_pomodoros % self.long_break_every == 0:
                self.mode = "longBreak"
            else:
                self.mode = "break"
        else:
            self.reset()
            self.mode = "work"

        logger.debug(
            "%s finished -> %s (pomodoros=%d)",
            previous,
            self.mode,
            self.completed_pomodoros,
        )
        return TickResult(
            snapshot=self.snapshot(),
            log=log,
            mode_changed=True,
            previous_mode=previous,
        )


def _check_mode(mode: str) -> None:
    if mode not in MODES:
        raise ValidationError(f"Unknown timer mode: {mode!r}.")
