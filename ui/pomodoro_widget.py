# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import messagebox, ttk
from typing import Callable, Optional

from core.timer_engine import EngineSnapshot
from domain.errors import ValidationError
from domain.models import TimeLogEntry
from services.timer_service import TimerService

MODE_LABELS = {"work": "Focus Time", "break": "Short Break", "longBreak": "Long Break"}


def format_time(seconds: int) -> str:
    m = max(0, seconds) // 60
    s = max(0, seconds) % 60
    return f"{m:02d}:{s:02d}"


class PomodoroWidget(ttk.Frame):
    def __init__(
        self,
        master,
        timer_service: TimerService,
        get_task_title: Callable[[Optional[str]], Optional[str]],
        on_request_refresh: Callable[[], None],
    ):
        super().__init__(master)

        self.timer_service = timer_service
        self.get_task_title = get_task_title
        self.on_request_refresh = on_request_refresh

        self._tick_job = None

        self._build_ui()

        # wire callbacks from service -> widget UI
        self.timer_service.set_on_tick(self._on_tick)
        self.timer_service.set_on_phase_change(self._on_phase_change)
        self.timer_service.set_on_state_change(self._on_state_change)
        self.timer_service.set_on_log_saved(self._on_log_saved)

        self._render(self.timer_service.get_snapshot())

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        modes = ttk.Frame(self)
        modes.grid(row=0, column=0, sticky="w", pady=(0, 8))
        self.mode_btns = {}
        for i, (mode, label) in enumerate((("work", "Work"), ("break", "Break"), ("longBreak", "Long Break"))):
            btn = ttk.Button(modes, text=label, command=lambda m=mode: self._switch(m))
            btn.grid(row=0, column=i, padx=(0, 6))
            self.mode_btns[mode] = btn

        self.phase_var = tk.StringVar(value=MODE_LABELS["work"])
        self.time_var = tk.StringVar(value="00:00")
        self.task_var = tk.StringVar(value="No task selected")
        self.info_var = tk.StringVar(value="")
        self.count_var = tk.StringVar(value="")

        ttk.Label(self, textvariable=self.phase_var, font=("Sans", 12, "bold")).grid(
            row=1, column=0, sticky="w"
        )
        ttk.Label(self, textvariable=self.time_var, font=("Sans", 32, "bold")).grid(
            row=2, column=0, sticky="w", pady=(8, 4)
        )

        self.progress = ttk.Progressbar(self, maximum=100.0, mode="determinate")
        self.progress.grid(row=3, column=0, sticky="ew", pady=(0, 6))

        ttk.Label(self, textvariable=self.task_var).grid(row=4, column=0, sticky="w")
        ttk.Label(self, textvariable=self.info_var, foreground="#6B7280").grid(
            row=5, column=0, sticky="w", pady=(0, 10)
        )

        btns = ttk.Frame(self)
        btns.grid(row=6, column=0, sticky="w")

        self.start_btn = ttk.Button(btns, text="Start", command=self._start)
        self.pause_btn = ttk.Button(btns, text="Pause", command=self._pause)
        self.stop_btn = ttk.Button(btns, text="Stop & Save", command=self._stop)
        self.reset_btn = ttk.Button(btns, text="Reset", command=self._reset)

        self.start_btn.grid(row=0, column=0, padx=(0, 6))
        self.pause_btn.grid(row=0, column=1, padx=(0, 6))
        self.stop_btn.grid(row=0, column=2, padx=(0, 6))
        self.reset_btn.grid(row=0, column=3)

        ttk.Label(self, textvariable=self.count_var).grid(row=7, column=0, sticky="w", pady=(8, 0))

        # durations (minutes)
        settings = ttk.Labelframe(self, text="Durations (min)", padding=8)
        settings.grid(row=8, column=0, sticky="ew", pady=(10, 0))

        durations = self.timer_service.engine.durations
        self.duration_vars = {}
        self.duration_spins = []
        for i, (mode, label) in enumerate((("work", "Work"), ("break", "Break"), ("longBreak", "Long"))):
            ttk.Label(settings, text=label).grid(row=0, column=i * 2, sticky="w", padx=(0, 4))
            var = tk.StringVar(value=str(durations[mode] // 60))
            spin = ttk.Spinbox(settings, from_=1, to=180, width=5, textvariable=var)
            spin.grid(row=0, column=i * 2 + 1, padx=(0, 10))
            self.duration_vars[mode] = var
            self.duration_spins.append(spin)
        self.apply_btn = ttk.Button(settings, text="Apply", command=self._apply_durations)
        self.apply_btn.grid(row=0, column=6)

    def _update_buttons(self, snap: EngineSnapshot):
        running = snap.is_running
        can_start = not running and (snap.mode != "work" or bool(snap.selected_task_id))

        self.start_btn.state(["!disabled"] if can_start else ["disabled"])
        self.pause_btn.state(["!disabled"] if running else ["disabled"])
        self.stop_btn.state(["disabled"] if snap.is_idle else ["!disabled"])
        self.reset_btn.state(["disabled"] if snap.is_idle else ["!disabled"])

        for btn in self.mode_btns.values():
            btn.state(["disabled"] if running else ["!disabled"])
        for w in self.duration_spins + [self.apply_btn]:
            w.state(["disabled"] if running else ["!disabled"])

    # ---- actions ----
    def _start(self):
        try:
            self.timer_service.start()
        except ValidationError as e:
            self.info_var.set(str(e))
            return
        self._ensure_tick_loop()
        self.on_request_refresh()

    def _pause(self):
        self.stop_tick_loop()
        self.timer_service.pause()
        self.on_request_refresh()

    def _stop(self):
        self.stop_tick_loop()
        self.timer_service.stop()
        self.on_request_refresh()

    def _reset(self):
        self.stop_tick_loop()
        self.timer_service.reset()
        self.on_request_refresh()

    def _switch(self, mode: str):
        if not self.timer_service.switch_mode(mode):
            self.info_var.set("Pause the timer before switching mode.")

    def _apply_durations(self):
        try:
            for mode, var in self.duration_vars.items():
                try:
                    minutes = int(var.get())
                except ValueError:
                    raise ValidationError("Durations must be whole minutes.")
                self.timer_service.set_duration(mode, minutes * 60)
        except ValidationError as e:
            self.info_var.set(str(e))
            return
        self.info_var.set("Durations updated.")

    # ---- Tick loop (UI-driven) ----
    def _ensure_tick_loop(self):
        if self._tick_job is None:
            self._tick_job = self.after(1000, self._tick_once)

    def stop_tick_loop(self):
        if self._tick_job is not None:
            self.after_cancel(self._tick_job)
            self._tick_job = None

    def _tick_once(self):
        self._tick_job = None
        if self.timer_service.get_snapshot().is_running:
            self.timer_service.tick()
            if self.timer_service.get_snapshot().is_running:
                self._tick_job = self.after(1000, self._tick_once)

    # ---- Service callbacks ----
    def _on_tick(self, snap: EngineSnapshot):
        self._render(snap)

    def _on_phase_change(self, snap: EngineSnapshot, previous_mode: str):
        self.stop_tick_loop()
        self._render(snap)
        if previous_mode == "work":
            if snap.mode == "longBreak":
                text = "Great work! Time for a long break!"
            else:
                text = "Pomodoro complete! Time for a short break!"
        elif previous_mode == "longBreak":
            text = "Long break over! Ready to continue?"
        else:
            text = "Break over! Ready for another pomodoro?"
        self.info_var.set(text)
        self.on_request_refresh()
        messagebox.showinfo("Pomodoro", text, parent=self.winfo_toplevel())

    def _on_state_change(self, snap: EngineSnapshot):
        self._render(snap)

    def _on_log_saved(self, entry: TimeLogEntry):
        title = self.get_task_title(entry.task_id) or "(deleted task)"
        self.info_var.set(f'Logged {entry.duration} minutes for "{title}"')
        self.on_request_refresh()

    def _render(self, snap: EngineSnapshot):
        self.time_var.set(format_time(snap.elapsed_sec))
        self.phase_var.set(MODE_LABELS.get(snap.mode, snap.mode))
        self.progress["value"] = snap.progress * 100.0

        title = self.get_task_title(snap.selected_task_id)
        self.task_var.set(f"Task: {title}" if title else "No task selected")

        if snap.completed_pomodoros:
            self.count_var.set(f"Pomodoros completed: {snap.completed_pomodoros}")
        else:
            self.count_var.set("")

        self._update_buttons(snap)
