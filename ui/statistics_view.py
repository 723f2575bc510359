# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk

from core.stats_engine import productivity_label
from domain.models import PERIODS, StatsView
from services.stats_service import StatsService

SCORE_COLORS = {
    "excellent": "#10B981",
    "good": "#3B82F6",
    "fair": "#F59E0B",
    "low": "#EF4444",
}


def fmt_minutes(minutes: int) -> str:
    h, m = divmod(max(0, int(minutes)), 60)
    return f"{h}h {m}m"


class StatisticsView(ttk.Frame):
    def __init__(self, master, stats_service: StatsService, period: str = "week"):
        super().__init__(master, padding=10)
        self.stats_service = stats_service
        self.period_var = tk.StringVar(value=period)
        self._build_ui()

    def _build_ui(self):
        self.columnconfigure(0, weight=1)
        self.columnconfigure(1, weight=1)
        self.rowconfigure(3, weight=1)

        top = ttk.Frame(self)
        top.grid(row=0, column=0, columnspan=2, sticky="ew")
        ttk.Label(top, text="Period:").pack(side="left")
        period = ttk.Combobox(
            top, textvariable=self.period_var, values=PERIODS, state="readonly", width=8
        )
        period.pack(side="left", padx=(6, 0))
        period.bind("<<ComboboxSelected>>", lambda e: self.refresh())

        self.totals_var = tk.StringVar(value="")
        self.status_var = tk.StringVar(value="")
        self.score_var = tk.StringVar(value="")

        ttk.Label(self, textvariable=self.totals_var, font=("Sans", 11)).grid(
            row=1, column=0, sticky="w", pady=(10, 0)
        )
        ttk.Label(self, textvariable=self.status_var).grid(row=1, column=1, sticky="w", pady=(10, 0))
        self.score_label = ttk.Label(self, textvariable=self.score_var, font=("Sans", 14, "bold"))
        self.score_label.grid(row=2, column=0, columnspan=2, sticky="w", pady=(6, 10))

        tops = ttk.Labelframe(self, text="Top tasks by time", padding=6)
        tops.grid(row=3, column=0, sticky="nsew", padx=(0, 6))
        self.top_tree = ttk.Treeview(tops, columns=("task", "time"), show="headings", height=6)
        self.top_tree.heading("task", text="Task")
        self.top_tree.heading("time", text="Time")
        self.top_tree.column("time", width=80, anchor="e")
        self.top_tree.pack(fill="both", expand=True)

        daily = ttk.Labelframe(self, text="Daily breakdown", padding=6)
        daily.grid(row=3, column=1, sticky="nsew")
        self.daily_tree = ttk.Treeview(daily, columns=("day", "time"), show="headings", height=6)
        self.daily_tree.heading("day", text="Day")
        self.daily_tree.heading("time", text="Time")
        self.daily_tree.column("time", width=80, anchor="e")
        self.daily_tree.pack(fill="both", expand=True)

    def refresh(self):
        self.render(self.stats_service.statistics(self.period_var.get()))

    def render(self, stats: StatsView):
        self.totals_var.set(
            f"Total time: {stats.total_hours}h {stats.remaining_minutes}m"
        )
        self.status_var.set(
            f"Completed: {stats.completed_tasks}   "
            f"In progress: {stats.inprogress_tasks}   "
            f"To do: {stats.todo_tasks}   "
            f"Completion: {stats.completion_rate}%"
        )

        label = productivity_label(stats.productivity_score)
        self.score_var.set(f"Productivity score: {stats.productivity_score} ({label})")
        self.score_label.configure(foreground=SCORE_COLORS[label])

        self.top_tree.delete(*self.top_tree.get_children())
        for top in stats.top_tasks:
            self.top_tree.insert("", tk.END, values=(top.task.title, fmt_minutes(top.minutes)))

        self.daily_tree.delete(*self.daily_tree.get_children())
        for day, minutes in stats.daily_data.items():
            self.daily_tree.insert("", tk.END, values=(day, fmt_minutes(minutes)))
