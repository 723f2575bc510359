# -*- coding: utf-8 -*-

import datetime as dt
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Any, Dict, Optional

from tkinterweb import HtmlFrame

from core.stats_engine import is_overdue
from domain.errors import ValidationError
from domain.models import PRIORITIES, STATUSES, Task
from services.stats_service import StatsService
from services.task_service import TaskService
from services.timer_service import TimerService
from ui.markdown_renderer import PRIORITY_LABELS, STATUS_LABELS, MarkdownRenderer
from ui.pomodoro_widget import PomodoroWidget
from ui.statistics_view import StatisticsView, fmt_minutes
from ui.task_dialog import TaskDialog

ALL = "all"


class MainWindow:
    def __init__(
        self,
        task_service: TaskService,
        timer_service: TimerService,
        stats_service: StatsService,
        stats_period: str = "week",
    ):
        self.task_service = task_service
        self.timer_service = timer_service
        self.stats_service = stats_service
        self.stats_period = stats_period

        self.root = tk.Tk()
        self.root.title("TaskFlow")
        self.root.geometry("1180x720")

        self._md = MarkdownRenderer()
        self.active_task_id: Optional[str] = self.task_service.get_active_task_id()
        self._list_index_to_task_id: Dict[int, str] = {}

        self._build_ui()
        self._sync_timer_task()
        self._refresh_all()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _build_ui(self):
        root = self.root

        outer = ttk.Frame(root, padding=10)
        outer.pack(fill="both", expand=True)

        outer.columnconfigure(0, weight=1)
        outer.columnconfigure(1, weight=2)
        outer.rowconfigure(0, weight=1)

        # LEFT: Tasks panel
        left = ttk.Labelframe(outer, text="Tasks", padding=10)
        left.grid(row=0, column=0, sticky="nsew", padx=(0, 10))
        left.columnconfigure(0, weight=1)
        left.rowconfigure(2, weight=1)
        left.rowconfigure(5, weight=1)

        filters = ttk.Frame(left)
        filters.grid(row=0, column=0, sticky="ew")
        self.status_filter = tk.StringVar(value=ALL)
        self.priority_filter = tk.StringVar(value=ALL)
        ttk.Label(filters, text="Status:").pack(side="left")
        status_box = ttk.Combobox(
            filters, textvariable=self.status_filter, values=(ALL,) + STATUSES,
            state="readonly", width=10,
        )
        status_box.pack(side="left", padx=(4, 10))
        ttk.Label(filters, text="Priority:").pack(side="left")
        priority_box = ttk.Combobox(
            filters, textvariable=self.priority_filter, values=(ALL,) + PRIORITIES,
            state="readonly", width=8,
        )
        priority_box.pack(side="left", padx=(4, 0))
        for box in (status_box, priority_box):
            box.bind("<<ComboboxSelected>>", lambda e: self._refresh_tasks_only())

        self.err_var = tk.StringVar(value="")
        ttk.Label(left, textvariable=self.err_var, foreground="red").grid(
            row=1, column=0, sticky="w", pady=(6, 6)
        )

        self.task_list = tk.Listbox(left, height=12, exportselection=False)
        self.task_list.grid(row=2, column=0, sticky="nsew")
        self.task_list.bind("<<ListboxSelect>>", self._on_select_task)
        self.task_list.bind("<Double-Button-1>", lambda e: self._edit_task())

        actions = ttk.Frame(left)
        actions.grid(row=3, column=0, sticky="ew", pady=(8, 0))
        ttk.Button(actions, text="+ Add Task", command=self._add_task).pack(side="left")
        ttk.Button(actions, text="Edit", command=self._edit_task).pack(side="left", padx=(6, 0))
        ttk.Button(actions, text="Delete", command=self._delete_task).pack(side="left", padx=(6, 0))

        quick = ttk.Frame(left)
        quick.grid(row=4, column=0, sticky="ew", pady=(6, 6))
        for status in STATUSES:
            ttk.Button(
                quick, text=STATUS_LABELS[status], command=lambda s=status: self._set_status(s)
            ).pack(side="left", padx=(0, 6))

        self.details = HtmlFrame(left, horizontal_scrollbar="auto")
        self.details.grid(row=5, column=0, sticky="nsew")

        # RIGHT: Dashboard / Timer / Statistics
        self.tabs = ttk.Notebook(outer)
        self.tabs.grid(row=0, column=1, sticky="nsew")

        dash = ttk.Frame(self.tabs, padding=10)
        dash.columnconfigure(0, weight=1)
        self.overview_var = tk.StringVar(value="")
        ttk.Label(dash, textvariable=self.overview_var, font=("Sans", 12)).grid(
            row=0, column=0, sticky="w"
        )
        self.today_var = tk.StringVar(value="")
        ttk.Label(dash, textvariable=self.today_var).grid(row=1, column=0, sticky="w", pady=(8, 0))
        self.dash_text = tk.Text(dash, height=16, wrap="word", state="disabled")
        self.dash_text.grid(row=2, column=0, sticky="nsew", pady=(10, 0))
        dash.rowconfigure(2, weight=1)
        self.tabs.add(dash, text="Dashboard")

        timer_tab = ttk.Frame(self.tabs, padding=10)
        self.pomodoro = PomodoroWidget(
            timer_tab,
            timer_service=self.timer_service,
            get_task_title=self._task_title,
            on_request_refresh=self._refresh_stats_only,
        )
        self.pomodoro.pack(fill="x")
        self.tabs.add(timer_tab, text="Timer")

        self.statistics = StatisticsView(self.tabs, self.stats_service, period=self.stats_period)
        self.tabs.add(self.statistics, text="Statistics")

    def run(self):
        self.root.mainloop()

    # ----- Active task helpers -----
    def _task_title(self, task_id: Optional[str]) -> Optional[str]:
        if not task_id:
            return None
        task = self.task_service.get_task(task_id)
        return task.title if task else None

    def _selected_task(self) -> Optional[Task]:
        if not self.active_task_id:
            return None
        return self.task_service.get_task(self.active_task_id)

    def _sync_timer_task(self) -> None:
        """Only open tasks can be timed; the timer keeps its task while running."""
        if self.timer_service.get_snapshot().is_running:
            return
        task = self._selected_task()
        task_id = task.id if task and task.status != "completed" else None
        self.timer_service.set_active_task(task_id)

    def _on_select_task(self, event=None):
        sel = self.task_list.curselection()
        if not sel:
            return
        self.active_task_id = self._list_index_to_task_id.get(int(sel[0]))
        self.task_service.set_active_task_id(self.active_task_id)
        if self.timer_service.get_snapshot().is_running:
            self.err_var.set("Timer is running; it keeps its current task.")
        else:
            self.err_var.set("")
        self._sync_timer_task()
        self._refresh_details()

    # ----- UI actions -----
    def _add_task(self):
        def submit(values: Dict[str, Any]) -> None:
            task = self.task_service.create_task(**values)
            self.active_task_id = task.id
            self.task_service.set_active_task_id(task.id)
            self._sync_timer_task()
            self._refresh_all()

        TaskDialog(self.root, submit)

    def _edit_task(self):
        task = self._selected_task()
        if task is None:
            self.err_var.set("Select a task first.")
            return

        def submit(values: Dict[str, Any]) -> None:
            self.task_service.update_task(task.id, values)
            self._sync_timer_task()
            self._refresh_all()

        TaskDialog(self.root, submit, task=task)

    def _delete_task(self):
        task = self._selected_task()
        if task is None:
            self.err_var.set("Select a task first.")
            return
        if not messagebox.askyesno(
            "Delete task", f'Are you sure you want to delete "{task.title}"?', parent=self.root
        ):
            return
        if self.timer_service.get_snapshot().selected_task_id == task.id:
            self.pomodoro.stop_tick_loop()
            self.timer_service.reset()
        self.task_service.delete_task(task.id)
        self.active_task_id = None
        self._sync_timer_task()
        self._refresh_all()

    def _set_status(self, status: str):
        task = self._selected_task()
        if task is None:
            self.err_var.set("Select a task first.")
            return
        try:
            if status == "completed":
                if self.timer_service.get_snapshot().selected_task_id == task.id:
                    self.pomodoro.stop_tick_loop()
                self.timer_service.mark_done_and_stop(task.id)
            else:
                self.task_service.set_status(task.id, status)
        except ValidationError as e:
            self.err_var.set(str(e))
            return
        self.err_var.set("")
        self._sync_timer_task()
        self._refresh_all()

    # ----- Refresh -----
    def _refresh_all(self):
        self._refresh_tasks_only()
        self._refresh_stats_only()

    def _refresh_tasks_only(self):
        tasks = self.task_service.list_tasks(
            status=self.status_filter.get(), priority=self.priority_filter.get()
        )

        self.task_list.delete(0, tk.END)
        self._list_index_to_task_id.clear()

        today = dt.date.today()
        for i, t in enumerate(tasks):
            label = f"[{STATUS_LABELS[t.status]}] {t.title} ({PRIORITY_LABELS[t.priority]})"
            if t.deadline:
                label += f"  due {t.deadline}"
            self.task_list.insert(tk.END, label)
            if is_overdue(t, today):
                self.task_list.itemconfig(i, foreground="#EF4444")
            self._list_index_to_task_id[i] = t.id
            if t.id == self.active_task_id:
                self.task_list.selection_set(i)
                self.task_list.activate(i)

        self._refresh_details()

    def _refresh_details(self):
        task = self._selected_task()
        logged = self.stats_service.total_task_minutes(task.id) if task else 0
        self.details.load_html(self._md.task_html(task, dt.date.today(), logged))

    def _refresh_stats_only(self):
        ov = self.stats_service.overview()
        self.overview_var.set(
            f"Total tasks: {ov.total_tasks}   Completed: {ov.completed_tasks}   "
            f"In progress: {ov.inprogress_tasks}   To do: {ov.todo_tasks}   "
            f"Total time: {ov.total_hours}h {ov.remaining_minutes}m"
        )
        self.today_var.set(
            f"Logged today: {fmt_minutes(self.stats_service.total_today_minutes())}"
        )

        lines = []
        for heading, tasks in (
            ("Due today", ov.due_today),
            ("Overdue", ov.overdue),
            ("High priority", ov.high_priority),
        ):
            lines.append(f"{heading} ({len(tasks)})")
            lines.extend(f"  - {t.title}" for t in tasks)
            lines.append("")

        self.dash_text.configure(state="normal")
        self.dash_text.delete("1.0", tk.END)
        self.dash_text.insert("1.0", "\n".join(lines))
        self.dash_text.configure(state="disabled")

        self.statistics.refresh()

    def _on_close(self):
        snap = self.timer_service.get_snapshot()
        if snap.mode == "work" and snap.elapsed_sec > 0:
            if messagebox.askyesno(
                "Quit", "Save the current work session before quitting?", parent=self.root
            ):
                self.timer_service.stop()
        self.root.destroy()
