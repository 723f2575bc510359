# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Dict, Optional

from domain.errors import ValidationError
from domain.models import PRIORITIES, STATUSES, Task


class TaskDialog:
    """Modal add / edit form. `on_submit` gets the field dict and may raise ValidationError."""

    def __init__(
        self,
        master,
        on_submit: Callable[[Dict[str, Any]], None],
        task: Optional[Task] = None,
    ):
        self.on_submit = on_submit

        self.win = tk.Toplevel(master)
        self.win.title("Edit Task" if task else "Add New Task")
        self.win.transient(master)
        self.win.resizable(False, False)

        self.title_var = tk.StringVar(value=task.title if task else "")
        self.priority_var = tk.StringVar(value=task.priority if task else "medium")
        self.status_var = tk.StringVar(value=task.status if task else "todo")
        self.deadline_var = tk.StringVar(value=(task.deadline or "") if task else "")
        self.err_var = tk.StringVar(value="")

        frm = ttk.Frame(self.win, padding=12)
        frm.pack(fill="both", expand=True)
        frm.columnconfigure(1, weight=1)

        ttk.Label(frm, text="Title").grid(row=0, column=0, sticky="w")
        title_entry = ttk.Entry(frm, textvariable=self.title_var, width=40)
        title_entry.grid(row=0, column=1, sticky="ew", pady=3)

        ttk.Label(frm, text="Description (Markdown)").grid(row=1, column=0, sticky="nw")
        self.desc = tk.Text(frm, width=40, height=8, wrap="word")
        self.desc.grid(row=1, column=1, sticky="ew", pady=3)
        if task and task.description:
            self.desc.insert("1.0", task.description)

        ttk.Label(frm, text="Priority").grid(row=2, column=0, sticky="w")
        ttk.Combobox(
            frm, textvariable=self.priority_var, values=PRIORITIES, state="readonly"
        ).grid(row=2, column=1, sticky="w", pady=3)

        ttk.Label(frm, text="Status").grid(row=3, column=0, sticky="w")
        ttk.Combobox(
            frm, textvariable=self.status_var, values=STATUSES, state="readonly"
        ).grid(row=3, column=1, sticky="w", pady=3)

        ttk.Label(frm, text="Deadline (YYYY-MM-DD)").grid(row=4, column=0, sticky="w")
        ttk.Entry(frm, textvariable=self.deadline_var, width=14).grid(
            row=4, column=1, sticky="w", pady=3
        )

        ttk.Label(frm, textvariable=self.err_var, foreground="red").grid(
            row=5, column=0, columnspan=2, sticky="w", pady=(6, 0)
        )

        btns = ttk.Frame(frm)
        btns.grid(row=6, column=0, columnspan=2, sticky="e", pady=(8, 0))
        ttk.Button(btns, text="Cancel", command=self.win.destroy).pack(side="right")
        ttk.Button(
            btns, text="Update Task" if task else "Create Task", command=self._submit
        ).pack(side="right", padx=(0, 6))

        self.win.bind("<Escape>", lambda e: self.win.destroy())
        title_entry.focus_set()
        self.win.grab_set()

    def values(self) -> Dict[str, Any]:
        return {
            "title": self.title_var.get(),
            "description": self.desc.get("1.0", "end-1c"),
            "priority": self.priority_var.get(),
            "status": self.status_var.get(),
            "deadline": self.deadline_var.get() or None,
        }

    def _submit(self):
        try:
            self.on_submit(self.values())
        except ValidationError as e:
            self.err_var.set(str(e))
            return
        self.win.destroy()
