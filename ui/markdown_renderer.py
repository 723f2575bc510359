# ui/markdown_renderer.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt
import html
import re
from dataclasses import dataclass
from typing import List, Optional

from markdown import markdown

from core.stats_engine import parse_deadline
from domain.models import Task

PRIORITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High"}
STATUS_LABELS = {"todo": "To Do", "inprogress": "In Progress", "completed": "Completed"}


@dataclass(frozen=True)
class MarkdownTheme:
    text: str = "#111827"
    muted: str = "#6B7280"
    border: str = "#E5E7EB"
    panel: str = "#FFFFFF"
    codebg: str = "#F3F4F6"
    link: str = "#2563EB"
    danger: str = "#EF4444"
    low: str = "#10B981"
    medium: str = "#F59E0B"
    high: str = "#EF4444"


def due_info(task: Task, today: dt.date) -> str:
    due = parse_deadline(task.deadline)
    if due is None:
        return "No deadline."
    days_until = (due - today).days
    if days_until == 0:
        return "Due today."
    if days_until > 0:
        return f"Due in {days_until} day(s)."
    if task.status == "completed":
        return f"Was due {due.isoformat()}."
    return f"Overdue by {abs(days_until)} day(s)."


class MarkdownRenderer:
    """
    Task detail card for the tkinterweb HtmlFrame:
    header (title, priority, status, deadline) + description as Markdown.

    tkhtml only understands simple HTML, so task-list checkboxes are turned
    into unicode boxes before conversion.
    """

    _unchecked = re.compile(r"^(\s*[-*+]\s+)\[ \]\s+")
    _checked = re.compile(r"^(\s*[-*+]\s+)\[(x|X)\]\s+")

    def __init__(self, theme: Optional[MarkdownTheme] = None):
        self.theme = theme or MarkdownTheme()

    def preprocess(self, md_text: str) -> str:
        if not md_text:
            return ""
        out: List[str] = []
        for line in md_text.splitlines():
            line = self._checked.sub("\\1\u2611 ", line)
            line = self._unchecked.sub("\\1\u2610 ", line)
            out.append(line)
        return "\n".join(out)

    def description_html(self, md_text: str) -> str:
        return markdown(
            self.preprocess(md_text or ""),
            extensions=["extra", "sane_lists", "nl2br"],
            output_format="html5",
        )

    def css(self) -> str:
        t = self.theme
        return f"""
        body {{
          font-family: -apple-system, "Segoe UI", Roboto, Arial, sans-serif;
          margin: 14px;
          color: {t.text};
          background: {t.panel};
          font-size: 14px;
          line-height: 1.5;
        }}
        h1 {{ font-size: 1.3em; margin: 0 0 0.4em; }}
        h1.done {{ text-decoration: line-through; color: {t.muted}; }}
        .meta {{ color: {t.muted}; margin-bottom: 0.8em; }}
        .badge {{ padding: 2px 8px; border-radius: 8px; border: 1px solid {t.border}; }}
        .priority-low {{ color: {t.low}; }}
        .priority-medium {{ color: {t.medium}; }}
        .priority-high {{ color: {t.high}; }}
        .overdue {{ color: {t.danger}; font-weight: 700; }}
        .empty {{ color: {t.muted}; font-style: italic; }}
        code {{ background: {t.codebg}; padding: 2px 5px; border-radius: 6px; }}
        pre {{ background: {t.codebg}; padding: 10px 12px; border: 1px solid {t.border}; }}
        a {{ color: {t.link}; }}
        """

    def page(self, body: str) -> str:
        return f"""
        <html>
          <head>
            <meta charset="utf-8"/>
            <style>{self.css()}</style>
          </head>
          <body>{body}</body>
        </html>
        """

    def task_html(self, task: Optional[Task], today: dt.date, logged_minutes: int = 0) -> str:
        if task is None:
            return self.page('<p class="empty">Select a task to see its details.</p>')

        info = due_info(task, today)
        due_cls = "overdue" if info.startswith("Overdue") else ""
        hours, minutes = divmod(max(0, logged_minutes), 60)
        title_cls = "done" if task.status == "completed" else ""

        desc = self.description_html(task.description)
        if not desc.strip():
            desc = '<p class="empty">No description.</p>'

        body = f"""
        <h1 class="{title_cls}">{html.escape(task.title)}</h1>
        <div class="meta">
          <span class="badge priority-{task.priority}">{PRIORITY_LABELS.get(task.priority, task.priority)}</span>
          <span class="badge">{STATUS_LABELS.get(task.status, task.status)}</span>
          <span class="{due_cls}">{html.escape(info)}</span>
          <span>Logged: {hours}h {minutes}m</span>
        </div>
        {desc}
        """
        return self.page(body)
