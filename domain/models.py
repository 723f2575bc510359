# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from typing import Dict, List, Optional

PRIORITIES = ("low", "medium", "high")
STATUSES = ("todo", "inprogress", "completed")
PERIODS = ("day", "week", "month")
MODES = ("work", "break", "longBreak")


@dataclass(frozen=True)
class Task:
    id: str
    user_id: str
    title: str
    description: str = ""
    priority: str = "medium"  # low | medium | high
    status: str = "todo"  # todo | inprogress | completed
    deadline: Optional[str] = None  # yyyy-mm-dd
    created_at: int = 0
    updated_at: int = 0


@dataclass(frozen=True)
class TimeLogEntry:
    id: str
    user_id: str
    task_id: str
    start_ts: int
    end_ts: int
    duration: int  # minutes, from ticked seconds


@dataclass(frozen=True)
class TimeLogDraft:
    """A finished work session, not yet stored."""

    task_id: str
    start_ts: int
    end_ts: int
    duration: int


@dataclass(frozen=True)
class TopTask:
    task: Task
    minutes: int


@dataclass(frozen=True)
class StatsView:
    period: str
    period_start_ts: int
    total_minutes: int = 0
    total_hours: int = 0
    remaining_minutes: int = 0
    completed_tasks: int = 0
    inprogress_tasks: int = 0
    todo_tasks: int = 0
    time_by_task: Dict[str, int] = field(default_factory=dict)
    top_tasks: List[TopTask] = field(default_factory=list)
    daily_data: Dict[str, int] = field(default_factory=dict)  # yyyy-mm-dd -> minutes
    completion_rate: int = 0
    productivity_score: int = 0


@dataclass(frozen=True)
class Overview:
    total_tasks: int = 0
    completed_tasks: int = 0
    inprogress_tasks: int = 0
    todo_tasks: int = 0
    total_minutes: int = 0
    total_hours: int = 0
    remaining_minutes: int = 0
    due_today: List[Task] = field(default_factory=list)
    overdue: List[Task] = field(default_factory=list)
    high_priority: List[Task] = field(default_factory=list)
