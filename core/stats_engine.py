# -*- coding: utf-8 -*-

"""
Aggregation over tasks and time logs.

Everything here is pure: callers pass the records and the current instant,
nothing is read from storage or the clock.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Dict, Iterable, List, Optional

from domain.errors import ValidationError
from domain.models import PERIODS, Overview, StatsView, Task, TimeLogEntry, TopTask

logger = logging.getLogger(__name__)

TOP_TASKS_LIMIT = 5
TARGET_MINUTES_PER_DAY = 120
WEEK_SEC = 7 * 24 * 60 * 60


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def local_date(ts: int) -> str:
    return dt.datetime.fromtimestamp(ts).date().isoformat()


def period_start(period: str, now: int) -> int:
    if period not in PERIODS:
        raise ValidationError(f"Invalid period {period!r}. Use day/week/month.")

    if period == "week":
        return int(now) - WEEK_SEC

    local_now = dt.datetime.fromtimestamp(now)
    if period == "day":
        start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    else:
        start = local_now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return int(start.timestamp())


def _valid_logs(time_logs: Iterable[TimeLogEntry]) -> List[TimeLogEntry]:
    out: List[TimeLogEntry] = []
    for log in time_logs:
        if log.duration is None or log.duration < 0:
            logger.warning(
                "excluding time log %s with invalid duration %r", log.id, log.duration
            )
            continue
        out.append(log)
    return out


def productivity_score(completion_rate: int, total_minutes: int, active_days: int) -> int:
    avg_per_day = total_minutes / active_days if active_days > 0 else 0.0
    score = completion_rate * 0.5 + min(1.0, avg_per_day / TARGET_MINUTES_PER_DAY) * 50
    return max(0, min(100, round_half_up(score)))


def productivity_label(score: int) -> str:
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "fair"
    return "low"


def compute_statistics(
    tasks: List[Task],
    time_logs: List[TimeLogEntry],
    period: str,
    now: int,
) -> StatsView:
    start_ts = period_start(period, now)

    period_logs = [log for log in _valid_logs(time_logs) if log.start_ts >= start_ts]
    period_tasks = [t for t in tasks if t.created_at >= start_ts]

    total_minutes = sum(log.duration for log in period_logs)
    hours, minutes = divmod(total_minutes, 60)

    completed = sum(1 for t in period_tasks if t.status == "completed")
    inprogress = sum(1 for t in period_tasks if t.status == "inprogress")
    todo = sum(1 for t in period_tasks if t.status == "todo")

    # orphan logs count toward totals but not toward any task
    task_by_id: Dict[str, Task] = {t.id: t for t in tasks}
    time_by_task: Dict[str, int] = {}
    for log in period_logs:
        if log.task_id in task_by_id:
            time_by_task[log.task_id] = time_by_task.get(log.task_id, 0) + log.duration

    # sorted() is stable: ties keep first-appearance order
    ranked = sorted(time_by_task.items(), key=lambda kv: kv[1], reverse=True)
    top_tasks = [
        TopTask(task=task_by_id[tid], minutes=mins)
        for tid, mins in ranked[:TOP_TASKS_LIMIT]
    ]

    daily: Dict[str, int] = {}
    for log in period_logs:
        day = local_date(log.start_ts)
        daily[day] = daily.get(day, 0) + log.duration
    daily_data = {day: daily[day] for day in sorted(daily)}

    if period_tasks:
        completion_rate = round_half_up(completed / len(period_tasks) * 100)
    else:
        completion_rate = 0

    return StatsView(
        period=period,
        period_start_ts=start_ts,
        total_minutes=total_minutes,
        total_hours=hours,
        remaining_minutes=minutes,
        completed_tasks=completed,
        inprogress_tasks=inprogress,
        todo_tasks=todo,
        time_by_task=time_by_task,
        top_tasks=top_tasks,
        daily_data=daily_data,
        completion_rate=completion_rate,
        productivity_score=productivity_score(
            completion_rate, total_minutes, len(daily_data)
        ),
    )


def is_overdue(task: Task, today: dt.date) -> bool:
    due = parse_deadline(task.deadline)
    return due is not None and due < today and task.status != "completed"


def parse_deadline(deadline: Optional[str]) -> Optional[dt.date]:
    if not deadline:
        return None
    try:
        return dt.date.fromisoformat(deadline)
    except ValueError:
        logger.warning("ignoring malformed deadline %r", deadline)
        return None


def compute_overview(tasks: List[Task], time_logs: List[TimeLogEntry], now: int) -> Overview:
    """Dashboard counts over all tasks and all logs, no period filter."""
    today = dt.datetime.fromtimestamp(now).date()

    total_minutes = sum(log.duration for log in _valid_logs(time_logs))
    hours, minutes = divmod(total_minutes, 60)

    return Overview(
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.status == "completed"),
        inprogress_tasks=sum(1 for t in tasks if t.status == "inprogress"),
        todo_tasks=sum(1 for t in tasks if t.status == "todo"),
        total_minutes=total_minutes,
        total_hours=hours,
        remaining_minutes=minutes,
        due_today=[t for t in tasks if parse_deadline(t.deadline) == today],
        overdue=[t for t in tasks if is_overdue(t, today)],
        high_priority=[
            t for t in tasks if t.priority == "high" and t.status != "completed"
        ],
    )
