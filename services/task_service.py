# services/task_service.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from domain.errors import ValidationError
from domain.models import PRIORITIES, STATUSES, Task
from storage.db import Database
from storage.repos import AppStateRepo, TaskRepo

logger = logging.getLogger(__name__)

ACTIVE_TASK_KEY = "active_task_id"


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Task title cannot be empty.")
    return title


def _clean_priority(priority: Optional[str]) -> str:
    pr = (priority or "medium").strip().lower()
    if pr not in PRIORITIES:
        raise ValidationError("Invalid priority. Use low/medium/high.")
    return pr


def _clean_status(status: Optional[str]) -> str:
    st = (status or "todo").strip().lower()
    if st not in STATUSES:
        raise ValidationError("Invalid status. Use todo/inprogress/completed.")
    return st


def _clean_deadline(deadline: Optional[str]) -> Optional[str]:
    deadline = (deadline or "").strip()
    if deadline == "":
        return None
    try:
        dt.date.fromisoformat(deadline)
    except ValueError:
        raise ValidationError("Invalid date. Use YYYY-MM-DD.")
    return deadline


class TaskService:
    def __init__(self, db: Database, user_id: str):
        self.db = db
        self.user_id = user_id
        self.tasks = TaskRepo(db)
        self.state = AppStateRepo(db)

    # ---- tasks ----
    def create_task(
        self,
        title: str,
        description: str = "",
        priority: str = "medium",
        status: str = "todo",
        deadline: Optional[str] = None,
    ) -> Task:
        task = self.tasks.create(
            user_id=self.user_id,
            title=_clean_title(title),
            description=(description or "").strip(),
            priority=_clean_priority(priority),
            status=_clean_status(status),
            deadline=_clean_deadline(deadline),
        )
        logger.info("created task %s %r", task.id, task.title)
        return task

    def list_tasks(
        self, status: Optional[str] = None, priority: Optional[str] = None
    ) -> List[Task]:
        """Filters accept None or "all" for no filtering."""
        if status in (None, "", "all"):
            status = None
        else:
            status = _clean_status(status)
        if priority in (None, "", "all"):
            priority = None
        else:
            priority = _clean_priority(priority)
        return self.tasks.list(self.user_id, status=status, priority=priority)

    def list_open_tasks(self) -> List[Task]:
        return [t for t in self.list_tasks() if t.status != "completed"]

    def get_task(self, task_id: str) -> Optional[Task]:
        task = self.tasks.get(task_id)
        if task is None or task.user_id != self.user_id:
            return None
        return task

    def _require(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        if task is None:
            raise ValidationError("Task not found.")
        return task

    def update_task(self, task_id: str, patch: Dict[str, Any]) -> Task:
        self._require(task_id)

        unknown = set(patch) - {"title", "description", "priority", "status", "deadline"}
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}.")

        clean: Dict[str, Any] = {}
        if "title" in patch:
            clean["title"] = _clean_title(patch["title"])
        if "description" in patch:
            clean["description"] = (patch["description"] or "").strip()
        if "priority" in patch:
            clean["priority"] = _clean_priority(patch["priority"])
        if "status" in patch:
            clean["status"] = _clean_status(patch["status"])
        if "deadline" in patch:
            clean["deadline"] = _clean_deadline(patch["deadline"])

        task = self.tasks.update(task_id, clean)
        logger.info("updated task %s: %s", task_id, ", ".join(sorted(clean)) or "-")
        return task

    def set_status(self, task_id: str, status: str) -> Task:
        return self.update_task(task_id, {"status": status})

    def delete_task(self, task_id: str) -> None:
        self._require(task_id)
        if self.get_active_task_id() == task_id:
            self.state.delete(ACTIVE_TASK_KEY)
        self.tasks.delete(task_id)
        logger.info("deleted task %s (time logs kept)", task_id)

    # ---- active (selected) task ----
    def get_active_task_id(self) -> Optional[str]:
        task_id = self.state.get(ACTIVE_TASK_KEY)
        if task_id and self.get_task(task_id) is None:
            self.state.delete(ACTIVE_TASK_KEY)
            return None
        return task_id

    def set_active_task_id(self, task_id: Optional[str]) -> None:
        if not task_id:
            self.state.delete(ACTIVE_TASK_KEY)
            return
        self._require(task_id)
        self.state.set(ACTIVE_TASK_KEY, task_id)
