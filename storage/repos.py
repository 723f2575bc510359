# storage/repos.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import time
import uuid
from typing import Any, Dict, List, Optional

from domain.models import Task, TimeLogDraft, TimeLogEntry
from storage.db import Database

TASK_COLUMNS = "id, user_id, title, description, priority, status, deadline, created_at, updated_at"
TASK_PATCH_FIELDS = ("title", "description", "priority", "status", "deadline")

LOG_COLUMNS = "id, user_id, task_id, start_ts, end_ts, duration"


def _now_ts() -> int:
    return int(time.time())


def _task(row) -> Task:
    d = dict(row)
    d["description"] = d.get("description") or ""
    return Task(**d)


class AppStateRepo:
    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.conn.execute(
            "SELECT value FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.conn.execute(
            """
            INSERT INTO app_state(key, value) VALUES(?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, value),
        )
        self.db.conn.commit()

    def delete(self, key: str) -> None:
        self.db.conn.execute("DELETE FROM app_state WHERE key=?", (key,))
        self.db.conn.commit()


class TaskRepo:
    def __init__(self, db: Database):
        self.db = db

    def create(
        self,
        user_id: str,
        title: str,
        description: str = "",
        priority: str = "medium",
        status: str = "todo",
        deadline: Optional[str] = None,
        created_at: Optional[int] = None,
    ) -> Task:
        tid = str(uuid.uuid4())
        ts = _now_ts() if created_at is None else int(created_at)

        self.db.conn.execute(
            f"INSERT INTO tasks({TASK_COLUMNS}) VALUES(?,?,?,?,?,?,?,?,?)",
            (
                tid,
                user_id,
                title,
                description or "",
                priority,
                status,
                deadline,
                ts,
                ts,
            ),
        )
        self.db.conn.commit()
        return self.get(tid)

    def list(
        self,
        user_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Task]:
        sql = f"SELECT {TASK_COLUMNS} FROM tasks WHERE user_id=?"
        params: List[Any] = [user_id]
        if status:
            sql += " AND status=?"
            params.append(status)
        if priority:
            sql += " AND priority=?"
            params.append(priority)
        sql += " ORDER BY created_at ASC, rowid ASC"
        rows = self.db.conn.execute(sql, params).fetchall()
        return [_task(r) for r in rows]

    def get(self, task_id: str) -> Optional[Task]:
        r = self.db.conn.execute(
            f"SELECT {TASK_COLUMNS} FROM tasks WHERE id=?",
            (task_id,),
        ).fetchone()
        return _task(r) if r else None

    def update(self, task_id: str, patch: Dict[str, Any]) -> Optional[Task]:
        fields = [k for k in TASK_PATCH_FIELDS if k in patch]
        if fields:
            assignments = ", ".join(f"{k}=?" for k in fields)
            values = [patch[k] for k in fields]
            self.db.conn.execute(
                f"UPDATE tasks SET {assignments}, updated_at=? WHERE id=?",
                (*values, _now_ts(), task_id),
            )
            self.db.conn.commit()
        return self.get(task_id)

    def delete(self, task_id: str) -> None:
        # time logs are kept (orphans)
        self.db.conn.execute("DELETE FROM tasks WHERE id=?", (task_id,))
        self.db.conn.commit()


class TimeLogRepo:
    def __init__(self, db: Database):
        self.db = db

    def create(self, user_id: str, draft: TimeLogDraft) -> TimeLogEntry:
        lid = str(uuid.uuid4())
        self.db.conn.execute(
            f"INSERT INTO time_logs({LOG_COLUMNS}) VALUES(?,?,?,?,?,?)",
            (
                lid,
                user_id,
                draft.task_id,
                draft.start_ts,
                draft.end_ts,
                draft.duration,
            ),
        )
        self.db.conn.commit()
        return TimeLogEntry(
            id=lid,
            user_id=user_id,
            task_id=draft.task_id,
            start_ts=draft.start_ts,
            end_ts=draft.end_ts,
            duration=draft.duration,
        )

    def list(self, user_id: str, since_ts: Optional[int] = None) -> List[TimeLogEntry]:
        if since_ts is None:
            rows = self.db.conn.execute(
                f"SELECT {LOG_COLUMNS} FROM time_logs WHERE user_id=? ORDER BY start_ts ASC, rowid ASC",
                (user_id,),
            ).fetchall()
        else:
            rows = self.db.conn.execute(
                f"""
                SELECT {LOG_COLUMNS} FROM time_logs
                WHERE user_id=? AND start_ts >= ?
                ORDER BY start_ts ASC, rowid ASC
                """,
                (user_id, since_ts),
            ).fetchall()
        return [TimeLogEntry(**dict(r)) for r in rows]

    def list_for_task(self, task_id: str) -> List[TimeLogEntry]:
        rows = self.db.conn.execute(
            f"SELECT {LOG_COLUMNS} FROM time_logs WHERE task_id=? ORDER BY start_ts ASC, rowid ASC",
            (task_id,),
        ).fetchall()
        return [TimeLogEntry(**dict(r)) for r in rows]

    def total_minutes(self, user_id: str, task_id: Optional[str] = None) -> int:
        if task_id is None:
            row = self.db.conn.execute(
                """
                SELECT COALESCE(SUM(duration), 0) AS total
                FROM time_logs
                WHERE user_id = ? AND duration >= 0
                """,
                (user_id,),
            ).fetchone()
        else:
            row = self.db.conn.execute(
                """
                SELECT COALESCE(SUM(duration), 0) AS total
                FROM time_logs
                WHERE user_id = ? AND task_id = ? AND duration >= 0
                """,
                (user_id, task_id),
            ).fetchone()
        return int(row["total"] or 0)
