# -*- coding: utf-8 -*-

import time
from typing import Any, Callable, Dict, Optional

from core.stats_engine import compute_overview, compute_statistics, period_start
from domain.models import Overview, StatsView
from storage.db import Database
from storage.repos import TaskRepo, TimeLogRepo


def _now_ts() -> int:
    return int(time.time())


class StatsService:
    def __init__(
        self,
        db: Database,
        user_id: str,
        clock: Callable[[], int] = _now_ts,
    ):
        self.db = db
        self.user_id = user_id
        self.clock = clock
        self.tasks = TaskRepo(db)
        self.logs = TimeLogRepo(db)

    def get_db_info(self) -> Dict[str, Any]:
        conn = self.db.connect()
        v = conn.execute(
            "SELECT value FROM schema_meta WHERE key='schema_version'"
        ).fetchone()
        version = v["value"] if v else "unknown"

        tasks = conn.execute("SELECT COUNT(1) AS c FROM tasks").fetchone()["c"]
        logs = conn.execute("SELECT COUNT(1) AS c FROM time_logs").fetchone()["c"]
        return {
            "schema_version": version,
            "tasks_count": tasks,
            "time_logs_count": logs,
            "now_ts": self.clock(),
        }

    def statistics(self, period: str, now: Optional[int] = None) -> StatsView:
        now = self.clock() if now is None else int(now)
        return compute_statistics(
            self.tasks.list(self.user_id),
            self.logs.list(self.user_id),
            period,
            now,
        )

    def overview(self, now: Optional[int] = None) -> Overview:
        now = self.clock() if now is None else int(now)
        return compute_overview(
            self.tasks.list(self.user_id),
            self.logs.list(self.user_id),
            now,
        )

    def total_today_minutes(self, now: Optional[int] = None) -> int:
        now = self.clock() if now is None else int(now)
        since = period_start("day", now)
        return sum(
            log.duration
            for log in self.logs.list(self.user_id, since_ts=since)
            if log.duration >= 0
        )

    def total_task_minutes(self, task_id: str) -> int:
        return self.logs.total_minutes(self.user_id, task_id=task_id)
