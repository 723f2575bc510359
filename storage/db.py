#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3
from typing import List

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path: str = "taskflow.db"):
        self.db_path = db_path
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row

    def connect(self) -> sqlite3.Connection:
        return self.conn

    def _cols(self, table: str) -> List[str]:
        return [
            r["name"] for r in self.conn.execute(f"PRAGMA table_info({table});").fetchall()
        ]

    def init_schema(self):
        cur = self.conn.cursor()

        cur.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)

        cur.execute("""
            CREATE TABLE IF NOT EXISTS schema_meta (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)

        cur.execute("""
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                deadline TEXT,
                status TEXT NOT NULL DEFAULT 'todo',
                priority TEXT NOT NULL DEFAULT 'medium',
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            );
        """)

        # older tasks tables
        cols = self._cols("tasks")
        if "description" not in cols:
            cur.execute("ALTER TABLE tasks ADD COLUMN description TEXT NOT NULL DEFAULT '';")
        if "deadline" not in cols:
            cur.execute("ALTER TABLE tasks ADD COLUMN deadline TEXT;")

        # no FK to tasks: logs outlive deleted tasks
        cur.execute("""
            CREATE TABLE IF NOT EXISTS time_logs (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                task_id TEXT NOT NULL,
                start_ts INTEGER NOT NULL,
                end_ts INTEGER NOT NULL,
                duration INTEGER NOT NULL
            );
        """)

        cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id);")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_time_logs_user ON time_logs(user_id);")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_time_logs_task ON time_logs(task_id);")

        cur.execute(
            "INSERT OR IGNORE INTO schema_meta(key, value) VALUES('schema_version', '1');"
        )

        self.conn.commit()
        logger.debug("schema ready at %s", self.db_path)

    def close(self):
        self.conn.close()
