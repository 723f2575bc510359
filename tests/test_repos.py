import sqlite3

from domain.models import TimeLogDraft
from storage.db import Database
from storage.repos import AppStateRepo, TaskRepo, TimeLogRepo


def test_init_schema_is_idempotent(db):
    db.init_schema()
    version = db.conn.execute(
        "SELECT value FROM schema_meta WHERE key='schema_version'"
    ).fetchone()["value"]
    assert version == "1"


def test_old_tasks_table_gets_new_columns(tmp_path):
    path = str(tmp_path / "old.db")
    conn = sqlite3.connect(path)
    conn.execute("""
        CREATE TABLE tasks (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'todo',
            priority TEXT NOT NULL DEFAULT 'medium',
            created_at INTEGER NOT NULL,
            updated_at INTEGER NOT NULL
        )
    """)
    conn.execute("INSERT INTO tasks VALUES('t1', 'u', 'Legacy', 'todo', 'low', 1, 1)")
    conn.commit()
    conn.close()

    database = Database(path)
    database.init_schema()
    task = TaskRepo(database).get("t1")
    database.close()

    assert task.title == "Legacy"
    assert task.description == ""
    assert task.deadline is None


def test_task_create_get_list(db):
    repo = TaskRepo(db)
    a = repo.create("u", "Alpha", description="first", priority="high", created_at=10)
    b = repo.create("u", "Beta", status="completed", deadline="2026-11-01", created_at=20)
    repo.create("someone-else", "Hidden", created_at=5)

    assert repo.get(a.id) == a
    assert a.created_at == a.updated_at == 10
    assert b.deadline == "2026-11-01"

    assert [t.title for t in repo.list("u")] == ["Alpha", "Beta"]
    assert [t.title for t in repo.list("u", status="completed")] == ["Beta"]
    assert [t.title for t in repo.list("u", priority="high")] == ["Alpha"]
    assert repo.list("u", status="todo", priority="low") == []
    assert repo.get("missing") is None


def test_task_update_applies_patch_only(db):
    repo = TaskRepo(db)
    task = repo.create("u", "Alpha", created_at=10)

    updated = repo.update(task.id, {"status": "inprogress", "deadline": None})

    assert updated.status == "inprogress"
    assert updated.title == "Alpha"
    assert updated.created_at == 10
    assert updated.updated_at >= 10


def test_task_delete_keeps_time_logs(db):
    tasks = TaskRepo(db)
    logs = TimeLogRepo(db)
    task = tasks.create("u", "Alpha")
    logs.create("u", TimeLogDraft(task_id=task.id, start_ts=100, end_ts=1600, duration=25))

    tasks.delete(task.id)

    assert tasks.get(task.id) is None
    assert [log.task_id for log in logs.list("u")] == [task.id]


def test_time_logs_list_and_totals(db):
    logs = TimeLogRepo(db)
    first = logs.create("u", TimeLogDraft(task_id="a", start_ts=100, end_ts=200, duration=2))
    logs.create("u", TimeLogDraft(task_id="b", start_ts=300, end_ts=400, duration=5))
    logs.create("u", TimeLogDraft(task_id="a", start_ts=500, end_ts=600, duration=7))
    logs.create("v", TimeLogDraft(task_id="a", start_ts=500, end_ts=600, duration=100))

    assert first.user_id == "u"
    assert [log.duration for log in logs.list("u")] == [2, 5, 7]
    assert [log.duration for log in logs.list("u", since_ts=300)] == [5, 7]
    assert [log.duration for log in logs.list_for_task("a")] == [2, 7, 100]
    assert logs.total_minutes("u") == 14
    assert logs.total_minutes("u", task_id="a") == 9


def test_app_state_roundtrip(db):
    state = AppStateRepo(db)
    assert state.get("k") is None
    state.set("k", "1")
    state.set("k", "2")
    assert state.get("k") == "2"
    state.delete("k")
    assert state.get("k") is None
