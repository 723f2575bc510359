import datetime as dt

import pytest

from storage.db import Database


def at(y, m, d, h=12, minute=0) -> int:
    """Epoch seconds for a local wall-clock time."""
    return int(dt.datetime(y, m, d, h, minute).timestamp())


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "taskflow.db"))
    database.init_schema()
    yield database
    database.close()
