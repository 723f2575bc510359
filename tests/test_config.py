import pytest

from config import Config
from domain.errors import ValidationError


def test_defaults_from_empty_environment():
    cfg = Config.from_env({})
    assert cfg == Config()
    assert (cfg.work_min, cfg.break_min, cfg.long_break_min) == (25, 5, 15)
    assert cfg.long_break_every == 4
    assert cfg.stats_period == "week"


def test_values_from_environment():
    cfg = Config.from_env(
        {
            "TASKFLOW_DB_PATH": "/tmp/x.db",
            "TASKFLOW_USER": " alice ",
            "TASKFLOW_WORK_MIN": "50",
            "TASKFLOW_LONG_BREAK_EVERY": "3",
            "TASKFLOW_STATS_PERIOD": "Month",
            "TASKFLOW_LOG_LEVEL": "debug",
        }
    )
    assert cfg.db_path == "/tmp/x.db"
    assert cfg.user_id == "alice"
    assert cfg.work_min == 50
    assert cfg.long_break_every == 3
    assert cfg.stats_period == "month"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"TASKFLOW_WORK_MIN": "abc"},
        {"TASKFLOW_BREAK_MIN": "0"},
        {"TASKFLOW_STATS_PERIOD": "year"},
        {"TASKFLOW_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_are_rejected(env):
    with pytest.raises(ValidationError):
        Config.from_env(env)
