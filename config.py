# -*- coding: utf-8 -*-

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from domain.errors import ValidationError
from domain.models import PERIODS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {raw!r}.")
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}.")
    return value


@dataclass(frozen=True)
class Config:
    db_path: str = "taskflow.db"
    user_id: str = "local"
    work_min: int = 25
    break_min: int = 5
    long_break_min: int = 15
    long_break_every: int = 4
    stats_period: str = "week"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Read TASKFLOW_* settings; a .env file is loaded when reading os.environ."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        period = (environ.get("TASKFLOW_STATS_PERIOD") or cls.stats_period).strip().lower()
        if period not in PERIODS:
            raise ValidationError(f"TASKFLOW_STATS_PERIOD must be one of {', '.join(PERIODS)}.")

        level = (environ.get("TASKFLOW_LOG_LEVEL") or cls.log_level).strip().upper()
        if level not in LOG_LEVELS:
            raise ValidationError(f"Unknown TASKFLOW_LOG_LEVEL {level!r}.")

        return cls(
            db_path=environ.get("TASKFLOW_DB_PATH") or cls.db_path,
            user_id=(environ.get("TASKFLOW_USER") or cls.user_id).strip() or cls.user_id,
            work_min=_int(environ, "TASKFLOW_WORK_MIN", cls.work_min),
            break_min=_int(environ, "TASKFLOW_BREAK_MIN", cls.break_min),
            long_break_min=_int(environ, "TASKFLOW_LONG_BREAK_MIN", cls.long_break_min),
            long_break_every=_int(environ, "TASKFLOW_LONG_BREAK_EVERY", cls.long_break_every),
            stats_period=period,
            log_level=level,
        )
