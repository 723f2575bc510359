#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging

from config import Config
from core.timer_engine import TimerEngine
from services.stats_service import StatsService
from services.task_service import TaskService
from services.timer_service import TimerService
from storage.db import Database
from storage.repos import TaskRepo, TimeLogRepo
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main():
    cfg = Config.from_env()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = Database(db_path=cfg.db_path)
    db.init_schema()
    logger.info("using %s for user %s", cfg.db_path, cfg.user_id)

    task_service = TaskService(db, cfg.user_id)
    stats_service = StatsService(db, cfg.user_id)
    timer_service = TimerService(
        TimeLogRepo(db),
        TaskRepo(db),
        cfg.user_id,
        engine=TimerEngine(
            work_sec=cfg.work_min * 60,
            break_sec=cfg.break_min * 60,
            long_break_sec=cfg.long_break_min * 60,
            long_break_every=cfg.long_break_every,
        ),
    )

    app = MainWindow(task_service, timer_service, stats_service, stats_period=cfg.stats_period)
    try:
        app.run()
    finally:
        db.close()


if __name__ == "__main__":
    main()
