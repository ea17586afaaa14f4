from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOGGER_NAME = "browseql"


def setup_logging(settings: object) -> Path:
    """Configure the `browseql` logger to write to a rotating diagnostic log file.

    Returns the resolved log file path.

    Rotation:
      - Daily rotation at midnight.
      - Keep the last `BROWSEQL_LOG_BACKUP_COUNT` rotated files.

    Notes:
      - No console handler is installed; stdout/stderr belong to the
        full-screen UI while it runs.
      - This function is safe to call multiple times (it resets handlers).
    """

    raw = getattr(settings, "BROWSEQL_LOG_DIR", Path("~/.cache/browseql"))
    log_dir = (raw if isinstance(raw, Path) else Path(str(raw))).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "browseql.log"

    level_name = str(getattr(settings, "BROWSEQL_LOG_LEVEL", "INFO") or "INFO").upper().strip()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(threadName)s | %(message)s"

    file_handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=max(0, int(getattr(settings, "BROWSEQL_LOG_BACKUP_COUNT", 7) or 0)),
        encoding="utf-8",
        utc=False,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt))

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.addHandler(file_handler)
    # Keep records away from the root logger's stderr handler.
    logger.propagate = False

    logger.info("browseql logging enabled (file=%s, level=%s)", os.fspath(log_file), level_name)

    return log_file
