"""Central logging configuration for the pipeline service."""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

# Third-party loggers that are chatty at INFO while a job is running.
NOISY_LOGGERS = ("urllib3", "asyncio", "werkzeug")


class JsonFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "thread": record.threadName,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging handlers.

    ``LOG_FORMAT=json`` switches to single-line JSON records for log
    shippers; anything else gives the human readable format used locally.
    Worker threads are named, so the thread name is part of every record.
    """

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_format = os.getenv("LOG_FORMAT", "text")

    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-7s | %(threadName)s | %(name)s | %(message)s"
        )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
