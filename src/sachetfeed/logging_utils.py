"""Shared logging helpers for the alert cache run."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "[%(asctime)s] %(message)s"


class IsoTimestampFormatter(logging.Formatter):
    """Render ``asctime`` as UTC ISO-8601 with milliseconds, e.g. ``2026-01-01T00:00:00.000Z``."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def configure_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    json_console: bool = False,
) -> None:
    """Configure console logging and, optionally, the truncated run log file."""
    handlers: list[logging.Handler] = []

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setFormatter(IsoTimestampFormatter(LOG_FORMAT))
        handlers.append(file_handler)

    console = logging.StreamHandler(sys.stdout)
    if json_console:
        console.setFormatter(
            jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    else:
        console.setFormatter(IsoTimestampFormatter(LOG_FORMAT))
    handlers.append(console)

    logging.basicConfig(level=level, handlers=handlers, force=True)
