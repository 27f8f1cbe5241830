"""JSON logging for janitor runs.

One JSON object per line on stderr; stdout stays reserved for command
output. Every line of a run carries the same `run_id`.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO, Union

QUIET_LOGGERS = ("httpx", "httpcore")


def parse_level(level: Union[str, int]) -> int:
    """Translate a level name ("info", "WARNING") into its logging constant.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level {level!r}")
    return value


class JsonLineFormatter(logging.Formatter):
    """Render a record as a single JSON line, merging its event fields."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service_name,
            "message": record.getMessage(),
        }
        run_id = getattr(record, "run_id", None)
        if run_id:
            entry["run_id"] = run_id
        entry.update(getattr(record, "fields", {}))
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class RunIdFilter(logging.Filter):
    """Stamp every record with the id of the current run."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


def setup_logging(
    service_name: str,
    level: Union[str, int],
    run_id: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Route all logging through one JSON handler.

    The level is checked before any handler is touched, so a bad value
    leaves the existing configuration in place.

    Raises:
        ValueError: If `level` is not a logging level
    """
    numeric_level = parse_level(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonLineFormatter(service_name))
    if run_id:
        handler.addFilter(RunIdFilter(run_id))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_event(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log `message` with structured fields that land as top-level JSON keys."""
    logger.log(level, message, extra={"fields": fields})
