"""
Logging setup for txgen.

Logs go to stderr so they never mix with the CLI summary printed on stdout.
Set TXGEN_JSON_LOGS=1 (or pass --json-logs) for one JSON object per line.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

# Attributes passed via extra={} that are copied into JSON output
STRUCTURED_KEYS = (
    "run_id",
    "phase",
    "event",
    "records",
    "target",
    "path",
    "format",
    "seed",
    "duration_seconds",
    "error",
)

# Third-party loggers that are chatty below WARNING
QUIET_LOGGERS = ("faker",)

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Renders a record as a single JSON object with its structured extras."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            {key: getattr(record, key) for key in STRUCTURED_KEYS if hasattr(record, key)}
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def json_logs_from_env() -> bool:
    return os.environ.get("TXGEN_JSON_LOGS", "").strip().lower() in ("1", "true", "yes", "on")


def configure_logging(
    level: int = logging.INFO,
    json_format: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Install a single handler on the root logger.

    Args:
        level: Root logging level
        json_format: JSON lines when True; None defers to TXGEN_JSON_LOGS
        stream: Target stream (default sys.stderr)
    """
    if json_format is None:
        json_format = json_logs_from_env()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def parse_level(name: Optional[str]) -> int:
    """Map a level name such as 'debug' or 'WARNING' to its logging constant."""
    if not name:
        return logging.INFO
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: '{name}'")
    return level


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"txgen.{name}" if not name.startswith("txgen") else name)
