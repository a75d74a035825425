"""
Centralized Logging

Architectural Intent:
- Single place configuring the "rewind" logger hierarchy
- Human-readable output by default, JSON lines for log shipping
- Level driven by CLI flags (--verbose, --debug) or the config file
"""

import json
import logging
import sys
from datetime import datetime, UTC
from typing import Union

ROOT_LOGGER = "rewind"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def parse_level(level: Union[int, str]) -> int:
    """Accepts a logging level number or name ("debug", "WARNING", ...)."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    json_format: bool = False,
) -> None:
    """Configure logging for the rewind package.

    Args:
        level: Logging level number or name.
        json_format: If True, emit JSON lines. Otherwise human-readable.
    """
    numeric_level = parse_level(level)
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)
