"""Loguru helpers for consistent logging in bridge processes."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

_SINK_IDS: dict[str, int] = {}

LOG_FORMAT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Route loguru output to stderr at the given level, plus an optional file.

    stdout is reserved for wire records, so no sink ever writes there.
    """
    for sink_id in _SINK_IDS.values():
        try:
            logger.remove(sink_id)
        except ValueError:
            pass
    _SINK_IDS.clear()
    try:
        logger.remove(0)
    except ValueError:
        pass
    _SINK_IDS["stderr"] = logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    if log_file:
        ensure_rotating_log_file(Path(log_file), level=level)


def ensure_rotating_log_file(path: Path, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given file path."""
    key = str(path)
    if key in _SINK_IDS:
        return path
    path.parent.mkdir(parents=True, exist_ok=True)
    _SINK_IDS[key] = logger.add(
        key,
        level=level.upper(),
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    return path
