"""structlog setup for a full-screen terminal app.

Records never go to stdout or stderr, where they would corrupt the frame.
They are appended as key=value lines to a log file, or dropped entirely
when the destination is ``"none"``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import structlog

DISABLED = "none"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_log_stream: TextIO | None = None


def level_number(level: str) -> int:
    try:
        return _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"unknown log level: {level}") from None


def _drop_event(logger, method_name, event_dict):
    raise structlog.DropEvent


def configure_logging(level: str = "info", destination: str | Path | None = DISABLED) -> Path | None:
    """Route structlog output to ``destination`` at ``level``.

    Returns the log file path, or ``None`` when logging is disabled. The
    previous log file is closed only once the new configuration is active.
    """
    global _log_stream
    previous = _log_stream

    if destination is None or str(destination).lower() == DISABLED:
        structlog.configure(
            processors=[_drop_event],
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
            logger_factory=structlog.ReturnLoggerFactory(),
            cache_logger_on_first_use=False,
        )
        _log_stream = None
        if previous is not None:
            previous.close()
        return None

    threshold = level_number(level)
    path = Path(destination).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    stream = path.open("a", encoding="utf-8")
    try:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"], drop_missing=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(threshold),
            logger_factory=structlog.WriteLoggerFactory(file=stream),
            cache_logger_on_first_use=False,
        )
    except Exception:
        stream.close()
        raise
    _log_stream = stream
    if previous is not None:
        previous.close()
    return path


__all__ = ["DISABLED", "configure_logging", "level_number"]
