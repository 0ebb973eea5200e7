"""Common utilities for MatLogX.

This module centralises logging setup, filesystem helpers and timestamp helpers
used across the logcat core.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import platform
from contextvars import ContextVar
from pathlib import Path


_TRACE_ID_DEFAULT = "-"
_TRACE_ID_VAR: ContextVar[str] = ContextVar("matlogx_trace_id", default=_TRACE_ID_DEFAULT)

_LOG_FILE_PREFIX = "matlogx_"

# Track whether log cleanup has already run for the current day.
_logs_cleaned_today = False


class TraceIdFilter(logging.Filter):
    """Augment log records with their active trace identifier."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


def get_trace_id() -> str:
    """Return the current trace identifier ("-" when unset)."""
    return _TRACE_ID_VAR.get()


def _resolve_logs_dir() -> Path:
    """Return the directory path where log files should be stored."""
    system = platform.system().lower()
    home_dir = Path.home()

    if system == "darwin":
        return home_dir / ".matlogx_logs"

    if system == "linux":
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        if xdg_data_home:
            return Path(xdg_data_home) / "matlogx" / "logs"
        return home_dir / ".local" / "share" / "matlogx" / "logs"

    return home_dir / ".matlogx_logs"


def _cleanup_old_logs(logs_dir: Path, bootstrap_logger: logging.Logger) -> int:
    """Remove log files that do not belong to today (runs at most once per day)."""
    global _logs_cleaned_today

    if _logs_cleaned_today:
        return 0

    try:
        today = dt.date.today().strftime("%Y%m%d")
        cleaned_count = 0
        date_start = len(_LOG_FILE_PREFIX)

        for filename in os.listdir(logs_dir):
            if not (filename.startswith(_LOG_FILE_PREFIX) and filename.endswith(".log")):
                continue

            date_part = filename[date_start:date_start + 8]
            if len(date_part) != 8 or not date_part.isdigit():
                continue

            if date_part == today:
                continue

            old_log_path = logs_dir / filename
            try:
                old_log_path.unlink()
                cleaned_count += 1
            except OSError:
                bootstrap_logger.exception("Error removing stale log file", extra={"stale_log": str(old_log_path)})

        _logs_cleaned_today = True
        return cleaned_count
    except OSError:
        bootstrap_logger.exception(
            "Unexpected failure while cleaning logs directory", extra={"logs_dir": str(logs_dir)}
        )
        return 0


def _ensure_logger_filters(logger: logging.Logger) -> None:
    """Attach the TraceIdFilter to the logger if not already present."""
    if any(isinstance(item, TraceIdFilter) for item in logger.filters):
        return
    logger.addFilter(TraceIdFilter())


def get_logger(name: str = "matlogx") -> logging.Logger:
    """Return a configured logger augmented with trace identifiers."""
    logger = logging.getLogger(name)
    _ensure_logger_filters(logger)

    if logger.handlers:
        return logger

    logs_dir = _resolve_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)

    bootstrap_logger = logging.getLogger("matlogx.bootstrap")
    if not any(isinstance(handler, logging.NullHandler) for handler in bootstrap_logger.handlers):
        bootstrap_logger.addHandler(logging.NullHandler())

    cleaned_count = _cleanup_old_logs(logs_dir, bootstrap_logger)

    current_time = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = f"{_LOG_FILE_PREFIX}{current_time}.log"
    log_filepath = logs_dir / log_filename

    try:
        file_handler = logging.FileHandler(log_filepath, encoding="utf-8")
    except (OSError, PermissionError):
        fallback_dir = Path.cwd() / "logs"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        log_filepath = fallback_dir / log_filename
        file_handler = logging.FileHandler(log_filepath, encoding="utf-8")

    file_formatter = logging.Formatter(
        "%(asctime)s %(trace_id)s %(name)-20s %(levelname)-8s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(file_formatter)
    file_handler.addFilter(TraceIdFilter())

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter("%(levelname)s [%(trace_id)s] %(message)s")
    console_handler.setFormatter(console_formatter)
    console_handler.addFilter(TraceIdFilter())

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    logger.setLevel(logging.INFO)

    if cleaned_count > 0:
        logger.info("Removed %s old log file(s)", cleaned_count)

    if name == "matlogx":
        logger.info("Log file created: %s", log_filepath)

    return logger


# Module-level logger for common utilities (defined after get_logger).
_LOGGER = get_logger("common")


def timestamp_time() -> str:
    """Return the current time formatted as YYYYMMDD_HHMMSS."""
    return dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def get_full_path(path: str) -> str:
    """Return the expanded absolute path for the given path string."""
    return os.path.expanduser(path)


def make_gen_dir_path(folder_path: str) -> str:
    """Create the directory (including parents) and return its POSIX path."""
    cleaned = folder_path.strip()
    if not cleaned:
        _LOGGER.error("Empty folder path provided to make_gen_dir_path")
        return ""

    full_path = Path(get_full_path(cleaned))
    full_path.mkdir(parents=True, exist_ok=True)
    return full_path.as_posix()


__all__ = [
    "TraceIdFilter",
    "get_full_path",
    "get_logger",
    "get_trace_id",
    "make_gen_dir_path",
    "timestamp_time",
]
