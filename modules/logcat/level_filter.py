"""Minimum log level filtering for parsed records."""

from __future__ import annotations

from typing import Iterable, Iterator, Union

from .models import LogLevel, LogRecord

LevelSpec = Union[LogLevel, str]


def resolve_level(level: LevelSpec) -> LogLevel:
    """Return the LogLevel for a level or its one-character code.

    Raises:
        ValueError: If the code is not a known log level.
    """
    if isinstance(level, LogLevel):
        return level
    resolved = LogLevel.from_char(level)
    if resolved is None:
        raise ValueError(f'Unknown log level: {level!r}')
    return resolved


def is_loggable(record: LogRecord, min_level: LevelSpec) -> bool:
    """Return whether the record should be shown for the given minimum level.

    Message-only records and records with an unrecognised level character
    are always shown.
    """
    threshold = resolve_level(min_level)
    record_level = record.log_level
    if record_level is None:
        return True
    return record_level.priority >= threshold.priority


def filter_by_level(records: Iterable[LogRecord], min_level: LevelSpec) -> Iterator[LogRecord]:
    """Return an iterator over the records that pass the minimum level.

    The level is validated immediately, before any record is consumed.
    """
    threshold = resolve_level(min_level)
    return (record for record in records if is_loggable(record, threshold))
