"""Data models for parsed logcat output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from config.constants import LogcatConstants


class LogLevel(Enum):
    """Android log priorities, ordered from least to most severe."""

    VERBOSE = 'V'
    DEBUG = 'D'
    INFO = 'I'
    WARN = 'W'
    ERROR = 'E'
    FATAL = 'F'
    ASSERT = 'A'

    @property
    def priority(self) -> int:
        return LogcatConstants.LEVELS.index(self.value)

    @classmethod
    def from_char(cls, code: str) -> Optional['LogLevel']:
        """Return the level for a one-character code, or None when unknown."""
        try:
            return cls(code)
        except ValueError:
            return None


@dataclass(frozen=True)
class LogRecord:
    """A single line from logcat.

    Attributes:
        pid: Process id of the program that logged this entry, -1 when unknown.
        timestamp: Time (format MM-DD HH:MM:SS.ssssss) of the entry, or ''.
        tag: The log tag of this entry.
        level: The one-character log level; a space marks a message-only record.
        message: The message that was logged.
    """

    pid: int = LogcatConstants.UNKNOWN_PID
    timestamp: str = ''
    tag: str = ''
    level: str = LogcatConstants.MESSAGE_ONLY_LEVEL
    message: str = ''

    def has_only_message(self) -> bool:
        """Return whether this record carries only a message (e.g. an event separator)."""
        return self.level.isspace()

    @property
    def log_level(self) -> Optional[LogLevel]:
        if self.has_only_message():
            return None
        return LogLevel.from_char(self.level)


@dataclass(frozen=True)
class SeparatorRecord(LogRecord):
    """Message-only record, such as `--------- beginning of main`."""

    pid: int = field(default=LogcatConstants.UNKNOWN_PID, init=False)
    timestamp: str = field(default='', init=False)
    tag: str = field(default='', init=False)
    level: str = field(default=LogcatConstants.MESSAGE_ONLY_LEVEL, init=False)
