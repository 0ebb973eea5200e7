"""Parsing helpers that turn raw logcat lines into structured records."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from config.constants import LogcatConstants

from .models import LogRecord, SeparatorRecord


def substring_before(text: str, delimiter: str) -> str:
    """Return the text before the first delimiter, or the whole text when absent."""
    index = text.find(delimiter)
    if index < 0:
        return text
    return text[:index]


def substring_after(text: str, delimiter: str) -> str:
    """Return the text after the first delimiter, or the whole text when absent."""
    index = text.find(delimiter)
    if index < 0:
        return text
    return text[index + len(delimiter):]


class LogcatLineParser:
    """Transforms lines in logcat's default `brief` layout into `LogRecord` objects.

    Expected layout::

        MM-DD HH:MM:SS.ssssss L/TAG( PID): message

    Every line is parsed on its own and parsing never raises; anything that
    does not fit degrades to sentinel field values.
    """

    _RE_TIMESTAMP = re.compile(
        r'[0-9]{2}-[0-9]{2}\s[0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]{6}',
        re.ASCII,
    )
    _RE_PID = re.compile(r'\(\s*[0-9]+\)', re.ASCII)

    def parse(self, line: str) -> LogRecord:
        """Parse one line of logcat output."""
        if line.startswith(LogcatConstants.SEPARATOR_PREFIX):
            return SeparatorRecord(line)

        metadata = substring_before(line, '/')
        # The level is the last metadata character; without one the line
        # cannot carry structured fields.
        if not metadata or metadata[-1].isspace():
            return SeparatorRecord(line.strip())

        return LogRecord(
            pid=self._extract_pid(line),
            timestamp=self._extract_timestamp(metadata),
            # Tags are assumed never to contain '('
            tag=substring_before(substring_after(line, '/'), '('),
            level=metadata[-1],
            message=substring_after(line, '):').strip(),
        )

    def parse_lines(self, lines: Iterable[str]) -> Iterator[LogRecord]:
        """Lazily parse an iterable of lines, dropping trailing line endings."""
        for line in lines:
            yield self.parse(line.rstrip('\r\n'))

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------
    def _extract_pid(self, line: str) -> int:
        match = self._RE_PID.search(line)
        if match is None:
            return LogcatConstants.UNKNOWN_PID

        digits = substring_before(substring_after(match.group(0), '('), ')').lstrip()
        try:
            pid = int(digits)
        except ValueError:
            return LogcatConstants.UNKNOWN_PID

        if not LogcatConstants.PID_MIN <= pid <= LogcatConstants.PID_MAX:
            return LogcatConstants.UNKNOWN_PID
        return pid

    def _extract_timestamp(self, metadata: str) -> str:
        match = self._RE_TIMESTAMP.match(metadata)
        if match is None:
            return ''
        return match.group(0)


_DEFAULT_PARSER = LogcatLineParser()


def parse_line(line: str) -> LogRecord:
    """Parse a single logcat line with the shared parser instance."""
    return _DEFAULT_PARSER.parse(line)


def parse_lines(lines: Iterable[str]) -> Iterator[LogRecord]:
    """Parse many logcat lines with the shared parser instance."""
    return _DEFAULT_PARSER.parse_lines(lines)
