"""Logcat parsing subsystem."""

from .exporter import export_records, format_record, render_export
from .level_filter import filter_by_level, is_loggable
from .models import LogLevel, LogRecord, SeparatorRecord
from .parser import LogcatLineParser, parse_line, parse_lines

__all__ = [
    'LogLevel',
    'LogRecord',
    'LogcatLineParser',
    'SeparatorRecord',
    'export_records',
    'filter_by_level',
    'format_record',
    'is_loggable',
    'parse_line',
    'parse_lines',
    'render_export',
]
