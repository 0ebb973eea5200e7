"""Render parsed logcat records to text files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from config.constants import LogcatConstants, PathConstants
from utils import common

from .models import LogRecord

logger = common.get_logger('logcat_exporter')

_DEVICE_HEADER_TITLE = '===== Device information ====='
_DEVICE_HEADER_END = '=============================='


def format_record(record: LogRecord) -> str:
    """Render a record back to a logcat-style line."""
    if record.has_only_message():
        return record.message

    prefix = f'{record.timestamp} ' if record.timestamp else ''
    if record.pid == LogcatConstants.UNKNOWN_PID:
        return f'{prefix}{record.level}/{record.tag}: {record.message}'
    return f'{prefix}{record.level}/{record.tag}({record.pid:>5}): {record.message}'


def build_device_header(device_info: Mapping[str, str]) -> List[str]:
    """Return the header lines describing the device the logs came from."""
    lines = [_DEVICE_HEADER_TITLE]
    for key, value in device_info.items():
        lines.append(f'{key}: {value}')
    lines.append(_DEVICE_HEADER_END)
    return lines


def render_export(
    records: Iterable[LogRecord],
    include_device_info: bool = False,
    device_info: Optional[Mapping[str, str]] = None,
) -> str:
    """Render records as export text, optionally preceded by a device header."""
    lines: List[str] = []
    if include_device_info and device_info:
        lines.extend(build_device_header(device_info))
    lines.extend(format_record(record) for record in records)
    if not lines:
        return ''
    return '\n'.join(lines) + '\n'


def default_export_path(directory: str = PathConstants.DEFAULT_EXPORT_DIR) -> str:
    """Return a timestamped export file path inside the given directory."""
    filename = f'{PathConstants.EXPORT_PREFIX}{common.timestamp_time()}{PathConstants.EXPORT_EXT}'
    return (Path(common.get_full_path(directory)) / filename).as_posix()


def export_records(
    path: str,
    records: Iterable[LogRecord],
    include_device_info: bool = False,
    device_info: Optional[Mapping[str, str]] = None,
) -> str:
    """Write the rendered records to `path` and return the written path.

    Raises:
        OSError: If the file cannot be written.
    """
    export_path = Path(common.get_full_path(path))
    content = render_export(records, include_device_info, device_info)

    try:
        common.make_gen_dir_path(str(export_path.parent))
        export_path.write_text(content, encoding='utf-8')
    except OSError as exc:
        logger.error('Failed to export logs to %s: %s', export_path, exc)
        raise

    logger.info('Exported %d line(s) to %s', content.count('\n'), export_path)
    return export_path.as_posix()
