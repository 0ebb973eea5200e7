"""Persistent logcat viewer preferences with change notification."""

import shutil
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Set

from PyQt6.QtCore import QObject, pyqtSignal

from config.constants import LogcatConstants, PathConstants, PreferenceDefaults, PreferenceKeys
from utils import common, json_utils

logger = common.get_logger('settings_store')

ChangeListener = Callable[[], None]


def validate_buffers(buffers: Iterable[str]) -> FrozenSet[str]:
    """Return the buffers as a frozenset, raising ValueError when invalid."""
    if isinstance(buffers, str):
        raise ValueError('Buffers must be a collection of names, not a string')
    normalized = frozenset(buffers)
    if not normalized:
        raise ValueError('At least one logcat buffer must be selected')
    unknown = sorted(name for name in normalized if name not in LogcatConstants.KNOWN_BUFFERS)
    if unknown:
        raise ValueError(f'Unknown logcat buffer(s): {", ".join(map(str, unknown))}')
    return normalized


def validate_size_limit(limit: int) -> int:
    """Return the line limit, raising ValueError unless it is a positive int."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f'Log size limit must be a positive integer, got {limit!r}')
    return limit


def validate_log_level(level: str) -> str:
    """Return the level code, raising ValueError when it is not a known level."""
    if not isinstance(level, str) or level not in LogcatConstants.LEVELS:
        raise ValueError(f'Unknown log level: {level!r}')
    return level


def validate_flag(value: bool) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f'Expected a boolean, got {value!r}')
    return value


@dataclass(frozen=True)
class LogcatPreferences:
    """Snapshot of the persisted logcat viewer preferences."""

    logcat_buffers: FrozenSet[str] = field(default_factory=lambda: PreferenceDefaults.LOGCAT_BUFFERS)
    log_size_limit: int = PreferenceDefaults.LOG_SIZE_LIMIT
    log_level: str = PreferenceDefaults.LOG_LEVEL
    include_device_info: bool = PreferenceDefaults.INCLUDE_DEVICE_INFO

    def to_dict(self) -> Dict[str, Any]:
        """Serialize preferences for JSON storage."""
        return {
            PreferenceKeys.LOGCAT_BUFFER: sorted(self.logcat_buffers),
            PreferenceKeys.LOG_SIZE_LIMIT: self.log_size_limit,
            PreferenceKeys.LOG_LEVEL: self.log_level,
            PreferenceKeys.INCLUDE_DEVICE_INFO: self.include_device_info,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LogcatPreferences':
        """Deserialize preferences, replacing invalid values with defaults."""
        defaults = cls()
        fields = (
            (PreferenceKeys.LOGCAT_BUFFER, 'logcat_buffers', validate_buffers),
            (PreferenceKeys.LOG_SIZE_LIMIT, 'log_size_limit', validate_size_limit),
            (PreferenceKeys.LOG_LEVEL, 'log_level', validate_log_level),
            (PreferenceKeys.INCLUDE_DEVICE_INFO, 'include_device_info', validate_flag),
        )

        values: Dict[str, Any] = {}
        for key, attr, validator in fields:
            if key not in data:
                continue
            try:
                values[attr] = validator(data[key])
            except (TypeError, ValueError) as exc:
                logger.warning('Invalid value for %s, reset to default: %s', key, exc)
        return replace(defaults, **values)


class SettingsStore(QObject):
    """Manages logcat viewer preferences and notifies clients when they change.

    Usage:
        store = SettingsStore()
        store.register_change_listener(self._restart_logcat)
        store.set_log_level('W')
    """

    settings_changed = pyqtSignal(str)  # preference key

    def __init__(
        self,
        settings_path: Optional[str] = None,
        backup_path: Optional[str] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.settings_path = Path(settings_path or PathConstants.SETTINGS_FILE).expanduser()
        if backup_path is None:
            backup_path = (
                PathConstants.SETTINGS_BACKUP_FILE
                if settings_path is None
                else str(self.settings_path.with_suffix('.backup.json'))
            )
        self.backup_path = Path(backup_path).expanduser()
        self._preferences: Optional[LogcatPreferences] = None
        self._listeners: List[ChangeListener] = []

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> LogcatPreferences:
        if self._preferences is not None:
            return self._preferences

        if not self.settings_path.exists():
            self._preferences = LogcatPreferences()
            logger.info('Using default logcat preferences')
            return self._preferences

        try:
            data = json_utils.load_json_from_file(str(self.settings_path))
            self._preferences = LogcatPreferences.from_dict(data)
            logger.info('Preferences loaded from %s', self.settings_path)
        except (OSError, ValueError) as exc:
            logger.error('Failed to load preferences: %s', exc)
            self._preferences = self._load_backup()

        return self._preferences

    def _load_backup(self) -> LogcatPreferences:
        if not self.backup_path.exists():
            return LogcatPreferences()

        try:
            logger.info('Attempting to load preferences from backup')
            data = json_utils.load_json_from_file(str(self.backup_path))
            preferences = LogcatPreferences.from_dict(data)
            logger.info('Preferences loaded from backup')
            return preferences
        except (OSError, ValueError) as backup_error:
            logger.error('Backup preferences also failed: %s', backup_error)
            return LogcatPreferences()

    def _save(self, preferences: LogcatPreferences) -> None:
        if self.settings_path.exists():
            try:
                self.backup_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(self.settings_path, self.backup_path)
            except OSError as exc:
                logger.warning('Failed to create preferences backup: %s', exc)

        json_utils.save_json_to_file(str(self.settings_path), preferences.to_dict())
        self._preferences = preferences

    def _update(self, key: str, **changes: Any) -> None:
        current = self._load()
        updated = replace(current, **changes)
        if updated == current:
            return

        self._save(updated)
        logger.info('Preference %s updated', key)
        self._notify(key)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def register_change_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked when any logcat preference changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_change_listener(self, listener: ChangeListener) -> bool:
        """Remove a previously registered callback. Returns True if removed."""
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    def _notify(self, key: str) -> None:
        self.settings_changed.emit(key)
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception('Preference change listener failed for %s', key)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def get_preferences(self) -> LogcatPreferences:
        return self._load()

    def get_logcat_buffers(self) -> Set[str]:
        """Get the selected logcat buffers."""
        return set(self._load().logcat_buffers)

    def set_logcat_buffers(self, buffers: Iterable[str]) -> None:
        """Save the selected logcat buffers.

        Raises:
            ValueError: If the set is empty or names an unknown buffer.
        """
        self._update(PreferenceKeys.LOGCAT_BUFFER, logcat_buffers=validate_buffers(buffers))

    def get_log_size_limit(self) -> int:
        """Get the number of log lines to keep."""
        return self._load().log_size_limit

    def set_log_size_limit(self, limit: int) -> None:
        """Save the limit for the number of log lines to keep."""
        self._update(PreferenceKeys.LOG_SIZE_LIMIT, log_size_limit=validate_size_limit(limit))

    def get_log_level(self) -> str:
        """Get the minimum log level, one of V, D, I, W, E, F, A."""
        return self._load().log_level

    def set_log_level(self, level: str) -> None:
        self._update(PreferenceKeys.LOG_LEVEL, log_level=validate_log_level(level))

    def get_include_device_info(self) -> bool:
        """Whether to include device information in exported logs."""
        return self._load().include_device_info

    def set_include_device_info(self, include: bool) -> None:
        self._update(PreferenceKeys.INCLUDE_DEVICE_INFO, include_device_info=validate_flag(include))

    def reset_to_defaults(self) -> None:
        """Reset all preferences to their defaults, notifying for each changed key."""
        current = self._load()
        defaults = LogcatPreferences()
        changed_keys = [
            key for key, value in defaults.to_dict().items()
            if current.to_dict()[key] != value
        ]
        if not changed_keys:
            return

        self._save(defaults)
        logger.info('Preferences reset to defaults')
        for key in changed_keys:
            self._notify(key)
