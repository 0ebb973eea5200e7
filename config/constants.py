"""Application constants and configuration values."""


class LogcatConstants:
    """Logcat format and level constants."""

    # Priorities in ascending order of severity
    LEVELS = ('V', 'D', 'I', 'W', 'E', 'F', 'A')

    # Ring buffers accepted by `logcat -b`
    KNOWN_BUFFERS = (
        'main',
        'system',
        'crash',
        'events',
        'radio',
        'kernel',
        'security',
        'stats',
    )

    # Sentinels used by parsed records
    UNKNOWN_PID = -1
    MESSAGE_ONLY_LEVEL = ' '

    PID_MIN = -32768
    PID_MAX = 32767

    SEPARATOR_PREFIX = '-'


class PreferenceKeys:
    """Keys used in the persisted preferences file."""

    LOGCAT_ARG_PREFIX = 'key_logcat_arg_'
    LOGCAT_BUFFER = f'{LOGCAT_ARG_PREFIX}buffer'
    LOG_SIZE_LIMIT = 'key_log_size_limit'
    LOG_LEVEL = 'key_log_level'
    INCLUDE_DEVICE_INFO = 'key_include_device_info'


class PreferenceDefaults:
    """Default values for persisted preferences."""

    LOGCAT_BUFFERS = frozenset({'main', 'system', 'crash'})
    LOG_SIZE_LIMIT = 10000
    LOG_LEVEL = 'V'
    INCLUDE_DEVICE_INFO = False


class PathConstants:
    """File and directory path constants."""

    SETTINGS_FILE = '~/.matlogx/settings.json'
    SETTINGS_BACKUP_FILE = '~/.matlogx/settings.backup.json'

    DEFAULT_EXPORT_DIR = '~/matlogx_exports'
    EXPORT_EXT = '.txt'
    EXPORT_PREFIX = 'logcat_'
