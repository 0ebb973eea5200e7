"""Unit tests for SettingsStore."""

import json
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PyQt6.QtCore import QCoreApplication

from config.constants import PreferenceKeys
from config.settings_store import LogcatPreferences, SettingsStore


class TestSettingsStore(unittest.TestCase):
    """Test cases for SettingsStore."""

    @classmethod
    def setUpClass(cls):
        cls._app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.settings_path = Path(self.temp_dir) / 'settings.json'
        self.store = SettingsStore(str(self.settings_path))

    def tearDown(self):
        if Path(self.temp_dir).exists():
            shutil.rmtree(self.temp_dir)

    def test_defaults(self):
        self.assertEqual(self.store.get_logcat_buffers(), {'main', 'system', 'crash'})
        self.assertEqual(self.store.get_log_size_limit(), 10000)
        self.assertEqual(self.store.get_log_level(), 'V')
        self.assertFalse(self.store.get_include_device_info())
        self.assertFalse(self.settings_path.exists())

    def test_values_persist_across_instances(self):
        self.store.set_logcat_buffers({'main', 'events'})
        self.store.set_log_size_limit(2500)
        self.store.set_log_level('W')
        self.store.set_include_device_info(True)

        reloaded = SettingsStore(str(self.settings_path))
        self.assertEqual(reloaded.get_logcat_buffers(), {'main', 'events'})
        self.assertEqual(reloaded.get_log_size_limit(), 2500)
        self.assertEqual(reloaded.get_log_level(), 'W')
        self.assertTrue(reloaded.get_include_device_info())

    def test_file_format_uses_preference_keys(self):
        self.store.set_logcat_buffers(['system', 'main'])

        with open(self.settings_path, encoding='utf-8') as f:
            data = json.load(f)
        self.assertEqual(data[PreferenceKeys.LOGCAT_BUFFER], ['main', 'system'])
        self.assertEqual(data[PreferenceKeys.LOG_SIZE_LIMIT], 10000)
        self.assertEqual(data[PreferenceKeys.LOG_LEVEL], 'V')
        self.assertIs(data[PreferenceKeys.INCLUDE_DEVICE_INFO], False)

    def test_returned_buffers_are_a_copy(self):
        buffers = self.store.get_logcat_buffers()
        buffers.add('radio')
        self.assertNotIn('radio', self.store.get_logcat_buffers())

    def test_listeners_called_for_every_preference(self):
        calls = {'count': 0}

        def listener():
            calls['count'] += 1

        self.store.register_change_listener(listener)
        self.store.set_logcat_buffers({'main'})
        self.store.set_log_size_limit(50)
        self.store.set_log_level('E')
        self.store.set_include_device_info(True)

        self.assertEqual(calls['count'], 4)

    def test_unchanged_value_does_not_notify(self):
        calls = {'count': 0}
        self.store.register_change_listener(lambda: calls.__setitem__('count', calls['count'] + 1))

        self.store.set_log_level('V')
        self.store.set_logcat_buffers({'crash', 'system', 'main'})

        self.assertEqual(calls['count'], 0)

    def test_signal_carries_changed_key(self):
        keys = []
        self.store.settings_changed.connect(keys.append)

        self.store.set_log_size_limit(123)
        self.store.set_include_device_info(True)

        self.assertEqual(keys, [PreferenceKeys.LOG_SIZE_LIMIT, PreferenceKeys.INCLUDE_DEVICE_INFO])

    def test_unregister_listener(self):
        calls = {'count': 0}

        def listener():
            calls['count'] += 1

        self.store.register_change_listener(listener)
        self.assertTrue(self.store.unregister_change_listener(listener))
        self.assertFalse(self.store.unregister_change_listener(listener))

        self.store.set_log_level('D')
        self.assertEqual(calls['count'], 0)

    def test_failing_listener_does_not_block_others(self):
        calls = {'count': 0}

        def broken():
            raise RuntimeError('boom')

        def healthy():
            calls['count'] += 1

        self.store.register_change_listener(broken)
        self.store.register_change_listener(healthy)
        self.store.set_log_level('I')

        self.assertEqual(calls['count'], 1)
        self.assertEqual(self.store.get_log_level(), 'I')

    def test_setters_reject_invalid_values(self):
        with self.assertRaises(ValueError):
            self.store.set_logcat_buffers(set())
        with self.assertRaises(ValueError):
            self.store.set_logcat_buffers({'main', 'bogus'})
        with self.assertRaises(ValueError):
            self.store.set_logcat_buffers('main')
        with self.assertRaises(ValueError):
            self.store.set_log_size_limit(0)
        with self.assertRaises(ValueError):
            self.store.set_log_size_limit(True)
        with self.assertRaises(ValueError):
            self.store.set_log_level('X')
        with self.assertRaises(ValueError):
            self.store.set_include_device_info('yes')

        self.assertEqual(self.store.get_preferences(), LogcatPreferences())

    def test_invalid_file_values_fall_back_to_defaults(self):
        with open(self.settings_path, 'w', encoding='utf-8') as f:
            json.dump({
                PreferenceKeys.LOGCAT_BUFFER: [],
                PreferenceKeys.LOG_SIZE_LIMIT: -5,
                PreferenceKeys.LOG_LEVEL: 'W',
                PreferenceKeys.INCLUDE_DEVICE_INFO: 'nope',
            }, f)

        store = SettingsStore(str(self.settings_path))
        self.assertEqual(store.get_logcat_buffers(), {'main', 'system', 'crash'})
        self.assertEqual(store.get_log_size_limit(), 10000)
        self.assertEqual(store.get_log_level(), 'W')
        self.assertFalse(store.get_include_device_info())

    def test_corrupt_file_recovers_from_backup(self):
        self.store.set_log_level('E')
        self.store.set_log_size_limit(300)  # backup now holds level E

        with open(self.settings_path, 'w', encoding='utf-8') as f:
            f.write('{not json')

        store = SettingsStore(str(self.settings_path))
        self.assertEqual(store.get_log_level(), 'E')
        self.assertEqual(store.get_log_size_limit(), 10000)

    def test_corrupt_file_without_backup_uses_defaults(self):
        with open(self.settings_path, 'w', encoding='utf-8') as f:
            f.write('[1, 2, 3]')

        store = SettingsStore(str(self.settings_path))
        self.assertEqual(store.get_preferences(), LogcatPreferences())

    def test_failed_save_keeps_previous_value(self):
        with patch('utils.json_utils.save_json_to_file', side_effect=OSError('read-only')):
            with self.assertRaises(OSError):
                self.store.set_log_level('F')
        self.assertEqual(self.store.get_log_level(), 'V')

    def test_reset_without_changes_leaves_files_untouched(self):
        calls = {'count': 0}
        self.store.register_change_listener(lambda: calls.__setitem__('count', calls['count'] + 1))

        self.store.reset_to_defaults()

        self.assertFalse(self.settings_path.exists())
        self.assertFalse(self.store.backup_path.exists())
        self.assertEqual(calls['count'], 0)

    def test_reset_to_defaults_notifies_changed_keys(self):
        self.store.set_log_level('A')
        self.store.set_include_device_info(True)

        keys = []
        self.store.settings_changed.connect(keys.append)
        self.store.reset_to_defaults()

        self.assertEqual(self.store.get_preferences(), LogcatPreferences())
        self.assertEqual(sorted(keys), sorted([PreferenceKeys.LOG_LEVEL, PreferenceKeys.INCLUDE_DEVICE_INFO]))


if __name__ == '__main__':
    unittest.main()
