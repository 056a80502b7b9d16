# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

from pathlib import Path

import os
from unittest.mock import patch

from parameterized import parameterized

import jivesearch
from jivesearch.exceptions import JiveSettingsException
from jivesearch import settings_loader
from jivesearch.settings_defaults import SCHEMA, SettingsBangs, apply_schema
from tests import JiveTestCase


def _settings(f_name):
    return str(Path(__file__).parent.absolute() / "settings" / f_name)


class TestLoad(JiveTestCase):

    def test_load_zero(self):
        with self.assertRaises(JiveSettingsException):
            settings_loader.load_yaml('/dev/zero')

        with self.assertRaises(JiveSettingsException):
            settings_loader.load_yaml(_settings("syntaxerror_settings.yml"))

        self.assertEqual(settings_loader.load_yaml(_settings("empty_settings.yml")), {})


class TestDefaultSettings(JiveTestCase):

    def test_load(self):
        settings, msg = settings_loader.load_settings(load_user_settings=False)
        self.assertTrue(msg.startswith('load the default settings from'))
        self.assertFalse(settings['general']['debug'])
        self.assertIsInstance(settings['general']['instance_name'], str)
        self.assertEqual(settings['server']['secret_key'], "ultrasecretkey")
        self.assertIsInstance(settings['server']['port'], int)
        self.assertIsInstance(settings['server']['bind_address'], str)
        self.assertEqual(settings['search']['query_var'], 'q')
        self.assertEqual(settings['bangs']['suggester'], 'memory')
        self.assertFalse(settings['bangs']['encode_term'])

    def test_schema(self):
        settings, _ = settings_loader.load_settings(load_user_settings=False)
        apply_schema(settings, SCHEMA, [])
        self.assertIsInstance(settings['bangs'], SettingsBangs)
        self.assertEqual(settings['bangs'].index, 'jivesearch_bangs')
        self.assertEqual(settings['instant'].stock.history_range, '5y')

    def test_schema_invalid(self):
        settings, _ = settings_loader.load_settings(load_user_settings=False)
        settings['bangs']['suggester'] = 'elasticsearch'
        with self.assertLogs('jivesearch', level='ERROR'):
            with self.assertRaises(ValueError):
                apply_schema(settings, SCHEMA, [])

    def test_schema_environ(self):
        settings, _ = settings_loader.load_settings(load_user_settings=False)
        with patch.dict(os.environ, {'JIVESEARCH_PORT': '9999', 'JIVESEARCH_DEBUG': 'true'}):
            apply_schema(settings, SCHEMA, [])
        self.assertEqual(settings['server']['port'], 9999)
        self.assertTrue(settings['general']['debug'])


class TestUserSettings(JiveTestCase):

    def test_is_use_default_settings(self):
        self.assertFalse(settings_loader.is_use_default_settings({}))
        self.assertTrue(settings_loader.is_use_default_settings({'use_default_settings': True}))
        with self.assertRaises(ValueError):
            self.assertFalse(settings_loader.is_use_default_settings({'use_default_settings': 1}))
        with self.assertRaises(ValueError):
            self.assertFalse(settings_loader.is_use_default_settings({'use_default_settings': 0}))

    @parameterized.expand(
        [
            _settings("not_exists.yml"),
            "/folder/not/exists",
        ]
    )
    def test_user_settings_not_found(self, path: str):
        with patch.dict(os.environ, {'JIVESEARCH_SETTINGS_PATH': path}):
            with self.assertRaises(EnvironmentError):
                _s, _m = settings_loader.load_settings()

    def test_user_settings(self):
        with patch.dict(os.environ, {'JIVESEARCH_SETTINGS_PATH': _settings("user_settings_simple.yml")}):
            settings, msg = settings_loader.load_settings()
            self.assertTrue(msg.startswith('merge the default settings'))
            self.assertEqual(settings['server']['secret_key'], "user_secret_key")
            self.assertEqual(settings['bangs']['suggest_size'], 3)
            # merged, not replaced
            self.assertEqual(settings['bangs']['index'], 'jivesearch_bangs')
            self.assertEqual(settings['search']['query_var'], 'q')

    def test_custom_settings(self):
        with patch.dict(os.environ, {'JIVESEARCH_SETTINGS_PATH': _settings("user_settings.yml")}):
            settings, msg = settings_loader.load_settings()
            self.assertTrue(msg.startswith('load the user settings from'))
            self.assertEqual(settings['server']['port'], 9000)
            self.assertEqual(settings['server']['secret_key'], "user_settings_secret")
            self.assertNotIn('bangs', settings)

    def test_settings_folder(self):
        with patch.dict(os.environ, {'JIVESEARCH_SETTINGS_PATH': str(Path(_settings("x")).parent)}):
            self.assertEqual(settings_loader.get_user_cfg_folder(), Path(_settings("x")).parent)


class TestGetSetting(JiveTestCase):

    def test_get_setting(self):
        self.assertEqual(jivesearch.get_setting('server.secret_key'), 'test_secret_key')
        self.assertEqual(jivesearch.get_setting('bangs.suggest_size'), 5)
        self.assertEqual(jivesearch.get_setting('instant.stock.history_range'), '5y')
        self.assertEqual(jivesearch.get_setting('bangs.nosuchkey', 'default'), 'default')
        with self.assertRaises(KeyError):
            jivesearch.get_setting('nosuchsection.key')
