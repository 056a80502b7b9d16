# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

import pathlib
import os
import unittest


os.environ.pop('JIVESEARCH_SETTINGS_PATH', None)
os.environ['JIVESEARCH_DISABLE_ETC_SETTINGS'] = '1'


class JiveTestCase(unittest.TestCase):
    """Base test case for the unit tests."""

    SETTINGS_FOLDER = pathlib.Path(__file__).parent / "unit" / "settings"
    TEST_SETTINGS = "test_settings.yml"

    def setUp(self):
        self.init_test_settings()

    def setattr4test(self, obj, attr, value):
        """setattr(obj, attr, value) but reset to the previous value in the
        cleanup."""
        previous_value = getattr(obj, attr)

        def cleanup_patch():
            setattr(obj, attr, previous_value)

        self.addCleanup(cleanup_patch)
        setattr(obj, attr, value)

    def init_test_settings(self):
        """Sets ``JIVESEARCH_SETTINGS_PATH`` environment variable an
        initialize global ``settings`` variable and the ``logger`` from a test
        config in :origin:`tests/unit/settings/`.
        """

        os.environ['JIVESEARCH_SETTINGS_PATH'] = str(self.SETTINGS_FOLDER / self.TEST_SETTINGS)

        # pylint: disable=import-outside-toplevel
        import jivesearch
        import jivesearch.webapp

        # https://flask.palletsprojects.com/en/stable/config/#builtin-configuration-values
        jivesearch.webapp.app.config["TESTING"] = True  # to get better error messages

        jivesearch.init_settings()

        # pylint: disable=attribute-defined-outside-init
        self.app = jivesearch.webapp.app
        self.client = self.app.test_client()
