"""
Unit tests for application settings and logging setup.

@testCovers portal_app/config.py
@testCovers portal_app/lib/utils/logging_utils.py
"""

import logging
import os
import unittest
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from portal_app.config import Settings
from portal_app.lib.utils.logging_utils import CategoryFilter, setup_logging


class TestSettings(unittest.TestCase):
    """Test settings defaults and environment overrides."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.default_department, 'General')
        self.assertEqual(settings.max_project_departments, 8)
        self.assertEqual(settings.max_instruction_documents, 10)
        self.assertEqual(settings.log_level, 'INFO')
        self.assertEqual(settings.log_categories, [])

    def test_environment_overrides(self):
        env = {
            'DEFAULT_DEPARTMENT': 'Everyone',
            'LOG_LEVEL': 'debug',
            'LOG_CATEGORIES': 'portal_app.lib.permissions, portal_app.lib.services',
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.default_department, 'Everyone')
        self.assertEqual(settings.log_level, 'DEBUG')
        self.assertEqual(
            settings.log_categories,
            ['portal_app.lib.permissions', 'portal_app.lib.services']
        )

    def test_blank_default_department_falls_back(self):
        with patch.dict(os.environ, {'DEFAULT_DEPARTMENT': '  '}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.default_department, 'General')


class TestLogging(unittest.TestCase):
    """Test category filtering."""

    def setUp(self):
        self.root_handlers = list(logging.getLogger().handlers)
        self.root_level = logging.getLogger().level

    def tearDown(self):
        root = logging.getLogger()
        root.handlers[:] = self.root_handlers
        root.setLevel(self.root_level)

    def _record(self, name):
        return logging.LogRecord(name, logging.INFO, __file__, 1, 'msg', None, None)

    def test_category_filter(self):
        log_filter = CategoryFilter(['portal_app.lib.permissions'])
        self.assertTrue(log_filter.filter(self._record('portal_app.lib.permissions.project_access')))
        self.assertFalse(log_filter.filter(self._record('portal_app.lib.services.project_service')))
        self.assertTrue(CategoryFilter([]).filter(self._record('anything')))

    def test_setup_logging_installs_single_handler(self):
        setup_logging('DEBUG', ['portal_app'])
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].filters[0], CategoryFilter)


if __name__ == '__main__':
    unittest.main()
