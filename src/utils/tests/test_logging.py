"""Tests for structured JSON logging."""

import json
import logging
import unittest

from utils.logging import REDACTED, JSONFormatter


class TestJSONFormatter(unittest.TestCase):

    def _format(self, **extra) -> dict:
        record = logging.LogRecord('auth', logging.INFO, __file__, 1, 'Signed in', None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return json.loads(JSONFormatter().format(record))

    def test_includes_extra_fields(self):
        data = self._format(userId='u1')

        self.assertEqual(data['message'], 'Signed in')
        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['userId'], 'u1')

    def test_masks_credentials(self):
        data = self._format(password='hunter22', token='abc', password_hash='s:k')

        self.assertEqual(data['password'], REDACTED)
        self.assertEqual(data['token'], REDACTED)
        self.assertEqual(data['password_hash'], REDACTED)


if __name__ == '__main__':
    unittest.main()
