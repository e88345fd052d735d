#!/usr/bin/env python3
"""
Unit tests for client configuration.
"""

import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.utils.config import ClientConfig
from common.constants import DEFAULT_BACKEND_URL


class TestClientConfig(unittest.TestCase):
    """Test cases for ClientConfig."""

    def test_defaults_match_fixed_transport_settings(self):
        """Test the default reconnection and transport settings."""
        config = ClientConfig()
        self.assertEqual(config.endpoint, DEFAULT_BACKEND_URL)
        self.assertEqual(config.get_transport_settings(), {
            'reconnection': True,
            'maxAttempts': 5,
            'retryDelayMs': 1000,
            'timeoutMs': 20000,
            'transportPreference': ['websocket', 'polling'],
        })
        self.assertEqual(config.retry_delay, 1.0)
        self.assertEqual(config.timeout, 20.0)

    def test_overrides(self):
        config = ClientConfig(endpoint='http://chat.test', username='alice', max_attempts=2,
                              transports=['polling'])
        self.assertEqual(config.get_connection_info(), {'endpoint': 'http://chat.test', 'username': 'alice'})
        self.assertEqual(config.max_attempts, 2)
        self.assertEqual(config.transports, ['polling'])

    def test_invalid_values_rejected(self):
        """Test that negative retry settings and non-positive timeouts raise."""
        with self.assertRaises(ValueError):
            ClientConfig(max_attempts=-1)
        with self.assertRaises(ValueError):
            ClientConfig(retry_delay_ms=-5)
        with self.assertRaises(ValueError):
            ClientConfig(timeout_ms=0)


if __name__ == '__main__':
    unittest.main()
