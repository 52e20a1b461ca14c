"""Tests for configuration parsing helpers and validation."""

import unittest
from unittest import mock

from yt_ban_watch import config


class TestParsers(unittest.TestCase):
    def test_parse_int(self):
        self.assertEqual(config._parse_int("3", 1), 3)
        self.assertEqual(config._parse_int("three", 1), 1)
        self.assertEqual(config._parse_int(None, 1), 1)

    def test_parse_float(self):
        self.assertEqual(config._parse_float("0.5", 1.5), 0.5)
        self.assertEqual(config._parse_float("", 1.5), 1.5)

    def test_parse_bool(self):
        self.assertTrue(config._parse_bool("Yes"))
        self.assertFalse(config._parse_bool("off"))
        self.assertTrue(config._parse_bool(None, True))


class TestValidate(unittest.TestCase):
    def test_missing_webhook(self):
        with mock.patch.object(config, "DISCORD_WEBHOOK_URL", None):
            with self.assertRaises(config.ConfigError) as ctx:
                config.validate()
        self.assertIn("DISCORD_WEBHOOK_URL", str(ctx.exception))

    def test_webhook_present(self):
        with mock.patch.object(config, "DISCORD_WEBHOOK_URL", "https://discord.com/api/webhooks/1/x"):
            config.validate()


if __name__ == "__main__":
    unittest.main()
