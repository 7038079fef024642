# tests/test_settings.py

"""Tests for the Settings configuration class."""

import os
import unittest
from pathlib import Path
from unittest.mock import patch

from shopdash.config import settings as settings_module
from shopdash.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_query_cache_ttl_positive(self) -> None:
        """QUERY_CACHE_TTL must be > 0."""
        self.assertGreater(Settings.QUERY_CACHE_TTL, 0)

    def test_image_bounds(self) -> None:
        """Exactly three images are required and allowed."""
        self.assertEqual(Settings.MIN_IMAGES, 3)
        self.assertEqual(Settings.MAX_IMAGES, 3)

    def test_table_page_size(self) -> None:
        self.assertEqual(Settings.TABLE_PAGE_SIZE, 10)

    def test_user_header_name(self) -> None:
        self.assertEqual(Settings.USER_HEADER, "x-user-id")

    def test_accounts_have_required_keys(self) -> None:
        """Every account must have id, email and password."""
        for account in Settings.ACCOUNTS:
            with self.subTest(account=account.get("email", "?")):
                self.assertIn("id", account)
                self.assertIn("email", account)
                self.assertIn("password", account)

    def test_path_constants_are_paths(self) -> None:
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)


class TestApiUrlResolution(unittest.TestCase):
    """SHOPDASH_API_URL selects the base URL."""

    def test_fallback_when_unset(self) -> None:
        env = {k: v for k, v in os.environ.items() if k != "SHOPDASH_API_URL"}
        with patch.dict(os.environ, env, clear=True):
            self.assertEqual(
                settings_module._resolve_api_url(),
                "https://ourapp.space/api",
            )

    def test_configured_url_gets_api_suffix(self) -> None:
        with patch.dict(
            os.environ, {"SHOPDASH_API_URL": "http://localhost:5000/"}
        ):
            self.assertEqual(
                settings_module._resolve_api_url(),
                "http://localhost:5000/api",
            )

    def test_blank_value_uses_fallback(self) -> None:
        with patch.dict(os.environ, {"SHOPDASH_API_URL": "   "}):
            self.assertEqual(
                settings_module._resolve_api_url(),
                "https://ourapp.space/api",
            )


if __name__ == "__main__":
    unittest.main()
