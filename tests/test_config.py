"""Tests for Settings validation and defaults."""

import unittest
from pathlib import Path

from pydantic import ValidationError

from tests.fakes import make_settings


class TestSettings(unittest.TestCase):
    """Invalid configuration fails at construction."""

    def test_database_url_defaults_to_data_dir(self) -> None:
        settings = make_settings(DATABASE_URL=None, DATA_DIR=Path("/var/lib/dockmaster"))
        self.assertEqual(settings.DATABASE_URL, "sqlite:////var/lib/dockmaster/dockmaster.db")

    def test_empty_jwt_secret_means_unset(self) -> None:
        self.assertIsNone(make_settings(JWT_SECRET="  ").JWT_SECRET)

    def test_log_level_is_normalized(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL="DEBUG").LOG_LEVEL, "debug")

    def test_invalid_values(self) -> None:
        for overrides in (
            {"LOG_LEVEL": "chatty"},
            {"PORT": 0},
            {"DATABASE_URL": "mysql://db/dockmaster"},
            {"BCRYPT_ROUNDS": 2},
            {"CONTAINER_SERVICE_URL": "ftp://containers"},
            {"JWT_EXPIRE_HOURS": 0},
        ):
            with self.assertRaises(ValidationError, msg=str(overrides)):
                make_settings(**overrides)
