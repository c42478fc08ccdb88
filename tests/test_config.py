"""Tests for settings loading."""

from dataclasses import replace
from datetime import date

import pytest

from pay_statements.config import Settings
from pay_statements.errors import ConfigurationError

ENV_KEYS = [
    "DATABASE_URL",
    "DATA_BACKEND",
    "DATA_DIR",
    "PAY_PERIOD_ANCHOR",
    "PAY_PERIOD_HORIZON",
    "PAY_PERIOD_GRACE_DAYS",
    "UPLOAD_BACKEND",
    "DRIVE_PARENT_FOLDER_ID",
    "DRIVE_ACCESS_TOKEN",
    "COMPANY_NAME",
    "PORT",
    "DEBUG",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any .env file."""
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestSettings:
    """Test environment parsing and validation."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.data_backend == "local"
        assert settings.upload_backend == "local"
        assert settings.pay_period_anchor == date(2025, 8, 18)
        assert settings.pay_period_horizon == date(2026, 8, 30)
        assert settings.pay_period_grace_days == 9
        assert settings.company_name == "ELEMENT CLEANING SYSTEMS LLC"
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.debug is False

    def test_reads_environment(self, clean_env):
        clean_env.setenv("DATA_BACKEND", "Database")
        clean_env.setenv("PAY_PERIOD_ANCHOR", "2026-01-05")
        clean_env.setenv("PAY_PERIOD_HORIZON", "2026-12-31")
        clean_env.setenv("PAY_PERIOD_GRACE_DAYS", "3")
        clean_env.setenv("UPLOAD_BACKEND", "drive")
        clean_env.setenv("DRIVE_PARENT_FOLDER_ID", "parent-1")
        clean_env.setenv("PORT", "9000")
        clean_env.setenv("DEBUG", "true")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.data_backend == "database"
        assert settings.pay_period_anchor == date(2026, 1, 5)
        assert settings.pay_period_grace_days == 3
        assert settings.upload_backend == "drive"
        assert settings.drive_parent_folder_id == "parent-1"
        assert settings.drive_access_token is None
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("COMPANY_NAME=Dotenv Cleaning\n", encoding="utf-8")

        assert Settings.from_env().company_name == "Dotenv Cleaning"

    @pytest.mark.parametrize(
        "key,value",
        [
            ("PAY_PERIOD_ANCHOR", "18/08/2025"),
            ("PAY_PERIOD_GRACE_DAYS", "nine"),
            ("PORT", "http"),
            ("DATA_BACKEND", "redis"),
            ("UPLOAD_BACKEND", "s3"),
            ("PAY_PERIOD_HORIZON", "2020-01-01"),
            ("PAY_PERIOD_GRACE_DAYS", "-1"),
        ],
    )
    def test_invalid_values_raise(self, clean_env, key, value):
        clean_env.setenv(key, value)

        with pytest.raises(ConfigurationError):
            Settings.from_env()

    def test_settings_are_frozen(self, settings):
        with pytest.raises(AttributeError):
            settings.port = 1

    def test_replace_validates(self, settings):
        with pytest.raises(ConfigurationError):
            replace(settings, data_backend="nosql")
