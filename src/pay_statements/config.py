"""Configuration management for pay statements."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from dotenv import find_dotenv, load_dotenv

from pay_statements.errors import ConfigurationError

DATA_BACKENDS = ("local", "database")
UPLOAD_BACKENDS = ("local", "drive")


def _parse_date(name: str, value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}") from e


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    data_backend: str
    data_dir: str

    pay_period_anchor: date
    pay_period_horizon: date
    pay_period_grace_days: int

    company_name: str
    company_street: str
    company_suite: str
    company_city: str
    company_state: str
    company_zip: str
    company_phone: str

    upload_backend: str
    drive_parent_folder_id: str | None
    drive_drive_id: str | None
    drive_access_token: str | None

    host: str
    port: int
    debug: bool
    log_level: str

    def __post_init__(self) -> None:
        if self.data_backend not in DATA_BACKENDS:
            raise ConfigurationError(
                f"DATA_BACKEND must be one of {DATA_BACKENDS}, got {self.data_backend!r}"
            )
        if self.upload_backend not in UPLOAD_BACKENDS:
            raise ConfigurationError(
                f"UPLOAD_BACKEND must be one of {UPLOAD_BACKENDS}, got {self.upload_backend!r}"
            )
        if self.pay_period_horizon < self.pay_period_anchor:
            raise ConfigurationError(
                "PAY_PERIOD_HORIZON must not precede PAY_PERIOD_ANCHOR"
            )
        if self.pay_period_grace_days < 0:
            raise ConfigurationError("PAY_PERIOD_GRACE_DAYS must be non-negative")

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv(find_dotenv(usecwd=True))

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./pay_statements.db",
            ),
            data_backend=os.getenv("DATA_BACKEND", "local").lower(),
            data_dir=os.getenv("DATA_DIR", "./data"),
            pay_period_anchor=_parse_date(
                "PAY_PERIOD_ANCHOR", os.getenv("PAY_PERIOD_ANCHOR", "2025-08-18")
            ),
            pay_period_horizon=_parse_date(
                "PAY_PERIOD_HORIZON", os.getenv("PAY_PERIOD_HORIZON", "2026-08-30")
            ),
            pay_period_grace_days=_parse_int(
                "PAY_PERIOD_GRACE_DAYS", os.getenv("PAY_PERIOD_GRACE_DAYS", "9")
            ),
            company_name=os.getenv("COMPANY_NAME", "ELEMENT CLEANING SYSTEMS LLC"),
            company_street=os.getenv("COMPANY_STREET", "1400 112th Ave Se"),
            company_suite=os.getenv("COMPANY_SUITE", "Suite 100"),
            company_city=os.getenv("COMPANY_CITY", "Bellevue"),
            company_state=os.getenv("COMPANY_STATE", "WA"),
            company_zip=os.getenv("COMPANY_ZIP", "98004"),
            company_phone=os.getenv("COMPANY_PHONE", "425-591-9427"),
            upload_backend=os.getenv("UPLOAD_BACKEND", "local").lower(),
            drive_parent_folder_id=os.getenv("DRIVE_PARENT_FOLDER_ID") or None,
            drive_drive_id=os.getenv("DRIVE_DRIVE_ID") or None,
            drive_access_token=os.getenv("DRIVE_ACCESS_TOKEN") or None,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_parse_int("PORT", os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
