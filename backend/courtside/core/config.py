# backend/courtside/core/config.py
import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import BRAND_NAME

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: str = Field(default="development", description="Deployment environment name")

    api_title: str = Field(default=f"{BRAND_NAME} API")
    api_version: str = Field(default="1.0.0")

    database_url: str = Field(
        default="sqlite:///./courtside.db",
        description="SQLAlchemy URL for the booking store",
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    create_schema_on_startup: bool = Field(
        default=True, description="Create missing tables when the app starts"
    )

    facility_timezone: str = Field(
        default="UTC",
        description="IANA timezone used for every day-of-week and time-of-day evaluation",
    )
    tax_rate: Decimal = Field(default=Decimal("0.18"), description="Tax applied to the subtotal")
    currency: str = Field(default="INR")
    max_booking_hours: int = Field(default=12, gt=0, description="Longest bookable interval")

    lock_backend: Literal["local", "redis"] = Field(
        default="local",
        description="Where per-resource booking locks live",
    )
    redis_url: SecretStr = Field(default=SecretStr("redis://localhost:6379/0"))
    lock_namespace: str = Field(default="courtside")
    lock_ttl_seconds: int = Field(default=30, gt=0)
    lock_wait_timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("facility_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("tax_rate")
    @classmethod
    def _validate_tax_rate(cls, value: Decimal) -> Decimal:
        if value < 0 or value > 1:
            raise ValueError("tax_rate must be between 0 and 1")
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.lower().startswith("sqlite")


settings = Settings()
