"""
Configuration Management for the Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Domain models never read settings; services and validators do and pass
the values in. That keeps report generation a pure function of its input.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from budget_tracker.models.currency import Currency
from budget_tracker.models.report import DEFAULT_TOP_CATEGORIES


class ReportSettings(BaseSettings):
    """Spending report defaults."""

    model_config = SettingsConfigDict(
        env_prefix="REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_currency: Currency = Field(
        default=Currency.USD,
        description="Currency of an empty report when the ledger gives no hint"
    )
    top_categories_limit: int = Field(
        default=DEFAULT_TOP_CATEGORIES,
        ge=1,
        le=50,
        description="How many categories count as 'top' spending"
    )
    fetch_limit: int = Field(
        default=10_000,
        ge=1,
        description="Page size used when loading a report's transactions"
    )


class ValidationSettings(BaseSettings):
    """Thresholds for draft transaction warnings."""

    model_config = SettingsConfigDict(
        env_prefix="VALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    large_amount_threshold: Decimal = Field(
        default=Decimal("10000"),
        gt=0,
        description="Amounts above this get an 'unusually high' warning"
    )
    old_transaction_days: int = Field(
        default=365 * 2,
        ge=1,
        description="Dates older than this many days get a warning"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment, bound to every log line"
    )
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = console renderer)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def reports(self) -> ReportSettings:
        return ReportSettings()

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
