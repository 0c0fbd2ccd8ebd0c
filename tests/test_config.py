"""Tests for environment-driven settings."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from budget_tracker.config import (
    AppSettings,
    ReportSettings,
    ValidationSettings,
    get_settings,
)
from budget_tracker.models import Currency


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("REPORT_DEFAULT_CURRENCY", "REPORT_TOP_CATEGORIES_LIMIT", "REPORT_FETCH_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        settings = ReportSettings()
        assert settings.default_currency == Currency.USD
        assert settings.top_categories_limit == 5
        assert settings.fetch_limit == 10_000

    def test_report_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("REPORT_DEFAULT_CURRENCY", "EUR")
        monkeypatch.setenv("REPORT_TOP_CATEGORIES_LIMIT", "3")
        settings = ReportSettings()
        assert settings.default_currency == Currency.EUR
        assert settings.top_categories_limit == 3

    def test_validation_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("VALIDATION_LARGE_AMOUNT_THRESHOLD", "2500.50")
        assert ValidationSettings().large_amount_threshold == Decimal("2500.50")

    def test_invalid_currency_rejected(self, monkeypatch):
        monkeypatch.setenv("REPORT_DEFAULT_CURRENCY", "XYZ")
        with pytest.raises(ValidationError):
            ReportSettings()

    def test_log_level_normalized(self):
        assert AppSettings(log_level=" warning ").log_level == "WARNING"
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()

    def test_sub_settings(self, monkeypatch):
        monkeypatch.setenv("VALIDATION_OLD_TRANSACTION_DAYS", "90")
        get_settings.cache_clear()
        try:
            assert get_settings().validation.old_transaction_days == 90
        finally:
            get_settings.cache_clear()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
