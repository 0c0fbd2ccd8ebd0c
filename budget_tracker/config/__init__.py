"""Configuration package."""

from budget_tracker.config.settings import (
    AppSettings,
    ReportSettings,
    Settings,
    ValidationSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "ReportSettings",
    "Settings",
    "ValidationSettings",
    "get_settings",
]
