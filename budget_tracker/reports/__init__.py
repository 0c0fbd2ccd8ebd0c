"""Spending report service package."""

from budget_tracker.reports.service import CategoryBreakdownRow, SpendingReportService

__all__ = ["CategoryBreakdownRow", "SpendingReportService"]
