"""
Spending Report Service

DESIGN DECISION: Report generation is DETERMINISTIC.
The service only fetches a transaction snapshot from storage and hands it
to SpendingReport.generate. Every figure in a report comes from stored
transactions; nothing is estimated or cached.

Each request gets a correlation id so the fetch and the resulting report
(or failure) can be traced together in the audit log.
"""

from typing import Any, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict

from budget_tracker.audit import AuditLogger, create_correlation_id
from budget_tracker.config import ReportSettings, get_settings
from budget_tracker.models.category import DEFAULT_COLOR_HEX, TransactionCategory
from budget_tracker.models.currency import Currency
from budget_tracker.models.date_range import DateRange
from budget_tracker.models.errors import BudgetTrackerError
from budget_tracker.models.expense_period import (
    ExpensePeriod,
    ExpensePeriodError,
    ExpensePeriodErrorCode,
)
from budget_tracker.models.money import Money
from budget_tracker.models.report import CategorySpending, SpendingReport
from budget_tracker.models.transaction import Transaction
from budget_tracker.services.storage import (
    CategoryStorageInterface,
    ExpensePeriodStorageInterface,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)

UNKNOWN_CATEGORY_NAME = "Unknown"


class CategoryBreakdownRow(BaseModel):
    """A breakdown entry joined with its category's display metadata."""
    model_config = ConfigDict(frozen=True)

    category_id: UUID
    name: str
    icon: str
    color_hex: str
    total_spent: Money
    transaction_count: int
    percentage_of_total: float

    @property
    def formatted_total(self) -> str:
        return self.total_spent.formatted

    @property
    def formatted_percentage(self) -> str:
        return f"{self.percentage_of_total:.1f}%"


class SpendingReportService:
    """
    Builds spending reports from stored transactions.

    GUARANTEES:
    - Only reports on real data from storage
    - Failures are audited and re-raised unchanged
    """

    def __init__(
        self,
        transaction_storage: TransactionStorageInterface,
        period_storage: Optional[ExpensePeriodStorageInterface] = None,
        category_storage: Optional[CategoryStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ReportSettings] = None,
    ):
        self._transactions = transaction_storage
        self._periods = period_storage
        self._categories = category_storage
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings().reports

    async def _fetch(
        self,
        correlation_id: UUID,
        **filters: Any,
    ) -> list[Transaction]:
        """
        Load the complete transaction snapshot for a report.

        Pages through storage fetch_limit rows at a time until a short
        page comes back, so a report never aggregates a partial ledger.
        """
        page_size = self._settings.fetch_limit
        transactions: list[Transaction] = []

        try:
            while True:
                page = await self._transactions.list_transactions(
                    limit=page_size, offset=len(transactions), **filters
                )
                transactions.extend(page)
                if len(page) < page_size:
                    break
        except StorageError as e:
            await self._audit.log_storage_error("list_transactions", str(e), correlation_id)
            raise

        await self._audit.log_transactions_fetched(
            result_count=len(transactions),
            filters=filters,
            correlation_id=correlation_id,
        )
        return transactions

    async def _load_period(self, period_id: UUID, correlation_id: UUID) -> ExpensePeriod:
        try:
            period = await self._periods.get_period(period_id)
        except StorageError as e:
            await self._audit.log_storage_error("get_period", str(e), correlation_id)
            raise
        if period is None:
            raise ExpensePeriodError(ExpensePeriodErrorCode.PERIOD_NOT_FOUND, period_id=period_id)
        return period

    async def _audit_failure(
        self,
        scope: str,
        error: Exception,
        correlation_id: UUID,
        period_id: Optional[UUID] = None,
    ) -> None:
        error_code = error.code.value if isinstance(error, BudgetTrackerError) else type(error).__name__
        await self._audit.log_report_failed(
            scope=scope,
            error_code=error_code,
            error_message=str(error),
            correlation_id=correlation_id,
            period_id=period_id,
        )

    async def _audit_success(
        self,
        scope: str,
        report: SpendingReport,
        correlation_id: UUID,
        period_id: Optional[UUID] = None,
    ) -> None:
        await self._audit.log_report_generated(
            scope=scope,
            date_range=report.date_range.formatted,
            transaction_count=report.transaction_count,
            total=report.formatted_total,
            correlation_id=correlation_id,
            period_id=period_id,
        )

    async def generate(
        self,
        date_range: DateRange,
        category_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SpendingReport:
        """
        Generate a report for a date range, optionally for one category.

        Raises:
            SpendingReportError(CURRENCY_MISMATCH): Mixed currencies in range
            StorageError: If the snapshot cannot be loaded
        """
        correlation_id = correlation_id or create_correlation_id()
        scope = "category" if category_id else "date_range"

        try:
            transactions = await self._fetch(
                correlation_id,
                category_id=category_id,
                date_range=date_range,
            )
            report = SpendingReport.generate(
                transactions,
                date_range,
                default_currency=self._settings.default_currency,
            )
        except (BudgetTrackerError, StorageError) as e:
            await self._audit_failure(scope, e, correlation_id)
            raise

        await self._audit_success(scope, report, correlation_id)
        return report

    async def generate_for_period(
        self,
        period_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> SpendingReport:
        """
        Generate a report over a period's date range, counting only the
        transactions linked to that period.

        Raises:
            ExpensePeriodError(PERIOD_NOT_FOUND): If the period doesn't exist
        """
        if self._periods is None:
            raise RuntimeError("Period storage is not configured")

        correlation_id = correlation_id or create_correlation_id()

        try:
            period = await self._load_period(period_id, correlation_id)
            transactions = await self._fetch(correlation_id, period_id=period_id)
            report = SpendingReport.generate(
                transactions,
                period.date_range,
                default_currency=self._settings.default_currency,
            )
        except (BudgetTrackerError, StorageError) as e:
            await self._audit_failure("period", e, correlation_id, period_id=period_id)
            raise

        await self._audit_success("period", report, correlation_id, period_id=period_id)
        return report

    async def generate_by_currency(
        self,
        date_range: DateRange,
        correlation_id: Optional[UUID] = None,
    ) -> dict[Currency, SpendingReport]:
        """One report per currency present in the range; never converts."""
        correlation_id = correlation_id or create_correlation_id()

        try:
            transactions = await self._fetch(correlation_id, date_range=date_range)
            reports = SpendingReport.generate_by_currency(transactions, date_range)
        except (BudgetTrackerError, StorageError) as e:
            await self._audit_failure("by_currency", e, correlation_id)
            raise

        for report in reports.values():
            await self._audit_success("by_currency", report, correlation_id)
        return reports

    def top_categories(self, report: SpendingReport) -> list[CategorySpending]:
        """The report's biggest categories, capped at REPORT_TOP_CATEGORIES_LIMIT."""
        return report.top_categories(self._settings.top_categories_limit)

    async def describe_breakdown(
        self,
        report: SpendingReport,
    ) -> list[CategoryBreakdownRow]:
        """
        Join a report's breakdown with category names, icons and colours.

        Categories missing from storage (or no category storage at all) are
        shown as "Unknown" with the "Other" icon.
        """
        rows = []
        for spending in report.category_breakdown:
            category = None
            if self._categories is not None:
                category = await self._categories.get_category(spending.category_id)

            if category is None:
                logger.warning("breakdown_category_missing", category_id=str(spending.category_id))
                name = UNKNOWN_CATEGORY_NAME
                icon = TransactionCategory.OTHER.icon
                color_hex = DEFAULT_COLOR_HEX
            else:
                name, icon, color_hex = category.name, category.icon, category.color_hex

            rows.append(CategoryBreakdownRow(
                category_id=spending.category_id,
                name=name,
                icon=icon,
                color_hex=color_hex,
                total_spent=spending.total_spent,
                transaction_count=spending.transaction_count,
                percentage_of_total=spending.percentage_of_total,
            ))
        return rows
