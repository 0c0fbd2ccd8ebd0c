"""
Spending Report

A deterministic, immutable aggregation of transactions over a date range:
grand total, transaction count, per-category breakdown and averages.

Reports are computed fresh from a transaction snapshot on every request
and are never persisted. Generation is all-or-nothing: a currency
mismatch anywhere aborts the whole report.

DESIGN DECISION: One report holds one currency. `generate` fails on
mixed-currency input; callers holding multi-currency ledgers use
`generate_by_currency`, which returns one report per currency. No
conversion is ever performed.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from budget_tracker.models.category import CategoryError, CategoryErrorCode
from budget_tracker.models.currency import Currency
from budget_tracker.models.date_range import DateRange, ensure_aware, utc_now
from budget_tracker.models.errors import BudgetTrackerError
from budget_tracker.models.money import Money, MoneyError
from budget_tracker.models.transaction import Transaction


DEFAULT_TOP_CATEGORIES = 5


class SpendingReportErrorCode(str, Enum):
    NO_TRANSACTIONS = "no_transactions"
    CURRENCY_MISMATCH = "currency_mismatch"
    INVALID_DATE_RANGE = "invalid_date_range"


class SpendingReportError(BudgetTrackerError):
    messages = {
        SpendingReportErrorCode.NO_TRANSACTIONS: "No transactions found for the specified period",
        SpendingReportErrorCode.CURRENCY_MISMATCH: "Transactions have different currencies",
        SpendingReportErrorCode.INVALID_DATE_RANGE: "Invalid date range for report generation",
    }


class CategorySpending(BaseModel):
    """One category's contribution to a report."""
    model_config = ConfigDict(frozen=True)

    category_id: UUID
    total_spent: Money
    transaction_count: int = Field(ge=0)
    percentage_of_total: float = Field(ge=0.0, le=100.0)

    @property
    def formatted_total(self) -> str:
        return self.total_spent.formatted

    @property
    def formatted_percentage(self) -> str:
        return f"{self.percentage_of_total:.1f}%"

    @property
    def average_per_transaction(self) -> Optional[Money]:
        if self.transaction_count == 0:
            return None
        return self.total_spent.divide(self.transaction_count)


def _percentage(amount: Money, total: Money) -> float:
    if total.amount <= 0:
        return 0.0
    return float(amount.amount / total.amount * 100)


class SpendingReport(BaseModel):
    """
    Aggregated spending for a date range.

    Build with SpendingReport.generate(); the constructor is for
    deserialization and tests.
    """
    model_config = ConfigDict(frozen=True)

    date_range: DateRange
    total_spent: Money
    transaction_count: int = Field(ge=0)
    category_breakdown: tuple[CategorySpending, ...] = ()
    average_transaction_amount: Money
    generated_at: datetime = Field(default_factory=utc_now)

    @field_validator("generated_at")
    @classmethod
    def normalize_generated_at(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, date_range: DateRange, currency: Currency) -> "SpendingReport":
        return cls(
            date_range=date_range,
            total_spent=Money.zero(currency),
            transaction_count=0,
            category_breakdown=(),
            average_transaction_amount=Money.zero(currency),
        )

    @classmethod
    def generate(
        cls,
        transactions: Iterable[Transaction],
        date_range: DateRange,
        default_currency: Currency = Currency.USD,
    ) -> "SpendingReport":
        """
        Fold a transaction snapshot into a report.

        1. Keep transactions whose date falls in the range.
        2. Empty -> zero report (no division performed).
        3. Sum totals and per-category buckets in one pass.
        4. Breakdown sorted by total descending, ties by category id.
        5. Average = total / count.

        Raises:
            SpendingReportError(CURRENCY_MISMATCH): if the in-range
            transactions do not all share one currency.
        """
        snapshot = list(transactions)
        relevant = [t for t in snapshot if date_range.contains(t.date)]

        if not relevant:
            currency = snapshot[0].money.currency if snapshot else default_currency
            return cls.empty(date_range, currency)

        currency = relevant[0].money.currency
        total = Money.zero(currency)
        category_totals: dict[UUID, Money] = {}
        category_counts: dict[UUID, int] = defaultdict(int)

        try:
            for transaction in relevant:
                total = total.add(transaction.money)
                category_id = transaction.category_id
                if category_id in category_totals:
                    category_totals[category_id] = category_totals[category_id].add(transaction.money)
                else:
                    category_totals[category_id] = transaction.money
                category_counts[category_id] += 1
        except MoneyError as e:
            raise SpendingReportError(
                SpendingReportErrorCode.CURRENCY_MISMATCH,
                str(e),
                currencies=e.details.get("currencies"),
            ) from e

        breakdown = sorted(
            (
                CategorySpending(
                    category_id=category_id,
                    total_spent=category_total,
                    transaction_count=category_counts[category_id],
                    percentage_of_total=_percentage(category_total, total),
                )
                for category_id, category_total in category_totals.items()
            ),
            key=lambda row: (-row.total_spent.amount, str(row.category_id)),
        )

        return cls(
            date_range=date_range,
            total_spent=total,
            transaction_count=len(relevant),
            category_breakdown=tuple(breakdown),
            average_transaction_amount=total.divide(len(relevant)),
        )

    @classmethod
    def generate_by_currency(
        cls,
        transactions: Iterable[Transaction],
        date_range: DateRange,
    ) -> dict[Currency, "SpendingReport"]:
        """One single-currency report per currency present in the range."""
        by_currency: dict[Currency, list[Transaction]] = defaultdict(list)
        for transaction in transactions:
            if date_range.contains(transaction.date):
                by_currency[transaction.money.currency].append(transaction)
        return {
            currency: cls.generate(group, date_range, default_currency=currency)
            for currency, group in by_currency.items()
        }

    # -------------------------------------------------------------------------
    # Derived queries
    # -------------------------------------------------------------------------

    def spending_for_category(self, category_id: UUID) -> Optional[CategorySpending]:
        for row in self.category_breakdown:
            if row.category_id == category_id:
                return row
        return None

    def require_spending_for_category(self, category_id: UUID) -> CategorySpending:
        row = self.spending_for_category(category_id)
        if row is None:
            raise CategoryError(CategoryErrorCode.CATEGORY_NOT_FOUND, category_id=category_id)
        return row

    def top_categories(self, limit: int = DEFAULT_TOP_CATEGORIES) -> list[CategorySpending]:
        return list(self.category_breakdown[:max(limit, 0)])

    @property
    def currency(self) -> Currency:
        return self.total_spent.currency

    @property
    def has_transactions(self) -> bool:
        return self.transaction_count > 0

    @property
    def daily_average(self) -> Optional[Money]:
        """Total divided by the range's day count; None when ongoing or shorter than a day."""
        days = self.date_range.duration_in_days
        if days is None or days <= 0:
            return None
        return self.total_spent.divide(Decimal(days))

    @property
    def formatted_total(self) -> str:
        return self.total_spent.formatted

    @property
    def formatted_average(self) -> str:
        return self.average_transaction_amount.formatted

    @property
    def summary(self) -> str:
        period = self.date_range.short_formatted
        if self.transaction_count == 0:
            return f"No transactions in {period}"
        if self.transaction_count == 1:
            return f"1 transaction totaling {self.formatted_total} in {period}"
        return f"{self.transaction_count} transactions totaling {self.formatted_total} in {period}"

    @property
    def detailed_summary(self) -> str:
        if not self.has_transactions:
            return "No spending data available for this period"

        lines = [self.summary, f"Average per transaction: {self.formatted_average}"]
        daily = self.daily_average
        if daily is not None:
            lines.append(f"Daily average: {daily.formatted}")
        return "\n".join(lines)
