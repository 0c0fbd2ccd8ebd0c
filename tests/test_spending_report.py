"""
Tests for SpendingReport generation

Reports are pure functions of a transaction snapshot and a date range.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from budget_tracker.models import (
    CategoryError,
    CategorySpending,
    Currency,
    DateRange,
    Money,
    SpendingReport,
    SpendingReportError,
    SpendingReportErrorCode,
    Transaction,
    utc_now,
)


MARCH = DateRange.for_month(3, 2025)
FOOD = uuid4()
TRANSPORT = uuid4()
FUN = uuid4()


def spend(amount, category_id, when, currency=Currency.USD, name="Expense") -> Transaction:
    return Transaction.create_detailed(
        money=Money.of(amount, currency),
        name=name,
        category_id=category_id,
        date=when,
    )


def march(day: int) -> datetime:
    return datetime(2025, 3, day, 12, tzinfo=timezone.utc)


@pytest.fixture
def fifty_thirty_twenty() -> list[Transaction]:
    return [
        spend("50", FOOD, march(3)),
        spend("30", TRANSPORT, march(10)),
        spend("20", FOOD, march(20)),
    ]


class TestReportGeneration:

    def test_totals_and_breakdown(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)

        assert report.total_spent == Money.of(100, Currency.USD)
        assert report.transaction_count == 3
        assert len(report.category_breakdown) == 2

        food, transport = report.category_breakdown
        assert food.category_id == FOOD
        assert food.total_spent == Money.of(70, Currency.USD)
        assert food.transaction_count == 2
        assert food.percentage_of_total == pytest.approx(70.0)
        assert food.formatted_percentage == "70.0%"
        assert transport.category_id == TRANSPORT
        assert transport.percentage_of_total == pytest.approx(30.0)

    def test_average(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        assert report.average_transaction_amount.rounded().amount == Decimal("33.33")
        assert report.formatted_average == "$33.33"
        assert report.formatted_total == "$100.00"

    def test_breakdown_reconciles_with_total(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        breakdown_total = Money.total_of(
            (row.total_spent for row in report.category_breakdown), Currency.USD
        )
        assert breakdown_total == report.total_spent
        assert sum(row.transaction_count for row in report.category_breakdown) == 3
        assert sum(row.percentage_of_total for row in report.category_breakdown) == pytest.approx(100.0)

    def test_out_of_range_transactions_excluded(self, fifty_thirty_twenty):
        outside = spend("999", FUN, datetime(2025, 4, 1, tzinfo=timezone.utc))
        report = SpendingReport.generate(fifty_thirty_twenty + [outside], MARCH)
        assert report.total_spent == Money.of(100, Currency.USD)
        assert report.spending_for_category(FUN) is None

    def test_boundaries_are_inclusive(self):
        at_start = spend("1", FOOD, MARCH.start)
        at_end = spend("2", FOOD, MARCH.end)
        report = SpendingReport.generate([at_start, at_end], MARCH)
        assert report.transaction_count == 2

    def test_last_days_excludes_old_transaction(self):
        recent = spend("10", FOOD, utc_now() - timedelta(days=5))
        old = spend("40", FOOD, utc_now() - timedelta(days=60))
        report = SpendingReport.generate([recent, old], DateRange.last_days(30))
        assert report.transaction_count == 1
        assert report.total_spent == Money.of(10, Currency.USD)

    def test_breakdown_sorted_by_total_then_id(self):
        first, second = sorted([uuid4(), uuid4()], key=str)
        transactions = [
            spend("10", second, march(1)),
            spend("10", first, march(2)),
            spend("25", FUN, march(3)),
        ]
        report = SpendingReport.generate(transactions, MARCH)
        assert [row.category_id for row in report.category_breakdown] == [FUN, first, second]

    def test_input_order_does_not_matter(self, fifty_thirty_twenty):
        forward = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        backward = SpendingReport.generate(list(reversed(fifty_thirty_twenty)), MARCH)
        assert forward.category_breakdown == backward.category_breakdown
        assert forward.total_spent == backward.total_spent

    def test_accepts_any_iterable(self, fifty_thirty_twenty):
        report = SpendingReport.generate(iter(fifty_thirty_twenty), MARCH)
        assert report.transaction_count == 3


class TestEmptyReport:

    def test_no_transactions(self):
        report = SpendingReport.generate([], MARCH)
        assert report.transaction_count == 0
        assert report.total_spent.is_zero
        assert report.average_transaction_amount.is_zero
        assert report.category_breakdown == ()
        assert not report.has_transactions
        assert report.currency == Currency.USD
        assert report.summary == "No transactions in Mar 1 - 31"
        assert report.detailed_summary == "No spending data available for this period"

    def test_empty_uses_default_currency(self):
        report = SpendingReport.generate([], MARCH, default_currency=Currency.EUR)
        assert report.currency == Currency.EUR

    def test_empty_range_keeps_snapshot_currency(self):
        outside = spend("5", FOOD, datetime(2025, 5, 1, tzinfo=timezone.utc), Currency.GBP)
        report = SpendingReport.generate([outside], MARCH)
        assert report.transaction_count == 0
        assert report.currency == Currency.GBP

    def test_empty_factory(self):
        report = SpendingReport.empty(MARCH, Currency.JPY)
        assert report.formatted_total == "¥0"


class TestCurrencyHandling:

    def test_mixed_currencies_fail_whole_report(self):
        transactions = [
            spend("10", FOOD, march(1)),
            spend("10", FOOD, march(2), Currency.EUR),
        ]
        with pytest.raises(SpendingReportError) as exc_info:
            SpendingReport.generate(transactions, MARCH)
        assert exc_info.value.code == SpendingReportErrorCode.CURRENCY_MISMATCH

    def test_mixed_currency_outside_range_is_ignored(self):
        transactions = [
            spend("10", FOOD, march(1)),
            spend("10", FOOD, datetime(2025, 6, 1, tzinfo=timezone.utc), Currency.EUR),
        ]
        assert SpendingReport.generate(transactions, MARCH).currency == Currency.USD

    def test_generate_by_currency(self):
        transactions = [
            spend("10", FOOD, march(1)),
            spend("15", FOOD, march(2)),
            spend("7", FOOD, march(3), Currency.EUR),
        ]
        reports = SpendingReport.generate_by_currency(transactions, MARCH)
        assert set(reports) == {Currency.USD, Currency.EUR}
        assert reports[Currency.USD].total_spent == Money.of(25, Currency.USD)
        assert reports[Currency.EUR].transaction_count == 1

    def test_generate_by_currency_empty(self):
        assert SpendingReport.generate_by_currency([], MARCH) == {}


class TestDerivedQueries:

    def test_spending_for_category(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        assert report.spending_for_category(TRANSPORT).total_spent == Money.of(30, Currency.USD)
        assert report.spending_for_category(FUN) is None

    def test_require_spending_for_category(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        with pytest.raises(CategoryError):
            report.require_spending_for_category(FUN)

    def test_top_categories(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        assert [row.category_id for row in report.top_categories(1)] == [FOOD]
        assert len(report.top_categories()) == 2
        assert report.top_categories(0) == []

    def test_category_average(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        food = report.spending_for_category(FOOD)
        assert food.average_per_transaction == Money.of(35, Currency.USD)
        assert food.formatted_total == "$70.00"

    def test_daily_average(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        # March spans 30 whole days (1st 00:00 to 31st 23:59:59.999999)
        assert report.daily_average.rounded().amount == Decimal("3.33")

    def test_daily_average_none_for_ongoing(self, fifty_thirty_twenty):
        ongoing = DateRange.ongoing(MARCH.start)
        assert SpendingReport.generate(fifty_thirty_twenty, ongoing).daily_average is None

    def test_summaries(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        assert report.summary == "3 transactions totaling $100.00 in Mar 1 - 31"
        lines = report.detailed_summary.splitlines()
        assert lines[0] == report.summary
        assert lines[1] == "Average per transaction: $33.33"
        assert lines[2] == "Daily average: $3.33"

    def test_single_transaction_summary(self):
        report = SpendingReport.generate([spend("5", FOOD, march(1))], MARCH)
        assert report.summary == "1 transaction totaling $5.00 in Mar 1 - 31"

    def test_zero_count_category_average(self):
        row = CategorySpending(
            category_id=FOOD,
            total_spent=Money.zero(Currency.USD),
            transaction_count=0,
            percentage_of_total=0.0,
        )
        assert row.average_per_transaction is None

    def test_report_is_immutable(self, fifty_thirty_twenty):
        report = SpendingReport.generate(fifty_thirty_twenty, MARCH)
        with pytest.raises(Exception):
            report.transaction_count = 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
