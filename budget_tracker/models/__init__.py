"""
Data Models Package

Value objects, entities and the spending report that make up the
financial core, plus the audit records written about them.
All models are immutable pydantic models.
"""

from budget_tracker.models.errors import BudgetTrackerError
from budget_tracker.models.currency import Currency
from budget_tracker.models.money import Money, MoneyError, MoneyErrorCode
from budget_tracker.models.date_range import (
    DateRange,
    DateRangeError,
    DateRangeErrorCode,
    ensure_aware,
    utc_now,
)
from budget_tracker.models.category import (
    Category,
    CategoryError,
    CategoryErrorCode,
    CategoryLookup,
    TransactionCategory,
    default_categories,
)
from budget_tracker.models.expense_period import (
    ExpensePeriod,
    ExpensePeriodError,
    ExpensePeriodErrorCode,
)
from budget_tracker.models.transaction import (
    Transaction,
    TransactionError,
    TransactionErrorCode,
)
from budget_tracker.models.report import (
    CategorySpending,
    SpendingReport,
    SpendingReportError,
    SpendingReportErrorCode,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    "BudgetTrackerError",
    # Value objects
    "Currency",
    "DateRange",
    "DateRangeError",
    "DateRangeErrorCode",
    "Money",
    "MoneyError",
    "MoneyErrorCode",
    "ensure_aware",
    "utc_now",
    # Entities
    "Category",
    "CategoryError",
    "CategoryErrorCode",
    "CategoryLookup",
    "ExpensePeriod",
    "ExpensePeriodError",
    "ExpensePeriodErrorCode",
    "Transaction",
    "TransactionCategory",
    "TransactionError",
    "TransactionErrorCode",
    "default_categories",
    # Reporting
    "CategorySpending",
    "SpendingReport",
    "SpendingReportError",
    "SpendingReportErrorCode",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
