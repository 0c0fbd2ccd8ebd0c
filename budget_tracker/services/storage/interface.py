"""
Abstract Storage Interface

DESIGN DECISION: The financial core never talks to a database directly.
It consumes these interfaces, which allows us to:
1. Plug in any persistence engine (SQLite, Core Data export, a server)
2. Use in-memory storage for testing
3. Keep report generation decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
Ordering of listings is the storage layer's responsibility; the report
engine does not rely on it.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from budget_tracker.models.audit import AuditEvent
from budget_tracker.models.category import Category
from budget_tracker.models.date_range import DateRange
from budget_tracker.models.expense_period import ExpensePeriod
from budget_tracker.models.money import Money
from budget_tracker.models.transaction import Transaction


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.
    """

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """
        Save a new transaction.

        Raises:
            DuplicateError: If a transaction with this id exists
            TransactionError(INVALID_CATEGORY): If its category is unknown
        """
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        """Return the transaction if found, None otherwise."""
        pass

    @abstractmethod
    async def update_transaction(self, transaction: Transaction) -> Transaction:
        """
        Replace a stored transaction with a newer version.

        Raises:
            TransactionError(TRANSACTION_NOT_FOUND): If it doesn't exist
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: UUID) -> None:
        """
        Delete a transaction by id.

        Raises:
            TransactionError(TRANSACTION_NOT_FOUND): If it doesn't exist
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        category_id: Optional[UUID] = None,
        period_id: Optional[UUID] = None,
        date_range: Optional[DateRange] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """
        List transactions with optional filters, newest first.

        Args:
            category_id: Only transactions in this category
            period_id: Only transactions linked to this period
            date_range: Only transactions dated inside this range
            limit: Maximum number of results (None = all)
            offset: Number of results to skip
        """
        pass

    @abstractmethod
    async def count_transactions(self, period_id: Optional[UUID] = None) -> int:
        pass

    @abstractmethod
    async def transaction_exists(self, name: str, money: Money, date: datetime) -> bool:
        """
        Check if a transaction with the same name, amount and day exists
        (duplicate detection).
        """
        pass

    @abstractmethod
    async def unlink_period(self, period_id: UUID) -> int:
        """
        Clear the period link on every transaction pointing at period_id.

        Returns:
            Number of transactions unlinked
        """
        pass


class CategoryStorageInterface(ABC):
    """
    Abstract interface for category storage operations.
    """

    @abstractmethod
    async def save_category(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def get_category(self, category_id: UUID) -> Optional[Category]:
        pass

    @abstractmethod
    async def update_category(self, category: Category) -> Category:
        """
        Raises:
            CategoryError(CATEGORY_NOT_FOUND): If it doesn't exist
        """
        pass

    @abstractmethod
    async def delete_category(self, category_id: UUID) -> None:
        """
        Delete a custom, unreferenced category.

        Raises:
            CategoryError(CATEGORY_NOT_FOUND): If it doesn't exist
            CategoryError(CANNOT_DELETE_PREDEFINED_CATEGORY): If predefined
            ReferentialIntegrityError: If transactions still reference it
        """
        pass

    @abstractmethod
    async def list_categories(self, is_custom: Optional[bool] = None) -> list[Category]:
        """List categories by sort order, then name."""
        pass

    @abstractmethod
    async def find_category_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive name lookup."""
        pass

    @abstractmethod
    async def is_category_in_use(self, category_id: UUID) -> bool:
        pass


class ExpensePeriodStorageInterface(ABC):
    """
    Abstract interface for expense period storage operations.
    """

    @abstractmethod
    async def save_period(self, period: ExpensePeriod) -> ExpensePeriod:
        pass

    @abstractmethod
    async def get_period(self, period_id: UUID) -> Optional[ExpensePeriod]:
        pass

    @abstractmethod
    async def update_period(self, period: ExpensePeriod) -> ExpensePeriod:
        """
        Raises:
            ExpensePeriodError(PERIOD_NOT_FOUND): If it doesn't exist
        """
        pass

    @abstractmethod
    async def delete_period(self, period_id: UUID) -> None:
        """
        Delete a period. Linked transactions are unlinked, not deleted.

        Raises:
            ExpensePeriodError(PERIOD_NOT_FOUND): If it doesn't exist
        """
        pass

    @abstractmethod
    async def list_periods(self) -> list[ExpensePeriod]:
        """List periods by start date, newest first."""
        pass

    @abstractmethod
    async def find_active_period(self) -> Optional[ExpensePeriod]:
        """The most recently started period containing now, if any."""
        pass

    @abstractmethod
    async def find_periods_containing(self, moment: datetime) -> list[ExpensePeriod]:
        pass

    @abstractmethod
    async def find_overlapping(self, period: ExpensePeriod) -> list[ExpensePeriod]:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Related events in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ReferentialIntegrityError(StorageError):
    """Deleting the entity would orphan records that reference it."""
    pass
