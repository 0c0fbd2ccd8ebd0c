"""
In-Memory Storage Implementation

Backs tests and local use. All four interfaces share one InMemoryStore so
cross-entity rules (category references, period links) can be enforced
the same way a relational backend would enforce them.

Stored values are immutable pydantic models, so handing them out does not
leak mutable state.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from budget_tracker.models.audit import AuditEvent
from budget_tracker.models.category import (
    Category,
    CategoryError,
    CategoryErrorCode,
    default_categories,
)
from budget_tracker.models.date_range import DateRange, ensure_aware, utc_now
from budget_tracker.models.expense_period import (
    ExpensePeriod,
    ExpensePeriodError,
    ExpensePeriodErrorCode,
)
from budget_tracker.models.money import Money
from budget_tracker.models.transaction import (
    Transaction,
    TransactionError,
    TransactionErrorCode,
)
from budget_tracker.services.storage.interface import (
    AuditStorageInterface,
    CategoryStorageInterface,
    DuplicateError,
    ExpensePeriodStorageInterface,
    ReferentialIntegrityError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)


class InMemoryStore:
    """
    Shared state for the in-memory storages.

    Args:
        seed_default_categories: Pre-populate the predefined categories
        reject_overlapping_periods: Refuse periods that overlap a stored one
    """

    def __init__(
        self,
        seed_default_categories: bool = False,
        reject_overlapping_periods: bool = False,
    ):
        self.transactions: dict[UUID, Transaction] = {}
        self.categories: dict[UUID, Category] = {}
        self.periods: dict[UUID, ExpensePeriod] = {}
        self.events: list[AuditEvent] = []
        self.reject_overlapping_periods = reject_overlapping_periods

        if seed_default_categories:
            for category in default_categories():
                self.categories[category.id] = category

    def require_category(self, category_id: UUID) -> None:
        if category_id not in self.categories:
            raise TransactionError(
                TransactionErrorCode.INVALID_CATEGORY, category_id=category_id
            )


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Transaction storage over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id in self._store.transactions:
            raise DuplicateError(f"Transaction already exists: {transaction.id}")
        self._store.require_category(transaction.category_id)

        self._store.transactions[transaction.id] = transaction
        logger.debug("transaction_saved", transaction_id=str(transaction.id))
        return transaction

    async def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._store.transactions.get(transaction_id)

    async def update_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id not in self._store.transactions:
            raise TransactionError(
                TransactionErrorCode.TRANSACTION_NOT_FOUND, transaction_id=transaction.id
            )
        self._store.require_category(transaction.category_id)

        self._store.transactions[transaction.id] = transaction
        logger.debug("transaction_updated", transaction_id=str(transaction.id))
        return transaction

    async def delete_transaction(self, transaction_id: UUID) -> None:
        if self._store.transactions.pop(transaction_id, None) is None:
            raise TransactionError(
                TransactionErrorCode.TRANSACTION_NOT_FOUND, transaction_id=transaction_id
            )
        logger.debug("transaction_deleted", transaction_id=str(transaction_id))

    async def list_transactions(
        self,
        category_id: Optional[UUID] = None,
        period_id: Optional[UUID] = None,
        date_range: Optional[DateRange] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Transaction]:
        results = []
        for transaction in self._store.transactions.values():
            if category_id and transaction.category_id != category_id:
                continue
            if period_id and transaction.period_id != period_id:
                continue
            if date_range and not date_range.contains(transaction.date):
                continue
            results.append(transaction)

        results.sort(key=Transaction.by_date_descending)

        if offset:
            results = results[offset:]
        if limit is not None:
            results = results[:limit]
        return results

    async def count_transactions(self, period_id: Optional[UUID] = None) -> int:
        if period_id is None:
            return len(self._store.transactions)
        return sum(
            1 for transaction in self._store.transactions.values()
            if transaction.period_id == period_id
        )

    async def transaction_exists(self, name: str, money: Money, date: datetime) -> bool:
        day = ensure_aware(date).date()
        wanted = name.strip().lower()
        return any(
            transaction.name.strip().lower() == wanted
            and transaction.money == money
            and transaction.date.date() == day
            for transaction in self._store.transactions.values()
        )

    async def unlink_period(self, period_id: UUID) -> int:
        linked = [
            transaction for transaction in self._store.transactions.values()
            if transaction.period_id == period_id
        ]
        for transaction in linked:
            self._store.transactions[transaction.id] = transaction.unlink_from_period()
        return len(linked)


class InMemoryCategoryStorage(CategoryStorageInterface):
    """Category storage over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save_category(self, category: Category) -> Category:
        if category.id in self._store.categories:
            raise DuplicateError(f"Category already exists: {category.id}")

        self._store.categories[category.id] = category
        logger.debug("category_saved", category_id=str(category.id), name=category.name)
        return category

    async def get_category(self, category_id: UUID) -> Optional[Category]:
        return self._store.categories.get(category_id)

    async def update_category(self, category: Category) -> Category:
        if category.id not in self._store.categories:
            raise CategoryError(CategoryErrorCode.CATEGORY_NOT_FOUND, category_id=category.id)

        self._store.categories[category.id] = category
        return category

    async def delete_category(self, category_id: UUID) -> None:
        category = self._store.categories.get(category_id)
        if category is None:
            raise CategoryError(CategoryErrorCode.CATEGORY_NOT_FOUND, category_id=category_id)

        category.ensure_deletable()
        if await self.is_category_in_use(category_id):
            raise ReferentialIntegrityError(
                f"Category '{category.name}' is still used by transactions"
            )

        del self._store.categories[category_id]
        logger.debug("category_deleted", category_id=str(category_id))

    async def list_categories(self, is_custom: Optional[bool] = None) -> list[Category]:
        categories = [
            category for category in self._store.categories.values()
            if is_custom is None or category.is_custom == is_custom
        ]
        return sorted(categories, key=lambda c: (c.sort_order, c.name.lower()))

    async def find_category_by_name(self, name: str) -> Optional[Category]:
        wanted = name.strip().lower()
        for category in self._store.categories.values():
            if category.name.lower() == wanted:
                return category
        return None

    async def is_category_in_use(self, category_id: UUID) -> bool:
        return any(
            transaction.category_id == category_id
            for transaction in self._store.transactions.values()
        )


class InMemoryPeriodStorage(ExpensePeriodStorageInterface):
    """Expense period storage over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    def _check_overlap(self, period: ExpensePeriod) -> None:
        if self._store.reject_overlapping_periods:
            period.ensure_no_overlap(self._store.periods.values())

    async def save_period(self, period: ExpensePeriod) -> ExpensePeriod:
        if period.id in self._store.periods:
            raise DuplicateError(f"Expense period already exists: {period.id}")
        self._check_overlap(period)

        self._store.periods[period.id] = period
        logger.debug("period_saved", period_id=str(period.id), name=period.name)
        return period

    async def get_period(self, period_id: UUID) -> Optional[ExpensePeriod]:
        return self._store.periods.get(period_id)

    async def update_period(self, period: ExpensePeriod) -> ExpensePeriod:
        if period.id not in self._store.periods:
            raise ExpensePeriodError(ExpensePeriodErrorCode.PERIOD_NOT_FOUND, period_id=period.id)
        self._check_overlap(period)

        self._store.periods[period.id] = period
        return period

    async def delete_period(self, period_id: UUID) -> None:
        if self._store.periods.pop(period_id, None) is None:
            raise ExpensePeriodError(ExpensePeriodErrorCode.PERIOD_NOT_FOUND, period_id=period_id)

        # Linked transactions survive with their link cleared
        unlinked = await InMemoryTransactionStorage(self._store).unlink_period(period_id)
        logger.debug("period_deleted", period_id=str(period_id), unlinked=unlinked)

    async def list_periods(self) -> list[ExpensePeriod]:
        return sorted(
            self._store.periods.values(),
            key=lambda p: (-p.date_range.start.timestamp(), str(p.id)),
        )

    async def find_active_period(self) -> Optional[ExpensePeriod]:
        now = utc_now()
        for period in await self.list_periods():
            if period.contains(now):
                return period
        return None

    async def find_periods_containing(self, moment: datetime) -> list[ExpensePeriod]:
        return [period for period in await self.list_periods() if period.contains(moment)]

    async def find_overlapping(self, period: ExpensePeriod) -> list[ExpensePeriod]:
        return [
            other for other in await self.list_periods()
            if other.id != period.id and period.overlaps(other)
        ]


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log over an InMemoryStore."""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self._store = store or InMemoryStore()

    async def append_event(self, event: AuditEvent) -> bool:
        self._store.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._store.events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._store.events))[:limit]
