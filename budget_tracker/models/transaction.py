"""
Transaction Entity

A single validated ledger entry.

INVARIANTS (checked at construction AND by the matching update):
- amount strictly positive (zero is invalid, unlike plain Money)
- name non-blank, at most 100 characters
- date not in the future
- description, if present, at most 500 characters

The checks are module-level functions so that construction, every
update_* method and the draft validator run exactly the same rules.
Updates return a new Transaction; a failed update raises and leaves
the original unchanged.

Category is referenced by id only. Resolving it to display metadata
goes through an injected lookup at the boundary.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from budget_tracker.models.category import Category, CategoryLookup
from budget_tracker.models.date_range import Moment, ensure_aware, utc_now
from budget_tracker.models.errors import BudgetTrackerError
from budget_tracker.models.money import Money


TRANSACTION_NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
RECENT_DAYS = 7


class TransactionErrorCode(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    FUTURE_DATE = "future_date"
    DESCRIPTION_TOO_LONG = "description_too_long"
    INVALID_CATEGORY = "invalid_category"
    TRANSACTION_NOT_FOUND = "transaction_not_found"


class TransactionError(BudgetTrackerError):
    messages = {
        TransactionErrorCode.INVALID_AMOUNT: "Transaction amount must be greater than zero",
        TransactionErrorCode.EMPTY_NAME: "Transaction name cannot be empty",
        TransactionErrorCode.NAME_TOO_LONG:
            f"Transaction name must be {TRANSACTION_NAME_MAX_LENGTH} characters or less",
        TransactionErrorCode.FUTURE_DATE: "Transaction date cannot be in the future",
        TransactionErrorCode.DESCRIPTION_TOO_LONG:
            f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less",
        TransactionErrorCode.INVALID_CATEGORY: "Invalid category selected",
        TransactionErrorCode.TRANSACTION_NOT_FOUND: "Transaction not found",
    }


# =============================================================================
# INVARIANT CHECKS
# =============================================================================

def check_amount(money: Money) -> None:
    if money.amount <= 0:
        raise TransactionError(TransactionErrorCode.INVALID_AMOUNT, amount=money.amount)


def check_name(name: str) -> None:
    if not name.strip():
        raise TransactionError(TransactionErrorCode.EMPTY_NAME)
    if len(name) > TRANSACTION_NAME_MAX_LENGTH:
        raise TransactionError(TransactionErrorCode.NAME_TOO_LONG)


def check_date(moment: datetime, now: Optional[datetime] = None) -> None:
    now = now or utc_now()
    if ensure_aware(moment) > now:
        raise TransactionError(TransactionErrorCode.FUTURE_DATE)


def check_description(description: Optional[str]) -> None:
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise TransactionError(TransactionErrorCode.DESCRIPTION_TOO_LONG)


# =============================================================================
# TRANSACTION ENTITY
# =============================================================================

class Transaction(BaseModel):
    """A ledger entry: money spent on something, in a category, at a time."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    money: Money
    name: str
    category_id: UUID
    date: datetime = Field(default_factory=utc_now)
    description: Optional[str] = None
    period_id: Optional[UUID] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @model_validator(mode="after")
    def validate_invariants(self) -> "Transaction":
        check_amount(self.money)
        check_name(self.name)
        check_date(self.date)
        check_description(self.description)
        return self

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, money: Money, name: str, category_id: UUID) -> "Transaction":
        """Minimal transaction dated now."""
        return cls(money=money, name=name, category_id=category_id)

    @classmethod
    def create_detailed(
        cls,
        money: Money,
        name: str,
        category_id: UUID,
        date: Moment,
        description: Optional[str] = None,
        period_id: Optional[UUID] = None,
    ) -> "Transaction":
        return cls(
            money=money,
            name=name,
            category_id=category_id,
            date=ensure_aware(date),
            description=description,
            period_id=period_id,
        )

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def _revised(self, **changes) -> "Transaction":
        return self.model_copy(update={**changes, "updated_at": utc_now()})

    def update_amount(self, new_money: Money) -> "Transaction":
        check_amount(new_money)
        return self._revised(money=new_money)

    def update_name(self, new_name: str) -> "Transaction":
        check_name(new_name)
        return self._revised(name=new_name)

    def update_category(self, new_category_id: UUID) -> "Transaction":
        return self._revised(category_id=new_category_id)

    def update_date(self, new_date: Moment) -> "Transaction":
        new_date = ensure_aware(new_date)
        check_date(new_date)
        return self._revised(date=new_date)

    def update_description(self, new_description: Optional[str]) -> "Transaction":
        check_description(new_description)
        return self._revised(description=new_description)

    def link_to_period(self, period_id: UUID) -> "Transaction":
        return self._revised(period_id=period_id)

    def unlink_from_period(self) -> "Transaction":
        return self._revised(period_id=None)

    # -------------------------------------------------------------------------
    # Category resolution
    # -------------------------------------------------------------------------

    def resolve_category(self, lookup: CategoryLookup) -> Category:
        category = lookup(self.category_id)
        if category is None:
            raise TransactionError(
                TransactionErrorCode.INVALID_CATEGORY, category_id=self.category_id
            )
        return category

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_recent(self, days: int = RECENT_DAYS) -> bool:
        return self.date >= utc_now() - timedelta(days=days)

    @property
    def has_description(self) -> bool:
        return bool(self.description)

    @property
    def is_linked_to_period(self) -> bool:
        return self.period_id is not None

    @property
    def age_in_days(self) -> int:
        return (utc_now() - self.date).days

    @property
    def formatted_amount(self) -> str:
        return self.money.formatted

    # Sort keys, e.g. sorted(transactions, key=Transaction.by_date_descending)

    @staticmethod
    def by_date_descending(transaction: "Transaction") -> tuple:
        return (-transaction.date.timestamp(), str(transaction.id))

    @staticmethod
    def by_amount_descending(transaction: "Transaction") -> tuple:
        return (-transaction.money.amount, str(transaction.id))
