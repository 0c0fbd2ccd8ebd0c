"""
ExpensePeriod Entity

A named DateRange used to group transactions into budgeting windows
("March 2026", "Summer trip", an ongoing "Since I moved").

Deleting a period never deletes its transactions; the storage layer
clears their period link instead.
"""

import calendar
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from budget_tracker.models.date_range import (
    DateRange,
    DateRangeError,
    Moment,
    ensure_aware,
    utc_now,
)
from budget_tracker.models.errors import BudgetTrackerError


PERIOD_NAME_MAX_LENGTH = 100


class ExpensePeriodErrorCode(str, Enum):
    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    INVALID_DATE_RANGE = "invalid_date_range"
    INVALID_MONTH = "invalid_month"
    PERIOD_NOT_FOUND = "period_not_found"
    OVERLAPPING_PERIOD = "overlapping_period"


class ExpensePeriodError(BudgetTrackerError):
    messages = {
        ExpensePeriodErrorCode.EMPTY_NAME: "Period name cannot be empty",
        ExpensePeriodErrorCode.NAME_TOO_LONG:
            f"Period name must be {PERIOD_NAME_MAX_LENGTH} characters or less",
        ExpensePeriodErrorCode.INVALID_DATE_RANGE: "Invalid date range for period",
        ExpensePeriodErrorCode.INVALID_MONTH: "Month must be between 1 and 12",
        ExpensePeriodErrorCode.PERIOD_NOT_FOUND: "Expense period not found",
        ExpensePeriodErrorCode.OVERLAPPING_PERIOD: "This period overlaps with an existing period",
    }


def check_name(name: str) -> None:
    if not name.strip():
        raise ExpensePeriodError(ExpensePeriodErrorCode.EMPTY_NAME)
    if len(name) > PERIOD_NAME_MAX_LENGTH:
        raise ExpensePeriodError(ExpensePeriodErrorCode.NAME_TOO_LONG)


def _build_range(start: Moment, end: Optional[Moment]) -> DateRange:
    try:
        return DateRange(start=start, end=end)
    except DateRangeError as e:
        raise ExpensePeriodError(ExpensePeriodErrorCode.INVALID_DATE_RANGE, str(e)) from e


def _month_name(month: int, year: int) -> str:
    return f"{calendar.month_name[month]} {year}"


class ExpensePeriod(BaseModel):
    """A budgeting window with identity."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    date_range: DateRange
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @model_validator(mode="after")
    def validate_invariants(self) -> "ExpensePeriod":
        check_name(self.name)
        return self

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def for_month(cls, month: int, year: int) -> "ExpensePeriod":
        """Calendar month period named e.g. "March 2026"."""
        if not 1 <= month <= 12:
            raise ExpensePeriodError(ExpensePeriodErrorCode.INVALID_MONTH, month=month)
        try:
            date_range = DateRange.for_month(month, year)
        except DateRangeError as e:
            raise ExpensePeriodError(ExpensePeriodErrorCode.INVALID_DATE_RANGE, str(e)) from e
        return cls(name=_month_name(month, year), date_range=date_range)

    @classmethod
    def current_month(cls) -> "ExpensePeriod":
        now = utc_now()
        return cls.for_month(now.month, now.year)

    @classmethod
    def custom(cls, name: str, start: Moment, end: Optional[Moment]) -> "ExpensePeriod":
        return cls(name=name, date_range=_build_range(start, end))

    @classmethod
    def ongoing(cls, name: str, start: Optional[Moment] = None) -> "ExpensePeriod":
        if start is None:
            start = utc_now()
        return cls(name=name, date_range=_build_range(start, None))

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def _revised(self, **changes) -> "ExpensePeriod":
        return self.model_copy(update={**changes, "updated_at": utc_now()})

    def update_name(self, new_name: str) -> "ExpensePeriod":
        check_name(new_name)
        return self._revised(name=new_name)

    def update_date_range(self, new_date_range: DateRange) -> "ExpensePeriod":
        return self._revised(date_range=new_date_range)

    def close(self, end_date: Optional[Moment] = None) -> "ExpensePeriod":
        """Set an end date (now by default); fails if it precedes the start."""
        end = end_date if end_date is not None else utc_now()
        return self._revised(date_range=_build_range(self.date_range.start, end))

    def reopen(self) -> "ExpensePeriod":
        return self._revised(date_range=_build_range(self.date_range.start, None))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def contains(self, moment: Moment) -> bool:
        return self.date_range.contains(moment)

    @property
    def is_ongoing(self) -> bool:
        return self.date_range.is_ongoing

    @property
    def has_ended(self) -> bool:
        return self.date_range.has_ended

    @property
    def is_active(self) -> bool:
        return self.is_ongoing or not self.has_ended

    @property
    def duration_in_days(self) -> Optional[int]:
        return self.date_range.duration_in_days

    @property
    def formatted_date_range(self) -> str:
        return self.date_range.formatted

    @property
    def short_formatted_date_range(self) -> str:
        return self.date_range.short_formatted

    def overlaps(self, other: "ExpensePeriod") -> bool:
        """
        True if any instant belongs to both periods.

        A missing end counts as +infinity: an ongoing period overlaps every
        period that starts on or after its start, and two ongoing periods
        always overlap.
        """
        this_range, other_range = self.date_range, other.date_range
        starts_before_other_ends = other_range.end is None or this_range.start <= other_range.end
        other_starts_before_this_ends = this_range.end is None or other_range.start <= this_range.end
        return starts_before_other_ends and other_starts_before_this_ends

    def ensure_no_overlap(self, existing: Iterable["ExpensePeriod"]) -> None:
        for period in existing:
            if period.id != self.id and self.overlaps(period):
                raise ExpensePeriodError(
                    ExpensePeriodErrorCode.OVERLAPPING_PERIOD,
                    f"Period '{self.name}' overlaps with existing period '{period.name}'",
                    period_id=period.id,
                )
