"""
DateRange Value Object

A validated time interval [start, end], inclusive on both bounds.
A missing end means the range is ongoing and extends indefinitely.

DESIGN DECISION: All timestamps are timezone-aware UTC. Naive datetimes
are interpreted as local time and converted on the way in, so comparisons
never mix naive and aware values. Calendar factories (months, years)
use the UTC calendar and end at the last microsecond of their final day.
"""

from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from budget_tracker.models.errors import BudgetTrackerError


class DateRangeErrorCode(str, Enum):
    END_BEFORE_START = "end_before_start"
    INVALID_DATE_RANGE = "invalid_date_range"


class DateRangeError(BudgetTrackerError):
    messages = {
        DateRangeErrorCode.END_BEFORE_START: "End date cannot be before start date",
        DateRangeErrorCode.INVALID_DATE_RANGE: "Invalid date range",
    }


Moment = Union[datetime, date]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(moment: Moment) -> datetime:
    """
    Normalize a timestamp to aware UTC.

    Plain dates become midnight UTC; naive datetimes are treated as
    local time.
    """
    if not isinstance(moment, datetime):
        return datetime.combine(moment, time.min, tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    if not 1 <= month <= 12:
        raise DateRangeError(
            DateRangeErrorCode.INVALID_DATE_RANGE, f"Month must be between 1 and 12, got {month}"
        )
    try:
        start = datetime(year, month, 1, tzinfo=timezone.utc)
        if month == 12:
            next_start = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        else:
            next_start = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    except (ValueError, OverflowError) as e:
        raise DateRangeError(DateRangeErrorCode.INVALID_DATE_RANGE, str(e)) from e
    return start, next_start - timedelta(microseconds=1)


def _format_day(moment: datetime) -> str:
    return f"{moment:%b} {moment.day}, {moment.year}"


class DateRange(BaseModel):
    """
    Immutable interval used for filtering transactions and bounding periods.

    Construct with keywords: DateRange(start=..., end=...).
    """
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: Optional[datetime] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def accept_plain_dates(cls, v: object) -> object:
        if isinstance(v, date) and not isinstance(v, datetime):
            return ensure_aware(v)
        return v

    @field_validator("start", "end")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else ensure_aware(v)

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.end is not None and self.end < self.start:
            raise DateRangeError(DateRangeErrorCode.END_BEFORE_START)
        return self

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def contains(self, moment: Moment) -> bool:
        """Inclusive on both bounds; unbounded above when ongoing."""
        moment = ensure_aware(moment)
        if moment < self.start:
            return False
        return self.end is None or moment <= self.end

    @property
    def is_ongoing(self) -> bool:
        return self.end is None

    @property
    def has_ended(self) -> bool:
        return self.end is not None and self.end < utc_now()

    @property
    def duration_in_days(self) -> Optional[int]:
        """Whole days between start and end; None when ongoing."""
        if self.end is None:
            return None
        return (self.end - self.start).days

    @property
    def duration_in_seconds(self) -> Optional[float]:
        if self.end is None:
            return None
        return (self.end - self.start).total_seconds()

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def ongoing(cls, start: Optional[Moment] = None) -> "DateRange":
        return cls(start=ensure_aware(start) if start is not None else utc_now())

    @classmethod
    def for_month(cls, month: int, year: int) -> "DateRange":
        start, end = _month_bounds(month, year)
        return cls(start=start, end=end)

    @classmethod
    def current_month(cls) -> "DateRange":
        now = utc_now()
        return cls.for_month(now.month, now.year)

    @classmethod
    def last_month(cls) -> "DateRange":
        now = utc_now()
        if now.month == 1:
            return cls.for_month(12, now.year - 1)
        return cls.for_month(now.month - 1, now.year)

    @classmethod
    def last_days(cls, days: int) -> "DateRange":
        """The last `days` days, ending now."""
        if days < 0:
            raise DateRangeError(
                DateRangeErrorCode.INVALID_DATE_RANGE, f"Day count cannot be negative: {days}"
            )
        end = utc_now()
        try:
            start = end - timedelta(days=days)
        except OverflowError as e:
            raise DateRangeError(DateRangeErrorCode.INVALID_DATE_RANGE, str(e)) from e
        return cls(start=start, end=end)

    @classmethod
    def year(cls, year: int) -> "DateRange":
        start, _ = _month_bounds(1, year)
        _, end = _month_bounds(12, year)
        return cls(start=start, end=end)

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    @property
    def formatted(self) -> str:
        """e.g. "Mar 1, 2026 - Mar 31, 2026" or "From Mar 1, 2026 (ongoing)"."""
        if self.end is None:
            return f"From {_format_day(self.start)} (ongoing)"
        return f"{_format_day(self.start)} - {_format_day(self.end)}"

    @property
    def short_formatted(self) -> str:
        """e.g. "Mar 1 - 31" within one month, "Mar 28 - Apr 3" across months."""
        start = f"{self.start:%b} {self.start.day}"
        if self.end is None:
            return f"From {start}"
        if (self.start.year, self.start.month) == (self.end.year, self.end.month):
            return f"{start} - {self.end.day}"
        return f"{start} - {self.end:%b} {self.end.day}"

    def __str__(self) -> str:
        return self.formatted
