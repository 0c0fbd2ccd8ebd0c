"""Tests for the DateRange value object."""

from datetime import date, datetime, timedelta, timezone

import pytest

from budget_tracker.models import DateRange, DateRangeError, DateRangeErrorCode, utc_now


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestDateRangeConstruction:

    def test_end_before_start_rejected(self):
        with pytest.raises(DateRangeError) as exc_info:
            DateRange(start=utc(2026, 3, 10), end=utc(2026, 3, 1))
        assert exc_info.value.code == DateRangeErrorCode.END_BEFORE_START

    def test_zero_length_range_allowed(self):
        moment = utc(2026, 3, 10, 12)
        date_range = DateRange(start=moment, end=moment)
        assert date_range.contains(moment)
        assert date_range.duration_in_days == 0

    def test_plain_dates_become_midnight_utc(self):
        date_range = DateRange(start=date(2026, 3, 1), end=date(2026, 3, 2))
        assert date_range.start == utc(2026, 3, 1)
        assert date_range.start.tzinfo is not None

    def test_ongoing(self):
        date_range = DateRange.ongoing(utc(2026, 1, 1))
        assert date_range.is_ongoing
        assert date_range.end is None
        assert date_range.duration_in_days is None
        assert date_range.duration_in_seconds is None
        assert not date_range.has_ended


class TestDateRangeContains:
    """Containment is inclusive on both bounds."""

    def test_bounds_inclusive(self):
        start, end = utc(2026, 3, 1), utc(2026, 3, 31, 23, 59, 59)
        date_range = DateRange(start=start, end=end)
        assert date_range.contains(start)
        assert date_range.contains(end)

    def test_outside_bounds(self):
        date_range = DateRange(start=utc(2026, 3, 1), end=utc(2026, 3, 31))
        assert not date_range.contains(utc(2026, 3, 1) - timedelta(microseconds=1))
        assert not date_range.contains(utc(2026, 3, 31) + timedelta(microseconds=1))

    def test_ongoing_has_no_upper_bound(self):
        date_range = DateRange.ongoing(utc(2020, 1, 1))
        assert date_range.contains(utc(2099, 1, 1))
        assert not date_range.contains(utc(2019, 12, 31))

    def test_accepts_other_timezones(self):
        date_range = DateRange(start=utc(2026, 3, 1), end=utc(2026, 3, 1, 12))
        plus_two = timezone(timedelta(hours=2))
        # 13:00 at +02:00 is 11:00 UTC
        assert date_range.contains(datetime(2026, 3, 1, 13, tzinfo=plus_two))


class TestDateRangeFactories:

    def test_for_month(self):
        march = DateRange.for_month(3, 2026)
        assert march.start == utc(2026, 3, 1)
        assert march.contains(utc(2026, 3, 31, 23, 59, 59, 999999))
        assert not march.contains(utc(2026, 4, 1))
        assert march.duration_in_days == 30

    def test_for_month_december_rolls_year(self):
        december = DateRange.for_month(12, 2025)
        assert december.end.year == 2025
        assert not december.contains(utc(2026, 1, 1))

    def test_february_leap_year(self):
        assert DateRange.for_month(2, 2024).end.day == 29
        assert DateRange.for_month(2, 2025).end.day == 28

    @pytest.mark.parametrize("month", [0, 13])
    def test_for_month_invalid(self, month):
        with pytest.raises(DateRangeError) as exc_info:
            DateRange.for_month(month, 2026)
        assert exc_info.value.code == DateRangeErrorCode.INVALID_DATE_RANGE

    def test_current_and_last_month(self):
        now = utc_now()
        assert DateRange.current_month().contains(now)
        last = DateRange.last_month()
        assert last.end < DateRange.current_month().start

    def test_last_days(self):
        date_range = DateRange.last_days(30)
        assert date_range.contains(utc_now() - timedelta(days=29))
        assert not date_range.contains(utc_now() - timedelta(days=31))

    def test_last_days_negative(self):
        with pytest.raises(DateRangeError):
            DateRange.last_days(-1)

    def test_year(self):
        year = DateRange.year(2025)
        assert year.start == utc(2025, 1, 1)
        assert year.end.month == 12 and year.end.day == 31
        assert year.duration_in_days == 364


class TestDateRangeFormatting:

    def test_formatted(self):
        assert DateRange.for_month(3, 2026).formatted == "Mar 1, 2026 - Mar 31, 2026"

    def test_formatted_ongoing(self):
        assert DateRange.ongoing(utc(2026, 3, 1)).formatted == "From Mar 1, 2026 (ongoing)"

    def test_short_formatted_same_month(self):
        assert DateRange.for_month(3, 2026).short_formatted == "Mar 1 - 31"

    def test_short_formatted_across_months(self):
        date_range = DateRange(start=utc(2026, 3, 28), end=utc(2026, 4, 3))
        assert date_range.short_formatted == "Mar 28 - Apr 3"

    def test_short_formatted_ongoing(self):
        assert DateRange.ongoing(utc(2026, 3, 1)).short_formatted == "From Mar 1"
