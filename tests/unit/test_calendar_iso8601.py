"""
Tests for the ISO 8601 Calendar facade

Checked behaviour:
- Field handling delegates to the field resolver (allow-list, merge, from-fields)
- date_add balances the time part into whole days
- date_until never produces time units
- Accessors accept dates, date-times, year-months, month-days and bags
  where meaningful, and raise InvalidArgumentError otherwise
- None policies fall back to EngineSettings (env-configurable)
"""

import pytest

from isotemporal.calendar import ISO8601, ISO8601Calendar
from isotemporal.core.config import reset_settings
from isotemporal.core.domain.enums import Overflow, Unit
from isotemporal.core.domain.records import (
    Duration,
    ISODate,
    ISODateTime,
    ISOMonthDay,
    ISOTime,
    ISOYearMonth,
)
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError


@pytest.fixture
def calendar():
    return ISO8601Calendar()


@pytest.fixture
def jan_31():
    return ISODate(year=2021, month=1, day=31)


@pytest.fixture
def fresh_settings():
    """Settings re-read from the environment for the test, then dropped."""
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# IDENTITY / FIELDS
# =============================================================================


class TestIdentityAndFields:
    def test_id(self, calendar):
        assert calendar.id == "iso8601"
        assert ISO8601.id == "iso8601"

    def test_fields(self, calendar):
        assert calendar.fields(["year", "day"]) == ["year", "day"]
        with pytest.raises(TemporalRangeError):
            calendar.fields(["hour"])

    def test_merge_fields(self, calendar):
        assert calendar.merge_fields({"year": 2020, "month": 1}, {"month_code": "M02"}) == {
            "year": 2020,
            "month_code": "M02",
        }

    def test_merge_fields_requires_mappings(self, calendar):
        with pytest.raises(InvalidArgumentError):
            calendar.merge_fields({"year": 2020}, None)

    def test_date_from_fields(self, calendar):
        assert calendar.date_from_fields({"year": 2021, "month": 2, "day": 30}) == ISODate(
            year=2021, month=2, day=28
        )
        with pytest.raises(TemporalRangeError):
            calendar.date_from_fields({"year": 2021, "month": 2, "day": 30}, Overflow.REJECT)

    def test_year_month_and_month_day_from_fields(self, calendar):
        assert calendar.year_month_from_fields({"year": 2021, "month": 7}).month == 7
        assert calendar.month_day_from_fields({"month_code": "M12", "day": 25}).day == 25


# =============================================================================
# ARITHMETIC
# =============================================================================


class TestDateAdd:
    def test_month_end_constrained(self, calendar, jan_31):
        assert calendar.date_add(jan_31, Duration(months=1)) == ISODate(year=2021, month=2, day=28)

    def test_month_end_rejected(self, calendar, jan_31):
        with pytest.raises(TemporalRangeError):
            calendar.date_add(jan_31, Duration(months=1), Overflow.REJECT)

    def test_time_part_balanced_into_days(self, calendar, jan_31):
        assert calendar.date_add(jan_31, {"hours": 48}) == ISODate(year=2021, month=2, day=2)

    def test_sub_day_remainder_dropped(self, calendar, jan_31):
        assert calendar.date_add(jan_31, Duration(hours=47, minutes=59)) == ISODate(year=2021, month=2, day=1)

    def test_accepts_date_time_and_bag(self, calendar):
        date_time = ISODateTime(date=ISODate(year=2021, month=1, day=1), time=ISOTime(hour=5))
        assert calendar.date_add(date_time, Duration(days=1)) == ISODate(year=2021, month=1, day=2)
        assert calendar.date_add({"year": 2021, "month": 1, "day": 1}, Duration(weeks=1)) == ISODate(
            year=2021, month=1, day=8
        )

    def test_rejects_non_duration(self, calendar, jan_31):
        with pytest.raises(InvalidArgumentError):
            calendar.date_add(jan_31, 5)

    def test_env_default_overflow(self, calendar, jan_31, monkeypatch, fresh_settings):
        monkeypatch.setenv("ISOTEMPORAL_DEFAULT_OVERFLOW", "reject")
        reset_settings()
        with pytest.raises(TemporalRangeError):
            calendar.date_add(jan_31, Duration(months=1))


class TestDateUntil:
    def test_default_is_days(self, calendar):
        one = ISODate(year=2021, month=1, day=1)
        two = ISODate(year=2021, month=3, day=15)
        assert calendar.date_until(one, two) == Duration(days=73)

    def test_months(self, calendar):
        one = ISODate(year=2021, month=1, day=1)
        two = ISODate(year=2021, month=3, day=15)
        assert calendar.date_until(one, two, Unit.MONTH) == Duration(months=2, days=14)

    def test_weeks(self, calendar):
        one = ISODate(year=2021, month=1, day=1)
        two = ISODate(year=2021, month=1, day=20)
        assert calendar.date_until(one, two, Unit.WEEK) == Duration(weeks=2, days=5)

    def test_negative(self, calendar):
        one = ISODate(year=2021, month=3, day=15)
        two = ISODate(year=2021, month=1, day=1)
        assert calendar.date_until(one, two, Unit.YEAR) == Duration(months=-2, days=-14)

    def test_time_unit_rejected(self, calendar, jan_31):
        with pytest.raises(TemporalRangeError):
            calendar.date_until(jan_31, jan_31, Unit.HOUR)


# =============================================================================
# ACCESSORS
# =============================================================================


class TestAccessors:
    def test_basic_fields(self, calendar, jan_31):
        assert calendar.year(jan_31) == 2021
        assert calendar.month(jan_31) == 1
        assert calendar.month_code(jan_31) == "M01"
        assert calendar.day(jan_31) == 31

    def test_year_month_and_month_day(self, calendar):
        year_month = ISOYearMonth(year=2024, month=2)
        month_day = ISOMonthDay(month=12, day=25)
        assert calendar.year(year_month) == 2024
        assert calendar.month(year_month) == 2
        assert calendar.month_code(month_day) == "M12"
        assert calendar.day(month_day) == 25
        assert calendar.days_in_month(year_month) == 29
        assert calendar.days_in_year(year_month) == 366
        assert calendar.in_leap_year(year_month)

    def test_month_of_month_day_rejected(self, calendar):
        with pytest.raises(InvalidArgumentError):
            calendar.month(ISOMonthDay(month=12, day=25))

    def test_week_accessors(self, calendar):
        date = ISODate(year=2021, month=1, day=1)
        assert calendar.day_of_week(date) == 5
        assert calendar.day_of_year(date) == 1
        assert calendar.week_of_year(date) == 53
        assert calendar.year_of_week(date) == 2020

    def test_constant_accessors(self, calendar, jan_31):
        assert calendar.days_in_week(jan_31) == 7
        assert calendar.months_in_year(jan_31) == 12
        assert calendar.months_in_year(ISOYearMonth(year=2021, month=1)) == 12

    def test_bag_accessor(self, calendar):
        assert calendar.day_of_year({"year": 2021, "month": 12, "day": 31}) == 365

    def test_unsupported_argument(self, calendar):
        with pytest.raises(InvalidArgumentError):
            calendar.day_of_week("2021-01-01")
        with pytest.raises(InvalidArgumentError):
            calendar.days_in_week(42)
        with pytest.raises(InvalidArgumentError):
            calendar.months_in_year(ISOMonthDay(month=1, day=1))
