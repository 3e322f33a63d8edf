"""
Tests for ISO Calendar Math

Checked invariants:
1. Gregorian leap-year rule and month lengths
2. Exact epoch-day conversion (round trip over the whole range)
3. add_iso_date: month clamping under constrain, RangeError under reject
4. difference_iso_date: add(start, diff) == end (round-trip law)
5. ISO-8601 week numbering across year boundaries
6. Representable range limits
"""

import pytest

from isotemporal.core.domain.enums import Overflow, Unit
from isotemporal.core.domain.records import DateDurationRecord, ISODate, ISODateTime, ISOTime
from isotemporal.core.errors import TemporalRangeError
from isotemporal.core.math.calendar_math import (
    add_iso_date,
    balance_iso_date,
    balance_iso_year_month,
    compare_iso_date,
    compare_iso_date_time,
    create_iso_date,
    days_in_month,
    days_in_year,
    difference_iso_date,
    difference_iso_date_time,
    epoch_days_to_iso_date,
    is_leap_year,
    is_valid_iso_date,
    iso_date_to_epoch_days,
    iso_date_within_limits,
    iso_year_month_within_limits,
    regulate_iso_date,
    reject_iso_date,
    to_iso_day_of_week,
    to_iso_day_of_year,
    to_iso_week_of_year,
    week_of_iso_week_of_year,
    year_of_iso_week_of_year,
)


# =============================================================================
# LEAP YEARS / MONTH LENGTHS
# =============================================================================


class TestLeapYears:
    """Gregorian leap-year rule."""

    @pytest.mark.parametrize(
        "year,expected",
        [(2000, True), (1900, False), (2024, True), (2023, False), (1600, True), (0, True), (-4, True)],
    )
    def test_is_leap_year(self, year, expected):
        assert is_leap_year(year) is expected

    @pytest.mark.parametrize("year", [1900, 2000, 2023, 2024])
    def test_february_has_29_days_iff_leap(self, year):
        assert (days_in_month(year, 2) == 29) is is_leap_year(year)

    def test_days_in_year(self):
        assert days_in_year(2024) == 366
        assert days_in_year(2023) == 365

    def test_days_in_month_table(self):
        assert [days_in_month(2023, m) for m in range(1, 13)] == [
            31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31
        ]

    def test_days_in_month_rejects_invalid_month(self):
        with pytest.raises(TemporalRangeError, match="month"):
            days_in_month(2024, 13)


class TestValidation:
    """Date validity, regulation and factories."""

    def test_is_valid_iso_date(self):
        assert is_valid_iso_date(2024, 2, 29)
        assert not is_valid_iso_date(2023, 2, 29)
        assert not is_valid_iso_date(2023, 0, 1)
        assert not is_valid_iso_date(2023, 4, 31)

    def test_create_iso_date_rejects_impossible_date(self):
        with pytest.raises(TemporalRangeError):
            create_iso_date(2021, 2, 29)

    def test_regulate_constrain_clamps(self):
        assert regulate_iso_date(2021, 13, 40, Overflow.CONSTRAIN) == ISODate(year=2021, month=12, day=31)
        assert regulate_iso_date(2021, 2, 31, Overflow.CONSTRAIN) == ISODate(year=2021, month=2, day=28)

    def test_regulate_reject_raises(self):
        with pytest.raises(TemporalRangeError):
            regulate_iso_date(2021, 2, 31, Overflow.REJECT)

    def test_regulate_valid_date_unchanged(self):
        assert regulate_iso_date(2021, 6, 15, Overflow.REJECT) == ISODate(year=2021, month=6, day=15)


# =============================================================================
# EPOCH DAYS
# =============================================================================


class TestEpochDays:
    """Exact epoch-day conversion."""

    def test_known_values(self):
        assert iso_date_to_epoch_days(1970, 1, 1) == 0
        assert iso_date_to_epoch_days(1969, 12, 31) == -1
        assert iso_date_to_epoch_days(2000, 3, 1) == 11017

    def test_inverse(self):
        assert epoch_days_to_iso_date(11017) == ISODate(year=2000, month=3, day=1)
        assert epoch_days_to_iso_date(-1) == ISODate(year=1969, month=12, day=31)

    @pytest.mark.parametrize(
        "date",
        [(-271821, 4, 19), (-4, 2, 29), (0, 1, 1), (1600, 2, 29), (2024, 12, 31), (275760, 9, 13)],
    )
    def test_round_trip(self, date):
        assert epoch_days_to_iso_date(iso_date_to_epoch_days(*date)).as_tuple() == date

    def test_month_and_day_overflow_are_carried(self):
        assert iso_date_to_epoch_days(2020, 13, 1) == iso_date_to_epoch_days(2021, 1, 1)
        assert iso_date_to_epoch_days(2021, 1, 32) == iso_date_to_epoch_days(2021, 2, 1)
        assert iso_date_to_epoch_days(2021, 3, 0) == iso_date_to_epoch_days(2021, 2, 28)


class TestLimits:
    """Representable range: -271821-04-19 .. +275760-09-13."""

    def test_date_limits(self):
        assert iso_date_within_limits(-271821, 4, 19)
        assert not iso_date_within_limits(-271821, 4, 18)
        assert iso_date_within_limits(275760, 9, 13)
        assert not iso_date_within_limits(275760, 9, 14)

    def test_year_month_limits(self):
        assert iso_year_month_within_limits(-271821, 4)
        assert not iso_year_month_within_limits(-271821, 3)
        assert iso_year_month_within_limits(275760, 9)
        assert not iso_year_month_within_limits(275760, 10)

    def test_create_outside_limits_raises(self):
        with pytest.raises(TemporalRangeError, match="representable"):
            create_iso_date(275760, 9, 14)


# =============================================================================
# BALANCING / COMPARISON
# =============================================================================


class TestBalancing:
    def test_balance_year_month(self):
        assert balance_iso_year_month(2020, 13) == (2021, 1)
        assert balance_iso_year_month(2020, 0) == (2019, 12)
        assert balance_iso_year_month(2020, -11) == (2019, 1)

    def test_balance_date(self):
        assert balance_iso_date(2021, 1, 32) == ISODate(year=2021, month=2, day=1)
        assert balance_iso_date(2021, 3, 0) == ISODate(year=2021, month=2, day=28)

    def test_compare(self):
        a = ISODate(year=2021, month=1, day=1)
        b = ISODate(year=2021, month=1, day=2)
        assert compare_iso_date(a, b) == -1
        assert compare_iso_date(b, a) == 1
        assert compare_iso_date(a, a) == 0


# =============================================================================
# ADD
# =============================================================================


class TestAddISODate:
    """addISODate: years/months, day resolution, then weeks/days."""

    def test_month_end_constrained(self):
        result = add_iso_date(2021, 1, 31, 0, 1, 0, 0, Overflow.CONSTRAIN)
        assert result == ISODate(year=2021, month=2, day=28)

    def test_month_end_rejected(self):
        with pytest.raises(TemporalRangeError):
            add_iso_date(2021, 1, 31, 0, 1, 0, 0, Overflow.REJECT)

    def test_leap_day_plus_one_year(self):
        assert add_iso_date(2020, 2, 29, 1, 0, 0, 0, Overflow.CONSTRAIN) == ISODate(year=2021, month=2, day=28)

    def test_days_cross_year(self):
        assert add_iso_date(2021, 12, 31, 0, 0, 0, 1, Overflow.CONSTRAIN) == ISODate(year=2022, month=1, day=1)

    def test_weeks(self):
        assert add_iso_date(2021, 1, 1, 0, 0, 2, 0, Overflow.CONSTRAIN) == ISODate(year=2021, month=1, day=15)

    def test_negative_months(self):
        assert add_iso_date(2021, 3, 31, 0, -1, 0, 0, Overflow.CONSTRAIN) == ISODate(year=2021, month=2, day=28)
        assert add_iso_date(2021, 1, 15, 0, -13, 0, 0, Overflow.CONSTRAIN) == ISODate(year=2019, month=12, day=15)

    def test_integral_floats_accepted(self):
        assert add_iso_date(2021, 1, 1, 0, 0, 0, 1.0, Overflow.CONSTRAIN) == ISODate(year=2021, month=1, day=2)

    def test_fractional_component_rejected(self):
        with pytest.raises(TemporalRangeError, match="integer"):
            add_iso_date(2021, 1, 1, 0, 0, 0, 1.5, Overflow.CONSTRAIN)

    def test_result_outside_range_raises(self):
        with pytest.raises(TemporalRangeError):
            add_iso_date(275760, 9, 13, 0, 0, 0, 1, Overflow.CONSTRAIN)

    def test_monotonic_in_days(self):
        previous = iso_date_to_epoch_days(2021, 1, 1)
        for days in range(1, 40):
            current = iso_date_to_epoch_days(*add_iso_date(2021, 1, 1, 0, 0, 0, days, Overflow.CONSTRAIN).as_tuple())
            assert current > previous
            previous = current


# =============================================================================
# DIFFERENCE
# =============================================================================


class TestDifferenceISODate:
    """Sign-consistent calendar difference."""

    def test_month_then_days(self):
        assert difference_iso_date(2021, 1, 31, 2021, 3, 1, Unit.MONTH) == DateDurationRecord(0, 1, 0, 1)

    def test_years_months_days(self):
        assert difference_iso_date(2019, 1, 1, 2021, 6, 15, Unit.YEAR) == DateDurationRecord(2, 5, 0, 14)
        assert difference_iso_date(2019, 1, 1, 2021, 6, 15, Unit.MONTH) == DateDurationRecord(0, 29, 0, 14)

    def test_negative(self):
        assert difference_iso_date(2021, 3, 1, 2021, 1, 31, Unit.MONTH) == DateDurationRecord(0, -1, 0, -1)

    def test_weeks_and_days(self):
        assert difference_iso_date(2021, 1, 1, 2021, 1, 20, Unit.WEEK) == DateDurationRecord(0, 0, 2, 5)
        assert difference_iso_date(2021, 1, 20, 2021, 1, 1, Unit.WEEK) == DateDurationRecord(0, 0, -2, -5)

    def test_days(self):
        assert difference_iso_date(2020, 1, 1, 2021, 1, 1, Unit.DAY) == DateDurationRecord(0, 0, 0, 366)

    def test_equal_dates(self):
        assert difference_iso_date(2021, 5, 5, 2021, 5, 5, Unit.YEAR) == DateDurationRecord(0, 0, 0, 0)

    def test_exact_years(self):
        assert difference_iso_date(2020, 5, 5, 2023, 5, 5, Unit.YEAR) == DateDurationRecord(3, 0, 0, 0)
        assert difference_iso_date(2020, 5, 5, 2023, 5, 5, Unit.MONTH) == DateDurationRecord(0, 36, 0, 0)

    def test_time_unit_rejected(self):
        with pytest.raises(TemporalRangeError):
            difference_iso_date(2021, 1, 1, 2021, 1, 2, Unit.HOUR)

    @pytest.mark.parametrize(
        "start,end",
        [
            ((2021, 1, 31), (2021, 3, 1)),
            ((2019, 1, 1), (2021, 6, 15)),
            ((2021, 3, 1), (2021, 1, 31)),
            ((2021, 1, 31), (2020, 12, 30)),
            ((2020, 2, 29), (2024, 2, 28)),
        ],
    )
    @pytest.mark.parametrize("largest_unit", [Unit.YEAR, Unit.MONTH, Unit.WEEK, Unit.DAY])
    def test_round_trip_law(self, start, end, largest_unit):
        diff = difference_iso_date(*start, *end, largest_unit)
        result = add_iso_date(*start, diff.years, diff.months, diff.weeks, diff.days, Overflow.CONSTRAIN)
        assert result.as_tuple() == end

    def test_leap_day_to_non_leap(self):
        assert difference_iso_date(2020, 2, 29, 2024, 2, 28, Unit.YEAR) == DateDurationRecord(3, 11, 0, 30)


class TestDifferenceISODateTime:
    def test_time_borrow(self):
        one = ISODateTime(date=ISODate(year=2020, month=1, day=1), time=ISOTime(hour=12))
        two = ISODateTime(date=ISODate(year=2020, month=1, day=3))
        date_diff, norm = difference_iso_date_time(one, two, Unit.DAY)
        assert date_diff == DateDurationRecord(0, 0, 0, 1)
        assert norm == 12 * 3_600_000_000_000

    def test_time_largest_unit_folds_days(self):
        one = ISODateTime(date=ISODate(year=2020, month=1, day=1))
        two = ISODateTime(date=ISODate(year=2020, month=1, day=2), time=ISOTime(hour=6))
        date_diff, norm = difference_iso_date_time(one, two, Unit.HOUR)
        assert date_diff == DateDurationRecord(0, 0, 0, 0)
        assert norm == 30 * 3_600_000_000_000


# =============================================================================
# WEEK NUMBERING
# =============================================================================


class TestWeekNumbering:
    """ISO-8601: week 1 contains the first Thursday."""

    def test_day_of_week(self):
        assert to_iso_day_of_week(2024, 1, 1) == 1
        assert to_iso_day_of_week(1970, 1, 1) == 4
        assert to_iso_day_of_week(2024, 1, 7) == 7

    def test_day_of_year(self):
        assert to_iso_day_of_year(2024, 1, 1) == 1
        assert to_iso_day_of_year(2024, 12, 31) == 366

    def test_first_week(self):
        assert week_of_iso_week_of_year(2024, 1, 1) == 1
        assert year_of_iso_week_of_year(2024, 1, 1) == 2024

    def test_early_january_in_previous_year(self):
        assert to_iso_week_of_year(2021, 1, 1) == (53, 2020)
        assert to_iso_week_of_year(2022, 1, 1) == (52, 2021)

    def test_late_december_in_next_year(self):
        assert to_iso_week_of_year(2019, 12, 30) == (1, 2020)

    def test_week_53(self):
        assert to_iso_week_of_year(2020, 12, 31) == (53, 2020)


class TestDateTimeHelpers:
    def test_reject_iso_date(self):
        assert reject_iso_date(2024, 2, 29) == ISODate(year=2024, month=2, day=29)
        with pytest.raises(TemporalRangeError):
            reject_iso_date(2023, 2, 29)

    def test_compare_date_time(self):
        morning = ISODateTime(date=ISODate(year=2021, month=1, day=1), time=ISOTime(hour=9))
        evening = ISODateTime(date=ISODate(year=2021, month=1, day=1), time=ISOTime(hour=21))
        next_day = ISODateTime(date=ISODate(year=2021, month=1, day=2))
        assert compare_iso_date_time(morning, evening) == -1
        assert compare_iso_date_time(next_day, evening) == 1
        assert compare_iso_date_time(morning, morning) == 0
