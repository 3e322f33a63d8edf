"""
Tests for the domain enums and value records

Checks:
1. Unit ordering and classification (calendar / date / time units)
2. RoundingMode mirroring for since-style differences
3. Creation and validation of the Pydantic records
4. Immutability (frozen=True)
5. Duration sign, limits and derived views
"""

import pytest
from pydantic import ValidationError

from isotemporal.core.domain import (
    DateDurationRecord,
    DifferenceOperation,
    Duration,
    ISODate,
    ISOMonthDay,
    ISOTime,
    RoundingMode,
    RoundingSpec,
    Unit,
)
from isotemporal.core.domain.enums import DATE_UNITS, TIME_UNITS, larger_of_two_units
from isotemporal.core.domain.records import (
    is_valid_duration,
    to_integer_if_integral,
    to_integer_with_truncation,
)
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError


# =============================================================================
# ENUMS
# =============================================================================


class TestUnit:
    def test_ordering(self):
        assert Unit.YEAR.is_larger_than(Unit.MONTH)
        assert Unit.DAY.is_larger_than(Unit.HOUR)
        assert not Unit.NANOSECOND.is_larger_than(Unit.MICROSECOND)
        assert larger_of_two_units(Unit.HOUR, Unit.WEEK) is Unit.WEEK

    def test_classification(self):
        assert Unit.WEEK.is_calendar_unit
        assert not Unit.DAY.is_calendar_unit
        assert Unit.DAY.is_date_unit
        assert Unit.HOUR.is_time_unit
        assert not Unit.DAY.is_time_unit

    def test_lengths(self):
        assert Unit.DAY.nanoseconds == 86_400_000_000_000
        assert Unit.MICROSECOND.nanoseconds == 1_000
        with pytest.raises(ValueError):
            Unit.MONTH.nanoseconds

    def test_unit_groups(self):
        assert DATE_UNITS == (Unit.YEAR, Unit.MONTH, Unit.WEEK, Unit.DAY)
        assert all(unit.is_time_unit for unit in TIME_UNITS)
        assert len(TIME_UNITS) == 6

    def test_auto_has_no_rank(self):
        with pytest.raises(ValueError):
            Unit.AUTO.rank


class TestPolicies:
    @pytest.mark.parametrize(
        "mode,negated",
        [
            (RoundingMode.CEIL, RoundingMode.FLOOR),
            (RoundingMode.FLOOR, RoundingMode.CEIL),
            (RoundingMode.HALF_CEIL, RoundingMode.HALF_FLOOR),
            (RoundingMode.HALF_FLOOR, RoundingMode.HALF_CEIL),
            (RoundingMode.TRUNC, RoundingMode.TRUNC),
            (RoundingMode.HALF_EVEN, RoundingMode.HALF_EVEN),
        ],
    )
    def test_negated_mode(self, mode, negated):
        assert mode.negated() is negated

    def test_difference_sign(self):
        assert DifferenceOperation.UNTIL.sign == 1
        assert DifferenceOperation.SINCE.sign == -1

    def test_string_values(self):
        assert RoundingMode("halfExpand") is RoundingMode.HALF_EXPAND
        assert Unit("millisecond") is Unit.MILLISECOND


# =============================================================================
# FIELD CONVERSION
# =============================================================================


class TestFieldConversion:
    def test_integral(self):
        assert to_integer_if_integral(4.0, "days") == 4
        with pytest.raises(TemporalRangeError):
            to_integer_if_integral(4.5, "days")
        with pytest.raises(InvalidArgumentError):
            to_integer_if_integral(True, "days")

    def test_truncation(self):
        assert to_integer_with_truncation(-4.7, "year") == -4
        with pytest.raises(TemporalRangeError):
            to_integer_with_truncation(float("-inf"), "year")
        with pytest.raises(InvalidArgumentError):
            to_integer_with_truncation("4", "year")


# =============================================================================
# RECORDS
# =============================================================================


class TestRecords:
    def test_frozen(self):
        date = ISODate(year=2021, month=1, day=1)
        with pytest.raises(ValidationError):
            date.year = 2022

    def test_structural_guards(self):
        with pytest.raises(ValidationError):
            ISODate(year=2021, month=13, day=1)
        with pytest.raises(ValidationError):
            ISOTime(hour=24)

    def test_month_day_reference_year(self):
        assert ISOMonthDay(month=2, day=29).reference_year == 1972

    def test_rounding_spec_defaults(self):
        spec = RoundingSpec(unit=Unit.MINUTE)
        assert spec.increment == 1
        assert spec.mode is RoundingMode.HALF_EXPAND


class TestDuration:
    def test_sign(self):
        assert Duration(hours=-3).sign == -1
        assert Duration(years=1, nanoseconds=5).sign == 1
        assert Duration().is_blank

    def test_mixed_sign_rejected_by_model(self):
        with pytest.raises(ValidationError):
            Duration(days=1, hours=-1)

    def test_calendar_unit_limit(self):
        assert is_valid_duration(2**32 - 1, 0, 0, 0, 0, 0, 0, 0, 0, 0)
        assert not is_valid_duration(2**32, 0, 0, 0, 0, 0, 0, 0, 0, 0)

    def test_time_limit(self):
        assert is_valid_duration(0, 0, 0, 0, 0, 0, 2**53 - 1, 0, 0, 0)
        assert not is_valid_duration(0, 0, 0, 0, 0, 0, 2**53, 0, 0, 0)

    def test_derived_views(self):
        duration = Duration(years=1, weeks=2, days=3, minutes=4)
        assert duration.has_calendar_units
        assert not Duration(days=3).has_calendar_units
        assert duration.negated() == Duration(years=-1, weeks=-2, days=-3, minutes=-4)
        assert duration.date_part() == DateDurationRecord(1, 0, 2, 3)
        assert duration.default_largest_unit() is Unit.YEAR
        assert Duration(minutes=4).default_largest_unit() is Unit.MINUTE
        assert Duration().default_largest_unit() is Unit.NANOSECOND

    def test_create_converts_integral_floats(self):
        assert Duration.create(days=2.0).days == 2
