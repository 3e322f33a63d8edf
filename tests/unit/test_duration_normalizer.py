"""
Tests for Duration Normalizer

Checked invariants:
1. Time components collapse to one exact nanosecond magnitude
2. balance_time_duration recombines exactly to its input
3. Magnitudes beyond 2^53 seconds are rejected
4. Instants never leave ±10^8 days (no clamping)
"""

import pytest

from isotemporal.core.domain.enums import UNIT_NANOSECONDS, RoundingMode, Unit
from isotemporal.core.domain.records import Duration, TimeDurationRecord
from isotemporal.core.errors import TemporalRangeError
from isotemporal.core.math.duration_normalizer import (
    MAX_NORMALIZED_TIME_DURATION,
    NS_MAX_INSTANT,
    NS_MIN_INSTANT,
    add_24_hour_days,
    add_instant,
    balance_time_duration,
    divide_normalized_time_duration,
    is_valid_epoch_nanoseconds,
    normalize_duration_time_part,
    normalize_time_duration,
    normalized_from_epoch_difference,
    normalized_sign,
    round_normalized_time_duration,
)

HOUR = UNIT_NANOSECONDS[Unit.HOUR]
MINUTE = UNIT_NANOSECONDS[Unit.MINUTE]


def _recombine(record: TimeDurationRecord) -> int:
    return (
        record.days * UNIT_NANOSECONDS[Unit.DAY]
        + record.hours * HOUR
        + record.minutes * MINUTE
        + record.seconds * UNIT_NANOSECONDS[Unit.SECOND]
        + record.milliseconds * UNIT_NANOSECONDS[Unit.MILLISECOND]
        + record.microseconds * UNIT_NANOSECONDS[Unit.MICROSECOND]
        + record.nanoseconds
    )


# =============================================================================
# NORMALIZATION
# =============================================================================


class TestNormalize:
    def test_sum_of_components(self):
        assert normalize_time_duration(1, 30, 0, 0, 0, 0) == 90 * MINUTE
        assert normalize_time_duration(0, 0, 1, 1, 1, 1) == 1_001_001_001

    def test_duration_time_part_ignores_date_part(self):
        duration = Duration(days=3, hours=2, nanoseconds=5)
        assert normalize_duration_time_part(duration) == 2 * HOUR + 5

    def test_limit_is_exclusive_at_2_pow_53_seconds(self):
        assert normalize_time_duration(0, 0, 0, 0, 0, MAX_NORMALIZED_TIME_DURATION) == MAX_NORMALIZED_TIME_DURATION
        with pytest.raises(TemporalRangeError):
            normalize_time_duration(0, 0, 2**53, 0, 0, 0)

    def test_add_24_hour_days_is_range_checked(self):
        with pytest.raises(TemporalRangeError):
            add_24_hour_days(MAX_NORMALIZED_TIME_DURATION, 1)

    def test_add_24_hour_days(self):
        assert add_24_hour_days(HOUR, 2) == 49 * HOUR

    def test_sign_and_epoch_difference(self):
        assert normalized_sign(-5) == -1
        assert normalized_sign(0) == 0
        assert normalized_sign(5) == 1
        assert normalized_from_epoch_difference(10, 4) == -6

    def test_divide_is_exact(self):
        assert divide_normalized_time_duration(90 * MINUTE, HOUR) * 2 == 3


# =============================================================================
# BALANCING
# =============================================================================


class TestBalanceTimeDuration:
    """Split of one magnitude into fields, largest unit first."""

    def test_10_pow_15_nanoseconds_in_days(self):
        result = balance_time_duration(10**15, Unit.DAY)
        assert result == TimeDurationRecord(11, 13, 46, 40, 0, 0, 0)

    def test_10_pow_12_nanoseconds_in_days(self):
        result = balance_time_duration(10**12, Unit.DAY)
        assert result == TimeDurationRecord(0, 0, 16, 40, 0, 0, 0)

    def test_hour_largest_unit(self):
        result = balance_time_duration(10**15, Unit.HOUR)
        assert result == TimeDurationRecord(0, 277, 46, 40, 0, 0, 0)

    def test_negative_keeps_one_sign(self):
        result = balance_time_duration(-90 * MINUTE, Unit.MINUTE)
        assert result.minutes == -90
        assert result.hours == 0
        result = balance_time_duration(-(HOUR + 1), Unit.HOUR)
        assert (result.hours, result.nanoseconds) == (-1, -1)

    def test_calendar_largest_unit_balances_like_day(self):
        assert balance_time_duration(25 * HOUR, Unit.MONTH) == balance_time_duration(25 * HOUR, Unit.DAY)

    def test_auto_rejected(self):
        with pytest.raises(TemporalRangeError):
            balance_time_duration(1, Unit.AUTO)

    @pytest.mark.parametrize("largest_unit", [Unit.DAY, Unit.HOUR, Unit.SECOND, Unit.MICROSECOND, Unit.NANOSECOND])
    @pytest.mark.parametrize("norm", [0, 1, -1, 123_456_789_012_345, -98_765_432_109_876])
    def test_recombines_exactly(self, norm, largest_unit):
        assert _recombine(balance_time_duration(norm, largest_unit)) == norm


# =============================================================================
# ROUNDING
# =============================================================================


class TestRoundNormalized:
    @pytest.mark.parametrize(
        "norm,mode,expected_hours",
        [
            (90 * MINUTE, RoundingMode.HALF_EXPAND, 2),
            (90 * MINUTE, RoundingMode.TRUNC, 1),
            (-90 * MINUTE, RoundingMode.HALF_EXPAND, -2),
            (-90 * MINUTE, RoundingMode.FLOOR, -2),
            (-90 * MINUTE, RoundingMode.CEIL, -1),
            (-90 * MINUTE, RoundingMode.HALF_EVEN, -2),
        ],
    )
    def test_round_to_hour(self, norm, mode, expected_hours):
        assert round_normalized_time_duration(norm, HOUR, mode) == expected_hours * HOUR


# =============================================================================
# INSTANTS
# =============================================================================


class TestInstants:
    """Epoch nanoseconds are bounded by ±8.64e21."""

    def test_bounds(self):
        assert NS_MAX_INSTANT == 8_640_000_000_000_000_000_000
        assert is_valid_epoch_nanoseconds(NS_MAX_INSTANT)
        assert is_valid_epoch_nanoseconds(NS_MIN_INSTANT)
        assert not is_valid_epoch_nanoseconds(NS_MAX_INSTANT + 1)

    def test_add_instant(self):
        assert add_instant(0, HOUR) == HOUR

    def test_add_instant_out_of_range_raises(self):
        with pytest.raises(TemporalRangeError, match="representable"):
            add_instant(NS_MAX_INSTANT, 1)
        with pytest.raises(TemporalRangeError):
            add_instant(NS_MIN_INSTANT, -1)
