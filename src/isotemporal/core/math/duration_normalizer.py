"""
Duration Normalizer - Time-unit components as one nanosecond magnitude

Collapses the time part of a duration (hours..nanoseconds, optionally whole
24-hour days) into a single signed nanosecond integer, and balances such a
magnitude back out into fields with a chosen largest unit.

Python integers are arbitrary precision, so no magnitude is ever truncated;
the explicit limits below are domain limits, not storage limits.

CRITICAL INVARIANTS:
1. |normalized| <= MAX_NORMALIZED_TIME_DURATION, else TemporalRangeError
2. Epoch nanoseconds stay within [NS_MIN_INSTANT, NS_MAX_INSTANT], else TemporalRangeError
3. balance_time_duration(n, u) recombines exactly to n (all fields share n's sign)

LIMITS:
    instant range          ±8.64 × 10^21 ns   (±10^8 days)
    normalized duration    2^53 × 10^9 − 1 ns (2^53 seconds, exclusive)
"""

from fractions import Fraction
from typing import Final

from isotemporal.core.domain.enums import UNIT_NANOSECONDS, RoundingMode, Unit
from isotemporal.core.domain.records import (
    MAX_DURATION_SECONDS,
    Duration,
    NormalizedTimeDuration,
    TimeDurationRecord,
)
from isotemporal.core.errors import TemporalRangeError
from isotemporal.core.math.rounding import round_number_to_increment

# =============================================================================
# LIMITS
# =============================================================================

NS_PER_DAY: Final[int] = UNIT_NANOSECONDS[Unit.DAY]

NS_MAX_INSTANT: Final[int] = 100_000_000 * NS_PER_DAY
NS_MIN_INSTANT: Final[int] = -NS_MAX_INSTANT

MAX_NORMALIZED_TIME_DURATION: Final[int] = MAX_DURATION_SECONDS * 1_000_000_000 - 1

# Balancing stop units, largest first
_BALANCE_UNITS: Final[tuple[Unit, ...]] = (
    Unit.DAY,
    Unit.HOUR,
    Unit.MINUTE,
    Unit.SECOND,
    Unit.MILLISECOND,
    Unit.MICROSECOND,
    Unit.NANOSECOND,
)


# =============================================================================
# NORMALIZATION
# =============================================================================


def _checked(norm: int) -> NormalizedTimeDuration:
    if abs(norm) > MAX_NORMALIZED_TIME_DURATION:
        raise TemporalRangeError("Time duration is outside the representable range")
    return norm


def normalize_time_duration(
    hours: int,
    minutes: int,
    seconds: int,
    milliseconds: int,
    microseconds: int,
    nanoseconds: int,
) -> NormalizedTimeDuration:
    """
    Sum of the time components in nanoseconds.

    Raises:
        TemporalRangeError: magnitude exceeds MAX_NORMALIZED_TIME_DURATION

    Examples:
        >>> normalize_time_duration(1, 30, 0, 0, 0, 0)
        5400000000000
    """
    norm = (
        hours * UNIT_NANOSECONDS[Unit.HOUR]
        + minutes * UNIT_NANOSECONDS[Unit.MINUTE]
        + seconds * UNIT_NANOSECONDS[Unit.SECOND]
        + milliseconds * UNIT_NANOSECONDS[Unit.MILLISECOND]
        + microseconds * UNIT_NANOSECONDS[Unit.MICROSECOND]
        + nanoseconds
    )
    return _checked(norm)


def normalize_duration_time_part(duration: Duration) -> NormalizedTimeDuration:
    """normalize_time_duration() over the hours..nanoseconds of a Duration."""
    return normalize_time_duration(
        duration.hours,
        duration.minutes,
        duration.seconds,
        duration.milliseconds,
        duration.microseconds,
        duration.nanoseconds,
    )


def add_24_hour_days(norm: NormalizedTimeDuration, days: int) -> NormalizedTimeDuration:
    """Adds `days` as exact 24-hour days."""
    return _checked(norm + days * NS_PER_DAY)


def normalized_sign(norm: NormalizedTimeDuration) -> int:
    return (norm > 0) - (norm < 0)


def normalized_from_epoch_difference(one: int, two: int) -> NormalizedTimeDuration:
    """Time-length from epoch nanoseconds `one` to `two`."""
    return _checked(two - one)


def divide_normalized_time_duration(norm: NormalizedTimeDuration, divisor: int) -> Fraction:
    """Exact quotient norm / divisor (e.g. a total in hours)."""
    return Fraction(norm, divisor)


def round_normalized_time_duration(
    norm: NormalizedTimeDuration, increment_ns: int, mode: RoundingMode
) -> NormalizedTimeDuration:
    """
    Rounding to a multiple of `increment_ns`.

    Raises:
        TemporalRangeError: rounded magnitude exceeds the limit
    """
    return _checked(round_number_to_increment(norm, increment_ns, mode))


# =============================================================================
# BALANCING
# =============================================================================


def balance_time_duration(norm: NormalizedTimeDuration, largest_unit: Unit) -> TimeDurationRecord:
    """
    Split of a normalized magnitude into fields, largest first.

    Calendar units (year/month/week) balance like DAY: days are whole
    24-hour days. Below the largest unit, each field is the remainder of the
    next larger one. The sign of `norm` is applied to every field.

    Args:
        norm: Signed nanoseconds
        largest_unit: Coarsest field to fill

    Returns:
        TimeDurationRecord

    Examples:
        >>> balance_time_duration(1_000_000_000_000_000, Unit.DAY)
        TimeDurationRecord(days=11, hours=13, minutes=46, seconds=40, milliseconds=0, microseconds=0, nanoseconds=0)
        >>> balance_time_duration(-90 * 60 * 10**9, Unit.MINUTE).minutes
        -90
    """
    if largest_unit is Unit.AUTO:
        raise TemporalRangeError("largest_unit must be resolved before balancing")

    sign = normalized_sign(norm)
    remainder = abs(norm)

    stop = Unit.DAY if largest_unit.is_calendar_unit else largest_unit
    values = dict.fromkeys(_BALANCE_UNITS, 0)
    for unit in _BALANCE_UNITS[_BALANCE_UNITS.index(stop):]:
        values[unit], remainder = divmod(remainder, UNIT_NANOSECONDS[unit])

    return TimeDurationRecord(
        days=sign * values[Unit.DAY],
        hours=sign * values[Unit.HOUR],
        minutes=sign * values[Unit.MINUTE],
        seconds=sign * values[Unit.SECOND],
        milliseconds=sign * values[Unit.MILLISECOND],
        microseconds=sign * values[Unit.MICROSECOND],
        nanoseconds=sign * values[Unit.NANOSECOND],
    )


# =============================================================================
# INSTANTS
# =============================================================================


def is_valid_epoch_nanoseconds(epoch_ns: int) -> bool:
    return NS_MIN_INSTANT <= epoch_ns <= NS_MAX_INSTANT


def add_instant(epoch_ns: int, norm: NormalizedTimeDuration) -> int:
    """
    Exact instant + time-length.

    Raises:
        TemporalRangeError: result outside the instant range (never clamped)

    Examples:
        >>> add_instant(0, 1_000)
        1000
    """
    result = epoch_ns + norm
    if not is_valid_epoch_nanoseconds(result):
        raise TemporalRangeError(f"Instant {result} ns is outside the representable range")
    return result
