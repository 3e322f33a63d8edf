"""
Time Math - Time-of-day algebra with day carry

Pure arithmetic over (hour, minute, second, millisecond, microsecond,
nanosecond) sextuples. Every operation that can cross midnight returns a
BalancedTime: the wrapped time of day plus the signed number of whole days
carried (positive) or borrowed (negative).

Carries cascade 1000 ns → 1 µs → 1000 µs → 1 ms → 1000 ms → 1 s → 60 s → 1 min
→ 60 min → 1 h → 24 h → 1 day, using floor division so negative inputs
borrow correctly (-1 ns → 23:59:59.999999999 with days = -1).

CRITICAL INVARIANTS:
1. balance_time always returns fields inside their native ranges
2. days * NS_PER_DAY + time_to_nanoseconds(time) equals the input magnitude
3. round_time output is a multiple of increment * unit (or of the day length)
"""

from fractions import Fraction
from typing import Final

from isotemporal.core.domain.enums import Overflow, RoundingMode, Unit
from isotemporal.core.domain.records import (
    MIDNIGHT,
    BalancedTime,
    ISOTime,
    NormalizedTimeDuration,
)
from isotemporal.core.errors import TemporalRangeError
from isotemporal.core.math.rounding import round_number_to_increment

# =============================================================================
# TIME CONSTANTS
# =============================================================================

NS_PER_MICROSECOND: Final[int] = 1_000
NS_PER_MILLISECOND: Final[int] = 1_000_000
NS_PER_SECOND: Final[int] = 1_000_000_000
NS_PER_MINUTE: Final[int] = 60 * NS_PER_SECOND
NS_PER_HOUR: Final[int] = 60 * NS_PER_MINUTE
NS_PER_DAY: Final[int] = 24 * NS_PER_HOUR

# (field, inclusive maximum)
_TIME_FIELD_MAXIMA: Final[tuple[tuple[str, int], ...]] = (
    ("hour", 23),
    ("minute", 59),
    ("second", 59),
    ("millisecond", 999),
    ("microsecond", 999),
    ("nanosecond", 999),
)


# =============================================================================
# VALIDATION / REGULATION
# =============================================================================


def is_valid_time(
    hour: int, minute: int, second: int, millisecond: int, microsecond: int, nanosecond: int
) -> bool:
    values = (hour, minute, second, millisecond, microsecond, nanosecond)
    return all(0 <= value <= maximum for value, (_, maximum) in zip(values, _TIME_FIELD_MAXIMA))


def create_time(
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
    microsecond: int = 0,
    nanosecond: int = 0,
) -> ISOTime:
    """
    Validated ISOTime factory.

    Raises:
        TemporalRangeError: any field outside its native range
    """
    values = (hour, minute, second, millisecond, microsecond, nanosecond)
    for value, (name, maximum) in zip(values, _TIME_FIELD_MAXIMA):
        if value < 0 or value > maximum:
            raise TemporalRangeError(f"{name} must be in 0..{maximum}, got {value}")
    return ISOTime(
        hour=hour,
        minute=minute,
        second=second,
        millisecond=millisecond,
        microsecond=microsecond,
        nanosecond=nanosecond,
    )


def reject_time(
    hour: int, minute: int, second: int, millisecond: int, microsecond: int, nanosecond: int
) -> ISOTime:
    """Alias of create_time() for overflow=reject call sites."""
    return create_time(hour, minute, second, millisecond, microsecond, nanosecond)


def regulate_time(
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
    microsecond: int,
    nanosecond: int,
    overflow: Overflow,
) -> ISOTime:
    """
    Resolution of time fields under an overflow policy.

    Args:
        hour..nanosecond: Fields (may be out of range)
        overflow: CONSTRAIN clamps every field into its range; REJECT raises

    Returns:
        Valid ISOTime

    Raises:
        TemporalRangeError: overflow=REJECT and a field is out of range

    Examples:
        >>> regulate_time(25, 61, 0, 0, 0, 0, Overflow.CONSTRAIN).as_tuple()
        (23, 59, 0, 0, 0, 0)
    """
    values = (hour, minute, second, millisecond, microsecond, nanosecond)
    if overflow is Overflow.REJECT:
        return create_time(*values)
    clamped = [min(max(value, 0), maximum) for value, (_, maximum) in zip(values, _TIME_FIELD_MAXIMA)]
    return create_time(*clamped)


# =============================================================================
# BALANCING
# =============================================================================


def balance_time(
    hour: int, minute: int, second: int, millisecond: int, microsecond: int, nanosecond: int
) -> BalancedTime:
    """
    Cascade of carries from nanoseconds up to days.

    Args:
        hour..nanosecond: Arbitrary signed integers

    Returns:
        BalancedTime(days, time) with every time field in range

    Examples:
        >>> balance_time(23, 0, 0, 0, 0, 3_600_000_000_000)
        BalancedTime(days=1, time=ISOTime(hour=0, minute=0, second=0, millisecond=0, microsecond=0, nanosecond=0))
        >>> balance_time(0, 0, 0, 0, 0, -1).days
        -1
    """
    carry, nanosecond = divmod(nanosecond, 1000)
    carry, microsecond = divmod(microsecond + carry, 1000)
    carry, millisecond = divmod(millisecond + carry, 1000)
    carry, second = divmod(second + carry, 60)
    carry, minute = divmod(minute + carry, 60)
    days, hour = divmod(hour + carry, 24)

    return BalancedTime(
        days=days,
        time=ISOTime(
            hour=hour,
            minute=minute,
            second=second,
            millisecond=millisecond,
            microsecond=microsecond,
            nanosecond=nanosecond,
        ),
    )


def time_to_nanoseconds(time: ISOTime) -> int:
    """Nanoseconds since midnight."""
    return (
        time.hour * NS_PER_HOUR
        + time.minute * NS_PER_MINUTE
        + time.second * NS_PER_SECOND
        + time.millisecond * NS_PER_MILLISECOND
        + time.microsecond * NS_PER_MICROSECOND
        + time.nanosecond
    )


def nanoseconds_to_time(nanoseconds: int) -> BalancedTime:
    """Inverse of time_to_nanoseconds() for any signed magnitude."""
    return balance_time(0, 0, 0, 0, 0, nanoseconds)


# =============================================================================
# ARITHMETIC
# =============================================================================


def add_time(
    time: ISOTime,
    hours: int = 0,
    minutes: int = 0,
    seconds: int = 0,
    milliseconds: int = 0,
    microseconds: int = 0,
    nanoseconds: NormalizedTimeDuration = 0,
) -> BalancedTime:
    """
    Addition of time deltas to a time of day.

    Each unit is summed independently, then balanced; the normalized form of
    a duration can be passed whole as `nanoseconds`.

    Examples:
        >>> add_time(ISOTime(hour=23), hours=2).days
        1
        >>> add_time(ISOTime(hour=1), hours=-2).time.hour
        23
    """
    return balance_time(
        time.hour + hours,
        time.minute + minutes,
        time.second + seconds,
        time.millisecond + milliseconds,
        time.microsecond + microseconds,
        time.nanosecond + nanoseconds,
    )


def difference_time(one: ISOTime, two: ISOTime) -> NormalizedTimeDuration:
    """
    Signed time-length from `one` to `two` as a normalized nanosecond magnitude.

    Always within (-1 day, +1 day).
    """
    return time_to_nanoseconds(two) - time_to_nanoseconds(one)


def compare_time(one: ISOTime, two: ISOTime) -> int:
    """-1 / 0 / +1 for one < two / one == two / one > two."""
    a = one.as_tuple()
    b = two.as_tuple()
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


# =============================================================================
# ROUNDING
# =============================================================================


def round_time(
    time: ISOTime,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
    day_length_ns: int | None = None,
) -> BalancedTime:
    """
    Rounding of a time of day to a multiple of `increment` `unit`s.

    Algorithm:
        1. Time → nanosecond-of-day magnitude
        2. Rounded to increment * unit length (exact integer arithmetic)
        3. Re-expanded to fields; rounding up past midnight carries one day

    For unit=DAY the result is always midnight with days = 0 or 1, decided by
    comparing the time against the day length. `day_length_ns` overrides 24h
    for local days stretched or shortened by an offset transition.

    Args:
        time: Time of day
        increment: Positive multiple of `unit`
        unit: DAY or a time unit
        mode: Rounding mode
        day_length_ns: Length of the day (unit=DAY only; default 24h)

    Returns:
        BalancedTime

    Raises:
        TemporalRangeError: calendar unit, or non-positive day length

    Examples:
        >>> r = round_time(ISOTime(hour=23, minute=59, second=59, millisecond=999,
        ...                        microsecond=999, nanosecond=999), 1, Unit.HOUR, RoundingMode.HALF_EXPAND)
        >>> r.days, r.time.as_tuple()
        (1, (0, 0, 0, 0, 0, 0))
    """
    if unit.is_calendar_unit or unit is Unit.AUTO:
        raise TemporalRangeError(f"Cannot round a time of day to {unit.value}")

    quantity = time_to_nanoseconds(time)

    if unit is Unit.DAY:
        length = NS_PER_DAY if day_length_ns is None else day_length_ns
        if length <= 0:
            raise TemporalRangeError(f"Day length must be positive, got {length}")
        days = round_number_to_increment(Fraction(quantity, length), increment, mode)
        return BalancedTime(days=days, time=MIDNIGHT)

    rounded = round_number_to_increment(quantity, increment * unit.nanoseconds, mode)
    return nanoseconds_to_time(rounded)
