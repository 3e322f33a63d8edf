"""
PlainTime operations - Wall-clock time arithmetic without a date

Operations of a time-of-day value object (ISOTime):
- add / subtract a duration (only its time part; the day carry is dropped)
- with_fields: partial replacement of fields under an overflow policy
- until / since: difference rounded and balanced into a Duration
- round_time_of_day: rounding to a unit/increment; wraps at midnight
- equals / compare

Policy arguments default to EngineSettings when passed as None.
"""

from typing import Any, Final, Mapping, Union

from isotemporal.core.config import get_settings
from isotemporal.core.contracts.validators import validate_partial_time
from isotemporal.core.domain.enums import (
    DifferenceOperation,
    Overflow,
    RoundingMode,
    Unit,
    larger_of_two_units,
)
from isotemporal.core.domain.fields import duration_from_fields
from isotemporal.core.domain.records import Duration, ISOTime, to_integer_with_truncation
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError
from isotemporal.core.math.duration_normalizer import (
    balance_time_duration,
    round_normalized_time_duration,
)
from isotemporal.core.math.rounding import resolve_rounding_spec
from isotemporal.core.math.time_math import (
    add_time,
    compare_time,
    difference_time,
    regulate_time,
    round_time,
)

TIME_FIELD_NAMES: Final[tuple[str, ...]] = (
    "hour",
    "minute",
    "second",
    "millisecond",
    "microsecond",
    "nanosecond",
)

DurationLike = Union[Duration, Mapping[str, Any]]


def _to_duration(duration: Any) -> Duration:
    if isinstance(duration, Duration):
        return duration
    if isinstance(duration, Mapping):
        return duration_from_fields(duration)
    raise InvalidArgumentError(f"Expected a duration-like value, got {type(duration).__name__}")


def _require_time(value: Any) -> ISOTime:
    if not isinstance(value, ISOTime):
        raise InvalidArgumentError(f"Expected ISOTime, got {type(value).__name__}")
    return value


# =============================================================================
# ARITHMETIC
# =============================================================================


def _add_duration(time: ISOTime, duration: Duration, sign: int) -> ISOTime:
    result = add_time(
        time,
        hours=sign * duration.hours,
        minutes=sign * duration.minutes,
        seconds=sign * duration.seconds,
        milliseconds=sign * duration.milliseconds,
        microseconds=sign * duration.microseconds,
        nanoseconds=sign * duration.nanoseconds,
    )
    return result.time


def add(time: ISOTime, duration: DurationLike) -> ISOTime:
    """
    Time + duration, wrapping around midnight.

    Years..days of the duration do not affect a time of day.

    Examples:
        >>> add(ISOTime(hour=23), {"hours": 2})
        ISOTime(hour=1, minute=0, second=0, millisecond=0, microsecond=0, nanosecond=0)
    """
    return _add_duration(_require_time(time), _to_duration(duration), 1)


def subtract(time: ISOTime, duration: DurationLike) -> ISOTime:
    return _add_duration(_require_time(time), _to_duration(duration), -1)


def with_fields(time: ISOTime, partial: Mapping[str, Any], overflow: Overflow | None = None) -> ISOTime:
    """
    Copy of `time` with the fields present in `partial` replaced.

    Raises:
        InvalidArgumentError: partial is not a mapping or names no time field
        TemporalRangeError: overflow=REJECT and a field is out of range, or a
            non-finite value
    """
    time = _require_time(time)
    validate_partial_time(partial)
    if overflow is None:
        overflow = get_settings().default_overflow

    values = []
    for name in TIME_FIELD_NAMES:
        value = partial.get(name)
        values.append(getattr(time, name) if value is None else to_integer_with_truncation(value, name))
    return regulate_time(*values, overflow)


# =============================================================================
# DIFFERENCE
# =============================================================================


def _difference(
    operation: DifferenceOperation,
    time: ISOTime,
    other: ISOTime,
    largest_unit: Unit | None,
    smallest_unit: Unit | None,
    increment: int | float,
    mode: RoundingMode | None,
) -> Duration:
    time = _require_time(time)
    other = _require_time(other)

    smallest = Unit.NANOSECOND if smallest_unit is None else smallest_unit
    if not smallest.is_time_unit:
        raise TemporalRangeError(f"smallest_unit must be a time unit, got {smallest.value}")
    if largest_unit is None or largest_unit is Unit.AUTO:
        largest = larger_of_two_units(Unit.HOUR, smallest)
    else:
        largest = largest_unit
    if not largest.is_time_unit:
        raise TemporalRangeError(f"largest_unit must be a time unit, got {largest.value}")
    if smallest.is_larger_than(largest):
        raise TemporalRangeError(
            f"largest_unit {largest.value} is smaller than smallest_unit {smallest.value}"
        )

    if mode is None:
        mode = RoundingMode.TRUNC
    if operation is DifferenceOperation.SINCE:
        mode = mode.negated()
    spec = resolve_rounding_spec(smallest, increment, mode)

    norm = difference_time(time, other)
    norm = round_normalized_time_duration(norm, spec.increment * spec.unit.nanoseconds, spec.mode)
    balanced = balance_time_duration(norm, largest)

    sign = operation.sign
    return Duration.create(
        hours=sign * balanced.hours,
        minutes=sign * balanced.minutes,
        seconds=sign * balanced.seconds,
        milliseconds=sign * balanced.milliseconds,
        microseconds=sign * balanced.microseconds,
        nanoseconds=sign * balanced.nanoseconds,
    )


def until(
    time: ISOTime,
    other: ISOTime,
    largest_unit: Unit | None = None,
    smallest_unit: Unit | None = None,
    increment: int | float = 1,
    mode: RoundingMode | None = None,
) -> Duration:
    """
    Duration from `time` to `other`.

    Args:
        largest_unit: Coarsest unit (default: larger of hour and smallest_unit)
        smallest_unit: Finest unit (default nanosecond)
        increment: Rounding increment for smallest_unit
        mode: Rounding mode (default trunc)

    Raises:
        TemporalRangeError: date units, largest < smallest, invalid increment

    Examples:
        >>> until(ISOTime(hour=8), ISOTime(hour=17, minute=30)).minutes
        30
    """
    return _difference(DifferenceOperation.UNTIL, time, other, largest_unit, smallest_unit, increment, mode)


def since(
    time: ISOTime,
    other: ISOTime,
    largest_unit: Unit | None = None,
    smallest_unit: Unit | None = None,
    increment: int | float = 1,
    mode: RoundingMode | None = None,
) -> Duration:
    """Duration from `other` to `time` (the rounding mode is applied to that direction)."""
    return _difference(DifferenceOperation.SINCE, time, other, largest_unit, smallest_unit, increment, mode)


# =============================================================================
# ROUNDING / COMPARISON
# =============================================================================


def round_time_of_day(
    time: ISOTime,
    smallest_unit: Unit,
    increment: int | float = 1,
    mode: RoundingMode | None = None,
) -> ISOTime:
    """
    Rounding of a time of day; rounding past 24:00 wraps to midnight.

    The increment must divide the next larger unit and be smaller than it
    (hour < 24, minute/second < 60, sub-second < 1000).

    Raises:
        TemporalRangeError: smallest_unit is not a time unit, invalid increment
    """
    time = _require_time(time)
    if smallest_unit is None or not smallest_unit.is_time_unit:
        raise TemporalRangeError(f"smallest_unit must be a time unit, got {smallest_unit}")
    if mode is None:
        mode = get_settings().default_rounding_mode
    spec = resolve_rounding_spec(smallest_unit, increment, mode)
    return round_time(time, spec.increment, spec.unit, spec.mode).time


def equals(one: ISOTime, two: ISOTime) -> bool:
    return compare_time(_require_time(one), _require_time(two)) == 0


def compare(one: ISOTime, two: ISOTime) -> int:
    return compare_time(_require_time(one), _require_time(two))
