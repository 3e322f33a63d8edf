"""
Duration Rounder - Rounding and totals of durations

Two paths:

Time path (no relative_to): days are exact 24h days. The duration collapses
to one normalized nanosecond magnitude, is rounded to increment * unit, and
is balanced back out up to the largest unit. Calendar units are rejected.

Relative path (relative_to given): calendar units have no fixed length, so
the duration is first turned into a destination date-time from the anchor.
The difference anchor → destination is then recomputed in the requested
largest unit and rounded by bracketing:

    1. nudge: the truncated value r1 and r1 + increment (r2) are both added to
       the anchor; the destination sits between the two resulting instants and
       its position decides r1 vs r2 under the rounding mode
    2. bubble: if rounding grew the smallest unit (e.g. 11.6 months → 12),
       larger units are carried (12 months → 1 year) while the carried date
       does not overshoot

Fixed unit lengths (a month = 30 days) never enter the relative path.

CRITICAL INVARIANTS:
1. Idempotence: rounding a rounded duration with the same options is a no-op
2. Every component of the result shares the sign of the input
3. Rounding never consults a unit length for year/month/week
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Final

import structlog

from isotemporal.core.config import get_settings
from isotemporal.core.domain.enums import (
    UNIT_NANOSECONDS,
    Overflow,
    RoundingMode,
    Unit,
    larger_of_two_units,
)
from isotemporal.core.domain.records import (
    MIDNIGHT,
    DateDurationRecord,
    Duration,
    ISODate,
    ISODateTime,
    NormalizedTimeDuration,
    RoundingSpec,
)
from isotemporal.core.errors import TemporalRangeError
from isotemporal.core.math.calendar_math import (
    add_iso_date,
    balance_iso_date,
    difference_iso_date,
    difference_iso_date_time,
    get_utc_epoch_nanoseconds,
)
from isotemporal.core.math.duration_normalizer import (
    NS_PER_DAY,
    add_24_hour_days,
    balance_time_duration,
    divide_normalized_time_duration,
    normalize_duration_time_part,
    normalized_from_epoch_difference,
    normalized_sign,
    round_normalized_time_duration,
)
from isotemporal.core.math.rounding import (
    apply_unsigned_rounding_mode,
    get_unsigned_rounding_mode,
    resolve_rounding_spec,
    round_number_to_increment,
)
from isotemporal.core.math.time_math import add_time

logger = structlog.get_logger(__name__)

# Units visited by bubbling, largest first
_BUBBLE_UNITS: Final[tuple[Unit, ...]] = (Unit.YEAR, Unit.MONTH, Unit.WEEK)


# =============================================================================
# INTERMEDIATE RECORDS
# =============================================================================


@dataclass(frozen=True)
class NormalizedDuration:
    """Calendar part + normalized time part of a duration."""

    years: int
    months: int
    weeks: int
    days: int
    norm: NormalizedTimeDuration

    @property
    def sign(self) -> int:
        for value in (self.years, self.months, self.weeks, self.days):
            if value:
                return 1 if value > 0 else -1
        return normalized_sign(self.norm)

    @classmethod
    def from_parts(cls, date: DateDurationRecord, norm: NormalizedTimeDuration) -> "NormalizedDuration":
        return cls(date.years, date.months, date.weeks, date.days, norm)


@dataclass(frozen=True)
class NudgeResult:
    """
    Outcome of a single rounding nudge.

    Attributes:
        duration: Rounded duration (time part 0 after a calendar nudge)
        total: Exact fractional value of the smallest unit before rounding
        nudged_epoch_ns: Instant the rounded duration lands on
        did_expand_calendar_unit: True if rounding crossed into the next unit
    """

    duration: NormalizedDuration
    total: Fraction
    nudged_epoch_ns: int
    did_expand_calendar_unit: bool


# =============================================================================
# ANCHORING
# =============================================================================


def _as_date_time(relative_to: ISODate | ISODateTime) -> ISODateTime:
    if isinstance(relative_to, ISODateTime):
        return relative_to
    return ISODateTime(date=relative_to, time=MIDNIGHT)


def _add_date_duration(anchor: ISODate, years: int, months: int, weeks: int, days: int) -> ISODate:
    return add_iso_date(
        anchor.year, anchor.month, anchor.day, years, months, weeks, days, Overflow.CONSTRAIN
    )


def _destination(anchor: ISODateTime, duration: Duration) -> ISODateTime:
    """Anchor + duration: the time part first, its day carry joining the days."""
    balanced = add_time(anchor.time, nanoseconds=normalize_duration_time_part(duration))
    date = _add_date_duration(
        anchor.date,
        duration.years,
        duration.months,
        duration.weeks,
        duration.days + balanced.days,
    )
    return ISODateTime(date=date, time=balanced.time)


# =============================================================================
# NUDGING
# =============================================================================


def nudge_to_calendar_unit(
    sign: int,
    duration: NormalizedDuration,
    dest_epoch_ns: int,
    anchor: ISODateTime,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
) -> NudgeResult:
    """
    Rounding of the smallest calendar unit by bracketing the destination.

    r1 is the truncated unit count, r2 = r1 + increment * sign. Both are added
    to the anchor; the destination's position between the two instants is the
    exact fractional part that the rounding mode decides on.

    Raises:
        TemporalRangeError: a bracket date leaves the representable range
    """
    if unit is Unit.YEAR:
        r1 = round_number_to_increment(duration.years, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_parts = (r1, 0, 0, 0)
        end_parts = (r2, 0, 0, 0)
    elif unit is Unit.MONTH:
        r1 = round_number_to_increment(duration.months, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_parts = (duration.years, r1, 0, 0)
        end_parts = (duration.years, r2, 0, 0)
    elif unit is Unit.WEEK:
        anchor_date = anchor.date
        weeks_start = balance_iso_date(
            anchor_date.year + duration.years, anchor_date.month + duration.months, anchor_date.day
        )
        weeks_end = balance_iso_date(
            anchor_date.year + duration.years,
            anchor_date.month + duration.months,
            anchor_date.day + duration.days,
        )
        until = difference_iso_date(*weeks_start.as_tuple(), *weeks_end.as_tuple(), Unit.WEEK)
        r1 = round_number_to_increment(duration.weeks + until.weeks, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_parts = (duration.years, duration.months, r1, 0)
        end_parts = (duration.years, duration.months, r2, 0)
    else:
        r1 = round_number_to_increment(duration.days, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_parts = (duration.years, duration.months, duration.weeks, r1)
        end_parts = (duration.years, duration.months, duration.weeks, r2)

    start_date = _add_date_duration(anchor.date, *start_parts)
    end_date = _add_date_duration(anchor.date, *end_parts)
    start_epoch_ns = get_utc_epoch_nanoseconds(ISODateTime(date=start_date, time=anchor.time))
    end_epoch_ns = get_utc_epoch_nanoseconds(ISODateTime(date=end_date, time=anchor.time))

    progress = normalized_from_epoch_difference(start_epoch_ns, dest_epoch_ns)
    span = normalized_from_epoch_difference(start_epoch_ns, end_epoch_ns)
    total = r1 + divide_normalized_time_duration(progress, span) * increment * sign

    unsigned_mode = get_unsigned_rounding_mode(mode, sign < 0)
    rounded_unit = apply_unsigned_rounding_mode(abs(total), abs(r1), abs(r2), unsigned_mode)

    did_expand = rounded_unit == abs(r2)
    parts = end_parts if did_expand else start_parts
    logger.debug(
        "calendar_unit_nudged",
        unit=unit.value,
        r1=r1,
        r2=r2,
        total=str(total),
        expanded=did_expand,
    )
    return NudgeResult(
        duration=NormalizedDuration(*parts, norm=0),
        total=total,
        nudged_epoch_ns=end_epoch_ns if did_expand else start_epoch_ns,
        did_expand_calendar_unit=did_expand,
    )


def nudge_to_day_or_time(
    duration: NormalizedDuration,
    dest_epoch_ns: int,
    largest_unit: Unit,
    increment: int,
    unit: Unit,
    mode: RoundingMode,
) -> NudgeResult:
    """
    Rounding of days + time as one exact magnitude (days are 24h here).

    Whole days are split back out when the largest unit is day or larger;
    did_expand_calendar_unit reports that rounding added a whole day in the
    duration's direction.
    """
    norm = add_24_hour_days(duration.norm, duration.days)
    unit_length = UNIT_NANOSECONDS[unit]
    total = divide_normalized_time_duration(norm, unit_length)
    rounded_norm = round_normalized_time_duration(norm, unit_length * increment, mode)
    diff_norm = rounded_norm - norm

    whole_days = _truncated_days(norm)
    rounded_whole_days = _truncated_days(rounded_norm)
    day_delta = rounded_whole_days - whole_days
    did_expand_days = normalized_sign(day_delta) == normalized_sign(norm)

    days = 0
    remainder = rounded_norm
    if larger_of_two_units(largest_unit, Unit.DAY) is largest_unit:
        days = rounded_whole_days
        remainder = rounded_norm - rounded_whole_days * NS_PER_DAY

    return NudgeResult(
        duration=NormalizedDuration(duration.years, duration.months, duration.weeks, days, remainder),
        total=total,
        nudged_epoch_ns=dest_epoch_ns + diff_norm,
        did_expand_calendar_unit=did_expand_days,
    )


def _truncated_days(norm: NormalizedTimeDuration) -> int:
    days = abs(norm) // NS_PER_DAY
    return -days if norm < 0 else days


# =============================================================================
# BUBBLING
# =============================================================================


def bubble_relative_duration(
    sign: int,
    duration: NormalizedDuration,
    nudged_epoch_ns: int,
    anchor: ISODateTime,
    largest_unit: Unit,
    smallest_unit: Unit,
) -> NormalizedDuration:
    """
    Carry of a grown smallest unit into larger units, one unit at a time.

    For each unit above `smallest_unit` (up to `largest_unit`; weeks only
    when weeks are the largest unit) the unit is incremented by `sign` with
    everything below it zeroed; the carry is kept while the rounded instant
    has reached or passed the carried date.
    """
    if smallest_unit is largest_unit:
        return duration

    for unit in reversed(_BUBBLE_UNITS[largest_unit.rank:smallest_unit.rank]):
        if unit is Unit.WEEK and largest_unit is not Unit.WEEK:
            continue
        if unit is Unit.YEAR:
            end = NormalizedDuration(duration.years + sign, 0, 0, 0, 0)
        elif unit is Unit.MONTH:
            end = NormalizedDuration(duration.years, duration.months + sign, 0, 0, 0)
        else:
            end = NormalizedDuration(duration.years, duration.months, duration.weeks + sign, 0, 0)

        end_date = _add_date_duration(anchor.date, end.years, end.months, end.weeks, end.days)
        end_epoch_ns = get_utc_epoch_nanoseconds(ISODateTime(date=end_date, time=anchor.time))
        beyond_end_sign = normalized_sign(nudged_epoch_ns - end_epoch_ns)
        if beyond_end_sign == -sign:
            break
        logger.debug("calendar_unit_bubbled", unit=unit.value)
        duration = end
    return duration


def round_relative_duration(
    duration: NormalizedDuration,
    dest_epoch_ns: int,
    anchor: ISODateTime,
    largest_unit: Unit,
    increment: int,
    smallest_unit: Unit,
    mode: RoundingMode,
) -> Duration:
    """Nudge, bubble, then balance the time part below the date part."""
    sign = -1 if duration.sign < 0 else 1

    if smallest_unit.is_calendar_unit:
        nudge = nudge_to_calendar_unit(
            sign, duration, dest_epoch_ns, anchor, increment, smallest_unit, mode
        )
    else:
        nudge = nudge_to_day_or_time(
            duration, dest_epoch_ns, largest_unit, increment, smallest_unit, mode
        )

    rounded = nudge.duration
    if nudge.did_expand_calendar_unit and smallest_unit is not Unit.WEEK:
        start_unit = larger_of_two_units(smallest_unit, Unit.DAY)
        rounded = bubble_relative_duration(
            sign, rounded, nudge.nudged_epoch_ns, anchor, largest_unit, start_unit
        )

    time_largest = Unit.HOUR if largest_unit.is_date_unit else largest_unit
    return _assemble(rounded, time_largest)


def _assemble(duration: NormalizedDuration, time_largest_unit: Unit) -> Duration:
    balanced = balance_time_duration(duration.norm, time_largest_unit)
    return Duration.create(
        years=duration.years,
        months=duration.months,
        weeks=duration.weeks,
        days=duration.days + balanced.days,
        hours=balanced.hours,
        minutes=balanced.minutes,
        seconds=balanced.seconds,
        milliseconds=balanced.milliseconds,
        microseconds=balanced.microseconds,
        nanoseconds=balanced.nanoseconds,
    )


# =============================================================================
# PUBLIC API
# =============================================================================


def _resolve_units(
    duration: Duration, smallest_unit: Unit | None, largest_unit: Unit | None
) -> tuple[Unit, Unit]:
    if smallest_unit is None and largest_unit is None:
        raise TemporalRangeError("At least one of smallest_unit or largest_unit is required")
    smallest = Unit.NANOSECOND if smallest_unit is None else smallest_unit
    if smallest is Unit.AUTO:
        raise TemporalRangeError("smallest_unit cannot be auto")

    default_largest = larger_of_two_units(duration.default_largest_unit(), smallest)
    largest = default_largest if largest_unit in (None, Unit.AUTO) else largest_unit
    if smallest.is_larger_than(largest):
        raise TemporalRangeError(
            f"largest_unit {largest.value} is smaller than smallest_unit {smallest.value}"
        )
    return smallest, largest


def _rounding_spec(
    increment: int | float, smallest: Unit, largest: Unit, mode: RoundingMode
) -> RoundingSpec:
    spec = resolve_rounding_spec(smallest, increment, mode)
    if spec.increment > 1 and largest is not smallest and smallest.is_date_unit:
        raise TemporalRangeError(
            f"Rounding increment {spec.increment} requires largest_unit == smallest_unit for {smallest.value}"
        )
    return spec


def round_duration(
    duration: Duration,
    increment: int | float = 1,
    smallest_unit: Unit | None = None,
    mode: RoundingMode | None = None,
    relative_to: ISODate | ISODateTime | None = None,
    largest_unit: Unit | None = None,
) -> Duration:
    """
    Rounding of a duration to a multiple of `increment` `smallest_unit`s.

    Args:
        duration: Duration to round
        increment: Rounding increment (1..10^9; for time units it must divide
            the next larger unit)
        smallest_unit: Smallest unit kept (default nanosecond)
        mode: Rounding mode (default from settings)
        relative_to: Anchor date / date-time; required whenever years, months
            or weeks are involved
        largest_unit: Coarsest unit of the result (default: the larger of the
            duration's largest non-zero unit and smallest_unit)

    Returns:
        Rounded Duration

    Raises:
        TemporalRangeError: invalid unit combination or increment, calendar
            units without relative_to, or result outside the representable range

    Examples:
        >>> round_duration(Duration(hours=1, minutes=29, seconds=30), smallest_unit=Unit.HOUR)
        Duration(years=0, months=0, weeks=0, days=0, hours=1, minutes=0, seconds=0, milliseconds=0, microseconds=0, nanoseconds=0)
        >>> round_duration(Duration(days=40), smallest_unit=Unit.MONTH,
        ...                relative_to=ISODate(year=2021, month=1, day=1)).months
        1
    """
    smallest, largest = _resolve_units(duration, smallest_unit, largest_unit)
    if mode is None:
        mode = get_settings().default_rounding_mode
    spec = _rounding_spec(increment, smallest, largest, mode)

    if relative_to is None:
        if duration.has_calendar_units or largest.is_calendar_unit or smallest.is_calendar_unit:
            raise TemporalRangeError("relative_to is required to round calendar units")
        norm = add_24_hour_days(normalize_duration_time_part(duration), duration.days)
        if spec.unit is Unit.DAY:
            days = round_number_to_increment(
                divide_normalized_time_duration(norm, NS_PER_DAY), spec.increment, spec.mode
            )
            norm = add_24_hour_days(0, days)
        else:
            norm = round_normalized_time_duration(
                norm, UNIT_NANOSECONDS[spec.unit] * spec.increment, spec.mode
            )
        return _assemble(NormalizedDuration(0, 0, 0, 0, norm), largest)

    anchor = _as_date_time(relative_to)
    destination = _destination(anchor, duration)
    dest_epoch_ns = get_utc_epoch_nanoseconds(destination)
    date_diff, norm = difference_iso_date_time(anchor, destination, largest)
    difference = NormalizedDuration.from_parts(date_diff, norm)

    if spec.unit is Unit.NANOSECOND and spec.increment == 1:
        return _assemble(difference, Unit.HOUR if largest.is_date_unit else largest)

    logger.debug(
        "relative_rounding",
        smallest_unit=spec.unit.value,
        largest_unit=largest.value,
        increment=spec.increment,
        mode=spec.mode.value,
    )
    return round_relative_duration(
        difference, dest_epoch_ns, anchor, largest, spec.increment, spec.unit, spec.mode
    )


def total_duration(
    duration: Duration,
    unit: Unit,
    relative_to: ISODate | ISODateTime | None = None,
) -> Fraction:
    """
    Exact total of a duration expressed in `unit`.

    Calendar units are measured by the same bracketing as rounding, so the
    fractional part of "1 month 15 days" in months depends on the anchor month.

    Raises:
        TemporalRangeError: unit is auto, or calendar units without relative_to

    Examples:
        >>> total_duration(Duration(hours=36), Unit.DAY)
        Fraction(3, 2)
    """
    if unit is Unit.AUTO:
        raise TemporalRangeError("unit cannot be auto")

    if relative_to is None:
        if duration.has_calendar_units or unit.is_calendar_unit:
            raise TemporalRangeError("relative_to is required to total calendar units")
        norm = add_24_hour_days(normalize_duration_time_part(duration), duration.days)
        return divide_normalized_time_duration(norm, UNIT_NANOSECONDS[unit])

    anchor = _as_date_time(relative_to)
    destination = _destination(anchor, duration)
    dest_epoch_ns = get_utc_epoch_nanoseconds(destination)
    date_diff, norm = difference_iso_date_time(anchor, destination, unit)
    difference = NormalizedDuration.from_parts(date_diff, norm)

    if unit.is_calendar_unit:
        sign = -1 if difference.sign < 0 else 1
        nudge = nudge_to_calendar_unit(
            sign, difference, dest_epoch_ns, anchor, 1, unit, RoundingMode.TRUNC
        )
        return nudge.total

    norm = add_24_hour_days(difference.norm, difference.days)
    return divide_normalized_time_duration(norm, UNIT_NANOSECONDS[unit])
