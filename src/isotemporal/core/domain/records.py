"""
Records - Immutable ISO value records

Immutable Pydantic models for the values the engine computes over:
- ISODate / ISOTime / ISODateTime
- ISOYearMonth (reference day) / ISOMonthDay (reference year)
- Duration (years..nanoseconds, one sign)
- RoundingSpec (unit, increment, mode)

Plus frozen dataclass result records produced by balancing and time
arithmetic (TimeDurationRecord, DateDurationRecord, BalancedTime).

Model constraints are structural guards only. Public factories
(create_iso_date, create_time, Duration.create) validate first and raise
TemporalRangeError / InvalidArgumentError, never pydantic.ValidationError.

CRITICAL INVARIANTS:
1. All non-zero Duration components share one sign
2. Duration components are integers (integral floats are accepted and converted)
3. Records are never mutated; every operation returns a new record
"""

import math
from dataclasses import dataclass
from typing import Any, Final, TypeAlias

from pydantic import BaseModel, Field, model_validator

from isotemporal.core.domain.enums import UNIT_NANOSECONDS, RoundingMode, Unit
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError


# =============================================================================
# STRUCTURAL LIMITS
# =============================================================================

# Year range of the representable instant range (±10^8 days around the epoch,
# widened by one day on each side for local date-times)
MIN_ISO_YEAR: Final[int] = -271821
MAX_ISO_YEAR: Final[int] = 275760

# Reference year used by ISOMonthDay (a leap year, so 02-29 is representable)
MONTH_DAY_REFERENCE_YEAR: Final[int] = 1972

# Calendar units of a duration must stay below 2^32
MAX_CALENDAR_UNIT_VALUE: Final[int] = 2**32

# Days + time of a duration, expressed in seconds, must stay below 2^53
MAX_DURATION_SECONDS: Final[int] = 2**53

# Signed nanosecond magnitude of a pure time-length duration (arbitrary precision)
NormalizedTimeDuration: TypeAlias = int


# =============================================================================
# FIELD CONVERSION
# =============================================================================


def to_integer_if_integral(value: Any, name: str) -> int:
    """
    Conversion of a numeric field value to int, rejecting fractions.

    Args:
        value: int or float field value
        name: Field name (for the error message)

    Returns:
        value as int

    Raises:
        InvalidArgumentError: value is not a number (bool counts as not a number)
        TemporalRangeError: value is NaN/Inf or has a fractional part

    Examples:
        >>> to_integer_if_integral(3.0, "days")
        3
        >>> to_integer_if_integral(1.5, "days")  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        TemporalRangeError: days must be an integer, got 1.5
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number, got {type(value).__name__}")
    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        raise TemporalRangeError(f"{name} must be finite, got {value}")
    if not value.is_integer():
        raise TemporalRangeError(f"{name} must be an integer, got {value}")
    return int(value)


def to_integer_with_truncation(value: Any, name: str) -> int:
    """Like to_integer_if_integral(), but fractions are truncated toward zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise TemporalRangeError(f"{name} must be finite, got {value}")
    return int(value)


# =============================================================================
# DATE / TIME RECORDS
# =============================================================================


class ISODate(BaseModel):
    """
    Proleptic Gregorian calendar date.

    Use calendar_math.create_iso_date() to build a date from
    untrusted fields; it checks day against the month length.
    """

    year: int = Field(..., ge=MIN_ISO_YEAR, le=MAX_ISO_YEAR, description="ISO year")
    month: int = Field(..., ge=1, le=12, description="Month 1..12")
    day: int = Field(..., ge=1, le=31, description="Day 1..31")

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)


class ISOTime(BaseModel):
    """Wall-clock time of day at nanosecond resolution."""

    hour: int = Field(0, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    second: int = Field(0, ge=0, le=59)
    millisecond: int = Field(0, ge=0, le=999)
    microsecond: int = Field(0, ge=0, le=999)
    nanosecond: int = Field(0, ge=0, le=999)

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple[int, int, int, int, int, int]:
        return (
            self.hour,
            self.minute,
            self.second,
            self.millisecond,
            self.microsecond,
            self.nanosecond,
        )


MIDNIGHT: Final[ISOTime] = ISOTime()


class ISODateTime(BaseModel):
    """Local (wall-clock) date-time without an offset."""

    date: ISODate
    time: ISOTime = MIDNIGHT

    model_config = {"frozen": True}


class ISOYearMonth(BaseModel):
    """Year and month; reference_day pins the record to a concrete ISO date."""

    year: int = Field(..., ge=MIN_ISO_YEAR, le=MAX_ISO_YEAR)
    month: int = Field(..., ge=1, le=12)
    reference_day: int = Field(1, ge=1, le=31)

    model_config = {"frozen": True}


class ISOMonthDay(BaseModel):
    """Month and day; reference_year pins the record to a concrete ISO date."""

    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    reference_year: int = Field(MONTH_DAY_REFERENCE_YEAR)

    model_config = {"frozen": True}


# =============================================================================
# DURATION
# =============================================================================

DURATION_FIELDS: Final[tuple[str, ...]] = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "microseconds",
    "nanoseconds",
)

_FIELD_UNITS: Final[tuple[Unit, ...]] = (
    Unit.YEAR,
    Unit.MONTH,
    Unit.WEEK,
    Unit.DAY,
    Unit.HOUR,
    Unit.MINUTE,
    Unit.SECOND,
    Unit.MILLISECOND,
    Unit.MICROSECOND,
    Unit.NANOSECOND,
)


def duration_sign(*values: int) -> int:
    """Sign of the first non-zero component (0 if all are zero)."""
    for v in values:
        if v < 0:
            return -1
        if v > 0:
            return 1
    return 0


def is_valid_duration(*values: int) -> bool:
    """
    Validity check for ten duration components (years..nanoseconds).

    - all non-zero components share one sign
    - |years|, |months|, |weeks| < 2^32
    - |days + time| expressed in seconds < 2^53
    """
    if len(values) != len(DURATION_FIELDS):
        raise ValueError(f"expected {len(DURATION_FIELDS)} components, got {len(values)}")
    sign = duration_sign(*values)
    for v in values:
        if (v < 0 and sign > 0) or (v > 0 and sign < 0):
            return False
    years, months, weeks = values[:3]
    if max(abs(years), abs(months), abs(weeks)) >= MAX_CALENDAR_UNIT_VALUE:
        return False
    total_ns = sum(v * UNIT_NANOSECONDS[u] for v, u in zip(values[3:], _FIELD_UNITS[3:]))
    return abs(total_ns) < MAX_DURATION_SECONDS * UNIT_NANOSECONDS[Unit.SECOND]


class Duration(BaseModel):
    """
    Duration with calendar part (years, months, weeks, days) and time part.

    Calendar units are resolved against an anchor date; time units are exact.
    Days are the bridge: a day is 24h only where no anchor/time zone says
    otherwise.
    """

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    microseconds: int = 0
    nanoseconds: int = 0

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_components(self) -> "Duration":
        if not is_valid_duration(*self.as_tuple()):
            raise ValueError("duration components must share one sign and stay in range")
        return self

    @classmethod
    def create(cls, **fields: Any) -> "Duration":
        """
        Validated factory.

        Raises:
            InvalidArgumentError: unknown field, non-numeric value, mixed signs
            TemporalRangeError: fractional or non-finite value, magnitude out of range
        """
        unknown = set(fields) - set(DURATION_FIELDS)
        if unknown:
            raise InvalidArgumentError(f"Unknown duration field(s): {', '.join(sorted(unknown))}")
        values = [to_integer_if_integral(fields.get(name, 0), name) for name in DURATION_FIELDS]
        sign = duration_sign(*values)
        if any((v < 0 < sign) or (v > 0 > sign) for v in values):
            raise InvalidArgumentError("Mixed-sign duration components")
        if not is_valid_duration(*values):
            raise TemporalRangeError("Duration out of representable range")
        return cls(**dict(zip(DURATION_FIELDS, values)))

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in DURATION_FIELDS)

    @property
    def sign(self) -> int:
        return duration_sign(*self.as_tuple())

    @property
    def is_blank(self) -> bool:
        return self.sign == 0

    @property
    def has_calendar_units(self) -> bool:
        return bool(self.years or self.months or self.weeks)

    def negated(self) -> "Duration":
        return Duration(**{name: -getattr(self, name) for name in DURATION_FIELDS})

    def date_part(self) -> "DateDurationRecord":
        return DateDurationRecord(self.years, self.months, self.weeks, self.days)

    def default_largest_unit(self) -> Unit:
        """Largest unit with a non-zero component (nanosecond for a blank duration)."""
        for name, unit in zip(DURATION_FIELDS, _FIELD_UNITS):
            if getattr(self, name) != 0:
                return unit
        return Unit.NANOSECOND


# =============================================================================
# ROUNDING SPEC
# =============================================================================


class RoundingSpec(BaseModel):
    """Rounding target: multiple of `increment` units, ties per `mode`."""

    unit: Unit = Field(..., description="Smallest unit kept after rounding")
    increment: int = Field(1, ge=1, le=1_000_000_000)
    mode: RoundingMode = Field(RoundingMode.HALF_EXPAND)

    model_config = {"frozen": True}


# =============================================================================
# RESULT RECORDS
# =============================================================================


@dataclass(frozen=True)
class TimeDurationRecord:
    """Balanced time duration (days as 24h + time fields), single sign."""

    days: int
    hours: int
    minutes: int
    seconds: int
    milliseconds: int
    microseconds: int
    nanoseconds: int


@dataclass(frozen=True)
class DateDurationRecord:
    """Calendar part of a duration."""

    years: int
    months: int
    weeks: int
    days: int


@dataclass(frozen=True)
class BalancedTime:
    """
    Wrapped time of day plus the signed number of whole days carried.

    Produced by time addition/rounding: 23:00 + 2h → BalancedTime(days=1, time=01:00).
    """

    days: int
    time: ISOTime

