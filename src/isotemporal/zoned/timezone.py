"""
Time Zones - Instant ↔ local date-time resolution

The engine does not own a time-zone database. It consumes any object that
answers two queries (TimeZoneOffsetOracle):

    offset_for_instant(epoch_ns)        -> UTC offset in ns at that instant
    possible_offsets_for(date_time)     -> offsets under which the local
                                           date-time occurs (0, 1 or 2 of them)

From these it derives the local date-time of an instant and the instant of a
local date-time, resolving repeated (2 candidates) and skipped (0 candidates)
local times with a Disambiguation strategy.

DISAMBIGUATION:
    candidates  compatible   earlier      later        reject
    1           the one      the one      the one      the one
    2 (overlap) first        first        last         RangeError
    0 (gap)     shift +gap   shift -gap   shift +gap   RangeError
                take last    take first   take last
"""

from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable

import structlog

from isotemporal.core.domain.enums import Disambiguation
from isotemporal.core.domain.records import ISODateTime
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError
from isotemporal.core.math.calendar_math import (
    NS_PER_DAY,
    balance_iso_date_time,
    epoch_days_to_iso_date,
    get_utc_epoch_nanoseconds,
    iso_date_time_within_limits,
)
from isotemporal.core.math.duration_normalizer import is_valid_epoch_nanoseconds
from isotemporal.core.math.time_math import nanoseconds_to_time

logger = structlog.get_logger(__name__)


# =============================================================================
# ORACLE PROTOCOL
# =============================================================================


@runtime_checkable
class TimeZoneOffsetOracle(Protocol):
    """Synchronous, side-effect-free offset queries of a time zone."""

    def offset_for_instant(self, epoch_ns: int) -> int:
        ...

    def possible_offsets_for(self, date_time: ISODateTime) -> list[int]:
        ...


@dataclass(frozen=True)
class FixedOffsetTimeZone:
    """
    Time zone with one constant UTC offset (no transitions).

    Raises:
        TemporalRangeError: |offset_ns| >= 24h
    """

    offset_ns: int = 0

    def __post_init__(self):
        if abs(self.offset_ns) >= NS_PER_DAY:
            raise TemporalRangeError(f"UTC offset must be less than 24h, got {self.offset_ns} ns")

    def offset_for_instant(self, epoch_ns: int) -> int:
        return self.offset_ns

    def possible_offsets_for(self, date_time: ISODateTime) -> list[int]:
        return [self.offset_ns]


UTC: Final[FixedOffsetTimeZone] = FixedOffsetTimeZone(0)


def _valid_offset(offset: Any) -> int:
    if not isinstance(offset, int) or isinstance(offset, bool):
        raise InvalidArgumentError(f"Time zone offset must be an int, got {type(offset).__name__}")
    if abs(offset) >= NS_PER_DAY:
        raise TemporalRangeError(f"Time zone offset out of range: {offset} ns")
    return offset


def _checked_offset(time_zone: TimeZoneOffsetOracle, epoch_ns: int) -> int:
    return _valid_offset(time_zone.offset_for_instant(epoch_ns))


# =============================================================================
# INSTANT → LOCAL
# =============================================================================


def get_plain_date_time_for(time_zone: TimeZoneOffsetOracle, epoch_ns: int) -> ISODateTime:
    """
    Local wall-clock date-time of an instant.

    Examples:
        >>> get_plain_date_time_for(FixedOffsetTimeZone(3_600_000_000_000), 0)
        ISODateTime(date=ISODate(year=1970, month=1, day=1), time=ISOTime(hour=1, minute=0, second=0, millisecond=0, microsecond=0, nanosecond=0))
    """
    if not is_valid_epoch_nanoseconds(epoch_ns):
        raise TemporalRangeError(f"Instant {epoch_ns} ns is outside the representable range")
    local_ns = epoch_ns + _checked_offset(time_zone, epoch_ns)
    days, remainder = divmod(local_ns, NS_PER_DAY)
    return ISODateTime(date=epoch_days_to_iso_date(days), time=nanoseconds_to_time(remainder).time)


# =============================================================================
# LOCAL → INSTANT
# =============================================================================


def get_possible_instants_for(time_zone: TimeZoneOffsetOracle, date_time: ISODateTime) -> list[int]:
    """
    All instants at which the local date-time occurs, ascending.

    Raises:
        InvalidArgumentError: the oracle returned a non-int offset
        TemporalRangeError: an offset of 24h or more, or a candidate instant
            outside the instant range
    """
    if not iso_date_time_within_limits(date_time):
        raise TemporalRangeError("Date-time is outside the representable range")
    local_ns = get_utc_epoch_nanoseconds(date_time)
    offsets = [_valid_offset(offset) for offset in time_zone.possible_offsets_for(date_time)]
    instants = sorted(local_ns - offset for offset in offsets)
    for epoch_ns in instants:
        if not is_valid_epoch_nanoseconds(epoch_ns):
            raise TemporalRangeError(f"Instant {epoch_ns} ns is outside the representable range")
    return instants


def disambiguate_possible_instants(
    possible_instants: list[int],
    time_zone: TimeZoneOffsetOracle,
    date_time: ISODateTime,
    disambiguation: Disambiguation,
) -> int:
    """
    Choice of one instant for a local date-time.

    For a skipped local time the size of the gap is the offset change between
    one day before and one day after; the local time is moved by that amount
    (backwards for EARLIER, forwards otherwise) and resolved again.

    Raises:
        TemporalRangeError: REJECT with zero or several candidates, or the
            surrounding instants leave the representable range
    """
    if len(possible_instants) == 1:
        return possible_instants[0]

    if possible_instants:
        logger.debug("repeated_local_time", candidates=len(possible_instants), disambiguation=disambiguation.value)
        if disambiguation in (Disambiguation.EARLIER, Disambiguation.COMPATIBLE):
            return possible_instants[0]
        if disambiguation is Disambiguation.LATER:
            return possible_instants[-1]
        raise TemporalRangeError("Ambiguous local date-time (repeated by an offset transition)")

    if disambiguation is Disambiguation.REJECT:
        raise TemporalRangeError("Local date-time does not exist (skipped by an offset transition)")

    epoch_ns = get_utc_epoch_nanoseconds(date_time)
    day_before = epoch_ns - NS_PER_DAY
    day_after = epoch_ns + NS_PER_DAY
    if not is_valid_epoch_nanoseconds(day_before) or not is_valid_epoch_nanoseconds(day_after):
        raise TemporalRangeError("Date-time is outside the representable range")
    gap_ns = _checked_offset(time_zone, day_after) - _checked_offset(time_zone, day_before)
    logger.debug("skipped_local_time", gap_ns=gap_ns, disambiguation=disambiguation.value)

    shift = -gap_ns if disambiguation is Disambiguation.EARLIER else gap_ns
    date, time = date_time.date, date_time.time
    shifted = balance_iso_date_time(
        date.year,
        date.month,
        date.day,
        time.hour,
        time.minute,
        time.second,
        time.millisecond,
        time.microsecond,
        time.nanosecond + shift,
    )
    candidates = get_possible_instants_for(time_zone, shifted)
    if not candidates:
        raise TemporalRangeError("Local date-time could not be resolved across an offset transition")
    if disambiguation is Disambiguation.EARLIER:
        return candidates[0]
    return candidates[-1]


def get_instant_for(
    time_zone: TimeZoneOffsetOracle,
    date_time: ISODateTime,
    disambiguation: Disambiguation,
) -> int:
    """Epoch nanoseconds of a local date-time, disambiguated."""
    possible = get_possible_instants_for(time_zone, date_time)
    return disambiguate_possible_instants(possible, time_zone, date_time, disambiguation)
