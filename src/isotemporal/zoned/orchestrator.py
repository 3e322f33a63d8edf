"""
Zoned Add - Duration arithmetic on an instant in a time zone

Adding a duration to a zoned date-time splits it in two:
- calendar units (years, months, weeks, days) move the LOCAL date, so
  "+1 day" keeps the wall-clock time across a DST change and "+1 month" means
  the same day of the next month
- time units (the normalized nanosecond part) move the INSTANT, so "+24h"
  is always exactly 24 hours of elapsed time

Protocol (one linear pass, no state):
    1. no calendar units         → add_instant(epoch_ns, norm)
    2. local date-time of the instant (or the precalculated one)
    3. days only                 → add_days_to_zoned_date_time, then add_instant
    4. years / months / weeks    → calendar date_add on the date part, same
                                   wall-clock time, get_instant_for, add_instant

CRITICAL INVARIANTS:
1. Passing `precalculated` (the instant's local date-time) never changes the result
2. Time units are never resolved against local time
3. The result lies in the instant range, else TemporalRangeError
"""

from dataclasses import dataclass

import structlog

from isotemporal.calendar.iso8601 import ISO8601, ISO8601Calendar
from isotemporal.core.config import get_settings
from isotemporal.core.domain.enums import Disambiguation, Overflow
from isotemporal.core.domain.records import Duration, ISODateTime, NormalizedTimeDuration
from isotemporal.core.errors import InvalidArgumentError
from isotemporal.core.math.calendar_math import add_iso_date
from isotemporal.core.math.duration_normalizer import add_instant, normalize_duration_time_part
from isotemporal.zoned.timezone import TimeZoneOffsetOracle, get_instant_for, get_plain_date_time_for

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AddDaysResult:
    """Instant and local date-time reached by adding whole days."""

    epoch_ns: int
    date_time: ISODateTime


def add_days_to_zoned_date_time(
    epoch_ns: int,
    date_time: ISODateTime,
    time_zone: TimeZoneOffsetOracle,
    days: int,
    overflow: Overflow = Overflow.CONSTRAIN,
    disambiguation: Disambiguation = Disambiguation.COMPATIBLE,
) -> AddDaysResult:
    """
    Addition of whole calendar days to a zoned date-time.

    The local date moves by `days`; the wall-clock time is kept and resolved
    back to an instant with `disambiguation`.

    Args:
        epoch_ns: Start instant
        date_time: Local date-time of epoch_ns in time_zone
        time_zone: Offset oracle
        days: Whole days to add
        overflow: Passed to the date addition
        disambiguation: Resolution of a skipped / repeated result

    Returns:
        AddDaysResult
    """
    if days == 0:
        return AddDaysResult(epoch_ns=epoch_ns, date_time=date_time)

    date = date_time.date
    added = add_iso_date(date.year, date.month, date.day, 0, 0, 0, days, overflow)
    local = ISODateTime(date=added, time=date_time.time)
    return AddDaysResult(epoch_ns=get_instant_for(time_zone, local, disambiguation), date_time=local)


def add_zoned_date_time(
    epoch_ns: int,
    time_zone: TimeZoneOffsetOracle,
    years: int = 0,
    months: int = 0,
    weeks: int = 0,
    days: int = 0,
    norm: NormalizedTimeDuration = 0,
    precalculated: ISODateTime | None = None,
    overflow: Overflow | None = None,
    disambiguation: Disambiguation | None = None,
    calendar: ISO8601Calendar = ISO8601,
) -> int:
    """
    Epoch nanoseconds of (instant in time_zone) + duration.

    Args:
        epoch_ns: Start instant
        time_zone: Offset oracle
        years, months, weeks, days: Calendar part of the duration
        norm: Normalized time part of the duration (ns)
        precalculated: Local date-time of epoch_ns, if already known
        overflow: Day resolution of the calendar addition (default from settings)
        disambiguation: Resolution of skipped / repeated local results
            (default from settings)
        calendar: Calendar performing the date addition

    Returns:
        Resulting epoch nanoseconds

    Raises:
        TemporalRangeError: result outside the representable range, overflow
            REJECT on an invalid day, or disambiguation REJECT on a skipped /
            repeated local time

    Examples:
        >>> from isotemporal.zoned.timezone import UTC
        >>> add_zoned_date_time(0, UTC, days=1, norm=1)
        86400000000001
    """
    if years == 0 and months == 0 and weeks == 0 and days == 0:
        logger.debug("zoned_add_path", path="instant")
        return add_instant(epoch_ns, norm)

    settings = get_settings()
    if overflow is None:
        overflow = settings.default_overflow
    if disambiguation is None:
        disambiguation = settings.default_disambiguation

    date_time = precalculated if precalculated is not None else get_plain_date_time_for(time_zone, epoch_ns)

    if years == 0 and months == 0 and weeks == 0:
        logger.debug("zoned_add_path", path="days", days=days)
        intermediate = add_days_to_zoned_date_time(
            epoch_ns, date_time, time_zone, days, overflow, disambiguation
        )
        return add_instant(intermediate.epoch_ns, norm)

    logger.debug("zoned_add_path", path="calendar", years=years, months=months, weeks=weeks, days=days)
    added = calendar.date_add(
        date_time.date,
        Duration.create(years=years, months=months, weeks=weeks, days=days),
        overflow,
    )
    local = ISODateTime(date=added, time=date_time.time)
    intermediate_ns = get_instant_for(time_zone, local, disambiguation)
    return add_instant(intermediate_ns, norm)


def add_duration_to_zoned_date_time(
    epoch_ns: int,
    time_zone: TimeZoneOffsetOracle,
    duration: Duration,
    overflow: Overflow | None = None,
    disambiguation: Disambiguation | None = None,
) -> int:
    """add_zoned_date_time() for a whole Duration (its time part normalized first)."""
    if not isinstance(duration, Duration):
        raise InvalidArgumentError(f"Expected Duration, got {type(duration).__name__}")
    return add_zoned_date_time(
        epoch_ns,
        time_zone,
        duration.years,
        duration.months,
        duration.weeks,
        duration.days,
        normalize_duration_time_part(duration),
        overflow=overflow,
        disambiguation=disambiguation,
    )
