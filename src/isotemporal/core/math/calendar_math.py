"""
ISO Calendar Math - Proleptic Gregorian date algebra

Pure date arithmetic over (year, month, day) triples:
- Leap years, days in month / year
- Validation and regulation of dates under an Overflow policy
- Epoch-day conversion (exact integer, no floating accumulation)
- Adding a calendar duration to a date, and the difference of two dates
- ISO-8601 week numbering and day-of-week / day-of-year

CRITICAL INVARIANTS:
1. Epoch-day arithmetic is exact integer arithmetic over the whole range
2. add_iso_date / difference_iso_date never wrap silently: a result outside
   the representable range raises TemporalRangeError
3. For integral durations, add_iso_date(start, difference_iso_date(start, end))
   with overflow=constrain lands on `end`

FORMULAS:
    leap(y)          = y % 4 == 0 and (y % 100 != 0 or y % 400 == 0)
    day_of_week      = (epoch_days + 3) mod 7 + 1        (1970-01-01 is a Thursday)
    week_of_year     = floor((day_of_year + 7 - day_of_week + 3) / 7)
"""

from typing import Final

from isotemporal.core.domain.enums import UNIT_NANOSECONDS, Overflow, Unit, larger_of_two_units
from isotemporal.core.domain.records import (
    MAX_ISO_YEAR,
    MIN_ISO_YEAR,
    DateDurationRecord,
    ISODate,
    ISODateTime,
    NormalizedTimeDuration,
    to_integer_if_integral,
)
from isotemporal.core.errors import TemporalRangeError
from isotemporal.core.math.duration_normalizer import (
    NS_MAX_INSTANT,
    NS_MIN_INSTANT,
    add_24_hour_days,
    normalized_sign,
)
from isotemporal.core.math.time_math import balance_time, compare_time, difference_time, time_to_nanoseconds

# =============================================================================
# CALENDAR CONSTANTS
# =============================================================================

NS_PER_DAY: Final[int] = UNIT_NANOSECONDS[Unit.DAY]

DAYS_IN_WEEK: Final[int] = 7
MONTHS_IN_YEAR: Final[int] = 12

_DAYS_IN_MONTH: Final[tuple[int, ...]] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Days from 0000-03-01 to 1970-01-01 (civil-from-days algorithm offset)
_EPOCH_SHIFT: Final[int] = 719_468
_DAYS_PER_400_YEARS: Final[int] = 146_097


# =============================================================================
# YEAR / MONTH LENGTHS
# =============================================================================


def is_leap_year(year: int) -> bool:
    """
    Gregorian leap-year test.

    Examples:
        >>> is_leap_year(2000), is_leap_year(1900), is_leap_year(2024)
        (True, False, True)
    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """
    Number of days in a month (February is 29 in leap years).

    Raises:
        TemporalRangeError: month outside 1..12
    """
    if month < 1 or month > MONTHS_IN_YEAR:
        raise TemporalRangeError(f"month must be in 1..12, got {month}")
    if month == 2 and is_leap_year(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


# =============================================================================
# VALIDATION / REGULATION
# =============================================================================


def is_valid_iso_date(year: int, month: int, day: int) -> bool:
    if month < 1 or month > MONTHS_IN_YEAR:
        return False
    return 1 <= day <= days_in_month(year, month)


def iso_date_within_limits(year: int, month: int, day: int) -> bool:
    """
    True if noon of the date lies within one day of the instant range.

    Valid dates run from -271821-04-19 to +275760-09-13.
    """
    if year < MIN_ISO_YEAR - 1 or year > MAX_ISO_YEAR + 1:
        return False
    noon_ns = iso_date_to_epoch_days(year, month, day) * NS_PER_DAY + NS_PER_DAY // 2
    return NS_MIN_INSTANT - NS_PER_DAY < noon_ns < NS_MAX_INSTANT + NS_PER_DAY


def iso_year_month_within_limits(year: int, month: int) -> bool:
    """Valid year-months run from -271821-04 to +275760-09."""
    if year < MIN_ISO_YEAR or year > MAX_ISO_YEAR:
        return False
    if year == MIN_ISO_YEAR and month < 4:
        return False
    if year == MAX_ISO_YEAR and month > 9:
        return False
    return True


def _require_within_limits(year: int, month: int, day: int) -> None:
    if not iso_date_within_limits(year, month, day):
        raise TemporalRangeError(
            f"Date {year:+07d}-{month:02d}-{day:02d} is outside the representable range"
        )


def create_iso_date(year: int, month: int, day: int) -> ISODate:
    """
    Validated ISODate factory.

    Raises:
        TemporalRangeError: impossible date or date outside the representable range
    """
    if not is_valid_iso_date(year, month, day):
        raise TemporalRangeError(f"Invalid ISO date: {year}-{month:02d}-{day:02d}")
    _require_within_limits(year, month, day)
    return ISODate(year=year, month=month, day=day)


def reject_iso_date(year: int, month: int, day: int) -> ISODate:
    """Alias of create_iso_date() for overflow=reject call sites."""
    return create_iso_date(year, month, day)


def regulate_iso_date(year: int, month: int, day: int, overflow: Overflow) -> ISODate:
    """
    Resolution of a (year, month, day) triple under an overflow policy.

    Args:
        year, month, day: Fields (month/day may be out of range)
        overflow: CONSTRAIN clamps month into 1..12 and day into the month;
            REJECT raises on any out-of-range field

    Returns:
        Valid ISODate

    Raises:
        TemporalRangeError: overflow=REJECT and the date is invalid, or the
            result lies outside the representable range

    Examples:
        >>> regulate_iso_date(2021, 2, 31, Overflow.CONSTRAIN)
        ISODate(year=2021, month=2, day=28)
    """
    if overflow is Overflow.REJECT:
        return create_iso_date(year, month, day)

    month = min(max(month, 1), MONTHS_IN_YEAR)
    day = min(max(day, 1), days_in_month(year, month))
    _require_within_limits(year, month, day)
    return ISODate(year=year, month=month, day=day)


# =============================================================================
# EPOCH DAYS
# =============================================================================


def iso_date_to_epoch_days(year: int, month: int, day: int) -> int:
    """
    Days since 1970-01-01 (exact integer).

    Month may lie outside 1..12 (carried into the year) and day may be any
    integer (counted from the first of the month).

    Examples:
        >>> iso_date_to_epoch_days(1970, 1, 1)
        0
        >>> iso_date_to_epoch_days(2000, 3, 1)
        11017
    """
    year += (month - 1) // MONTHS_IN_YEAR
    month = (month - 1) % MONTHS_IN_YEAR + 1

    # Days from civil, counted with March as the first month of the year
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = month - 3 if month > 2 else month + 9
    doy = (153 * mp + 2) // 5
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * _DAYS_PER_400_YEARS + doe - _EPOCH_SHIFT + (day - 1)


def epoch_days_to_ymd(epoch_days: int) -> tuple[int, int, int]:
    """Inverse of iso_date_to_epoch_days() as a raw (year, month, day) tuple."""
    z = epoch_days + _EPOCH_SHIFT
    era = z // _DAYS_PER_400_YEARS
    doe = z - era * _DAYS_PER_400_YEARS
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def epoch_days_to_iso_date(epoch_days: int) -> ISODate:
    """
    Raises:
        TemporalRangeError: resulting year outside the ISO year range
    """
    year, month, day = epoch_days_to_ymd(epoch_days)
    if year < MIN_ISO_YEAR or year > MAX_ISO_YEAR:
        raise TemporalRangeError(f"Epoch day {epoch_days} is outside the representable range")
    return ISODate(year=year, month=month, day=day)


# =============================================================================
# BALANCING / COMPARISON
# =============================================================================


def balance_iso_year_month(year: int, month: int) -> tuple[int, int]:
    """
    Normalization of a month number into 1..12 with carry into the year.

    Examples:
        >>> balance_iso_year_month(2020, 13)
        (2021, 1)
        >>> balance_iso_year_month(2020, 0)
        (2019, 12)
    """
    year += (month - 1) // MONTHS_IN_YEAR
    month = (month - 1) % MONTHS_IN_YEAR + 1
    return year, month


def balance_iso_date(year: int, month: int, day: int) -> ISODate:
    """Normalization of an out-of-range day through epoch days (2021-01-32 → 2021-02-01)."""
    return epoch_days_to_iso_date(iso_date_to_epoch_days(year, month, day))


def compare_iso_date(one: ISODate, two: ISODate) -> int:
    """-1 / 0 / +1 for one < two / one == two / one > two."""
    a = one.as_tuple()
    b = two.as_tuple()
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


# =============================================================================
# ADD / DIFFERENCE
# =============================================================================


def add_iso_date(
    year: int,
    month: int,
    day: int,
    years: int,
    months: int,
    weeks: int,
    days: int,
    overflow: Overflow,
) -> ISODate:
    """
    Addition of a calendar duration to a date.

    Algorithm:
        1. (year + years, month + months), month balanced into 1..12
        2. day resolved against the new month per `overflow`
        3. weeks * 7 + days added through epoch days

    Args:
        year, month, day: Start date
        years, months, weeks, days: Duration components (integral)
        overflow: Day resolution in step 2

    Returns:
        Resulting ISODate

    Raises:
        TemporalRangeError: overflow=REJECT and step 2 lands on an invalid day,
            a component is not integral, or the result is outside the range

    Examples:
        >>> add_iso_date(2021, 1, 31, 0, 1, 0, 0, Overflow.CONSTRAIN)
        ISODate(year=2021, month=2, day=28)
    """
    years = to_integer_if_integral(years, "years")
    months = to_integer_if_integral(months, "months")
    weeks = to_integer_if_integral(weeks, "weeks")
    days = to_integer_if_integral(days, "days")

    y, m = balance_iso_year_month(year + years, month + months)
    if y < MIN_ISO_YEAR - 1 or y > MAX_ISO_YEAR + 1:
        raise TemporalRangeError(f"Year {y} is outside the representable range")
    intermediate = _regulate_unchecked(y, m, day, overflow)

    epoch_days = iso_date_to_epoch_days(*intermediate) + weeks * DAYS_IN_WEEK + days
    result_ymd = epoch_days_to_ymd(epoch_days)
    _require_within_limits(*result_ymd)
    return ISODate(year=result_ymd[0], month=result_ymd[1], day=result_ymd[2])


def _regulate_unchecked(year: int, month: int, day: int, overflow: Overflow) -> tuple[int, int, int]:
    # regulation without the range check (the final result is checked instead)
    if overflow is Overflow.REJECT:
        if not is_valid_iso_date(year, month, day):
            raise TemporalRangeError(f"Invalid ISO date: {year}-{month:02d}-{day:02d}")
        return year, month, day
    return year, month, min(max(day, 1), days_in_month(year, month))


def difference_iso_date(
    y1: int,
    m1: int,
    d1: int,
    y2: int,
    m2: int,
    d2: int,
    largest_unit: Unit,
) -> DateDurationRecord:
    """
    Sign-consistent calendar difference from date 1 to date 2.

    For year/month: whole years, then whole months are taken greedily while
    the running date (add_iso_date with constrain) does not overshoot date 2;
    an overshoot steps back one unit. The remaining gap is expressed in days.

    For week/day: the epoch-day difference, split into weeks + days for week.

    Args:
        y1, m1, d1: Start date
        y2, m2, d2: End date
        largest_unit: YEAR, MONTH, WEEK or DAY

    Returns:
        DateDurationRecord (weeks is 0 for year/month)

    Raises:
        TemporalRangeError: largest_unit is not a date unit

    Examples:
        >>> difference_iso_date(2021, 1, 31, 2021, 3, 1, Unit.MONTH)
        DateDurationRecord(years=0, months=1, weeks=0, days=1)
    """
    if not largest_unit.is_date_unit:
        raise TemporalRangeError(f"largest_unit must be a date unit, got {largest_unit.value}")

    if largest_unit in (Unit.YEAR, Unit.MONTH):
        start = (y1, m1, d1)
        end = (y2, m2, d2)
        sign = -_compare_ymd(start, end)
        if sign == 0:
            return DateDurationRecord(0, 0, 0, 0)

        years = y2 - y1
        mid = add_iso_date(y1, m1, d1, years, 0, 0, 0, Overflow.CONSTRAIN).as_tuple()
        mid_sign = -_compare_ymd(mid, end)
        if mid_sign == 0:
            if largest_unit is Unit.YEAR:
                return DateDurationRecord(years, 0, 0, 0)
            return DateDurationRecord(0, years * 12, 0, 0)

        months = m2 - m1
        if mid_sign != sign:
            years -= sign
            months += sign * 12
        mid = add_iso_date(y1, m1, d1, years, months, 0, 0, Overflow.CONSTRAIN).as_tuple()
        mid_sign = -_compare_ymd(mid, end)
        if mid_sign == 0:
            if largest_unit is Unit.YEAR:
                return DateDurationRecord(years, months, 0, 0)
            return DateDurationRecord(0, months + years * 12, 0, 0)

        if mid_sign != sign:
            # overshot by one month: step back
            months -= sign
            if months == -sign:
                years -= sign
                months = 11 * sign
            mid = add_iso_date(y1, m1, d1, years, months, 0, 0, Overflow.CONSTRAIN).as_tuple()

        mid_year, mid_month, mid_day = mid
        if mid_month == m2:
            days = d2 - mid_day
        elif sign < 0:
            days = -mid_day - (days_in_month(y2, m2) - d2)
        else:
            days = d2 + (days_in_month(mid_year, mid_month) - mid_day)

        if largest_unit is Unit.MONTH:
            months += years * 12
            years = 0
        return DateDurationRecord(years, months, 0, days)

    days = iso_date_to_epoch_days(y2, m2, d2) - iso_date_to_epoch_days(y1, m1, d1)
    weeks = 0
    if largest_unit is Unit.WEEK:
        weeks = abs(days) // DAYS_IN_WEEK * (1 if days >= 0 else -1)
        days -= weeks * DAYS_IN_WEEK
    return DateDurationRecord(0, 0, weeks, days)


def _compare_ymd(a: tuple[int, int, int], b: tuple[int, int, int]) -> int:
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


# =============================================================================
# WEEK NUMBERING
# =============================================================================


def to_iso_day_of_week(year: int, month: int, day: int) -> int:
    """
    ISO day of week: 1 = Monday … 7 = Sunday.

    Examples:
        >>> to_iso_day_of_week(2024, 1, 1)
        1
    """
    return (iso_date_to_epoch_days(year, month, day) + 3) % DAYS_IN_WEEK + 1


def to_iso_day_of_year(year: int, month: int, day: int) -> int:
    """1-based ordinal day within the year."""
    return iso_date_to_epoch_days(year, month, day) - iso_date_to_epoch_days(year, 1, 1) + 1


def to_iso_week_of_year(year: int, month: int, day: int) -> tuple[int, int]:
    """
    ISO-8601 (week, week-year) of a date.

    Week 1 is the week containing the year's first Thursday, so early January
    can belong to the last week of the previous year and late December to
    week 1 of the next.

    Returns:
        (week 1..53, year the week belongs to)

    Examples:
        >>> to_iso_week_of_year(2021, 1, 1)
        (53, 2020)
        >>> to_iso_week_of_year(2019, 12, 30)
        (1, 2020)
    """
    wednesday = 3
    thursday = 4
    friday = 5
    saturday = 6

    day_of_year = to_iso_day_of_year(year, month, day)
    day_of_week = to_iso_day_of_week(year, month, day)
    week = (day_of_year + DAYS_IN_WEEK - day_of_week + wednesday) // DAYS_IN_WEEK

    if week < 1:
        day_of_jan_1st = to_iso_day_of_week(year, 1, 1)
        if day_of_jan_1st == friday:
            return 53, year - 1
        if day_of_jan_1st == saturday and is_leap_year(year - 1):
            return 53, year - 1
        return 52, year - 1

    if week == 53 and days_in_year(year) - day_of_year < thursday - day_of_week:
        return 1, year + 1

    return week, year


def week_of_iso_week_of_year(year: int, month: int, day: int) -> int:
    """ISO week number (1..53)."""
    return to_iso_week_of_year(year, month, day)[0]


def year_of_iso_week_of_year(year: int, month: int, day: int) -> int:
    """Year that owns the ISO week of the date."""
    return to_iso_week_of_year(year, month, day)[1]


# =============================================================================
# DATE-TIME
# =============================================================================


def get_utc_epoch_nanoseconds(date_time: ISODateTime) -> int:
    """Epoch nanoseconds of a date-time read as UTC wall-clock time."""
    date = date_time.date
    return iso_date_to_epoch_days(date.year, date.month, date.day) * NS_PER_DAY + time_to_nanoseconds(
        date_time.time
    )


def iso_date_time_within_limits(date_time: ISODateTime) -> bool:
    """A local date-time may lie up to one day beyond the instant range."""
    epoch_ns = get_utc_epoch_nanoseconds(date_time)
    return NS_MIN_INSTANT - NS_PER_DAY < epoch_ns < NS_MAX_INSTANT + NS_PER_DAY


def balance_iso_date_time(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
    microsecond: int,
    nanosecond: int,
) -> ISODateTime:
    """Time fields balanced first, their day carry then balanced into the date."""
    balanced = balance_time(hour, minute, second, millisecond, microsecond, nanosecond)
    return ISODateTime(date=balance_iso_date(year, month, day + balanced.days), time=balanced.time)


def compare_iso_date_time(one: ISODateTime, two: ISODateTime) -> int:
    result = compare_iso_date(one.date, two.date)
    if result != 0:
        return result
    return compare_time(one.time, two.time)


def difference_iso_date_time(
    one: ISODateTime, two: ISODateTime, largest_unit: Unit
) -> tuple[DateDurationRecord, NormalizedTimeDuration]:
    """
    Difference of two date-times: calendar part plus normalized time part.

    When the time difference points against the date difference, one day is
    borrowed from the end date so both parts share one sign. For a time
    largest unit the date part is folded into the time part as 24h days.

    Returns:
        (DateDurationRecord, normalized time duration)

    Examples:
        >>> a = ISODateTime(date=ISODate(year=2020, month=1, day=1), time=ISOTime(hour=12))
        >>> b = ISODateTime(date=ISODate(year=2020, month=1, day=3))
        >>> difference_iso_date_time(a, b, Unit.DAY)
        (DateDurationRecord(years=0, months=0, weeks=0, days=1), 43200000000000)
    """
    time_diff = difference_time(one.time, two.time)
    time_sign = normalized_sign(time_diff)
    date_sign = compare_iso_date(two.date, one.date)

    end = two.date
    if time_sign != 0 and time_sign == -date_sign:
        end = balance_iso_date(end.year, end.month, end.day + time_sign)
        time_diff = add_24_hour_days(time_diff, -time_sign)

    date_largest = larger_of_two_units(Unit.DAY, largest_unit)
    date_diff = difference_iso_date(
        one.date.year, one.date.month, one.date.day, end.year, end.month, end.day, date_largest
    )
    if largest_unit is not date_largest:
        time_diff = add_24_hour_days(time_diff, date_diff.days)
        date_diff = DateDurationRecord(0, 0, 0, 0)
    return date_diff, time_diff
