"""
ISO 8601 Calendar - Calendar protocol facade

The single calendar the engine supports. Value objects delegate every
calendar question here: field handling, date construction from field bags,
date addition / difference and the per-date accessors.

"Date-like" arguments are ISODate, ISODateTime, ISOYearMonth or ISOMonthDay
where the operation makes sense for them; anything else that is a Mapping is
first converted through date_from_fields (overflow=constrain). Unsupported
kinds raise InvalidArgumentError.

Policy arguments default to EngineSettings when passed as None.
"""

from typing import Any, Final, Iterable, Mapping, Union

from isotemporal.core.config import get_settings
from isotemporal.core.domain.enums import Overflow, Unit
from isotemporal.core.domain.fields import (
    build_iso_month_code,
    calendar_fields,
    duration_from_fields,
    iso_date_from_fields,
    iso_month_day_from_fields,
    iso_year_month_from_fields,
    merge_fields,
)
from isotemporal.core.domain.records import (
    Duration,
    ISODate,
    ISODateTime,
    ISOMonthDay,
    ISOYearMonth,
)
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError
from isotemporal.core.math.calendar_math import (
    DAYS_IN_WEEK,
    MONTHS_IN_YEAR,
    add_iso_date,
    days_in_month,
    days_in_year,
    difference_iso_date,
    is_leap_year,
    to_iso_day_of_week,
    to_iso_day_of_year,
    to_iso_week_of_year,
)
from isotemporal.core.math.duration_normalizer import (
    balance_time_duration,
    normalize_duration_time_part,
)

ISO8601_ID: Final[str] = "iso8601"

DateLike = Union[ISODate, ISODateTime, ISOYearMonth, ISOMonthDay, Mapping[str, Any]]
DurationLike = Union[Duration, Mapping[str, Any]]


class ISO8601Calendar:
    """
    ISO 8601 calendar operations.

    Stateless; one shared instance (ISO8601) is enough.

    Examples:
        >>> cal = ISO8601Calendar()
        >>> cal.date_add(ISODate(year=2021, month=1, day=31), {"months": 1})
        ISODate(year=2021, month=2, day=28)
        >>> cal.days_in_month(ISOYearMonth(year=2024, month=2))
        29
    """

    @property
    def id(self) -> str:
        return ISO8601_ID

    def __repr__(self) -> str:
        return f"ISO8601Calendar(id={ISO8601_ID!r})"

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def fields(self, names: Iterable[Any]) -> list[str]:
        return calendar_fields(names)

    def merge_fields(self, fields: Any, additional: Any) -> dict[str, Any]:
        if not isinstance(fields, Mapping) or not isinstance(additional, Mapping):
            raise InvalidArgumentError("merge_fields expects two mappings")
        return merge_fields(fields, additional)

    def date_from_fields(self, fields: Any, overflow: Overflow | None = None) -> ISODate:
        return iso_date_from_fields(fields, self._overflow(overflow))

    def year_month_from_fields(self, fields: Any, overflow: Overflow | None = None) -> ISOYearMonth:
        return iso_year_month_from_fields(fields, self._overflow(overflow))

    def month_day_from_fields(self, fields: Any, overflow: Overflow | None = None) -> ISOMonthDay:
        return iso_month_day_from_fields(fields, self._overflow(overflow))

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def date_add(
        self,
        date: DateLike,
        duration: DurationLike,
        overflow: Overflow | None = None,
    ) -> ISODate:
        """
        Date + duration. The time part of the duration is balanced into whole
        days first; the sub-day remainder is dropped.
        """
        iso_date = self._to_date(date)
        duration = self._to_duration(duration)
        balanced = balance_time_duration(normalize_duration_time_part(duration), Unit.DAY)
        return add_iso_date(
            iso_date.year,
            iso_date.month,
            iso_date.day,
            duration.years,
            duration.months,
            duration.weeks,
            duration.days + balanced.days,
            self._overflow(overflow),
        )

    def date_until(self, one: DateLike, two: DateLike, largest_unit: Unit | None = None) -> Duration:
        """
        Difference one → two expressed down to days.

        Raises:
            TemporalRangeError: largest_unit is a time unit
        """
        start = self._to_date(one)
        end = self._to_date(two)
        if largest_unit is None or largest_unit is Unit.AUTO:
            largest_unit = Unit.DAY
        if not largest_unit.is_date_unit:
            raise TemporalRangeError(f"largest_unit must be a date unit, got {largest_unit.value}")
        result = difference_iso_date(*start.as_tuple(), *end.as_tuple(), largest_unit)
        return Duration.create(
            years=result.years, months=result.months, weeks=result.weeks, days=result.days
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def year(self, date_like: DateLike) -> int:
        if isinstance(date_like, ISOYearMonth):
            return date_like.year
        return self._to_date(date_like).year

    def month(self, date_like: DateLike) -> int:
        if isinstance(date_like, ISOMonthDay):
            raise InvalidArgumentError("ISOMonthDay not expected")
        if isinstance(date_like, ISOYearMonth):
            return date_like.month
        return self._to_date(date_like).month

    def month_code(self, date_like: DateLike) -> str:
        if isinstance(date_like, (ISOYearMonth, ISOMonthDay)):
            return build_iso_month_code(date_like.month)
        return build_iso_month_code(self._to_date(date_like).month)

    def day(self, date_like: DateLike) -> int:
        if isinstance(date_like, ISOMonthDay):
            return date_like.day
        return self._to_date(date_like).day

    def day_of_week(self, date_like: DateLike) -> int:
        return to_iso_day_of_week(*self._to_date(date_like).as_tuple())

    def day_of_year(self, date_like: DateLike) -> int:
        return to_iso_day_of_year(*self._to_date(date_like).as_tuple())

    def week_of_year(self, date_like: DateLike) -> int:
        return to_iso_week_of_year(*self._to_date(date_like).as_tuple())[0]

    def year_of_week(self, date_like: DateLike) -> int:
        return to_iso_week_of_year(*self._to_date(date_like).as_tuple())[1]

    def days_in_week(self, date_like: DateLike) -> int:
        # conversion validates the argument; its value is not needed
        self._to_date(date_like)
        return DAYS_IN_WEEK

    def days_in_month(self, date_like: DateLike) -> int:
        if isinstance(date_like, ISOYearMonth):
            return days_in_month(date_like.year, date_like.month)
        date = self._to_date(date_like)
        return days_in_month(date.year, date.month)

    def days_in_year(self, date_like: DateLike) -> int:
        return days_in_year(self.year(date_like))

    def months_in_year(self, date_like: DateLike) -> int:
        if not isinstance(date_like, (ISODate, ISODateTime, ISOYearMonth)):
            # conversion validates the argument; its value is not needed
            self._to_date(date_like)
        return MONTHS_IN_YEAR

    def in_leap_year(self, date_like: DateLike) -> bool:
        return is_leap_year(self.year(date_like))

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    @staticmethod
    def _overflow(overflow: Overflow | None) -> Overflow:
        return get_settings().default_overflow if overflow is None else overflow

    @staticmethod
    def _to_date(date_like: Any) -> ISODate:
        if isinstance(date_like, ISODate):
            return date_like
        if isinstance(date_like, ISODateTime):
            return date_like.date
        if isinstance(date_like, Mapping):
            return iso_date_from_fields(date_like, Overflow.CONSTRAIN)
        raise InvalidArgumentError(f"Expected a date-like value, got {type(date_like).__name__}")

    @staticmethod
    def _to_duration(duration: Any) -> Duration:
        if isinstance(duration, Duration):
            return duration
        if isinstance(duration, Mapping):
            return duration_from_fields(duration)
        raise InvalidArgumentError(f"Expected a duration-like value, got {type(duration).__name__}")


ISO8601: Final[ISO8601Calendar] = ISO8601Calendar()
