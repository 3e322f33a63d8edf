"""
Fields - Partial calendar field sets and their resolution

Field bags arrive as mappings keyed by field name ("year", "month",
"month_code", "day"). Resolution runs in three steps:

    1. contract: shape check against the JSON Schema of the target kind
    2. prepare: allow-listed fields converted into an ISOFieldSet
       (year truncated to int; month/day positive ints after truncation)
    3. resolve: month_code ↔ month reconciled, then the date / year-month /
       month-day regulated under the overflow policy

CRITICAL INVARIANTS:
1. A field set never carries a month that disagrees with its month_code
2. Missing required fields are InvalidArgumentError; out-of-domain values are
   TemporalRangeError
3. ISOMonthDay results always carry the reference year 1972
"""

import re
from typing import Any, Final, Iterable, Mapping

from pydantic import BaseModel

from isotemporal.core.contracts.validators import (
    validate_date_fields,
    validate_duration_like,
    validate_month_day_fields,
    validate_year_month_fields,
)
from isotemporal.core.domain.enums import Overflow
from isotemporal.core.domain.records import (
    DURATION_FIELDS,
    MONTH_DAY_REFERENCE_YEAR,
    Duration,
    ISODate,
    ISOMonthDay,
    ISOYearMonth,
    to_integer_with_truncation,
)
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError
from isotemporal.core.math.calendar_math import (
    MONTHS_IN_YEAR,
    iso_year_month_within_limits,
    regulate_iso_date,
)

# =============================================================================
# FIELD NAMES
# =============================================================================

# Allow-list, in the canonical (alphabetical) order of the calendar protocol
CALENDAR_FIELD_NAMES: Final[tuple[str, ...]] = ("day", "month", "month_code", "year")

DATE_FIELDS: Final[tuple[str, ...]] = ("day", "month", "month_code", "year")
DATE_REQUIRED: Final[tuple[str, ...]] = ("year", "day")

YEAR_MONTH_FIELDS: Final[tuple[str, ...]] = ("month", "month_code", "year")
YEAR_MONTH_REQUIRED: Final[tuple[str, ...]] = ("year",)

MONTH_DAY_FIELDS: Final[tuple[str, ...]] = ("day", "month", "month_code", "year")
MONTH_DAY_REQUIRED: Final[tuple[str, ...]] = ("day",)

_MONTH_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"M(\d{2})")


# =============================================================================
# FIELD SET
# =============================================================================


class ISOFieldSet(BaseModel):
    """Partial calendar field record (None = field absent)."""

    year: int | None = None
    month: int | None = None
    month_code: str | None = None
    day: int | None = None

    model_config = {"frozen": True}


def calendar_fields(names: Iterable[Any]) -> list[str]:
    """
    Validation of a list of requested calendar field names.

    Returns:
        The names, in input order

    Raises:
        InvalidArgumentError: a name is not a string
        TemporalRangeError: a name is duplicated or not a calendar field

    Examples:
        >>> calendar_fields(["year", "month_code"])
        ['year', 'month_code']
    """
    seen: list[str] = []
    for name in names:
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Field name must be a string, got {type(name).__name__}")
        if name in seen:
            raise TemporalRangeError(f"Duplicate field: {name}")
        if name not in CALENDAR_FIELD_NAMES:
            raise TemporalRangeError(f"Invalid field: {name}")
        seen.append(name)
    return seen


def _to_positive_integer(value: Any, name: str) -> int:
    result = to_integer_with_truncation(value, name)
    if result <= 0:
        raise TemporalRangeError(f"{name} must be a positive integer, got {value}")
    return result


def prepare_fields(
    bag: Mapping[str, Any],
    field_names: Iterable[str],
    required: Iterable[str],
) -> ISOFieldSet:
    """
    Extraction of allow-listed fields from a bag.

    Keys outside `field_names` are ignored.

    Raises:
        InvalidArgumentError: required field missing, wrong value type
        TemporalRangeError: non-finite number, non-positive month/day
    """
    required = tuple(required)
    values: dict[str, Any] = {}
    for name in field_names:
        value = bag.get(name)
        if value is None:
            if name in required:
                raise InvalidArgumentError(f"Required field missing: {name}")
            continue
        if name == "year":
            values[name] = to_integer_with_truncation(value, name)
        elif name == "month_code":
            if not isinstance(value, str):
                raise InvalidArgumentError(f"month_code must be a string, got {type(value).__name__}")
            values[name] = value
        else:
            values[name] = _to_positive_integer(value, name)
    return ISOFieldSet(**values)


def merge_fields(fields: Mapping[str, Any], additional: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge of two field bags; `additional` wins.

    month and month_code travel together: when `additional` provides either
    one, neither is copied from `fields`.

    Examples:
        >>> merge_fields({"year": 2020, "month": 1, "day": 5}, {"month_code": "M03"})
        {'year': 2020, 'day': 5, 'month_code': 'M03'}
    """
    replaces_month = "month" in additional or "month_code" in additional
    merged: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if replaces_month and key in ("month", "month_code"):
            continue
        merged[key] = value
    for key, value in additional.items():
        if value is not None:
            merged[key] = value
    return merged


# =============================================================================
# MONTH CODES
# =============================================================================


def build_iso_month_code(month: int) -> str:
    """
    Examples:
        >>> build_iso_month_code(3)
        'M03'
    """
    if month < 1 or month > MONTHS_IN_YEAR:
        raise TemporalRangeError(f"month must be in 1..12, got {month}")
    return f"M{month:02d}"


def parse_iso_month_code(code: str) -> int:
    """
    Month number of an ISO month code ("M01".."M12").

    Raises:
        TemporalRangeError: malformed code or month out of range
    """
    match = _MONTH_CODE_PATTERN.fullmatch(code)
    if match is None:
        raise TemporalRangeError(f"Invalid month code: {code!r}")
    month = int(match.group(1))
    if month < 1 or month > MONTHS_IN_YEAR:
        raise TemporalRangeError(f"Invalid month code: {code!r}")
    return month


def resolve_month(field_set: ISOFieldSet) -> ISOFieldSet:
    """
    Reconciliation of month and month_code.

    Returns:
        Field set with `month` populated

    Raises:
        InvalidArgumentError: neither month nor month_code present
        TemporalRangeError: malformed month_code, or month != month_code
    """
    if field_set.month_code is None:
        if field_set.month is None:
            raise InvalidArgumentError("Either month or month_code is required")
        return field_set

    month = parse_iso_month_code(field_set.month_code)
    if field_set.month is not None and field_set.month != month:
        raise TemporalRangeError(
            f"month {field_set.month} does not match month_code {field_set.month_code!r}"
        )
    return field_set.model_copy(update={"month": month})


# =============================================================================
# FROM FIELDS
# =============================================================================


def iso_date_from_fields(bag: Mapping[str, Any], overflow: Overflow) -> ISODate:
    """
    ISO date from a field bag.

    Examples:
        >>> iso_date_from_fields({"year": 2021, "month_code": "M02", "day": 31}, Overflow.CONSTRAIN)
        ISODate(year=2021, month=2, day=28)
    """
    validate_date_fields(bag)
    fields = resolve_month(prepare_fields(bag, DATE_FIELDS, DATE_REQUIRED))
    return regulate_iso_date(fields.year, fields.month, fields.day, overflow)


def iso_year_month_from_fields(bag: Mapping[str, Any], overflow: Overflow) -> ISOYearMonth:
    """ISO year-month from a field bag (reference day 1)."""
    validate_year_month_fields(bag)
    fields = resolve_month(prepare_fields(bag, YEAR_MONTH_FIELDS, YEAR_MONTH_REQUIRED))

    month = fields.month
    if overflow is Overflow.REJECT:
        if month > MONTHS_IN_YEAR:
            raise TemporalRangeError(f"month must be in 1..12, got {month}")
    else:
        month = min(month, MONTHS_IN_YEAR)

    if not iso_year_month_within_limits(fields.year, month):
        raise TemporalRangeError(f"Year-month {fields.year}-{month:02d} is outside the representable range")
    return ISOYearMonth(year=fields.year, month=month, reference_day=1)


def iso_month_day_from_fields(bag: Mapping[str, Any], overflow: Overflow) -> ISOMonthDay:
    """
    ISO month-day from a field bag.

    With month_code the day is regulated against the leap reference year 1972;
    with a plain month the bag's year decides (so 02-29 needs a leap year).

    Raises:
        InvalidArgumentError: month given without month_code and without year
    """
    validate_month_day_fields(bag)
    if bag.get("month") is not None and bag.get("month_code") is None and bag.get("year") is None:
        raise InvalidArgumentError("month without month_code requires year")

    fields = resolve_month(prepare_fields(bag, MONTH_DAY_FIELDS, MONTH_DAY_REQUIRED))
    year = MONTH_DAY_REFERENCE_YEAR if fields.month_code is not None else fields.year
    date = regulate_iso_date(year, fields.month, fields.day, overflow)
    return ISOMonthDay(month=date.month, day=date.day, reference_year=MONTH_DAY_REFERENCE_YEAR)


def duration_from_fields(bag: Mapping[str, Any]) -> Duration:
    """
    Duration from a duration-like bag.

    At least one unit field must be present; keys that are not duration units
    (e.g. "calendar") are ignored.

    Raises:
        InvalidArgumentError: shape violation or mixed signs
        TemporalRangeError: fractional / non-finite value, out of range
    """
    validate_duration_like(bag)
    return Duration.create(**{name: bag[name] for name in DURATION_FIELDS if name in bag})
