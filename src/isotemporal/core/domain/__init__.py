"""
Domain records and enums

Immutable value records and the closed policy / unit sets.
Field-bag resolution lives in isotemporal.core.domain.fields (it depends on
the calendar math and is imported explicitly).
"""

from isotemporal.core.domain.enums import (
    DATE_UNITS,
    TIME_UNITS,
    UNIT_NANOSECONDS,
    DifferenceOperation,
    Disambiguation,
    Overflow,
    RoundingMode,
    Unit,
    larger_of_two_units,
)
from isotemporal.core.domain.records import (
    MAX_ISO_YEAR,
    MIDNIGHT,
    MIN_ISO_YEAR,
    MONTH_DAY_REFERENCE_YEAR,
    BalancedTime,
    DateDurationRecord,
    Duration,
    ISODate,
    ISODateTime,
    ISOMonthDay,
    ISOTime,
    ISOYearMonth,
    NormalizedTimeDuration,
    RoundingSpec,
    TimeDurationRecord,
)

__all__ = [
    # Enums
    "Unit",
    "Overflow",
    "Disambiguation",
    "RoundingMode",
    "DifferenceOperation",
    "DATE_UNITS",
    "TIME_UNITS",
    "UNIT_NANOSECONDS",
    "larger_of_two_units",
    # Records
    "ISODate",
    "ISOTime",
    "ISODateTime",
    "ISOYearMonth",
    "ISOMonthDay",
    "Duration",
    "RoundingSpec",
    "NormalizedTimeDuration",
    "TimeDurationRecord",
    "DateDurationRecord",
    "BalancedTime",
    "MIDNIGHT",
    # Limits
    "MIN_ISO_YEAR",
    "MAX_ISO_YEAR",
    "MONTH_DAY_REFERENCE_YEAR",
]
