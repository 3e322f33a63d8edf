"""
Enums - Closed policy and unit sets

Unit ordering is from largest (YEAR) to smallest (NANOSECOND). Calendar units
(year, month, week) have no fixed length; DAY is the bridge unit between the
calendar part and the time part of a duration.
"""

from enum import Enum
from typing import Final


# =============================================================================
# UNITS
# =============================================================================


class Unit(str, Enum):
    """Temporal unit, ordered largest to smallest."""

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"
    NANOSECOND = "nanosecond"
    AUTO = "auto"

    @property
    def rank(self) -> int:
        """Position in the largest→smallest order (AUTO has none)."""
        if self is Unit.AUTO:
            raise ValueError("Unit.AUTO has no ordering")
        return _UNIT_ORDER.index(self)

    @property
    def is_calendar_unit(self) -> bool:
        """year/month/week: length depends on the anchor date."""
        return self in (Unit.YEAR, Unit.MONTH, Unit.WEEK)

    @property
    def is_date_unit(self) -> bool:
        return self in (Unit.YEAR, Unit.MONTH, Unit.WEEK, Unit.DAY)

    @property
    def is_time_unit(self) -> bool:
        return self in _UNIT_ORDER[4:]

    @property
    def nanoseconds(self) -> int:
        """Exact length in nanoseconds (day = 24h). Calendar units have none."""
        try:
            return UNIT_NANOSECONDS[self]
        except KeyError:
            raise ValueError(f"{self.value} has no fixed length") from None

    def is_larger_than(self, other: "Unit") -> bool:
        return self.rank < other.rank


_UNIT_ORDER: Final[tuple[Unit, ...]] = (
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

DATE_UNITS: Final[tuple[Unit, ...]] = _UNIT_ORDER[:4]
TIME_UNITS: Final[tuple[Unit, ...]] = _UNIT_ORDER[4:]

UNIT_NANOSECONDS: Final[dict[Unit, int]] = {
    Unit.DAY: 86_400_000_000_000,
    Unit.HOUR: 3_600_000_000_000,
    Unit.MINUTE: 60_000_000_000,
    Unit.SECOND: 1_000_000_000,
    Unit.MILLISECOND: 1_000_000,
    Unit.MICROSECOND: 1_000,
    Unit.NANOSECOND: 1,
}


def larger_of_two_units(one: Unit, two: Unit) -> Unit:
    """Coarser of two units."""
    return one if one.rank <= two.rank else two


# =============================================================================
# POLICIES
# =============================================================================


class Overflow(str, Enum):
    """Resolution of out-of-range field combinations."""

    CONSTRAIN = "constrain"  # clamp to the nearest valid value
    REJECT = "reject"  # raise TemporalRangeError


class Disambiguation(str, Enum):
    """Resolution of a local date-time that maps to zero or two instants."""

    COMPATIBLE = "compatible"
    EARLIER = "earlier"
    LATER = "later"
    REJECT = "reject"


class RoundingMode(str, Enum):
    """Rounding mode (directional and half-* tie-breaking variants)."""

    CEIL = "ceil"
    FLOOR = "floor"
    EXPAND = "expand"
    TRUNC = "trunc"
    HALF_CEIL = "halfCeil"
    HALF_FLOOR = "halfFloor"
    HALF_EXPAND = "halfExpand"
    HALF_TRUNC = "halfTrunc"
    HALF_EVEN = "halfEven"

    def negated(self) -> "RoundingMode":
        """Mode to use when the rounded quantity is negated (since vs until)."""
        return _NEGATED_MODES.get(self, self)


_NEGATED_MODES: Final[dict[RoundingMode, RoundingMode]] = {
    RoundingMode.CEIL: RoundingMode.FLOOR,
    RoundingMode.FLOOR: RoundingMode.CEIL,
    RoundingMode.HALF_CEIL: RoundingMode.HALF_FLOOR,
    RoundingMode.HALF_FLOOR: RoundingMode.HALF_CEIL,
}


class DifferenceOperation(str, Enum):
    """Direction of a difference: other - self (until) or self - other (since)."""

    UNTIL = "until"
    SINCE = "since"

    @property
    def sign(self) -> int:
        return 1 if self is DifferenceOperation.UNTIL else -1
