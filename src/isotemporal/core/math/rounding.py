"""
Rounding - Exact rounding to increments

Rounding of exact quantities (int or fractions.Fraction) to a multiple of an
increment under every RoundingMode. Floating point never enters: a quantity
like "23.999999999999 hours" is held as a Fraction, so ties and directional
modes behave exactly at nanosecond resolution.

Every signed mode is reduced to an unsigned mode applied to the magnitude:

    mode        positive       negative
    ceil        infinity       zero
    floor       zero           infinity
    expand      infinity       infinity
    trunc       zero           zero
    halfCeil    half-infinity  half-zero
    halfFloor   half-zero      half-infinity
    halfExpand  half-infinity  half-infinity
    halfTrunc   half-zero      half-zero
    halfEven    half-even      half-even

CRITICAL INVARIANTS:
1. round_number_to_increment(x, inc, mode) is a multiple of inc
2. A quantity that already is a multiple of inc is returned unchanged (idempotence)
3. The result lies in [floor multiple, ceiling multiple] bracketing x
"""

import math
from enum import Enum
from fractions import Fraction
from typing import Final

from isotemporal.core.domain.enums import RoundingMode, Unit
from isotemporal.core.domain.records import RoundingSpec
from isotemporal.core.errors import InvalidArgumentError, TemporalRangeError

# =============================================================================
# ROUNDING CONSTANTS
# =============================================================================

# Upper bound of any rounding increment
MAX_ROUNDING_INCREMENT: Final[int] = 1_000_000_000

# Largest admissible increment per time unit is this value minus one (the
# increment must divide the next larger unit and may not equal it)
_INCREMENT_DIVIDEND: Final[dict[Unit, int]] = {
    Unit.HOUR: 24,
    Unit.MINUTE: 60,
    Unit.SECOND: 60,
    Unit.MILLISECOND: 1000,
    Unit.MICROSECOND: 1000,
    Unit.NANOSECOND: 1000,
}


# =============================================================================
# UNSIGNED ROUNDING
# =============================================================================


class UnsignedRoundingMode(str, Enum):
    """Rounding of a non-negative magnitude between two candidates r1 <= x <= r2."""

    ZERO = "zero"
    INFINITY = "infinity"
    HALF_ZERO = "half-zero"
    HALF_INFINITY = "half-infinity"
    HALF_EVEN = "half-even"


_UNSIGNED_MODES: Final[dict[RoundingMode, tuple[UnsignedRoundingMode, UnsignedRoundingMode]]] = {
    # mode: (positive, negative)
    RoundingMode.CEIL: (UnsignedRoundingMode.INFINITY, UnsignedRoundingMode.ZERO),
    RoundingMode.FLOOR: (UnsignedRoundingMode.ZERO, UnsignedRoundingMode.INFINITY),
    RoundingMode.EXPAND: (UnsignedRoundingMode.INFINITY, UnsignedRoundingMode.INFINITY),
    RoundingMode.TRUNC: (UnsignedRoundingMode.ZERO, UnsignedRoundingMode.ZERO),
    RoundingMode.HALF_CEIL: (UnsignedRoundingMode.HALF_INFINITY, UnsignedRoundingMode.HALF_ZERO),
    RoundingMode.HALF_FLOOR: (UnsignedRoundingMode.HALF_ZERO, UnsignedRoundingMode.HALF_INFINITY),
    RoundingMode.HALF_EXPAND: (
        UnsignedRoundingMode.HALF_INFINITY,
        UnsignedRoundingMode.HALF_INFINITY,
    ),
    RoundingMode.HALF_TRUNC: (UnsignedRoundingMode.HALF_ZERO, UnsignedRoundingMode.HALF_ZERO),
    RoundingMode.HALF_EVEN: (UnsignedRoundingMode.HALF_EVEN, UnsignedRoundingMode.HALF_EVEN),
}


def get_unsigned_rounding_mode(mode: RoundingMode, is_negative: bool) -> UnsignedRoundingMode:
    """Unsigned counterpart of `mode` for a quantity of the given sign."""
    positive, negative = _UNSIGNED_MODES[mode]
    return negative if is_negative else positive


def apply_unsigned_rounding_mode(
    x: Fraction | int,
    r1: int,
    r2: int,
    unsigned_mode: UnsignedRoundingMode,
) -> int:
    """
    Choice between two candidates bracketing a non-negative quantity.

    Args:
        x: Quantity, r1 <= x <= r2
        r1: Lower candidate
        r2: Upper candidate
        unsigned_mode: How to choose

    Returns:
        r1 or r2 (x itself when x == r1)

    Examples:
        >>> apply_unsigned_rounding_mode(Fraction(5, 2), 2, 3, UnsignedRoundingMode.HALF_EVEN)
        2
        >>> apply_unsigned_rounding_mode(Fraction(7, 2), 3, 4, UnsignedRoundingMode.HALF_EVEN)
        4
    """
    if x == r1:
        return r1
    if unsigned_mode is UnsignedRoundingMode.ZERO:
        return r1
    if unsigned_mode is UnsignedRoundingMode.INFINITY:
        return r2

    d1 = x - r1
    d2 = r2 - x
    if d1 < d2:
        return r1
    if d2 < d1:
        return r2

    # exact tie
    if unsigned_mode is UnsignedRoundingMode.HALF_ZERO:
        return r1
    if unsigned_mode is UnsignedRoundingMode.HALF_INFINITY:
        return r2
    # HALF_EVEN: candidates are compared as multiples of the increment
    return r1 if (r1 // _cardinal_step(r1, r2)) % 2 == 0 else r2


def _cardinal_step(r1: int, r2: int) -> int:
    step = r2 - r1
    return step if step > 0 else 1


# =============================================================================
# ROUND TO INCREMENT
# =============================================================================


def round_number_to_increment(x: Fraction | int, increment: int, mode: RoundingMode) -> int:
    """
    Rounding of an exact quantity to a multiple of `increment`.

    Args:
        x: Quantity (int or Fraction)
        increment: Positive integer step
        mode: Rounding mode

    Returns:
        Multiple of increment (int)

    Raises:
        ValueError: increment < 1 (programming error; public callers validate first)

    Examples:
        >>> round_number_to_increment(Fraction(5, 2), 1, RoundingMode.HALF_EXPAND)
        3
        >>> round_number_to_increment(Fraction(-5, 2), 1, RoundingMode.HALF_EXPAND)
        -3
        >>> round_number_to_increment(Fraction(-5, 2), 1, RoundingMode.CEIL)
        -2
        >>> round_number_to_increment(17, 5, RoundingMode.TRUNC)
        15
    """
    if increment < 1:
        raise ValueError(f"increment must be positive, got {increment}")

    quotient = Fraction(x) / increment
    is_negative = quotient < 0
    magnitude = -quotient if is_negative else quotient

    r1 = magnitude.numerator // magnitude.denominator
    r2 = r1 + 1
    unsigned_mode = get_unsigned_rounding_mode(mode, is_negative)
    rounded = apply_unsigned_rounding_mode(magnitude, r1, r2, unsigned_mode)

    if is_negative:
        rounded = -rounded
    return rounded * increment


# =============================================================================
# INCREMENT VALIDATION
# =============================================================================


def to_rounding_increment(value: int | float) -> int:
    """
    Conversion of a rounding-increment option to int.

    Fractions are truncated; the result must be in [1, 10^9].

    Raises:
        InvalidArgumentError: value is not a number
        TemporalRangeError: NaN/Inf or out of [1, 10^9]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"Rounding increment must be a number, got {type(value).__name__}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TemporalRangeError(f"Rounding increment must be finite, got {value}")
        value = int(value)
    if value < 1 or value > MAX_ROUNDING_INCREMENT:
        raise TemporalRangeError(
            f"Rounding increment must be in [1, {MAX_ROUNDING_INCREMENT}], got {value}"
        )
    return value


def maximum_rounding_increment(unit: Unit) -> int | None:
    """
    Dividend that a rounding increment for `unit` must divide.

    Returns:
        24 for hour, 60 for minute/second, 1000 for sub-second units,
        None for date units (no fixed bound)
    """
    return _INCREMENT_DIVIDEND.get(unit)


def validate_rounding_increment(increment: int, dividend: int | None, inclusive: bool) -> int:
    """
    Validation of a rounding increment against the unit it rounds to.

    Args:
        increment: Increment (already an int in [1, 10^9])
        dividend: Value the increment must divide (None → no bound)
        inclusive: True if increment may equal the dividend

    Returns:
        increment

    Raises:
        TemporalRangeError: increment too large or not a divisor

    Examples:
        >>> validate_rounding_increment(15, 60, inclusive=False)
        15
        >>> validate_rounding_increment(7, 60, inclusive=False)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        TemporalRangeError: Rounding increment 7 does not divide 60
    """
    to_rounding_increment(increment)
    if dividend is None:
        return increment
    maximum = dividend if inclusive else dividend - 1
    if increment > maximum:
        raise TemporalRangeError(f"Rounding increment {increment} exceeds maximum {maximum}")
    if dividend % increment != 0:
        raise TemporalRangeError(f"Rounding increment {increment} does not divide {dividend}")
    return increment


def resolve_rounding_spec(
    unit: Unit,
    increment: int | float,
    mode: RoundingMode,
    inclusive: bool = False,
) -> RoundingSpec:
    """
    Validated rounding target from separate unit / increment / mode options.

    The increment is converted first and then checked against the dividend of
    `unit` (time units only; date units have no fixed bound).

    Raises:
        InvalidArgumentError: increment is not a number
        TemporalRangeError: increment out of range or not a divisor

    Examples:
        >>> resolve_rounding_spec(Unit.MINUTE, 15.0, RoundingMode.FLOOR).increment
        15
    """
    increment = to_rounding_increment(increment)
    validate_rounding_increment(increment, maximum_rounding_increment(unit), inclusive)
    return RoundingSpec(unit=unit, increment=increment, mode=mode)
