"""
Errors - Typed failures and tagged results

Every failure raised by the engine carries an ErrorKind and a message:
- RANGE: a field or computed value outside its valid domain (invalid day,
  overflow=reject, instant outside the representable range, bad rounding
  increment)
- INVALID_ARGUMENT: a field bag missing a required member, a value of the
  wrong type, or a duration with mixed-sign components

Callers that prefer values over exceptions wrap a call in run_operation()
and receive an OperationResult instead.

CRITICAL INVARIANTS:
1. Validation happens before any computation; a failed operation produces
   nothing (values are immutable, so there is nothing to roll back)
2. Only TemporalError is captured by run_operation(); anything else is a bug
   and propagates
"""

from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel


# =============================================================================
# ERROR KINDS
# =============================================================================


class ErrorKind(str, Enum):
    """Kind tag carried across the engine boundary."""

    RANGE = "RangeError"
    INVALID_ARGUMENT = "TypeError"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class TemporalError(Exception):
    """Base class for all engine errors."""

    kind: ErrorKind = ErrorKind.RANGE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_result(self) -> "ErrorResult":
        return ErrorResult(kind=self.kind, message=self.message)


class TemporalRangeError(TemporalError, ValueError):
    """
    Value outside its valid domain.

    Examples:
        - day 31 in a 30-day month with overflow=reject
        - epoch nanoseconds beyond ±8.64e21
        - rounding increment that does not divide the unit
    """

    kind = ErrorKind.RANGE


class InvalidArgumentError(TemporalError, TypeError):
    """
    Structurally invalid input.

    Examples:
        - date field bag without 'year'
        - month_code given as a number
        - Duration(days=1, hours=-1)
    """

    kind = ErrorKind.INVALID_ARGUMENT


# =============================================================================
# TAGGED RESULTS
# =============================================================================


class ErrorResult(BaseModel):
    """Structured error payload (kind + message)."""

    kind: ErrorKind
    message: str

    model_config = {"frozen": True}


class OperationResult(BaseModel):
    """
    Result of an engine operation in tagged form.

    Attributes:
        ok: True if the operation produced a value
        op: Operation name (e.g. "add_iso_date")
        value: Result on success
        error: Error payload if ok is False
    """

    ok: bool
    op: str
    value: Any = None
    error: ErrorResult | None = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


def run_operation(op: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> OperationResult:
    """
    Call an engine operation, capturing engine errors as a tagged result.

    Args:
        op: Operation name (for diagnostics)
        fn: Operation to call
        *args, **kwargs: Operation arguments

    Returns:
        OperationResult(ok=True, value=...) or OperationResult(ok=False, error=...)

    Examples:
        >>> run_operation("days_in_month", days_in_month, 2024, 2).value
        29
        >>> run_operation("days_in_month", days_in_month, 2024, 13).error.kind
        <ErrorKind.RANGE: 'RangeError'>
    """
    try:
        value = fn(*args, **kwargs)
    except TemporalError as exc:
        return OperationResult(ok=False, op=op, error=exc.to_result())
    return OperationResult(ok=True, op=op, value=value)
