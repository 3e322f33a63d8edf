"""ISO 8601 calendar facade."""

from isotemporal.calendar.iso8601 import ISO8601, ISO8601_ID, ISO8601Calendar

__all__ = [
    "ISO8601",
    "ISO8601_ID",
    "ISO8601Calendar",
]
