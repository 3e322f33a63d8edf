"""
PlainTime operations (time of day without a date).

Used as a namespace: ``from isotemporal.plain_time import operations``.
"""

from isotemporal.plain_time import operations

__all__ = ["operations"]
