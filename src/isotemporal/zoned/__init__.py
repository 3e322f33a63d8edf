"""
Zoned date-time support: offset oracle protocol, instant ↔ local resolution,
and duration addition across offset transitions.
"""

from isotemporal.zoned.orchestrator import (
    AddDaysResult,
    add_days_to_zoned_date_time,
    add_duration_to_zoned_date_time,
    add_zoned_date_time,
)
from isotemporal.zoned.timezone import (
    UTC,
    FixedOffsetTimeZone,
    TimeZoneOffsetOracle,
    disambiguate_possible_instants,
    get_instant_for,
    get_plain_date_time_for,
    get_possible_instants_for,
)

__all__ = [
    # Time zones
    "TimeZoneOffsetOracle",
    "FixedOffsetTimeZone",
    "UTC",
    "get_plain_date_time_for",
    "get_possible_instants_for",
    "disambiguate_possible_instants",
    "get_instant_for",
    # Orchestration
    "AddDaysResult",
    "add_days_to_zoned_date_time",
    "add_zoned_date_time",
    "add_duration_to_zoned_date_time",
]
