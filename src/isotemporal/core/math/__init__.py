"""
Core math modules for isotemporal

Exact integer / fraction arithmetic over dates, times and durations.
"""

# Rounding
from isotemporal.core.math.rounding import (
    MAX_ROUNDING_INCREMENT,
    apply_unsigned_rounding_mode,
    get_unsigned_rounding_mode,
    maximum_rounding_increment,
    resolve_rounding_spec,
    round_number_to_increment,
    to_rounding_increment,
    validate_rounding_increment,
)

# Time of day
from isotemporal.core.math.time_math import (
    add_time,
    balance_time,
    compare_time,
    create_time,
    difference_time,
    is_valid_time,
    regulate_time,
    reject_time,
    round_time,
    time_to_nanoseconds,
)

# Normalized durations
from isotemporal.core.math.duration_normalizer import (
    MAX_NORMALIZED_TIME_DURATION,
    NS_MAX_INSTANT,
    NS_MIN_INSTANT,
    add_24_hour_days,
    add_instant,
    balance_time_duration,
    is_valid_epoch_nanoseconds,
    normalize_time_duration,
    round_normalized_time_duration,
)

# ISO calendar
from isotemporal.core.math.calendar_math import (
    add_iso_date,
    balance_iso_date,
    balance_iso_year_month,
    compare_iso_date,
    create_iso_date,
    days_in_month,
    days_in_year,
    difference_iso_date,
    difference_iso_date_time,
    epoch_days_to_iso_date,
    is_leap_year,
    is_valid_iso_date,
    iso_date_to_epoch_days,
    iso_date_within_limits,
    iso_year_month_within_limits,
    regulate_iso_date,
    reject_iso_date,
    to_iso_day_of_week,
    to_iso_day_of_year,
    to_iso_week_of_year,
    week_of_iso_week_of_year,
    year_of_iso_week_of_year,
)

# Duration rounding
from isotemporal.core.math.duration_rounder import round_duration, total_duration

__all__ = [
    # Rounding
    "MAX_ROUNDING_INCREMENT",
    "apply_unsigned_rounding_mode",
    "get_unsigned_rounding_mode",
    "maximum_rounding_increment",
    "resolve_rounding_spec",
    "round_number_to_increment",
    "to_rounding_increment",
    "validate_rounding_increment",
    # Time of day
    "add_time",
    "balance_time",
    "compare_time",
    "create_time",
    "difference_time",
    "is_valid_time",
    "regulate_time",
    "reject_time",
    "round_time",
    "time_to_nanoseconds",
    # Normalized durations
    "MAX_NORMALIZED_TIME_DURATION",
    "NS_MAX_INSTANT",
    "NS_MIN_INSTANT",
    "add_24_hour_days",
    "add_instant",
    "balance_time_duration",
    "is_valid_epoch_nanoseconds",
    "normalize_time_duration",
    "round_normalized_time_duration",
    # ISO calendar
    "add_iso_date",
    "balance_iso_date",
    "balance_iso_year_month",
    "compare_iso_date",
    "create_iso_date",
    "days_in_month",
    "days_in_year",
    "difference_iso_date",
    "difference_iso_date_time",
    "epoch_days_to_iso_date",
    "is_leap_year",
    "is_valid_iso_date",
    "iso_date_to_epoch_days",
    "iso_date_within_limits",
    "iso_year_month_within_limits",
    "regulate_iso_date",
    "reject_iso_date",
    "to_iso_day_of_week",
    "to_iso_day_of_year",
    "to_iso_week_of_year",
    "week_of_iso_week_of_year",
    "year_of_iso_week_of_year",
    # Duration rounding
    "round_duration",
    "total_duration",
]
