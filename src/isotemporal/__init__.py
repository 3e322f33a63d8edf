"""
isotemporal - ISO-8601 calendar and duration arithmetic engine

Computational kernel for Temporal-style date/time value objects:
- ISO field resolution and validation (core.domain.fields)
- Calendar date arithmetic and week numbering (core.math.calendar_math)
- Time-of-day arithmetic with day carry (core.math.time_math)
- Duration normalization, balancing and rounding (core.math.duration_*)
- Zoned add orchestration over an injected offset oracle (zoned)
"""

__version__ = "0.1.0"
