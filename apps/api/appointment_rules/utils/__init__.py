"""Utility modules."""

from appointment_rules.utils.datetime_parsing import (
    normalize_to_utc,
    parse_datetime,
    resolve_timezone,
)
from appointment_rules.utils.time_windows import (
    format_duration,
    get_start_window,
    is_same_local_day,
    minutes_between,
    minutes_until_start,
)

__all__ = [
    # Parsing
    "normalize_to_utc",
    "parse_datetime",
    "resolve_timezone",
    # Time windows
    "format_duration",
    "get_start_window",
    "is_same_local_day",
    "minutes_between",
    "minutes_until_start",
]
