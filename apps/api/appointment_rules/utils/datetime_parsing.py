"""Datetime parsing helpers for appointment snapshots at the API boundary."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from appointment_rules.core.config import settings


def resolve_timezone(tz_name: str | None) -> ZoneInfo:
    """Return the ZoneInfo for tz_name, falling back to the configured default.

    Raises:
        ValueError: if the name is not a known IANA timezone.
    """
    name = tz_name or settings.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"Unknown timezone '{name}'") from exc


def normalize_to_utc(value: datetime, tz_name: str | None = None) -> datetime:
    """Make value timezone-aware (naive means local wall clock in tz_name) and convert to UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=resolve_timezone(tz_name))
    return value.astimezone(timezone.utc)


def parse_datetime(raw_value: str | datetime | None, tz_name: str | None = None) -> datetime | None:
    """
    Parse an ISO-8601 wall-clock string (or epoch timestamp) to an aware UTC datetime.

    Accepts:
    - ISO 8601 with offset or trailing 'Z'
    - naive ISO 8601, interpreted in tz_name (or DEFAULT_TIMEZONE)
    - epoch seconds (10 digits) or milliseconds (13 digits)
    - datetime objects, normalized the same way

    Empty input returns None.

    Raises:
        ValueError: if the value is not a recognizable timestamp.
    """
    if raw_value is None:
        return None
    if isinstance(raw_value, datetime):
        return normalize_to_utc(raw_value, tz_name)

    value = raw_value.strip()
    if not value:
        return None

    # Epoch timestamps (seconds or milliseconds)
    if re.fullmatch(r"\d{10,13}", value):
        ts = int(value)
        if len(value) == 13:
            ts = ts / 1000
        return datetime.fromtimestamp(ts, tz=timezone.utc)

    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"Unrecognized datetime format: {value}") from exc
    return normalize_to_utc(dt, tz_name)
