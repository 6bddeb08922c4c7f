"""Time-window arithmetic for appointment rules.

Pure helpers: every function takes the reference clock explicitly and none of
them encode business rules beyond the window sizes they are given.
"""

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from appointment_rules.core.config import settings
from appointment_rules.utils.datetime_parsing import normalize_to_utc, resolve_timezone

if TYPE_CHECKING:
    from appointment_rules.schemas.appointment import AppointmentSnapshot, StartWindow

_ONE_MINUTE = timedelta(minutes=1)


def minutes_between(t1: datetime, t2: datetime) -> int:
    """Signed whole minutes from t2 to t1, floored (positive when t1 is later)."""
    return (t1 - t2) // _ONE_MINUTE


def is_same_local_day(a: datetime, b: datetime, tz_name: str | None = None) -> bool:
    """Check whether two instants fall on the same calendar day in tz_name."""
    tz = resolve_timezone(tz_name)
    return a.astimezone(tz).date() == b.astimezone(tz).date()


def minutes_until_start(appointment: "AppointmentSnapshot | None", now: datetime) -> int:
    """Minutes until the scheduled start (negative once it has passed, 0 without a start)."""
    if appointment is None or appointment.start_time is None:
        return 0
    return minutes_between(appointment.start_time, normalize_to_utc(now, appointment.timezone))


def get_start_window(
    appointment: "AppointmentSnapshot",
    now: datetime,
    *,
    early_window_minutes: int | None = None,
) -> "StartWindow":
    """
    Window in which an appointment may be started.

    Opens early_window_minutes before the scheduled start and closes at the
    scheduled end (or the scheduled start when the record is open-ended).
    """
    from appointment_rules.schemas.appointment import StartWindow

    if appointment.start_time is None:
        return StartWindow(can_start_from=None, can_start_until=None, is_within_window=False)

    if early_window_minutes is None:
        early_window_minutes = settings.START_EARLY_WINDOW_MINUTES

    can_start_from = appointment.start_time - timedelta(minutes=early_window_minutes)
    can_start_until = appointment.end_time or appointment.start_time
    return StartWindow(
        can_start_from=can_start_from,
        can_start_until=can_start_until,
        is_within_window=can_start_from <= normalize_to_utc(now, appointment.timezone) <= can_start_until,
    )


def format_duration(minutes: int) -> str:
    """Format minutes as '45 min', '2h' or '1h 30m'."""
    if minutes < 0:
        minutes = 0
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"
