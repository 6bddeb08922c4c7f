"""Completion duration evaluation.

Each billing unit is UNIT_MINUTES of service time. Completion is never blocked
for falling short of the required minutes; callers use the flag to ask for an
early-completion justification.
"""

from datetime import datetime

from appointment_rules.core.config import settings
from appointment_rules.schemas.appointment import AppointmentSnapshot, DurationSummary
from appointment_rules.utils.datetime_parsing import parse_datetime
from appointment_rules.utils.time_windows import minutes_between


def get_required_minutes(units_required: int | None, unit_minutes: int | None = None) -> int:
    """Required service minutes for a number of billing units (missing units count as 0)."""
    if unit_minutes is None:
        unit_minutes = settings.UNIT_MINUTES
    return (units_required or 0) * unit_minutes


def get_elapsed_minutes(started_at: datetime | None, now: datetime) -> int:
    """Whole minutes since the appointment was started (0 if never started)."""
    if started_at is None:
        return 0
    return minutes_between(now, started_at)


def evaluate_duration(
    appointment: AppointmentSnapshot,
    now: datetime,
    *,
    unit_minutes: int | None = None,
) -> DurationSummary:
    """Elapsed vs. required minutes, e.g. to preview time remaining while in progress."""
    now = parse_datetime(now, appointment.timezone)
    required = get_required_minutes(appointment.units_required, unit_minutes)
    elapsed = get_elapsed_minutes(appointment.started_at, now)
    return DurationSummary(
        elapsed_minutes=elapsed,
        required_minutes=required,
        remaining_minutes=max(required - elapsed, 0),
        has_met_minimum_duration=elapsed >= required,
    )
