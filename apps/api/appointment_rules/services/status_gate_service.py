"""Appointment status gates - guards for start, self-assign, complete and cancel.

Every rule violation is an expected outcome and comes back as a decision with a
stable error code and a human-readable reason. Nothing here raises for a
rejected transition, reads the wall clock, or persists anything.
"""

import logging
from datetime import datetime
from typing import Any

from appointment_rules.core.config import settings
from appointment_rules.core.structured_logging import build_decision_log_context
from appointment_rules.enums import (
    COMPLETED_LIKE_STATUSES,
    NON_BLOCKING_STATUSES,
    STARTABLE_STATUSES,
    AppointmentStatus,
    DecisionErrorCode,
)
from appointment_rules.schemas.appointment import (
    AppointmentSnapshot,
    AssignDecision,
    CancelDecision,
    CompletionDecision,
    StartDecision,
    coerce_snapshot,
)
from appointment_rules.services.completion_service import evaluate_duration
from appointment_rules.utils.datetime_parsing import parse_datetime
from appointment_rules.utils.time_windows import is_same_local_day, minutes_between

logger = logging.getLogger(__name__)

NO_APPOINTMENT_REASON = "No appointment provided"


def _log_rejection(action: str, appointment: AppointmentSnapshot | None, error_code: DecisionErrorCode) -> None:
    logger.debug(
        "%s rejected: %s",
        action,
        error_code.value,
        extra=build_decision_log_context(
            action=action,
            appointment_id=appointment.id if appointment else None,
            client_id=appointment.client_id if appointment else None,
            team_id=appointment.team_id if appointment else None,
            error_code=error_code.value,
        ),
    )


# =============================================================================
# Start
# =============================================================================

def _reject_start(
    appointment: AppointmentSnapshot | None,
    error_code: DecisionErrorCode,
    reason: str,
) -> StartDecision:
    _log_rejection("start", appointment, error_code)
    return StartDecision(can_start=False, reason=reason, error_code=error_code)


def can_start_appointment(
    appointment: Any,
    current_team_id: Any,
    now: datetime,
    has_in_progress_appointment: bool = False,
    *,
    early_window_minutes: int | None = None,
) -> StartDecision:
    """
    Check whether the acting team member may start an appointment.

    Rules, in order:
    1. Status must be 'scheduled' or 'late'
    2. Actor must be the assigned team member
    3. Appointment must have a start time
    4. Start time must fall on the same local day as `now`
    5. No more than `early_window_minutes` (default 45) before the start time
    6. Appointment must not have ended already
    7. Actor must not have another appointment in progress
    """
    appointment = coerce_snapshot(appointment)
    if appointment is None:
        return _reject_start(None, DecisionErrorCode.NO_APPOINTMENT, NO_APPOINTMENT_REASON)
    now = parse_datetime(now, appointment.timezone)

    if early_window_minutes is None:
        early_window_minutes = settings.START_EARLY_WINDOW_MINUTES

    if appointment.status not in STARTABLE_STATUSES:
        return _reject_start(
            appointment,
            DecisionErrorCode.INVALID_STATUS,
            "Only scheduled or late appointments can be started",
        )

    if current_team_id is None or str(appointment.team_id) != str(current_team_id):
        return _reject_start(
            appointment,
            DecisionErrorCode.NOT_ASSIGNED,
            "Only the assigned team member can start this appointment",
        )

    if appointment.start_time is None:
        return _reject_start(
            appointment,
            DecisionErrorCode.NO_START_TIME,
            "Appointment has no start time",
        )

    if not is_same_local_day(now, appointment.start_time, appointment.timezone):
        return _reject_start(
            appointment,
            DecisionErrorCode.NOT_TODAY,
            "Can only start appointments scheduled for today",
        )

    minutes_until_start = minutes_between(appointment.start_time, now)
    if minutes_until_start > early_window_minutes:
        return _reject_start(
            appointment,
            DecisionErrorCode.TOO_EARLY,
            f"Cannot start appointment more than {early_window_minutes} minutes before "
            f"scheduled start time. Try again in {minutes_until_start - early_window_minutes} minutes.",
        )

    if appointment.end_time is not None and now > appointment.end_time:
        return _reject_start(
            appointment,
            DecisionErrorCode.ALREADY_ENDED,
            "Cannot start an appointment that has already ended",
        )

    if has_in_progress_appointment:
        return _reject_start(
            appointment,
            DecisionErrorCode.HAS_ACTIVE_APPOINTMENT,
            "You have another appointment in progress. Please complete it first.",
        )

    return StartDecision(can_start=True)


# =============================================================================
# Self-assign
# =============================================================================

def _reject_assign(
    appointment: AppointmentSnapshot | None,
    error_code: DecisionErrorCode,
    reason: str,
) -> AssignDecision:
    _log_rejection("assign_to_self", appointment, error_code)
    return AssignDecision(can_assign=False, reason=reason, error_code=error_code)


def can_assign_to_self(
    appointment: Any,
    now: datetime,
    is_qualified: bool = True,
    *,
    late_window_minutes: int | None = None,
) -> AssignDecision:
    """
    Check whether the acting team member may take an unassigned appointment.

    Qualification for the appointment's speciality is decided by the caller.
    Early self-assignment is always allowed; it closes `late_window_minutes`
    (default 15) after the scheduled start. Appointments without a start time
    have no cutoff.
    """
    appointment = coerce_snapshot(appointment)
    if appointment is None:
        return _reject_assign(None, DecisionErrorCode.NO_APPOINTMENT, NO_APPOINTMENT_REASON)
    now = parse_datetime(now, appointment.timezone)

    if late_window_minutes is None:
        late_window_minutes = settings.SELF_ASSIGN_LATE_WINDOW_MINUTES

    if appointment.status != AppointmentStatus.UNASSIGNED:
        return _reject_assign(
            appointment,
            DecisionErrorCode.NOT_UNASSIGNED,
            "Only unassigned appointments can be self-assigned",
        )

    if not is_qualified:
        return _reject_assign(
            appointment,
            DecisionErrorCode.NOT_QUALIFIED,
            "You are not qualified for this appointment type",
        )

    if appointment.start_time is not None:
        minutes_until_start = minutes_between(appointment.start_time, now)
        if minutes_until_start < -late_window_minutes:
            return _reject_assign(
                appointment,
                DecisionErrorCode.TOO_LATE,
                f"Can only assign to self up to {late_window_minutes} minutes after start time",
            )

    return AssignDecision(can_assign=True)


# =============================================================================
# Complete
# =============================================================================

def can_complete_appointment(
    appointment: Any,
    now: datetime,
    *,
    unit_minutes: int | None = None,
) -> CompletionDecision:
    """
    Check whether an in-progress appointment may be completed.

    Completion is always allowed once started; `has_met_minimum_duration`
    tells the caller whether to demand an early-completion reason.
    """
    appointment = coerce_snapshot(appointment)
    if appointment is None:
        _log_rejection("complete", None, DecisionErrorCode.NO_APPOINTMENT)
        return CompletionDecision(
            can_complete=False,
            reason=NO_APPOINTMENT_REASON,
            error_code=DecisionErrorCode.NO_APPOINTMENT,
        )

    if appointment.status != AppointmentStatus.IN_PROGRESS:
        _log_rejection("complete", appointment, DecisionErrorCode.NOT_IN_PROGRESS)
        return CompletionDecision(
            can_complete=False,
            reason="Appointment is not in progress",
            error_code=DecisionErrorCode.NOT_IN_PROGRESS,
        )

    if appointment.started_at is None:
        _log_rejection("complete", appointment, DecisionErrorCode.NO_START_TIME_RECORDED)
        return CompletionDecision(
            can_complete=False,
            reason="Appointment has no start time recorded",
            error_code=DecisionErrorCode.NO_START_TIME_RECORDED,
        )

    summary = evaluate_duration(appointment, now, unit_minutes=unit_minutes)
    return CompletionDecision(
        can_complete=True,
        has_met_minimum_duration=summary.has_met_minimum_duration,
        elapsed_minutes=summary.elapsed_minutes,
        required_minutes=summary.required_minutes,
    )


# =============================================================================
# Cancel
# =============================================================================

def can_cancel_appointment(appointment: Any, is_admin: bool = False) -> CancelDecision:
    """Check whether an appointment may be cancelled by the acting user."""
    appointment = coerce_snapshot(appointment)
    if appointment is None:
        error_code = DecisionErrorCode.NO_APPOINTMENT
        reason = NO_APPOINTMENT_REASON
    elif appointment.status in COMPLETED_LIKE_STATUSES:
        error_code = DecisionErrorCode.ALREADY_COMPLETED
        reason = "Cannot cancel a completed appointment"
    elif appointment.status in NON_BLOCKING_STATUSES:
        error_code = DecisionErrorCode.ALREADY_CANCELLED
        reason = "Appointment is already cancelled"
    elif appointment.status == AppointmentStatus.IN_PROGRESS and not is_admin:
        error_code = DecisionErrorCode.IN_PROGRESS_REQUIRES_ADMIN
        reason = "Cannot cancel an in-progress appointment. Complete or terminate it instead."
    else:
        return CancelDecision(can_cancel=True)

    _log_rejection("cancel", appointment, error_code)
    return CancelDecision(can_cancel=False, reason=reason, error_code=error_code)
