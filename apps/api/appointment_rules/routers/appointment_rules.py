"""Appointment rules router - stateless decision endpoints.

Each endpoint receives the full snapshot it needs (appointment, siblings,
reference clock) and returns a decision. Nothing is fetched or stored; the
caller persists the transition and must re-check conflicts at commit time.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from appointment_rules.schemas.appointment import (
    AppointmentCheckRequest,
    AssignCheckRequest,
    AssignDecision,
    CancelCheckRequest,
    CancelDecision,
    CompletionDecision,
    ConflictCheckRequest,
    ConflictResult,
    DurationSummary,
    ReferenceClockRequest,
    ScheduleValidationResult,
    SchedulingCheckRequest,
    StartCheckRequest,
    StartDecision,
    StartWindow,
)
from appointment_rules.services import (
    completion_service,
    conflict_service,
    scheduling_validation_service,
    status_gate_service,
)
from appointment_rules.utils.time_windows import get_start_window

router = APIRouter(prefix="/appointment-rules", tags=["appointment-rules"])


def _reference_clock(data: ReferenceClockRequest) -> datetime:
    """Caller-supplied clock, or the server clock when omitted."""
    return data.now or datetime.now(timezone.utc)


# =============================================================================
# Status Gates
# =============================================================================

@router.post("/start", response_model=StartDecision)
def check_start(data: StartCheckRequest):
    """Can the acting team member start this appointment?"""
    return status_gate_service.can_start_appointment(
        data.appointment,
        data.current_team_id,
        _reference_clock(data),
        data.has_in_progress_appointment,
    )


@router.post("/assign-to-self", response_model=AssignDecision)
def check_assign_to_self(data: AssignCheckRequest):
    """Can the acting team member take this unassigned appointment?"""
    return status_gate_service.can_assign_to_self(
        data.appointment,
        _reference_clock(data),
        data.is_qualified,
    )


@router.post("/complete", response_model=CompletionDecision)
def check_complete(data: AppointmentCheckRequest):
    """Can this appointment be completed, and has it run long enough?"""
    return status_gate_service.can_complete_appointment(data.appointment, _reference_clock(data))


@router.post("/cancel", response_model=CancelDecision)
def check_cancel(data: CancelCheckRequest):
    """Can this appointment be cancelled by the acting user?"""
    return status_gate_service.can_cancel_appointment(data.appointment, data.is_admin)


# =============================================================================
# Scheduling
# =============================================================================

@router.post("/conflicts", response_model=ConflictResult)
def check_conflicts(data: ConflictCheckRequest):
    """List existing bookings that overlap the proposed interval."""
    return conflict_service.detect_conflicts(
        data.interval.start_time,
        data.interval.end_time,
        data.client_id,
        data.team_id,
        data.existing_appointments,
        data.exclude_id,
    )


@router.post("/validate", response_model=ScheduleValidationResult)
def check_scheduling(data: SchedulingCheckRequest):
    """Approve or reject a prospective booking."""
    return scheduling_validation_service.validate_scheduling(
        data.interval.start_time,
        data.interval.end_time,
        data.client_id,
        data.team_id,
        data.existing_appointments,
        data.available_units,
        data.required_units,
        exclude_id=data.exclude_id,
    )


# =============================================================================
# Previews
# =============================================================================

@router.post("/start-window", response_model=StartWindow)
def preview_start_window(data: AppointmentCheckRequest):
    """When can this appointment be started?"""
    if data.appointment is None:
        return StartWindow(can_start_from=None, can_start_until=None, is_within_window=False)
    return get_start_window(data.appointment, _reference_clock(data))


@router.post("/duration", response_model=DurationSummary)
def preview_duration(data: AppointmentCheckRequest):
    """Elapsed, required and remaining minutes for this appointment."""
    if data.appointment is None:
        return DurationSummary(
            elapsed_minutes=0,
            required_minutes=0,
            remaining_minutes=0,
            has_met_minimum_duration=True,
        )
    return completion_service.evaluate_duration(data.appointment, _reference_clock(data))
