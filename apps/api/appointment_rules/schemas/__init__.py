"""Pydantic schemas for appointment snapshots, rule decisions and API requests."""

from appointment_rules.schemas.appointment import (
    AppointmentSnapshot,
    AssignDecision,
    CancelDecision,
    CompletionDecision,
    ConflictCandidate,
    ConflictingAppointment,
    ConflictResult,
    DurationSummary,
    ScheduleValidationResult,
    StartDecision,
    StartWindow,
    TimeInterval,
)

__all__ = [
    # Snapshots
    "AppointmentSnapshot",
    "ConflictCandidate",
    "TimeInterval",
    # Decisions
    "AssignDecision",
    "CancelDecision",
    "CompletionDecision",
    "ConflictingAppointment",
    "ConflictResult",
    "DurationSummary",
    "ScheduleValidationResult",
    "StartDecision",
    "StartWindow",
]
