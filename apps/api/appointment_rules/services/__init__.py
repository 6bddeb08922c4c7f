"""Appointment rule services."""

from appointment_rules.services.completion_service import evaluate_duration
from appointment_rules.services.conflict_service import (
    check_client_conflicts,
    check_team_conflicts,
    detect_conflicts,
    has_time_conflict,
)
from appointment_rules.services.scheduling_validation_service import validate_scheduling
from appointment_rules.services.status_gate_service import (
    can_assign_to_self,
    can_cancel_appointment,
    can_complete_appointment,
    can_start_appointment,
)

__all__ = [
    # Status gates
    "can_start_appointment",
    "can_assign_to_self",
    "can_complete_appointment",
    "can_cancel_appointment",
    # Conflicts
    "has_time_conflict",
    "check_client_conflicts",
    "check_team_conflicts",
    "detect_conflicts",
    # Scheduling
    "validate_scheduling",
    # Duration
    "evaluate_duration",
]
