"""Scheduling validation - conflicts plus unit availability for a prospective booking."""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from appointment_rules.core.config import settings
from appointment_rules.schemas.appointment import ScheduleValidationResult
from appointment_rules.services.conflict_service import detect_conflicts

logger = logging.getLogger(__name__)


def check_unit_availability(
    available_units: int | None,
    required_units: int | None,
    *,
    warning_ratio: float | None = None,
) -> tuple[list[str], list[str]]:
    """
    Compare required units against the client's remaining balance.

    Returns (errors, warnings). Skipped unless both counts are supplied.
    """
    errors: list[str] = []
    warnings: list[str] = []
    if available_units is None or required_units is None:
        return errors, warnings

    if warning_ratio is None:
        warning_ratio = settings.LOW_UNITS_WARNING_RATIO

    if required_units > available_units:
        errors.append(
            f"Insufficient units available. Required: {required_units}, Available: {available_units}"
        )
    elif required_units > available_units * warning_ratio:
        warnings.append(
            f"Low units remaining after this appointment: {available_units - required_units}"
        )
    return errors, warnings


def validate_scheduling(
    start_time: datetime,
    end_time: datetime,
    client_id: Any,
    team_id: Any,
    existing_appointments: Iterable[Any],
    available_units: int | None = None,
    required_units: int | None = None,
    *,
    exclude_id: Any = None,
    warning_ratio: float | None = None,
) -> ScheduleValidationResult:
    """
    Validate that an appointment can be scheduled.

    Rules:
    1. No conflicting client or team member bookings
    2. Client has enough units (low-balance warning never blocks)
    """
    errors: list[str] = []
    warnings: list[str] = []

    conflicts = detect_conflicts(
        start_time, end_time, client_id, team_id, existing_appointments, exclude_id
    )
    if conflicts.has_conflict:
        errors.append(conflicts.message or "Scheduling conflict detected")

    unit_errors, unit_warnings = check_unit_availability(
        available_units, required_units, warning_ratio=warning_ratio
    )
    errors.extend(unit_errors)
    warnings.extend(unit_warnings)

    if errors:
        logger.debug("Scheduling rejected with %d error(s)", len(errors))

    return ScheduleValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
