"""Conflict detection - interval overlap on the client and team member axes.

Overlap uses half-open intervals: [start1, end1) and [start2, end2) conflict
iff start1 < end2 and end1 > start2, so back-to-back bookings never collide.

Detection runs against the sibling snapshot the caller supplies. A passing
result is advisory until the write lands under a conflict-free commit.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from appointment_rules.core.structured_logging import build_decision_log_context
from appointment_rules.enums import NON_BLOCKING_STATUSES, ConflictAxis
from appointment_rules.schemas.appointment import (
    ConflictCandidate,
    ConflictingAppointment,
    ConflictResult,
    coerce_snapshot,
)
from appointment_rules.utils.datetime_parsing import parse_datetime

logger = logging.getLogger(__name__)

UNTITLED_APPOINTMENT = "Untitled Appointment"


def has_time_conflict(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """Check whether [start1, end1) overlaps [start2, end2)."""
    return start1 < end2 and end1 > start2


def _coerce_candidates(existing_appointments: Iterable[Any]) -> list[ConflictCandidate]:
    return [coerce_snapshot(appt, ConflictCandidate) for appt in existing_appointments]


def _find_axis_conflicts(
    new_start: datetime,
    new_end: datetime,
    axis: ConflictAxis,
    resource_id: Any,
    existing_appointments: list[ConflictCandidate],
    exclude_id: Any = None,
) -> list[ConflictCandidate]:
    # Ids arrive as JSON numbers or strings; 100 and "100" name the same record
    conflicts = []
    for appt in existing_appointments:
        # Skip the record being edited
        if exclude_id is not None and str(appt.id) == str(exclude_id):
            continue
        owner_id = appt.client_id if axis == ConflictAxis.CLIENT else appt.team_id
        if owner_id is None or str(owner_id) != str(resource_id):
            continue
        if appt.status in NON_BLOCKING_STATUSES:
            continue
        # Open-ended records have no interval to compare
        if appt.start_time is None or appt.end_time is None:
            continue
        if has_time_conflict(new_start, new_end, appt.start_time, appt.end_time):
            conflicts.append(appt)
    return conflicts


def check_client_conflicts(
    new_start: datetime,
    new_end: datetime,
    client_id: Any,
    existing_appointments: Iterable[Any],
    exclude_id: Any = None,
) -> list[ConflictCandidate]:
    """Existing bookings of the same client that overlap the new interval."""
    return _find_axis_conflicts(
        parse_datetime(new_start),
        parse_datetime(new_end),
        ConflictAxis.CLIENT,
        client_id,
        _coerce_candidates(existing_appointments),
        exclude_id,
    )


def check_team_conflicts(
    new_start: datetime,
    new_end: datetime,
    team_id: Any,
    existing_appointments: Iterable[Any],
    exclude_id: Any = None,
) -> list[ConflictCandidate]:
    """Existing bookings of the same team member that overlap the new interval."""
    return _find_axis_conflicts(
        parse_datetime(new_start),
        parse_datetime(new_end),
        ConflictAxis.TEAM,
        team_id,
        _coerce_candidates(existing_appointments),
        exclude_id,
    )


def _to_conflicting(appt: ConflictCandidate, axis: ConflictAxis) -> ConflictingAppointment:
    return ConflictingAppointment(
        id=appt.id,
        title=appt.title or UNTITLED_APPOINTMENT,
        start_time=appt.start_time,
        end_time=appt.end_time,
        conflict_type=axis,
        status=appt.status,
    )


def detect_conflicts(
    new_start: datetime,
    new_end: datetime,
    client_id: Any,
    team_id: Any,
    existing_appointments: Iterable[Any],
    exclude_id: Any = None,
) -> ConflictResult:
    """
    Full conflict detection for a prospective booking.

    Checks the client axis always and the team axis only when a team member is
    assigned. Returns every conflicting record tagged with its axis (client
    conflicts first); a sibling colliding on both axes is listed twice.
    """
    new_start = parse_datetime(new_start)
    new_end = parse_datetime(new_end)
    candidates = _coerce_candidates(existing_appointments)

    client_conflicts = _find_axis_conflicts(
        new_start, new_end, ConflictAxis.CLIENT, client_id, candidates, exclude_id
    )
    team_conflicts = (
        _find_axis_conflicts(new_start, new_end, ConflictAxis.TEAM, team_id, candidates, exclude_id)
        if team_id is not None
        else []
    )

    conflicts = [_to_conflicting(appt, ConflictAxis.CLIENT) for appt in client_conflicts]
    conflicts += [_to_conflicting(appt, ConflictAxis.TEAM) for appt in team_conflicts]

    messages: list[str] = []
    if client_conflicts:
        messages.append(f"Found {len(client_conflicts)} conflicting client appointment(s)")
    if team_conflicts:
        messages.append(f"Found {len(team_conflicts)} conflicting team appointment(s)")

    if conflicts:
        logger.info(
            "Scheduling conflicts detected client=%d team=%d",
            len(client_conflicts),
            len(team_conflicts),
            extra=build_decision_log_context(
                action="detect_conflicts",
                appointment_id=exclude_id,
                client_id=client_id,
                team_id=team_id,
            ),
        )

    return ConflictResult(
        has_conflict=bool(conflicts),
        conflicts=conflicts,
        message=". ".join(messages) or None,
    )
