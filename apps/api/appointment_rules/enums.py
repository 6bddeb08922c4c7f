"""Appointment lifecycle and decision enums."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """
    Appointment lifecycle status.

    Flow: unassigned → scheduled → in_progress → completed
                  ↘ late ↗       ↘ terminated_by_client
                                 ↘ terminated_by_staff
          any non-terminal → cancelled | deleted | no_show | rejected
    """

    UNASSIGNED = "unassigned"  # No team member bound yet
    SCHEDULED = "scheduled"
    LATE = "late"  # Scheduled, start time passed without a start
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DELETED = "deleted"
    NO_SHOW = "no_show"
    REJECTED = "rejected"
    TERMINATED_BY_CLIENT = "terminated_by_client"
    TERMINATED_BY_STAFF = "terminated_by_staff"


class ConflictAxis(str, Enum):
    """Resource an overlapping booking collides on."""

    CLIENT = "client"
    TEAM = "team"


class DecisionErrorCode(str, Enum):
    """Stable machine-readable codes returned with rejected decisions."""

    NO_APPOINTMENT = "no_appointment"
    INVALID_STATUS = "invalid_status"
    NOT_ASSIGNED = "not_assigned"
    NO_START_TIME = "no_start_time"
    NOT_TODAY = "not_today"
    TOO_EARLY = "too_early"
    TOO_LATE = "too_late"
    ALREADY_ENDED = "already_ended"
    HAS_ACTIVE_APPOINTMENT = "has_active_appointment"
    NOT_UNASSIGNED = "not_unassigned"
    NOT_QUALIFIED = "not_qualified"
    NOT_IN_PROGRESS = "not_in_progress"
    NO_START_TIME_RECORDED = "no_start_time_recorded"
    ALREADY_COMPLETED = "already_completed"
    ALREADY_CANCELLED = "already_cancelled"
    IN_PROGRESS_REQUIRES_ADMIN = "in_progress_requires_admin"


STARTABLE_STATUSES = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.LATE})

# Finished appointments; cancelling them is refused.
COMPLETED_LIKE_STATUSES = frozenset(
    {
        AppointmentStatus.COMPLETED,
        AppointmentStatus.TERMINATED_BY_CLIENT,
        AppointmentStatus.TERMINATED_BY_STAFF,
    }
)

# Records that never occupy a client's or team member's time.
NON_BLOCKING_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.DELETED})

TERMINAL_STATUSES = COMPLETED_LIKE_STATUSES | NON_BLOCKING_STATUSES | {AppointmentStatus.REJECTED}
