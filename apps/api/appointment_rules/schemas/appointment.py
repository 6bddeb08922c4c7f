"""Appointment rule schemas - snapshots in, decisions out."""

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

from appointment_rules.enums import AppointmentStatus, ConflictAxis, DecisionErrorCode
from appointment_rules.utils.datetime_parsing import normalize_to_utc, resolve_timezone

AppointmentId = int | str


# =============================================================================
# Snapshots
# =============================================================================

class ConflictCandidate(BaseModel):
    """Read-only projection of an existing appointment used for overlap checks."""
    TIMESTAMP_FIELDS: ClassVar[tuple[str, ...]] = ("start_time", "end_time")

    id: AppointmentId
    client_id: AppointmentId | None = None
    team_id: AppointmentId | None = None
    status: AppointmentStatus
    start_time: datetime | None = None
    end_time: datetime | None = None
    title: str | None = None
    # IANA zone for naive timestamps and the local-day boundary
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        if value:
            resolve_timezone(value)
        return value or None

    @model_validator(mode="after")
    def normalize_timestamps(self):
        """Store every timestamp as aware UTC; naive values are local to `timezone`."""
        for field_name in self.TIMESTAMP_FIELDS:
            value = getattr(self, field_name)
            if value is not None:
                setattr(self, field_name, normalize_to_utc(value, self.timezone))
        return self


class AppointmentSnapshot(ConflictCandidate):
    """Appointment as supplied by the caller; the engine only reads it."""
    TIMESTAMP_FIELDS: ClassVar[tuple[str, ...]] = ("start_time", "end_time", "started_at")

    started_at: datetime | None = None
    units_required: int | None = Field(None, ge=0)


class TimeInterval(BaseModel):
    """Proposed booking interval [start_time, end_time)."""
    start_time: datetime
    end_time: datetime
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        if value:
            resolve_timezone(value)
        return value or None

    @model_validator(mode="after")
    def validate_order(self):
        start = normalize_to_utc(self.start_time, self.timezone)
        end = normalize_to_utc(self.end_time, self.timezone)
        if end <= start:
            raise ValueError("end_time must be after start_time")
        self.start_time = start
        self.end_time = end
        return self


# =============================================================================
# Decisions
# =============================================================================

class StartDecision(BaseModel):
    """Result of the start gate."""
    can_start: bool
    reason: str | None = None
    error_code: DecisionErrorCode | None = None


class AssignDecision(BaseModel):
    """Result of the self-assign gate."""
    can_assign: bool
    reason: str | None = None
    error_code: DecisionErrorCode | None = None


class CompletionDecision(BaseModel):
    """Result of the completion gate, including minimum-duration bookkeeping."""
    can_complete: bool
    has_met_minimum_duration: bool = False
    elapsed_minutes: int = 0
    required_minutes: int = 0
    reason: str | None = None
    error_code: DecisionErrorCode | None = None


class CancelDecision(BaseModel):
    """Result of the cancel gate."""
    can_cancel: bool
    reason: str | None = None
    error_code: DecisionErrorCode | None = None


class DurationSummary(BaseModel):
    """Elapsed vs. required minutes for a started appointment."""
    elapsed_minutes: int
    required_minutes: int
    remaining_minutes: int
    has_met_minimum_duration: bool


class StartWindow(BaseModel):
    """Window in which an appointment may be started."""
    can_start_from: datetime | None
    can_start_until: datetime | None
    is_within_window: bool


class ConflictingAppointment(BaseModel):
    """An existing booking that overlaps the proposed interval on one axis."""
    id: AppointmentId
    title: str
    start_time: datetime
    end_time: datetime
    conflict_type: ConflictAxis
    status: AppointmentStatus


class ConflictResult(BaseModel):
    """All overlaps found for a proposed interval."""
    has_conflict: bool
    conflicts: list[ConflictingAppointment] = Field(default_factory=list)
    message: str | None = None


class ScheduleValidationResult(BaseModel):
    """Approve/reject outcome for a prospective booking. Warnings never block."""
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# Requests (HTTP surface)
# =============================================================================

class ReferenceClockRequest(BaseModel):
    """Base for requests evaluated against a reference clock."""
    now: datetime | None = Field(
        None, description="Reference clock; the server clock (UTC) is used when omitted"
    )

    @field_validator("now")
    @classmethod
    def normalize_now(cls, value: datetime | None) -> datetime | None:
        return normalize_to_utc(value) if value is not None else None


class StartCheckRequest(ReferenceClockRequest):
    appointment: AppointmentSnapshot | None = None
    current_team_id: AppointmentId | None = None
    has_in_progress_appointment: bool = False


class AssignCheckRequest(ReferenceClockRequest):
    appointment: AppointmentSnapshot | None = None
    is_qualified: bool = True


class AppointmentCheckRequest(ReferenceClockRequest):
    appointment: AppointmentSnapshot | None = None


class CancelCheckRequest(BaseModel):
    appointment: AppointmentSnapshot | None = None
    is_admin: bool = False


class ConflictCheckRequest(BaseModel):
    interval: TimeInterval
    client_id: AppointmentId
    team_id: AppointmentId | None = None
    existing_appointments: list[ConflictCandidate] = Field(default_factory=list)
    exclude_id: AppointmentId | None = None


class SchedulingCheckRequest(ConflictCheckRequest):
    available_units: int | None = None
    required_units: int | None = Field(None, ge=0)


def coerce_snapshot(value: Any, model: type[ConflictCandidate] = AppointmentSnapshot) -> Any:
    """Accept a model instance or a plain mapping (e.g. decoded JSON) as a snapshot."""
    if value is None or isinstance(value, model):
        return value
    if isinstance(value, BaseModel):
        return model.model_validate(value.model_dump())
    return model.model_validate(value)
