"""Structured logging helpers (PHI-safe)."""

from typing import Any


def build_decision_log_context(
    *,
    action: str,
    appointment_id: Any = None,
    client_id: Any = None,
    team_id: Any = None,
    error_code: str | None = None,
) -> dict[str, Any]:
    """Return a PHI-safe log context dict for a rule decision.

    Only opaque identifiers and codes are included; titles, names and
    free-text reasons stay out of the logs.
    """
    context: dict[str, Any] = {"action": action}
    if appointment_id is not None:
        context["appointment_id"] = appointment_id
    if client_id is not None:
        context["client_id"] = client_id
    if team_id is not None:
        context["team_id"] = team_id
    if error_code:
        context["error_code"] = error_code
    return context
