"""API routers."""

from appointment_rules.routers.appointment_rules import router as appointment_rules_router

__all__ = [
    "appointment_rules_router",
]
