"""
Test configuration and fixtures.

Provides:
- A fixed reference clock (the engine never reads the wall clock)
- An appointment snapshot factory
- HTTPX AsyncClient over the ASGI app
"""
import os
from datetime import datetime
from typing import AsyncGenerator, Callable
from zoneinfo import ZoneInfo

import pytest
from httpx import AsyncClient, ASGITransport

# Disable rate limiting for tests
os.environ["TESTING"] = "1"

from appointment_rules.schemas.appointment import AppointmentSnapshot

LOCAL_TZ_NAME = "America/Los_Angeles"
LOCAL_TZ = ZoneInfo(LOCAL_TZ_NAME)


# =============================================================================
# Reference Clock
# =============================================================================

@pytest.fixture
def now() -> datetime:
    """Wednesday 2025-06-11 10:00 local time."""
    return datetime(2025, 6, 11, 10, 0, tzinfo=LOCAL_TZ)


# =============================================================================
# Appointment Fixtures
# =============================================================================

@pytest.fixture
def make_appointment() -> Callable[..., AppointmentSnapshot]:
    """Build an AppointmentSnapshot with sensible defaults; keyword overrides win."""

    def _make(**overrides) -> AppointmentSnapshot:
        data = {
            "id": 1,
            "client_id": 100,
            "team_id": 7,
            "status": "scheduled",
            "title": "Personal care visit",
            "units_required": 4,
            "timezone": LOCAL_TZ_NAME,
        }
        data.update(overrides)
        return AppointmentSnapshot.model_validate(data)

    return _make


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient bound to the ASGI app."""
    from appointment_rules.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
