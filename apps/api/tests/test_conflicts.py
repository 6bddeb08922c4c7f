"""
Tests for conflict detection.

Coverage:
- Overlap predicate (symmetry, half-open boundaries)
- Client and team axes
- Exclusion of the record being edited
- Cancelled/deleted and open-ended siblings
"""

from datetime import datetime, timezone

import pytest

from appointment_rules.enums import ConflictAxis
from appointment_rules.services.conflict_service import (
    check_client_conflicts,
    check_team_conflicts,
    detect_conflicts,
    has_time_conflict,
)

DAY = datetime(2025, 6, 11, 16, 0, tzinfo=timezone.utc)  # 09:00 Pacific


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=DAY.hour + hour - 9, minute=minute)


@pytest.fixture
def existing_visit(make_appointment):
    """Client 100 with team member 7, 09:00-10:00."""
    return make_appointment(id=1, client_id=100, team_id=7, start_time=at(9), end_time=at(10))


# =============================================================================
# Overlap Predicate
# =============================================================================

INTERVAL_PAIRS = [
    (at(9), at(10), at(9, 30), at(10, 30)),  # partial overlap
    (at(9), at(10), at(10), at(11)),  # back-to-back
    (at(9), at(12), at(10), at(11)),  # containment
    (at(9), at(10), at(9), at(10)),  # identical
    (at(9), at(10), at(11), at(12)),  # disjoint
]


@pytest.mark.parametrize("a_start,a_end,b_start,b_end", INTERVAL_PAIRS)
def test_overlap_is_symmetric(a_start, a_end, b_start, b_end):
    assert has_time_conflict(a_start, a_end, b_start, b_end) == has_time_conflict(b_start, b_end, a_start, a_end)


def test_back_to_back_does_not_conflict():
    assert has_time_conflict(at(9), at(10), at(10), at(11)) is False


def test_containment_conflicts():
    assert has_time_conflict(at(9), at(12), at(10), at(11)) is True


# =============================================================================
# Axes
# =============================================================================

class TestDetectConflicts:
    """End-to-end conflict detection."""

    def test_client_axis_conflict(self, existing_visit):
        result = detect_conflicts(at(9, 30), at(10, 30), 100, 8, [existing_visit])

        assert result.has_conflict is True
        assert len(result.conflicts) == 1
        conflict = result.conflicts[0]
        assert conflict.conflict_type == ConflictAxis.CLIENT
        assert conflict.id == 1
        assert conflict.title == "Personal care visit"
        assert result.message == "Found 1 conflicting client appointment(s)"

    def test_team_axis_conflict(self, existing_visit):
        result = detect_conflicts(at(9, 30), at(10, 30), 200, 7, [existing_visit])

        assert result.has_conflict is True
        assert [c.conflict_type for c in result.conflicts] == [ConflictAxis.TEAM]
        assert result.message == "Found 1 conflicting team appointment(s)"

    def test_both_axes_list_sibling_twice(self, existing_visit):
        result = detect_conflicts(at(9, 30), at(10, 30), 100, 7, [existing_visit])

        assert [c.conflict_type for c in result.conflicts] == [ConflictAxis.CLIENT, ConflictAxis.TEAM]
        assert result.message == (
            "Found 1 conflicting client appointment(s). Found 1 conflicting team appointment(s)"
        )

    def test_no_team_skips_team_axis(self, existing_visit):
        result = detect_conflicts(at(9, 30), at(10, 30), 200, None, [existing_visit])
        assert result.has_conflict is False
        assert result.conflicts == []
        assert result.message is None

    def test_exclude_id_prevents_self_conflict(self, existing_visit):
        result = detect_conflicts(at(9, 15), at(10, 15), 100, 7, [existing_visit], exclude_id=existing_visit.id)
        assert result.has_conflict is False

    @pytest.mark.parametrize("status", ["cancelled", "deleted"])
    def test_cancelled_and_deleted_ignored(self, make_appointment, status):
        sibling = make_appointment(status=status, start_time=at(9), end_time=at(10))
        assert detect_conflicts(at(9), at(10), 100, 7, [sibling]).has_conflict is False

    @pytest.mark.parametrize("status", ["unassigned", "late", "in_progress", "completed", "no_show"])
    def test_other_statuses_participate(self, make_appointment, status):
        sibling = make_appointment(status=status, start_time=at(9), end_time=at(10))
        assert detect_conflicts(at(9), at(10), 100, None, [sibling]).has_conflict is True

    def test_open_ended_sibling_ignored(self, make_appointment):
        sibling = make_appointment(start_time=at(9))
        assert detect_conflicts(at(9), at(10), 100, 7, [sibling]).has_conflict is False

    def test_untitled_sibling(self, make_appointment):
        sibling = make_appointment(title=None, start_time=at(9), end_time=at(10))
        result = detect_conflicts(at(9), at(10), 100, None, [sibling])
        assert result.conflicts[0].title == "Untitled Appointment"

    def test_accepts_mappings_and_iso_strings(self):
        siblings = [
            {
                "id": "abc",
                "client_id": 100,
                "team_id": 7,
                "status": "scheduled",
                "start_time": "2025-06-11T09:00:00",
                "end_time": "2025-06-11T10:00:00",
                "timezone": "America/Los_Angeles",
            }
        ]
        result = detect_conflicts("2025-06-11T16:30:00Z", "2025-06-11T17:30:00Z", 100, None, siblings)
        assert result.has_conflict is True
        assert result.conflicts[0].id == "abc"
        assert result.conflicts[0].start_time == at(9)

    def test_multiple_conflicts_counted_per_axis(self, make_appointment):
        siblings = [
            make_appointment(id=1, client_id=100, team_id=3, start_time=at(9), end_time=at(10)),
            make_appointment(id=2, client_id=100, team_id=4, start_time=at(10), end_time=at(11)),
            make_appointment(id=3, client_id=300, team_id=7, start_time=at(10), end_time=at(12)),
            make_appointment(id=4, client_id=300, team_id=7, start_time=at(12), end_time=at(13)),
        ]
        result = detect_conflicts(at(9, 30), at(11), 100, 7, siblings)

        assert [(c.id, c.conflict_type) for c in result.conflicts] == [
            (1, ConflictAxis.CLIENT),
            (2, ConflictAxis.CLIENT),
            (3, ConflictAxis.TEAM),
        ]
        assert result.message == (
            "Found 2 conflicting client appointment(s). Found 1 conflicting team appointment(s)"
        )


class TestAxisHelpers:
    def test_check_client_conflicts(self, existing_visit, make_appointment):
        other_client = make_appointment(id=2, client_id=200, start_time=at(9), end_time=at(10))
        conflicts = check_client_conflicts(at(9), at(10), 100, [existing_visit, other_client])
        assert [c.id for c in conflicts] == [1]

    def test_check_team_conflicts(self, existing_visit, make_appointment):
        other_member = make_appointment(id=2, team_id=8, start_time=at(9), end_time=at(10))
        conflicts = check_team_conflicts(at(9), at(10), 8, [existing_visit, other_member])
        assert [c.id for c in conflicts] == [2]

    def test_unassigned_sibling_never_matches_team(self, make_appointment):
        sibling = make_appointment(team_id=None, status="unassigned", start_time=at(9), end_time=at(10))
        assert check_team_conflicts(at(9), at(10), 7, [sibling]) == []

    def test_exclude_id(self, existing_visit):
        assert check_team_conflicts(at(9), at(10), 7, [existing_visit], exclude_id=1) == []

    def test_numeric_and_string_ids_match(self, make_appointment):
        sibling = make_appointment(id="1", client_id="100", team_id="7", start_time=at(9), end_time=at(10))
        assert [c.id for c in check_client_conflicts(at(9), at(10), 100, [sibling])] == ["1"]
        assert [c.id for c in check_team_conflicts(at(9), at(10), 7, [sibling])] == ["1"]
        assert check_client_conflicts(at(9), at(10), 100, [sibling], exclude_id=1) == []
