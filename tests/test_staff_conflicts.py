"""
Tests for staff catalog and conflict detection.
"""

import pytest

from utils.errors import NotFoundError, ValidationError


class TestStaffCatalog:
    """Tests for staff members."""

    def test_create_and_filter(self, app):
        """Should create staff and filter by role and flag."""
        from models.staff import create_staff_member, get_all_staff

        create_staff_member('Lisa Chen', 'instructor', certification_expiry='2026-03-31')
        create_staff_member('Ana Silva', 'divemaster', availability_flag='unavailable')

        assert [s['name'] for s in get_all_staff(role='instructor')] == ['Lisa Chen']
        assert [s['name'] for s in get_all_staff(available_only=True)] == ['Lisa Chen']

    def test_invalid_fields(self, app):
        """Should reject unknown roles and bad emails."""
        from models.staff import create_staff_member

        with pytest.raises(ValidationError):
            create_staff_member('Captain Tom', 'captain')
        with pytest.raises(ValidationError) as exc:
            create_staff_member('Captain Tom', 'boat_staff', email='not-an-email')
        assert exc.value.field == 'email'

    def test_set_availability(self, app, instructor):
        """Should toggle the manual availability override."""
        from models.staff import set_staff_availability

        member = set_staff_availability(instructor['id'], 'unavailable')
        assert member['availability_flag'] == 'unavailable'

        with pytest.raises(NotFoundError):
            set_staff_availability('missing', 'available')


class TestConflictDetector:
    """Tests for has_conflict / find_conflict against stored assignments."""

    def test_overlap_detected(self, app, booking, instructor):
        """An overlapping active assignment is a conflict."""
        from models.reservation import assign_staff
        from models.staff_conflicts import find_conflict, has_conflict

        first = assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')

        assert has_conflict(instructor['id'], '2024-12-26T12:00', '2024-12-26T16:00') is True
        conflict = find_conflict(instructor['id'], '2024-12-26T12:00', '2024-12-26T16:00')
        assert conflict['id'] == first['assignment']['id']

    def test_boundary_is_free(self, app, booking, instructor):
        """Back-to-back windows do not conflict."""
        from models.reservation import assign_staff
        from models.staff_conflicts import has_conflict

        assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')

        assert has_conflict(instructor['id'], '2024-12-26T14:00', '2024-12-26T16:00') is False
        assert has_conflict(instructor['id'], '2024-12-26T08:00', '2024-12-26T10:00') is False

    def test_nested_and_enclosing_windows(self, app, booking, instructor):
        """Windows inside, around or straddling either end all conflict."""
        from models.reservation import assign_staff
        from models.staff_conflicts import has_conflict

        assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')

        assert has_conflict(instructor['id'], '2024-12-26T11:00', '2024-12-26T12:00') is True
        assert has_conflict(instructor['id'], '2024-12-26T08:00', '2024-12-26T18:00') is True
        assert has_conflict(instructor['id'], '2024-12-26T08:00', '2024-12-26T10:01') is True
        assert has_conflict(instructor['id'], '2024-12-26T13:59', '2024-12-26T18:00') is True
        assert has_conflict(instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00') is True

    def test_zero_length_query(self, app, booking, instructor):
        """A zero-length window never conflicts."""
        from models.reservation import assign_staff
        from models.staff_conflicts import has_conflict

        assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')

        assert has_conflict(instructor['id'], '2024-12-26T12:00', '2024-12-26T12:00') is False

    def test_exclude_assignment(self, app, booking, instructor):
        """The excluded assignment is ignored."""
        from models.reservation import assign_staff
        from models.staff_conflicts import has_conflict

        first = assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')

        assert has_conflict(
            instructor['id'], '2024-12-26T11:00', '2024-12-26T15:00',
            exclude_assignment_id=first['assignment']['id']
        ) is False

    def test_released_assignments_ignored(self, app, booking, instructor):
        """Released assignments no longer block the window."""
        from models.reservation import assign_staff, release_staff
        from models.staff_conflicts import has_conflict

        first = assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')
        release_staff(first['assignment']['id'])

        assert has_conflict(instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00') is False

    def test_unknown_staff(self, app):
        """Unknown staff raises NotFoundError."""
        from models.staff_conflicts import has_conflict

        with pytest.raises(NotFoundError) as exc:
            has_conflict('missing', '2024-12-26T10:00', '2024-12-26T14:00')
        assert exc.value.entity_type == 'staff'

    def test_inverted_window(self, app, instructor):
        """An inverted window is a validation error."""
        from models.staff_conflicts import has_conflict

        with pytest.raises(ValidationError):
            has_conflict(instructor['id'], '2024-12-26T14:00', '2024-12-26T10:00')


class TestStaffQueries:
    """Tests for the free check and staff calendar."""

    def test_is_staff_free(self, app, booking, instructor):
        """Combines the flag with the schedule."""
        from models.reservation import assign_staff
        from models.staff import set_staff_availability
        from models.staff_conflicts import is_staff_free

        assign_staff(booking['id'], instructor['id'], '2024-12-26T10:00', '2024-12-26T14:00')

        busy = is_staff_free(instructor['id'], '2024-12-26T13:00', '2024-12-26T15:00')
        assert busy['free'] is False
        assert busy['has_conflict'] is True
        assert busy['conflict']['window_start'] == '2024-12-26T10:00:00'

        later = is_staff_free(instructor['id'], '2024-12-26T14:00', '2024-12-26T15:00')
        assert later['free'] is True

        set_staff_availability(instructor['id'], 'unavailable')
        flagged = is_staff_free(instructor['id'], '2024-12-26T14:00', '2024-12-26T15:00')
        assert flagged['has_conflict'] is False
        assert flagged['free'] is False

    def test_schedule_range(self, app, booking, instructor):
        """Lists active assignments intersecting the range, in order."""
        from models.reservation import assign_staff
        from models.staff_conflicts import get_staff_schedule

        assign_staff(booking['id'], instructor['id'], '2024-12-27T09:00', '2024-12-27T12:00')
        assign_staff(booking['id'], instructor['id'], '2024-12-26T09:00', '2024-12-26T12:00')
        assign_staff(booking['id'], instructor['id'], '2024-12-28T09:00', '2024-12-28T12:00')

        everything = get_staff_schedule(instructor['id'])
        assert [a['window_start'][:10] for a in everything] == ['2024-12-26', '2024-12-27', '2024-12-28']

        middle = get_staff_schedule(instructor['id'], '2024-12-27', '2024-12-28')
        assert [a['window_start'][:10] for a in middle] == ['2024-12-27']

        from_27 = get_staff_schedule(instructor['id'], range_start='2024-12-27')
        assert len(from_27) == 2
