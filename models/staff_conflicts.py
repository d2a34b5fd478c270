"""
Staff conflict detection.

Windows are half-open: [window_start, window_end). Two windows overlap iff
start1 < end2 and start2 < end1, so a window ending at T never collides with
one starting at T. Zero-length windows overlap nothing.
"""

from database import read_snapshot
from models.staff import require_staff_member
from utils.validators import validate_instant, validate_window

_OVERLAP_CONDITION = '''
    sa.window_start < ? AND ? < sa.window_end
    AND sa.window_start < sa.window_end
'''


def find_conflict(
    staff_id: str,
    window_start,
    window_end,
    exclude_assignment_id: str = None
) -> dict:
    """
    Find an active assignment of a staff member overlapping a window.

    Args:
        staff_id: Staff member ID
        window_start: Proposed start
        window_end: Proposed end (exclusive)
        exclude_assignment_id: Assignment to ignore (the one being rescheduled)

    Returns:
        dict: The earliest colliding assignment, or None

    Raises:
        NotFoundError: If the staff member does not exist
        ValidationError: If a boundary is unparseable or the window is inverted
    """
    require_staff_member(staff_id)
    start, end = validate_window(window_start, window_end, allow_empty=True)
    if start == end:
        return None

    query = f'''
        SELECT sa.* FROM staff_assignments sa
        WHERE sa.staff_id = ? AND sa.status = 'active'
          AND {_OVERLAP_CONDITION}
    '''
    params = [staff_id, end, start]

    if exclude_assignment_id:
        query += ' AND sa.id != ?'
        params.append(exclude_assignment_id)

    query += ' ORDER BY sa.window_start LIMIT 1'

    with read_snapshot() as conn:
        row = conn.execute(query, params).fetchone()
    return dict(row) if row else None


def has_conflict(
    staff_id: str,
    window_start,
    window_end,
    exclude_assignment_id: str = None
) -> bool:
    """True if any active assignment of the staff member overlaps the window."""
    return find_conflict(staff_id, window_start, window_end, exclude_assignment_id) is not None


def is_staff_free(
    staff_id: str,
    window_start,
    window_end,
    exclude_assignment_id: str = None
) -> dict:
    """
    Answer "is this staff member free for this window?".

    Combines the manual availability flag with the schedule check.

    Returns:
        dict: {staff_id, window_start, window_end, availability_flag,
               has_conflict, conflict, free}
    """
    member = require_staff_member(staff_id)
    start, end = validate_window(window_start, window_end, allow_empty=True)
    conflict = find_conflict(staff_id, start, end, exclude_assignment_id)

    return {
        'staff_id': staff_id,
        'window_start': start,
        'window_end': end,
        'availability_flag': member['availability_flag'],
        'has_conflict': conflict is not None,
        'conflict': conflict,
        'free': conflict is None and member['availability_flag'] == 'available',
    }


def get_staff_schedule(staff_id: str, range_start=None, range_end=None) -> list:
    """
    Active assignments of a staff member, for the staff calendar.

    Args:
        staff_id: Staff member ID
        range_start: Only assignments ending after this instant
        range_end: Only assignments starting before this instant

    Returns:
        list: Assignment dicts ordered by start

    Raises:
        NotFoundError: If the staff member does not exist
    """
    require_staff_member(staff_id)

    query = '''
        SELECT sa.* FROM staff_assignments sa
        WHERE sa.staff_id = ? AND sa.status = 'active'
    '''
    params = [staff_id]

    if range_start not in (None, '') and range_end not in (None, ''):
        start, end = validate_window(range_start, range_end, allow_empty=True)
        query += ' AND sa.window_start < ? AND ? < sa.window_end'
        params.extend([end, start])
    elif range_start not in (None, ''):
        query += ' AND ? < sa.window_end'
        params.append(validate_instant(range_start, 'start'))
    elif range_end not in (None, ''):
        query += ' AND sa.window_start < ?'
        params.append(validate_instant(range_end, 'end'))

    query += ' ORDER BY sa.window_start'

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]
