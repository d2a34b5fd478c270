"""
Booking records.
Read access to the booking anchors that assignments attach to.
Bookings are owned by the booking workflow; the engine never edits them.
"""

import uuid

from database import read_snapshot, transaction
from utils.errors import NotFoundError, ValidationError
from utils.validators import validate_required_text, validate_window


def get_booking(booking_id: str) -> dict:
    """
    Get booking by ID.

    Args:
        booking_id: Booking ID

    Returns:
        dict: Booking or None if not found
    """
    with read_snapshot() as conn:
        row = conn.execute('SELECT * FROM bookings WHERE id = ?', (booking_id,)).fetchone()
    return dict(row) if row else None


def require_booking(booking_id: str) -> dict:
    """Get booking by ID or raise NotFoundError."""
    booking = get_booking(booking_id)
    if booking is None:
        raise NotFoundError('booking', booking_id)
    return booking


def list_bookings(diver_id: str = None, limit: int = 100, offset: int = 0) -> list:
    """
    List bookings, most recent check-in first.

    Args:
        diver_id: Filter by diver
        limit: Maximum number of records
        offset: Records to skip

    Returns:
        list: Booking dicts
    """
    query = 'SELECT * FROM bookings WHERE 1=1'
    params = []

    if diver_id:
        query += ' AND diver_id = ?'
        params.append(diver_id)

    query += ' ORDER BY window_start DESC LIMIT ? OFFSET ?'
    params.extend([limit, offset])

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]


def create_booking(
    diver_id: str,
    window_start,
    window_end,
    course_id: str = None,
    group_id: str = None,
    accommodation_id: str = None,
    notes: str = None,
    booking_id: str = None
) -> dict:
    """
    Register a booking anchor on behalf of the booking workflow.

    Check-out may equal check-in for point-in-time events.

    Args:
        diver_id: Diver reference
        window_start: Check-in
        window_end: Check-out
        course_id: Optional course reference
        group_id: Optional group reference
        accommodation_id: Optional accommodation reference
        notes: Free text
        booking_id: Caller supplied id (defaults to a new uuid)

    Returns:
        dict: Created booking
    """
    diver_id = validate_required_text(diver_id, 'diver_id')
    start, end = validate_window(window_start, window_end, allow_empty=True)
    booking_id = booking_id or str(uuid.uuid4())

    with transaction() as conn:
        if conn.execute('SELECT 1 FROM bookings WHERE id = ?', (booking_id,)).fetchone():
            raise ValidationError(f"Booking {booking_id} already exists", 'id')

        conn.execute('''
            INSERT INTO bookings (
                id, diver_id, window_start, window_end,
                course_id, group_id, accommodation_id, notes
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (booking_id, diver_id, start, end, course_id, group_id, accommodation_id, notes))

    return get_booking(booking_id)
