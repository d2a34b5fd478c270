"""
Reservation orchestrator.

The only writer of allocation state. Reserves and returns equipment units,
assigns, reschedules and releases staff against bookings.

Every operation validates its input before touching state, raises
NotFoundError for unknown ids, and returns a result dict:

    {'success': True, 'assignment': {...}}
    {'success': False, 'error': 'insufficient_availability', 'message': ..., 'requested': 3, 'available': 2}

Storage failures raise PersistenceError and are safe to retry.
"""

import logging

from database import read_snapshot
from models.allocation import CapacityRule, ExclusiveRule, allocate, finish, move, require_assignment
from models.booking import require_booking
from models.equipment import require_equipment
from models.staff import require_staff_member
from utils.audit import log_audit
from utils.errors import ValidationError
from utils.validators import validate_quantity, validate_required_text, validate_window

logger = logging.getLogger(__name__)

equipment_rule = CapacityRule()
staff_rule = ExclusiveRule()

ASSIGNMENT_STATUSES = {
    'rental': ('active', 'returned'),
    'staff': ('active', 'released'),
}


# =============================================================================
# EQUIPMENT
# =============================================================================

def reserve_equipment(
    booking_id: str,
    equipment_id: str,
    quantity: int,
    window_start,
    window_end,
    notes: str = None,
    timeout: float = None
) -> dict:
    """
    Reserve units of an equipment item for a booking.

    Args:
        booking_id: Booking the rental attaches to
        equipment_id: Equipment item to rent
        quantity: Units requested (> 0)
        window_start: Rental start
        window_end: Rental end (exclusive, after start)
        notes: Free text
        timeout: Lock and database wait override in seconds

    Returns:
        dict: Success with the new assignment, or an
              'insufficient_availability' rejection with requested/available

    Raises:
        ValidationError: Bad quantity or window, or item not rentable
        NotFoundError: Unknown booking or equipment
        PersistenceError: Storage failure or lock timeout
    """
    booking_id = validate_required_text(booking_id, 'booking_id')
    equipment_id = validate_required_text(equipment_id, 'equipment_id')
    quantity = validate_quantity(quantity)
    start, end = validate_window(window_start, window_end)

    require_booking(booking_id)
    item = require_equipment(equipment_id)
    if not item['rentable']:
        raise ValidationError(f"Equipment {item['name']} is not rentable", 'equipment_id')

    result = allocate(equipment_rule, equipment_id, {
        'booking_id': booking_id,
        'quantity': quantity,
        'window_start': start,
        'window_end': end,
        'notes': notes,
    }, timeout)

    if result['success']:
        assignment = result['assignment']
        log_audit('CREATE', 'rental_assignment', assignment['id'], after=assignment)
        logger.info(
            f"Reserved {quantity} x {item['name']} ({equipment_id}) for booking {booking_id}"
        )
    return result


def return_equipment(assignment_id: str, timeout: float = None) -> dict:
    """
    Return the units held by a rental assignment.

    Returns:
        dict: Success with the returned assignment, or an 'already_returned'
              rejection on a second call

    Raises:
        NotFoundError: Unknown assignment
        PersistenceError: Storage failure or lock timeout
    """
    result = finish(equipment_rule, assignment_id, timeout)

    if result['success']:
        assignment = result['assignment']
        log_audit(
            'RETURN', 'rental_assignment', assignment_id,
            before={'status': 'active'}, after=assignment
        )
        logger.info(
            f"Returned {assignment['quantity']} units of {assignment['equipment_id']} "
            f"from assignment {assignment_id}"
        )
    return result


def get_rental_assignment(assignment_id: str) -> dict:
    """Get a rental assignment or raise NotFoundError."""
    return require_assignment(equipment_rule, assignment_id)


def list_rental_assignments(
    booking_id: str = None,
    equipment_id: str = None,
    status: str = None
) -> list:
    """
    List rental assignments with the equipment name, newest first.

    Args:
        booking_id: Filter by booking
        equipment_id: Filter by equipment item
        status: 'active' or 'returned'

    Returns:
        list: Assignment dicts
    """
    query = '''
        SELECT ra.*, e.name AS equipment_name, e.category AS equipment_category
        FROM rental_assignments ra
        JOIN equipment e ON ra.equipment_id = e.id
        WHERE 1=1
    '''
    params = []

    if booking_id:
        query += ' AND ra.booking_id = ?'
        params.append(booking_id)

    if equipment_id:
        query += ' AND ra.equipment_id = ?'
        params.append(equipment_id)

    if status:
        if status not in ASSIGNMENT_STATUSES['rental']:
            raise ValidationError(f"Invalid status {status!r}", 'status')
        query += ' AND ra.status = ?'
        params.append(status)

    query += ' ORDER BY ra.created_at DESC, ra.window_start DESC'

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]


# =============================================================================
# STAFF
# =============================================================================

def assign_staff(
    booking_id: str,
    staff_id: str,
    window_start,
    window_end,
    timeout: float = None
) -> dict:
    """
    Assign a staff member to a booking for a window.

    Args:
        booking_id: Booking the assignment attaches to
        staff_id: Instructor, divemaster or boat staff member
        window_start: Start
        window_end: End (exclusive, after start)
        timeout: Lock and database wait override in seconds

    Returns:
        dict: Success with the new assignment, or a 'schedule_conflict'
              rejection naming the colliding assignment

    Raises:
        ValidationError: Bad window or staff member flagged unavailable
        NotFoundError: Unknown booking or staff member
        PersistenceError: Storage failure or lock timeout
    """
    booking_id = validate_required_text(booking_id, 'booking_id')
    staff_id = validate_required_text(staff_id, 'staff_id')
    start, end = validate_window(window_start, window_end)

    require_booking(booking_id)
    member = require_staff_member(staff_id)
    if member['availability_flag'] != 'available':
        raise ValidationError(f"Staff member {member['name']} is unavailable", 'staff_id')

    result = allocate(staff_rule, staff_id, {
        'booking_id': booking_id,
        'window_start': start,
        'window_end': end,
    }, timeout)

    if result['success']:
        assignment = result['assignment']
        log_audit('CREATE', 'staff_assignment', assignment['id'], after=assignment)
        logger.info(f"Assigned {member['name']} ({staff_id}) to booking {booking_id} {start}-{end}")
    return result


def reschedule_staff_assignment(
    assignment_id: str,
    new_start,
    new_end,
    timeout: float = None
) -> dict:
    """
    Move a staff assignment to a new window without releasing the slot.

    Returns:
        dict: Success with the updated assignment, a 'schedule_conflict'
              rejection, or 'already_released' for a released assignment

    Raises:
        ValidationError: Bad window
        NotFoundError: Unknown assignment
        PersistenceError: Storage failure or lock timeout
    """
    start, end = validate_window(new_start, new_end)
    before = get_staff_assignment(assignment_id)

    result = move(staff_rule, assignment_id, start, end, timeout)

    if result['success']:
        log_audit(
            'RESCHEDULE', 'staff_assignment', assignment_id,
            before={'window_start': before['window_start'], 'window_end': before['window_end']},
            after=result['assignment']
        )
        logger.info(f"Rescheduled staff assignment {assignment_id} to {start}-{end}")
    return result


def release_staff(assignment_id: str, timeout: float = None) -> dict:
    """
    Release a staff member from a booking.

    Returns:
        dict: Success with the released assignment, or an 'already_released'
              rejection on a second call

    Raises:
        NotFoundError: Unknown assignment
        PersistenceError: Storage failure or lock timeout
    """
    result = finish(staff_rule, assignment_id, timeout)

    if result['success']:
        log_audit(
            'RELEASE', 'staff_assignment', assignment_id,
            before={'status': 'active'}, after=result['assignment']
        )
        logger.info(f"Released staff assignment {assignment_id}")
    return result


def get_staff_assignment(assignment_id: str) -> dict:
    """Get a staff assignment or raise NotFoundError."""
    return require_assignment(staff_rule, assignment_id)


def list_staff_assignments(
    booking_id: str = None,
    staff_id: str = None,
    status: str = None
) -> list:
    """
    List staff assignments with staff name and role, ordered by start.

    Args:
        booking_id: Filter by booking
        staff_id: Filter by staff member
        status: 'active' or 'released'

    Returns:
        list: Assignment dicts
    """
    query = '''
        SELECT sa.*, s.name AS staff_name, s.role AS staff_role
        FROM staff_assignments sa
        JOIN staff_members s ON sa.staff_id = s.id
        WHERE 1=1
    '''
    params = []

    if booking_id:
        query += ' AND sa.booking_id = ?'
        params.append(booking_id)

    if staff_id:
        query += ' AND sa.staff_id = ?'
        params.append(staff_id)

    if status:
        if status not in ASSIGNMENT_STATUSES['staff']:
            raise ValidationError(f"Invalid status {status!r}", 'status')
        query += ' AND sa.status = ?'
        params.append(status)

    query += ' ORDER BY sa.window_start'

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]
