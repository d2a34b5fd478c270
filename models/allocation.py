"""
Generic resource allocation.

One path for "reserve a unit of resource X against a window, respecting
rule Y". Each write holds the resource key lock and runs a BEGIN IMMEDIATE
transaction whose insert or update is a single conditional statement, so
the check and the write cannot be separated by another request.

Rules:
- CapacityRule: counted capacity (equipment stock).
- ExclusiveRule: mutual exclusion on overlapping windows (staff time).
"""

import logging
import uuid

from database import read_snapshot, transaction
from extensions import resource_locks
from models.availability import get_equipment_availability
from models.staff_conflicts import find_conflict
from utils.errors import (
    ALREADY_RELEASED, ALREADY_RETURNED, INSUFFICIENT_AVAILABILITY,
    SCHEDULE_CONFLICT, NotFoundError, ValidationError, rejection
)
from utils.locking import resource_key

logger = logging.getLogger(__name__)


class AllocationRule:
    """Storage layout and admission rule for one class of resource."""

    resource_type = None
    entity_type = None
    table = None
    resource_column = None
    terminal_status = None
    terminal_column = None
    already_finished_code = None

    def key(self, resource_id: str) -> str:
        return resource_key(self.resource_type, resource_id)

    def fetch(self, conn, assignment_id: str) -> dict:
        row = conn.execute(
            f'SELECT * FROM {self.table} WHERE id = ?', (assignment_id,)
        ).fetchone()
        return dict(row) if row else None

    def try_insert(self, conn, assignment_id: str, resource_id: str, request: dict) -> bool:
        """Insert an active assignment only if the rule admits it."""
        raise NotImplementedError

    def refusal(self, resource_id: str, request: dict) -> dict:
        """Explain why try_insert admitted nothing, as a rejection result."""
        raise NotImplementedError

    def already_finished(self, assignment: dict) -> dict:
        return rejection(
            self.already_finished_code,
            f"Assignment {assignment['id']} is already {assignment['status']}",
            assignment_id=assignment['id'],
            status=assignment['status'],
        )


class CapacityRule(AllocationRule):
    """Active quantities for an item may not exceed its stock."""

    resource_type = 'equipment'
    entity_type = 'rental_assignment'
    table = 'rental_assignments'
    resource_column = 'equipment_id'
    terminal_status = 'returned'
    terminal_column = 'returned_at'
    already_finished_code = ALREADY_RETURNED

    def try_insert(self, conn, assignment_id, resource_id, request):
        cursor = conn.execute('''
            INSERT INTO rental_assignments (
                id, equipment_id, booking_id, quantity,
                window_start, window_end, status, notes
            )
            SELECT ?, e.id, ?, ?, ?, ?, 'active', ?
            FROM equipment e
            WHERE e.id = ? AND e.rentable = 1
              AND e.quantity_in_stock - COALESCE((
                  SELECT SUM(ra.quantity) FROM rental_assignments ra
                  WHERE ra.equipment_id = e.id AND ra.status = 'active'
              ), 0) >= ?
        ''', (
            assignment_id, request['booking_id'], request['quantity'],
            request['window_start'], request['window_end'], request.get('notes'),
            resource_id, request['quantity'],
        ))
        return cursor.rowcount == 1

    def refusal(self, resource_id, request):
        entry = get_equipment_availability(resource_id)
        if not entry['rentable']:
            raise ValidationError(f"Equipment {entry['name']} is not rentable", 'equipment_id')

        return rejection(
            INSUFFICIENT_AVAILABILITY,
            f"Requested {request['quantity']} x {entry['name']} but only "
            f"{entry['available']} available",
            equipment_id=resource_id,
            requested=request['quantity'],
            available=entry['available'],
        )


class ExclusiveRule(AllocationRule):
    """Active windows for one staff member may not overlap."""

    resource_type = 'staff'
    entity_type = 'staff_assignment'
    table = 'staff_assignments'
    resource_column = 'staff_id'
    terminal_status = 'released'
    terminal_column = 'released_at'
    already_finished_code = ALREADY_RELEASED

    def try_insert(self, conn, assignment_id, resource_id, request):
        cursor = conn.execute('''
            INSERT INTO staff_assignments (
                id, staff_id, booking_id, window_start, window_end, status
            )
            SELECT ?, s.id, ?, ?, ?, 'active'
            FROM staff_members s
            WHERE s.id = ? AND s.availability_flag = 'available'
              AND NOT EXISTS (
                  SELECT 1 FROM staff_assignments sa
                  WHERE sa.staff_id = s.id AND sa.status = 'active'
                    AND sa.window_start < ? AND ? < sa.window_end
                    AND sa.window_start < sa.window_end
              )
        ''', (
            assignment_id, request['booking_id'],
            request['window_start'], request['window_end'],
            resource_id, request['window_end'], request['window_start'],
        ))
        return cursor.rowcount == 1

    def try_move(self, conn, assignment_id, window_start, window_end) -> bool:
        """Move an active assignment to a new window only if it stays exclusive."""
        cursor = conn.execute('''
            UPDATE staff_assignments
            SET window_start = ?, window_end = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND status = 'active'
              AND NOT EXISTS (
                  SELECT 1 FROM staff_assignments sa
                  WHERE sa.staff_id = staff_assignments.staff_id
                    AND sa.id != staff_assignments.id
                    AND sa.status = 'active'
                    AND sa.window_start < ? AND ? < sa.window_end
                    AND sa.window_start < sa.window_end
              )
        ''', (window_start, window_end, assignment_id, window_end, window_start))
        return cursor.rowcount == 1

    def refusal(self, resource_id, request):
        conflict = find_conflict(
            resource_id,
            request['window_start'],
            request['window_end'],
            request.get('exclude_assignment_id'),
        )
        if conflict is None:
            raise ValidationError(f"Staff member {resource_id} is unavailable", 'staff_id')

        return rejection(
            SCHEDULE_CONFLICT,
            f"Staff member is already assigned from {conflict['window_start']} "
            f"to {conflict['window_end']}",
            staff_id=resource_id,
            conflict={
                'assignment_id': conflict['id'],
                'booking_id': conflict['booking_id'],
                'window_start': conflict['window_start'],
                'window_end': conflict['window_end'],
            },
        )


def require_assignment(rule: AllocationRule, assignment_id: str) -> dict:
    """Fetch an assignment or raise NotFoundError."""
    with read_snapshot() as conn:
        assignment = rule.fetch(conn, assignment_id)
    if assignment is None:
        raise NotFoundError(rule.entity_type, assignment_id)
    return assignment


def allocate(rule: AllocationRule, resource_id: str, request: dict, timeout: float = None) -> dict:
    """
    Create an active assignment if the rule admits it.

    Args:
        rule: Allocation rule for the resource class
        resource_id: Equipment or staff ID (the resource key)
        request: Validated fields (booking_id, window_start, window_end, ...)
        timeout: Lock and database wait override in seconds

    Returns:
        dict: {'success': True, 'assignment': {...}} or a rejection

    Raises:
        ResourceBusyError: If the resource lock is not acquired in time
        PersistenceError: On storage failure
    """
    assignment_id = str(uuid.uuid4())

    with resource_locks.hold(rule.key(resource_id), timeout):
        with transaction(busy_timeout=timeout) as conn:
            if rule.try_insert(conn, assignment_id, resource_id, request):
                return {'success': True, 'assignment': rule.fetch(conn, assignment_id)}
            result = rule.refusal(resource_id, request)

    logger.info(f"Allocation refused on {rule.key(resource_id)}: {result['error']}")
    return result


def finish(rule: AllocationRule, assignment_id: str, timeout: float = None) -> dict:
    """
    Move an active assignment to its terminal status, exactly once.

    Returns:
        dict: {'success': True, 'assignment': {...}} or an already-finished rejection

    Raises:
        NotFoundError: If the assignment does not exist
    """
    current = require_assignment(rule, assignment_id)

    with resource_locks.hold(rule.key(current[rule.resource_column]), timeout):
        with transaction(busy_timeout=timeout) as conn:
            cursor = conn.execute(f'''
                UPDATE {rule.table}
                SET status = ?, {rule.terminal_column} = CURRENT_TIMESTAMP
                WHERE id = ? AND status = 'active'
            ''', (rule.terminal_status, assignment_id))

            if cursor.rowcount == 1:
                return {'success': True, 'assignment': rule.fetch(conn, assignment_id)}
            latest = rule.fetch(conn, assignment_id)

    logger.info(f"Assignment {assignment_id} already {latest['status']}")
    return rule.already_finished(latest)


def move(rule: ExclusiveRule, assignment_id: str, window_start: str, window_end: str,
         timeout: float = None) -> dict:
    """
    Change the window of an active assignment in place.

    The slot is never released in between, so no other request can take it.

    Returns:
        dict: {'success': True, 'assignment': {...}}, a conflict rejection,
              or an already-finished rejection

    Raises:
        NotFoundError: If the assignment does not exist
    """
    current = require_assignment(rule, assignment_id)
    resource_id = current[rule.resource_column]

    with resource_locks.hold(rule.key(resource_id), timeout):
        with transaction(busy_timeout=timeout) as conn:
            if rule.try_move(conn, assignment_id, window_start, window_end):
                return {'success': True, 'assignment': rule.fetch(conn, assignment_id)}

            latest = rule.fetch(conn, assignment_id)
            if latest['status'] != 'active':
                result = rule.already_finished(latest)
            else:
                result = rule.refusal(resource_id, {
                    'window_start': window_start,
                    'window_end': window_end,
                    'exclude_assignment_id': assignment_id,
                })

    logger.info(f"Move of {assignment_id} refused: {result['error']}")
    return result
