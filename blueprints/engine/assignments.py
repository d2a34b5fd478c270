"""
Assignment API endpoints.

Thin wrappers over the reservation orchestrator:
- Reserve and return equipment (rental assignments)
- Assign, reschedule and release staff (staff assignments)

Business rejections come back with status 409 and the rejection body, e.g.
{"success": false, "error": "insufficient_availability", "requested": 3, "available": 2}
"""

from flask import request

from models.reservation import (
    assign_staff,
    get_rental_assignment,
    get_staff_assignment,
    list_rental_assignments,
    list_staff_assignments,
    release_staff,
    reschedule_staff_assignment,
    reserve_equipment,
    return_equipment
)
from utils.api_response import api_result, api_success, get_json_payload


def register_routes(bp):
    """Register assignment API routes on the blueprint."""

    # -------------------------------------------------------------------------
    # Rental assignments
    # -------------------------------------------------------------------------

    @bp.route('/rental-assignments', methods=['GET'])
    def rental_assignments_list():
        """
        List rental assignments.

        Query params:
            booking_id: Filter by booking (optional)
            equipment_id: Filter by equipment item (optional)
            status: active or returned (optional)
        """
        assignments = list_rental_assignments(
            booking_id=request.args.get('booking_id') or None,
            equipment_id=request.args.get('equipment_id') or None,
            status=request.args.get('status') or None
        )
        return api_success(data=assignments, count=len(assignments))

    @bp.route('/rental-assignments', methods=['POST'])
    def rental_assignments_create():
        """
        Reserve equipment units for a booking.

        Request JSON:
        {
            "booking_id": "...",
            "equipment_id": "...",
            "quantity": 3,
            "window_start": "2024-12-26T09:00",
            "window_end": "2024-12-26T17:00",
            "notes": ""
        }

        Response JSON (201):
        {"success": true, "data": {"assignment": {...}}}
        """
        data = get_json_payload()

        result = reserve_equipment(
            booking_id=data.get('booking_id'),
            equipment_id=data.get('equipment_id'),
            quantity=data.get('quantity'),
            window_start=data.get('window_start'),
            window_end=data.get('window_end'),
            notes=data.get('notes')
        )
        return api_result(result, status=201)

    @bp.route('/rental-assignments/<assignment_id>', methods=['GET'])
    def rental_assignments_detail(assignment_id):
        """Get one rental assignment."""
        return api_success(data=get_rental_assignment(assignment_id))

    @bp.route('/rental-assignments/<assignment_id>/return', methods=['POST'])
    def rental_assignments_return(assignment_id):
        """Return the units of a rental assignment."""
        return api_result(return_equipment(assignment_id))

    # -------------------------------------------------------------------------
    # Staff assignments
    # -------------------------------------------------------------------------

    @bp.route('/staff-assignments', methods=['GET'])
    def staff_assignments_list():
        """
        List staff assignments.

        Query params:
            booking_id: Filter by booking (optional)
            staff_id: Filter by staff member (optional)
            status: active or released (optional)
        """
        assignments = list_staff_assignments(
            booking_id=request.args.get('booking_id') or None,
            staff_id=request.args.get('staff_id') or None,
            status=request.args.get('status') or None
        )
        return api_success(data=assignments, count=len(assignments))

    @bp.route('/staff-assignments', methods=['POST'])
    def staff_assignments_create():
        """
        Assign a staff member to a booking.

        Request JSON:
        {
            "booking_id": "...",
            "staff_id": "...",
            "window_start": "2024-12-26T09:00",
            "window_end": "2024-12-26T12:00"
        }

        A collision answers 409 with "error": "schedule_conflict" and the
        colliding assignment under "conflict".
        """
        data = get_json_payload()

        result = assign_staff(
            booking_id=data.get('booking_id'),
            staff_id=data.get('staff_id'),
            window_start=data.get('window_start'),
            window_end=data.get('window_end')
        )
        return api_result(result, status=201)

    @bp.route('/staff-assignments/<assignment_id>', methods=['GET'])
    def staff_assignments_detail(assignment_id):
        """Get one staff assignment."""
        return api_success(data=get_staff_assignment(assignment_id))

    @bp.route('/staff-assignments/<assignment_id>/reschedule', methods=['POST'])
    def staff_assignments_reschedule(assignment_id):
        """
        Move a staff assignment to a new window.

        Request JSON:
        {"window_start": "...", "window_end": "..."}
        """
        data = get_json_payload()

        result = reschedule_staff_assignment(
            assignment_id,
            data.get('window_start'),
            data.get('window_end')
        )
        return api_result(result)

    @bp.route('/staff-assignments/<assignment_id>/release', methods=['POST'])
    def staff_assignments_release(assignment_id):
        """Release a staff member from a booking."""
        return api_result(release_staff(assignment_id))
