"""
Staff API endpoints.

Handles the staff catalog and staff time queries:
- List, create and view staff members
- Manual availability override
- "Is this staff member free?" conflict check
- Staff calendar (active assignments in a range)
"""

from flask import request

from models.staff import create_staff_member, get_all_staff, require_staff_member, set_staff_availability
from models.staff_conflicts import get_staff_schedule, is_staff_free
from utils.api_response import api_success, get_json_payload
from utils.validators import validate_bool


def register_routes(bp):
    """Register staff API routes on the blueprint."""

    @bp.route('/staff', methods=['GET'])
    def staff_list():
        """
        List staff members.

        Query params:
            role: instructor, divemaster or boat_staff (optional)
            available: Only members flagged available when true (optional)
        """
        role = request.args.get('role') or None
        available = request.args.get('available')
        available_only = validate_bool(available, 'available') if available else False

        members = get_all_staff(role=role, available_only=available_only)
        return api_success(data=members, count=len(members))

    @bp.route('/staff', methods=['POST'])
    def staff_create():
        """
        Add a staff member.

        Request JSON:
        {
            "name": "Lisa Chen",
            "role": "instructor",
            "availability_flag": "available",
            "certification": "PADI Instructor",
            "certification_expiry": "2026-03-31",
            "email": "lisa@example.com",
            "phone": "+1 555 0100"
        }
        """
        data = get_json_payload()

        member = create_staff_member(
            name=data.get('name'),
            role=data.get('role'),
            availability_flag=data.get('availability_flag', 'available'),
            certification=data.get('certification'),
            certification_expiry=data.get('certification_expiry'),
            email=data.get('email'),
            phone=data.get('phone')
        )
        return api_success(data=member, message='Staff member created', status=201)

    @bp.route('/staff/<staff_id>', methods=['GET'])
    def staff_detail(staff_id):
        """Get one staff member."""
        return api_success(data=require_staff_member(staff_id))

    @bp.route('/staff/<staff_id>/availability', methods=['POST'])
    def staff_set_availability(staff_id):
        """
        Set the manual availability override.

        Request JSON:
        {"availability_flag": "unavailable"}
        """
        data = get_json_payload()
        member = set_staff_availability(staff_id, data.get('availability_flag'))
        return api_success(data=member, message='Availability updated')

    @bp.route('/staff/<staff_id>/conflicts', methods=['GET'])
    def staff_conflicts(staff_id):
        """
        Check whether a staff member is free for a window.

        Query params:
            start: Window start (required)
            end: Window end (required)
            exclude: Assignment ID to ignore (optional)

        Response JSON:
        {
            "success": true,
            "data": {"free": false, "has_conflict": true,
                     "conflict": {...}, "availability_flag": "available", ...}
        }
        """
        result = is_staff_free(
            staff_id,
            request.args.get('start'),
            request.args.get('end'),
            exclude_assignment_id=request.args.get('exclude') or None
        )
        return api_success(data=result)

    @bp.route('/staff/<staff_id>/schedule', methods=['GET'])
    def staff_schedule(staff_id):
        """
        Active assignments of a staff member.

        Query params:
            start: Range start (optional)
            end: Range end (optional)
        """
        assignments = get_staff_schedule(
            staff_id,
            request.args.get('start'),
            request.args.get('end')
        )
        return api_success(data=assignments, count=len(assignments))
