"""
Booking API endpoints.
The booking workflow registers its bookings here so assignments can attach to them.
"""

from flask import request

from models.booking import create_booking, list_bookings, require_booking
from models.reservation import list_rental_assignments, list_staff_assignments
from utils.api_response import api_success, get_json_payload


def register_routes(bp):
    """Register booking API routes on the blueprint."""

    @bp.route('/bookings', methods=['GET'])
    def bookings_list():
        """
        List bookings, most recent check-in first.

        Query params:
            diver_id: Filter by diver (optional)
            limit: Page size (default 100, max 500)
            offset: Rows to skip (default 0)
        """
        limit = min(max(request.args.get('limit', 100, type=int), 1), 500)
        offset = max(request.args.get('offset', 0, type=int), 0)

        bookings = list_bookings(
            diver_id=request.args.get('diver_id') or None,
            limit=limit,
            offset=offset
        )
        return api_success(data=bookings, count=len(bookings))

    @bp.route('/bookings', methods=['POST'])
    def bookings_create():
        """
        Register a booking.

        Request JSON:
        {
            "id": "optional caller supplied id",
            "diver_id": "D-1001",
            "window_start": "2024-12-26",
            "window_end": "2024-12-29",
            "course_id": null,
            "group_id": null,
            "accommodation_id": null,
            "notes": ""
        }
        """
        data = get_json_payload()

        booking = create_booking(
            diver_id=data.get('diver_id'),
            window_start=data.get('window_start'),
            window_end=data.get('window_end'),
            course_id=data.get('course_id'),
            group_id=data.get('group_id'),
            accommodation_id=data.get('accommodation_id'),
            notes=data.get('notes'),
            booking_id=data.get('id')
        )
        return api_success(data=booking, message='Booking created', status=201)

    @bp.route('/bookings/<booking_id>', methods=['GET'])
    def bookings_detail(booking_id):
        """Get a booking with its rental and staff assignments."""
        booking = require_booking(booking_id)
        booking['rental_assignments'] = list_rental_assignments(booking_id=booking_id)
        booking['staff_assignments'] = list_staff_assignments(booking_id=booking_id)
        return api_success(data=booking)
