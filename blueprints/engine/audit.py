"""
Audit trail API endpoint.
"""

from flask import request

from models.audit_log import get_audit_logs
from utils.api_response import api_success


def register_routes(bp):
    """Register audit log routes on the blueprint."""

    @bp.route('/audit-log', methods=['GET'])
    def audit_log():
        """
        Recent audit entries, newest first.

        Query params:
            entity_type: e.g. rental_assignment, staff_assignment (optional)
            entity_id: Entity ID (optional)
            action: CREATE, RETURN, RELEASE, RESCHEDULE, UPDATE (optional)
            page: Page number (default 1)
            per_page: Page size (default 50, max 100)
        """
        page = max(request.args.get('page', 1, type=int), 1)
        per_page = request.args.get('per_page', 50, type=int)
        per_page = min(max(per_page, 1), 100)  # Cap at 100

        logs = get_audit_logs(
            entity_type=request.args.get('entity_type', '').strip() or None,
            entity_id=request.args.get('entity_id', '').strip() or None,
            action=request.args.get('action', '').strip() or None,
            limit=per_page,
            offset=(page - 1) * per_page
        )
        return api_success(data=logs, page=page, per_page=per_page)
