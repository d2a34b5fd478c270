"""
Audit logging utility functions.
Records who changed allocation state and what it looked like before and after.
"""

import logging
from flask import request, has_request_context

# Configure logger for audit operations
logger = logging.getLogger(__name__)

ACTING_USER_HEADER = 'X-Acting-User'


def get_acting_user() -> str:
    """
    Name of the user behind the current request.

    The booking workflow forwards its authenticated user in the
    X-Acting-User header; calls outside a request are 'system'.
    """
    if has_request_context():
        user = request.headers.get(ACTING_USER_HEADER, '').strip()
        if user:
            return user[:100]
    return 'system'


def log_audit(
    action: str,
    entity_type: str,
    entity_id: str = None,
    before: dict = None,
    after: dict = None,
    changed_by: str = None
) -> int:
    """
    Log an audit entry.

    Args:
        action: Action type (CREATE, RETURN, RELEASE, RESCHEDULE, UPDATE)
        entity_type: Entity type (rental_assignment, staff_assignment, ...)
        entity_id: ID of the affected entity
        before: Entity state before the change
        after: Entity state after the change
        changed_by: Override acting user (defaults to get_acting_user())

    Returns:
        New audit log ID, or None if logging failed
    """
    try:
        from models.audit_log import create_audit_log

        changes = None
        if before is not None or after is not None:
            changes = {'before': before, 'after': after}

        return create_audit_log(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            changed_by=changed_by or get_acting_user(),
            changes=changes
        )

    except Exception as e:
        # Audit logging should never fail the main operation
        logger.error(f"Failed to log audit entry: {e}", exc_info=True)
        return None
