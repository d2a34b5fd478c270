"""
Engine error taxonomy.

Exceptions cover malformed input, unknown ids and infrastructure failures.
Business rejections (capacity, schedule conflicts, terminal assignments) are
not exceptions: they come back as result dicts built by ``rejection()`` so
callers can tell "no" from "broken".
"""


class EngineError(Exception):
    """Base exception for all reservation engine errors."""


class ValidationError(EngineError, ValueError):
    """Malformed input. Raised before any persisted state is touched."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(EngineError, LookupError):
    """A referenced equipment, staff, booking or assignment id does not exist."""

    def __init__(self, entity_type: str, entity_id):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.message = f"{entity_type} {entity_id} not found"
        super().__init__(self.message)


class PersistenceError(EngineError):
    """Underlying storage failure. Always safe for the caller to retry."""

    retryable = True

    def __init__(self, message: str, original: Exception = None):
        super().__init__(message)
        self.message = message
        self.original = original


class ResourceBusyError(PersistenceError):
    """The per-resource lock could not be acquired within the allowed wait."""

    def __init__(self, resource_key: str, timeout: float):
        super().__init__(
            f"Resource {resource_key} is busy (lock not acquired within {timeout:g}s)"
        )
        self.resource_key = resource_key
        self.timeout = timeout


# =============================================================================
# BUSINESS REJECTIONS
# =============================================================================

INSUFFICIENT_AVAILABILITY = 'insufficient_availability'
SCHEDULE_CONFLICT = 'schedule_conflict'
ALREADY_RETURNED = 'already_returned'
ALREADY_RELEASED = 'already_released'

REJECTION_CODES = (
    INSUFFICIENT_AVAILABILITY,
    SCHEDULE_CONFLICT,
    ALREADY_RETURNED,
    ALREADY_RELEASED,
)


def rejection(code: str, message: str, **details) -> dict:
    """
    Build a business rejection result.

    Args:
        code: One of REJECTION_CODES
        message: Human readable explanation
        **details: Diagnostic fields (requested/available, conflict, ...)

    Returns:
        dict: {'success': False, 'error': code, 'message': message, **details}
    """
    if code not in REJECTION_CODES:
        raise ValueError(f"Unknown rejection code: {code}")

    result = {'success': False, 'error': code, 'message': message}
    result.update(details)
    return result


def is_rejection(result: dict) -> bool:
    """True if an orchestrator result is a business rejection."""
    return not result.get('success') and result.get('error') in REJECTION_CODES
