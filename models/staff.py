"""
Staff catalog.
Lookup and management for instructors, divemasters and boat staff.
"""

import uuid

from database import read_snapshot, transaction
from utils.audit import log_audit
from utils.errors import NotFoundError, ValidationError
from utils.validators import (
    validate_availability_flag, validate_email, validate_optional_date,
    validate_required_text, validate_role
)


def get_staff_member(staff_id: str) -> dict:
    """
    Get staff member by ID.

    Args:
        staff_id: Staff member ID

    Returns:
        dict: Staff member or None if not found
    """
    with read_snapshot() as conn:
        row = conn.execute('SELECT * FROM staff_members WHERE id = ?', (staff_id,)).fetchone()
    return dict(row) if row else None


def require_staff_member(staff_id: str) -> dict:
    """Get staff member by ID or raise NotFoundError."""
    member = get_staff_member(staff_id)
    if member is None:
        raise NotFoundError('staff', staff_id)
    return member


def get_all_staff(role: str = None, available_only: bool = False) -> list:
    """
    List staff members ordered by role and name.

    Args:
        role: Filter by role (instructor, divemaster, boat_staff)
        available_only: Only members flagged as available

    Returns:
        list: Staff member dicts
    """
    query = 'SELECT * FROM staff_members WHERE 1=1'
    params = []

    if role:
        validate_role(role)
        query += ' AND role = ?'
        params.append(role)

    if available_only:
        query += " AND availability_flag = 'available'"

    query += ' ORDER BY role, name'

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]


def create_staff_member(
    name: str,
    role: str,
    availability_flag: str = 'available',
    certification: str = None,
    certification_expiry=None,
    email: str = None,
    phone: str = None
) -> dict:
    """
    Add a staff member.

    Args:
        name: Full name
        role: One of STAFF_ROLES
        availability_flag: 'available' or 'unavailable'
        certification: Certification label (e.g. 'PADI Instructor')
        certification_expiry: Optional YYYY-MM-DD
        email: Contact email
        phone: Contact phone

    Returns:
        dict: Created staff member
    """
    name = validate_required_text(name, 'name')
    validate_role(role)
    validate_availability_flag(availability_flag)
    expiry = validate_optional_date(certification_expiry, 'certification_expiry')
    if email and not validate_email(email):
        raise ValidationError(f"Invalid email {email!r}", 'email')
    staff_id = str(uuid.uuid4())

    with transaction() as conn:
        conn.execute('''
            INSERT INTO staff_members (
                id, name, role, availability_flag, certification,
                certification_expiry, email, phone
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (staff_id, name, role, availability_flag, certification, expiry, email, phone))

    member = get_staff_member(staff_id)
    log_audit('CREATE', 'staff', staff_id, after=member)
    return member


def set_staff_availability(staff_id: str, availability_flag: str) -> dict:
    """
    Set the manual availability override of a staff member.

    Existing assignments are left untouched; the flag only gates new ones.

    Returns:
        dict: Updated staff member
    """
    validate_availability_flag(availability_flag)
    before = require_staff_member(staff_id)

    with transaction() as conn:
        conn.execute('''
            UPDATE staff_members
            SET availability_flag = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (availability_flag, staff_id))

    after = get_staff_member(staff_id)
    log_audit('UPDATE', 'staff', staff_id, before=before, after=after)
    return after
