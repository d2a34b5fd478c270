"""
Audit Log model and data access functions.
Records allocation state changes with before/after snapshots.
"""

import json
from database import get_db, read_snapshot


def create_audit_log(
    action: str,
    entity_type: str,
    entity_id: str = None,
    changed_by: str = None,
    changes: dict = None
) -> int:
    """
    Insert an audit log entry.

    Args:
        action: Action type (CREATE, RETURN, RELEASE, RESCHEDULE, UPDATE)
        entity_type: Entity type (rental_assignment, staff_assignment, equipment, ...)
        entity_id: ID of the affected entity
        changed_by: Acting user name or 'system'
        changes: Dict with 'before' and 'after' keys

    Returns:
        int: New audit log ID
    """
    old_value = None
    new_value = None
    if changes:
        if changes.get('before') is not None:
            old_value = json.dumps(changes['before'], default=str)
        if changes.get('after') is not None:
            new_value = json.dumps(changes['after'], default=str)

    db = get_db()
    cursor = db.execute('''
        INSERT INTO audit_log (action, entity_type, entity_id, changed_by, old_value, new_value)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (action, entity_type, entity_id, changed_by, old_value, new_value))
    return cursor.lastrowid


def get_audit_logs(
    entity_type: str = None,
    entity_id: str = None,
    action: str = None,
    limit: int = 100,
    offset: int = 0
) -> list:
    """
    Get audit logs with optional filtering, newest first.

    Args:
        entity_type: Filter by entity type
        entity_id: Filter by specific entity ID
        action: Filter by action type
        limit: Maximum number of records to return
        offset: Number of records to skip for pagination

    Returns:
        List of audit log dicts with decoded 'before'/'after'
    """
    query = 'SELECT * FROM audit_log WHERE 1=1'
    params = []

    if entity_type:
        query += ' AND entity_type = ?'
        params.append(entity_type)

    if entity_id:
        query += ' AND entity_id = ?'
        params.append(entity_id)

    if action:
        query += ' AND action = ?'
        params.append(action)

    query += ' ORDER BY id DESC LIMIT ? OFFSET ?'
    params.extend([limit, offset])

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()

    logs = []
    for row in rows:
        entry = dict(row)
        old_value = entry.pop('old_value')
        new_value = entry.pop('new_value')
        entry['before'] = json.loads(old_value) if old_value else None
        entry['after'] = json.loads(new_value) if new_value else None
        logs.append(entry)
    return logs
