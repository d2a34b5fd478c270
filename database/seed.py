"""
Database seed data.
Demo catalog for a fresh dive shop installation.
"""

import uuid

DEMO_EQUIPMENT = [
    # (name, category, quantity_in_stock, daily_rent_rate)
    ('Dive Tank', 'Tank', 5, '12'),
    ('Scuba Fins', 'Fins', 8, '8'),
    ('Dive Boots', 'Shoe', 6, '5'),
    ('BCD Jacket', 'BCD', 4, '15'),
    ('Wetsuit 3mm', 'Wetsuit', 5, '10'),
    ('Dive Computer', 'Computer', 3, '20'),
    ('Dive Mask', 'Mask', 12, '4'),
    ('Regulator Set', 'Regulator', 3, '18'),
    ('Dive Light', 'Light', 4, '6'),
]

DEMO_STAFF = [
    # (name, role, certification, email)
    ('Captain Tom', 'boat_staff', None, 'tom@example.com'),
    ('Lisa Chen', 'instructor', 'PADI Instructor', 'lisa@example.com'),
    ('Marco Rossi', 'instructor', 'PADI Master Instructor', 'marco@example.com'),
    ('Ana Silva', 'divemaster', 'PADI Divemaster', 'ana@example.com'),
]


def seed_database(db):
    """
    Insert the demo catalog.

    Args:
        db: Open sqlite3 connection (caller commits)

    Returns:
        dict: Counts of inserted rows per table
    """
    for name, category, stock, rate in DEMO_EQUIPMENT:
        db.execute('''
            INSERT INTO equipment (id, name, category, quantity_in_stock, rentable, daily_rent_rate)
            VALUES (?, ?, ?, ?, 1, ?)
        ''', (str(uuid.uuid4()), name, category, stock, rate))

    for name, role, certification, email in DEMO_STAFF:
        db.execute('''
            INSERT INTO staff_members (id, name, role, certification, email, availability_flag)
            VALUES (?, ?, ?, ?, ?, 'available')
        ''', (str(uuid.uuid4()), name, role, certification, email))

    return {'equipment': len(DEMO_EQUIPMENT), 'staff_members': len(DEMO_STAFF)}
