"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'audit_log',
        'staff_assignments',
        'rental_assignments',
        'bookings',
        'staff_members',
        'equipment',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Resource catalog
    db.execute('''
        CREATE TABLE equipment (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            sku TEXT UNIQUE,
            quantity_in_stock INTEGER NOT NULL DEFAULT 0 CHECK (quantity_in_stock >= 0),
            rentable INTEGER NOT NULL DEFAULT 1,
            daily_rent_rate TEXT NOT NULL DEFAULT '0',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE staff_members (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            role TEXT NOT NULL CHECK (role IN ('instructor', 'divemaster', 'boat_staff')),
            availability_flag TEXT NOT NULL DEFAULT 'available'
                CHECK (availability_flag IN ('available', 'unavailable')),
            certification TEXT,
            certification_expiry TEXT,
            email TEXT,
            phone TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Booking anchors (owned by the booking workflow)
    db.execute('''
        CREATE TABLE bookings (
            id TEXT PRIMARY KEY,
            diver_id TEXT NOT NULL,
            window_start TEXT NOT NULL,
            window_end TEXT NOT NULL,
            course_id TEXT,
            group_id TEXT,
            accommodation_id TEXT,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (window_start <= window_end)
        )
    ''')

    # 3. Allocation state (written only by the reservation orchestrator)
    db.execute('''
        CREATE TABLE rental_assignments (
            id TEXT PRIMARY KEY,
            equipment_id TEXT NOT NULL REFERENCES equipment(id) ON DELETE RESTRICT,
            booking_id TEXT NOT NULL REFERENCES bookings(id) ON DELETE RESTRICT,
            quantity INTEGER NOT NULL CHECK (quantity > 0),
            window_start TEXT NOT NULL,
            window_end TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'returned')),
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            returned_at TIMESTAMP,
            CHECK (window_start < window_end)
        )
    ''')

    db.execute('''
        CREATE TABLE staff_assignments (
            id TEXT PRIMARY KEY,
            staff_id TEXT NOT NULL REFERENCES staff_members(id) ON DELETE RESTRICT,
            booking_id TEXT NOT NULL REFERENCES bookings(id) ON DELETE RESTRICT,
            window_start TEXT NOT NULL,
            window_end TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'released')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            released_at TIMESTAMP,
            CHECK (window_start < window_end)
        )
    ''')

    # 4. Audit trail
    db.execute('''
        CREATE TABLE audit_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            action TEXT NOT NULL,
            entity_type TEXT NOT NULL,
            entity_id TEXT,
            changed_by TEXT,
            old_value TEXT,
            new_value TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create indexes for the allocation read paths."""
    db.execute('''
        CREATE INDEX idx_rental_assignments_equipment_status
        ON rental_assignments(equipment_id, status)
    ''')
    db.execute('CREATE INDEX idx_rental_assignments_booking ON rental_assignments(booking_id)')
    db.execute('''
        CREATE INDEX idx_staff_assignments_staff_status_window
        ON staff_assignments(staff_id, status, window_start, window_end)
    ''')
    db.execute('CREATE INDEX idx_staff_assignments_booking ON staff_assignments(booking_id)')
    db.execute('CREATE INDEX idx_audit_log_entity ON audit_log(entity_type, entity_id)')
