"""
Database package for the DiveOps reservation engine.

This package provides modular database operations:
- connection: Connection management (get_db, close_db, init_db, transaction, read_snapshot)
- schema: Table creation and indexes
- seed: Demo catalog data
"""

from database.connection import get_db, close_db, init_db, transaction, read_snapshot
from database.schema import drop_tables, create_tables, create_indexes
from database.seed import seed_database

__all__ = [
    # Connection
    'get_db',
    'close_db',
    'init_db',
    'transaction',
    'read_snapshot',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    # Seed
    'seed_database',
]
