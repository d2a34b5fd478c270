"""
Database connection management.
Handles per-context connections, transactions, initialization, and teardown.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager

from flask import g, current_app

from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


def get_db():
    """
    Get the database connection for the current app context.

    Connections run in autocommit mode; writes open an explicit
    transaction through transaction().

    Returns:
        sqlite3.Connection: Database connection object

    Raises:
        PersistenceError: If the database cannot be opened
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/diveops.db')
        busy_timeout = current_app.config.get('DATABASE_BUSY_TIMEOUT', 5)

        if db_path != ':memory:':
            directory = os.path.dirname(db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        try:
            conn = sqlite3.connect(db_path, timeout=busy_timeout, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute('PRAGMA foreign_keys = ON')
            if db_path != ':memory:':
                # WAL lets readers see a consistent snapshot while a write is open
                conn.execute('PRAGMA journal_mode = WAL')
        except sqlite3.Error as e:
            logger.error(f"Could not open database {db_path}: {e}", exc_info=True)
            raise PersistenceError(f"Could not open database: {e}", e) from e
        g.db = conn
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


def _set_busy_timeout(db, seconds):
    db.execute(f'PRAGMA busy_timeout = {max(int(seconds * 1000), 0)}')


@contextmanager
def transaction(db=None, busy_timeout: float = None):
    """
    Run a block inside a BEGIN IMMEDIATE write transaction.

    Commits on success and rolls back on any exception. sqlite3 failures
    surface as PersistenceError; other exceptions propagate unchanged.

    Args:
        db: Connection to use (defaults to get_db())
        busy_timeout: Seconds to wait on a locked database file for this
                      transaction only (defaults to DATABASE_BUSY_TIMEOUT)

    Usage:
        with transaction() as conn:
            conn.execute('INSERT ...')
    """
    db = db or get_db()

    if busy_timeout is not None:
        _set_busy_timeout(db, busy_timeout)

    try:
        try:
            db.execute('BEGIN IMMEDIATE')
        except sqlite3.Error as e:
            logger.error(f"Could not start transaction: {e}")
            raise PersistenceError(f"Could not start transaction: {e}", e) from e

        try:
            yield db
        except sqlite3.Error as e:
            db.rollback()
            logger.error(f"Transaction aborted: {e}", exc_info=True)
            raise PersistenceError(f"Transaction aborted: {e}", e) from e
        except BaseException:
            db.rollback()
            raise

        try:
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error(f"Commit failed: {e}", exc_info=True)
            raise PersistenceError(f"Commit failed: {e}", e) from e
    finally:
        if busy_timeout is not None:
            _set_busy_timeout(db, current_app.config.get('DATABASE_BUSY_TIMEOUT', 5))


@contextmanager
def read_snapshot():
    """
    Yield the connection for read-only queries.

    Each SELECT sees a consistent snapshot; sqlite3 failures surface as
    PersistenceError.
    """
    db = get_db()
    try:
        yield db
    except sqlite3.Error as e:
        logger.error(f"Read failed: {e}", exc_info=True)
        raise PersistenceError(f"Read failed: {e}", e) from e


def init_db():
    """
    Initialize database: drop existing tables and create the schema.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes

    db = get_db()

    drop_tables(db)
    create_tables(db)
    create_indexes(db)

    logger.info("Database initialized")
