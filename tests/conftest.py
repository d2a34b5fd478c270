"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'diveops_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database (and WAL files) after all tests
    for path in (TEST_DB_PATH, TEST_DB_PATH + '-wal', TEST_DB_PATH + '-shm'):
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def booking(app):
    """A booking spanning 2024-12-26 to 2024-12-29."""
    from models.booking import create_booking

    return create_booking('D-1001', '2024-12-26', '2024-12-29')


@pytest.fixture
def dive_tank(app):
    """Rentable 'Dive Tank' with stock 5."""
    from models.equipment import create_equipment

    return create_equipment('Dive Tank', 'Tank', quantity_in_stock=5, daily_rent_rate='12')


@pytest.fixture
def instructor(app):
    """Available instructor ('Instructor A')."""
    from models.staff import create_staff_member

    return create_staff_member('Instructor A', 'instructor', certification='PADI Instructor')
