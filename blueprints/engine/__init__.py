"""
Engine API blueprint.
JSON endpoints for the booking workflow, one per engine operation.

Route modules:
- health.py - Health check
- equipment.py - Equipment catalog and availability ledger
- staff.py - Staff catalog, conflict check and schedule
- bookings.py - Booking anchors
- assignments.py - Rental and staff assignments (orchestrator)
- audit.py - Audit trail
"""

from flask import Blueprint

# Create the engine blueprint
engine_bp = Blueprint('engine', __name__)

# Import and register routes from submodules
from blueprints.engine import health
from blueprints.engine import equipment
from blueprints.engine import staff
from blueprints.engine import bookings
from blueprints.engine import assignments
from blueprints.engine import audit

# Register all route functions on the blueprint
health.register_routes(engine_bp)
equipment.register_routes(engine_bp)
staff.register_routes(engine_bp)
bookings.register_routes(engine_bp)
assignments.register_routes(engine_bp)
audit.register_routes(engine_bp)
