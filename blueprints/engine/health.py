"""
Health check endpoint.
"""

from flask import current_app, jsonify

from database import read_snapshot
from utils.datetime_helpers import get_now


def register_routes(bp):
    """Register health routes on the blueprint."""

    @bp.route('/health')
    def health_check():
        """
        Health check endpoint.

        Touches the database so a broken store reports 503.

        Returns:
            JSON with status, version, app name and server time
        """
        with read_snapshot() as conn:
            conn.execute('SELECT 1').fetchone()

        return jsonify({
            'status': 'ok',
            'version': current_app.config.get('APP_VERSION', '1.0.0'),
            'app': current_app.config.get('APP_NAME', 'DiveOps Reservation Engine'),
            'time': get_now().isoformat()
        })
