"""
DiveOps - Reservation & Availability Engine
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import resource_locks

# Import database functions
from database import close_db, init_db, transaction, seed_database

from utils.api_response import api_error
from utils.errors import NotFoundError, PersistenceError, ResourceBusyError, ValidationError


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if config_name == 'production':
        config[config_name].validate()

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Per-resource write locks
    resource_locks.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.engine import engine_bp

    app.register_blueprint(engine_bp, url_prefix='/api')


def register_error_handlers(app):
    """Map engine errors onto JSON responses."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Malformed input: 400."""
        return api_error('validation_error', error.message, status=400, field=error.field)

    @app.errorhandler(NotFoundError)
    def not_found_entity(error):
        """Unknown id: 404."""
        return api_error(
            'not_found', error.message, status=404,
            entity_type=error.entity_type, entity_id=error.entity_id
        )

    @app.errorhandler(PersistenceError)
    def persistence_error(error):
        """Storage failure or lock timeout: 503, safe to retry."""
        code = 'resource_busy' if isinstance(error, ResourceBusyError) else 'persistence_error'
        app.logger.error(f"{code}: {error.message}")
        return api_error(code, error.message, status=503, retryable=error.retryable)

    @app.errorhandler(HTTPException)
    def http_error(error):
        """404, 405 and other HTTP errors as JSON."""
        name = error.name.lower().replace(' ', '_')
        return api_error(name, error.description, status=error.code)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f"Unhandled error: {error}", exc_info=True)
        return api_error('internal_error', 'Internal server error', status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database schema (drops existing data)."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('seed-demo')
    def seed_demo_command():
        """Insert the demo equipment catalog and staff."""
        with app.app_context():
            with transaction() as conn:
                counts = seed_database(conn)
        for table, count in counts.items():
            click.echo(f'{table}: {count} rows')
        click.echo('Demo data inserted!')

    @app.cli.command('availability')
    @click.option('--category', default=None, help='Only items of this category.')
    def availability_command(category):
        """Print stock, allocated and available units per equipment item."""
        from models.availability import get_availability_summary

        with app.app_context():
            entries = get_availability_summary(category=category)

        if not entries:
            click.echo('No equipment in catalog.')
            return

        click.echo(f"{'Item':<24} {'Category':<12} {'Stock':>5} {'Out':>5} {'Free':>5}")
        for entry in entries:
            click.echo(
                f"{entry['name'][:24]:<24} {entry['category'][:12]:<12} "
                f"{entry['quantity_in_stock']:>5} {entry['allocated']:>5} {entry['available']:>5}"
            )


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/diveops.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        # Engine modules log through their own module loggers
        logging.getLogger().addHandler(file_handler)
        logging.getLogger().setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('DiveOps startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
