from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from asset_tracker.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://"  # Use Redis in production for distributed systems
)

def create_app(test_config=None):
    from pathlib import Path

    app = Flask(__name__)

    # Get singleton logger
    logger = get_logger("asset_tracker")
    logger.info("Initializing Flask application")

    # Configuration
    # SECURITY: Require SECRET_KEY in environment - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
    if test_config and test_config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = test_config['SECRET_KEY']
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    # Prefer an explicit DATABASE_URL env var; otherwise keep the SQLite
    # database inside the project's `instance/` directory.
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        # SQLAlchemy expects postgresql:// not postgres://
        if db_env.startswith('postgres://'):
            db_env = db_env.replace('postgres://', 'postgresql://', 1)
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir = Path(__file__).parent.parent / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'asset_tracker.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Rate limiting (Flask-Limiter reads these keys)
    app.config['RATELIMIT_DEFAULT'] = os.environ.get('RATELIMIT_DEFAULT', '200 per minute')
    app.config['RATELIMIT_ENABLED'] = os.environ.get('RATELIMIT_ENABLED', 'True').lower() in ('true', '1', 'yes', 'on')

    if test_config:
        app.config.update(test_config)
        if app.config.get('TESTING'):
            app.config['RATELIMIT_ENABLED'] = False

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from asset_tracker.data.core.user_info.user import User
    from asset_tracker.data.core.asset_info.asset import Asset
    from asset_tracker.data.core.license_info.license import License
    from asset_tracker.data.core.license_info.license_assignment import LicenseAssignment
    from asset_tracker.data.core.event_info.activity import Activity

    logger.debug("Models imported and registered")

    # Register blueprints and error handlers
    from asset_tracker.presentation.routes import init_app as init_routes
    init_routes(app)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'

        # Prevent MIME-sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        return response

    logger.info("Flask application initialization complete")

    return app
