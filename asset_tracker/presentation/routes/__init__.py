"""
Routes package for the Asset Tracker API
Registers the api blueprint and renders lifecycle errors as JSON
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException
from asset_tracker import db
from asset_tracker.buisness.core.exceptions import LifecycleError
from asset_tracker.logger import get_logger
from asset_tracker.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("asset_tracker.routes")


def init_app(app):
    """Initialize the api blueprint and error handlers with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .core import api
    app.register_blueprint(api, url_prefix='/api')

    @app.errorhandler(LifecycleError)
    def handle_lifecycle_error(error):
        logger.info(f"{error.kind}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.name, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.error(f"Unhandled error: {sanitize_exception_message(error)}", exc_info=True)
        return jsonify({'error': 'InternalError', 'message': 'Internal server error'}), 500

    logger.info("Registered api blueprint at /api")
