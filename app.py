"""
app.py — Flask entry point for the Farmlytics backend.

Initializes the Flask app, configures logging, creates the crop-plan
database, loads the historical datasets into the analytics context and
registers all route blueprints and JSON error handlers.

Run: python app.py → localhost:5000
"""

import logging
import logging.config
import os
import sys

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import LOG_FILE_PATH, LOG_TO_FILE, LOGGING, get_config
from database import init_db
from dataset_loader import init_analytics
from errors import DatasetLoadError, FarmlyticsError
from routes.analytics import analytics_bp
from routes.crop_plans import crop_plans_bp
from routes.crops import crops_bp
from routes.market import market_bp
from routes.reference import reference_bp
from routes.tracker import tracker_bp

logger = logging.getLogger(__name__)


def create_app(test_config=None):
    """Create and configure the Flask application."""
    if LOG_TO_FILE:
        os.makedirs(os.path.dirname(LOG_FILE_PATH), exist_ok=True)
    logging.config.dictConfig(LOGGING)

    app = Flask(__name__)
    app.config.update(get_config())

    if test_config:
        app.config.update(test_config)

    app.json.sort_keys = app.config['JSON_SORT_KEYS']

    # Initialize crop-plan database
    with app.app_context():
        init_db()

    # Load datasets; a DatasetLoadError here is fatal
    if app.config['LOAD_DATASETS']:
        init_analytics(app)

    # Register blueprints
    app.register_blueprint(reference_bp)
    app.register_blueprint(crops_bp)
    app.register_blueprint(market_bp)
    app.register_blueprint(tracker_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(crop_plans_bp)

    register_error_handlers(app)
    return app


def register_error_handlers(app):
    """Render every error as {'success': False, 'error': ...} JSON."""

    @app.errorhandler(FarmlyticsError)
    def handle_farmlytics_error(e):
        if e.status_code >= 500:
            logger.exception("Server error: %s", e.message)
        else:
            logger.info("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'success': False, 'error': e.description}), e.code


if __name__ == '__main__':
    try:
        app = create_app()
    except DatasetLoadError as e:
        logger.critical("Failed to initialize analytics services: %s", e)
        sys.exit(1)
    # Debug mode: enabled by default for development (auto-reload on file changes)
    # Set FLASK_DEBUG=0 to disable for production
    debug = os.environ.get('FLASK_DEBUG', '1') != '0'
    app.run(host='localhost', port=5000, debug=debug)
