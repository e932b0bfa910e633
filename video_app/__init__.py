"""Flask application factory for the video pipeline service."""
import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from utils.config import get_app_config
from utils.logging import configure_logging


def create_app(config_override: Optional[dict] = None) -> Flask:
    """Create and configure Flask application using application factory pattern.

    Args:
        config_override: Optional configuration overrides for testing

    Returns:
        Flask app instance
    """
    app = Flask(__name__)

    # Load configuration
    config = get_app_config()
    app.config['APP_CONFIG'] = config

    app.config['SQLALCHEMY_DATABASE_URI'] = config.database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['DATA_DIR'] = config.data_dir

    # Apply any configuration overrides (useful for testing)
    if config_override:
        for key, value in config_override.items():
            app.config[key] = value

    CORS(app, origins=list(config.allowed_origins))

    # Setup logging
    configure_logging()

    # Creates the data directory, which may also hold the SQLite database
    init_pipeline(app)
    init_database(app)
    register_blueprints(app)
    register_error_handlers(app)

    return app


def init_database(app: Flask) -> None:
    """Initialize database extensions and create tables."""
    from models import init_db, db
    import models.job  # noqa: F401  registers the jobs table

    init_db(app)
    with app.app_context():
        db.create_all()

    logging.info("Database initialized successfully")


def init_pipeline(app: Flask) -> None:
    """Wire the job store, worker pool and orchestrator into the app."""
    from video_app.services.job_runner import JobRunner
    from video_app.services.job_service import JobService
    from video_app.services.job_store import JobStore
    from video_app.services.pipeline import VideoJobProcessor
    from video_app.services.storage import ArtifactStorage

    config = app.config['APP_CONFIG']
    storage = ArtifactStorage(app.config['DATA_DIR'])
    store = JobStore()
    processor = VideoJobProcessor(app, storage=storage, store=store)
    runner = JobRunner(max_workers=config.max_concurrent_jobs)

    app.extensions['artifact_storage'] = storage
    app.extensions['job_service'] = JobService(store, runner, processor)


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    # Import blueprints here to avoid circular imports
    from video_app.api.health import bp as health_bp
    from video_app.api.jobs import bp as jobs_bp
    from video_app.api.files import bp as files_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(files_bp, url_prefix='/files')


def register_error_handlers(app: Flask) -> None:
    """Register global error handlers."""
    from flask import jsonify
    from werkzeug.exceptions import HTTPException
    from utils.exceptions import InvalidRequestError, ServiceError

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal error'}), 500

    @app.errorhandler(InvalidRequestError)
    def handle_invalid_request(error):
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        app.logger.error(f"Service error: {error}")
        return jsonify({'error': str(error)}), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({'error': error.description}), error.code
