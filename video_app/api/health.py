"""Health check API blueprint."""
from flask import Blueprint, jsonify
import logging

bp = Blueprint('health', __name__)
logger = logging.getLogger(__name__)


@bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint to verify service is running."""
    logger.debug("Health check requested")
    return jsonify({'ok': True})


@bp.route('/', methods=['GET'])
def root():
    """Root endpoint with API information."""
    return jsonify({
        "service": "Video Insight Pipeline",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "analyze": "/analyze",
            "result": "/result/{id}",
            "files": "/files/{path}"
        }
    })
