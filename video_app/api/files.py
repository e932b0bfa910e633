"""Static serving of pipeline artifacts."""
from flask import Blueprint, current_app, send_from_directory

bp = Blueprint('files', __name__)


@bp.route('/<path:filename>', methods=['GET'])
def serve_file(filename):
    """Serve a screenshot, WAV or result document from the data directory."""
    return send_from_directory(current_app.config['DATA_DIR'], filename)
