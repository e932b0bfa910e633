"""Job submission and result API."""
import re
import logging

from flask import Blueprint, jsonify, request

from video_app.services.job_service import get_job_service

bp = Blueprint('jobs', __name__)
logger = logging.getLogger(__name__)

YOUTUBE_URL_PATTERN = re.compile(r'^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+', re.IGNORECASE)


def is_supported_video_url(url) -> bool:
    """True for YouTube watch/share URLs."""
    return isinstance(url, str) and bool(YOUTUBE_URL_PATTERN.match(url))


@bp.route('/analyze', methods=['POST'])
def analyze():
    """Queue a video URL for processing.

    Returns:
        202: Job queued
        400: Missing or unsupported URL
        500: Job could not be created
    """
    data = request.get_json(silent=True) or {}
    url = data.get('url') if isinstance(data, dict) else None

    if not is_supported_video_url(url):
        return jsonify({'error': 'Provide a valid YouTube URL in { "url": "..." }'}), 400

    service = get_job_service()
    try:
        job_id = service.submit_job(url.strip())
        job = service.get_job(job_id)
    except Exception as e:
        logger.error(f"Job submission failed: {e}")
        return jsonify({'error': 'Internal error'}), 500

    return jsonify({
        'message': 'Job queued',
        'id': str(job_id),
        'publicId': job.public_id,
        'check': f'/result/{job_id}',
    }), 202


@bp.route('/result/<job_id>', methods=['GET'])
def get_result(job_id):
    """Return the job record with its current status."""
    try:
        job_id = int(job_id)
    except ValueError:
        return jsonify({'error': 'Invalid id'}), 400

    job = get_job_service().get_job(job_id)
    if job is None:
        return jsonify({'error': 'Not found'}), 404

    return jsonify(job.to_dict())
