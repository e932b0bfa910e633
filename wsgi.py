"""WSGI entry point for production deployment with gunicorn."""

from video_app import create_app

# Create Flask app
app = create_app()

# Export app for gunicorn. Use a single gunicorn worker process: jobs run on
# the in-process worker pool, and per-job locks are only held in memory.
application = app
