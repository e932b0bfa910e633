"""Job model for video pipeline persistence."""
import uuid
from datetime import datetime, timezone

from models import db


TERMINAL_STATUSES = ('done', 'error')


def _utcnow():
    return datetime.now(timezone.utc)


class Job(db.Model):
    """One end-to-end request to process a single video URL."""

    __tablename__ = 'jobs'

    id = db.Column(db.Integer, primary_key=True)
    source_url = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='queued')  # queued, processing, done, error
    public_id = db.Column(db.String(36), nullable=False, unique=True, default=lambda: str(uuid.uuid4()))

    # Public reference paths, only populated once the job is done
    screenshot_path = db.Column(db.Text, nullable=True)
    audio_path = db.Column(db.Text, nullable=True)
    result_json_path = db.Column(db.Text, nullable=True)

    error = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    def clear_artifacts(self):
        """Unset every artifact reference."""
        self.screenshot_path = None
        self.audio_path = None
        self.result_json_path = None

    def mark_processing(self):
        self.status = 'processing'
        self.error = None
        self.clear_artifacts()

    def mark_done(self, screenshot_path, audio_path, result_json_path):
        self.screenshot_path = screenshot_path
        self.audio_path = audio_path
        self.result_json_path = result_json_path
        self.error = None
        self.status = 'done'

    def mark_error(self, message):
        self.clear_artifacts()
        self.error = message or 'Unknown error'
        self.status = 'error'

    def to_dict(self):
        """Convert job to dictionary representation."""
        return {
            'id': self.id,
            'source_url': self.source_url,
            'status': self.status,
            'public_id': self.public_id,
            'screenshot_path': self.screenshot_path,
            'audio_path': self.audio_path,
            'result_json_path': self.result_json_path,
            'error': self.error,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Job {self.id} status={self.status} url={self.source_url}>'
