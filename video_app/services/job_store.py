"""Persistence for job records."""
import logging
from typing import Optional

from models import db
from models.job import Job

logger = logging.getLogger(__name__)


class JobStore:
    """Loads and saves Job rows through the Flask-SQLAlchemy session.

    Must be used inside an application context. Database errors propagate.
    """

    def create(self, source_url: str) -> Job:
        job = Job(source_url=source_url, status='queued')
        db.session.add(job)
        db.session.commit()
        logger.info(f"Job {job.id} created for {source_url}")
        return job

    def load(self, job_id: int) -> Optional[Job]:
        return db.session.get(Job, job_id)

    def save(self, job: Job) -> None:
        db.session.add(job)
        db.session.commit()

    def rollback(self) -> None:
        db.session.rollback()
