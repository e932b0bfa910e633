"""Job submission and lookup used by the HTTP layer."""
import logging
from typing import Optional

from flask import current_app

from models.job import Job
from video_app.services.job_runner import JobRunner
from video_app.services.job_store import JobStore
from video_app.services.pipeline import VideoJobProcessor

logger = logging.getLogger(__name__)


class JobService:
    """Creates jobs and hands them to the background runner."""

    def __init__(self, store: JobStore, runner: JobRunner, processor: VideoJobProcessor):
        self.store = store
        self.runner = runner
        self.processor = processor

    def submit_job(self, url: str) -> int:
        """Create a queued job for ``url`` and schedule it without waiting.

        Returns:
            The new job id
        """
        job = self.store.create(url)
        self.runner.submit(self.processor.process_job, job.id)
        logger.info(f"Job {job.id} queued")
        return job.id

    def get_job(self, job_id: int) -> Optional[Job]:
        return self.store.load(job_id)


def get_job_service() -> JobService:
    """Job service bound to the current application."""
    return current_app.extensions['job_service']
