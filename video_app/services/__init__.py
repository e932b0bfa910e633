"""Services module for job orchestration and persistence."""
from video_app.services.job_service import JobService, get_job_service

__all__ = ['JobService', 'get_job_service']
