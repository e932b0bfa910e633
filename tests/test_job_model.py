"""Tests for Job model state transitions and the job service."""
from unittest.mock import Mock

from models import db
from models.job import Job
from video_app.services.job_runner import JobRunner
from video_app.services.job_service import JobService
from video_app.services.job_store import JobStore


class TestJobModelMethods:
    """Job status helpers keep the artifact/error invariants."""

    def test_new_job_is_queued_with_public_id(self, app):
        job = JobStore().create('https://youtu.be/abc')

        assert job.status == 'queued'
        assert len(job.public_id) == 36
        assert job.created_at is not None
        assert job.screenshot_path is None
        assert not job.is_terminal

    def test_mark_done_populates_artifacts(self, app):
        job = Job(source_url='https://youtu.be/abc')
        job.mark_processing()
        job.mark_done('/files/screenshots/a.png', '/files/audio/a.wav', '/files/results/a.json')

        assert job.status == 'done'
        assert job.is_terminal
        assert job.error is None
        assert job.audio_path == '/files/audio/a.wav'

    def test_mark_error_clears_artifacts(self, app):
        job = Job(source_url='https://youtu.be/abc')
        job.mark_done('/files/screenshots/a.png', '/files/audio/a.wav', '/files/results/a.json')
        job.mark_error('boom')

        assert job.status == 'error'
        assert job.error == 'boom'
        assert job.screenshot_path is None
        assert job.audio_path is None
        assert job.result_json_path is None

    def test_mark_processing_resets_stale_state(self, app):
        job = Job(source_url='https://youtu.be/abc')
        job.mark_error('old failure')
        job.mark_processing()

        assert job.status == 'processing'
        assert job.error is None

    def test_to_dict(self, app):
        job = JobStore().create('https://youtu.be/abc')
        data = job.to_dict()

        assert set(data.keys()) == {
            'id', 'source_url', 'status', 'public_id', 'screenshot_path',
            'audio_path', 'result_json_path', 'error', 'created_at', 'updated_at',
        }
        assert data['created_at'] is not None


class TestJobService:

    def test_submit_job_schedules_without_waiting(self, app):
        runner = Mock()
        processor = Mock()
        service = JobService(JobStore(), runner, processor)

        job_id = service.submit_job('https://youtu.be/abc')

        assert service.get_job(job_id).status == 'queued'
        runner.submit.assert_called_once_with(processor.process_job, job_id)
        processor.process_job.assert_not_called()

    def test_get_job_missing(self, app):
        service = JobService(JobStore(), Mock(), Mock())
        assert service.get_job(424242) is None


def test_job_runner_runs_submitted_work():
    runner = JobRunner(max_workers=1)
    try:
        future = runner.submit(lambda x: x * 2, 21)
        assert future.result(timeout=5) == 42
    finally:
        runner.shutdown()


def test_job_runner_logs_crash(caplog):
    runner = JobRunner(max_workers=1)

    def crash():
        raise RuntimeError("unexpected")

    try:
        future = runner.submit(crash)
        future.exception(timeout=5)
    finally:
        runner.shutdown()

    assert any("Worker crash" in record.message for record in caplog.records)
