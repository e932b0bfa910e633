"""Tests for the job submission and result endpoints."""
import pytest

from models import db
from models.job import Job
from video_app.api.jobs import is_supported_video_url


class TestAnalyze:
    """Test POST /analyze."""

    def test_valid_url_queues_job(self, app, client):
        service = app.extensions['job_service']

        response = client.post('/analyze', json={'url': 'https://www.youtube.com/watch?v=abc'})

        assert response.status_code == 202
        data = response.get_json()
        assert data['message'] == 'Job queued'
        assert data['check'] == f"/result/{data['id']}"

        job = db.session.get(Job, int(data['id']))
        assert job.status == 'queued'
        assert job.public_id == data['publicId']
        assert job.screenshot_path is None
        service.runner.submit.assert_called_once_with(service.processor.process_job, job.id)

    @pytest.mark.parametrize('payload', [
        {'url': 'not-a-video-link'},
        {'url': 'https://vimeo.com/12345'},
        {'url': ''},
        {},
    ])
    def test_invalid_url_is_rejected_before_job_exists(self, app, client, payload):
        response = client.post('/analyze', json=payload)

        assert response.status_code == 400
        assert 'valid YouTube URL' in response.get_json()['error']
        assert Job.query.count() == 0
        app.extensions['job_service'].runner.submit.assert_not_called()

    def test_non_json_body_is_rejected(self, client):
        response = client.post('/analyze', data='url=https://youtu.be/abc')
        assert response.status_code == 400


class TestResult:
    """Test GET /result/<id>."""

    def test_returns_job(self, client):
        job = Job(source_url='https://youtu.be/abc')
        db.session.add(job)
        db.session.commit()

        response = client.get(f'/result/{job.id}')

        assert response.status_code == 200
        data = response.get_json()
        assert data['id'] == job.id
        assert data['status'] == 'queued'
        assert data['source_url'] == 'https://youtu.be/abc'
        assert data['error'] is None

    def test_missing_job_returns_404(self, client):
        response = client.get('/result/12345')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Not found'}

    def test_invalid_id_returns_400(self, client):
        response = client.get('/result/abc')
        assert response.status_code == 400
        assert response.get_json() == {'error': 'Invalid id'}


class TestFiles:
    """Test GET /files/<path>."""

    def test_serves_artifact(self, client, storage):
        paths = storage.run_paths(1, '1-1700000000000')
        with open(paths.screenshot, 'wb') as f:
            f.write(b'png-bytes')

        response = client.get(storage.public_path(paths.screenshot))

        assert response.status_code == 200
        assert response.data == b'png-bytes'

    def test_missing_artifact_returns_404(self, client):
        response = client.get('/files/screenshots/missing.png')
        assert response.status_code == 404


def test_is_supported_video_url():
    assert is_supported_video_url('https://www.youtube.com/watch?v=abc')
    assert is_supported_video_url('youtu.be/abc')
    assert is_supported_video_url('HTTP://YOUTUBE.COM/shorts/xyz')
    assert not is_supported_video_url('not-a-video-link')
    assert not is_supported_video_url(None)
