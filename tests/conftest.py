"""Pytest configuration and fixtures."""
import os
import pytest
from unittest.mock import Mock


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables for all tests."""
    test_env_vars = {
        "FLASK_ENV": "testing",
        "DATABASE_URL": "sqlite:///:memory:",  # Use in-memory SQLite for tests
        "ELEVENLABS_API_KEY": "test-elevenlabs-key",
        "MAX_CONCURRENT_JOBS": "1",
    }

    for key, value in test_env_vars.items():
        os.environ[key] = value

    yield

    # Clean up environment variables after tests
    for key in test_env_vars:
        os.environ.pop(key, None)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point DATA_DIR at a fresh temporary directory."""
    from utils.config import get_app_config

    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    get_app_config.cache_clear()
    yield tmp_path
    get_app_config.cache_clear()


@pytest.fixture
def app(data_dir):
    """Create Flask app backed by in-memory SQLite."""
    from video_app import create_app
    from models import db

    app = create_app({'TESTING': True})

    # Jobs are run explicitly by the tests, never in the background
    app.extensions['job_service'].runner.shutdown(wait=True)
    app.extensions['job_service'].runner = Mock()

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions['artifact_storage']
