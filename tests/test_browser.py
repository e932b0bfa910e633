"""Test suite for the page capture client."""
import pytest
from unittest.mock import MagicMock, patch

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from utils.config import CaptureSettings
from utils.exceptions import CaptureError
from video_app.clients.browser import PageCapture, CONSENT_SELECTOR, PLAY_SELECTOR


VIDEO_URL = "https://www.youtube.com/watch?v=abc"


@pytest.fixture
def playwright_mocks():
    with patch('video_app.clients.browser.sync_playwright') as mock_sync_playwright:
        p = MagicMock()
        mock_sync_playwright.return_value.__enter__.return_value = p
        browser = p.chromium.launch.return_value
        page = browser.new_page.return_value
        yield p, browser, page


class TestPageCapture:
    """Test cases for PageCapture."""

    def setup_method(self):
        self.capture = PageCapture(CaptureSettings(
            navigation_timeout_ms=90_000,
            settle_delay_ms=3_000,
            viewport_width=1280,
            viewport_height=720,
        ))

    def test_capture_success(self, playwright_mocks, tmp_path):
        p, browser, page = playwright_mocks
        screenshot_path = str(tmp_path / "shot.png")

        result = self.capture.capture(VIDEO_URL, screenshot_path)

        assert result == screenshot_path
        browser.new_page.assert_called_once_with(viewport={'width': 1280, 'height': 720})
        page.goto.assert_called_once_with(VIDEO_URL, wait_until='networkidle', timeout=90_000)
        page.click.assert_any_call(CONSENT_SELECTOR, timeout=3_000)
        page.click.assert_any_call(PLAY_SELECTOR, timeout=4_000)
        page.wait_for_timeout.assert_any_call(3_000)
        page.screenshot.assert_called_once_with(path=screenshot_path)
        browser.close.assert_called_once()

    def test_missing_overlays_are_ignored(self, playwright_mocks, tmp_path):
        p, browser, page = playwright_mocks
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 3000ms exceeded.")

        self.capture.capture(VIDEO_URL, str(tmp_path / "shot.png"))

        page.click.assert_not_called()
        page.screenshot.assert_called_once()
        browser.close.assert_called_once()

    def test_navigation_timeout_propagates_and_closes_browser(self, playwright_mocks, tmp_path):
        p, browser, page = playwright_mocks
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 90000ms exceeded.")

        with pytest.raises(PlaywrightTimeoutError, match="Timeout 90000ms exceeded"):
            self.capture.capture(VIDEO_URL, str(tmp_path / "shot.png"))

        page.screenshot.assert_not_called()
        browser.close.assert_called_once()

    def test_screenshot_failure_closes_browser(self, playwright_mocks, tmp_path):
        p, browser, page = playwright_mocks
        page.screenshot.side_effect = PlaywrightError("Target page, context or browser has been closed")

        with pytest.raises(PlaywrightError):
            self.capture.capture(VIDEO_URL, str(tmp_path / "shot.png"))

        browser.close.assert_called_once()

    def test_launch_failure_raises_capture_error(self, playwright_mocks, tmp_path):
        p, browser, page = playwright_mocks
        p.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")

        with pytest.raises(CaptureError, match="Browser launch failed"):
            self.capture.capture(VIDEO_URL, str(tmp_path / "shot.png"))

        browser.close.assert_not_called()
