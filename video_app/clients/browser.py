"""Headless browser client that screenshots a video page."""
import logging
from functools import lru_cache
from typing import Optional

from playwright.sync_api import sync_playwright, Error as PlaywrightError

from utils.config import CaptureSettings, get_app_config
from utils.exceptions import CaptureError

logger = logging.getLogger(__name__)

BROWSER_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']

CONSENT_SELECTOR = (
    'button:has-text("I agree"), button:has-text("Accept all"), '
    'form[action*="consent"] button'
)
PLAY_SELECTOR = 'button[aria-label*="Play"], button[title*="Play"]'

CONSENT_TIMEOUT_MS = 3_000
CONSENT_PAUSE_MS = 1_000
PLAY_TIMEOUT_MS = 4_000


class PageCapture:
    """Client for rendering a page in Chromium and saving a screenshot."""

    def __init__(self, settings: Optional[CaptureSettings] = None):
        self.settings = settings or get_app_config().capture

    def capture(self, url: str, screenshot_path: str) -> str:
        """Render ``url`` and write a viewport screenshot to ``screenshot_path``.

        The browser is closed before returning, also when navigation or the
        screenshot fails. Navigation timeouts propagate as Playwright's own
        ``TimeoutError``.

        Returns:
            The screenshot path
        """
        logger.info(f"Capturing screenshot of {url}")

        with sync_playwright() as p:
            try:
                browser = p.chromium.launch(headless=True, args=BROWSER_ARGS)
            except PlaywrightError as exc:
                raise CaptureError(f"Browser launch failed: {exc.message}") from exc

            try:
                page = browser.new_page(viewport={
                    'width': self.settings.viewport_width,
                    'height': self.settings.viewport_height,
                })
                page.goto(
                    url,
                    wait_until='networkidle',
                    timeout=self.settings.navigation_timeout_ms,
                )

                if self._click_if_present(page, CONSENT_SELECTOR, CONSENT_TIMEOUT_MS):
                    page.wait_for_timeout(CONSENT_PAUSE_MS)
                self._click_if_present(page, PLAY_SELECTOR, PLAY_TIMEOUT_MS)

                page.wait_for_timeout(self.settings.settle_delay_ms)
                page.screenshot(path=screenshot_path)
            finally:
                browser.close()

        logger.info(f"Screenshot saved: {screenshot_path}")
        return screenshot_path

    def _click_if_present(self, page, selector: str, timeout_ms: int) -> bool:
        """Best-effort click; a missing element is not an error."""
        try:
            page.wait_for_selector(selector, timeout=timeout_ms)
            page.click(selector, timeout=timeout_ms)
            return True
        except PlaywrightError as exc:
            logger.debug(f"Optional selector skipped ({selector}): {exc.message}")
            return False


@lru_cache(maxsize=1)
def get_page_capture() -> PageCapture:
    """Get cached page capture client."""
    return PageCapture()
