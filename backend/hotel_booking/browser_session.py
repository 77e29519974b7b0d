"""Browser session management for Playwright automation."""
import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from hotel_booking.config import settings

logger = logging.getLogger(__name__)


class BrowserSession:
    """One browser and one context per test; every tab of the test lives in it."""

    def __init__(self, artifacts_dir: Optional[str] = None):
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.playwright = None
        self.artifacts_dir = Path(artifacts_dir or settings.artifacts_dir)
        self._tracing = False

    async def start(self):
        """Start browser instance with realistic settings."""
        if self.browser and self.browser.is_connected():
            logger.debug("Browser already running and connected - skipping start")
            return

        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(
            headless=settings.headless,
            channel=settings.browser_channel or None,
            args=[
                '--start-maximized',
                '--disable-blink-features=AutomationControlled',  # Hide automation
            ])

        context_options = {
            'viewport': {
                'width': settings.viewport_width,
                'height': settings.viewport_height
            },
            'locale': 'en-US',
        }
        if settings.record_video:
            context_options['record_video_dir'] = str(self.artifacts_dir / 'videos')
        self.context = await self.browser.new_context(**context_options)
        self.context.set_default_timeout(settings.action_timeout)
        self.context.set_default_navigation_timeout(settings.navigation_timeout)

        if settings.record_trace:
            await self.context.tracing.start(screenshots=True, snapshots=True)
            self._tracing = True
        logger.info(f"Browser started (headless={settings.headless})")

    async def new_page(self) -> Page:
        """Create a new tab in the session's context."""
        if not self.context:
            await self.start()
        return await self.context.new_page()

    async def stop(self, keep_trace: bool = False, name: str = "trace"):
        """Stop the browser, saving the trace when asked (e.g. on failure)."""
        if self.context:
            if self._tracing:
                trace_path = None
                if keep_trace:
                    trace_path = self.artifacts_dir / 'traces' / f'{name}.zip'
                    trace_path.parent.mkdir(parents=True, exist_ok=True)
                await self.context.tracing.stop(path=str(trace_path) if trace_path else None)
                self._tracing = False
                if trace_path:
                    logger.info(f"Saved trace: {trace_path}")
            await self.context.close()
            self.context = None
        if self.browser:
            await self.browser.close()
            self.browser = None
        if self.playwright:
            await self.playwright.stop()
            self.playwright = None
        logger.info("Browser stopped")
