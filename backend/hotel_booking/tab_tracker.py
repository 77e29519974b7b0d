"""Hand-off to browser tabs opened by an action."""
import logging
from typing import Awaitable, Callable, Optional, Sequence

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from hotel_booking.config import settings
from hotel_booking.errors import NoNewTabOpened

logger = logging.getLogger(__name__)


class TabSessionTracker:
    """Runs an action expected to open a tab and returns that tab."""

    def __init__(self, timeout_ms: Optional[int] = None, load_state: str = "domcontentloaded"):
        self.timeout_ms = settings.new_tab_timeout if timeout_ms is None else timeout_ms
        self.load_state = load_state

    async def with_new_tab(self, page: Page, trigger_action: Callable[[], Awaitable[None]]) -> Page:
        """Run ``trigger_action`` and return the tab it opens.

        The new-page listener is attached to the page's context before the
        action runs, so a tab that opens immediately is not missed. Errors
        raised by the action itself propagate unchanged.

        Args:
            page: Tab the action runs on; left open and unchanged
            trigger_action: Async callable that clicks or navigates

        Returns:
            The new tab, loaded at least to DOM content parsed

        Raises:
            NoNewTabOpened: No tab appeared within the timeout
        """
        context = page.context
        triggered = False
        try:
            async with context.expect_page(timeout=self.timeout_ms) as new_page_info:
                await trigger_action()
                triggered = True
            new_page = await new_page_info.value
        except PlaywrightTimeoutError as e:
            if not triggered:
                raise
            logger.error(f"No new tab opened within {self.timeout_ms} ms")
            raise NoNewTabOpened(self.timeout_ms, page.url) from e

        if new_page is page:
            raise NoNewTabOpened(self.timeout_ms, page.url)

        await new_page.wait_for_load_state(self.load_state, timeout=self.timeout_ms)
        await new_page.bring_to_front()
        logger.info(f"Switched to new tab: {new_page.url}")
        return new_page

    async def close_stale_tabs(self, page: Page, keep: Sequence[Page] = ()) -> int:
        """Close every other tab of the page's context not listed in ``keep``."""
        closed = 0
        for other in list(page.context.pages):
            if other is page or any(other is kept for kept in keep) or other.is_closed():
                continue
            await other.close()
            closed += 1
        if closed:
            logger.info(f"Closed {closed} stale tab(s)")
        return closed
