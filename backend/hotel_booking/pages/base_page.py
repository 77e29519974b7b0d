"""Shared behaviour of the page flow objects."""
import logging
from pathlib import Path
from typing import Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from hotel_booking.calendar_navigator import DateNavigator
from hotel_booking.config import settings
from hotel_booking.element_resolver import ElementResolver
from hotel_booking.locators import CandidateSelectorList
from hotel_booking.obstruction_handler import ObstructionHandler
from hotel_booking.retry import RetryBudget, retry_until
from hotel_booking.tab_tracker import TabSessionTracker
from hotel_booking.utils import DateLike, format_booking_date

logger = logging.getLogger(__name__)

Target = Union[Locator, str]


class BasePage:
    """A page flow bound to one tab for its whole lifetime."""

    obstructions: tuple[CandidateSelectorList, ...] = ()

    def __init__(
            self,
            page: Page,
            resolver: Optional[ElementResolver] = None,
            obstruction_handler: Optional[ObstructionHandler] = None,
            tab_tracker: Optional[TabSessionTracker] = None,
            date_navigator: Optional[DateNavigator] = None):
        self._page = page
        self.resolver = resolver or ElementResolver()
        self.obstruction_handler = obstruction_handler or ObstructionHandler(self.resolver)
        self.tab_tracker = tab_tracker or TabSessionTracker()
        self.date_navigator = date_navigator or DateNavigator(self.resolver)

    @property
    def page(self) -> Page:
        return self._page

    def _locator(self, target: Target) -> Locator:
        return self.page.locator(target) if isinstance(target, str) else target

    async def clear_obstructions(self) -> int:
        return await self.obstruction_handler.clear(self.page, self.obstructions)

    async def probe_ready(self, markers: CandidateSelectorList, budget: Optional[RetryBudget] = None) -> bool:
        """Bounded check that one of the page's essential markers is visible."""
        budget = budget or RetryBudget(settings.ready_probe_attempts, settings.ready_probe_delay)

        async def marker_visible(attempt: int) -> bool:
            logger.info(f"Attempt {attempt}/{budget.max_attempts} to find {markers.name}...")
            return await self.resolver.resolve(self.page, markers) is not None

        return await retry_until(marker_visible, budget, markers.name)

    async def click(self, element: Target, element_name: str):
        el = self._locator(element)
        try:
            await el.wait_for(state="visible")
            await el.click()
            logger.info(f"Clicked on: {element_name}")
        except PlaywrightError as e:
            logger.error(f"Unable to click on: {element_name}: {e}")
            raise

    async def type(self, element: Target, text: str, element_name: str):
        el = self._locator(element)
        try:
            await el.wait_for(state="visible")
            await el.fill("")
            await el.fill(text)
            logger.info(f"Typed '{text}' into: {element_name}")
        except PlaywrightError as e:
            logger.error(f"Unable to type into: {element_name}: {e}")
            raise

    async def is_displayed(self, element: Target, element_name: str) -> bool:
        try:
            visible = await self._locator(element).is_visible()
        except PlaywrightError:
            logger.warning(f"{element_name} is not displayed")
            return False
        logger.info(f"{element_name} is displayed: {visible}")
        return visible

    async def scroll_to_element(self, element: Target, element_name: str):
        try:
            await self._locator(element).scroll_into_view_if_needed()
            logger.info(f"Scrolled to: {element_name}")
        except PlaywrightError as e:
            logger.error(f"Unable to scroll to: {element_name}: {e}")
            raise

    async def scroll_to_bottom(self):
        await self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")

    async def scroll_to(self, top: int):
        await self.page.evaluate("(top) => window.scrollTo({ top, behavior: 'smooth' })", top)

    async def wait_for_page_load(self):
        await self.page.wait_for_load_state("load")
        logger.info("Page loaded completely")

    async def wait_for(self, seconds: float):
        await self.page.wait_for_timeout(seconds * 1000)

    def format_date_for_ui(self, value: DateLike) -> str:
        try:
            return format_booking_date(value)
        except ValueError as e:
            logger.error(f"Failed to format date {value}: {e}")
            return str(value)

    async def save_debug_screenshot(self, name: str) -> Optional[Path]:
        """Best-effort full-page screenshot into the artifacts directory."""
        path = Path(settings.artifacts_dir) / f"debug-{name}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await self.page.screenshot(path=str(path), full_page=True)
        except (OSError, PlaywrightError) as e:
            logger.warning(f"Could not save debug screenshot {path}: {e}")
            return None
        logger.info(f"Saved debug screenshot: {path}")
        return path
