"""Booking.com home page: destination, dates and search."""
import logging

from playwright.async_api import Error as PlaywrightError

from hotel_booking.config import settings
from hotel_booking.locators import AttributeMatch, StructuralMatch, TextMatch, candidates
from hotel_booking.obstruction_handler import COOKIE_CONSENT, GENERIC_CLOSE, SIGN_IN_DISMISS
from hotel_booking.pages.base_page import BasePage
from hotel_booking.utils import DateLike

logger = logging.getLogger(__name__)


DESTINATION_FIELD = candidates(
    "destination field",
    AttributeMatch("name", "ss", tag="input"),
    AttributeMatch("placeholder", "Where are you going", tag="input", operator="*="),
    AttributeMatch("data-component", "search/destination/input-placeholder", tag="input"),
)

DATE_PICKER = candidates(
    "date picker",
    AttributeMatch("data-testid", "searchbox-dates-container", tag="button"),
    AttributeMatch("data-testid", "searchbox-dates-container"),
)

OPEN_CALENDAR = candidates(
    "open calendar",
    AttributeMatch("data-testid", "searchbox-datepicker-calendar"),
    AttributeMatch("data-date", tag="span"),
)

SEARCH_BUTTON = candidates(
    "search button",
    StructuralMatch('button[type="submit"]:has-text("Search")'),
    TextMatch("Search"),
    StructuralMatch('button[type="submit"]'),
)


class BookingHomePage(BasePage):
    """Home page flow."""

    obstructions = (COOKIE_CONSENT, SIGN_IN_DISMISS, GENERIC_CLOSE)

    async def navigate_to_booking(self):
        """Open the home page and clear consent and sign-in prompts."""
        logger.info(f"Navigating to {settings.base_url}...")
        await self.page.goto(settings.base_url, wait_until="domcontentloaded",
                             timeout=settings.navigation_timeout)
        await self.clear_obstructions()
        logger.info("Navigation complete")

    async def is_home_page_loaded(self) -> bool:
        """Check the destination field becomes visible."""
        logger.info("Verifying home page is loaded...")
        try:
            await self.page.wait_for_load_state("domcontentloaded", timeout=10000)
        except PlaywrightError as e:
            logger.warning(f"Load state timeout, probing anyway: {e}")

        if await self.probe_ready(DESTINATION_FIELD):
            logger.info("Home page loaded - destination field found")
            return True

        logger.error(f"Home page did not load - destination field not found. Current URL: {self.page.url}")
        await self.save_debug_screenshot("homepage-failed")
        return False

    async def enter_destination(self, destination: str):
        logger.info(f"Entering destination: {destination}")
        field = await self.resolver.require(self.page, DESTINATION_FIELD)
        await field.click()
        await self.page.wait_for_timeout(2000)
        await field.fill(destination)
        logger.info(f"Entered destination: {destination}")
        await self.page.wait_for_timeout(2500)

    async def choose_destination_suggestion(self, destination: str) -> bool:
        """Pick the matching autocomplete entry if the dropdown shows one."""
        suggestion = candidates(
            "destination suggestion",
            TextMatch(destination, tag="li"),
            TextMatch(destination, tag='[data-testid="autocomplete-result"]'),
        )
        try:
            element = await self.resolver.resolve(self.page, suggestion)
            if element is None:
                logger.info("No autocomplete dropdown")
                return False
            await element.click()
        except PlaywrightError as e:
            logger.warning(f"Could not pick destination suggestion: {e}")
            return False
        logger.info("Selected destination from dropdown")
        return True

    async def open_date_picker(self) -> bool:
        """Open the calendar unless picking a destination already opened it."""
        if await self.resolver.resolve(self.page, OPEN_CALENDAR) is not None:
            return True
        try:
            button = await self.resolver.resolve(self.page, DATE_PICKER)
            if button is None:
                logger.info("Date picker button not found")
                return False
            await button.click()
            await self.page.wait_for_timeout(500)
        except PlaywrightError as e:
            logger.warning(f"Could not open date picker: {e}")
            return False
        return True

    async def select_dates(self, check_in: DateLike, check_out: DateLike):
        await self.open_date_picker()
        await self.date_navigator.select_range(self.page, check_in, check_out)

    async def click_search(self):
        logger.info("Clicking search button...")
        button = await self.resolver.require(self.page, SEARCH_BUTTON)
        await button.scroll_into_view_if_needed()
        await button.click()
        logger.info("Search button clicked")
        await self.page.wait_for_load_state("domcontentloaded", timeout=settings.navigation_timeout)
        await self.clear_obstructions()
        logger.info("Search results loaded")

    async def search_hotel(self, destination: str, check_in: DateLike, check_out: DateLike):
        """Fill destination and dates, then submit the search."""
        await self.enter_destination(destination)
        await self.choose_destination_suggestion(destination)
        await self.select_dates(check_in, check_out)
        await self.click_search()
