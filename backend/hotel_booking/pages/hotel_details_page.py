"""Hotel details page: availability, displayed dates, room selection and reserve."""
import logging
from dataclasses import dataclass, field
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from hotel_booking.config import settings
from hotel_booking.errors import ElementNotFound
from hotel_booking.locators import (AttributeMatch, CandidateSelectorList, StructuralMatch, TextMatch,
                                    candidates, contains_text_xpath)
from hotel_booking.obstruction_handler import BANNER_DISMISS, GENERIC_CLOSE
from hotel_booking.pages.base_page import BasePage
from hotel_booking.retry import RetryBudget, retry_until

logger = logging.getLogger(__name__)


DETAILS_MARKERS = candidates(
    "hotel details marker",
    StructuralMatch("#hp_hotel_name"),
    AttributeMatch("data-capla-component-boundary", "PropertyHeader", operator="*="),
    StructuralMatch("#hotelTmpl"),
    StructuralMatch("#basiclayout"),
)

AVAILABILITY_BUTTON = candidates(
    "availability button",
    # Text matches (fastest)
    TextMatch("See availability"),
    TextMatch("Check availability"),
    TextMatch("See prices"),
    TextMatch("See availability", tag="a"),
    # Data attributes
    AttributeMatch("data-testid", "availability", operator="*="),
    AttributeMatch("data-id", "availability", operator="*="),
    # Class-based
    AttributeMatch("class", "availability", tag="button", operator="*="),
    AttributeMatch("class", "availability", tag="a", operator="*="),
    # Generic fallbacks
    TextMatch("availability"),
    TextMatch("availability", tag="a"),
    StructuralMatch(contains_text_xpath("button", "availability")),
)

CHECK_IN_DISPLAY = candidates(
    "displayed check-in date",
    AttributeMatch("data-testid", "date-display-field-start"),
    StructuralMatch(".check-in span"),
    StructuralMatch("//span[@data-testid='date-display-field-start']"),
)

CHECK_OUT_DISPLAY = candidates(
    "displayed check-out date",
    AttributeMatch("data-testid", "date-display-field-end"),
    StructuralMatch(".check-out span"),
    StructuralMatch("//span[@data-testid='date-display-field-end']"),
)

EXPAND_ROOMS = candidates(
    "select room button",
    TextMatch("Select room"),
    TextMatch("See rooms"),
    AttributeMatch("data-testid", "select-room", operator="*="),
    AttributeMatch("class", "select-room", tag="button", operator="*="),
)

# Dropdowns come first: a <select> with quantities is the usual room picker,
# radio/checkbox inputs only appear on some page variants.
ROOM_INPUTS = candidates(
    "room inputs",
    StructuralMatch("//select[contains(@name, 'room') or contains(@class, 'room')]"),
    StructuralMatch("//input[(@type='radio' or @type='checkbox')"
                    " and (contains(@name, 'room') or contains(@class, 'room'))]"),
)

RESERVE_BUTTON = candidates(
    "reserve button",
    TextMatch("I'll reserve"),
    TextMatch("Reserve"),
    TextMatch("Reserve", tag="a"),
    AttributeMatch("data-testid", "reserve", operator="*="),
    AttributeMatch("name", "reserve", tag="button", operator="*="),
    AttributeMatch("class", "reserve", tag="button", operator="*="),
    StructuralMatch(contains_text_xpath("button", "reserve")),
    StructuralMatch(contains_text_xpath("a", "reserve")),
)


@dataclass(frozen=True)
class RoomSelectionPolicy:
    """What to do when the preferred room input is not selectable."""
    fallback_to_first_available: bool = field(
        default_factory=lambda: settings.room_fallback_to_first_available)


@dataclass(frozen=True)
class ReservePolicy:
    """Action labels accepted in place of a reserve control."""
    fallback_labels: tuple[str, ...] = field(
        default_factory=lambda: tuple(settings.reserve_fallback_labels))

    def fallback_candidates(self) -> Optional[CandidateSelectorList]:
        if not self.fallback_labels:
            return None
        return candidates("alternative reserve button",
                          *(TextMatch(label) for label in self.fallback_labels))


class HotelDetailsPage(BasePage):
    """Hotel details flow, bound to the tab opened from the search results."""

    obstructions = (BANNER_DISMISS, GENERIC_CLOSE)

    def __init__(
            self,
            page: Page,
            room_policy: Optional[RoomSelectionPolicy] = None,
            reserve_policy: Optional[ReservePolicy] = None,
            **kwargs):
        super().__init__(page, **kwargs)
        self.room_policy = room_policy or RoomSelectionPolicy()
        self.reserve_policy = reserve_policy or ReservePolicy()

    async def is_hotel_details_page_loaded(self) -> bool:
        try:
            await self.page.wait_for_load_state("domcontentloaded", timeout=15000)
        except PlaywrightError:
            logger.error("Hotel details page did not load within timeout")
            return False

        if "/hotel/" in self.page.url or await self.probe_ready(DETAILS_MARKERS):
            logger.info("Hotel details page fully loaded")
            return True

        logger.error(f"Hotel details page marker not found. Current URL: {self.page.url}")
        return False

    async def click_see_availability(self):
        """Click the availability button, scrolling further between attempts.

        Raises:
            ElementNotFound: No availability button after all attempts
        """
        logger.info("Looking for 'See Availability' button...")
        await self.clear_obstructions()

        try:
            await self.page.wait_for_load_state("domcontentloaded", timeout=10000)
        except PlaywrightError:
            logger.warning("Page load state timeout, continuing anyway")

        # Trigger lazy-loaded content
        await self.scroll_to(500)
        await self.page.wait_for_timeout(800)

        budget = RetryBudget(settings.element_wait_attempts, settings.element_wait_delay)

        async def click_availability(attempt: int) -> bool:
            button = await self.resolver.resolve(self.page, AVAILABILITY_BUTTON)
            if button is not None:
                try:
                    await button.scroll_into_view_if_needed(timeout=3000)
                    await self.page.wait_for_timeout(300)
                    await button.click(timeout=5000)
                    return True
                except PlaywrightError as e:
                    logger.warning(f"Click on availability button failed on attempt {attempt}: {e}")

            if attempt < budget.max_attempts:
                logger.info("Scrolling further...")
                await self.scroll_to(300 + attempt * 400)
            return False

        if await retry_until(click_availability, budget, AVAILABILITY_BUTTON.name):
            logger.info("Successfully clicked availability button")
            return

        logger.error(f"Could not find availability button after all attempts. Current URL: {self.page.url}")
        raise ElementNotFound(AVAILABILITY_BUTTON.name, AVAILABILITY_BUTTON.describe(), self.page.url)

    async def get_displayed_check_in_date(self) -> str:
        return await self._displayed_date(CHECK_IN_DISPLAY)

    async def get_displayed_check_out_date(self) -> str:
        return await self._displayed_date(CHECK_OUT_DISPLAY)

    async def _displayed_date(self, markers: CandidateSelectorList) -> str:
        found = []

        async def visible(attempt: int) -> bool:
            element = await self.resolver.resolve(self.page, markers)
            if element is not None:
                found.append(element)
            return element is not None

        budget = RetryBudget(settings.element_wait_attempts, settings.element_wait_delay)
        if not await retry_until(visible, budget, markers.name):
            raise ElementNotFound(markers.name, markers.describe(), self.page.url)

        date = ((await found[0].text_content()) or "").strip()
        logger.info(f"{markers.name}: {date}")
        return date

    async def select_room_and_reserve(self, preferred_room_index: int = 0):
        """Select a room and click the reserve control.

        Room list expansion and room selection are best-effort; a missing
        reserve control is fatal.
        """
        logger.info("Starting room selection and reservation process...")
        await self.clear_obstructions()
        await self.page.wait_for_timeout(3000)

        await self.scroll_to_rooms_section()
        await self.page.wait_for_timeout(1500)

        await self.expand_room_options()
        await self.select_room(preferred_room_index)
        await self.page.wait_for_timeout(1000)

        await self.click_reserve_button()
        logger.info("Room selection and reservation complete")
        await self.page.wait_for_load_state("domcontentloaded")

    async def scroll_to_rooms_section(self):
        try:
            await self.page.evaluate(
                "() => window.scrollTo({ top: document.body.scrollHeight / 2, behavior: 'smooth' })")
            await self.page.wait_for_timeout(800)
        except PlaywrightError as e:
            logger.warning(f"Could not scroll to rooms section: {e}")

    async def expand_room_options(self) -> bool:
        logger.info("Looking for 'Select room' buttons...")
        try:
            button = await self.resolver.resolve(self.page, EXPAND_ROOMS)
            if button is None:
                logger.info("No 'Select room' button found (rooms may already be visible)")
                return False
            await button.scroll_into_view_if_needed()
            await self.page.wait_for_timeout(300)
            await button.click()
            await self.page.wait_for_timeout(800)
        except PlaywrightError as e:
            logger.warning(f"Could not expand room options: {e}")
            return False
        logger.info("Expanded room options")
        return True

    async def select_room(self, preferred_index: int = 0) -> bool:
        """Select the room input at ``preferred_index``.

        Dropdowns are tried before radio/checkbox inputs: the preferred index
        is tried in each kind in turn. Falls back to the first selectable
        input of any kind when the room policy allows it.

        Returns:
            True if a room was selected
        """
        try:
            groups = await self.resolver.locate_each(self.page, ROOM_INPUTS)
            if not groups:
                logger.warning("No room selectors found, using default selection")
                return False

            counts = [await inputs.count() for inputs in groups]
            for inputs, count in zip(groups, counts):
                if 0 <= preferred_index < count:
                    preferred = inputs.nth(preferred_index)
                    kind = await self._selectable_kind(preferred)
                    if kind:
                        await self._choose_room(preferred, kind)
                        logger.info(f"Selected room {kind} at index {preferred_index}")
                        return True

            if not self.room_policy.fallback_to_first_available:
                logger.warning(f"Room at index {preferred_index} not selectable and fallback disabled")
                return False

            logger.warning("Could not select preferred room, using first available")
            for inputs, count in zip(groups, counts):
                for index in range(count):
                    element = inputs.nth(index)
                    kind = await self._selectable_kind(element)
                    if kind:
                        await self._choose_room(element, kind)
                        logger.info(f"Selected first available room {kind} at index {index}")
                        return True

            logger.warning("No selectable room found, using default selection")
            return False
        except PlaywrightError as e:
            logger.warning(f"Error selecting room, using default: {e}")
            return False

    @staticmethod
    async def _selectable_kind(element: Locator) -> Optional[str]:
        """'select' or 'input' when the element can be chosen, else None."""
        if not await element.is_visible():
            return None
        tag_name = await element.evaluate("el => el.tagName.toLowerCase()")
        if tag_name == "select":
            options = await element.locator("option").count()
            return "select" if options > 1 else None
        if tag_name == "input":
            return None if await element.is_disabled() else "input"
        return None

    async def _choose_room(self, element: Locator, kind: str):
        await element.scroll_into_view_if_needed()
        await self.page.wait_for_timeout(500)
        if kind == "select":
            await element.select_option(index=1)
        else:
            # Styled radio inputs are covered by an SVG
            await element.click(force=True)

    async def click_reserve_button(self):
        """Click the reserve control, falling back to the policy's alternative labels.

        Raises:
            ElementNotFound: Neither a reserve control nor an alternative was found
        """
        logger.info("Looking for Reserve button...")
        await self.page.wait_for_timeout(1000)

        attempted = RESERVE_BUTTON.describe()
        button = await self.resolver.resolve(self.page, RESERVE_BUTTON)

        if button is None:
            logger.info(f"Reserve button not found. Current URL: {self.page.url}")
            alternatives = self.reserve_policy.fallback_candidates()
            if alternatives is not None:
                logger.info("Trying alternative button texts...")
                attempted += alternatives.describe()
                button = await self.resolver.resolve(self.page, alternatives)
                if button is not None:
                    text = ((await button.text_content()) or "").strip()
                    logger.warning(f"Using alternative button: \"{text}\"")

        if button is None:
            logger.error("Reserve button not found after trying all selectors")
            raise ElementNotFound(RESERVE_BUTTON.name, attempted, self.page.url)

        await button.scroll_into_view_if_needed()
        await self.page.wait_for_timeout(500)
        await button.click()
        logger.info("Clicked Reserve button")
        await self.page.wait_for_load_state("domcontentloaded", timeout=10000)
