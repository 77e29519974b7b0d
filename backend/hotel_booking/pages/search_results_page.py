"""Search results page: paginate, match a hotel by name, open its details tab."""
import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from hotel_booking.config import settings
from hotel_booking.errors import HotelNotFound
from hotel_booking.locators import AttributeMatch, StructuralMatch, candidates
from hotel_booking.obstruction_handler import GENERIC_CLOSE, SIGN_IN_DISMISS
from hotel_booking.pages.base_page import BasePage
from hotel_booking.retry import RetryBudget, retry_until

logger = logging.getLogger(__name__)


HOTEL_CARDS = candidates(
    "hotel cards",
    AttributeMatch("data-testid", "property-card", tag="div"),
    StructuralMatch("//div[contains(@class, 'property-card')]"),
    AttributeMatch("data-testid", "property", tag="div", operator="*="),
)

TITLE_LINK = candidates(
    "hotel title link",
    AttributeMatch("data-testid", "title-link", tag="a"),
    StructuralMatch("h3 a"),
    AttributeMatch("href", "/hotel/", tag="a", operator="*="),
)

NEXT_PAGE = candidates(
    "next page button",
    AttributeMatch("aria-label", "Next page", tag="button"),
    AttributeMatch("aria-label", "Next", tag="button", operator="*="),
    StructuralMatch("//a[contains(@class, 'pagination-next')]"),
)


class SearchResultsPage(BasePage):
    """Search results flow."""

    obstructions = (SIGN_IN_DISMISS, GENERIC_CLOSE)

    @staticmethod
    def matches_hotel_name(card_text: Optional[str], hotel_name: str) -> bool:
        """Case-insensitive substring match of a hotel name in a card's text."""
        return hotel_name.casefold() in (card_text or "").casefold()

    async def is_search_results_page_loaded(self) -> bool:
        await self.clear_obstructions()
        url = self.page.url
        if "searchresults" in url or "search" in url:
            return True

        async def cards_present(attempt: int) -> bool:
            return await self.resolver.locate_all(self.page, HOTEL_CARDS) is not None

        budget = RetryBudget(settings.ready_probe_attempts, settings.ready_probe_delay)
        return await retry_until(cards_present, budget, "search result cards")

    async def select_hotel(self, hotel_name: str, max_pages: Optional[int] = None) -> Page:
        """Find ``hotel_name`` across result pages and open it in a new tab.

        Args:
            hotel_name: Name to look for, matched case-insensitively as a substring
            max_pages: Page budget, defaults to ``settings.results_max_pages``

        Returns:
            The hotel details tab

        Raises:
            HotelNotFound: No matching card before the last page or the budget
        """
        max_pages = max_pages or settings.results_max_pages
        await self.clear_obstructions()
        logger.info(f"Searching for hotel: {hotel_name}")

        pages_scanned = []
        for page_number in range(1, max_pages + 1):
            logger.info(f"Searching on page: {page_number}")
            pages_scanned.append(page_number)

            card = await self.find_hotel_card(hotel_name)
            if card is not None:
                return await self.open_hotel(card)

            if page_number == max_pages or not await self.go_to_next_page():
                break

        logger.error(f"Hotel not found: {hotel_name} after {len(pages_scanned)} page(s)")
        raise HotelNotFound(hotel_name, pages_scanned, self.page.url)

    async def find_hotel_card(self, hotel_name: str) -> Optional[Locator]:
        """First result card on the current page whose text contains the name."""
        # Lazy-loaded cards only render once scrolled into view
        await self.scroll_to_bottom()
        await self.wait_for(1)

        cards = await self.resolver.locate_all(self.page, HOTEL_CARDS)
        if cards is None:
            return None

        count = await cards.count()
        for index in range(count):
            card = cards.nth(index)
            try:
                text = await card.inner_text()
            except PlaywrightError as e:
                logger.debug(f"Could not read card {index}: {e}")
                continue
            if self.matches_hotel_name(text, hotel_name):
                logger.info(f"Found match: {hotel_name} (card {index})")
                return card
        return None

    async def open_hotel(self, card: Locator) -> Page:
        """Click the card's title link and return the details tab it opens."""
        link = await self.resolver.require(card, TITLE_LINK)

        async def click_title():
            await link.click(force=True)

        details_page = await self.tab_tracker.with_new_tab(self.page, click_title)
        logger.info("Switched to hotel details tab successfully")
        return details_page

    async def go_to_next_page(self) -> bool:
        """Advance to the next result page.

        Returns:
            False without clicking when the control is missing or disabled
        """
        next_button = await self.resolver.resolve(self.page, NEXT_PAGE, require_enabled=False)
        if next_button is None:
            logger.info("No next page button found")
            return False

        if await self._is_disabled(next_button):
            logger.info("Next page button is disabled - last page reached")
            return False

        await self.scroll_to_bottom()
        await next_button.click(force=True)
        await self.wait_for_page_load()
        await self.clear_obstructions()
        logger.info("Moved to next page")
        return True

    @staticmethod
    async def _is_disabled(button: Locator) -> bool:
        if await button.get_attribute("disabled") is not None:
            return True
        aria_disabled = await button.get_attribute("aria-disabled")
        return (aria_disabled or "").lower() == "true"
