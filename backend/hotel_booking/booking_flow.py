"""End-to-end booking flow: search, pick the hotel, verify dates, reserve."""
import logging
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Page

from hotel_booking.booking_data import BookingRow
from hotel_booking.errors import PageNotReady
from hotel_booking.pages.home_page import BookingHomePage
from hotel_booking.pages.hotel_details_page import HotelDetailsPage, ReservePolicy, RoomSelectionPolicy
from hotel_booking.pages.search_results_page import SearchResultsPage
from hotel_booking.utils import date_text_matches, format_booking_date

logger = logging.getLogger(__name__)


@dataclass
class BookingOutcome:
    """What the flow saw on the hotel details tab."""
    row: BookingRow
    details_page: Page
    displayed_check_in: str
    displayed_check_out: str

    @property
    def expected_check_in(self) -> str:
        return format_booking_date(self.row.check_in)

    @property
    def expected_check_out(self) -> str:
        return format_booking_date(self.row.check_out)

    def dates_match(self) -> bool:
        return (date_text_matches(self.displayed_check_in, self.row.check_in)
                and date_text_matches(self.displayed_check_out, self.row.check_out))


class BookingFlow:
    """Runs one booking row against the site, starting from a ready tab."""

    def __init__(
            self,
            page: Page,
            preferred_room_index: int = 0,
            room_policy: Optional[RoomSelectionPolicy] = None,
            reserve_policy: Optional[ReservePolicy] = None):
        self.page = page
        self.preferred_room_index = preferred_room_index
        self.room_policy = room_policy
        self.reserve_policy = reserve_policy

    async def run(self, row: BookingRow, reserve: bool = True) -> BookingOutcome:
        """Execute the flow for ``row``.

        Args:
            row: Location, dates and hotel to book
            reserve: Select a room and click reserve after verifying dates

        Returns:
            Displayed dates and the details tab

        Raises:
            PageNotReady: A readiness probe failed
        """
        logger.info(f"========== Starting hotel booking flow for {row.hotel_name} ==========")

        home = BookingHomePage(self.page)
        await home.navigate_to_booking()
        if not await home.is_home_page_loaded():
            raise PageNotReady("Home page did not load", self.page.url)

        await home.search_hotel(row.location, row.check_in, row.check_out)
        logger.info("Hotel search completed")

        results = SearchResultsPage(self.page)
        if not await results.is_search_results_page_loaded():
            raise PageNotReady("Search results page did not load", self.page.url)

        details_tab = await results.select_hotel(row.hotel_name)
        logger.info(f"Hotel selected: {row.hotel_name}")

        details = HotelDetailsPage(details_tab, room_policy=self.room_policy,
                                   reserve_policy=self.reserve_policy)
        if not await details.is_hotel_details_page_loaded():
            raise PageNotReady("Hotel details page did not load", details_tab.url)

        await details.click_see_availability()
        outcome = BookingOutcome(
            row=row,
            details_page=details_tab,
            displayed_check_in=await details.get_displayed_check_in_date(),
            displayed_check_out=await details.get_displayed_check_out_date(),
        )

        if reserve:
            await details.select_room_and_reserve(self.preferred_room_index)
            logger.info("Room selected and reserve button clicked")

        logger.info(f"========== Hotel booking flow completed for {row.hotel_name} ==========")
        return outcome
