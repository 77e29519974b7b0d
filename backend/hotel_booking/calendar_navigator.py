"""Calendar navigation for the search box date picker."""
import logging
from enum import Enum
from typing import Optional

from playwright.async_api import Page

from hotel_booking.config import settings
from hotel_booking.element_resolver import ElementResolver
from hotel_booking.errors import DateNotReachable
from hotel_booking.locators import AttributeMatch, CandidateSelectorList, StructuralMatch, candidates
from hotel_booking.retry import RetryBudget
from hotel_booking.utils import DateLike, to_iso_date

logger = logging.getLogger(__name__)


NEXT_MONTH = candidates(
    "next month button",
    AttributeMatch("aria-label", "Next month", tag="button"),
    AttributeMatch("aria-label", "Next month", tag="button", operator="*="),
    StructuralMatch("//button[contains(@class, 'calendar') and contains(@class, 'next')]"),
)


class CalendarState(Enum):
    """Calendar navigation state."""
    SCANNING = "Scanning"
    FOUND = "Found"
    EXHAUSTED = "Exhausted"


class DateNavigator:
    """Pages a month calendar forward until a date can be selected.

    The calendar only moves forward within one call. Each page advance is a
    forced click, the next-month arrow sits under decorative layers that
    intercept pointer events.
    """

    def __init__(
            self,
            resolver: Optional[ElementResolver] = None,
            budget: Optional[RetryBudget] = None,
            next_page_candidates: CandidateSelectorList = NEXT_MONTH):
        self.resolver = resolver or ElementResolver()
        self.budget = budget or RetryBudget(settings.calendar_max_pages, settings.calendar_page_delay)
        self.next_page_candidates = next_page_candidates
        self.state = CalendarState.SCANNING

    @staticmethod
    def date_candidates(iso_date: str) -> CandidateSelectorList:
        """Candidate selectors for the calendar cell of an ISO date."""
        return candidates(
            f"calendar date {iso_date}",
            AttributeMatch("data-date", iso_date, tag="span"),
            AttributeMatch("data-date", iso_date, tag="td"),
            AttributeMatch("data-date", iso_date),
        )

    async def navigate_to(self, page: Page, target_date: DateLike, label: str = "date") -> int:
        """Advance the calendar until ``target_date`` is visible, then select it.

        Args:
            page: Page showing the open date picker
            target_date: Date to select
            label: Name used in log messages (e.g. "Check-in Date")

        Returns:
            Number of page advances performed

        Raises:
            DateNotReachable: Budget exhausted or no advance control present
        """
        iso_date = to_iso_date(target_date)
        date_cell = self.date_candidates(iso_date)
        self.state = CalendarState.SCANNING
        advances = 0

        for advances in range(self.budget.max_attempts + 1):
            cell = await self.resolver.resolve(page, date_cell)
            if cell is not None:
                self.state = CalendarState.FOUND
                break

            if advances == self.budget.max_attempts:
                break

            logger.info(f"Navigating to next month to find {label}: {iso_date}")
            next_button = await self.resolver.resolve(page, self.next_page_candidates)
            if next_button is None:
                self.state = CalendarState.EXHAUSTED
                logger.error(f"Next month button not found while looking for {label}: {iso_date}")
                raise DateNotReachable(iso_date, advances, page.url, reason="next month button not found")

            await next_button.click(force=True)
            await self.budget.pause()

        if self.state is not CalendarState.FOUND:
            self.state = CalendarState.EXHAUSTED
            logger.error(f"Could not find {label}: {iso_date} within {self.budget.max_attempts} month(s)")
            raise DateNotReachable(iso_date, advances, page.url)

        await cell.scroll_into_view_if_needed()
        await cell.click(force=True)
        logger.info(f"Selected {label}: {iso_date} after {advances} month(s)")
        return advances

    async def select_range(self, page: Page, check_in: DateLike, check_out: DateLike):
        """Select check-in then check-out on the same open calendar."""
        logger.info(f"Selecting dates: {to_iso_date(check_in)} to {to_iso_date(check_out)}")
        await self.navigate_to(page, check_in, "Check-in Date")
        await self.navigate_to(page, check_out, "Check-out Date")
        logger.info("Dates selected")
