"""Run the booking flow for every row of the test data sheet."""
import sys
import asyncio

# Fix for Windows asyncio subprocess issues with Playwright
# This MUST be set before importing any modules that use Playwright
if sys.platform == 'win32':
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

import logging

from playwright.async_api import Error as PlaywrightError

from hotel_booking.booking_data import BookingDataSheet, BookingRow
from hotel_booking.booking_flow import BookingFlow
from hotel_booking.browser_session import BrowserSession
from hotel_booking.config import settings
from hotel_booking.errors import BookingFlowError

logger = logging.getLogger(__name__)


async def run_row(row: BookingRow) -> bool:
    """Run one row in its own browser session; the trace is kept on failure."""
    session = BrowserSession()
    page = None
    failed = True
    try:
        await session.start()
        page = await session.new_page()
        outcome = await BookingFlow(page).run(row)
        if outcome.dates_match():
            failed = False
        else:
            logger.error(
                f"Displayed dates {outcome.displayed_check_in!r}/{outcome.displayed_check_out!r} "
                f"do not contain {outcome.expected_check_in!r}/{outcome.expected_check_out!r}")
    except (BookingFlowError, PlaywrightError) as e:
        url = page.url if page is not None else None
        logger.error(f"Booking flow failed for {row.hotel_name} (url: {url}): {e}")
    finally:
        await session.stop(keep_trace=failed, name=row.hotel_name.replace(" ", "_"))
    return not failed


async def run_all() -> int:
    sheet = BookingDataSheet()
    sheet.refresh_dates()
    failures = 0
    for row in sheet.rows():
        if not await run_row(row):
            failures += 1
    return failures


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    sys.exit(1 if asyncio.run(run_all()) else 0)
