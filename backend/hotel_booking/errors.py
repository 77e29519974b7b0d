"""Booking flow errors.

Every error carries the page URL at the time of failure so the harness can
attach it next to its screenshot, video and trace.
"""
from typing import Optional, Sequence


class BookingFlowError(Exception):
    """Base error for the booking flow."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        if url:
            message = f"{message} (url: {url})"
        super().__init__(message)


class ElementNotFound(BookingFlowError):
    """No candidate strategy produced a visible element."""

    def __init__(self, target: str, attempted: Sequence[str], url: Optional[str] = None):
        self.target = target
        self.attempted = list(attempted)
        super().__init__(
            f"{target} not found after trying {len(self.attempted)} selector(s): "
            f"{', '.join(self.attempted)}", url)


class DateNotReachable(BookingFlowError):
    """Calendar paging budget ran out before the date became selectable."""

    def __init__(self, target_date: str, advances: int, url: Optional[str] = None, reason: str = ""):
        self.target_date = target_date
        self.advances = advances
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Could not reach date {target_date} after {advances} calendar page(s){detail}", url)


class NoNewTabOpened(BookingFlowError):
    """The triggering action did not open a new tab in time."""

    def __init__(self, timeout_ms: int, url: Optional[str] = None):
        self.timeout_ms = timeout_ms
        super().__init__(f"No new tab opened within {timeout_ms} ms", url)


class HotelNotFound(BookingFlowError):
    """Result pagination ended without a card matching the hotel name."""

    def __init__(self, hotel_name: str, pages_scanned: Sequence[int], url: Optional[str] = None):
        self.hotel_name = hotel_name
        self.pages_scanned = list(pages_scanned)
        super().__init__(
            f"Hotel not found: {hotel_name} (scanned pages: "
            f"{', '.join(str(p) for p in self.pages_scanned) or 'none'})", url)


class PageNotReady(BookingFlowError):
    """A page readiness probe failed."""
