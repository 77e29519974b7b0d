"""Tests for the data-sheet runner."""

from __future__ import annotations

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

import run
from hotel_booking.booking_data import BookingRow
from hotel_booking.booking_flow import BookingOutcome
from hotel_booking.errors import HotelNotFound

from fakes import FakeContext

ROWS = [
    BookingRow('Paris', '2025-11-02', '2025-11-05', 'Hotel A'),
    BookingRow('Lisbon', '2025-11-02', '2025-11-05', 'Hotel B'),
]


class _Sheet:
    def refresh_dates(self):
        return len(ROWS)

    def rows(self):
        return list(ROWS)


@pytest.fixture
def stops(monkeypatch):
    stopped = []
    context = FakeContext()

    class _Session:
        async def start(self):
            pass

        async def new_page(self):
            return context.open_page('https://www.booking.com/searchresults.html')

        async def stop(self, keep_trace=False, name='trace'):
            stopped.append((name, keep_trace))

    monkeypatch.setattr(run, 'BookingDataSheet', _Sheet)
    monkeypatch.setattr(run, 'BrowserSession', _Session)
    return stopped


def _flow(failures):
    """BookingFlow stand-in raising ``failures[hotel_name]`` when present."""

    class _Flow:
        def __init__(self, page):
            self.page = page

        async def run(self, row):
            if row.hotel_name in failures:
                raise failures[row.hotel_name]
            return BookingOutcome(row, self.page, 'Sun, Nov 2', 'Wed, Nov 5')

    return _Flow


@pytest.mark.asyncio
async def test_driver_timeout_keeps_trace_and_continues(monkeypatch, stops):
    monkeypatch.setattr(run, 'BookingFlow', _flow({'Hotel A': PlaywrightTimeoutError('Timeout 30000ms exceeded')}))

    assert await run.run_all() == 1
    assert stops == [('Hotel_A', True), ('Hotel_B', False)]


@pytest.mark.asyncio
async def test_flow_error_keeps_trace(monkeypatch, stops):
    monkeypatch.setattr(run, 'BookingFlow', _flow({'Hotel B': HotelNotFound('Hotel B', [1, 2])}))

    assert await run.run_all() == 1
    assert stops == [('Hotel_A', False), ('Hotel_B', True)]


@pytest.mark.asyncio
async def test_all_rows_pass(monkeypatch, stops):
    monkeypatch.setattr(run, 'BookingFlow', _flow({}))

    assert await run.run_all() == 0
    assert [keep for _, keep in stops] == [False, False]
