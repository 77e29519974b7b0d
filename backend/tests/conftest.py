"""Shared pytest configuration for the booking flow tests."""

from __future__ import annotations

import pytest

from hotel_booking.config import settings
from hotel_booking.element_resolver import ElementResolver
from hotel_booking.obstruction_handler import ObstructionHandler
from hotel_booking.retry import RetryBudget

from fakes import FakeContext, FakePage


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch):
    """No real sleeps between retry attempts."""
    monkeypatch.setattr(settings, 'obstruction_poll_attempts', 1)
    monkeypatch.setattr(settings, 'obstruction_poll_delay', 0)
    monkeypatch.setattr(settings, 'obstruction_settle', 0)
    monkeypatch.setattr(settings, 'calendar_page_delay', 0)
    monkeypatch.setattr(settings, 'ready_probe_delay', 0)
    monkeypatch.setattr(settings, 'element_wait_delay', 0)
    monkeypatch.setattr(settings, 'new_tab_timeout', 50)


@pytest.fixture
def context() -> FakeContext:
    return FakeContext()


@pytest.fixture
def page(context: FakeContext) -> FakePage:
    return context.open_page('https://www.booking.com/')


@pytest.fixture
def resolver() -> ElementResolver:
    return ElementResolver(scan_window=5)


@pytest.fixture
def obstruction_handler(resolver: ElementResolver) -> ObstructionHandler:
    return ObstructionHandler(resolver, visibility_budget=RetryBudget(1), settle_ms=0)
