"""Tests for ElementResolver priority, visibility and scan window."""

from __future__ import annotations

import pytest

from hotel_booking.element_resolver import ElementResolver
from hotel_booking.errors import ElementNotFound
from hotel_booking.locators import AttributeMatch, StructuralMatch, TextMatch, candidates

from fakes import FakeElement

RESERVE = candidates(
    'reserve button',
    TextMatch('Reserve'),
    AttributeMatch('data-testid', 'reserve', operator='*='),
    StructuralMatch('//button[contains(@class, "reserve")]'),
)


@pytest.mark.asyncio
async def test_first_strategy_wins_over_lower_priority_matches(page, resolver):
    high = FakeElement('Reserve', tag='button')
    page.add('[data-testid*="reserve"]', FakeElement('low priority'))
    page.add('button:has-text("Reserve")', high)

    element = await resolver.resolve(page, RESERVE)
    await element.click()

    assert high.clicked


@pytest.mark.asyncio
async def test_first_visible_match_within_strategy(page, resolver):
    hidden = FakeElement('Reserve', visible=False)
    second = FakeElement('Reserve')
    third = FakeElement('Reserve')
    page.add('button:has-text("Reserve")', hidden, second, third)

    element = await resolver.resolve(page, RESERVE)
    await element.click()

    assert second.clicked
    assert not hidden.clicked and not third.clicked


@pytest.mark.asyncio
async def test_falls_through_to_next_strategy_when_all_hidden(page, resolver):
    page.add('button:has-text("Reserve")', FakeElement(visible=False))
    fallback = page.add('[data-testid*="reserve"]', FakeElement())[0]

    element = await resolver.resolve(page, RESERVE)
    await element.click()

    assert fallback.clicked


@pytest.mark.asyncio
async def test_matches_beyond_scan_window_are_ignored(page):
    resolver = ElementResolver(scan_window=5)
    hidden = [FakeElement(visible=False) for _ in range(5)]
    page.add('button:has-text("Reserve")', *hidden, FakeElement('sixth'))

    assert await resolver.resolve(page, RESERVE) is None


@pytest.mark.asyncio
async def test_disabled_elements_are_skipped(page, resolver):
    page.add('button:has-text("Reserve")', FakeElement(enabled=False))

    assert await resolver.resolve(page, RESERVE) is None
    assert await resolver.resolve(page, RESERVE, require_enabled=False) is not None


@pytest.mark.asyncio
async def test_unevaluable_selector_counts_as_no_match(page, resolver):
    page.add('button:has-text("Reserve")', FakeElement())
    page.broken_selectors.add('button:has-text("Reserve")')
    fallback = page.add('[data-testid*="reserve"]', FakeElement())[0]

    element = await resolver.resolve(page, RESERVE)
    await element.click()

    assert fallback.clicked


@pytest.mark.asyncio
async def test_resolve_returns_none_when_nothing_matches(page, resolver):
    assert await resolver.resolve(page, RESERVE) is None


@pytest.mark.asyncio
async def test_require_reports_attempted_selectors_and_url(page, resolver):
    with pytest.raises(ElementNotFound) as excinfo:
        await resolver.require(page, RESERVE)

    error = excinfo.value
    assert error.target == 'reserve button'
    assert error.attempted == RESERVE.describe()
    assert error.url == 'https://www.booking.com/'
    assert 'button:has-text("Reserve")' in str(error)


@pytest.mark.asyncio
async def test_resolve_within_element_scope(page, resolver):
    link = FakeElement('Grand Plaza', tag='a')
    card = FakeElement('Grand Plaza card', children={'a[data-testid="title-link"]': [link]})
    page.add('div[data-testid="property-card"]', card)
    title = candidates('title link', AttributeMatch('data-testid', 'title-link', tag='a'))

    element = await resolver.resolve(page.locator('div[data-testid="property-card"]').nth(0), title)
    await element.click()

    assert link.clicked


@pytest.mark.asyncio
async def test_locate_all_returns_full_match_set_of_first_matching_strategy(page, resolver):
    page.add('[data-testid*="reserve"]', FakeElement(), FakeElement(visible=False), FakeElement())

    matches = await resolver.locate_all(page, RESERVE)

    assert await matches.count() == 3


@pytest.mark.asyncio
async def test_locate_all_returns_none_without_matches(page, resolver):
    assert await resolver.locate_all(page, RESERVE) is None


@pytest.mark.asyncio
async def test_explicit_zero_scan_window_is_kept(page):
    resolver = ElementResolver(scan_window=0)
    page.add('button:has-text("Reserve")', FakeElement())

    assert resolver.scan_window == 0
    assert await resolver.resolve(page, RESERVE) is None


@pytest.mark.asyncio
async def test_locate_each_returns_every_matching_strategy(page, resolver):
    page.add('button:has-text("Reserve")', FakeElement())
    page.add('[data-testid*="reserve"]', FakeElement(), FakeElement())

    groups = await resolver.locate_each(page, RESERVE)

    assert [await group.count() for group in groups] == [1, 2]
