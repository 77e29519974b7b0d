"""Tests for SearchResultsPage pagination and hotel matching."""

from __future__ import annotations

import pytest

from hotel_booking.errors import ElementNotFound, HotelNotFound
from hotel_booking.pages.search_results_page import SearchResultsPage
from hotel_booking.tab_tracker import TabSessionTracker

from fakes import FakeElement

CARDS = 'div[data-testid="property-card"]'
TITLE_LINK = 'a[data-testid="title-link"]'
NEXT_PAGE = 'button[aria-label="Next page"]'


class _Results:
    """Paginated result list; each inner list holds the card texts of one page."""

    def __init__(self, context, page, pages: list[list[str]]):
        self.current = 0
        self.cards = []
        for number, texts in enumerate(pages):
            cards = []
            for text in texts:
                link = FakeElement(text, tag='a', on_click=self._opener(context, text))
                cards.append(FakeElement(text, children={TITLE_LINK: [link]}))
            self.cards.append(cards)
        self.next_buttons = [
            FakeElement(tag='button', attributes={'aria-disabled': 'true'} if number == len(pages) - 1 else {},
                        on_click=self._advance)
            for number in range(len(pages))
        ]
        page.set_dynamic(CARDS, lambda: self.cards[self.current])
        page.set_dynamic(NEXT_PAGE, lambda: [self.next_buttons[self.current]])

    @staticmethod
    def _opener(context, text):
        def open_tab():
            slug = text.lower().replace(' ', '-')
            context.open_page(f'https://www.booking.com/hotel/{slug}.html')
        return open_tab

    def _advance(self):
        self.current += 1

    @property
    def next_clicks(self) -> int:
        return sum(len(button.clicks) for button in self.next_buttons)


@pytest.fixture
def results_page(page, resolver, obstruction_handler) -> SearchResultsPage:
    return SearchResultsPage(page, resolver=resolver, obstruction_handler=obstruction_handler,
                             tab_tracker=TabSessionTracker(timeout_ms=50))


@pytest.mark.parametrize(
    'card_text, name, expected',
    [
        ('Welcome to THE GRAND PLAZA Hotel', 'Grand Plaza', True),
        ('grand plaza', 'GRAND PLAZA', True),
        ('Grand Palace Hotel', 'Grand Plaza', False),
        ('', 'Grand Plaza', False),
        (None, 'Grand Plaza', False),
    ],
)
def test_matches_hotel_name_is_case_insensitive_substring(card_text, name, expected):
    assert SearchResultsPage.matches_hotel_name(card_text, name) is expected


@pytest.mark.asyncio
async def test_match_on_first_page_opens_details_tab(context, page, results_page):
    results = _Results(context, page, [['Hotel Lumiere', 'Welcome to THE GRAND PLAZA Hotel']])

    details = await results_page.select_hotel('Grand Plaza')

    assert details is not page
    assert '/hotel/' in details.url
    assert results.next_clicks == 0
    assert results.cards[0][1].children[TITLE_LINK][0].clicks == [{'force': True}]


@pytest.mark.asyncio
async def test_hotel_on_page_k_advances_k_minus_one_pages(context, page, results_page):
    results = _Results(context, page, [
        ['Hotel One', 'Hotel Two'],
        ['Hotel Three'],
        ['Hotel Four', 'Grand Plaza Residence'],
        ['Hotel Five'],
        ['Hotel Six'],
    ])

    details = await results_page.select_hotel('grand plaza')

    assert results.next_clicks == 2
    assert results.current == 2
    assert details.url == 'https://www.booking.com/hotel/grand-plaza-residence.html'
    assert page.url == 'https://www.booking.com/'


@pytest.mark.asyncio
async def test_hotel_not_found_stops_at_disabled_next_page(context, page, results_page):
    results = _Results(context, page, [['Hotel One'], ['Hotel Two'], ['Hotel Three']])

    with pytest.raises(HotelNotFound) as excinfo:
        await results_page.select_hotel('Grand Plaza')

    assert excinfo.value.pages_scanned == [1, 2, 3]
    assert results.next_clicks == 2
    assert not results.next_buttons[-1].clicked


@pytest.mark.asyncio
async def test_page_budget_bounds_pagination(context, page, results_page):
    results = _Results(context, page, [['Hotel'] for _ in range(10)])

    with pytest.raises(HotelNotFound) as excinfo:
        await results_page.select_hotel('Grand Plaza', max_pages=4)

    assert excinfo.value.pages_scanned == [1, 2, 3, 4]
    assert results.next_clicks == 3


@pytest.mark.asyncio
async def test_go_to_next_page_false_when_aria_disabled(page, results_page):
    button = page.add(NEXT_PAGE, FakeElement(tag='button', attributes={'aria-disabled': 'true'}))[0]

    assert await results_page.go_to_next_page() is False
    assert not button.clicked


@pytest.mark.asyncio
async def test_go_to_next_page_false_when_disabled_attribute(page, results_page):
    button = page.add(NEXT_PAGE, FakeElement(tag='button', enabled=False, attributes={'disabled': ''}))[0]

    assert await results_page.go_to_next_page() is False
    assert not button.clicked


@pytest.mark.asyncio
async def test_go_to_next_page_false_without_button(results_page):
    assert await results_page.go_to_next_page() is False


@pytest.mark.asyncio
async def test_go_to_next_page_clicks_enabled_button(page, results_page):
    button = page.add(NEXT_PAGE, FakeElement(tag='button', attributes={'aria-disabled': 'false'}))[0]

    assert await results_page.go_to_next_page() is True
    assert button.clicks == [{'force': True}]
    assert 'load' in page.load_states


@pytest.mark.asyncio
async def test_matching_card_without_title_link_is_fatal(page, results_page):
    page.add(CARDS, FakeElement('Grand Plaza'))

    with pytest.raises(ElementNotFound):
        await results_page.select_hotel('Grand Plaza', max_pages=1)


@pytest.mark.asyncio
async def test_results_page_ready_by_url(page, results_page):
    page.url = 'https://www.booking.com/searchresults.html?ss=Paris'

    assert await results_page.is_search_results_page_loaded() is True


@pytest.mark.asyncio
async def test_results_page_ready_by_cards(page, results_page):
    page.url = 'https://www.booking.com/'
    page.add(CARDS, FakeElement('Hotel'))

    assert await results_page.is_search_results_page_loaded() is True


@pytest.mark.asyncio
async def test_results_page_not_ready_without_cards(page, results_page):
    page.url = 'https://www.booking.com/'

    assert await results_page.is_search_results_page_loaded() is False
