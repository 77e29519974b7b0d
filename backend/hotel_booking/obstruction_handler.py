"""Dismissal of transient page obstructions (cookie banners, sign-in prompts, popups)."""
import logging
from typing import Optional, Sequence

from playwright.async_api import Page

from hotel_booking.config import settings
from hotel_booking.element_resolver import ElementResolver
from hotel_booking.locators import AttributeMatch, CandidateSelectorList, StructuralMatch, TextMatch, candidates
from hotel_booking.retry import RetryBudget, retry_until

logger = logging.getLogger(__name__)


COOKIE_CONSENT = candidates(
    "cookie consent",
    AttributeMatch("id", "onetrust-accept-btn-handler", tag="button"),
    AttributeMatch("id", "onetrust-accept", tag="button", operator="*="),
    AttributeMatch("id", "accept-cookies", tag="button", operator="*="),
    AttributeMatch("aria-label", "Accept cookies", operator="*="),
    TextMatch("Accept"),
)

SIGN_IN_DISMISS = candidates(
    "sign-in prompt",
    AttributeMatch("aria-label", "Dismiss sign-in info.", tag="button"),
    StructuralMatch("//button[contains(@aria-label, 'Dismiss')]"),
)

GENERIC_CLOSE = candidates(
    "popup close button",
    AttributeMatch("aria-label", "Close", tag="button"),
    AttributeMatch("aria-label", "Close", tag="button", operator="*="),
)

BANNER_DISMISS = candidates(
    "dismissible banner",
    StructuralMatch("button.js-dismiss-banner"),
    StructuralMatch("//button[contains(@class, 'dismiss')]"),
)


class ObstructionHandler:
    """Dismisses known obstructions before a primary interaction.

    Obstructions come and go with A/B tests, geography and session state, so
    absence is never an error: ``clear`` logs what it could not do and
    returns. It is safe to call any number of times.
    """

    def __init__(
            self,
            resolver: Optional[ElementResolver] = None,
            visibility_budget: Optional[RetryBudget] = None,
            settle_ms: Optional[int] = None):
        self.resolver = resolver or ElementResolver()
        self.visibility_budget = visibility_budget or RetryBudget(
            settings.obstruction_poll_attempts, settings.obstruction_poll_delay)
        self.settle_ms = settings.obstruction_settle if settle_ms is None else settle_ms

    async def clear(self, page: Page, obstructions: Sequence[CandidateSelectorList]) -> int:
        """Dismiss every visible obstruction from ``obstructions``, in order.

        Args:
            page: Page to clear
            obstructions: One candidate list per obstruction type

        Returns:
            Number of obstructions dismissed
        """
        dismissed = 0
        for obstruction in obstructions:
            try:
                if await self._dismiss(page, obstruction):
                    dismissed += 1
            except Exception as e:
                logger.warning(f"Could not dismiss {obstruction.name}, continuing: {e}")

        if dismissed:
            logger.info(f"Dismissed {dismissed} obstruction(s)")
        else:
            logger.debug("No obstructions present")
        return dismissed

    async def _dismiss(self, page: Page, obstruction: CandidateSelectorList) -> bool:
        found = []

        async def visible(attempt: int) -> bool:
            element = await self.resolver.resolve(page, obstruction)
            if element is not None:
                found.append(element)
                return True
            return False

        if not await retry_until(visible, self.visibility_budget, obstruction.name):
            logger.info(f"No {obstruction.name} found")
            return False

        await found[0].click(timeout=settings.obstruction_click_timeout)
        logger.info(f"Dismissed {obstruction.name}")
        if self.settle_ms:
            await page.wait_for_timeout(self.settle_ms)
        return True
