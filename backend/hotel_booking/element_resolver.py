"""Element resolution over ranked candidate selectors."""
import logging
from typing import List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from hotel_booking.config import settings
from hotel_booking.errors import ElementNotFound
from hotel_booking.locators import CandidateSelectorList

logger = logging.getLogger(__name__)

Scope = Union[Page, Locator]


def scope_url(scope: Scope) -> Optional[str]:
    """Current URL of the page a scope belongs to."""
    try:
        if hasattr(scope, "url"):
            return scope.url
        return scope.page.url
    except (AttributeError, PlaywrightError):
        return None


class ElementResolver:
    """Finds the first visible element among ranked locator strategies.

    Strategies are tried in priority order. Within a strategy only the first
    ``scan_window`` matches are checked, so a broad fallback selector cannot
    turn a lookup into a scan of the whole DOM. There is no retry here:
    callers that need one wrap ``resolve`` in a bounded loop.
    """

    def __init__(self, scan_window: Optional[int] = None):
        self.scan_window = settings.resolver_scan_window if scan_window is None else scan_window

    async def resolve(
            self,
            scope: Scope,
            candidates: CandidateSelectorList,
            require_enabled: bool = True) -> Optional[Locator]:
        """Return the first visible match in priority order, or None.

        Args:
            scope: Page or Locator to search within
            candidates: Ranked strategies for one UI target
            require_enabled: Skip matches the driver reports as disabled

        Returns:
            Locator bound to exactly one element, or None when nothing matched
        """
        for strategy in candidates:
            selector = strategy.selector()
            matches = scope.locator(selector)
            try:
                count = await matches.count()
            except PlaywrightError as e:
                logger.debug(f"Selector {selector} could not be evaluated: {e}")
                continue

            if count == 0:
                logger.debug(f"No match for {candidates.name} with selector: {selector}")
                continue

            for index in range(min(count, self.scan_window)):
                element = matches.nth(index)
                if await self._is_eligible(element, require_enabled):
                    logger.info(f"Resolved {candidates.name} with selector {selector} (match {index})")
                    return element

            logger.debug(f"{count} match(es) for {selector} but none visible in the first {self.scan_window}")

        logger.info(f"Could not resolve {candidates.name} with {len(candidates)} selector(s)")
        return None

    async def require(
            self,
            scope: Scope,
            candidates: CandidateSelectorList,
            require_enabled: bool = True) -> Locator:
        """Like ``resolve`` but raises ElementNotFound when nothing matched."""
        element = await self.resolve(scope, candidates, require_enabled=require_enabled)
        if element is None:
            raise ElementNotFound(candidates.name, candidates.describe(), scope_url(scope))
        return element

    async def locate_all(self, scope: Scope, candidates: CandidateSelectorList) -> Optional[Locator]:
        """All matches of the first strategy that matches anything.

        Used for list scans (result cards) where every match is
        inspected rather than the first visible one.
        """
        for strategy in candidates:
            selector = strategy.selector()
            matches = scope.locator(selector)
            try:
                count = await matches.count()
            except PlaywrightError as e:
                logger.debug(f"Selector {selector} could not be evaluated: {e}")
                continue
            if count > 0:
                logger.info(f"Found {count} {candidates.name} with selector: {selector}")
                return matches
        logger.info(f"No {candidates.name} found")
        return None

    async def locate_each(self, scope: Scope, candidates: CandidateSelectorList) -> List[Locator]:
        """Match sets of every strategy that matches anything, in priority order."""
        found = []
        for strategy in candidates:
            selector = strategy.selector()
            matches = scope.locator(selector)
            try:
                count = await matches.count()
            except PlaywrightError as e:
                logger.debug(f"Selector {selector} could not be evaluated: {e}")
                continue
            if count > 0:
                logger.debug(f"Found {count} {candidates.name} with selector: {selector}")
                found.append(matches)
        return found

    @staticmethod
    async def _is_eligible(element: Locator, require_enabled: bool) -> bool:
        try:
            if not await element.is_visible():
                return False
            if require_enabled and not await element.is_enabled():
                return False
            return True
        except PlaywrightError as e:
            # Element detached between count() and the check
            logger.debug(f"Visibility check failed: {e}")
            return False
