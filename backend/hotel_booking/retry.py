"""Bounded retry loops."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryBudget:
    """Maximum attempts and the delay (ms) between two attempts."""

    max_attempts: int
    delay_ms: int = 0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must not be negative, got {self.delay_ms}")

    def attempts(self) -> range:
        """Attempt numbers, starting at 1."""
        return range(1, self.max_attempts + 1)

    async def pause(self):
        if self.delay_ms:
            await asyncio.sleep(self.delay_ms / 1000)


async def retry_until(
        condition: Callable[[int], Awaitable[bool]],
        budget: RetryBudget,
        description: str = "condition") -> bool:
    """Evaluate ``condition`` until it returns True or the budget runs out.

    Args:
        condition: Async predicate receiving the attempt number
        budget: Attempts and delay between attempts
        description: Name used in log messages

    Returns:
        True on the first successful attempt, False once all attempts failed
    """
    for attempt in budget.attempts():
        logger.debug(f"Attempt {attempt}/{budget.max_attempts} for {description}...")
        if await condition(attempt):
            return True
        if attempt < budget.max_attempts:
            await budget.pause()

    logger.info(f"Gave up on {description} after {budget.max_attempts} attempt(s)")
    return False
