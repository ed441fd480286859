"""Retry controller for probe attempts."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar


T = TypeVar('T')

RETRY_DELAY_SECONDS = 0.05


class RetryHandler:
    """
    Re-runs a failed check a bounded number of times.

    Probes report failure as data rather than raising, so retries are driven
    by a success predicate on the returned value instead of by exceptions.
    """

    @staticmethod
    async def until_success(
        func: Callable[[], Awaitable[T]],
        max_retries: int,
        delay: float = RETRY_DELAY_SECONDS,
        is_success: Callable[[T], bool] = lambda result: result.success,
        logger: logging.Logger = None
    ) -> T:
        """
        Execute func once, then retry while it keeps failing.

        Args:
            func: Async callable producing a result
            max_retries: Additional attempts allowed after the first failure
            delay: Fixed pause between attempts in seconds
            is_success: Predicate deciding whether a result counts as success
            logger: Optional logger for retry events

        Returns:
            The first successful result, or the last failed one
        """
        logger = logger or logging.getLogger(__name__)

        result = await func()
        retries = 0

        while not is_success(result) and retries < max_retries:
            retries += 1
            logger.debug(f"Attempt failed, retry {retries}/{max_retries} in {delay:.2f}s")
            await asyncio.sleep(delay)
            result = await func()

        return result
