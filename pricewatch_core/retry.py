"""
Retry Logic for Browser Operations

Bounded retries for the two places a price update may legitimately try
something more than once: launching the browser and navigating to a
vendor storefront. A vendor itself is never retried within a run.

Usage:
    from pricewatch_core.retry import execute_with_retry, navigate_with_retry

    browser = await execute_with_retry(launch, max_attempts=3, initial_delay=2.0, backoff=1.0)
    await navigate_with_retry(page, url, max_attempts=3)
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

RETRYABLE_NAVIGATION_MARKERS = (
    'timeout', 'connection', 'network', 'refused',
    'reset', 'aborted', 'failed to load',
)


class NetworkError(Exception):
    """Network-related error (timeout, connection refused, etc.)"""
    pass


class RetryExhaustedError(Exception):
    """All retry attempts have been exhausted"""
    pass


async def execute_with_retry(
    func: Callable[..., Awaitable],
    *args,
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff: float = 2.0,
    on_failure: Optional[Callable[[Exception], Awaitable[None]]] = None,
    **kwargs
):
    """
    Execute an async function with retry logic.

    Args:
        func: Async function to execute
        *args: Positional arguments for func
        max_attempts: Maximum attempts (at least one is always made)
        initial_delay: Delay before the second attempt, in seconds
        backoff: Multiplier applied to the delay after each failure;
            1.0 keeps the delay fixed
        on_failure: Optional async cleanup hook awaited after each failed attempt
        **kwargs: Keyword arguments for func

    Returns:
        Result of func

    Raises:
        RetryExhaustedError: chained to the last failure
    """
    last_error = None
    attempts = max(1, max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            last_error = e
            if on_failure is not None:
                await on_failure(e)

            if attempt < attempts:
                delay = initial_delay * (backoff ** (attempt - 1))
                logger.warning(
                    f"Attempt {attempt}/{attempts} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)

    raise RetryExhaustedError(f"Failed after {attempts} attempts: {last_error}") from last_error


async def navigate_with_retry(
    page,
    url: str,
    timeout: int = 30000,
    wait_until: str = "domcontentloaded",
    max_attempts: int = 3,
    max_delay: float = 30.0,
) -> bool:
    """
    Navigate to URL with automatic retry on failure.

    Args:
        page: Playwright page object
        url: URL to navigate to
        timeout: Navigation timeout in milliseconds
        wait_until: Wait condition ('load', 'domcontentloaded', 'networkidle')
        max_attempts: Maximum retry attempts
        max_delay: Upper bound on the backoff delay in seconds

    Returns:
        True if navigation succeeded

    Raises:
        NetworkError: If the error is not retryable or all attempts fail
    """
    last_error = None
    attempts = max(1, max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            response = await page.goto(url, timeout=timeout, wait_until=wait_until)

            if response is not None and not response.ok:
                logger.warning(f"Navigation returned status {response.status}")
                if response.status >= 500:
                    raise NetworkError(f"Server error: {response.status}")

            logger.debug(f"Navigation to {url} succeeded on attempt {attempt}")
            return True

        except Exception as e:
            last_error = e
            error_msg = str(e).lower()

            is_retryable = isinstance(e, (NetworkError, TimeoutError)) or any(
                marker in error_msg for marker in RETRYABLE_NAVIGATION_MARKERS
            )
            if not is_retryable:
                logger.error(f"Non-retryable error during navigation: {e}")
                raise NetworkError(f"Navigation failed: {e}") from e

            if attempt < attempts:
                delay = min(2 ** attempt, max_delay)
                logger.warning(
                    f"Navigation attempt {attempt}/{attempts} failed: {e}. "
                    f"Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
            else:
                logger.error(f"Navigation failed after {attempts} attempts: {e}")

    raise NetworkError(f"Navigation to {url} failed after {attempts} attempts: {last_error}")
