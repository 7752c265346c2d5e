"""Exponential-backoff retry state for the remote configuration fetch."""

import asyncio
import logging
import math
from typing import Awaitable, Callable, Optional, TypeVar

from .config import RetryOptions
from .errors import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_MAX_INTERVAL = 1500
DEFAULT_INITIAL_INTERVAL = 1000
DEFAULT_MULTIPLIER = 1.1


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (2.5 -> 3)."""
    return math.floor(value + 0.5)


class RetryState:
    """Mutable retry counter for one remote-fetch sequence.

    Lifecycle: idle -> active -> idle (reset) or exhausted. A new state is
    created for every fetch sequence and never shared between loads.

    Attributes:
        active: True once the first retry has been registered
        attempts: Number of registered retries
        current_interval: Milliseconds to wait before the next attempt
        max_attempts: Retries allowed before giving up
        max_interval: Ceiling for the backoff interval (ms)
        initial_interval: Interval for the first retry (ms)
        multiplier: Backoff growth factor
    """

    def __init__(self, config: Optional[RetryOptions] = None):
        config = config or RetryOptions()
        self.active = False
        self.attempts = 0
        self.current_interval: float = 0

        # Unset or zero policy fields fall back to the defaults
        self.max_attempts = config.max_attempts or DEFAULT_MAX_ATTEMPTS
        self.max_interval = config.max_interval or DEFAULT_MAX_INTERVAL
        self.initial_interval = config.initial_interval or DEFAULT_INITIAL_INTERVAL
        self.multiplier = config.multiplier or DEFAULT_MULTIPLIER

    def register_retry(self) -> None:
        """Register a retry attempt and compute the next backoff interval.

        Raises:
            RetryExhaustedError: If max_attempts retries were already registered.
                The state is reset before raising.
        """
        if self.attempts >= self.max_attempts:
            self.reset()
            raise RetryExhaustedError()

        if self.attempts == 0:
            self.active = True
            self.current_interval = self.initial_interval
        else:
            next_interval = _round_half_up(self.current_interval * self.multiplier)
            self.current_interval = min(next_interval, self.max_interval)

        self.attempts += 1

    def reset(self) -> None:
        """Return to the idle state."""
        self.active = False
        self.attempts = 0
        self.current_interval = 0

    def __repr__(self) -> str:
        return (
            f"RetryState(active={self.active}, attempts={self.attempts}/{self.max_attempts}, "
            f"current_interval={self.current_interval})"
        )


async def retry_with_state(
    func: Callable[[], Awaitable[T]],
    retry_state: RetryState,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Retry ``func`` until it succeeds or the retry state is exhausted.

    Each iteration registers a retry, waits ``current_interval`` ms and calls
    ``func``. The caller is expected to have made the initial attempt already.

    Args:
        func: Async callable to retry.
        retry_state: Fresh state for this fetch sequence.
        sleep: Awaitable sleep taking seconds (injectable for tests).

    Returns:
        The first successful result of ``func``.

    Raises:
        RetryExhaustedError: When every allowed attempt failed.
    """
    while True:
        retry_state.register_retry()
        logger.warning(
            f"Retrying after {retry_state.current_interval}ms "
            f"(attempt {retry_state.attempts}/{retry_state.max_attempts})..."
        )
        await sleep(retry_state.current_interval / 1000)
        try:
            return await func()
        except Exception as e:
            logger.warning(f"Retry attempt {retry_state.attempts} failed: {e}")
