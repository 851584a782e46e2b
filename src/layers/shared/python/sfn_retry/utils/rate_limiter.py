"""Rate limiting for Step Functions start calls."""

import time
from typing import Callable

import structlog

logger = structlog.get_logger()


class FixedDelayRateLimiter:
    """Fixed pause between consecutive dispatches.

    Dispatching is strictly sequential, so a plain sleep is enough to cap
    the start rate. If dispatching is ever parallelized this has to be
    replaced with a limiter shared by all workers (e.g. a token bucket).
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the rate limiter.

        Args:
            delay_seconds: Pause applied by each cool-down.
            sleep: Sleep function; injectable for tests.
        """
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.cooldowns = 0
        self.total_delay = 0.0

    def cool_down(self) -> None:
        """Pause before the next dispatch."""
        if self.delay_seconds <= 0:
            return

        logger.debug("Cooling down before next execution", delay_seconds=self.delay_seconds)
        self._sleep(self.delay_seconds)
        self.cooldowns += 1
        self.total_delay += self.delay_seconds
