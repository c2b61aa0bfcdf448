import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from .models import Rate

logger = logging.getLogger(__name__)


class Clock(ABC):
    """
    Abstract time source used for request pacing.

    Replace it with a fake in tests to make pacing deterministic.
    """

    @abstractmethod
    def now(self) -> float:
        """
        Get current time.

        Returns:
            Current unix timestamp in seconds
        """
        pass

    @abstractmethod
    async def sleepUntil(self, timestamp: float) -> None:
        """
        Suspend the caller until given unix timestamp.

        Returns immediately if the timestamp is already in the past.

        Args:
            timestamp: Unix timestamp in seconds to wake up at
        """
        pass


class SystemClock(Clock):
    """Wall clock backed by time.time() and asyncio.sleep()."""

    def now(self) -> float:
        return time.time()

    async def sleepUntil(self, timestamp: float) -> None:
        delay = timestamp - time.time()
        if delay > 0:
            await asyncio.sleep(delay)


class RequestPacer:
    """
    Adaptive pacing driven by server reported rate limits.

    After every response the time left until the rate window resets is split
    evenly between the remaining requests plus one spare slot, and the next
    request is held back by that share. The delay widens as the quota runs
    out and drops to nearly zero once the window rolls over.

    Algorithm:
        1. wait(): sleep until nextAllowedTime if it is in the future
        2. update(rate): share = (reset - now) / (remaining + 1)
        3. nextAllowedTime = max(nextAllowedTime, now + max(share, 0))

    Not synchronized on its own: the owning client holds its lock around
    wait() and update() together with the HTTP call in between.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Initialize the pacer.

        Args:
            clock: Time source (default: SystemClock)
        """
        self.clock: Clock = clock if clock is not None else SystemClock()
        self._nextAllowedTime: float = 0.0

    @property
    def nextAllowedTime(self) -> float:
        """Unix timestamp before which no request should be sent."""
        return self._nextAllowedTime

    def getDelay(self) -> float:
        """Seconds left until next request may be sent, 0 if none."""
        return max(self._nextAllowedTime - self.clock.now(), 0.0)

    async def wait(self) -> None:
        """Sleep until nextAllowedTime, dood!"""
        delay = self.getDelay()
        if delay > 0:
            logger.debug(f"Pacing geocode request, waiting {delay:.2f} seconds")
            await self.clock.sleepUntil(self._nextAllowedTime)

    def update(self, rate: Rate) -> float:
        """
        Recompute nextAllowedTime from rate limit metadata.

        Args:
            rate: Rate block from the latest response

        Returns:
            Delay in seconds assigned to the next request
        """
        now = self.clock.now()
        untilReset = rate["reset"] - now
        # One spare slot, so remaining == 0 spreads over the whole window
        share = untilReset / (max(rate["remaining"], 0) + 1)
        if share < 0:
            share = 0.0

        self._nextAllowedTime = max(self._nextAllowedTime, now + share)
        logger.debug(
            f"Rate {rate['remaining']}/{rate['limit']} left, reset in {untilReset:.0f}s, "
            f"next request in {share:.2f}s"
        )
        return share
