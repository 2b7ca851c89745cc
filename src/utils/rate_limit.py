"""Pacing utilities for sequential backend calls."""

import asyncio
from typing import Awaitable, Callable


class Pacer:
    """Enforce a fixed pause between consecutive calls.

    The first ``wait()`` returns immediately; every later one sleeps for
    ``delay_seconds`` before returning. Time spent doing work between calls is
    not subtracted, so the pause always follows the previous call in full.
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize pacer.

        Args:
            delay_seconds: Pause inserted between consecutive calls.
            sleep: Awaitable sleep function (overridable in tests).
        """
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._calls = 0

    async def wait(self) -> None:
        """Wait until the next call may proceed."""
        if self._calls > 0 and self.delay_seconds > 0:
            await self._sleep(self.delay_seconds)
        self._calls += 1
