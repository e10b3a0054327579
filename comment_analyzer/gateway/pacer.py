"""Fixed-interval pacer that authorizes one release per tick.

The first tick fires immediately. If a tick is consumed late, the next one is
scheduled a full interval after that, so missed ticks never burst.
"""

from __future__ import annotations

import asyncio


class Pacer:
    """Periodic timer driven by the event loop clock.

    Usage:
        pacer = Pacer(interval=1.1)
        while True:
            await pacer.tick()
            ...  # release at most one result
    """

    def __init__(self, interval: float):
        if interval <= 0:
            raise ValueError("pacer interval must be positive")
        self.interval = interval
        self.ticks = 0
        self._deadline: float | None = None

    async def tick(self) -> None:
        """Wait for the next tick."""
        loop = asyncio.get_running_loop()
        if self._deadline is None:
            self._deadline = loop.time()

        delay = self._deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)

        now = loop.time()
        self._deadline += self.interval
        if self._deadline < now:
            self._deadline = now + self.interval
        self.ticks += 1
