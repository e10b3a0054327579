"""Priority tiers of in-flight remote calls.

Each tier is a bounded FIFO of calls that have already been started. Only
the head of a tier can be released, and only once it has completed, so
results leave a tier in submission order even when later calls finish
first (head-of-line blocking).
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass

from comment_analyzer.gateway.types import (
    DispatchResponse,
    Priority,
    Submission,
    TierFullError,
)

logger = logging.getLogger(__name__)


@dataclass
class InFlightCall:
    """A started remote call owned by exactly one tier."""

    submission: Submission
    task: asyncio.Task[DispatchResponse]

    @property
    def ready(self) -> bool:
        return self.task.done()

    def result(self) -> DispatchResponse:
        return self.task.result()


class TierQueue:
    """Bounded FIFO of in-flight calls for one priority."""

    def __init__(self, priority: Priority, capacity: int):
        if capacity < 1:
            raise ValueError("tier capacity must be at least 1")
        self.priority = priority
        self.capacity = capacity
        self._calls: deque[InFlightCall] = deque()

    def __len__(self) -> int:
        return len(self._calls)

    @property
    def is_full(self) -> bool:
        return len(self._calls) >= self.capacity

    def push_back(self, call: InFlightCall) -> None:
        """Append a call. Callers check ``is_full`` first."""
        if self.is_full:
            raise TierFullError(f"{self.priority.name} tier is at capacity ({self.capacity})")
        self._calls.append(call)

    def head_ready(self) -> bool:
        return bool(self._calls) and self._calls[0].ready

    def pop_front_if_ready(self) -> InFlightCall | None:
        """Remove and return the head if it has completed.

        Never waits, and never looks past the head.
        """
        if not self.head_ready():
            return None
        return self._calls.popleft()

    def abandon(self) -> int:
        """Cancel and drop every call. Returns how many were pending."""
        pending = 0
        while self._calls:
            call = self._calls.popleft()
            if not call.task.done():
                call.task.cancel()
                pending += 1
        return pending


class TieredQueues:
    """The HIGH / NORMAL / LOW tiers, each bounded by the same capacity.

    Usage:
        tiers = TieredQueues(capacity=128)
        if not tiers[Priority.HIGH].is_full:
            tiers[Priority.HIGH].push_back(call)

        # On each pacer tick
        call = tiers.pop_ready()
    """

    def __init__(self, capacity: int):
        self._tiers: dict[Priority, TierQueue] = {p: TierQueue(p, capacity) for p in Priority}

    def __getitem__(self, priority: Priority) -> TierQueue:
        return self._tiers[priority]

    def __len__(self) -> int:
        return sum(len(t) for t in self._tiers.values())

    def pop_ready(self) -> InFlightCall | None:
        """Release at most one completed call, in strict priority order.

        The highest-priority non-empty tier decides the tick: if its head is
        still running nothing is released, even if a lower tier has a
        completed head.
        """
        for priority in sorted(Priority):
            tier = self._tiers[priority]
            if not tier:
                continue
            return tier.pop_front_if_ready()
        return None

    def sizes(self) -> dict[str, int]:
        return {p.name: len(t) for p, t in self._tiers.items()}

    def abandon_all(self) -> int:
        return sum(t.abandon() for t in self._tiers.values())
