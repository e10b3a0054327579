"""Bounded output channel with an explicit close.

``asyncio.Queue`` has no notion of end-of-stream, so the response side is
wrapped: ``recv`` drains buffered items first and returns ``None`` once the
channel is closed and empty.
"""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from comment_analyzer.gateway.types import ChannelClosedError

T = TypeVar("T")


class ResponseChannel(Generic[T]):
    """Single-consumer bounded channel.

    Usage:
        channel = ResponseChannel(maxsize=16)
        await channel.send(item)   # producer side
        item = await channel.recv()  # None once closed and drained
        async for item in channel:
            ...
    """

    def __init__(self, maxsize: int):
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Close the channel. Buffered items can still be received. Idempotent."""
        self._closed.set()

    def qsize(self) -> int:
        return self._queue.qsize()

    async def send(self, item: T) -> None:
        """Wait for buffer space and enqueue ``item``.

        Raises ``ChannelClosedError`` if the channel is closed before or while
        waiting.
        """
        if self.closed:
            raise ChannelClosedError("response channel is closed")
        if not self._queue.full():
            self._queue.put_nowait(item)
            return

        putter = asyncio.ensure_future(self._queue.put(item))
        closer = asyncio.ensure_future(self._closed.wait())
        try:
            done, _ = await asyncio.wait({putter, closer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            closer.cancel()
            if not putter.done():
                putter.cancel()
        if putter not in done:
            raise ChannelClosedError("response channel closed while sending")

    async def recv(self) -> T | None:
        """Receive the next item, or ``None`` once closed and drained."""
        while True:
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self.closed:
                return None

            getter = asyncio.ensure_future(self._queue.get())
            closer = asyncio.ensure_future(self._closed.wait())
            try:
                done, _ = await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                closer.cancel()
                if not getter.done():
                    getter.cancel()
            if getter in done:
                return getter.result()

    def __aiter__(self) -> ResponseChannel[T]:
        return self

    async def __anext__(self) -> T:
        item = await self.recv()
        if item is None:
            raise StopAsyncIteration
        return item
