"""Caller-facing client: submit by priority, receive paced responses.

Usage:
    settings = ClientSettings(api_key="...")
    async with AnalyzerClient(settings) as client:
        await client.submit(AnalyzeCommentRequest.for_text("hi", Attribute.TOXICITY))
        response = await client.receive()
        if response.is_success:
            print(response.payload.summary_score(Attribute.TOXICITY))
"""

from __future__ import annotations

import asyncio
import logging

from comment_analyzer.core.config import ClientSettings
from comment_analyzer.gateway.adapter import CommentAnalyzerAdapter
from comment_analyzer.gateway.channels import ResponseChannel
from comment_analyzer.gateway.dispatcher import DispatcherWorker, Ticker
from comment_analyzer.gateway.pacer import Pacer
from comment_analyzer.gateway.types import (
    DispatchResponse,
    DispatcherClosedError,
    Priority,
    RemoteCall,
    ResponseStatus,
    Submission,
)
from comment_analyzer.schemas import AnalyzeCommentRequest

logger = logging.getLogger(__name__)


class AnalyzerClient:
    """Owns one dispatcher worker task and its channels.

    Remote calls start as soon as the worker accepts a submission; results
    are released to ``receive`` at most once per tick, HIGH before NORMAL
    before LOW, and in submission order within a priority. Closing the
    client abandons everything still pending.
    """

    def __init__(
        self,
        settings: ClientSettings,
        *,
        call_remote: RemoteCall | None = None,
        pacer: Ticker | None = None,
    ):
        """
        Args:
            settings: Validated client configuration
            call_remote: Override the HTTP adapter (any async Request -> DispatchResponse)
            pacer: Override the tick source (defaults to a Pacer at settings.tick_interval)
        """
        self.settings = settings
        self._call_remote = call_remote or CommentAnalyzerAdapter.from_settings(settings)
        self._pacer = pacer or Pacer(settings.tick_interval)

        self._requests: asyncio.Queue[Submission] = asyncio.Queue(maxsize=settings.request_buffer_size)
        self._responses: ResponseChannel[DispatchResponse] = ResponseChannel(maxsize=settings.response_buffer_size)
        self._receiver: ResponseChannel[DispatchResponse] | None = self._responses
        self._shutdown = asyncio.Event()

        self._worker: DispatcherWorker | None = None
        self._task: asyncio.Task[None] | None = None

    # -- lifecycle ---------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._shutdown.is_set()

    async def start(self) -> None:
        """Spawn the dispatcher worker. A client can only be started once."""
        if self._task is not None:
            raise RuntimeError("client already started")

        self._worker = DispatcherWorker(
            call_remote=self._call_remote,
            requests=self._requests,
            responses=self._responses,
            shutdown=self._shutdown,
            pacer=self._pacer,
            maximum_queue_size=self.settings.maximum_queue_size,
        )
        self._task = asyncio.create_task(self._worker.run(), name="comment-analyzer-dispatcher")
        logger.info(
            "Dispatcher started (tick=%dms, tier capacity=%d)",
            self.settings.tick_rate,
            self.settings.maximum_queue_size,
        )

    async def close(self) -> None:
        """Signal shutdown, then abort the worker if it does not exit in time."""
        self._shutdown.set()

        if self._task is not None and not self._task.done():
            await asyncio.wait({self._task}, timeout=self.settings.shutdown_timeout)
            if not self._task.done():
                logger.warning("Dispatcher did not stop within %.1fs, aborting", self.settings.shutdown_timeout)
                self._task.cancel()
                await asyncio.gather(self._task, return_exceptions=True)

        # The worker closes this itself unless it never got to run
        self._responses.close()

    async def __aenter__(self) -> AnalyzerClient:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # -- submission --------------------------------------------------------

    async def submit(
        self,
        request: AnalyzeCommentRequest,
        priority: Priority = Priority.NORMAL,
    ) -> str:
        """Queue a request for dispatch and return its request id.

        Waits only for space in the control channel, never for the remote
        call. The response arrives later through ``receive``. Raises
        ``DispatcherClosedError`` if the client closes while waiting.
        """
        submission = self._submission(request, priority)
        if not self._requests.full():
            self._requests.put_nowait(submission)
            return submission.request_id

        putter = asyncio.ensure_future(self._requests.put(submission))
        stopper = asyncio.ensure_future(self._shutdown.wait())
        try:
            done, _ = await asyncio.wait({putter, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopper.cancel()
            if not putter.done():
                putter.cancel()

        if putter not in done:
            raise DispatcherClosedError("dispatcher stopped while submitting")
        return submission.request_id

    def try_submit(
        self,
        request: AnalyzeCommentRequest,
        priority: Priority = Priority.NORMAL,
    ) -> str:
        """Like ``submit`` but raises ``asyncio.QueueFull`` instead of waiting."""
        submission = self._submission(request, priority)
        self._requests.put_nowait(submission)
        return submission.request_id

    def _submission(self, request: AnalyzeCommentRequest, priority: Priority) -> Submission:
        if not self.running:
            raise DispatcherClosedError("dispatcher is not running")
        return Submission(request=request, priority=Priority(priority))

    # -- receiving ---------------------------------------------------------

    async def receive(self) -> DispatchResponse | None:
        """Next released response, or ``None`` once the dispatcher has stopped.

        After ``take_receiver`` this returns a RECEIVER_UNAVAILABLE response.
        """
        if self._receiver is None:
            return DispatchResponse(
                status=ResponseStatus.RECEIVER_UNAVAILABLE,
                error_code="RECEIVER_TAKEN",
                error_message="response receiver was taken",
            )
        return await self._receiver.recv()

    def take_receiver(self) -> ResponseChannel[DispatchResponse] | None:
        """Hand the response channel to the caller (e.g. to consume it as a stream)."""
        receiver, self._receiver = self._receiver, None
        return receiver

    def __aiter__(self):
        return self._iter_responses()

    async def _iter_responses(self):
        while True:
            response = await self.receive()
            if response is None or response.status == ResponseStatus.RECEIVER_UNAVAILABLE:
                return
            yield response
