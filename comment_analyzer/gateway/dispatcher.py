"""Dispatcher worker: the single background loop behind the client.

Owns the three priority tiers and the pacer, and multiplexes:
  1. Incoming submissions: start the remote call at once and park it in its
     tier, or answer QUEUE_FULL immediately when the tier is at capacity
  2. Pacer ticks: release at most one completed call, HIGH tier first
  3. Shutdown: stop at once, abandoning every queued and in-flight call

Remote calls run concurrently as soon as they are accepted; the pacer only
throttles how fast results are handed to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Protocol

from comment_analyzer.core.metrics import PACER_TICKS, RELEASED, SUBMISSIONS, TIER_DEPTH
from comment_analyzer.gateway.channels import ResponseChannel
from comment_analyzer.gateway.queue_manager import InFlightCall, TieredQueues
from comment_analyzer.gateway.types import (
    ChannelClosedError,
    DispatchResponse,
    RemoteCall,
    ResponseStatus,
    Submission,
)

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    async def tick(self) -> None: ...


class WorkerState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"  # Only while run() tears down, never seen from outside
    STOPPED = "stopped"


class DispatcherWorker:
    """Event loop that paces the release of remote call results.

    All tier state lives here and is only touched from ``run``; other
    components talk to the worker through the two channels and the
    shutdown event.
    """

    def __init__(
        self,
        call_remote: RemoteCall,
        requests: asyncio.Queue[Submission],
        responses: ResponseChannel[DispatchResponse],
        shutdown: asyncio.Event,
        pacer: Ticker,
        maximum_queue_size: int,
    ):
        self._call_remote = call_remote
        self._requests = requests
        self._responses = responses
        self._shutdown = shutdown
        self._pacer = pacer
        self._tiers = TieredQueues(maximum_queue_size)
        self.state = WorkerState.RUNNING

    async def run(self) -> None:
        tick = asyncio.ensure_future(self._pacer.tick())
        incoming = asyncio.ensure_future(self._requests.get())
        stop = asyncio.ensure_future(self._shutdown.wait())

        try:
            while not self._shutdown.is_set():
                done, _ = await asyncio.wait({tick, incoming, stop}, return_when=asyncio.FIRST_COMPLETED)

                if stop in done:
                    break

                # One branch per wakeup; a tick that is also ready stays done
                # and is picked up by the next wait.
                if tick in done:
                    await self._release_one()
                    tick = asyncio.ensure_future(self._pacer.tick())
                elif incoming in done:
                    await self._accept(incoming.result())
                    incoming = asyncio.ensure_future(self._requests.get())
        finally:
            self.state = WorkerState.DRAINING
            logger.info("Dispatcher shutting down")
            for waiter in (tick, incoming, stop):
                waiter.cancel()

            abandoned = self._tiers.abandon_all()
            if abandoned:
                logger.warning("Abandoned %d in-flight call(s) on shutdown", abandoned)
            self._update_depth()

            self._responses.close()
            self.state = WorkerState.STOPPED

    async def _accept(self, submission: Submission) -> None:
        priority = submission.priority
        tier = self._tiers[priority]
        log_extra = {"request_id": submission.request_id}
        logger.debug("Received request %s (priority=%s)", submission.request_id, priority.name, extra=log_extra)

        if tier.is_full:
            logger.info(
                "%s tier is full, rejecting request %s",
                priority.name,
                submission.request_id,
                extra=log_extra,
            )
            SUBMISSIONS.labels(priority=priority.name, outcome="queue_full").inc()
            await self._send(
                DispatchResponse(
                    status=ResponseStatus.QUEUE_FULL,
                    request_id=submission.request_id,
                    priority=priority,
                    error_code="QUEUE_FULL",
                    error_message=f"{priority.name} tier is at capacity ({tier.capacity})",
                )
            )
            return

        task = asyncio.create_task(self._execute(submission))
        tier.push_back(InFlightCall(submission=submission, task=task))
        SUBMISSIONS.labels(priority=priority.name, outcome="accepted").inc()
        TIER_DEPTH.labels(priority=priority.name).set(len(tier))

    async def _execute(self, submission: Submission) -> DispatchResponse:
        """Run one remote call; every failure comes back as a response."""
        log_extra = {"request_id": submission.request_id}
        try:
            response = await self._call_remote(submission.request)
        except asyncio.CancelledError:
            # Abandoned on shutdown
            if self._shutdown.is_set():
                raise
            logger.warning("Remote call for request %s was cancelled", submission.request_id, extra=log_extra)
            response = _cancelled_response()
        except Exception as e:
            logger.exception("Remote call for request %s raised", submission.request_id, extra=log_extra)
            response = DispatchResponse(
                status=ResponseStatus.TRANSPORT_FAILURE,
                error_code="TRANSPORT",
                error_message=str(e) or type(e).__name__,
            )

        response.request_id = submission.request_id
        response.priority = submission.priority
        return response

    async def _release_one(self) -> None:
        call = self._tiers.pop_ready()
        if call is None:
            PACER_TICKS.labels(result="idle").inc()
            return

        priority = call.submission.priority
        if call.task.cancelled():
            response = _cancelled_response()
            response.request_id = call.submission.request_id
            response.priority = priority
        else:
            response = call.result()

        logger.info(
            "Releasing request %s (priority=%s, status=%s)",
            response.request_id,
            priority.name,
            response.status.value,
            extra={"request_id": response.request_id},
        )
        PACER_TICKS.labels(result="released").inc()
        RELEASED.labels(priority=priority.name, status=response.status.value).inc()
        TIER_DEPTH.labels(priority=priority.name).set(len(self._tiers[priority]))
        await self._send(response)

    async def _send(self, response: DispatchResponse) -> None:
        try:
            await self._responses.send(response)
        except ChannelClosedError:
            logger.error(
                "Failed to send response %s: receiver closed",
                response.request_id,
                extra={"request_id": response.request_id},
            )

    def _update_depth(self) -> None:
        for name, size in self._tiers.sizes().items():
            TIER_DEPTH.labels(priority=name).set(size)


def _cancelled_response() -> DispatchResponse:
    return DispatchResponse(
        status=ResponseStatus.TRANSPORT_FAILURE,
        error_code="CANCELLED",
        error_message="remote call was cancelled",
    )
