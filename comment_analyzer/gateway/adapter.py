"""Remote call adapters for the analyze endpoint.

An adapter performs exactly one HTTP exchange per request and returns a
DispatchResponse. It never retries: transport failures, undecodable bodies
and API errors all come back as error responses.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import httpx

from comment_analyzer.core.config import DEFAULT_API_URL, ClientSettings
from comment_analyzer.gateway.decoder import decode_response
from comment_analyzer.gateway.types import DispatchResponse, ResponseStatus
from comment_analyzer.schemas import AnalyzeCommentRequest

logger = logging.getLogger(__name__)


class BaseRemoteAdapter(ABC):
    """Base class for remote call adapters.

    Instances are callables matching ``RemoteCall`` so they can be handed
    straight to the dispatcher.
    """

    def __init__(self, api_key: str, **kwargs):
        self.api_key = api_key

    @abstractmethod
    async def send(self, request: AnalyzeCommentRequest) -> DispatchResponse:
        """Perform the call and return a decoded response."""
        ...

    async def __call__(self, request: AnalyzeCommentRequest) -> DispatchResponse:
        return await self.send(request)


class CommentAnalyzerAdapter(BaseRemoteAdapter):
    """Perspective ``comments:analyze`` adapter.

    Equivalent to:
        curl -H "Content-Type: application/json" --data \\
            '{"comment": {"text": "..."}, "requestedAttributes": {"TOXICITY": {}}}' \\
            "https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze?key=KEY"
    """

    def __init__(self, api_key: str, api_url: str = DEFAULT_API_URL, timeout: float = 30.0, **kwargs):
        super().__init__(api_key, **kwargs)
        self.api_url = api_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> CommentAnalyzerAdapter:
        return cls(settings.api_key, api_url=settings.api_url, timeout=settings.request_timeout)

    async def send(self, request: AnalyzeCommentRequest) -> DispatchResponse:
        start = time.monotonic()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.api_url,
                    params={"key": self.api_key},
                    json=request.to_payload(),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException:
            logger.warning("Analyze call timed out after %.1fs", self.timeout)
            return DispatchResponse(
                status=ResponseStatus.TRANSPORT_FAILURE,
                error_code="TIMEOUT",
                error_message=f"Timeout after {self.timeout}s",
                latency_ms=_elapsed_ms(start),
            )
        except httpx.HTTPError as e:
            logger.warning("Analyze call failed: %s", e)
            return DispatchResponse(
                status=ResponseStatus.TRANSPORT_FAILURE,
                error_code="TRANSPORT",
                error_message=str(e) or type(e).__name__,
                latency_ms=_elapsed_ms(start),
            )

        return decode_response(resp.status_code, resp.text, latency_ms=_elapsed_ms(start))


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
