import asyncio

import pytest

from comment_analyzer.core.config import ClientSettings
from comment_analyzer.gateway.types import DispatchResponse
from comment_analyzer.schemas import AnalyzeCommentRequest, AnalyzeCommentResponse, Attribute


class ManualPacer:
    """Tick source driven by the test instead of a clock."""

    def __init__(self):
        self._ticks: asyncio.Queue[None] = asyncio.Queue()

    def fire(self, count: int = 1) -> None:
        for _ in range(count):
            self._ticks.put_nowait(None)

    async def tick(self) -> None:
        await self._ticks.get()


class FakeRemote:
    """Remote call stand-in. Calls complete at once unless held by text."""

    def __init__(self):
        self.calls: list[str] = []
        self.cancelled: list[str] = []
        self._gates: dict[str, asyncio.Event] = {}

    def hold(self, text: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[text] = gate
        return gate

    async def __call__(self, request: AnalyzeCommentRequest) -> DispatchResponse:
        text = request.comment.text
        self.calls.append(text)
        gate = self._gates.get(text)
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled.append(text)
                raise
        return DispatchResponse(payload=AnalyzeCommentResponse(client_token=text))


def make_request(text: str) -> AnalyzeCommentRequest:
    return AnalyzeCommentRequest.for_text(text, Attribute.TOXICITY)


async def settle() -> None:
    """Let the worker and in-flight calls run."""
    await asyncio.sleep(0.02)


@pytest.fixture
def settings():
    return ClientSettings(api_key="test-key", _env_file=None)


@pytest.fixture
def pacer():
    return ManualPacer()


@pytest.fixture
def remote():
    return FakeRemote()
