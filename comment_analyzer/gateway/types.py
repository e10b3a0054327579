"""Core types and DTOs for the dispatch gateway."""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from comment_analyzer.schemas import AnalyzeCommentRequest, AnalyzeCommentResponse


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Priority(int, Enum):
    """Priority tiers (lower = drained first)."""

    HIGH = 0
    NORMAL = 1
    LOW = 2


class ResponseStatus(str, Enum):
    """Outcome of one submission."""

    SUCCESS = "success"
    QUEUE_FULL = "queue_full"  # Rejected locally, never sent upstream
    TRANSPORT_FAILURE = "transport_failure"
    DECODE_FAILURE = "decode_failure"
    REMOTE_ERROR = "remote_error"  # Structured error returned by the API
    RECEIVER_UNAVAILABLE = "receiver_unavailable"  # Output stream was taken


# ---------------------------------------------------------------------------
# Submission: a request tagged with its priority
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Submission:
    request: AnalyzeCommentRequest
    priority: Priority = Priority.NORMAL
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Dispatch Response: success payload or typed error
# ---------------------------------------------------------------------------


@dataclass
class DispatchResponse:
    """Result delivered to the caller for one submission.

    Exactly one of ``payload`` (on SUCCESS) or the ``error_*`` fields is
    meaningful. ``request_id`` and ``priority`` are stamped by the
    dispatcher and link the response back to its submission.
    """

    status: ResponseStatus = ResponseStatus.SUCCESS
    payload: AnalyzeCommentResponse | None = None

    request_id: str = ""
    priority: Priority | None = None

    # Error details (if status != SUCCESS)
    error_code: str = ""  # e.g. "400", "TIMEOUT"
    error_message: str = ""
    http_status: int | None = None
    raw_body: str = ""  # Undecodable or unstructured body, for diagnostics

    latency_ms: int = 0
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_success(self) -> bool:
        return self.status == ResponseStatus.SUCCESS

    def raise_for_status(self) -> AnalyzeCommentResponse:
        """Return the payload, or raise ``AnalyzerError`` for error responses."""
        if not self.is_success or self.payload is None:
            raise AnalyzerError(self)
        return self.payload

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict for logging/storage."""
        return {
            "request_id": self.request_id,
            "priority": self.priority.name if self.priority is not None else None,
            "status": self.status.value,
            "payload": self.payload.model_dump(mode="json", by_alias=True) if self.payload else None,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "http_status": self.http_status,
            "raw_body": self.raw_body,
            "latency_ms": self.latency_ms,
            "completed_at": self.completed_at.isoformat(),
        }


# Opaque "call the API and decode its body" operation used by the dispatcher.
RemoteCall = Callable[[AnalyzeCommentRequest], Awaitable[DispatchResponse]]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AnalyzerError(Exception):
    """Raised by ``DispatchResponse.raise_for_status`` for error responses."""

    def __init__(self, response: DispatchResponse):
        message = response.error_message or response.status.value
        super().__init__(f"{response.status.value}: {message}")
        self.response = response
        self.status = response.status


class TierFullError(Exception):
    """Raised when pushing onto a tier that is at capacity."""


class ChannelClosedError(Exception):
    """Raised when sending on a closed response channel."""


class DispatcherClosedError(Exception):
    """Raised when submitting to a client whose dispatcher is not running."""
