"""Rate-limited, priority-aware client for the Perspective comment analysis API."""

from comment_analyzer.client import AnalyzerClient
from comment_analyzer.core.config import ClientSettings
from comment_analyzer.gateway.types import (
    AnalyzerError,
    DispatchResponse,
    Priority,
    ResponseStatus,
)
from comment_analyzer.schemas import (
    AnalyzeCommentRequest,
    AnalyzeCommentResponse,
    Attribute,
    AttributeOptions,
    LanguageCode,
)

__all__ = [
    "AnalyzeCommentRequest",
    "AnalyzeCommentResponse",
    "AnalyzerClient",
    "AnalyzerError",
    "Attribute",
    "AttributeOptions",
    "ClientSettings",
    "DispatchResponse",
    "LanguageCode",
    "Priority",
    "ResponseStatus",
]
