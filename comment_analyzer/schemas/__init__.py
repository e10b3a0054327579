"""Wire schema of the Perspective ``comments:analyze`` endpoint."""

from comment_analyzer.schemas.attributes import (
    Attribute,
    AttributeCompatibility,
    LanguageCode,
    ScoreType,
    TextType,
)
from comment_analyzer.schemas.request import (
    AnalyzeCommentRequest,
    AttributeOptions,
    Comment,
    Context,
    ContextEntry,
)
from comment_analyzer.schemas.response import (
    AnalyzeCommentResponse,
    ApiErrorBody,
    ApiErrorDetail,
    AttributeScores,
    Score,
    SpanScore,
)

__all__ = [
    "AnalyzeCommentRequest",
    "AnalyzeCommentResponse",
    "ApiErrorBody",
    "ApiErrorDetail",
    "Attribute",
    "AttributeCompatibility",
    "AttributeOptions",
    "AttributeScores",
    "Comment",
    "Context",
    "ContextEntry",
    "LanguageCode",
    "Score",
    "ScoreType",
    "SpanScore",
    "TextType",
]
