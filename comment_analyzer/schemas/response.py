"""Response bodies returned by the ``comments:analyze`` method."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from comment_analyzer.schemas.attributes import Attribute, ScoreType
from comment_analyzer.schemas.request import Language


class Score(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    value: float
    score_type: ScoreType = Field(alias="type")


class SpanScore(BaseModel):
    """Score for the span ``[begin, end)`` of the comment text."""

    begin: int
    end: int
    score: Score


class AttributeScores(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary_score: Score = Field(alias="summaryScore")
    span_scores: list[SpanScore] | None = Field(None, alias="spanScores")


class AnalyzeCommentResponse(BaseModel):
    """Successful analyze result.

    ``attribute_scores`` mirrors the requested attributes. It is empty when the
    API had nothing to score (e.g. every score fell under its threshold).
    """

    model_config = ConfigDict(populate_by_name=True)

    attribute_scores: dict[Attribute, AttributeScores] = Field(default_factory=dict, alias="attributeScores")
    languages: list[Language] = Field(default_factory=list)
    detected_languages: list[Language] | None = Field(None, alias="detectedLanguages")
    client_token: str | None = Field(None, alias="clientToken")

    def summary_score(self, attribute: Attribute | str) -> float | None:
        scores = self.attribute_scores.get(Attribute(attribute))
        if scores is None:
            return None
        return scores.summary_score.value


class ApiErrorDetail(BaseModel):
    code: int
    message: str
    status: str = ""
    details: list[dict[str, Any]] = Field(default_factory=list)


class ApiErrorBody(BaseModel):
    """Structured error body, e.g. ``{"error": {"code": 400, "message": ..., "status": ...}}``."""

    error: ApiErrorDetail

    def __str__(self) -> str:
        return self.error.message
