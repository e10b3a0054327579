"""Request body for the ``comments:analyze`` method."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from comment_analyzer.schemas.attributes import (
    Attribute,
    AttributeCompatibility,
    LanguageCode,
    ScoreType,
    TextType,
)

MAX_COMMENT_BYTES = 20_000
MAX_CONTEXT_ENTRY_BYTES = 1_000_000

# Known codes become LanguageCode members, anything else stays a plain string.
Language = Annotated[LanguageCode | str, Field(union_mode="left_to_right")]


class Comment(BaseModel):
    """The comment to score."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    text_type: TextType | None = Field(None, alias="type")

    @model_validator(mode="before")
    @classmethod
    def _from_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"text": data}
        return data

    @field_validator("text")
    @classmethod
    def _check_size(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_COMMENT_BYTES:
            raise ValueError("comment text cannot exceed 20kb")
        return value


class ContextEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    text_type: TextType | None = Field(None, alias="type")

    @field_validator("text")
    @classmethod
    def _check_size(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_CONTEXT_ENTRY_BYTES:
            raise ValueError("context entry text cannot exceed 1MB")
        return value


class Context(BaseModel):
    """Context for the comment. Accepted by the API but currently unused by it."""

    model_config = ConfigDict(frozen=True)

    entries: list[ContextEntry]


class AttributeOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    score_type: ScoreType = Field(ScoreType.PROBABILITY, alias="scoreType")
    # Scores below the threshold are not returned
    score_threshold: float | None = Field(None, alias="scoreThreshold", ge=0, le=1)


class AnalyzeCommentRequest(BaseModel):
    """A single analyze request.

    Immutable once built; use ``with_attribute`` / ``with_all_attributes`` to
    derive variants. ``to_payload`` produces the JSON body sent upstream.

    Example:
        req = AnalyzeCommentRequest.for_text(
            "what kind of idiot name is foo?",
            Attribute.TOXICITY,
            languages=["en"],
        )
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    comment: Comment
    context: Context | None = None
    requested_attributes: dict[Attribute, AttributeOptions] = Field(alias="requestedAttributes")
    span_annotations: bool | None = Field(None, alias="spanAnnotations")
    languages: list[Language] | None = None
    # Should be True for private data or content written by minors
    do_not_store: bool | None = Field(None, alias="doNotStore")
    client_token: str | None = Field(None, alias="clientToken")
    session_id: str | None = Field(None, alias="sessionId")
    community_id: str | None = Field(None, alias="communityId")

    @model_validator(mode="after")
    def _check_attributes(self) -> "AnalyzeCommentRequest":
        if not self.requested_attributes:
            raise ValueError("requested attributes cannot be empty")
        if self.languages:
            for attribute in self.requested_attributes:
                for language in self.languages:
                    if attribute.check_compatibility(language) == AttributeCompatibility.INCOMPATIBLE:
                        raise ValueError(
                            "requested attributes are incompatible with the selected language(s)"
                        )
        return self

    @classmethod
    def for_text(
        cls,
        text: str,
        *attributes: Attribute | str,
        **kwargs: Any,
    ) -> "AnalyzeCommentRequest":
        """Build a request for ``text`` scoring ``attributes`` with default options."""
        requested = {Attribute(a): AttributeOptions() for a in attributes}
        return cls(comment=Comment(text=text), requested_attributes=requested, **kwargs)

    def with_attribute(
        self,
        attribute: Attribute | str,
        options: AttributeOptions | None = None,
    ) -> "AnalyzeCommentRequest":
        requested = dict(self.requested_attributes)
        requested[Attribute(attribute)] = options or AttributeOptions()
        return self._replace(requested_attributes=requested)

    def with_all_attributes(self) -> "AnalyzeCommentRequest":
        return self._replace(requested_attributes={a: AttributeOptions() for a in Attribute.all()})

    def _replace(self, **changes: Any) -> "AnalyzeCommentRequest":
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(changes)
        return type(self).model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible body with API field names, unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
