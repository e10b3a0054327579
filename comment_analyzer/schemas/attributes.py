"""Attribute, language and score enums for the analyze endpoint."""

from __future__ import annotations

from enum import Enum


class AttributeCompatibility(str, Enum):
    """How well an attribute is supported for a given language."""

    SUPPORTED = "supported"
    EXPERIMENTAL = "experimental"
    INCOMPATIBLE = "incompatible"


class TextType(str, Enum):
    """Text type of a comment or context entry. Only plain text is accepted upstream."""

    PLAIN_TEXT = "PLAIN_TEXT"
    HTML = "HTML"


class ScoreType(str, Enum):
    """Score type returned per attribute. Probability scores are in [0, 1]."""

    PROBABILITY = "PROBABILITY"


class LanguageCode(str, Enum):
    """ISO 639-1 codes the API accepts. Unknown codes are kept as plain strings."""

    ARABIC = "ar"
    CHINESE = "zh"
    CZECH = "cs"
    DUTCH = "nl"
    ENGLISH = "en"
    FRENCH = "fr"
    GERMAN = "de"
    HINDI = "hi"
    HINGLISH = "hi-Latn"
    INDONESIAN = "id"
    ITALIAN = "it"
    JAPANESE = "ja"
    KOREAN = "ko"
    POLISH = "pl"
    PORTUGUESE = "pt"
    RUSSIAN = "ru"
    SPANISH = "es"
    SWEDISH = "sv"


class Attribute(str, Enum):
    """Attributes the API can score.

    Production attributes are available in every language. Experimental
    attributes are less accurate and English only. The NYT attributes were
    trained on New York Times comments and are English only.
    """

    # Production
    TOXICITY = "TOXICITY"
    SEVERE_TOXICITY = "SEVERE_TOXICITY"
    IDENTITY_ATTACK = "IDENTITY_ATTACK"
    INSULT = "INSULT"
    PROFANITY = "PROFANITY"
    THREAT = "THREAT"

    # Experimental
    TOXICITY_EXPERIMENTAL = "TOXICITY_EXPERIMENTAL"
    SEVERE_TOXICITY_EXPERIMENTAL = "SEVERE_TOXICITY_EXPERIMENTAL"
    IDENTITY_ATTACK_EXPERIMENTAL = "IDENTITY_ATTACK_EXPERIMENTAL"
    INSULT_EXPERIMENTAL = "INSULT_EXPERIMENTAL"
    PROFANITY_EXPERIMENTAL = "PROFANITY_EXPERIMENTAL"
    THREAT_EXPERIMENTAL = "THREAT_EXPERIMENTAL"
    SEXUALLY_EXPLICIT = "SEXUALLY_EXPLICIT"
    FLIRTATION = "FLIRTATION"

    # New York Times
    ATTACK_ON_AUTHOR = "ATTACK_ON_AUTHOR"
    ATTACK_ON_COMMENTER = "ATTACK_ON_COMMENTER"
    INCOHERENT = "INCOHERENT"
    INFLAMMATORY = "INFLAMMATORY"
    LIKELY_TO_REJECT = "LIKELY_TO_REJECT"
    OBSCENE = "OBSCENE"
    SPAM = "SPAM"
    UNSUBSTANTIAL = "UNSUBSTANTIAL"

    @classmethod
    def all(cls) -> list[Attribute]:
        return list(cls)

    @property
    def is_production(self) -> bool:
        return self in PRODUCTION_ATTRIBUTES

    def check_compatibility(self, language: LanguageCode | str) -> AttributeCompatibility:
        """Return how well this attribute supports ``language``."""
        try:
            code = LanguageCode(language)
        except ValueError:
            # Unknown codes are left for the API to accept or reject
            return AttributeCompatibility.EXPERIMENTAL

        if self in PRODUCTION_ATTRIBUTES:
            return AttributeCompatibility.SUPPORTED
        if self in EXPERIMENTAL_ATTRIBUTES:
            if code == LanguageCode.ENGLISH:
                return AttributeCompatibility.EXPERIMENTAL
            return AttributeCompatibility.INCOMPATIBLE
        # NYT attributes
        if code == LanguageCode.ENGLISH:
            return AttributeCompatibility.SUPPORTED
        return AttributeCompatibility.INCOMPATIBLE


PRODUCTION_ATTRIBUTES = frozenset(
    {
        Attribute.TOXICITY,
        Attribute.SEVERE_TOXICITY,
        Attribute.IDENTITY_ATTACK,
        Attribute.INSULT,
        Attribute.PROFANITY,
        Attribute.THREAT,
    }
)

EXPERIMENTAL_ATTRIBUTES = frozenset(
    {
        Attribute.TOXICITY_EXPERIMENTAL,
        Attribute.SEVERE_TOXICITY_EXPERIMENTAL,
        Attribute.IDENTITY_ATTACK_EXPERIMENTAL,
        Attribute.INSULT_EXPERIMENTAL,
        Attribute.PROFANITY_EXPERIMENTAL,
        Attribute.THREAT_EXPERIMENTAL,
        Attribute.SEXUALLY_EXPLICIT,
        Attribute.FLIRTATION,
    }
)
