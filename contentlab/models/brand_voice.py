"""Brand voice configuration and report models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from contentlab.models.base import FrozenModel


class Formality(StrEnum):
    VERY_FORMAL = "very_formal"
    FORMAL = "formal"
    NEUTRAL = "neutral"
    INFORMAL = "informal"
    VERY_INFORMAL = "very_informal"


class JargonLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BrandVoiceConfig(FrozenModel):
    """The brand a piece of content is scored against."""

    target_tone: tuple[str, ...]
    target_formality: Formality = Formality.NEUTRAL
    brand_terms: tuple[str, ...]
    key_messages: tuple[str, ...]
    technical_terms: tuple[str, ...] = (
        "API",
        "SDK",
        "framework",
        "implementation",
        "optimization",
        "scalability",
        "integration",
        "methodology",
        "paradigm",
    )


DEFAULT_BRAND_VOICE = BrandVoiceConfig(
    target_tone=("professional", "helpful", "approachable"),
    target_formality=Formality.NEUTRAL,
    brand_terms=(
        "Swift Solution",
        "e-learning",
        "content automation",
        "digital transformation",
        "learning solutions",
        "training programs",
    ),
    key_messages=(
        "Innovative learning solutions",
        "Streamlined content creation",
        "Data-driven insights",
        "Scalable training programs",
    ),
)


class ToneClassification(FrozenModel):
    """What the tone classifier reports about a piece of content."""

    detected_tone: list[str]
    formality_level: Formality
    voice_characteristics: list[str]
    tone_alignment_score: float = Field(ge=0, le=100)


class ToneAnalysis(FrozenModel):
    detected_tone: list[str]
    target_tone: list[str]
    alignment_score: float


class StyleAnalysis(FrozenModel):
    formality_level: Formality
    target_formality: Formality
    voice_characteristics: list[str]


class VocabularyAnalysis(FrozenModel):
    brand_terms_used: list[str]
    brand_terms_missing: list[str]
    jargon_level: JargonLevel


class MessagingAlignment(FrozenModel):
    key_messages_present: list[str]
    key_messages_missing: list[str]
    value_proposition_clarity: int


class BrandVoiceReport(FrozenModel):
    consistency_score: int = Field(ge=0, le=100)
    tone_analysis: ToneAnalysis
    style_analysis: StyleAnalysis
    vocabulary_analysis: VocabularyAnalysis
    messaging_alignment: MessagingAlignment
    suggestions: list[str] = Field(default_factory=list)
