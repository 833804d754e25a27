"""Brand voice scoring: LLM tone classification plus lexicon checks against a brand config."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from contentlab.analysis.parsing import ask_json
from contentlab.analysis.text_metrics import round_half_up
from contentlab.metrics import analysis_duration_seconds
from contentlab.models.brand_voice import (
    DEFAULT_BRAND_VOICE,
    BrandVoiceConfig,
    BrandVoiceReport,
    Formality,
    JargonLevel,
    MessagingAlignment,
    StyleAnalysis,
    ToneAnalysis,
    ToneClassification,
    VocabularyAnalysis,
)
from contentlab.models.generation import ContentCategory

if TYPE_CHECKING:
    from contentlab.protocols import TextGeneratorPort

logger = structlog.get_logger()

TONE_PROMPT_CHARS = 1500
LOW_TONE_ALIGNMENT = 70
LOW_CLARITY = 50

# Weights of the consistency score; they sum to 1.
TONE_WEIGHT = 0.4
VOCABULARY_WEIGHT = 0.3
MESSAGING_WEIGHT = 0.3

FALLBACK_TONE = ToneClassification(
    detected_tone=["professional"],
    formality_level=Formality.NEUTRAL,
    voice_characteristics=["informative"],
    tone_alignment_score=75,
)


def jargon_level(hits: int) -> JargonLevel:
    if hits > 5:
        return JargonLevel.HIGH
    if hits > 2:
        return JargonLevel.MEDIUM
    return JargonLevel.LOW


def analyze_vocabulary(content: str, config: BrandVoiceConfig) -> VocabularyAnalysis:
    lowered = content.lower()
    used = [t for t in config.brand_terms if t.lower() in lowered]
    missing = [t for t in config.brand_terms if t.lower() not in lowered]
    jargon_hits = sum(1 for t in config.technical_terms if t.lower() in lowered)
    return VocabularyAnalysis(
        brand_terms_used=used,
        brand_terms_missing=missing,
        jargon_level=jargon_level(jargon_hits),
    )


def message_present(content_lower: str, message: str) -> bool:
    """A key message counts if the phrase, or any single word of it, appears."""
    if message.lower() in content_lower:
        return True
    return any(word.lower() in content_lower for word in message.split())


def analyze_messaging(content: str, config: BrandVoiceConfig) -> MessagingAlignment:
    lowered = content.lower()
    present = [m for m in config.key_messages if message_present(lowered, m)]
    missing = [m for m in config.key_messages if m not in present]
    total = len(config.key_messages)
    clarity = min(100.0, len(present) / total * 100) if total else 0.0
    return MessagingAlignment(
        key_messages_present=present,
        key_messages_missing=missing,
        value_proposition_clarity=int(round_half_up(clarity)),
    )


def consistency_score(
    tone: ToneClassification,
    vocabulary: VocabularyAnalysis,
    messaging: MessagingAlignment,
    config: BrandVoiceConfig,
) -> int:
    total_terms = len(config.brand_terms)
    vocab_pct = len(vocabulary.brand_terms_used) / total_terms * 100 if total_terms else 0.0
    score = (
        tone.tone_alignment_score * TONE_WEIGHT
        + vocab_pct * VOCABULARY_WEIGHT
        + messaging.value_proposition_clarity * MESSAGING_WEIGHT
    )
    return min(100, max(0, int(round_half_up(score))))


def brand_voice_suggestions(
    tone: ToneClassification,
    vocabulary: VocabularyAnalysis,
    messaging: MessagingAlignment,
    config: BrandVoiceConfig,
) -> list[str]:
    suggestions: list[str] = []
    if tone.tone_alignment_score < LOW_TONE_ALIGNMENT:
        suggestions.append(f"Adjust tone to be more {', '.join(config.target_tone)}")
    if vocabulary.brand_terms_missing:
        suggestions.append(
            f"Consider including brand terms: {', '.join(vocabulary.brand_terms_missing[:3])}"
        )
    if vocabulary.jargon_level == JargonLevel.HIGH:
        suggestions.append("Reduce technical jargon to improve accessibility")
    if messaging.key_messages_missing:
        suggestions.append(
            f"Incorporate key messages: {', '.join(messaging.key_messages_missing[:2])}"
        )
    if messaging.value_proposition_clarity < LOW_CLARITY:
        suggestions.append("Strengthen value proposition clarity in the content")
    return suggestions


def tone_prompt(content: str, config: BrandVoiceConfig) -> str:
    formalities = ", ".join(f'"{f.value}"' for f in Formality)
    return (
        "Analyze the tone, style, and voice characteristics of this content:\n\n"
        f"Content: {content[:TONE_PROMPT_CHARS]}...\n\n"
        "Return a JSON object with:\n"
        '- detected_tone: array of detected tones (e.g., ["professional", "friendly"])\n'
        f"- formality_level: one of {formalities}\n"
        '- voice_characteristics: array of voice characteristics (e.g., ["conversational", "expert"])\n'
        "- tone_alignment_score: number 0-100 indicating how well it aligns with a "
        f"{', '.join(config.target_tone)} tone"
    )


class BrandVoiceAnalyzer:
    """Scores how consistently content matches a brand's voice."""

    def __init__(
        self,
        generator: TextGeneratorPort,
        config: BrandVoiceConfig = DEFAULT_BRAND_VOICE,
    ) -> None:
        self.generator = generator
        self.config = config

    async def classify_tone(self, content: str) -> ToneClassification:
        return await ask_json(
            self.generator,
            tone_prompt(content, self.config),
            ToneClassification,
            FALLBACK_TONE,
            site="tone_classification",
            content_category=ContentCategory.BLOG,
        )

    async def analyze(self, content: str) -> BrandVoiceReport:
        started = time.perf_counter()
        tone = await self.classify_tone(content)
        vocabulary = analyze_vocabulary(content, self.config)
        messaging = analyze_messaging(content, self.config)

        report = BrandVoiceReport(
            consistency_score=consistency_score(tone, vocabulary, messaging, self.config),
            tone_analysis=ToneAnalysis(
                detected_tone=tone.detected_tone,
                target_tone=list(self.config.target_tone),
                alignment_score=tone.tone_alignment_score,
            ),
            style_analysis=StyleAnalysis(
                formality_level=tone.formality_level,
                target_formality=self.config.target_formality,
                voice_characteristics=tone.voice_characteristics,
            ),
            vocabulary_analysis=vocabulary,
            messaging_alignment=messaging,
            suggestions=brand_voice_suggestions(tone, vocabulary, messaging, self.config),
        )
        analysis_duration_seconds.labels(analyzer="brand_voice").observe(
            time.perf_counter() - started
        )
        logger.info(
            "Brand voice analysis complete",
            consistency_score=report.consistency_score,
            jargon_level=vocabulary.jargon_level.value,
        )
        return report
