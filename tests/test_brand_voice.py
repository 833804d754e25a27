"""Tests for brand voice analysis."""

from __future__ import annotations

import asyncio
import json

import pytest

from contentlab.analysis.brand_voice import (
    FALLBACK_TONE,
    BrandVoiceAnalyzer,
    analyze_messaging,
    analyze_vocabulary,
    consistency_score,
    jargon_level,
    message_present,
    tone_prompt,
)
from contentlab.errors import ExternalServiceError
from contentlab.models.brand_voice import (
    DEFAULT_BRAND_VOICE,
    BrandVoiceConfig,
    Formality,
    JargonLevel,
    ToneClassification,
)


@pytest.fixture()
def small_brand() -> BrandVoiceConfig:
    return BrandVoiceConfig(
        target_tone=("friendly",),
        brand_terms=("Acme", "rocket skates"),
        key_messages=("Fast delivery", "Trusted quality"),
        technical_terms=("API", "SDK", "webhook"),
    )


class TestJargon:
    @pytest.mark.parametrize(
        ("hits", "expected"),
        [(0, JargonLevel.LOW), (2, JargonLevel.LOW), (3, JargonLevel.MEDIUM),
         (5, JargonLevel.MEDIUM), (6, JargonLevel.HIGH)],
    )
    def test_thresholds(self, hits, expected):
        assert jargon_level(hits) == expected

    def test_terms_counted_once_each(self):
        content = "API API API framework framework implementation paradigm"
        vocabulary = analyze_vocabulary(content, DEFAULT_BRAND_VOICE)
        assert vocabulary.jargon_level == JargonLevel.MEDIUM


class TestVocabulary:
    def test_used_and_missing_preserve_config_order(self, small_brand):
        vocabulary = analyze_vocabulary("Try ROCKET SKATES today", small_brand)
        assert vocabulary.brand_terms_used == ["rocket skates"]
        assert vocabulary.brand_terms_missing == ["Acme"]
        assert vocabulary.jargon_level == JargonLevel.LOW


class TestMessaging:
    def test_any_word_of_message_counts(self):
        assert message_present("we care about quality", "Trusted quality")
        assert not message_present("nothing relevant", "Trusted quality")

    def test_clarity_percentage(self, small_brand):
        messaging = analyze_messaging("Guaranteed fast shipping", small_brand)
        assert messaging.key_messages_present == ["Fast delivery"]
        assert messaging.key_messages_missing == ["Trusted quality"]
        assert messaging.value_proposition_clarity == 50

    def test_no_messages_configured(self):
        config = BrandVoiceConfig(target_tone=("calm",), brand_terms=(), key_messages=())
        messaging = analyze_messaging("anything", config)
        assert messaging.value_proposition_clarity == 0


class TestConsistencyScore:
    def test_weighted_sum(self, small_brand):
        tone = ToneClassification(
            detected_tone=["friendly"],
            formality_level=Formality.INFORMAL,
            voice_characteristics=["warm"],
            tone_alignment_score=80,
        )
        vocabulary = analyze_vocabulary("Acme", small_brand)  # 1 of 2 terms -> 50%
        messaging = analyze_messaging("fast", small_brand)  # 1 of 2 messages -> 50
        # 80*0.4 + 50*0.3 + 50*0.3 = 62
        assert consistency_score(tone, vocabulary, messaging, small_brand) == 62

    def test_no_brand_terms(self):
        config = BrandVoiceConfig(target_tone=("calm",), brand_terms=(), key_messages=())
        vocabulary = analyze_vocabulary("text", config)
        messaging = analyze_messaging("text", config)
        assert consistency_score(FALLBACK_TONE, vocabulary, messaging, config) == 30


class TestTonePrompt:
    def test_mentions_target_tone_and_truncates(self):
        prompt = tone_prompt("z" * 3000, DEFAULT_BRAND_VOICE)
        assert "z" * 1500 + "..." in prompt
        assert "z" * 1501 not in prompt
        assert "professional, helpful, approachable" in prompt


class TestBrandVoiceAnalyzer:
    def test_uses_classifier_answer(self, make_generator, small_brand):
        answer = json.dumps(
            {
                "detected_tone": ["friendly", "upbeat"],
                "formality_level": "informal",
                "voice_characteristics": ["conversational"],
                "tone_alignment_score": 90,
            }
        )
        analyzer = BrandVoiceAnalyzer(make_generator([answer]), small_brand)

        report = asyncio.run(analyzer.analyze("Acme rocket skates: fast delivery, trusted quality."))

        assert report.tone_analysis.detected_tone == ["friendly", "upbeat"]
        assert report.tone_analysis.target_tone == ["friendly"]
        assert report.style_analysis.formality_level == Formality.INFORMAL
        assert report.vocabulary_analysis.brand_terms_missing == []
        # 90*0.4 + 100*0.3 + 100*0.3 = 96
        assert report.consistency_score == 96
        assert report.suggestions == []

    def test_malformed_answer_uses_fallback_tone(self, make_generator):
        analyzer = BrandVoiceAnalyzer(make_generator(["I think the tone is nice."]))
        report = asyncio.run(analyzer.analyze("Plain words."))

        assert report.tone_analysis.detected_tone == ["professional"]
        assert report.tone_analysis.alignment_score == 75
        assert report.style_analysis.formality_level == Formality.NEUTRAL
        assert report.style_analysis.voice_characteristics == ["informative"]

    def test_partial_answer_keeps_fallback_fields(self, make_generator):
        analyzer = BrandVoiceAnalyzer(make_generator(['{"tone_alignment_score": 40}']))
        report = asyncio.run(analyzer.analyze("Plain words."))

        assert report.tone_analysis.alignment_score == 40
        assert report.tone_analysis.detected_tone == ["professional"]
        assert "Adjust tone to be more professional, helpful, approachable" in report.suggestions

    def test_service_failure_uses_fallback_tone(self, make_generator):
        analyzer = BrandVoiceAnalyzer(make_generator([ExternalServiceError("timeout")]))
        report = asyncio.run(analyzer.analyze("Plain words."))
        assert report.tone_analysis.alignment_score == 75
        assert 0 <= report.consistency_score <= 100

    def test_default_brand_suggestions(self, make_generator):
        analyzer = BrandVoiceAnalyzer(make_generator([ExternalServiceError("down")]))
        report = asyncio.run(analyzer.analyze("Nothing on brand here."))

        assert report.vocabulary_analysis.brand_terms_used == []
        assert (
            "Consider including brand terms: Swift Solution, e-learning, content automation"
            in report.suggestions
        )
        assert (
            "Incorporate key messages: Innovative learning solutions, Streamlined content creation"
            in report.suggestions
        )
        assert "Strengthen value proposition clarity in the content" in report.suggestions

    def test_high_jargon_suggestion(self, make_generator):
        content = "API SDK framework implementation optimization scalability"
        analyzer = BrandVoiceAnalyzer(make_generator([ExternalServiceError("down")]))
        report = asyncio.run(analyzer.analyze(content))
        assert report.vocabulary_analysis.jargon_level == JargonLevel.HIGH
        assert "Reduce technical jargon to improve accessibility" in report.suggestions
