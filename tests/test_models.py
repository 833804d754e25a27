"""Tests for Pydantic domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from contentlab.errors import ExperimentNotFoundError, ExperimentValidationError, FieldError
from contentlab.models.brand_voice import DEFAULT_BRAND_VOICE, BrandVoiceConfig
from contentlab.models.experiment import (
    STATUS_TRANSITIONS,
    ContentType,
    Experiment,
    ExperimentFilters,
    ExperimentStatus,
    ExperimentVerdict,
    TestType,
    Variant,
    VariantResult,
)
from contentlab.models.seo import LengthRange


def _experiment(**overrides) -> Experiment:
    fields = {
        "id": "exp1",
        "name": "Subject line test",
        "description": "Newsletter subject",
        "content_type": ContentType.NEWSLETTER,
        "test_type": TestType.TITLE,
        "variants": [
            Variant(id="control", name="Control (Original)", content="A", type=TestType.TITLE),
            Variant(id="variant_1", name="Variant 1", content="B", type=TestType.TITLE),
        ],
    }
    fields.update(overrides)
    return Experiment(**fields)


class TestExperiment:
    def test_defaults(self):
        exp = _experiment()
        assert exp.status == ExperimentStatus.DRAFT
        assert exp.results == []
        assert exp.winner_variant_id is None
        assert exp.confidence_level == 0
        assert exp.created_at.tzinfo is not None

    def test_frozen(self):
        exp = _experiment()
        with pytest.raises(ValidationError):
            exp.name = "Changed"

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            _experiment(confidence_level=101)
        with pytest.raises(ValidationError):
            _experiment(confidence_level=-1)

    def test_serialization_roundtrip(self):
        exp = _experiment(results=[VariantResult.from_counts("control", 100, 10, 2)])
        restored = Experiment.model_validate_json(exp.model_dump_json())
        assert restored == exp

    def test_helpers(self):
        exp = _experiment(results=[VariantResult(variant_id="variant_1", impressions=5)])
        assert exp.variant_ids() == {"control", "variant_1"}
        assert exp.result_for("variant_1").impressions == 5
        assert exp.result_for("control") is None
        assert exp.variants[0].is_control
        assert not exp.variants[1].is_control

    def test_completed_is_terminal(self):
        assert STATUS_TRANSITIONS[ExperimentStatus.COMPLETED] == frozenset()
        assert ExperimentStatus.RUNNING in STATUS_TRANSITIONS[ExperimentStatus.PAUSED]


class TestVariantResult:
    def test_from_counts(self):
        result = VariantResult.from_counts("control", impressions=1000, clicks=50, conversions=5)
        assert result.ctr == 5.0
        assert result.conversion_rate == 10.0
        assert result.engagement_score == 5.0

    def test_from_counts_zero_traffic(self):
        result = VariantResult.from_counts("control", 0, 0, 0)
        assert result.ctr == 0.0
        assert result.conversion_rate == 0.0

    def test_explicit_engagement(self):
        result = VariantResult.from_counts("control", 100, 1, 0, engagement_score=42.0)
        assert result.engagement_score == 42.0

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            VariantResult(variant_id="control", impressions=-5)


class TestFilters:
    def test_empty_filter_matches_everything(self):
        assert ExperimentFilters().matches(_experiment())

    def test_each_field_must_match(self):
        exp = _experiment(platform="email")
        assert ExperimentFilters(content_type="newsletter", platform="email").matches(exp)
        assert not ExperimentFilters(status="running").matches(exp)
        assert not ExperimentFilters(platform="web").matches(exp)


class TestVerdict:
    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            ExperimentVerdict(confidence=120)


class TestBrandVoiceConfig:
    def test_default_brand(self):
        assert DEFAULT_BRAND_VOICE.target_tone == ("professional", "helpful", "approachable")
        assert "e-learning" in DEFAULT_BRAND_VOICE.brand_terms
        assert len(DEFAULT_BRAND_VOICE.key_messages) == 4
        assert "API" in DEFAULT_BRAND_VOICE.technical_terms

    def test_custom_brand_accepts_lists(self):
        config = BrandVoiceConfig(target_tone=["bold"], brand_terms=["X"], key_messages=[])
        assert config.target_tone == ("bold",)


class TestLengthRange:
    def test_inclusive_bounds(self):
        span = LengthRange(min=1, max=3)
        assert span.contains(1)
        assert span.contains(3)
        assert not span.contains(3.1)


class TestErrors:
    def test_validation_error_collects_messages(self):
        err = ExperimentValidationError(
            [FieldError("name", "too short"), FieldError("test_type", "invalid")]
        )
        assert str(err) == "too short; invalid"
        assert err.fields == ["name", "test_type"]

    def test_not_found_message(self):
        err = ExperimentNotFoundError("abc")
        assert str(err) == "A/B test not found: abc"
        assert err.experiment_id == "abc"
