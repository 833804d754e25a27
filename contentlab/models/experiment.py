"""A/B experiment model: variants under test, their results, and lifecycle state."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from contentlab.models.base import FrozenModel, utcnow

CONTROL_VARIANT_ID = "control"

MIN_VARIANT_COUNT = 2
MAX_VARIANT_COUNT = 10


class ExperimentStatus(StrEnum):
    DRAFT = "draft"
    RUNNING = "running"
    COMPLETED = "completed"
    PAUSED = "paused"


# Allowed status moves; completed is terminal.
STATUS_TRANSITIONS: dict[ExperimentStatus, frozenset[ExperimentStatus]] = {
    ExperimentStatus.DRAFT: frozenset({ExperimentStatus.RUNNING}),
    ExperimentStatus.RUNNING: frozenset({ExperimentStatus.COMPLETED, ExperimentStatus.PAUSED}),
    ExperimentStatus.PAUSED: frozenset({ExperimentStatus.RUNNING}),
    ExperimentStatus.COMPLETED: frozenset(),
}


class ContentType(StrEnum):
    BLOG = "blog"
    SOCIAL = "social"
    NEWSLETTER = "newsletter"


class TestType(StrEnum):
    __test__ = False

    TITLE = "title"
    DESCRIPTION = "description"
    CTA = "cta"
    FULL_CONTENT = "full_content"


class Variant(FrozenModel):
    """One candidate rendering of the content under test."""

    id: str
    name: str
    content: str
    type: TestType
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_control(self) -> bool:
        return self.id == CONTROL_VARIANT_ID


class VariantResult(FrozenModel):
    """Traffic accumulated by one variant. Rates are percentages."""

    variant_id: str
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    ctr: float = Field(default=0.0, ge=0)
    conversion_rate: float = Field(default=0.0, ge=0)
    engagement_score: float = 0.0
    statistical_significance: float = Field(default=0.0, ge=0, le=100)

    @classmethod
    def from_counts(
        cls,
        variant_id: str,
        impressions: int,
        clicks: int,
        conversions: int,
        engagement_score: float | None = None,
    ) -> VariantResult:
        """Build a result with CTR and conversion rate derived from raw counts.

        Conversion rate is measured against clicks. When no engagement score is
        supplied the CTR stands in for it. Rates are kept unrounded so the
        confidence heuristic sees the exact values.
        """
        ctr = clicks * 100 / impressions if impressions else 0.0
        conversion_rate = conversions * 100 / clicks if clicks else 0.0
        return cls(
            variant_id=variant_id,
            impressions=impressions,
            clicks=clicks,
            conversions=conversions,
            ctr=ctr,
            conversion_rate=conversion_rate,
            engagement_score=ctr if engagement_score is None else engagement_score,
        )


class Experiment(FrozenModel):
    """Represents one A/B test of a piece of content."""

    id: str
    name: str
    description: str
    content_type: ContentType
    platform: str | None = None
    test_type: TestType
    status: ExperimentStatus = ExperimentStatus.DRAFT
    variants: list[Variant]
    results: list[VariantResult] = Field(default_factory=list)
    winner_variant_id: str | None = None
    confidence_level: float = Field(default=0.0, ge=0, le=100)

    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None

    def variant_ids(self) -> set[str]:
        return {v.id for v in self.variants}

    def result_for(self, variant_id: str) -> VariantResult | None:
        return next((r for r in self.results if r.variant_id == variant_id), None)


class ExperimentRequest(FrozenModel):
    """Caller input for creating an experiment.

    Fields are loosely typed on purpose: the store validates them and reports
    every violation together.
    """

    name: str = ""
    description: str = ""
    content_type: str = ""
    platform: str | None = None
    test_type: str = ""
    original_content: str = ""
    variant_count: int = MIN_VARIANT_COUNT


class ExperimentFilters(FrozenModel):
    """Listing filters; a field left as None matches every experiment."""

    status: ExperimentStatus | None = None
    content_type: ContentType | None = None
    platform: str | None = None

    def matches(self, experiment: Experiment) -> bool:
        if self.status is not None and experiment.status != self.status:
            return False
        if self.content_type is not None and experiment.content_type != self.content_type:
            return False
        return self.platform is None or experiment.platform == self.platform


class ExperimentVerdict(FrozenModel):
    """Advisory outcome of analyzing an experiment's results."""

    winner: str | None = None
    confidence: float = Field(default=0.0, ge=0, le=100)
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
