"""SEO analysis report models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from contentlab.models.base import FrozenModel


class Rating(StrEnum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class LengthRange(FrozenModel):
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class TitleAnalysis(FrozenModel):
    length: int
    optimal_length: LengthRange
    has_keywords: bool
    rating: Rating
    suggestions: list[str] = Field(default_factory=list)


class MetaDescriptionAnalysis(FrozenModel):
    length: int
    optimal_length: LengthRange
    has_keywords: bool
    suggestions: list[str] = Field(default_factory=list)


class ContentAnalysis(FrozenModel):
    word_count: int
    keyword_density: float
    optimal_density: LengthRange
    headings_structure: Rating
    internal_links: int
    external_links: int
    suggestions: list[str] = Field(default_factory=list)


class KeywordSet(FrozenModel):
    """Keywords found in (or missing from) the content, as judged by the LLM."""

    primary: list[str] = Field(default_factory=list)
    secondary: list[str] = Field(default_factory=list)
    missing_opportunities: list[str] = Field(default_factory=list)


class SEOReport(FrozenModel):
    score: int = Field(ge=0, le=100)
    title_analysis: TitleAnalysis
    meta_analysis: MetaDescriptionAnalysis
    content_analysis: ContentAnalysis
    keywords: KeywordSet
    suggestions: list[str] = Field(default_factory=list)
