"""Readability report models."""

from __future__ import annotations

from pydantic import Field

from contentlab.models.base import FrozenModel
from contentlab.models.seo import LengthRange


class SentenceStats(FrozenModel):
    avg_sentence_length: int
    long_sentences: int
    optimal_range: LengthRange


class WordStats(FrozenModel):
    avg_word_length: float
    complex_words: int
    passive_voice_percentage: int


class StructureStats(FrozenModel):
    paragraphs: int
    avg_paragraph_length: int
    headings: int
    bullet_points: int
    lists: int


class ReadabilityReport(FrozenModel):
    score: int = Field(ge=0, le=100, description="Flesch Reading Ease, clamped to 0-100")
    grade_level: str
    reading_time: str
    sentence_stats: SentenceStats
    word_stats: WordStats
    structure_stats: StructureStats
    suggestions: list[str] = Field(default_factory=list)
