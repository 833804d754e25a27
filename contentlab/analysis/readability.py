"""Readability report built from local text metrics (no external calls)."""

from __future__ import annotations

import time

import structlog

from contentlab.analysis import text_metrics as tm
from contentlab.metrics import analysis_duration_seconds
from contentlab.models.readability import (
    ReadabilityReport,
    SentenceStats,
    StructureStats,
    WordStats,
)
from contentlab.models.seo import LengthRange

logger = structlog.get_logger()

OPTIMAL_SENTENCE_LENGTH = LengthRange(min=15, max=20)
LONG_SENTENCE_WORDS = 20
COMPLEX_WORD_CHARS = 6
MAX_PARAGRAPH_WORDS = 100
MAX_PASSIVE_PERCENTAGE = 10
MIN_EASY_FLESCH = 60

# Auxiliary verbs counted as a stand-in for passive voice. This over-counts
# ("is" in "it is red") and is not grammatical passive detection.
PASSIVE_AUXILIARIES = frozenset({"was", "were", "been", "being", "is", "are", "am"})

# (minimum Flesch score, grade label), checked top to bottom.
GRADE_BANDS: tuple[tuple[float, str], ...] = (
    (90, "5th grade"),
    (80, "6th grade"),
    (70, "7th grade"),
    (60, "8th-9th grade"),
    (50, "10th-12th grade"),
    (30, "College level"),
)
LOWEST_GRADE = "Graduate level"


def grade_level(flesch: float) -> str:
    for threshold, label in GRADE_BANDS:
        if flesch >= threshold:
            return label
    return LOWEST_GRADE


def sentence_stats(sentence_list: list[str]) -> SentenceStats:
    lengths = [len(s.split()) for s in sentence_list]
    avg = sum(lengths) / len(lengths) if lengths else 0.0
    return SentenceStats(
        avg_sentence_length=int(tm.round_half_up(avg)),
        long_sentences=sum(1 for n in lengths if n > LONG_SENTENCE_WORDS),
        optimal_range=OPTIMAL_SENTENCE_LENGTH,
    )


def word_stats(word_list: list[str]) -> WordStats:
    if not word_list:
        return WordStats(avg_word_length=0.0, complex_words=0, passive_voice_percentage=0)
    passive = sum(1 for w in word_list if w in PASSIVE_AUXILIARIES)
    return WordStats(
        avg_word_length=tm.round_half_up(sum(len(w) for w in word_list) / len(word_list), 1),
        complex_words=sum(1 for w in word_list if len(w) > COMPLEX_WORD_CHARS),
        passive_voice_percentage=int(tm.round_half_up(passive / len(word_list) * 100)),
    )


def structure_stats(content: str) -> StructureStats:
    paragraphs = tm.paragraph_count(content)
    word_count = len(tm.words(tm.clean_for_analysis(content)))
    return StructureStats(
        paragraphs=paragraphs,
        avg_paragraph_length=int(tm.round_half_up(word_count / paragraphs)) if paragraphs else 0,
        headings=tm.heading_count(content),
        bullet_points=tm.bullet_point_count(content),
        lists=tm.list_count(content),
    )


def readability_suggestions(
    flesch: float,
    sentences_: SentenceStats,
    words_: WordStats,
    structure: StructureStats,
) -> list[str]:
    suggestions: list[str] = []
    if flesch < MIN_EASY_FLESCH:
        suggestions.append("Content is difficult to read. Use shorter sentences and simpler words.")
    if sentences_.avg_sentence_length > LONG_SENTENCE_WORDS:
        suggestions.append("Average sentence length is too long. Break up complex sentences.")
    if sentences_.long_sentences > 0:
        suggestions.append(
            f"{sentences_.long_sentences} sentences are too long "
            f"(>{LONG_SENTENCE_WORDS} words). Consider splitting them."
        )
    if words_.passive_voice_percentage > MAX_PASSIVE_PERCENTAGE:
        suggestions.append("Reduce passive voice usage. Use active voice for clearer communication.")
    if structure.avg_paragraph_length > MAX_PARAGRAPH_WORDS:
        suggestions.append(
            "Paragraphs are too long. Break them into smaller chunks for better readability."
        )
    if structure.headings == 0:
        suggestions.append("Add headings to break up content and improve scannability.")
    if structure.bullet_points == 0 and structure.lists == 0:
        suggestions.append("Consider using bullet points or lists to present information clearly.")
    return suggestions


def analyze_readability(content: str) -> ReadabilityReport:
    """Build a readability report for *content* (HTML allowed)."""
    started = time.perf_counter()
    clean = tm.clean_for_analysis(content)
    sentence_list = tm.sentences(clean)
    word_list = tm.words(clean)
    flesch = tm.flesch_score(len(sentence_list), len(word_list), tm.syllable_count(clean))

    sentences_ = sentence_stats(sentence_list)
    words_ = word_stats(word_list)
    structure = structure_stats(content)

    report = ReadabilityReport(
        score=min(100, max(0, int(tm.round_half_up(flesch)))),
        grade_level=grade_level(flesch),
        reading_time=tm.reading_time(len(word_list)),
        sentence_stats=sentences_,
        word_stats=words_,
        structure_stats=structure,
        suggestions=readability_suggestions(flesch, sentences_, words_, structure),
    )
    analysis_duration_seconds.labels(analyzer="readability").observe(time.perf_counter() - started)
    logger.debug("Readability analysis complete", flesch=round(flesch, 1), words=len(word_list))
    return report
