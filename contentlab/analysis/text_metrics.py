"""Deterministic text metrics shared by the SEO and readability analyzers.

All functions are pure and never raise for string input. Counting rules are
heuristics; every stored score depends on them, so changes here shift
historical results:

* syllables are approximated as runs of ``[aeiouy]`` per word (minimum one),
* a "word" is any whitespace-delimited token containing an ASCII letter,
* sentences end at any run of ``.``, ``!`` or ``?``.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_END_RE = re.compile(r"[.!?]+")
_LETTER_RE = re.compile(r"[a-zA-Z]")
_VOWEL_RUN_RE = re.compile(r"[aeiouy]+")
_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")

_HEADING_TAG_RE = re.compile(r"<h[1-6][^>]*>", re.IGNORECASE)
_HEADING_BLOCK_RE = re.compile(r"<h[1-6][^>]*>.*?</h[1-6]>", re.IGNORECASE)
_INTERNAL_LINK_RE = re.compile(r'href="/[^"]*"')
_EXTERNAL_LINK_RE = re.compile(r'href="https?://[^"]*"')
_BULLET_RE = re.compile(r"^\s*[-*•]", re.MULTILINE)
_LIST_TAG_RE = re.compile(r"<[uo]l>", re.IGNORECASE)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (0.95 -> 1.0 at one digit, 20.5 -> 21, -2.5 -> -2).

    Every score and rate in the reports is rounded through here.
    """
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def clean_for_analysis(html: str) -> str:
    """Strip tags and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


def sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_END_RE.split(text) if s.strip()]


def words(text: str) -> list[str]:
    return [w for w in text.lower().split() if _LETTER_RE.search(w)]


def syllable_count(text: str) -> int:
    return sum(max(1, len(_VOWEL_RUN_RE.findall(w))) for w in words(text))


def paragraph_count(text: str) -> int:
    return sum(1 for p in _PARAGRAPH_BREAK_RE.split(text) if p.strip())


def flesch_score(sentence_count: int, word_count: int, syllables: int) -> float:
    """Flesch Reading Ease. Zero when there are no sentences or no words."""
    if sentence_count == 0 or word_count == 0:
        return 0.0
    avg_sentence_length = word_count / sentence_count
    avg_syllables_per_word = syllables / word_count
    return 206.835 - (1.015 * avg_sentence_length) - (84.6 * avg_syllables_per_word)


def keyword_occurrences(content: str, keyword: str) -> int:
    """Case-insensitive literal occurrences of *keyword* in *content*."""
    if not keyword:
        return 0
    return len(re.findall(re.escape(keyword), content, re.IGNORECASE))


def keyword_density(content: str, keywords: Iterable[str]) -> float:
    """Keyword occurrences per 100 words, rounded to one decimal.

    Occurrences are counted in the raw content (markup included); words are
    counted in the cleaned text.
    """
    keywords = list(keywords)
    if not keywords:
        return 0.0
    word_count = len(words(clean_for_analysis(content)))
    if word_count == 0:
        return 0.0
    hits = sum(keyword_occurrences(content, k) for k in keywords)
    return round_half_up(hits / word_count * 100, 1)


def contains_any(text: str, terms: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(t.lower() in lowered for t in terms)


# --- Markup structure ---


def heading_count(html: str) -> int:
    return len(_HEADING_TAG_RE.findall(html))


def heading_blocks(html: str) -> list[str]:
    """Complete single-line ``<hN>...</hN>`` elements."""
    return _HEADING_BLOCK_RE.findall(html)


def internal_link_count(html: str) -> int:
    return len(_INTERNAL_LINK_RE.findall(html))


def external_link_count(html: str) -> int:
    return len(_EXTERNAL_LINK_RE.findall(html))


def bullet_point_count(text: str) -> int:
    return len(_BULLET_RE.findall(text))


def list_count(html: str) -> int:
    return len(_LIST_TAG_RE.findall(html))


def reading_time(word_count: int, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    return f"{math.ceil(word_count / words_per_minute)} min read"
