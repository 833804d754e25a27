"""SEO analysis: title, meta description, body heuristics and LLM keyword extraction."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from contentlab.analysis import text_metrics as tm
from contentlab.analysis.parsing import ask_json
from contentlab.metrics import analysis_duration_seconds
from contentlab.models.generation import ContentCategory
from contentlab.models.seo import (
    ContentAnalysis,
    KeywordSet,
    LengthRange,
    MetaDescriptionAnalysis,
    Rating,
    SEOReport,
    TitleAnalysis,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contentlab.protocols import TextGeneratorPort

logger = structlog.get_logger()

TITLE_LENGTH = LengthRange(min=30, max=60)
META_DESCRIPTION_LENGTH = LengthRange(min=120, max=160)
KEYWORD_DENSITY = LengthRange(min=1, max=3)
MIN_WORD_COUNT = 300
KEYWORD_PROMPT_CHARS = 1000

# Score weights
_TITLE_GOOD = 30
_TITLE_FAIR = 20
_META_WITH_KEYWORDS = 20
_META_PRESENT = 10
_WORD_COUNT = 15
_DENSITY = 15
_HEADINGS = 10
_INTERNAL_LINKS = 5
_EXTERNAL_LINKS = 5


def fallback_keywords(target_keywords: Sequence[str]) -> KeywordSet:
    """Keywords used when the LLM answer is unusable."""
    return KeywordSet(
        primary=list(target_keywords[:3]),
        secondary=list(target_keywords[3:]),
        missing_opportunities=[],
    )


def analyze_title(title: str, keywords: Sequence[str]) -> TitleAnalysis:
    length = len(title)
    has_keywords = tm.contains_any(title, keywords)
    suggestions: list[str] = []

    if length < TITLE_LENGTH.min:
        suggestions.append("Title is too short. Consider adding more descriptive words.")
    elif length > TITLE_LENGTH.max:
        suggestions.append(
            "Title is too long. Consider shortening for better display in search results."
        )
    if not has_keywords and keywords:
        suggestions.append(f"Include target keywords: {', '.join(keywords)}")

    rating = Rating.GOOD if length <= TITLE_LENGTH.max and has_keywords else Rating.FAIR
    return TitleAnalysis(
        length=length,
        optimal_length=TITLE_LENGTH,
        has_keywords=has_keywords,
        rating=rating,
        suggestions=suggestions,
    )


def analyze_meta_description(description: str, keywords: Sequence[str]) -> MetaDescriptionAnalysis:
    length = len(description)
    has_keywords = tm.contains_any(description, keywords)
    suggestions: list[str] = []

    if length == 0:
        suggestions.append("Add a meta description to improve search result appearance.")
    elif length < META_DESCRIPTION_LENGTH.min:
        suggestions.append("Meta description is too short. Add more compelling details.")
    elif length > META_DESCRIPTION_LENGTH.max:
        suggestions.append("Meta description is too long. It may be truncated in search results.")
    if not has_keywords and keywords:
        suggestions.append(f"Include target keywords in meta description: {', '.join(keywords)}")

    return MetaDescriptionAnalysis(
        length=length,
        optimal_length=META_DESCRIPTION_LENGTH,
        has_keywords=has_keywords,
        suggestions=suggestions,
    )


def analyze_content(content: str, keywords: Sequence[str]) -> ContentAnalysis:
    word_count = len(tm.words(tm.clean_for_analysis(content)))
    density = tm.keyword_density(content, keywords)
    headings = tm.heading_blocks(content)
    internal_links = tm.internal_link_count(content)
    external_links = tm.external_link_count(content)
    suggestions: list[str] = []

    if word_count < MIN_WORD_COUNT:
        suggestions.append(
            f"Content is too short. Aim for at least {MIN_WORD_COUNT} words for better SEO."
        )
    if density < KEYWORD_DENSITY.min:
        suggestions.append("Keyword density is too low. Include target keywords more naturally.")
    elif density > KEYWORD_DENSITY.max:
        suggestions.append(
            "Keyword density is too high. Reduce keyword usage to avoid over-optimization."
        )
    if not headings:
        suggestions.append("Add headings (H1, H2, H3) to improve content structure.")
    if internal_links == 0:
        suggestions.append("Add internal links to related content.")
    if external_links == 0:
        suggestions.append("Add external links to authoritative sources.")

    return ContentAnalysis(
        word_count=word_count,
        keyword_density=density,
        optimal_density=KEYWORD_DENSITY,
        headings_structure=Rating.GOOD if headings else Rating.POOR,
        internal_links=internal_links,
        external_links=external_links,
        suggestions=suggestions,
    )


def seo_score(
    title: TitleAnalysis, meta: MetaDescriptionAnalysis, content: ContentAnalysis
) -> int:
    """Weighted 0-100 score; see the weight constants above."""
    score = 0
    if title.rating == Rating.GOOD:
        score += _TITLE_GOOD
    elif title.rating == Rating.FAIR:
        score += _TITLE_FAIR

    if meta.length > 0 and meta.has_keywords:
        score += _META_WITH_KEYWORDS
    elif meta.length > 0:
        score += _META_PRESENT

    if content.word_count >= MIN_WORD_COUNT:
        score += _WORD_COUNT
    if KEYWORD_DENSITY.contains(content.keyword_density):
        score += _DENSITY
    if content.headings_structure == Rating.GOOD:
        score += _HEADINGS
    if content.internal_links > 0:
        score += _INTERNAL_LINKS
    if content.external_links > 0:
        score += _EXTERNAL_LINKS

    return min(100, score)


def keyword_prompt(content: str, target_keywords: Sequence[str]) -> str:
    return (
        "Analyze this content and extract relevant keywords:\n\n"
        f"Content: {content[:KEYWORD_PROMPT_CHARS]}...\n\n"
        f"Target keywords: {', '.join(target_keywords)}\n\n"
        "Return a JSON object with:\n"
        "- primary: array of 3-5 most important keywords found\n"
        "- secondary: array of 5-10 supporting keywords\n"
        "- missing_opportunities: array of relevant keywords not found but should be included"
    )


class SEOAnalyzer:
    """Scores content for search optimization.

    Only keyword extraction talks to the text generator; everything else is
    local. A failed or malformed extraction falls back to the target keywords.
    """

    def __init__(self, generator: TextGeneratorPort) -> None:
        self.generator = generator

    async def extract_keywords(self, content: str, target_keywords: Sequence[str]) -> KeywordSet:
        return await ask_json(
            self.generator,
            keyword_prompt(content, target_keywords),
            KeywordSet,
            fallback_keywords(target_keywords),
            site="keyword_extraction",
            content_category=ContentCategory.BLOG,
        )

    async def analyze(
        self,
        content: str,
        title: str | None = None,
        meta_description: str | None = None,
        target_keywords: Sequence[str] = (),
    ) -> SEOReport:
        started = time.perf_counter()
        keywords = list(target_keywords)

        title_analysis = analyze_title(title or "", keywords)
        meta_analysis = analyze_meta_description(meta_description or "", keywords)
        content_analysis = analyze_content(content, keywords)
        extracted = await self.extract_keywords(content, keywords)

        suggestions = [
            *title_analysis.suggestions,
            *meta_analysis.suggestions,
            *content_analysis.suggestions,
        ]
        if extracted.missing_opportunities:
            suggestions.append(
                "Consider including these relevant keywords: "
                + ", ".join(extracted.missing_opportunities)
            )

        report = SEOReport(
            score=seo_score(title_analysis, meta_analysis, content_analysis),
            title_analysis=title_analysis,
            meta_analysis=meta_analysis,
            content_analysis=content_analysis,
            keywords=extracted,
            suggestions=suggestions,
        )
        analysis_duration_seconds.labels(analyzer="seo").observe(time.perf_counter() - started)
        logger.info(
            "SEO analysis complete",
            score=report.score,
            word_count=content_analysis.word_count,
            keyword_density=content_analysis.keyword_density,
        )
        return report
