"""Content analyzers: SEO, readability and brand voice."""

from contentlab.analysis.brand_voice import FALLBACK_TONE, BrandVoiceAnalyzer
from contentlab.analysis.parsing import ask_json, parse_json_object
from contentlab.analysis.readability import analyze_readability
from contentlab.analysis.seo import SEOAnalyzer, fallback_keywords

__all__ = [
    "FALLBACK_TONE",
    "BrandVoiceAnalyzer",
    "SEOAnalyzer",
    "analyze_readability",
    "ask_json",
    "fallback_keywords",
    "parse_json_object",
]
