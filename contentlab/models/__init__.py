"""Re-exports all Pydantic models."""

from contentlab.models.base import FrozenModel, utcnow
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
from contentlab.models.experiment import (
    CONTROL_VARIANT_ID,
    ContentType,
    Experiment,
    ExperimentFilters,
    ExperimentRequest,
    ExperimentStatus,
    ExperimentVerdict,
    TestType,
    Variant,
    VariantResult,
)
from contentlab.models.generation import ContentCategory, GeneratedText
from contentlab.models.readability import (
    ReadabilityReport,
    SentenceStats,
    StructureStats,
    WordStats,
)
from contentlab.models.seo import (
    ContentAnalysis,
    KeywordSet,
    LengthRange,
    MetaDescriptionAnalysis,
    Rating,
    SEOReport,
    TitleAnalysis,
)

__all__ = [
    "CONTROL_VARIANT_ID",
    "DEFAULT_BRAND_VOICE",
    "BrandVoiceConfig",
    "BrandVoiceReport",
    "ContentAnalysis",
    "ContentCategory",
    "ContentType",
    "Experiment",
    "ExperimentFilters",
    "ExperimentRequest",
    "ExperimentStatus",
    "ExperimentVerdict",
    "Formality",
    "FrozenModel",
    "GeneratedText",
    "JargonLevel",
    "KeywordSet",
    "LengthRange",
    "MessagingAlignment",
    "MetaDescriptionAnalysis",
    "Rating",
    "ReadabilityReport",
    "SEOReport",
    "SentenceStats",
    "StructureStats",
    "StyleAnalysis",
    "TestType",
    "TitleAnalysis",
    "ToneAnalysis",
    "ToneClassification",
    "Variant",
    "VariantResult",
    "VocabularyAnalysis",
    "WordStats",
    "utcnow",
]
