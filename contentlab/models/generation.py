"""Text-generation payloads exchanged with the LLM port."""

from __future__ import annotations

from enum import StrEnum

from contentlab.models.base import FrozenModel


class ContentCategory(StrEnum):
    BLOG = "blog"
    SOCIAL = "social"
    NEWSLETTER = "newsletter"


class GeneratedText(FrozenModel):
    content: str
