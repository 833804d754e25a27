"""Variant generation for A/B tests: the control plus LLM-written alternatives."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from contentlab.errors import ExternalServiceError
from contentlab.models.experiment import CONTROL_VARIANT_ID, TestType, Variant
from contentlab.models.generation import ContentCategory

if TYPE_CHECKING:
    from contentlab.protocols import TextGeneratorPort

logger = structlog.get_logger()

FULL_CONTENT_PROMPT_CHARS = 500

# Per test type: what to ask for, and the two styles alternated by variant index.
_PROMPT_SUBJECTS: dict[TestType, str] = {
    TestType.TITLE: "an alternative title",
    TestType.DESCRIPTION: "an alternative description",
    TestType.CTA: "an alternative call-to-action",
    TestType.FULL_CONTENT: "an alternative version of this content",
}
_STYLES: dict[TestType, tuple[str, str]] = {
    TestType.TITLE: ("more compelling", "more specific"),
    TestType.DESCRIPTION: ("more benefit-focused", "more action-oriented"),
    TestType.CTA: ("more urgent", "more value-focused"),
    TestType.FULL_CONTENT: ("more conversational", "more authoritative"),
}


def variant_style(test_type: TestType, index: int) -> str:
    """Odd-numbered variants take the first style, even-numbered the second."""
    odd, even = _STYLES[test_type]
    return odd if index % 2 == 1 else even


def variant_prompt(original: str, test_type: TestType, index: int) -> str:
    if test_type == TestType.FULL_CONTENT:
        quoted = f"{original[:FULL_CONTENT_PROMPT_CHARS]}..."
    else:
        quoted = original
    return (
        f"Create {_PROMPT_SUBJECTS[test_type]} for A/B testing. "
        f'Original: "{quoted}". '
        f"Make it {variant_style(test_type, index)}. "
        "Reply with the new text only."
    )


def _clean_generation(text: str) -> str:
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1].strip()
    return cleaned


class VariantGenerator:
    """Builds the variant list for a new experiment.

    Generation is all-or-nothing: the first failed call raises and no variants
    are returned.
    """

    def __init__(
        self,
        generator: TextGeneratorPort,
        content_category: ContentCategory = ContentCategory.BLOG,
    ) -> None:
        self.generator = generator
        self.content_category = content_category

    async def create_variants(
        self,
        original_content: str,
        test_type: TestType | str,
        variant_count: int,
    ) -> list[Variant]:
        test_type = TestType(test_type)
        logger.info("Creating variants", test_type=test_type.value, variant_count=variant_count)

        variants = [
            Variant(
                id=CONTROL_VARIANT_ID,
                name="Control (Original)",
                content=original_content,
                type=test_type,
            )
        ]
        for index in range(1, variant_count + 1):
            prompt = variant_prompt(original_content, test_type, index)
            response = await self.generator.generate_text(prompt, self.content_category)
            content = _clean_generation(response.content)
            if not content:
                raise ExternalServiceError(f"Empty generation for variant {index}")
            variants.append(
                Variant(
                    id=f"variant_{index}",
                    name=f"Variant {index}",
                    content=content,
                    type=test_type,
                )
            )
        return variants
