"""Parse-or-default handling for JSON answers from the text generator.

The two analysis call sites (keyword extraction, tone classification) ask the
LLM for a JSON object and must still produce a report when the answer is
missing or malformed. Both go through ``ask_json``.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from contentlab.errors import ExternalServiceError, ResponseParseError
from contentlab.metrics import llm_fallbacks_total

if TYPE_CHECKING:
    from contentlab.protocols import TextGeneratorPort

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def parse_json_object(raw: str, model: type[M], default: M) -> M:
    """Parse *raw* as a JSON object into *model*.

    Keys absent from the object (or explicitly null) take their value from
    *default*. Raises ResponseParseError when *raw* is not a JSON object or
    a present value has the wrong type.
    """
    text = raw.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"Response is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")

    merged = default.model_dump()
    merged.update({k: v for k, v in data.items() if k in model.model_fields and v is not None})
    try:
        return model.model_validate(merged)
    except ValidationError as exc:
        raise ResponseParseError(f"Response has unexpected shape: {exc.error_count()} errors") from exc


async def ask_json(
    generator: TextGeneratorPort,
    prompt: str,
    model: type[M],
    default: M,
    *,
    site: str,
    content_category: str = "blog",
) -> M:
    """Ask the generator for JSON and parse it, or return *default*.

    Never raises; every failure is logged and counted under *site*.
    """
    try:
        response = await generator.generate_text(prompt, content_category)
        return parse_json_object(response.content, model, default)
    except ExternalServiceError as exc:
        llm_fallbacks_total.labels(site=site).inc()
        logger.warning(
            "Using fallback for LLM answer",
            site=site,
            reason=type(exc).__name__,
            error=str(exc),
        )
        return default
    except Exception:
        llm_fallbacks_total.labels(site=site).inc()
        logger.exception("Unexpected error from text generator", site=site)
        return default
