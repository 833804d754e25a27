"""LLM client wrapper using PydanticAI + Anthropic.

Uses streaming so long generations keep the connection busy instead of
tripping network idle timeouts. Every call is bounded by a timeout, retried
with backoff, and guarded by a circuit breaker; whatever still fails surfaces
as ExternalServiceError.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from pydantic_ai.models.anthropic import AnthropicModelSettings

from contentlab.config import Settings
from contentlab.errors import ExternalServiceError
from contentlab.metrics import llm_requests_total, llm_tokens_total
from contentlab.models.generation import ContentCategory, GeneratedText
from contentlab.retry import CircuitBreaker, CircuitOpenError, RetryExhaustedError, async_with_retry

if TYPE_CHECKING:
    from pydantic_ai import Agent
    from pydantic_ai.models import Model
    from pydantic_ai.usage import RunUsage

logger = structlog.get_logger()

SYSTEM_PROMPTS: dict[ContentCategory, str] = {
    ContentCategory.BLOG: (
        "You are an expert content writer specializing in engaging, SEO-optimized "
        "blog posts. Your writing is informative, well-structured and gives readers "
        "real value. When asked for JSON, reply with the JSON object only."
    ),
    ContentCategory.SOCIAL: (
        "You are a social media expert who writes concise, shareable posts with a "
        "professional yet approachable tone. When asked for JSON, reply with the "
        "JSON object only."
    ),
    ContentCategory.NEWSLETTER: (
        "You are a newsletter specialist who writes compelling email content that "
        "drives reader engagement. When asked for JSON, reply with the JSON object only."
    ),
}


async def _run_streamed(
    agent: Agent[None, str],
    prompt: str,
    model_settings: AnthropicModelSettings,
) -> tuple[str, RunUsage]:
    """Run a PydanticAI agent in streaming mode and return the final text."""
    async with agent.run_stream(prompt, model_settings=model_settings) as stream:
        async for _chunk in stream.stream_output():
            pass
        output: str = await stream.get_output()
        return output, stream.usage()


class LLMClient:
    """Text generation against Anthropic Claude through PydanticAI."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._model: Model | None = None
        self.breaker = CircuitBreaker(
            name="llm",
            failure_threshold=self.settings.llm_breaker_threshold,
            reset_timeout=self.settings.llm_breaker_reset_seconds,
        )

    @property
    def model(self) -> Model:
        if self._model is None:
            from pydantic_ai.models.anthropic import AnthropicModel
            from pydantic_ai.providers.anthropic import AnthropicProvider

            provider = AnthropicProvider(api_key=self.settings.anthropic_api_key)
            self._model = AnthropicModel(self.settings.llm_model, provider=provider)
        return self._model

    @property
    def is_available(self) -> bool:
        return bool(self.settings.anthropic_api_key)

    def _build_model_settings(self) -> AnthropicModelSettings:
        """Build model_settings with Anthropic prompt caching enabled."""
        return AnthropicModelSettings(
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
            anthropic_cache_instructions=True,
        )

    def _log_and_record_usage(self, category: str, usage: RunUsage) -> None:
        logger.info(
            "LLM response",
            model=self.settings.llm_model,
            category=category,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            cache_read_tokens=usage.cache_read_tokens or 0,
        )
        model_label = self.settings.llm_model
        llm_tokens_total.labels(model=model_label, token_type="request").inc(
            usage.input_tokens or 0
        )
        llm_tokens_total.labels(model=model_label, token_type="response").inc(
            usage.output_tokens or 0
        )
        llm_tokens_total.labels(model=model_label, token_type="cache_read").inc(
            usage.cache_read_tokens or 0
        )

    async def generate_text(
        self,
        prompt: str,
        content_category: ContentCategory | str = ContentCategory.BLOG,
    ) -> GeneratedText:
        """Generate free text for *prompt* in the voice of *content_category*.

        Raises ExternalServiceError when the call times out, exhausts its retries,
        or the circuit breaker is open.
        """
        from pydantic_ai import Agent

        category = ContentCategory(content_category)
        agent: Agent[None, str] = Agent(
            self.model,
            output_type=str,
            system_prompt=SYSTEM_PROMPTS[category],
        )
        model_settings = self._build_model_settings()
        timeout = self.settings.llm_timeout_seconds

        async def _attempt() -> tuple[str, RunUsage]:
            async with asyncio.timeout(timeout):
                return await _run_streamed(agent, prompt, model_settings)

        logger.debug(
            "LLM request",
            model=self.settings.llm_model,
            category=category.value,
            prompt_chars=len(prompt),
        )

        try:
            output, usage = await self.breaker.call(
                lambda: async_with_retry(
                    _attempt,
                    max_retries=self.settings.llm_max_retries,
                    base_delay=self.settings.llm_retry_base_delay,
                    fn_name="llm.generate_text",
                )
            )
        except CircuitOpenError as exc:
            llm_requests_total.labels(category=category.value, status="rejected").inc()
            raise ExternalServiceError(str(exc)) from exc
        except RetryExhaustedError as exc:
            llm_requests_total.labels(category=category.value, status="error").inc()
            cause = exc.__cause__
            detail = f"{type(cause).__name__}: {cause}" if cause else str(exc)
            logger.error("LLM request failed", category=category.value, error=detail)
            raise ExternalServiceError(f"Text generation failed ({detail})") from exc

        llm_requests_total.labels(category=category.value, status="ok").inc()
        self._log_and_record_usage(category.value, usage)
        return GeneratedText(content=output)
