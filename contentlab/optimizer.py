"""Public entry point wiring analyzers, variant generation and the experiment store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from contentlab.analysis.brand_voice import BrandVoiceAnalyzer
from contentlab.analysis.readability import analyze_readability
from contentlab.analysis.seo import SEOAnalyzer
from contentlab.config import Settings
from contentlab.db import create_repository
from contentlab.experiments.analyzer import analyze_experiment_results
from contentlab.experiments.store import ExperimentStore
from contentlab.experiments.variants import VariantGenerator
from contentlab.logging import configure_logging
from contentlab.models.brand_voice import DEFAULT_BRAND_VOICE, BrandVoiceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from contentlab.models.brand_voice import BrandVoiceReport
    from contentlab.models.experiment import (
        Experiment,
        ExperimentFilters,
        ExperimentRequest,
        ExperimentVerdict,
        VariantResult,
    )
    from contentlab.models.readability import ReadabilityReport
    from contentlab.models.seo import SEOReport
    from contentlab.protocols import ExperimentRepository, TextGeneratorPort

logger = structlog.get_logger()


class ContentOptimizer:
    """Content analysis and A/B experiment management behind one object.

    Collaborators default from *settings*: an Anthropic-backed LLMClient and
    the repository selected by ``experiment_backend``. Pass your own to test
    or to share a datastore. With *setup_logging* the process-wide logging is
    configured from ``log_level`` and ``log_format``; leave it off when the
    host application owns logging.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        generator: TextGeneratorPort | None = None,
        repository: ExperimentRepository | None = None,
        brand_voice: BrandVoiceConfig = DEFAULT_BRAND_VOICE,
        setup_logging: bool = False,
    ) -> None:
        self.settings = settings or Settings()
        if setup_logging:
            configure_logging(
                log_level=self.settings.log_level, log_format=self.settings.log_format
            )
        if generator is None:
            from contentlab.llm import LLMClient

            generator = LLMClient(self.settings)
        self.generator = generator
        self.repository = repository if repository is not None else create_repository(self.settings)

        self.seo = SEOAnalyzer(generator)
        self.brand_voice = BrandVoiceAnalyzer(generator, brand_voice)
        self.store = ExperimentStore(self.repository, VariantGenerator(generator))

    # --- Content analysis ---

    async def analyze_seo(
        self,
        content: str,
        title: str | None = None,
        meta_description: str | None = None,
        keywords: Sequence[str] = (),
    ) -> SEOReport:
        return await self.seo.analyze(content, title, meta_description, keywords)

    def analyze_readability(self, content: str) -> ReadabilityReport:
        return analyze_readability(content)

    async def analyze_brand_voice(self, content: str) -> BrandVoiceReport:
        return await self.brand_voice.analyze(content)

    # --- Experiments ---

    async def create_experiment(
        self, request: ExperimentRequest | Mapping[str, Any]
    ) -> Experiment:
        return await self.store.create(request)

    async def list_experiments(self, filters: ExperimentFilters | None = None) -> list[Experiment]:
        return await self.store.get_all(filters)

    async def get_experiment(self, experiment_id: str) -> Experiment | None:
        return await self.store.get_by_id(experiment_id)

    async def update_experiment(
        self, experiment_id: str, changes: Mapping[str, Any]
    ) -> Experiment:
        return await self.store.update(experiment_id, changes)

    async def delete_experiment(self, experiment_id: str) -> None:
        await self.store.delete(experiment_id)

    async def record_result(
        self, experiment_id: str, result: VariantResult | Mapping[str, Any]
    ) -> Experiment:
        return await self.store.record_result(experiment_id, result)

    def analyze_experiment_results(self, experiment: Experiment) -> ExperimentVerdict:
        return analyze_experiment_results(experiment)
