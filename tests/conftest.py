"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from pydantic_ai import models

from contentlab.config import Settings
from contentlab.db import InMemoryExperimentRepository, SqlExperimentRepository
from contentlab.experiments.store import ExperimentStore
from contentlab.experiments.variants import VariantGenerator
from contentlab.models.generation import GeneratedText
from contentlab.optimizer import ContentOptimizer

# Safety net: block all real LLM API calls during tests.
# TestModel and FunctionModel are exempt from this check.
models.ALLOW_MODEL_REQUESTS = False


class ScriptedGenerator:
    """TextGeneratorPort double that replays canned answers and records prompts.

    Items in *responses* are returned in order (exceptions are raised); once
    exhausted, *default* is returned, or produced by calling it with the prompt.
    """

    def __init__(
        self,
        responses: list[str | Exception] | None = None,
        default: str | Callable[[str], str] = "",
    ) -> None:
        self.responses = list(responses or [])
        self.default = default
        self.calls: list[tuple[str, str]] = []

    async def generate_text(self, prompt: str, content_category: str = "blog") -> GeneratedText:
        self.calls.append((prompt, str(content_category)))
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            return GeneratedText(content=item)
        if callable(self.default):
            return GeneratedText(content=self.default(prompt))
        return GeneratedText(content=self.default)

    @property
    def prompts(self) -> list[str]:
        return [p for p, _ in self.calls]


def _numbered_rewrite(prompt: str) -> str:
    return f"Rewritten copy #{len(prompt) % 97}"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        anthropic_api_key="test-key",
        llm_timeout_seconds=2.0,
        llm_max_retries=1,
        llm_retry_base_delay=0.01,
        experiment_backend="memory",
        data_dir="/tmp/contentlab-test",
        log_level="DEBUG",
        log_format="console",
        _env_file=None,
    )


@pytest.fixture()
def make_generator() -> Callable[..., ScriptedGenerator]:
    return ScriptedGenerator


@pytest.fixture()
def generator() -> ScriptedGenerator:
    """Generator whose every answer is a short rewrite (not JSON)."""
    return ScriptedGenerator(default=_numbered_rewrite)


@pytest.fixture()
def memory_repo() -> InMemoryExperimentRepository:
    return InMemoryExperimentRepository()


@pytest.fixture()
def sql_repo(tmp_path) -> SqlExperimentRepository:
    repo = SqlExperimentRepository(tmp_path / "test.db")
    repo.init_schema()
    yield repo
    repo.close()


@pytest.fixture()
def store(memory_repo, generator) -> ExperimentStore:
    return ExperimentStore(memory_repo, VariantGenerator(generator))


@pytest.fixture()
def optimizer(settings, generator, memory_repo) -> ContentOptimizer:
    return ContentOptimizer(settings, generator=generator, repository=memory_repo)


@pytest.fixture()
def experiment_request() -> dict[str, object]:
    return {
        "name": "Homepage headline test",
        "description": "Which headline drives more demo requests",
        "content_type": "blog",
        "platform": "linkedin",
        "test_type": "title",
        "original_content": "Top 10 eLearning Trends in Corporate Training 2024",
        "variant_count": 2,
    }
