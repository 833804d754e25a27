"""Port interfaces (Protocols) for the engine's external collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contentlab.models.experiment import Experiment, ExperimentFilters
    from contentlab.models.generation import ContentCategory, GeneratedText


@runtime_checkable
class TextGeneratorPort(Protocol):
    """Interface for free-text LLM generation.

    Implementations raise ExternalServiceError (or a subclass) on any failure.
    """

    async def generate_text(
        self,
        prompt: str,
        content_category: ContentCategory | str = "blog",
    ) -> GeneratedText: ...


@runtime_checkable
class ExperimentRepository(Protocol):
    """Interface for experiment persistence, keyed by experiment id.

    Implementations do not validate; the store does that before calling them.
    """

    def create_experiment(self, experiment: Experiment) -> Experiment: ...
    def get_experiment(self, experiment_id: str) -> Experiment | None: ...
    def list_experiments(self, filters: ExperimentFilters | None = None) -> list[Experiment]: ...
    def save_experiment(self, experiment: Experiment) -> Experiment: ...
    def delete_experiment(self, experiment_id: str) -> bool: ...
