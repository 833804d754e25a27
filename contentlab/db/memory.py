"""Process-local experiment repository backed by a dict."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contentlab.models.experiment import Experiment, ExperimentFilters


class InMemoryExperimentRepository:
    """Keeps experiments in memory for the lifetime of the instance.

    Each instance owns its own collection, so tests and tenants stay isolated.
    """

    def __init__(self) -> None:
        self._experiments: dict[str, Experiment] = {}

    def create_experiment(self, experiment: Experiment) -> Experiment:
        if experiment.id in self._experiments:
            raise KeyError(f"Experiment {experiment.id} already exists")
        self._experiments[experiment.id] = experiment
        return experiment

    def get_experiment(self, experiment_id: str) -> Experiment | None:
        return self._experiments.get(experiment_id)

    def list_experiments(self, filters: ExperimentFilters | None = None) -> list[Experiment]:
        found = [e for e in self._experiments.values() if filters is None or filters.matches(e)]
        return sorted(found, key=lambda e: e.created_at, reverse=True)

    def save_experiment(self, experiment: Experiment) -> Experiment:
        if experiment.id not in self._experiments:
            raise KeyError(f"Experiment {experiment.id} does not exist")
        self._experiments[experiment.id] = experiment
        return experiment

    def delete_experiment(self, experiment_id: str) -> bool:
        return self._experiments.pop(experiment_id, None) is not None

    def __len__(self) -> int:
        return len(self._experiments)
