"""Experiment persistence: in-memory and SQLite repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contentlab.db.memory import InMemoryExperimentRepository
from contentlab.db.orm import Base, ExperimentRow
from contentlab.db.repository import SqlExperimentRepository

if TYPE_CHECKING:
    from contentlab.config import Settings
    from contentlab.protocols import ExperimentRepository


def create_repository(settings: Settings) -> ExperimentRepository:
    """Build the repository selected by ``settings.experiment_backend``."""
    if settings.experiment_backend == "sqlite":
        settings.ensure_data_dir()
        repo = SqlExperimentRepository(settings.db_path, settings.db_busy_timeout_seconds)
        repo.init_schema()
        return repo
    return InMemoryExperimentRepository()


__all__ = [
    "Base",
    "ExperimentRow",
    "InMemoryExperimentRepository",
    "SqlExperimentRepository",
    "create_repository",
]
