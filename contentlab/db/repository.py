"""SQLAlchemy-backed experiment repository."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import TypeAdapter
from sqlalchemy import create_engine, event, select
from sqlalchemy.orm import sessionmaker

from contentlab.db.orm import Base, ExperimentRow
from contentlab.models.experiment import Experiment, Variant, VariantResult

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine
    from sqlalchemy.orm import Session

    from contentlab.models.experiment import ExperimentFilters

_variants_adapter = TypeAdapter(list[Variant])
_results_adapter = TypeAdapter(list[VariantResult])


class SqlExperimentRepository:
    """Persists experiments in SQLite; one row per experiment.

    File databases run in WAL mode so readers do not block the writer. A write
    that meets a lock waits up to *busy_timeout_seconds* before failing.
    """

    def __init__(self, db_path: str | Path = ":memory:", busy_timeout_seconds: float = 30.0):
        self.db_path = str(db_path)
        self.busy_timeout_seconds = busy_timeout_seconds
        in_memory = self.db_path == ":memory:"
        url = "sqlite://" if in_memory else f"sqlite:///{self.db_path}"
        self._engine: Engine = create_engine(url, connect_args={"timeout": busy_timeout_seconds})
        busy_ms = int(busy_timeout_seconds * 1000)

        @event.listens_for(self._engine, "connect")
        def _on_connect(dbapi_conn: object, _record: object) -> None:
            cursor = dbapi_conn.cursor()  # type: ignore[attr-defined]
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute(f"PRAGMA busy_timeout={busy_ms}")
            cursor.close()

        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=self._engine, expire_on_commit=False
        )

    def init_schema(self) -> None:
        """Create the experiments table if it is missing."""
        Base.metadata.create_all(self._engine)

    def close(self) -> None:
        self._engine.dispose()

    # --- Experiments ---

    def create_experiment(self, experiment: Experiment) -> Experiment:
        with self._session_factory() as session:
            row = ExperimentRow(id=experiment.id)
            self._fill_row(row, experiment)
            session.add(row)
            session.commit()
        return experiment

    def get_experiment(self, experiment_id: str) -> Experiment | None:
        with self._session_factory() as session:
            row = session.get(ExperimentRow, experiment_id)
            if row is None:
                return None
            return self._row_to_experiment(row)

    def list_experiments(self, filters: ExperimentFilters | None = None) -> list[Experiment]:
        with self._session_factory() as session:
            stmt = select(ExperimentRow).order_by(ExperimentRow.created_at.desc())
            if filters is not None:
                if filters.status is not None:
                    stmt = stmt.where(ExperimentRow.status == filters.status.value)
                if filters.content_type is not None:
                    stmt = stmt.where(ExperimentRow.content_type == filters.content_type.value)
                if filters.platform is not None:
                    stmt = stmt.where(ExperimentRow.platform == filters.platform)
            rows = session.scalars(stmt).all()
            return [self._row_to_experiment(r) for r in rows]

    def save_experiment(self, experiment: Experiment) -> Experiment:
        with self._session_factory() as session:
            row = session.get(ExperimentRow, experiment.id)
            if row is None:
                raise KeyError(f"Experiment {experiment.id} does not exist")
            self._fill_row(row, experiment)
            session.commit()
        return experiment

    def delete_experiment(self, experiment_id: str) -> bool:
        with self._session_factory() as session:
            row = session.get(ExperimentRow, experiment_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    # --- Helpers ---

    @staticmethod
    def _fill_row(row: ExperimentRow, experiment: Experiment) -> None:
        row.name = experiment.name
        row.description = experiment.description
        row.content_type = experiment.content_type.value
        row.platform = experiment.platform
        row.test_type = experiment.test_type.value
        row.status = experiment.status.value
        row.variants_json = _variants_adapter.dump_json(experiment.variants).decode()
        row.results_json = _results_adapter.dump_json(experiment.results).decode()
        row.winner_variant_id = experiment.winner_variant_id
        row.confidence_level = experiment.confidence_level
        row.start_date = _format_dt(experiment.start_date)
        row.end_date = _format_dt(experiment.end_date)
        row.created_at = _format_dt(experiment.created_at) or ""
        row.updated_at = _format_dt(experiment.updated_at)

    @staticmethod
    def _row_to_experiment(row: ExperimentRow) -> Experiment:
        return Experiment(
            id=row.id,
            name=row.name,
            description=row.description,
            content_type=row.content_type,
            platform=row.platform,
            test_type=row.test_type,
            status=row.status,
            variants=_variants_adapter.validate_python(json.loads(row.variants_json)),
            results=_results_adapter.validate_python(json.loads(row.results_json)),
            winner_variant_id=row.winner_variant_id,
            confidence_level=row.confidence_level,
            start_date=_parse_dt(row.start_date),
            end_date=_parse_dt(row.end_date),
            created_at=_parse_dt(row.created_at),
            updated_at=_parse_dt(row.updated_at),
        )


def _format_dt(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_dt(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
