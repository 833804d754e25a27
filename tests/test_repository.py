"""Tests for experiment repositories (in-memory and SQLite)."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from contentlab.config import Settings
from contentlab.db import InMemoryExperimentRepository, SqlExperimentRepository, create_repository
from contentlab.experiments.store import ExperimentStore
from contentlab.experiments.variants import VariantGenerator
from contentlab.models.experiment import (
    ContentType,
    Experiment,
    ExperimentFilters,
    ExperimentStatus,
    TestType,
    Variant,
    VariantResult,
)
from contentlab.protocols import ExperimentRepository

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, 123456, tzinfo=UTC)


def _experiment(experiment_id: str, minutes: int = 0, **overrides) -> Experiment:
    fields = {
        "id": experiment_id,
        "name": f"Test {experiment_id}",
        "description": "Headline test",
        "content_type": ContentType.BLOG,
        "platform": "web",
        "test_type": TestType.TITLE,
        "variants": [
            Variant(id="control", name="Control (Original)", content="A", type=TestType.TITLE,
                    created_at=BASE_TIME),
            Variant(id="variant_1", name="Variant 1", content="B", type=TestType.TITLE,
                    created_at=BASE_TIME),
        ],
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }
    fields.update(overrides)
    return Experiment(**fields)


@pytest.fixture(params=["memory", "sqlite"])
def repo(request, tmp_path):
    if request.param == "memory":
        yield InMemoryExperimentRepository()
        return
    sql = SqlExperimentRepository(tmp_path / "repo.db")
    sql.init_schema()
    yield sql
    sql.close()


class TestRepositoryContract:
    def test_satisfies_protocol(self, repo):
        assert isinstance(repo, ExperimentRepository)

    def test_create_and_get(self, repo):
        experiment = _experiment("exp1")
        repo.create_experiment(experiment)
        assert repo.get_experiment("exp1") == experiment

    def test_get_missing(self, repo):
        assert repo.get_experiment("missing") is None

    def test_list_newest_first(self, repo):
        repo.create_experiment(_experiment("old", minutes=0))
        repo.create_experiment(_experiment("new", minutes=5))
        repo.create_experiment(_experiment("mid", minutes=2))
        assert [e.id for e in repo.list_experiments()] == ["new", "mid", "old"]

    def test_list_with_filters(self, repo):
        repo.create_experiment(_experiment("a", status=ExperimentStatus.RUNNING))
        repo.create_experiment(_experiment("b", minutes=1, content_type=ContentType.SOCIAL))
        repo.create_experiment(_experiment("c", minutes=2, platform="email"))

        assert [e.id for e in repo.list_experiments(ExperimentFilters(status="running"))] == ["a"]
        assert [
            e.id for e in repo.list_experiments(ExperimentFilters(content_type="social"))
        ] == ["b"]
        assert [e.id for e in repo.list_experiments(ExperimentFilters(platform="web"))] == [
            "b",
            "a",
        ]
        assert repo.list_experiments(ExperimentFilters(platform="print")) == []

    def test_save_replaces(self, repo):
        experiment = _experiment("exp1")
        repo.create_experiment(experiment)
        updated = experiment.model_copy(
            update={
                "status": ExperimentStatus.COMPLETED,
                "results": [VariantResult.from_counts("variant_1", 1000, 80, 12)],
                "winner_variant_id": "variant_1",
                "confidence_level": 97.0,
                "end_date": BASE_TIME + timedelta(days=7),
                "updated_at": BASE_TIME + timedelta(days=7),
            }
        )
        repo.save_experiment(updated)
        assert repo.get_experiment("exp1") == updated

    def test_save_missing_raises(self, repo):
        with pytest.raises(KeyError):
            repo.save_experiment(_experiment("ghost"))

    def test_delete(self, repo):
        repo.create_experiment(_experiment("exp1"))
        assert repo.delete_experiment("exp1") is True
        assert repo.delete_experiment("exp1") is False
        assert repo.get_experiment("exp1") is None


class TestSqlRepository:
    def test_busy_timeout_applied_to_connections(self, tmp_path):
        repo = SqlExperimentRepository(tmp_path / "busy.db", busy_timeout_seconds=2.5)
        try:
            with repo._engine.connect() as conn:
                assert conn.exec_driver_sql("PRAGMA busy_timeout").scalar() == 2500
                assert conn.exec_driver_sql("PRAGMA journal_mode").scalar() == "wal"
        finally:
            repo.close()

    def test_factory_uses_configured_timeout(self, settings, tmp_path):
        sqlite_settings = settings.model_copy(
            update={
                "experiment_backend": "sqlite",
                "data_dir": tmp_path,
                "db_busy_timeout_seconds": 4.0,
            }
        )
        repo = create_repository(sqlite_settings)
        try:
            assert isinstance(repo, SqlExperimentRepository)
            assert repo.busy_timeout_seconds == 4.0
            assert repo.list_experiments() == []
        finally:
            repo.close()

    def test_survives_reopen(self, tmp_path):
        path = tmp_path / "persist.db"
        first = SqlExperimentRepository(path)
        first.init_schema()
        first.create_experiment(_experiment("exp1"))
        first.close()

        second = SqlExperimentRepository(path)
        try:
            loaded = second.get_experiment("exp1")
        finally:
            second.close()
        assert loaded == _experiment("exp1")
        assert loaded.created_at.tzinfo is not None

    def test_naive_datetimes_are_stored_as_utc(self, sql_repo):
        naive = datetime(2024, 1, 1, 9, 30)
        sql_repo.create_experiment(_experiment("exp1", created_at=naive))
        loaded = sql_repo.get_experiment("exp1")
        assert loaded.created_at == naive.replace(tzinfo=UTC)

    def test_store_over_sqlite(self, sql_repo, generator, experiment_request):
        store = ExperimentStore(sql_repo, VariantGenerator(generator))
        created = asyncio.run(store.create(experiment_request))
        asyncio.run(store.update(created.id, {"status": "running"}))
        asyncio.run(
            store.record_result(created.id, VariantResult.from_counts("control", 500, 25, 5))
        )

        loaded = asyncio.run(store.get_by_id(created.id))
        assert loaded.status == ExperimentStatus.RUNNING
        assert loaded.start_date is not None
        assert loaded.result_for("control").clicks == 25
        assert [v.id for v in loaded.variants] == ["control", "variant_1", "variant_2"]


class TestCreateRepository:
    def test_memory_backend(self, settings):
        assert isinstance(create_repository(settings), InMemoryExperimentRepository)

    def test_sqlite_backend(self, tmp_path):
        settings = Settings(
            experiment_backend="sqlite", data_dir=tmp_path / "data", _env_file=None
        )
        repo = create_repository(settings)
        try:
            assert isinstance(repo, SqlExperimentRepository)
            assert settings.db_path.exists()
            assert repo.list_experiments() == []
        finally:
            repo.close()
