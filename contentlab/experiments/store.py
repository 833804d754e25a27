"""Experiment store: validated CRUD and lifecycle rules over an injected repository."""

from __future__ import annotations

import asyncio
import uuid
from collections import defaultdict
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from contentlab.errors import ExperimentNotFoundError, ExperimentValidationError, FieldError
from contentlab.metrics import experiments_total
from contentlab.models.base import utcnow
from contentlab.models.experiment import (
    MAX_VARIANT_COUNT,
    MIN_VARIANT_COUNT,
    STATUS_TRANSITIONS,
    ContentType,
    Experiment,
    ExperimentRequest,
    ExperimentStatus,
    TestType,
    VariantResult,
)

if TYPE_CHECKING:
    from contentlab.experiments.variants import VariantGenerator
    from contentlab.models.experiment import ExperimentFilters
    from contentlab.protocols import ExperimentRepository

logger = structlog.get_logger()

REQUIRED_FIELDS = ("name", "description", "content_type", "test_type", "original_content")
MIN_NAME_LENGTH = 3
WINNER_MIN_CONFIDENCE = 95

# Fields callers may not change through update().
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at", "variants"})


def validate_request(request: ExperimentRequest) -> list[FieldError]:
    """Return every constraint *request* violates (empty when valid)."""
    errors: list[FieldError] = []

    for name in REQUIRED_FIELDS:
        value = getattr(request, name)
        if not value or not value.strip():
            errors.append(FieldError(name, f"Missing required field: {name}"))

    valid_test_types = [t.value for t in TestType]
    if request.test_type and request.test_type not in valid_test_types:
        errors.append(
            FieldError(
                "test_type",
                f"Invalid test_type. Must be one of: {', '.join(valid_test_types)}",
            )
        )

    valid_content_types = [c.value for c in ContentType]
    if request.content_type and request.content_type not in valid_content_types:
        errors.append(
            FieldError(
                "content_type",
                f"Invalid content_type. Must be one of: {', '.join(valid_content_types)}",
            )
        )

    if not MIN_VARIANT_COUNT <= request.variant_count <= MAX_VARIANT_COUNT:
        errors.append(
            FieldError(
                "variant_count",
                f"Variant count must be between {MIN_VARIANT_COUNT} and {MAX_VARIANT_COUNT}",
            )
        )

    if request.name.strip() and len(request.name) < MIN_NAME_LENGTH:
        errors.append(
            FieldError("name", f"Test name must be at least {MIN_NAME_LENGTH} characters long")
        )

    return errors


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        path = ".".join(str(part) for part in loc)
        errors.append(FieldError(str(loc[0]), f"{path}: {err['msg']}"))
    return errors


def check_invariants(before: Experiment, after: Experiment) -> list[FieldError]:
    """Constraints an updated experiment must satisfy relative to its previous state."""
    errors: list[FieldError] = []

    if after.status != before.status and after.status not in STATUS_TRANSITIONS[before.status]:
        errors.append(
            FieldError(
                "status",
                f"Cannot move experiment from {before.status.value} to {after.status.value}",
            )
        )

    variant_ids = after.variant_ids()
    seen: set[str] = set()
    for result in after.results:
        if result.variant_id not in variant_ids:
            errors.append(
                FieldError("results", f"Result references unknown variant: {result.variant_id}")
            )
        elif result.variant_id in seen:
            errors.append(
                FieldError("results", f"Duplicate result for variant: {result.variant_id}")
            )
        seen.add(result.variant_id)

    if after.winner_variant_id is not None:
        if after.winner_variant_id not in variant_ids:
            errors.append(
                FieldError(
                    "winner_variant_id", f"Winner is not a variant: {after.winner_variant_id}"
                )
            )
        if after.confidence_level < WINNER_MIN_CONFIDENCE:
            errors.append(
                FieldError(
                    "winner_variant_id",
                    f"A winner requires confidence_level >= {WINNER_MIN_CONFIDENCE}",
                )
            )

    return errors


class ExperimentStore:
    """Creates, reads, updates and deletes experiments.

    Mutations of one experiment are serialised with a per-id lock; different
    experiments never block each other.
    """

    def __init__(
        self,
        repository: ExperimentRepository,
        variant_generator: VariantGenerator,
    ) -> None:
        self.repository = repository
        self.variant_generator = variant_generator
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def create(self, request: ExperimentRequest | Mapping[str, Any]) -> Experiment:
        if isinstance(request, Mapping):
            try:
                request = ExperimentRequest.model_validate(dict(request))
            except ValidationError as exc:
                raise ExperimentValidationError(_field_errors(exc)) from exc

        errors = validate_request(request)
        if errors:
            rejection = ExperimentValidationError(errors)
            logger.info("Experiment rejected", fields=rejection.fields)
            raise rejection

        # Generate everything before touching the repository so a failure
        # leaves nothing behind.
        try:
            variants = await self.variant_generator.create_variants(
                request.original_content,
                request.test_type,
                request.variant_count,
            )
        except Exception:
            logger.error("Variant generation failed", name=request.name, test_type=request.test_type)
            raise

        experiment = Experiment(
            id=uuid.uuid4().hex,
            name=request.name,
            description=request.description,
            content_type=ContentType(request.content_type),
            platform=request.platform,
            test_type=TestType(request.test_type),
            status=ExperimentStatus.DRAFT,
            variants=variants,
            results=[],
            confidence_level=0.0,
            created_at=utcnow(),
        )
        created = self.repository.create_experiment(experiment)
        experiments_total.labels(status=ExperimentStatus.DRAFT.value).inc()
        logger.info(
            "Experiment created",
            experiment_id=created.id,
            test_type=created.test_type.value,
            variants=len(created.variants),
        )
        return created

    async def get_all(self, filters: ExperimentFilters | None = None) -> list[Experiment]:
        return self.repository.list_experiments(filters)

    async def get_by_id(self, experiment_id: str) -> Experiment | None:
        return self.repository.get_experiment(experiment_id)

    async def update(self, experiment_id: str, changes: Mapping[str, Any]) -> Experiment:
        """Merge *changes* into the experiment and stamp ``updated_at``.

        Raises ExperimentNotFoundError for an unknown id and
        ExperimentValidationError when the result would break an invariant.
        """
        async with self._exclusive(experiment_id) as current:
            return self._apply(current, dict(changes))

    async def record_result(
        self, experiment_id: str, result: VariantResult | Mapping[str, Any]
    ) -> Experiment:
        """Insert or replace the result for one variant."""
        if isinstance(result, Mapping):
            try:
                result = VariantResult.model_validate(dict(result))
            except ValidationError as exc:
                raise ExperimentValidationError(_field_errors(exc)) from exc

        async with self._exclusive(experiment_id) as current:
            replaced = current.result_for(result.variant_id) is not None
            results = [r for r in current.results if r.variant_id != result.variant_id]
            results.append(result)
            saved = self._apply(current, {"results": results})
        logger.info(
            "Result recorded",
            experiment_id=experiment_id,
            variant_id=result.variant_id,
            impressions=result.impressions,
            replaced=replaced,
        )
        return saved

    async def delete(self, experiment_id: str) -> None:
        async with self._exclusive(experiment_id):
            self.repository.delete_experiment(experiment_id)
            self._locks.pop(experiment_id, None)
        logger.info("Experiment deleted", experiment_id=experiment_id)

    # --- Helpers ---

    @asynccontextmanager
    async def _exclusive(self, experiment_id: str) -> AsyncIterator[Experiment]:
        """Hold the experiment's lock and yield its current state.

        Unknown ids raise ExperimentNotFoundError without leaving a lock behind.
        """
        self._require(experiment_id)
        async with self._locks[experiment_id]:
            try:
                current = self._require(experiment_id)
            except ExperimentNotFoundError:
                # deleted while we waited
                self._locks.pop(experiment_id, None)
                raise
            yield current

    def _require(self, experiment_id: str) -> Experiment:
        experiment = self.repository.get_experiment(experiment_id)
        if experiment is None:
            raise ExperimentNotFoundError(experiment_id)
        return experiment

    def _apply(self, current: Experiment, changes: dict[str, Any]) -> Experiment:
        unknown = sorted(set(changes) - set(Experiment.model_fields))
        immutable = sorted(set(changes) & IMMUTABLE_FIELDS)
        errors = [FieldError(f, f"Unknown field: {f}") for f in unknown]
        errors += [FieldError(f, f"Field cannot be changed: {f}") for f in immutable]
        if errors:
            raise ExperimentValidationError(errors)

        now = utcnow()
        merged = {**current.model_dump(), **changes, "updated_at": now}
        try:
            updated = Experiment.model_validate(merged)
        except ValidationError as exc:
            raise ExperimentValidationError(_field_errors(exc)) from exc

        errors = check_invariants(current, updated)
        if errors:
            raise ExperimentValidationError(errors)

        stamps: dict[str, Any] = {}
        if updated.status != current.status:
            if updated.status == ExperimentStatus.RUNNING and updated.start_date is None:
                stamps["start_date"] = now
            if updated.status == ExperimentStatus.COMPLETED and updated.end_date is None:
                stamps["end_date"] = now
        if stamps:
            updated = updated.model_copy(update=stamps)

        saved = self.repository.save_experiment(updated)
        if saved.status != current.status:
            experiments_total.labels(status=saved.status.value).inc()
            logger.info(
                "Experiment status changed",
                experiment_id=saved.id,
                from_status=current.status.value,
                to_status=saved.status.value,
            )
        return saved
