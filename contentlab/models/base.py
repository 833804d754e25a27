"""Shared base model and clock helper."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    return datetime.now(UTC)


class FrozenModel(BaseModel):
    """Immutable model; reports and experiment snapshots are never edited in place."""

    model_config = ConfigDict(frozen=True)
