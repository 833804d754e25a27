"""SQLAlchemy ORM model for persisted experiments."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, Index, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ExperimentRow(Base):
    __tablename__ = "experiments"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_type: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    test_type: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="draft")

    # Variants and results are owned by the experiment; stored as JSON arrays.
    variants_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    results_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    winner_variant_id: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    confidence_level: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Timestamps (ISO-8601 UTC strings, lexically sortable)
    start_date: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    end_date: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'running', 'completed', 'paused')",
            name="ck_experiments_status",
        ),
        CheckConstraint(
            "content_type IN ('blog', 'social', 'newsletter')",
            name="ck_experiments_content_type",
        ),
        Index("ix_experiments_status", "status"),
        Index("ix_experiments_created_at", "created_at"),
    )
