"""Workout session documents (users/{user_id}/workouts/{id})."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class WorkoutDocument(Base):
    """One serialized WorkoutSession. start_time/is_active are copied out of the
    payload so history queries can filter and sort without reading JSON."""

    __tablename__ = "workout_documents"
    __table_args__ = (
        Index("ix_workout_documents_user_active_start", "user_id", "is_active", "start_time"),
    )

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
