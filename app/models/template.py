"""Workout template documents (users/{user_id}/workoutTemplates/{id})."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class TemplateDocument(Base):
    """One serialized WorkoutTemplate; created_at mirrors the payload for ordering."""

    __tablename__ = "template_documents"
    __table_args__ = (Index("ix_template_documents_user_created", "user_id", "created_at"),)

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
