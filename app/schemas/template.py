"""Workout template schemas."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from app.schemas.exercise import Exercise
from app.schemas.workout import RepRange


class TemplateExercise(BaseModel):
    """Exercise in a template with set/rep targets (guidance only)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    exercise_id: str
    name: str
    category: str
    image_name: str
    target_sets: int = Field(..., ge=1)
    target_rep_range: RepRange

    def to_exercise(self) -> Exercise:
        """Rebuild the catalog Exercise this entry was snapshotted from."""
        return Exercise(
            id=self.exercise_id,
            title=self.name,
            category=self.category,
            description="",
            image_name=self.image_name,
            is_favorite=False,
        )


class WorkoutTemplate(BaseModel):
    """Saved workout structure (name + ordered exercises with targets)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    exercises: list[TemplateExercise] = []
    is_favorite: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TemplateExerciseCreate(BaseModel):
    exercise_id: str
    name: str
    category: str
    image_name: str
    target_sets: int = Field(..., ge=1)
    target_rep_range: RepRange


class WorkoutTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    exercises: list[TemplateExerciseCreate] = []
    is_favorite: bool = False

    def to_template(self) -> WorkoutTemplate:
        return WorkoutTemplate(
            name=self.name,
            description=self.description,
            exercises=[TemplateExercise(**e.model_dump()) for e in self.exercises],
            is_favorite=self.is_favorite,
        )
