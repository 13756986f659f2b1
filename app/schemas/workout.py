"""Workout session, exercise and set schemas."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.enums import WorkoutState
from app.schemas.exercise import Exercise


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RepRange(BaseModel):
    """Target rep range for a set. Annotation only, never enforced."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "RepRange":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must be <= max ({self.max})")
        return self

    @property
    def description(self) -> str:
        return f"{self.min}-{self.max}"

    def contains(self, reps: int) -> bool:
        return self.min <= reps <= self.max


class ExerciseSet(BaseModel):
    """One performed set: reps, optional weight (lb) and target, failure flag."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    reps: int
    target_rep_range: RepRange | None = None
    weight: float | None = Field(None, ge=0)
    is_failure: bool = False
    timestamp: datetime = Field(default_factory=_utcnow)


class WorkoutExercise(BaseModel):
    """Exercise inside a session. name/category/image are a snapshot taken when added."""

    id: str = Field(default_factory=_new_id)
    exercise_id: str
    name: str
    category: str
    image_name: str
    sets: list[ExerciseSet] = []

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> "WorkoutExercise":
        return cls(
            exercise_id=exercise.id,
            name=exercise.title,
            category=exercise.category,
            image_name=exercise.image_name,
        )

    @property
    def volume(self) -> float:
        """Sum of weight x reps (unweighted sets count as 0)."""
        return sum((s.weight or 0) * s.reps for s in self.sets)


class WorkoutSession(BaseModel):
    """A single workout. end_time/total_duration are filled once, at finish."""

    id: str = Field(default_factory=_new_id)
    user_id: str
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime | None = None
    total_duration: float | None = None  # seconds, end_time - start_time
    exercises: list[WorkoutExercise] = []
    is_active: bool = True


# ── Request / response models ───────────────────────────────────────────


class AddExerciseRequest(Exercise):
    """Exercise to append to the working list (same shape as the catalog Exercise)."""

    pass


class AddSetRequest(BaseModel):
    reps: int = Field(..., gt=0)
    target_rep_range: RepRange | None = None
    weight: float | None = Field(None, ge=0)
    is_failure: bool = False


class SessionStateRead(BaseModel):
    """Snapshot of a user's session machine."""

    state: WorkoutState
    elapsed_time: float
    elapsed_display: str
    session: WorkoutSession | None = None
    exercises: list[WorkoutExercise] = []
    total_sets: int = 0
    total_reps: int = 0
    total_weight: float = 0.0
    error_message: str | None = None
