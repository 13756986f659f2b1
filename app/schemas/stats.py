"""Derived statistics records (never persisted)."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class ProgressDataPoint(BaseModel):
    """One calendar day of training in the trailing window."""

    model_config = ConfigDict(frozen=True)

    date: date
    total_volume: float = 0.0
    total_sets: int = 0
    total_reps: int = 0
    workout_duration: float = 0.0


class ExerciseProgress(BaseModel):
    """One session's work on a single exercise."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    max_weight: float
    total_volume: float
    total_reps: int
    sets_completed: int


class WorkoutTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_workouts: int = 0
    total_workout_time: float = 0.0
    total_sets: int = 0
    total_reps: int = 0
    total_weight: float = 0.0  # Sum of set weights, NOT weight x reps (see volume)

    @property
    def average_workout_duration(self) -> float:
        return self.total_workout_time / self.total_workouts if self.total_workouts else 0.0

    @property
    def average_sets_per_workout(self) -> float:
        return self.total_sets / self.total_workouts if self.total_workouts else 0.0

    @property
    def average_reps_per_set(self) -> float:
        return self.total_reps / self.total_sets if self.total_sets else 0.0


class WorkoutStats(BaseModel):
    """Everything the stats screen shows, computed from finished sessions."""

    model_config = ConfigDict(frozen=True)

    totals: WorkoutTotals
    workout_streak: int = 0
    longest_streak: int = 0
    last_workout_date: date | None = None
    workouts_this_week: int = 0
    workouts_this_month: int = 0
    average_workout_duration: float = 0.0
    average_sets_per_workout: float = 0.0
    average_reps_per_set: float = 0.0
    progress_data: list[ProgressDataPoint] = []
    exercise_progress: dict[str, list[ExerciseProgress]] = {}


class StreakRead(BaseModel):
    current_streak: int
    longest_streak: int
    last_workout_date: date | None = None
