"""Shared enums for the session engine and API."""

from enum import Enum


class WorkoutState(str, Enum):
    """Lifecycle of a workout session."""

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    FINISHED = "finished"  # Terminal until reset
