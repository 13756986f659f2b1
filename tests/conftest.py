"""Shared fixtures: a controllable clock, in-memory stores and sample data."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from app.core.errors import PersistenceError
from app.schemas.exercise import Exercise
from app.schemas.template import TemplateExercise, WorkoutTemplate
from app.schemas.workout import ExerciseSet, RepRange, WorkoutExercise, WorkoutSession
from app.services.store import InMemoryWorkoutStore
from app.services.workout_session import WorkoutSessionMachine

USER_ID = "user-123"
T0 = datetime(2026, 3, 4, 18, 0, tzinfo=timezone.utc)  # a Wednesday


class FakeClock:
    """Wall clock and monotonic clock that only move when told to."""

    def __init__(self, start: datetime = T0):
        self._now = start
        self._monotonic = 1000.0

    def now(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)
        self._monotonic += seconds


class FailingStore(InMemoryWorkoutStore):
    """In-memory store whose reads and/or writes can be switched to fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def _check(self, failing: bool) -> None:
        if failing:
            raise PersistenceError("store offline")

    async def put_session(self, user_id, session):
        self._check(self.fail_writes)
        await super().put_session(user_id, session)

    async def get_session(self, user_id, session_id):
        self._check(self.fail_reads)
        return await super().get_session(user_id, session_id)

    async def query_sessions(self, user_id, is_active=False, limit=50):
        self._check(self.fail_reads)
        return await super().query_sessions(user_id, is_active=is_active, limit=limit)

    async def delete_session(self, user_id, session_id):
        self._check(self.fail_writes)
        await super().delete_session(user_id, session_id)

    async def put_template(self, user_id, template):
        self._check(self.fail_writes)
        await super().put_template(user_id, template)

    async def query_templates(self, user_id):
        self._check(self.fail_reads)
        return await super().query_templates(user_id)

    async def delete_template(self, user_id, template_id):
        self._check(self.fail_writes)
        await super().delete_template(user_id, template_id)


class YieldingStore(InMemoryWorkoutStore):
    """In-memory store that gives up the event loop on every call, like a real backend."""

    async def query_templates(self, user_id):
        await asyncio.sleep(0)
        return await super().query_templates(user_id)

    async def put_template(self, user_id, template):
        await asyncio.sleep(0)
        await super().put_template(user_id, template)


def set_document(**overrides) -> dict:
    doc = {"id": "s1", "reps": 10, "isFailure": False, "timestamp": T0}
    doc.update(overrides)
    return doc


def session_document(session_id: str = "w1", **overrides) -> dict:
    """A stored finished-session document in its camelCase shape."""
    doc = {
        "id": session_id,
        "userId": USER_ID,
        "startTime": T0,
        "endTime": T0,
        "totalDuration": 0.0,
        "isActive": False,
        "exercises": [
            {
                "id": "we1",
                "exerciseId": "1",
                "name": "Bench Press",
                "category": "Chest",
                "imageName": "dumbbell.fill",
                "sets": [set_document()],
            }
        ],
    }
    doc.update(overrides)
    return doc


def make_session(
    start: datetime,
    sets: list[tuple[int, float | None]] = (),
    exercise_name: str = "Bench Press",
    duration: float = 3600.0,
    user_id: str = USER_ID,
) -> WorkoutSession:
    """A finished session with one exercise holding (reps, weight) sets."""
    exercise = WorkoutExercise(
        exercise_id=exercise_name.lower().replace(" ", "-"),
        name=exercise_name,
        category="Chest",
        image_name="dumbbell.fill",
        sets=[ExerciseSet(reps=reps, weight=weight, timestamp=start) for reps, weight in sets],
    )
    return WorkoutSession(
        user_id=user_id,
        start_time=start,
        end_time=start + timedelta(seconds=duration),
        total_duration=duration,
        exercises=[exercise],
        is_active=False,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryWorkoutStore:
    return InMemoryWorkoutStore()


@pytest.fixture
def bench_press() -> Exercise:
    return Exercise(id="1", title="Bench Press", category="Chest", image_name="dumbbell.fill")


@pytest.fixture
def squat() -> Exercise:
    return Exercise(id="2", title="Squats", category="Legs", image_name="figure.walk")


@pytest.fixture
def three_exercise_template() -> WorkoutTemplate:
    return WorkoutTemplate(
        name="Leg Day",
        description="Legs",
        exercises=[
            TemplateExercise(
                exercise_id=f"ex-{i}",
                name=name,
                category="Legs",
                image_name="figure.walk",
                target_sets=3,
                target_rep_range=RepRange(min=8, max=12),
            )
            for i, name in enumerate(["Squats", "Lunges", "Calf Raises"])
        ],
    )


@pytest_asyncio.fixture
async def machine(store, clock):
    # Long interval: tests drive ticks by hand via machine.tick()
    m = WorkoutSessionMachine(USER_ID, store, clock=clock, tick_interval=3600)
    yield m
    m.close()
