"""Workout session state machine.

One machine owns one user's in-progress workout::

    not_started -> active <-> paused -> finished   (reset() -> not_started)

Every operation runs under the machine's lock, and so do timer ticks, so a
machine can be shared between request handlers without further locking.

Out-of-order calls (``start()`` while active, ``finish()`` before start, ...)
are ignored and return ``False``. Pass ``strict=True`` to get an
``InvalidTransition`` instead. Bad exercise/set indices are always ignored.

Two durations are tracked on purpose:

* ``elapsed_time`` counts *active* seconds only (paused time is excluded);
  it is what a client displays while training.
* ``WorkoutSession.total_duration`` is ``end_time - start_time`` wall-clock,
  paused time included; it is what gets recorded.
"""

from __future__ import annotations

import asyncio
import logging

from app.core.enums import WorkoutState
from app.core.errors import InvalidTransition
from app.schemas.exercise import Exercise
from app.schemas.template import WorkoutTemplate
from app.schemas.workout import (
    ExerciseSet,
    RepRange,
    SessionStateRead,
    WorkoutExercise,
    WorkoutSession,
)
from app.services.store import WorkoutStore
from app.services.timer import Clock, SystemClock, Ticker

logger = logging.getLogger(__name__)


class WorkoutSessionMachine:
    def __init__(
        self,
        user_id: str,
        store: WorkoutStore,
        clock: Clock | None = None,
        tick_interval: float = 1.0,
        strict: bool = False,
    ):
        self.user_id = user_id
        self.strict = strict
        self._store = store
        self._clock = clock or SystemClock()
        self._lock = asyncio.Lock()
        self._ticker = Ticker(self.tick, tick_interval)

        self.state = WorkoutState.NOT_STARTED
        self.current_session: WorkoutSession | None = None
        self.exercises: list[WorkoutExercise] = []
        self.elapsed_time: float = 0.0
        self.is_loading = False
        self.error_message: str | None = None

        self._accumulated = 0.0
        self._segment_started: float | None = None

    @property
    def ticking(self) -> bool:
        return self._ticker.running

    @property
    def is_idle(self) -> bool:
        """Nothing in progress and nothing left to report."""
        if self.is_loading:
            return False
        if self.state is WorkoutState.NOT_STARTED:
            return not self.exercises
        return self.state is WorkoutState.FINISHED and self.error_message is None

    # ── Transitions ─────────────────────────────────────────────────────

    async def start(self) -> bool:
        async with self._lock:
            if self.state is not WorkoutState.NOT_STARTED:
                return self._ignored("start")
            self.exercises = []
            self._begin()
            return True

    async def start_from_template(self, template: WorkoutTemplate) -> bool:
        """Pre-populate one empty exercise per template entry, then start."""
        async with self._lock:
            if self.state is not WorkoutState.NOT_STARTED:
                return self._ignored("start from template")
            self.exercises = [
                WorkoutExercise.from_exercise(entry.to_exercise()) for entry in template.exercises
            ]
            self._begin()
            logger.info("User %s started workout from template %r", self.user_id, template.name)
            return True

    async def pause(self) -> bool:
        async with self._lock:
            if self.state is not WorkoutState.ACTIVE:
                return self._ignored("pause")
            self._ticker.stop()
            self._close_segment()
            self.state = WorkoutState.PAUSED
            return True

    async def resume(self) -> bool:
        async with self._lock:
            if self.state is not WorkoutState.PAUSED:
                return self._ignored("resume")
            self._segment_started = self._clock.monotonic()
            self.state = WorkoutState.ACTIVE
            self._ticker.start()
            return True

    async def finish(self) -> bool:
        """Finish and persist. The Finished state stands even if the save fails."""
        async with self._lock:
            session = self.current_session
            if session is None or self.state not in (WorkoutState.ACTIVE, WorkoutState.PAUSED):
                return self._ignored("finish")
            self._ticker.stop()
            if self.state is WorkoutState.ACTIVE:
                self._close_segment()

            end_time = self._clock.now()
            finished = session.model_copy(
                update={
                    "end_time": end_time,
                    "total_duration": (end_time - session.start_time).total_seconds(),
                    "is_active": False,
                    "exercises": [e.model_copy(deep=True) for e in self.exercises],
                }
            )
            self.current_session = finished
            self.state = WorkoutState.FINISHED

        logger.info(
            "User %s finished workout %s (%.0fs, %d exercises)",
            self.user_id,
            finished.id,
            finished.total_duration or 0,
            len(finished.exercises),
        )
        await self._persist(finished)
        return True

    async def reset(self) -> None:
        """Discard the current session (finished or not) and go back to not_started."""
        async with self._lock:
            self._ticker.stop()
            self.state = WorkoutState.NOT_STARTED
            self.current_session = None
            self.exercises = []
            self.elapsed_time = 0.0
            self._accumulated = 0.0
            self._segment_started = None
            self.error_message = None

    # ── Exercises and sets ──────────────────────────────────────────────

    async def add_exercise(self, exercise: Exercise) -> WorkoutExercise:
        async with self._lock:
            workout_exercise = WorkoutExercise.from_exercise(exercise)
            self.exercises.append(workout_exercise)
            return workout_exercise

    async def remove_exercise(self, index: int) -> bool:
        async with self._lock:
            if not 0 <= index < len(self.exercises):
                return False
            del self.exercises[index]
            return True

    async def add_set(
        self,
        exercise_index: int,
        reps: int,
        target_rep_range: RepRange | None = None,
        weight: float | None = None,
        is_failure: bool = False,
    ) -> ExerciseSet | None:
        """Append a set. reps > 0 is the caller's job (the API validates it)."""
        async with self._lock:
            if not 0 <= exercise_index < len(self.exercises):
                return None
            new_set = ExerciseSet(
                reps=reps,
                target_rep_range=target_rep_range,
                weight=weight,
                is_failure=is_failure,
                timestamp=self._clock.now(),
            )
            self.exercises[exercise_index].sets.append(new_set)
            return new_set

    async def remove_set(self, exercise_index: int, set_index: int) -> bool:
        async with self._lock:
            if not 0 <= exercise_index < len(self.exercises):
                return False
            sets = self.exercises[exercise_index].sets
            if not 0 <= set_index < len(sets):
                return False
            del sets[set_index]
            return True

    # ── Timer ───────────────────────────────────────────────────────────

    async def tick(self) -> None:
        """Sample displayed elapsed time (called by the ticker while active)."""
        async with self._lock:
            if self.state is WorkoutState.ACTIVE:
                self.elapsed_time = self._active_seconds()

    def close(self) -> None:
        self._ticker.stop()

    # ── Summaries ───────────────────────────────────────────────────────

    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    def total_reps(self) -> int:
        return sum(s.reps for e in self.exercises for s in e.sets)

    def total_weight(self) -> float:
        return sum(s.weight or 0 for e in self.exercises for s in e.sets)

    @staticmethod
    def format_time(seconds: float) -> str:
        """``MM:SS``, or ``HH:MM:SS`` from one hour up."""
        total = int(seconds)
        hours, minutes, secs = total // 3600, total // 60 % 60, total % 60
        if hours > 0:
            return f"{hours:02d}:{minutes:02d}:{secs:02d}"
        return f"{minutes:02d}:{secs:02d}"

    def snapshot(self) -> SessionStateRead:
        return SessionStateRead(
            state=self.state,
            elapsed_time=self.elapsed_time,
            elapsed_display=self.format_time(self.elapsed_time),
            session=self.current_session,
            exercises=self.exercises,
            total_sets=self.total_sets(),
            total_reps=self.total_reps(),
            total_weight=self.total_weight(),
            error_message=self.error_message,
        )

    # ── Internals ───────────────────────────────────────────────────────

    def _begin(self) -> None:
        self.current_session = WorkoutSession(user_id=self.user_id, start_time=self._clock.now())
        self.error_message = None
        self.elapsed_time = 0.0
        self._accumulated = 0.0
        self._segment_started = self._clock.monotonic()
        self.state = WorkoutState.ACTIVE
        self._ticker.start()
        logger.info("User %s started workout %s", self.user_id, self.current_session.id)

    def _active_seconds(self) -> float:
        if self._segment_started is None:
            return self._accumulated
        return self._accumulated + (self._clock.monotonic() - self._segment_started)

    def _close_segment(self) -> None:
        self._accumulated = self._active_seconds()
        self._segment_started = None
        self.elapsed_time = self._accumulated

    def _ignored(self, operation: str) -> bool:
        if self.strict:
            raise InvalidTransition(operation, self.state.value)
        logger.debug("Ignoring %s for user %s: state is %s", operation, self.user_id, self.state.value)
        return False

    async def _persist(self, session: WorkoutSession) -> None:
        self.is_loading = True
        self.error_message = None
        try:
            await self._store.put_session(self.user_id, session)
        except Exception as e:
            # a reset or new start may have replaced the session while saving
            if self.current_session is session:
                self.error_message = f"Failed to save workout: {e}"
            logger.exception("Saving workout %s for user %s failed", session.id, self.user_id)
        finally:
            self.is_loading = False
