"""Finished-workout history and the stats read path."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo

from app.core.constants import HISTORY_LIMIT, STATS_HISTORY_LIMIT
from app.schemas.stats import WorkoutStats
from app.schemas.workout import WorkoutSession
from app.services.stats import compute_stats
from app.services.store import WorkoutStore

logger = logging.getLogger(__name__)


class WorkoutHistory:
    """A user's finished workouts, newest first."""

    def __init__(self, user_id: str, store: WorkoutStore, limit: int = HISTORY_LIMIT):
        self.user_id = user_id
        self._store = store
        self._limit = limit
        self.workouts: list[WorkoutSession] = []
        self.error_message: str | None = None

    async def load_history(self) -> list[WorkoutSession]:
        self.error_message = None
        try:
            self.workouts = await self._store.query_sessions(
                self.user_id, is_active=False, limit=self._limit
            )
        except Exception as e:
            self.error_message = f"Failed to load workout history: {e}"
            logger.exception("Loading history for user %s failed", self.user_id)
        return self.workouts

    async def refresh(self) -> list[WorkoutSession]:
        return await self.load_history()

    async def get_workout(self, session_id: str) -> WorkoutSession | None:
        """One finished workout by id, however old; active sessions are not history."""
        self.error_message = None
        try:
            workout = await self._store.get_session(self.user_id, session_id)
        except Exception as e:
            self.error_message = f"Failed to load workout: {e}"
            logger.exception("Loading workout %s for user %s failed", session_id, self.user_id)
            return None
        if workout is None or workout.is_active:
            return None
        return workout

    async def delete_workout(self, session_id: str) -> bool:
        """Delete from the store; the local list only changes on success."""
        self.error_message = None
        try:
            await self._store.delete_session(self.user_id, session_id)
        except Exception as e:
            self.error_message = f"Failed to delete workout: {e}"
            logger.exception("Deleting workout %s for user %s failed", session_id, self.user_id)
            return False
        self.workouts = [w for w in self.workouts if w.id != session_id]
        return True


class StatsLoader:
    """Reads recent history through the store and aggregates it."""

    def __init__(
        self,
        user_id: str,
        store: WorkoutStore,
        tz: tzinfo = timezone.utc,
        first_weekday: int = 0,
        limit: int = STATS_HISTORY_LIMIT,
    ):
        self.user_id = user_id
        self._store = store
        self._tz = tz
        self._first_weekday = first_weekday
        self._limit = limit
        self.error_message: str | None = None

    async def load_stats(self, now: datetime | None = None) -> WorkoutStats:
        """Always recomputes; on a store failure the stats are computed over no sessions."""
        self.error_message = None
        sessions: list[WorkoutSession] = []
        try:
            sessions = await self._store.query_sessions(self.user_id, is_active=False, limit=self._limit)
        except Exception as e:
            self.error_message = f"Failed to load workout data: {e}"
            logger.exception("Loading stats history for user %s failed", self.user_id)
        return compute_stats(
            sessions,
            now or datetime.now(timezone.utc),
            self._tz,
            self._first_weekday,
        )
