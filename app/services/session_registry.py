"""One session machine per user, created on first use and dropped once idle."""

from __future__ import annotations

import logging

from app.services.store import WorkoutStore
from app.services.timer import Clock, SystemClock
from app.services.workout_session import WorkoutSessionMachine

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(
        self,
        store: WorkoutStore,
        clock: Clock | None = None,
        tick_interval: float = 1.0,
        strict: bool = False,
        idle_timeout: float = 3600.0,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._tick_interval = tick_interval
        self._strict = strict
        self._idle_timeout = idle_timeout
        self._machines: dict[str, WorkoutSessionMachine] = {}
        self._last_used: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._machines)

    def get(self, user_id: str) -> WorkoutSessionMachine:
        now = self._clock.monotonic()
        machine = self._machines.get(user_id)
        if machine is None:
            self.evict_idle(now)
            machine = WorkoutSessionMachine(
                user_id,
                self._store,
                clock=self._clock,
                tick_interval=self._tick_interval,
                strict=self._strict,
            )
            self._machines[user_id] = machine
            logger.debug("Created session machine for user %s", user_id)
        self._last_used[user_id] = now
        return machine

    def evict_idle(self, now: float | None = None) -> int:
        """Drop machines unused for ``idle_timeout`` seconds that hold no workout.

        Active, paused or unsaved sessions are kept however old they are.
        """
        if now is None:
            now = self._clock.monotonic()
        stale = [
            user_id
            for user_id, machine in self._machines.items()
            if now - self._last_used[user_id] >= self._idle_timeout and machine.is_idle
        ]
        for user_id in stale:
            self._machines.pop(user_id).close()
            del self._last_used[user_id]
        if stale:
            logger.debug("Evicted %d idle session machines", len(stale))
        return len(stale)

    def close(self) -> None:
        """Cancel every machine's ticker (shutdown)."""
        for machine in self._machines.values():
            machine.close()
        self._machines.clear()
        self._last_used.clear()
