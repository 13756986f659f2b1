"""FastAPI dependency providers.

Shared services (store, session registry, catalog client) are built once in
the application lifespan and kept on ``app.state``; per-user objects are
built here from the caller's user id.
"""

from fastapi import Depends, Header, HTTPException, Request

from app.core.config import Settings, get_settings
from app.services.catalog import ExerciseCatalogClient
from app.services.history import StatsLoader, WorkoutHistory
from app.services.session_registry import SessionRegistry
from app.services.store import WorkoutStore
from app.services.templates import TemplateManager
from app.services.timer import Clock
from app.services.workout_session import WorkoutSessionMachine


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """User id from the identity provider, forwarded as the X-User-Id header."""
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_store(request: Request) -> WorkoutStore:
    return request.app.state.store


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry


def get_catalog(request: Request) -> ExerciseCatalogClient:
    return request.app.state.catalog


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


async def get_session_machine(
    user_id: str = Depends(get_current_user_id),
    registry: SessionRegistry = Depends(get_session_registry),
) -> WorkoutSessionMachine:
    return registry.get(user_id)


async def get_template_manager(
    user_id: str = Depends(get_current_user_id),
    store: WorkoutStore = Depends(get_store),
) -> TemplateManager:
    """Template manager with its cache loaded (and defaults seeded on first use)."""
    manager = TemplateManager(user_id, store)
    await manager.ensure_loaded()
    if manager.error_message:
        raise HTTPException(status_code=503, detail=manager.error_message)
    return manager


def get_workout_history(
    user_id: str = Depends(get_current_user_id),
    store: WorkoutStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> WorkoutHistory:
    return WorkoutHistory(user_id, store, limit=settings.history_limit)


def get_stats_loader(
    user_id: str = Depends(get_current_user_id),
    store: WorkoutStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> StatsLoader:
    return StatsLoader(
        user_id,
        store,
        tz=settings.tzinfo,
        first_weekday=settings.first_weekday,
        limit=settings.stats_history_limit,
    )
