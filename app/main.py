"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router
from app.core.config import Settings, get_settings
from app.core.logging_config import configure_logging
from app.db.session import async_session_maker, engine
from app.services.catalog import ExerciseCatalogClient
from app.services.session_registry import SessionRegistry
from app.services.store import InMemoryWorkoutStore, SqlWorkoutStore, WorkoutStore
from app.services.timer import Clock, SystemClock

logger = logging.getLogger(__name__)


def _build_store(settings: Settings) -> WorkoutStore:
    if settings.store_backend == "memory":
        return InMemoryWorkoutStore()
    return SqlWorkoutStore(async_session_maker)


def create_application(
    settings: Settings | None = None,
    store: WorkoutStore | None = None,
    catalog: ExerciseCatalogClient | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: logging + shared services; shutdown: stop tickers, close clients."""
        configure_logging(settings.log_level)
        app.state.clock = clock or SystemClock()
        app.state.store = store or _build_store(settings)
        app.state.catalog = catalog or ExerciseCatalogClient(
            settings.exercise_api_base_url,
            settings.exercise_api_key,
            settings.exercise_api_host,
            timeout=settings.exercise_api_timeout,
        )
        app.state.session_registry = SessionRegistry(
            app.state.store,
            clock=app.state.clock,
            tick_interval=settings.tick_interval_seconds,
            idle_timeout=settings.session_idle_timeout_seconds,
        )
        logger.info("%s started (store=%s)", settings.app_name, type(app.state.store).__name__)
        yield
        app.state.session_registry.close()
        await app.state.catalog.aclose()
        await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug, localhost in dev, CORS_ORIGINS in production
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
