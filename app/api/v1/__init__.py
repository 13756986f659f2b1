"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    exercises,
    health,
    session,
    stats,
    streak,
    templates,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(streak.router, prefix="/streak", tags=["streak"])
