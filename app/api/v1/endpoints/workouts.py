"""Finished workout history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_workout_history
from app.schemas.workout import WorkoutSession
from app.services.history import WorkoutHistory

router = APIRouter()


@router.get("", response_model=list[WorkoutSession])
async def list_workouts(history: WorkoutHistory = Depends(get_workout_history)):
    """Finished workouts, newest first (malformed records are skipped)."""
    workouts = await history.load_history()
    if history.error_message:
        raise HTTPException(status_code=503, detail=history.error_message)
    return workouts


@router.get("/{workout_id}", response_model=WorkoutSession)
async def get_workout(workout_id: str, history: WorkoutHistory = Depends(get_workout_history)):
    """One finished workout."""
    workout = await history.get_workout(workout_id)
    if history.error_message:
        raise HTTPException(status_code=503, detail=history.error_message)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(workout_id: str, history: WorkoutHistory = Depends(get_workout_history)):
    """Delete a finished workout."""
    if not await history.delete_workout(workout_id):
        raise HTTPException(status_code=503, detail=history.error_message)
    return None
