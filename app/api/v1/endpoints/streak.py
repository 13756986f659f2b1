"""Streak endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_clock, get_stats_loader
from app.schemas.stats import StreakRead
from app.services.history import StatsLoader
from app.services.timer import Clock

router = APIRouter()


@router.get("", response_model=StreakRead)
async def get_streak(
    loader: StatsLoader = Depends(get_stats_loader),
    clock: Clock = Depends(get_clock),
):
    """
    Returns current workout streak (consecutive days with at least 1 workout,
    ending today or yesterday), longest ever streak, and the date of the last workout.
    """
    stats = await loader.load_stats(now=clock.now())
    if loader.error_message:
        raise HTTPException(status_code=503, detail=loader.error_message)
    return StreakRead(
        current_streak=stats.workout_streak,
        longest_streak=stats.longest_streak,
        last_workout_date=stats.last_workout_date,
    )
