"""Workout statistics: totals, streak, period counts, progress series."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_clock, get_stats_loader
from app.schemas.stats import WorkoutStats
from app.services.history import StatsLoader
from app.services.timer import Clock

router = APIRouter()


@router.get("", response_model=WorkoutStats)
async def get_stats(
    loader: StatsLoader = Depends(get_stats_loader),
    clock: Clock = Depends(get_clock),
):
    """
    Recomputed from the most recent finished workouts on every call.
    Volume = weight x reps; totals.total_weight = raw sum of set weights.
    """
    stats = await loader.load_stats(now=clock.now())
    if loader.error_message:
        raise HTTPException(status_code=503, detail=loader.error_message)
    return stats
