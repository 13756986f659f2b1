"""Live workout session: lifecycle transitions, exercises and sets."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_session_machine
from app.schemas.workout import (
    AddExerciseRequest,
    AddSetRequest,
    ExerciseSet,
    SessionStateRead,
)
from app.services.workout_session import WorkoutSessionMachine

router = APIRouter()


def _ignored(machine: WorkoutSessionMachine, operation: str) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail=f"Cannot {operation} a workout that is {machine.state.value}",
    )


@router.get("", response_model=SessionStateRead)
async def get_session_state(machine: WorkoutSessionMachine = Depends(get_session_machine)):
    """Current state, elapsed (active) time, working exercises and totals."""
    return machine.snapshot()


@router.post("/start", response_model=SessionStateRead)
async def start_workout(machine: WorkoutSessionMachine = Depends(get_session_machine)):
    """Start an empty workout (only from not_started)."""
    if not await machine.start():
        raise _ignored(machine, "start")
    return machine.snapshot()


@router.post("/pause", response_model=SessionStateRead)
async def pause_workout(machine: WorkoutSessionMachine = Depends(get_session_machine)):
    if not await machine.pause():
        raise _ignored(machine, "pause")
    return machine.snapshot()


@router.post("/resume", response_model=SessionStateRead)
async def resume_workout(machine: WorkoutSessionMachine = Depends(get_session_machine)):
    if not await machine.resume():
        raise _ignored(machine, "resume")
    return machine.snapshot()


@router.post("/finish", response_model=SessionStateRead)
async def finish_workout(machine: WorkoutSessionMachine = Depends(get_session_machine)):
    """Finish and save. A failed save still finishes; see error_message."""
    if not await machine.finish():
        raise _ignored(machine, "finish")
    return machine.snapshot()


@router.post("/reset", response_model=SessionStateRead)
async def reset_workout(machine: WorkoutSessionMachine = Depends(get_session_machine)):
    """Discard the current session and go back to not_started."""
    await machine.reset()
    return machine.snapshot()


@router.post("/exercises", response_model=SessionStateRead, status_code=201)
async def add_exercise(
    payload: AddExerciseRequest,
    machine: WorkoutSessionMachine = Depends(get_session_machine),
):
    """Append an exercise (snapshot of name/category/image) with no sets."""
    await machine.add_exercise(payload)
    return machine.snapshot()


@router.delete("/exercises/{index}", status_code=204)
async def remove_exercise(index: int, machine: WorkoutSessionMachine = Depends(get_session_machine)):
    if not await machine.remove_exercise(index):
        raise HTTPException(status_code=404, detail="Exercise not found")
    return None


@router.post("/exercises/{index}/sets", response_model=ExerciseSet, status_code=201)
async def add_set(
    index: int,
    payload: AddSetRequest,
    machine: WorkoutSessionMachine = Depends(get_session_machine),
):
    """Append a set to the exercise at ``index`` (sets keep insertion order)."""
    new_set = await machine.add_set(
        index,
        payload.reps,
        target_rep_range=payload.target_rep_range,
        weight=payload.weight,
        is_failure=payload.is_failure,
    )
    if new_set is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return new_set


@router.delete("/exercises/{index}/sets/{set_index}", status_code=204)
async def remove_set(
    index: int,
    set_index: int,
    machine: WorkoutSessionMachine = Depends(get_session_machine),
):
    if not await machine.remove_set(index, set_index):
        raise HTTPException(status_code=404, detail="Set not found")
    return None
