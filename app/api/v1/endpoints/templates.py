"""Workout templates - save, favorite and start workouts from them."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_session_machine, get_template_manager
from app.schemas.template import WorkoutTemplate, WorkoutTemplateCreate
from app.schemas.workout import SessionStateRead
from app.services.templates import TemplateManager
from app.services.workout_session import WorkoutSessionMachine

router = APIRouter()


def _get_or_404(manager: TemplateManager, template_id: str) -> WorkoutTemplate:
    template = manager.get(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.get("", response_model=list[WorkoutTemplate])
async def list_templates(manager: TemplateManager = Depends(get_template_manager)):
    """All templates, newest first. Push Day / Pull Day are seeded on first use."""
    return manager.templates


@router.get("/favorites", response_model=list[WorkoutTemplate])
async def list_favorite_templates(manager: TemplateManager = Depends(get_template_manager)):
    return manager.favorites()


@router.post("", response_model=WorkoutTemplate, status_code=201)
async def create_template(
    payload: WorkoutTemplateCreate,
    manager: TemplateManager = Depends(get_template_manager),
):
    """Create a template with its exercises and targets."""
    template = payload.to_template()
    if not await manager.save_template(template):
        raise HTTPException(status_code=503, detail=manager.error_message)
    return manager.get(template.id) or template


@router.get("/{template_id}", response_model=WorkoutTemplate)
async def get_template(template_id: str, manager: TemplateManager = Depends(get_template_manager)):
    return _get_or_404(manager, template_id)


@router.put("/{template_id}", response_model=WorkoutTemplate)
async def replace_template(
    template_id: str,
    payload: WorkoutTemplateCreate,
    manager: TemplateManager = Depends(get_template_manager),
):
    """Upsert: replace name/description/exercises, keep id and created_at."""
    existing = _get_or_404(manager, template_id)
    updated = payload.to_template().model_copy(
        update={"id": existing.id, "created_at": existing.created_at}
    )
    if not await manager.save_template(updated):
        raise HTTPException(status_code=503, detail=manager.error_message)
    return manager.get(template_id) or updated


@router.post("/{template_id}/favorite", response_model=WorkoutTemplate)
async def toggle_favorite(template_id: str, manager: TemplateManager = Depends(get_template_manager)):
    """Flip the favorite flag."""
    _get_or_404(manager, template_id)
    if not await manager.toggle_favorite(template_id):
        raise HTTPException(status_code=503, detail=manager.error_message)
    return _get_or_404(manager, template_id)


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: str, manager: TemplateManager = Depends(get_template_manager)):
    """Delete a template."""
    _get_or_404(manager, template_id)
    if not await manager.delete_template(template_id):
        raise HTTPException(status_code=503, detail=manager.error_message)
    return None


@router.post("/{template_id}/instantiate", response_model=SessionStateRead, status_code=201)
async def instantiate_template(
    template_id: str,
    manager: TemplateManager = Depends(get_template_manager),
    machine: WorkoutSessionMachine = Depends(get_session_machine),
):
    """Start a workout from a template: one empty exercise per template entry."""
    template = _get_or_404(manager, template_id)
    if not await machine.start_from_template(template):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot start a workout that is {machine.state.value}",
        )
    return machine.snapshot()
