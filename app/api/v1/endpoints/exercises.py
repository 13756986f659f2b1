"""Exercise catalog endpoints (proxied to the third-party catalog)."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_catalog
from app.schemas.exercise import MOCK_EXERCISES, Exercise
from app.services.catalog import ExerciseCatalogClient

router = APIRouter()


class ExerciseListRead(BaseModel):
    """Catalog results; an empty list with error_message means the catalog failed."""

    exercises: list[Exercise] = []
    error_message: str | None = None


class BodyPartListRead(BaseModel):
    body_parts: list[str] = []
    error_message: str | None = None


@router.get("", response_model=ExerciseListRead)
async def search_exercises(
    query: str = "",
    body_part: str | None = None,
    equipment: str | None = None,
    catalog: ExerciseCatalogClient = Depends(get_catalog),
):
    """Search by name, or list a body part, with optional text/equipment filters."""
    exercises = await catalog.search(query, body_part=body_part, equipment=equipment)
    return ExerciseListRead(exercises=exercises, error_message=catalog.error_message)


@router.get("/body-parts", response_model=BodyPartListRead)
async def list_body_parts(catalog: ExerciseCatalogClient = Depends(get_catalog)):
    body_parts = await catalog.list_body_parts()
    return BodyPartListRead(body_parts=body_parts, error_message=catalog.error_message)


@router.get("/body-parts/{body_part}", response_model=ExerciseListRead)
async def list_exercises_by_body_part(
    body_part: str,
    catalog: ExerciseCatalogClient = Depends(get_catalog),
):
    records = await catalog.list_exercises_by_body_part(body_part)
    return ExerciseListRead(
        exercises=[r.to_exercise() for r in records],
        error_message=catalog.error_message,
    )


@router.get("/equipment", response_model=list[str])
async def list_equipment(catalog: ExerciseCatalogClient = Depends(get_catalog)):
    return catalog.list_equipment()


@router.get("/defaults", response_model=list[Exercise])
async def list_default_exercises():
    """Built-in exercises, usable when the catalog is unreachable."""
    return MOCK_EXERCISES
