"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.template import TemplateDocument
from app.models.workout import WorkoutDocument

__all__ = [
    "TemplateDocument",
    "WorkoutDocument",
]
