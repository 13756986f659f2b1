"""Workout templates: cached per user, persisted through the store."""

from __future__ import annotations

import logging

from app.schemas.template import TemplateExercise, WorkoutTemplate
from app.schemas.workout import RepRange
from app.services.store import WorkoutStore

logger = logging.getLogger(__name__)

PUSH_DAY_ID = "default-push-day"
PULL_DAY_ID = "default-pull-day"


def default_templates() -> list[WorkoutTemplate]:
    """Seed templates for a user with none. Push Day starts as a favorite.

    Ids are fixed: concurrent first-use seeding for one user upserts the
    same two documents.
    """
    push = WorkoutTemplate(
        id=PUSH_DAY_ID,
        name="Push Day",
        description="Chest, shoulders, and triceps workout",
        is_favorite=True,
        exercises=[
            TemplateExercise(
                exercise_id="bench-press",
                name="Bench Press",
                category="Chest",
                image_name="dumbbell.fill",
                target_sets=4,
                target_rep_range=RepRange(min=8, max=12),
            ),
            TemplateExercise(
                exercise_id="shoulder-press",
                name="Shoulder Press",
                category="Shoulders",
                image_name="dumbbell.fill",
                target_sets=3,
                target_rep_range=RepRange(min=10, max=15),
            ),
            TemplateExercise(
                exercise_id="tricep-dips",
                name="Tricep Dips",
                category="Arms",
                image_name="figure.strengthtraining.traditional",
                target_sets=3,
                target_rep_range=RepRange(min=12, max=15),
            ),
        ],
    )
    pull = WorkoutTemplate(
        id=PULL_DAY_ID,
        name="Pull Day",
        description="Back and biceps focused workout",
        exercises=[
            TemplateExercise(
                exercise_id="pull-ups",
                name="Pull Ups",
                category="Back",
                image_name="figure.strengthtraining.traditional",
                target_sets=4,
                target_rep_range=RepRange(min=6, max=10),
            ),
            TemplateExercise(
                exercise_id="barbell-rows",
                name="Barbell Rows",
                category="Back",
                image_name="dumbbell.fill",
                target_sets=4,
                target_rep_range=RepRange(min=8, max=12),
            ),
            TemplateExercise(
                exercise_id="bicep-curls",
                name="Bicep Curls",
                category="Arms",
                image_name="dumbbell.fill",
                target_sets=3,
                target_rep_range=RepRange(min=12, max=15),
            ),
        ],
    )
    return [push, pull]


class TemplateManager:
    """CRUD + favorites over one user's templates.

    ``templates`` is the in-memory cache (newest first). Store failures leave
    the cache as it was and set ``error_message``.
    """

    def __init__(self, user_id: str, store: WorkoutStore):
        self.user_id = user_id
        self._store = store
        self.templates: list[WorkoutTemplate] = []
        self.error_message: str | None = None
        self._loaded = False

    def get(self, template_id: str) -> WorkoutTemplate | None:
        return next((t for t in self.templates if t.id == template_id), None)

    def favorites(self) -> list[WorkoutTemplate]:
        return [t for t in self.templates if t.is_favorite]

    async def load_templates(self) -> bool:
        self.error_message = None
        try:
            self.templates = await self._store.query_templates(self.user_id)
        except Exception as e:
            self.error_message = f"Failed to load workout templates: {e}"
            logger.exception("Loading templates for user %s failed", self.user_id)
            return False
        self._loaded = True
        return True

    async def save_template(self, template: WorkoutTemplate) -> bool:
        """Upsert by id, then refresh the cache from the store."""
        self.error_message = None
        try:
            await self._store.put_template(self.user_id, template)
        except Exception as e:
            self.error_message = f"Failed to save workout template: {e}"
            logger.exception("Saving template %s for user %s failed", template.id, self.user_id)
            return False
        return await self.load_templates()

    async def toggle_favorite(self, template_id: str) -> bool:
        """Flip is_favorite and save. Unknown ids are ignored."""
        template = self.get(template_id)
        if template is None:
            return False
        flipped = template.model_copy(update={"is_favorite": not template.is_favorite})
        return await self.save_template(flipped)

    async def delete_template(self, template_id: str) -> bool:
        self.error_message = None
        try:
            await self._store.delete_template(self.user_id, template_id)
        except Exception as e:
            self.error_message = f"Failed to delete workout template: {e}"
            logger.exception("Deleting template %s for user %s failed", template_id, self.user_id)
            return False
        self.templates = [t for t in self.templates if t.id != template_id]
        return True

    async def create_default_templates(self) -> bool:
        """Seed Push Day / Pull Day, only while the collection is empty."""
        if self.templates:
            return False
        logger.info("Seeding default templates for user %s", self.user_id)
        for template in default_templates():
            if not await self.save_template(template):
                return False
        return True

    async def ensure_loaded(self) -> None:
        """First-use bootstrap: load, then seed defaults if there are none."""
        if self._loaded:
            return
        if await self.load_templates():
            await self.create_default_templates()
