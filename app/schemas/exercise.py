"""Exercise schemas: catalog records and the app's Exercise value type."""

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import BODY_PART_ICONS, DEFAULT_EXERCISE_ICON


def icon_for_body_part(body_part: str) -> str:
    """Case-insensitive body part -> icon lookup with default fallback."""
    return BODY_PART_ICONS.get(body_part.strip().lower(), DEFAULT_EXERCISE_ICON)


class Exercise(BaseModel):
    """Catalog item as the app uses it. Only is_favorite changes after creation."""

    id: str = Field(..., min_length=1)
    title: str
    category: str
    description: str = ""
    image_name: str = DEFAULT_EXERCISE_ICON
    is_favorite: bool = False


class CatalogExercise(BaseModel):
    """Record returned by the exercise catalog API (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    body_part: str = Field(..., alias="bodyPart")
    equipment: str = ""
    target: str = ""
    secondary_muscles: list[str] | None = Field(None, alias="secondaryMuscles")
    instructions: list[str] | None = None

    @property
    def category(self) -> str:
        # "upper arms" -> "Upper Arms"
        return self.body_part.title()

    @property
    def description(self) -> str:
        return f"Targets {self.target.lower()} using {self.equipment.lower()}."

    def to_exercise(self) -> Exercise:
        return Exercise(
            id=self.id,
            title=self.name,
            category=self.category,
            description=self.description,
            image_name=icon_for_body_part(self.body_part),
            is_favorite=False,
        )


MOCK_EXERCISES = [
    Exercise(id="1", title="Bench Press", category="Chest", description="Classic compound exercise for chest development", image_name="dumbbell.fill"),
    Exercise(id="2", title="Squats", category="Legs", description="Fundamental lower body exercise", image_name="figure.walk"),
    Exercise(id="3", title="Pull-ups", category="Back", description="Upper body strength builder", image_name="figure.strengthtraining.traditional"),
    Exercise(id="4", title="Deadlift", category="Back", description="Full body compound movement", image_name="figure.strengthtraining.traditional"),
    Exercise(id="5", title="Overhead Press", category="Shoulders", description="Shoulder strength and stability", image_name="figure.strengthtraining.traditional"),
]
