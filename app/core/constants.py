"""Application constants."""

# Document collections (per user)
WORKOUTS_COLLECTION = "workouts"
TEMPLATES_COLLECTION = "workoutTemplates"

# History reads
HISTORY_LIMIT = 50
STATS_HISTORY_LIMIT = 100

# Statistics windows
PROGRESS_WINDOW_DAYS = 30
EXERCISE_PROGRESS_SESSION_LIMIT = 20

# Catalog: body part -> icon name (keys lower-case)
BODY_PART_ICONS = {
    "chest": "figure.strengthtraining.traditional",
    "back": "figure.strengthtraining.traditional",
    "shoulders": "figure.strengthtraining.traditional",
    "upper arms": "figure.strengthtraining.traditional",
    "lower arms": "figure.strengthtraining.traditional",
    "waist": "figure.core.training",
    "upper legs": "figure.walk",
    "lower legs": "figure.walk",
    "neck": "figure.strengthtraining.traditional",
    "cardio": "heart.fill",
}
DEFAULT_EXERCISE_ICON = "dumbbell.fill"

EQUIPMENT_TYPES = [
    "barbell",
    "dumbbell",
    "kettlebell",
    "cable",
    "machine",
    "bodyweight",
    "resistance band",
    "medicine ball",
    "stability ball",
]
