"""Document mapping for sessions and templates.

Documents are flat field mappings with camelCase keys, described by the
``*Record`` models below. Optional fields (endTime, totalDuration, weight,
targetRepRange) are omitted when absent and dates stay ``datetime`` objects;
the store decides how to encode them.

Readers never raise on bad data: a record missing a required field (or with
the wrong type) comes back as ``None`` and nested exercises/sets that fail are
dropped one by one. An optional field with a bad value falls back to its
default.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Strict,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

from app.schemas.template import WorkoutTemplate
from app.schemas.workout import ExerciseSet, RepRange, WorkoutSession

logger = logging.getLogger(__name__)

Document = dict[str, Any]

StrictDatetime = Annotated[datetime, Strict()]
Number = StrictInt | StrictFloat

DomainT = TypeVar("DomainT", bound=BaseModel)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _valid_items(items: Any, record: type[_Record]) -> list:
    """Validate list items one by one, skipping the ones that fail."""
    if not isinstance(items, list):
        raise ValueError("expected a list")
    parsed = []
    for item in items:
        try:
            parsed.append(record.model_validate(item))
        except ValidationError as e:
            logger.debug("Dropping malformed %s: %s", record.__name__, e)
    return parsed


class _Record(BaseModel):
    """Stored shape of a domain model (camelCase keys, strict scalar types)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_document(self) -> Document:
        return self.model_dump(by_alias=True, exclude_none=True)


class SetRecord(_Record):
    id: StrictStr
    reps: StrictInt
    target_rep_range: RepRange | None = None
    weight: Number | None = None
    is_failure: StrictBool = False
    timestamp: StrictDatetime

    @field_validator("target_rep_range", "weight", "is_failure", mode="wrap")
    @classmethod
    def _default_if_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].default

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class WorkoutExerciseRecord(_Record):
    id: StrictStr
    exercise_id: StrictStr
    name: StrictStr
    category: StrictStr
    image_name: StrictStr
    sets: list[SetRecord]

    @field_validator("sets", mode="before")
    @classmethod
    def _drop_invalid_sets(cls, value: Any) -> list:
        return _valid_items(value, SetRecord)


class SessionRecord(_Record):
    id: StrictStr
    user_id: StrictStr
    start_time: StrictDatetime
    end_time: StrictDatetime | None = None
    total_duration: Number | None = None
    is_active: StrictBool
    exercises: list[WorkoutExerciseRecord]

    @field_validator("end_time", "total_duration", mode="wrap")
    @classmethod
    def _none_if_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @field_validator("exercises", mode="before")
    @classmethod
    def _drop_invalid_exercises(cls, value: Any) -> list:
        return _valid_items(value, WorkoutExerciseRecord)


class TemplateExerciseRecord(_Record):
    id: StrictStr
    exercise_id: StrictStr
    name: StrictStr
    category: StrictStr
    image_name: StrictStr
    target_sets: StrictInt
    target_rep_range: RepRange


class TemplateRecord(_Record):
    id: StrictStr
    name: StrictStr
    description: StrictStr
    exercises: list[TemplateExerciseRecord]
    is_favorite: StrictBool = False
    created_at: StrictDatetime

    @field_validator("is_favorite", mode="wrap")
    @classmethod
    def _false_if_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> bool:
        try:
            return handler(value)
        except ValidationError:
            return False

    @field_validator("created_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("exercises", mode="before")
    @classmethod
    def _drop_invalid_exercises(cls, value: Any) -> list:
        return _valid_items(value, TemplateExerciseRecord)


def _to_document(record: type[_Record], model: BaseModel) -> Document:
    return record.model_validate(model.model_dump()).to_document()


def _from_document(record: type[_Record], domain: type[DomainT], data: Document) -> DomainT:
    """Raises ValidationError when the document (or the domain check) fails."""
    return domain.model_validate(record.model_validate(data).model_dump())


# ── Sets ─────────────────────────────────────────────────────────────────


def set_to_document(exercise_set: ExerciseSet) -> Document:
    return _to_document(SetRecord, exercise_set)


def set_from_document(data: Document) -> ExerciseSet | None:
    try:
        return _from_document(SetRecord, ExerciseSet, data)
    except ValidationError as e:
        logger.debug("Dropping malformed set: %s", e)
        return None


# ── Sessions ─────────────────────────────────────────────────────────────


def session_to_document(session: WorkoutSession) -> Document:
    return _to_document(SessionRecord, session)


def session_from_document(data: Document) -> WorkoutSession | None:
    try:
        return _from_document(SessionRecord, WorkoutSession, data)
    except ValidationError as e:
        logger.warning("Dropping malformed session %r: %s", data.get("id"), e)
        return None


# ── Templates ────────────────────────────────────────────────────────────


def template_to_document(template: WorkoutTemplate) -> Document:
    return _to_document(TemplateRecord, template)


def template_from_document(data: Document) -> WorkoutTemplate | None:
    try:
        return _from_document(TemplateRecord, WorkoutTemplate, data)
    except ValidationError as e:
        logger.warning("Dropping malformed template %r: %s", data.get("id"), e)
        return None
