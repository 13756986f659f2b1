"""Document store gateway for sessions and templates.

Collections are keyed by user id: ``workouts`` holds finished (and any
explicitly saved) sessions, ``workoutTemplates`` holds templates. Reads return
parsed domain objects and silently skip records that fail to parse.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.constants import TEMPLATES_COLLECTION, WORKOUTS_COLLECTION
from app.core.errors import PersistenceError
from app.models.template import TemplateDocument
from app.models.workout import WorkoutDocument
from app.schemas.template import WorkoutTemplate
from app.schemas.workout import WorkoutSession
from app.services.serialization import (
    Document,
    session_from_document,
    session_to_document,
    template_from_document,
    template_to_document,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@runtime_checkable
class WorkoutStore(Protocol):
    """Persistence operations the session engine needs."""

    async def put_session(self, user_id: str, session: WorkoutSession) -> None: ...

    async def get_session(self, user_id: str, session_id: str) -> WorkoutSession | None: ...

    async def query_sessions(
        self, user_id: str, is_active: bool = False, limit: int = 50
    ) -> list[WorkoutSession]: ...

    async def delete_session(self, user_id: str, session_id: str) -> None: ...

    async def put_template(self, user_id: str, template: WorkoutTemplate) -> None: ...

    async def query_templates(self, user_id: str) -> list[WorkoutTemplate]: ...

    async def delete_template(self, user_id: str, template_id: str) -> None: ...


def _parse_sessions(documents: list[Document]) -> list[WorkoutSession]:
    sessions = [session_from_document(d) for d in documents]
    parsed = [s for s in sessions if s is not None]
    if len(parsed) != len(documents):
        logger.warning("Skipped %d malformed session record(s)", len(documents) - len(parsed))
    return parsed


def _parse_templates(documents: list[Document]) -> list[WorkoutTemplate]:
    templates = [template_from_document(d) for d in documents]
    parsed = [t for t in templates if t is not None]
    if len(parsed) != len(documents):
        logger.warning("Skipped %d malformed template record(s)", len(documents) - len(parsed))
    return parsed


def _as_sort_time(value: object) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return _EPOCH


class InMemoryWorkoutStore:
    """Dict-backed store: users -> collection -> document id -> document.

    Documents are deep-copied in and out, so callers never share state with it.
    Used for local development (STORE_BACKEND=memory) and tests.
    """

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, dict[str, Document]]] = {}

    def _collection(self, user_id: str, name: str) -> dict[str, Document]:
        return self.documents.setdefault(user_id, {}).setdefault(name, {})

    def put_document(self, user_id: str, collection: str, document: Document) -> None:
        """Raw write, bypassing serialization (imports and fixtures)."""
        self._collection(user_id, collection)[str(document.get("id"))] = copy.deepcopy(document)

    async def put_session(self, user_id: str, session: WorkoutSession) -> None:
        self.put_document(user_id, WORKOUTS_COLLECTION, session_to_document(session))

    async def get_session(self, user_id: str, session_id: str) -> WorkoutSession | None:
        document = self._collection(user_id, WORKOUTS_COLLECTION).get(session_id)
        if document is None:
            return None
        return session_from_document(copy.deepcopy(document))

    async def query_sessions(
        self, user_id: str, is_active: bool = False, limit: int = 50
    ) -> list[WorkoutSession]:
        docs = [
            d
            for d in self._collection(user_id, WORKOUTS_COLLECTION).values()
            if d.get("isActive") is is_active
        ]
        docs.sort(key=lambda d: _as_sort_time(d.get("startTime")), reverse=True)
        return _parse_sessions([copy.deepcopy(d) for d in docs[:limit]])

    async def delete_session(self, user_id: str, session_id: str) -> None:
        self._collection(user_id, WORKOUTS_COLLECTION).pop(session_id, None)

    async def put_template(self, user_id: str, template: WorkoutTemplate) -> None:
        self.put_document(user_id, TEMPLATES_COLLECTION, template_to_document(template))

    async def query_templates(self, user_id: str) -> list[WorkoutTemplate]:
        docs = list(self._collection(user_id, TEMPLATES_COLLECTION).values())
        docs.sort(key=lambda d: _as_sort_time(d.get("createdAt")), reverse=True)
        return _parse_templates([copy.deepcopy(d) for d in docs])

    async def delete_template(self, user_id: str, template_id: str) -> None:
        self._collection(user_id, TEMPLATES_COLLECTION).pop(template_id, None)


class SqlWorkoutStore:
    """Store backed by the workout_documents / template_documents tables."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def put_session(self, user_id: str, session: WorkoutSession) -> None:
        row = WorkoutDocument(
            user_id=user_id,
            id=session.id,
            start_time=session.start_time,
            is_active=session.is_active,
            data=session_to_document(session),
        )
        await self._write(row, f"save session {session.id}")

    async def get_session(self, user_id: str, session_id: str) -> WorkoutSession | None:
        stmt = select(WorkoutDocument.data).where(
            WorkoutDocument.user_id == user_id, WorkoutDocument.id == session_id
        )
        documents = await self._read(stmt, f"load session {session_id}")
        return session_from_document(documents[0]) if documents else None

    async def query_sessions(
        self, user_id: str, is_active: bool = False, limit: int = 50
    ) -> list[WorkoutSession]:
        stmt = (
            select(WorkoutDocument.data)
            .where(WorkoutDocument.user_id == user_id, WorkoutDocument.is_active == is_active)
            .order_by(WorkoutDocument.start_time.desc())
            .limit(limit)
        )
        return _parse_sessions(await self._read(stmt, "load sessions"))

    async def delete_session(self, user_id: str, session_id: str) -> None:
        stmt = delete(WorkoutDocument).where(
            WorkoutDocument.user_id == user_id, WorkoutDocument.id == session_id
        )
        await self._execute(stmt, f"delete session {session_id}")

    async def put_template(self, user_id: str, template: WorkoutTemplate) -> None:
        row = TemplateDocument(
            user_id=user_id,
            id=template.id,
            created_at=template.created_at,
            data=template_to_document(template),
        )
        await self._write(row, f"save template {template.id}")

    async def query_templates(self, user_id: str) -> list[WorkoutTemplate]:
        stmt = (
            select(TemplateDocument.data)
            .where(TemplateDocument.user_id == user_id)
            .order_by(TemplateDocument.created_at.desc())
        )
        return _parse_templates(await self._read(stmt, "load templates"))

    async def delete_template(self, user_id: str, template_id: str) -> None:
        stmt = delete(TemplateDocument).where(
            TemplateDocument.user_id == user_id, TemplateDocument.id == template_id
        )
        await self._execute(stmt, f"delete template {template_id}")

    async def _write(self, row: WorkoutDocument | TemplateDocument, what: str) -> None:
        try:
            async with self._session_maker() as db, db.begin():
                # merge = upsert by primary key (user_id, id)
                await db.merge(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not {what}: {e}") from e

    async def _execute(self, stmt, what: str) -> None:
        try:
            async with self._session_maker() as db, db.begin():
                await db.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not {what}: {e}") from e

    async def _read(self, stmt, what: str) -> list[Document]:
        try:
            async with self._session_maker() as db:
                result = await db.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not {what}: {e}") from e
        return [r for r in rows if isinstance(r, dict)]
