"""Async database engine and session factory."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.db import json_codec

settings = get_settings()


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Engine whose JSON columns keep datetimes (see json_codec)."""
    return create_async_engine(
        url,
        json_serializer=json_codec.dumps,
        json_deserializer=json_codec.loads,
        **kwargs,
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine = build_engine(
    settings.async_database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.debug,
)

async_session_maker = build_session_maker(engine)

