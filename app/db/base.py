"""SQLAlchemy declarative base and metadata."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base for all document tables."""

    pass
