"""
Base declarative class and mixins for SQLAlchemy models.

This module contains only the domain model base class and common mixins.
Database connection logic lives in devevent.core.database
"""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSON arrays are stored as JSONB on PostgreSQL and plain JSON elsewhere (SQLite in tests).
JSONList = JSON().with_variant(JSONB(), "postgresql")


def utc_now():
    """Returns current UTC time with timezone awareness.

    Replaces deprecated datetime.utcnow()
    """
    return datetime.now(UTC)


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models.

    All domain models (Event, Booking) should inherit from this class.
    """


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns to models.

    Usage:
        class MyModel(Base, TimestampMixin):
            __tablename__ = 'my_model'
            id = Column(Integer, primary_key=True)
    """

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
