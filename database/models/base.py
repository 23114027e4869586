"""
SQLAlchemy Base Model and Mixins

Provides base classes and common mixins for all models.
"""
import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_id() -> str:
    """Primary key generator for every table except subsystems and settings."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.
    
    Provides:
    - Row to dict conversion used by the API layer
    - A readable repr
    """
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary keyed by column name."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}
    
    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        pk = getattr(self, 'id', None)
        return f"<{class_name}(id={pk})>"


class TimestampMixin:
    """
    Mixin that adds created_at and last_updated_at timestamps.
    
    Usage:
        class Brain(Base, TimestampMixin):
            ...
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=True
    )
    last_updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=True
    )
