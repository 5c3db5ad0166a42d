"""Database schema definition and ORM models.

This module defines the SQLAlchemy ORM model backing the candidate store and
the conversion between ORM rows and Candidate domain models. Attributes are
stored as a JSON document so every animal subtype shares one table.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column, Index, Integer, String, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from rescue_match.domain.models import Candidate

logger = logging.getLogger(__name__)

Base = declarative_base()


class AnimalModel(Base):
    """ORM model for the animals table.

    ``pk`` is a surrogate autoincrement key that preserves insertion order,
    which is the pool order the matching engines use to break ties.
    """

    __tablename__ = "animals"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True)
    animal_type = Column(String(20), nullable=False)
    attributes = Column(JSON, nullable=False, default=dict)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_animals_type", "animal_type"),)

    def to_domain(self) -> Candidate:
        """Convert ORM model to domain model.

        Returns:
            Candidate: Domain model instance
        """
        return Candidate(
            id=self.id,
            animal_type=self.animal_type,
            attributes=dict(self.attributes or {}),
        )

    @classmethod
    def from_domain(cls, candidate: Candidate, now: Optional[datetime] = None) -> "AnimalModel":
        """Create ORM model from domain model.

        Args:
            candidate: Domain model instance
            now: Timestamp for created_at/updated_at (defaults to current UTC time)

        Returns:
            AnimalModel: ORM model instance
        """
        timestamp = format_datetime(now or datetime.now(timezone.utc))
        return cls(
            id=candidate.id,
            animal_type=candidate.animal_type.value,
            attributes=dict(candidate.attributes),
            created_at=timestamp,
            updated_at=timestamp,
        )


def format_datetime(dt: datetime) -> str:
    """Format datetime as ISO 8601 UTC string with a Z suffix.

    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
