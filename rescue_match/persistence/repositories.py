"""Data access layer (repositories) for persistence operations.

AnimalRepository implements the CandidateStore contract (find, find_by_id,
save) on top of a SQLAlchemy session and returns Candidate domain models
rather than ORM rows.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rescue_match.domain.models import AnimalType, Candidate
from rescue_match.orchestrator.store import ANIMAL_TYPE_KEY, matches_filter

from .exceptions import DataIntegrityError, PersistenceError
from .schema import AnimalModel, format_datetime

logger = logging.getLogger(__name__)


class AnimalRepository:
    """Repository for animal records, usable as a CandidateStore."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def find(self, filter: Mapping[str, Any]) -> List[Candidate]:
        """Return all animals whose fields equal every filter value.

        The ``animalType`` key is resolved against the indexed column; the
        remaining keys are compared against the stored attributes. Results
        come back in insertion order.

        Args:
            filter: Field name to required value

        Returns:
            List of Candidate domain models (empty list if none match)

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(AnimalModel).order_by(AnimalModel.pk.asc())

            if ANIMAL_TYPE_KEY in filter:
                animal_type = AnimalType.from_token(filter[ANIMAL_TYPE_KEY])
                if animal_type is None:
                    return []
                stmt = stmt.where(AnimalModel.animal_type == animal_type.value)

            animal_models = self.session.execute(stmt).scalars().all()
            candidates = [model.to_domain() for model in animal_models]

            return [candidate for candidate in candidates if matches_filter(candidate, filter)]

        except SQLAlchemyError as e:
            logger.error(f"Error finding animals with filter {dict(filter)}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to find animals: {e}") from e

    def find_by_id(self, candidate_id: str) -> Optional[Candidate]:
        """Retrieve an animal by its identifier.

        Args:
            candidate_id: Animal identifier

        Returns:
            Candidate domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(AnimalModel).where(AnimalModel.id == candidate_id)
            animal_model = self.session.execute(stmt).scalar_one_or_none()

            if animal_model is None:
                return None

            return animal_model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving animal {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve animal: {e}") from e

    def save(self, candidate: Candidate) -> Candidate:
        """Insert a new animal or replace an existing one's attributes.

        Args:
            candidate: Candidate domain model to persist

        Returns:
            Persisted Candidate domain model

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(AnimalModel).where(AnimalModel.id == candidate.id)
            existing = self.session.execute(stmt).scalar_one_or_none()

            if existing:
                existing.animal_type = candidate.animal_type.value
                # Assign a new dict so the JSON column is flagged as changed
                existing.attributes = dict(candidate.attributes)
                existing.updated_at = format_datetime(datetime.now(timezone.utc))
                self.session.flush()
                return existing.to_domain()

            animal_model = AnimalModel.from_domain(candidate)
            self.session.add(animal_model)
            self.session.flush()
            return animal_model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error saving animal {candidate.id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to save animal due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error saving animal {candidate.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save animal: {e}") from e

    def bulk_save(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        """Save multiple animals in the current transaction.

        Args:
            candidates: Candidate domain models to persist

        Returns:
            List of persisted Candidate domain models

        Raises:
            PersistenceError: If database error occurs
        """
        return [self.save(candidate) for candidate in candidates]

    def count(self) -> int:
        """Return the number of stored animals."""
        try:
            return len(self.session.execute(select(AnimalModel.pk)).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error counting animals: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count animals: {e}") from e
