"""SQL-backed candidate store.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository
    - AnimalRepository: CandidateStore implementation over a session

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from rescue_match.persistence import init_database, get_session, AnimalRepository
    >>> init_database("sqlite:///./data/rescue_match.db")
    >>> with get_session() as session:
    ...     repo = AnimalRepository(session)
    ...     dogs = repo.find({"animalType": "dog", "adoptable": True})
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import AnimalRepository

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "AnimalRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
