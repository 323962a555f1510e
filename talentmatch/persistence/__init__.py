"""Persistence layer: keyword catalog, profiles and keyword selections.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - KeywordRepository: the shared keyword catalog
    - ProfileRepository: job seeker and employer profiles
    - KeywordSelectionRepository: per-party selections, with atomic replace

    # Exceptions
    - PersistenceError and its subclasses

Example usage:
    >>> from talentmatch.persistence import init_database, get_session, KeywordSelectionRepository
    >>> init_database("sqlite:///./data/talentmatch.db")
    >>> with get_session() as session:
    ...     selections = KeywordSelectionRepository(session).get_for_party("employer-1")
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import KeywordRepository, KeywordSelectionRepository, ProfileRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "KeywordRepository",
    "ProfileRepository",
    "KeywordSelectionRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
