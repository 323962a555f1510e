"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError for easy catching.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL
    - Database file not accessible
    - get_session() called before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation needs a record that does not exist.

    Plain lookups return None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a constraint is violated.

    Examples:
    - Selection of a keyword missing from the catalog (foreign key)
    - Same (party, keyword) pair inserted twice (primary key)
    - Priority outside (1, 2) (check constraint)
    """

    pass
