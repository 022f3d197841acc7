"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can
catch them with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - Database not initialized before use
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint violation occurs."""

    pass
