"""Persistence layer for the processed-plan set.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - ProcessedPlanRepository: tracking of plans already scanned

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from award_scanner.persistence import init_database, get_session, ProcessedPlanRepository
    >>>
    >>> init_database("sqlite:///./data/award_scanner.db")
    >>>
    >>> with get_session() as session:
    ...     repo = ProcessedPlanRepository(session)
    ...     repo.is_processed("https://dmphub.example.org/dmps/10.80030/abc")
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import ProcessedPlanRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "ProcessedPlanRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
