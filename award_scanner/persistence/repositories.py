"""Data access layer (repositories) for persistence operations.

Repositories encapsulate database operations and return domain models
rather than ORM models.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from award_scanner.domain.models import ProcessedPlan
from award_scanner.utils.timestamps import format_for_storage

from .exceptions import DataIntegrityError, PersistenceError
from .schema import ProcessedPlanModel

logger = logging.getLogger(__name__)


class ProcessedPlanRepository:
    """Repository for the set of plans that have already been scanned."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def is_processed(self, plan_uri: str) -> bool:
        """Check whether a plan has been scanned before.

        Args:
            plan_uri: Plan uri

        Returns:
            True if a processed record exists

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            return self.session.get(ProcessedPlanModel, plan_uri) is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking processed state for {plan_uri}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to check processed plan: {e}") from e

    def get(self, plan_uri: str) -> Optional[ProcessedPlan]:
        """Retrieve the processed record for a plan.

        Args:
            plan_uri: Plan uri

        Returns:
            ProcessedPlan if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ProcessedPlanModel, plan_uri)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving processed plan {plan_uri}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve processed plan: {e}") from e

    def mark_processed(self, record: ProcessedPlan) -> ProcessedPlan:
        """Insert or update the processed record for a plan.

        Args:
            record: ProcessedPlan to persist

        Returns:
            Persisted ProcessedPlan

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(ProcessedPlanModel, record.plan_uri)

            if existing:
                existing.doi = record.doi
                existing.processed_at = format_for_storage(record.processed_at)
                existing.outcome = record.outcome
                existing.award_id = record.award_id
                self.session.flush()
                return existing.to_domain()

            model = ProcessedPlanModel.from_domain(record)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error marking plan {record.plan_uri} processed: {e}", exc_info=True
            )
            raise DataIntegrityError(
                f"Failed to mark plan processed due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error marking plan {record.plan_uri} processed: {e}", exc_info=True)
            raise PersistenceError(f"Failed to mark plan processed: {e}") from e

    def list_uris(self) -> List[str]:
        """List all processed plan uris, oldest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(ProcessedPlanModel.plan_uri).order_by(
                ProcessedPlanModel.processed_at.asc(), ProcessedPlanModel.plan_uri.asc()
            )
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing processed plans: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list processed plans: {e}") from e

    def count(self) -> int:
        """Number of processed plans.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(func.count()).select_from(ProcessedPlanModel)
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting processed plans: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count processed plans: {e}") from e
