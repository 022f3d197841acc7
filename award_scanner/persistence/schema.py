"""Database schema definition and ORM models.

Defines the processed_plans table that records which plans have already
been scanned, and converts between ORM rows and domain models.
"""

import logging

from sqlalchemy import Column, Index, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from award_scanner.domain.models import ProcessedPlan
from award_scanner.utils.timestamps import format_for_storage, parse_from_storage

logger = logging.getLogger(__name__)

Base = declarative_base()


class ProcessedPlanModel(Base):
    """ORM model for processed_plans table.

    One row per plan uri; a plan with a row here is never scanned again.
    """

    __tablename__ = "processed_plans"

    plan_uri = Column(String(512), primary_key=True, nullable=False)
    doi = Column(String(255), nullable=True)

    # Stored as ISO 8601 strings
    processed_at = Column(String(50), nullable=False)

    outcome = Column(String(32), nullable=False)
    award_id = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_processed_plans_doi", "doi"),
        Index("idx_processed_plans_processed_at", "processed_at"),
    )

    def to_domain(self) -> ProcessedPlan:
        """Convert ORM model to domain model."""
        return ProcessedPlan(
            plan_uri=self.plan_uri,
            doi=self.doi,
            processed_at=parse_from_storage(self.processed_at),
            outcome=self.outcome,
            award_id=self.award_id,
        )

    @classmethod
    def from_domain(cls, record: ProcessedPlan) -> "ProcessedPlanModel":
        """Create ORM model from domain model."""
        return cls(
            plan_uri=record.plan_uri,
            doi=record.doi,
            processed_at=format_for_storage(record.processed_at),
            outcome=record.outcome,
            award_id=record.award_id,
        )


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
