"""Shared pytest fixtures for the DMP Award Scanner tests."""

from pathlib import Path

import pytest

from award_scanner.domain.models import Candidate, Plan
from award_scanner.logging.context import clear_log_context
from award_scanner.persistence.database import close_database, init_database

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ENV_VARS = ("DMPHUB_CLIENT_ID", "DMPHUB_CLIENT_SECRET", "LOG_LEVEL", "DATABASE_URL")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove scanner environment variables a developer shell may have set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def temp_database():
    """In-memory database for the duration of a test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def make_plan():
    """Factory for Plan instances with sensible defaults."""

    def _make(
        doi="10.80030/yxcw-kh07",
        title="Collaborative Research: Coastal Resilience and Sediment Transport",
        authors="Jane Doe|Example University",
    ):
        return Plan(
            uri=f"http://localhost:3003/api/v1/data_management_plans/{doi}",
            title=title,
            authors=authors,
        )

    return _make


@pytest.fixture
def make_candidate():
    """Factory for Candidate instances with sensible defaults."""

    def _make(
        id="1740212",
        title="Collaborative Research: Coastal Resilience and Sediment Transport",
        first="Jane",
        last="Doe",
        org="Example University",
    ):
        return Candidate(
            id=id,
            title=title,
            pi_first_name=first,
            pi_last_name=last,
            awardee_name=org,
        )

    return _make
