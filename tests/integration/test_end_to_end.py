"""End-to-end validation tests.

Runs the complete DMP Award Scanner pipeline against the deterministic
plans and awards in sample_scan.yaml:

- Plans are fetched, matched and registered
- Co-investigator records are folded into one award
- Processed plans are skipped on the next run
- Rejected registrations, the DOI allow-list and dry runs behave as configured
- The CLI manual mode drives the same pipeline

Uses fixture-backed adapters and an in-memory database, no network access.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from award_scanner.config.loader import load_config
from award_scanner.main import main
from award_scanner.matching import SHOW_AWARD_URL
from award_scanner.persistence.database import get_session
from award_scanner.persistence.repositories import ProcessedPlanRepository
from award_scanner.pipeline import ScanPipeline
from award_scanner.pipeline.models import (
    OUTCOME_ALREADY_PROCESSED,
    OUTCOME_MATCHED,
    OUTCOME_NO_MATCH,
    OUTCOME_NO_TITLE,
    OUTCOME_NOT_SELECTED,
    OUTCOME_REGISTERED,
    OUTCOME_REGISTRATION_FAILED,
)
from tests.helpers.fixture_adapter import FixtureAwardsAdapter, FixtureDMPHubAdapter

END_VALIDATION_DIR = Path(__file__).parent.parent / "fixtures" / "end_validation"
SAMPLE_SCAN = END_VALIDATION_DIR / "sample_scan.yaml"
CONFIG_FILE = END_VALIDATION_DIR / "config.yaml"

PLAN_BASE = "http://localhost:3003/api/v1/data_management_plans/"
COASTAL_URI = f"{PLAN_BASE}10.80030/yxcw-kh07"
QUANTUM_URI = f"{PLAN_BASE}10.80030/9ddh-tf78"
UNTITLED_URI = f"{PLAN_BASE}10.80030/0cd0-ce69"
ALPINE_URI = f"{PLAN_BASE}10.80030/m4rk-2k19"


@pytest.fixture
def app_config():
    app_config, _ = load_config(CONFIG_FILE)
    return app_config


@pytest.fixture
def dmphub():
    return FixtureDMPHubAdapter(SAMPLE_SCAN)


@pytest.fixture
def awards():
    return FixtureAwardsAdapter(SAMPLE_SCAN)


def outcomes_by_uri(result):
    return {outcome.plan_uri: outcome for outcome in result.plan_outcomes}


@pytest.mark.integration
def test_full_pipeline_sample_fixture(temp_database, app_config, dmphub, awards):
    """Test complete pipeline execution with fixture data.

    Expected from sample_scan.yaml:
    - yxcw-kh07 matches award 1740212 with both co-investigators
    - 9ddh-tf78 has no similar award
    - 0cd0-ce69 has no title and is never searched
    - m4rk-2k19 matches award 1953340
    """
    result = ScanPipeline(app_config, dmphub, awards).run_once()

    assert not result.skipped
    assert not result.had_errors
    assert result.total_plans == 4
    assert result.total_scanned == 4
    assert result.total_matched == 2
    assert result.total_registered == 2

    outcomes = outcomes_by_uri(result)
    assert outcomes[COASTAL_URI].outcome == OUTCOME_REGISTERED
    assert outcomes[COASTAL_URI].award_id == f"{SHOW_AWARD_URL}1740212"
    assert outcomes[QUANTUM_URI].outcome == OUTCOME_NO_MATCH
    assert outcomes[UNTITLED_URI].outcome == OUTCOME_NO_TITLE
    assert outcomes[ALPINE_URI].outcome == OUTCOME_REGISTERED
    assert outcomes[ALPINE_URI].award_id == f"{SHOW_AWARD_URL}1953340"

    assert len(awards.queries) == 3

    registered = {plan.uri: match for plan, match in dmphub.registered}
    assert set(registered) == {COASTAL_URI, ALPINE_URI}

    coastal = registered[COASTAL_URI]
    assert coastal.title == "Collaborative Research: Coastal Resilience and Sediment Transport"
    assert [pi.name for pi in coastal.principal_investigators] == ["Jane Doe", "John Roe"]
    assert [pi.organization for pi in coastal.principal_investigators] == [
        "Example University",
        "State College",
    ]

    with get_session() as session:
        repo = ProcessedPlanRepository(session)
        assert repo.count() == 4
        assert repo.get(QUANTUM_URI).award_id is None
        assert repo.get(ALPINE_URI).award_id == f"{SHOW_AWARD_URL}1953340"


@pytest.mark.integration
def test_second_run_skips_processed_plans(temp_database, app_config, dmphub, awards):
    """Plans recorded by one run are not searched or registered again."""
    pipeline = ScanPipeline(app_config, dmphub, awards)
    pipeline.run_once()

    second = pipeline.run_once()

    assert all(o.outcome == OUTCOME_ALREADY_PROCESSED for o in second.plan_outcomes)
    assert second.total_skipped == 4
    assert second.total_scanned == 0
    assert len(awards.queries) == 3
    assert len(dmphub.registered) == 2


@pytest.mark.integration
def test_rejected_registration_is_reported(temp_database, app_config, awards):
    dmphub = FixtureDMPHubAdapter(SAMPLE_SCAN, reject_uris=[ALPINE_URI])

    result = ScanPipeline(app_config, dmphub, awards).run_once()

    outcomes = outcomes_by_uri(result)
    assert outcomes[ALPINE_URI].outcome == OUTCOME_REGISTRATION_FAILED
    assert result.total_registered == 1
    assert result.had_errors
    assert [plan.uri for plan, _ in dmphub.registered] == [COASTAL_URI]


@pytest.mark.integration
def test_only_dois_restricts_scan(temp_database, app_config, dmphub, awards):
    config = app_config.model_copy(update={"only_dois": ["10.80030/m4rk-2k19"]})

    result = ScanPipeline(config, dmphub, awards).run_once()

    outcomes = outcomes_by_uri(result)
    assert outcomes[ALPINE_URI].outcome == OUTCOME_REGISTERED
    assert outcomes[COASTAL_URI].outcome == OUTCOME_NOT_SELECTED
    assert result.total_skipped == 3
    assert len(awards.queries) == 1

    with get_session() as session:
        assert ProcessedPlanRepository(session).list_uris() == [ALPINE_URI]


@pytest.mark.integration
def test_dry_run_registers_nothing(temp_database, app_config, dmphub, awards):
    config = app_config.model_copy(update={"dry_run": True})

    result = ScanPipeline(config, dmphub, awards).run_once()

    outcomes = outcomes_by_uri(result)
    assert outcomes[COASTAL_URI].outcome == OUTCOME_MATCHED
    assert outcomes[ALPINE_URI].outcome == OUTCOME_MATCHED
    assert result.total_matched == 2
    assert result.total_registered == 0
    assert dmphub.registered == []

    with get_session() as session:
        assert ProcessedPlanRepository(session).count() == 0


@pytest.mark.integration
def test_max_candidates_limits_search(temp_database, app_config, dmphub):
    """Only the first award record is scored when the limit is 1."""
    awards = FixtureAwardsAdapter(SAMPLE_SCAN, max_candidates=1)

    result = ScanPipeline(app_config, dmphub, awards).run_once()

    outcomes = outcomes_by_uri(result)
    assert outcomes[COASTAL_URI].outcome == OUTCOME_REGISTERED
    assert outcomes[ALPINE_URI].outcome == OUTCOME_NO_MATCH
    coastal = dict((plan.uri, match) for plan, match in dmphub.registered)[COASTAL_URI]
    assert len(coastal.principal_investigators) == 1


@pytest.mark.integration
def test_cli_manual_run_with_fixture_adapters(tmp_path, dmphub, awards):
    """The CLI manual mode scans with the configured pipeline and exits 0."""
    database_url = f"sqlite:///{tmp_path / 'scanner.db'}"

    def fixture_pipeline(app_config, env_config):
        return ScanPipeline(app_config, dmphub, awards)

    with patch("award_scanner.main.build_pipeline", side_effect=fixture_pipeline), \
            patch("award_scanner.main.configure_logging"), \
            patch.dict("os.environ", {"DATABASE_URL": database_url}):
        exit_code = main(["--manual-run", "--config", str(CONFIG_FILE)])

    assert exit_code == 0
    assert len(dmphub.registered) == 2
    assert (tmp_path / "scanner.db").exists()
