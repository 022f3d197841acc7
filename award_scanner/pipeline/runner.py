"""Pipeline orchestration for scanning plans against the award search."""

import threading
import time
from typing import List, Optional
from uuid import uuid4

from award_scanner.adapters.dmphub import DMPHubAdapter
from award_scanner.adapters.exceptions import AdapterError
from award_scanner.adapters.nsf import NSFAwardsAdapter
from award_scanner.config.models import AppConfig
from award_scanner.domain.models import Plan, ProcessedPlan
from award_scanner.logging import get_logger
from award_scanner.logging.context import log_context
from award_scanner.matching.normalization import TitleNormalizer
from award_scanner.matching.ranker import CandidateRanker
from award_scanner.matching.utils import format_match_summary
from award_scanner.persistence.database import get_session
from award_scanner.persistence.repositories import ProcessedPlanRepository
from award_scanner.utils.timestamps import utc_now

from .models import (
    OUTCOME_ALREADY_PROCESSED,
    OUTCOME_ERROR,
    OUTCOME_MATCHED,
    OUTCOME_NO_MATCH,
    OUTCOME_NO_TITLE,
    OUTCOME_NOT_SELECTED,
    OUTCOME_REGISTERED,
    OUTCOME_REGISTRATION_FAILED,
    PipelineRunResult,
    PlanScanOutcome,
)

logger = get_logger(__name__, component="pipeline")


class ScanPipeline:
    """
    Orchestrates a single scan across all plans published by the DMPHub.

    For every plan not yet processed the pipeline turns the title into
    search keywords, asks the award search for candidates, ranks them and
    sends the winning award back to the DMPHub.
    """

    def __init__(
        self,
        app_config: AppConfig,
        dmphub_adapter: DMPHubAdapter,
        awards_adapter: NSFAwardsAdapter,
        ranker: Optional[CandidateRanker] = None,
        normalizer: Optional[TitleNormalizer] = None,
    ):
        """
        Initialize the scan pipeline.

        Args:
            app_config: Application configuration
            dmphub_adapter: Source of plans and sink for matched awards
            awards_adapter: Award search client
            ranker: Candidate ranker (default CandidateRanker())
            normalizer: Title normalizer used for search keywords
        """
        self.app_config = app_config
        self.dmphub_adapter = dmphub_adapter
        self.awards_adapter = awards_adapter
        self.ranker = ranker or CandidateRanker()
        self.normalizer = normalizer or TitleNormalizer()
        self._lock = threading.Lock()

    def run_once(self) -> PipelineRunResult:
        """
        Execute one complete scan.

        This method:
        1. Acquires a lock to prevent concurrent runs
        2. Fetches all plans from the DMPHub
        3. Processes each plan in its own database session
        4. Aggregates per-plan outcomes into run counters

        Returns:
            PipelineRunResult with aggregate counters and per-plan outcomes

        Raises:
            No exceptions are raised for fetch or per-plan failures; they are
            captured in the result.
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Pipeline run skipped: previous run still in progress",
                    extra={
                        "event": "pipeline.run.skipped",
                        "reason": "lock_held",
                    },
                )
            return PipelineRunResult(
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                skipped=True,
            )

        try:
            with log_context(run_id=run_id):
                logger.info(
                    "Pipeline run started",
                    extra={
                        "event": "pipeline.run.started",
                        "dry_run": self.app_config.dry_run,
                        "only_dois_count": len(self.app_config.only_dois),
                    },
                )

                try:
                    plans = self.dmphub_adapter.fetch_plans()
                except AdapterError as e:
                    logger.error(
                        f"Failed to fetch plans from the DMPHub: {e}",
                        extra={
                            "event": "pipeline.plans.fetch_failed",
                            "error_type": type(e).__name__,
                            "error": str(e),
                        },
                    )
                    return PipelineRunResult(
                        run_started_at=run_started_at,
                        run_finished_at=utc_now(),
                        total_errors=1,
                        error_message=str(e),
                    )

                if not plans:
                    logger.info("No DOIs found", extra={"event": "pipeline.plans.empty"})

                outcomes: List[PlanScanOutcome] = [self._process_plan(plan) for plan in plans]

                result = PipelineRunResult(
                    run_started_at=run_started_at,
                    run_finished_at=utc_now(),
                    total_plans=len(plans),
                    plan_outcomes=outcomes,
                )

                logger.info(
                    "Pipeline run completed",
                    extra={
                        "event": "pipeline.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "total_plans": result.total_plans,
                        "total_scanned": result.total_scanned,
                        "total_skipped": result.total_skipped,
                        "total_matched": result.total_matched,
                        "total_registered": result.total_registered,
                        "total_errors": result.total_errors,
                        "had_errors": result.had_errors,
                    },
                )

                return result

        finally:
            self._lock.release()

    def _process_plan(self, plan: Plan) -> PlanScanOutcome:
        """
        Process a single plan: filter, search, rank, register, record.

        Args:
            plan: Plan to process

        Returns:
            PlanScanOutcome describing what happened
        """
        plan_start = time.time()
        outcome = PlanScanOutcome(plan_uri=plan.uri, doi=plan.doi, outcome=OUTCOME_ERROR)

        with log_context(plan_uri=plan.uri, doi=plan.doi):
            if not self.app_config.is_plan_selected(plan.doi):
                logger.debug(
                    "Plan not in only_dois, skipping",
                    extra={"event": "plan.scan.not_selected"},
                )
                outcome.outcome = OUTCOME_NOT_SELECTED
                return outcome

            try:
                with get_session() as session:
                    if ProcessedPlanRepository(session).is_processed(plan.uri):
                        logger.debug(
                            "Plan already processed, skipping",
                            extra={"event": "plan.scan.already_processed"},
                        )
                        outcome.outcome = OUTCOME_ALREADY_PROCESSED
                        return outcome

                logger.info(
                    "Scanning award search for plan",
                    extra={"event": "plan.scan.started", "title": plan.title},
                )

                if not plan.title:
                    logger.warning(
                        "Plan has no title, nothing to search for",
                        extra={"event": "plan.scan.no_title"},
                    )
                    outcome.outcome = OUTCOME_NO_TITLE
                else:
                    self._scan_plan(plan, outcome)

                if not self.app_config.dry_run:
                    self._record_outcome(plan, outcome)

            except Exception as e:
                outcome.outcome = OUTCOME_ERROR
                outcome.error_message = str(e)
                logger.error(
                    f"Error processing plan {plan.doi}: {e}",
                    extra={
                        "event": "plan.scan.failed",
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                    exc_info=not isinstance(e, AdapterError),
                )

            finally:
                outcome.duration_seconds = time.time() - plan_start
                logger.debug(
                    "Plan processing completed",
                    extra={
                        "event": "plan.scan.completed",
                        "outcome": outcome.outcome,
                        "duration_seconds": outcome.duration_seconds,
                    },
                )

        return outcome

    def _scan_plan(self, plan: Plan, outcome: PlanScanOutcome) -> None:
        """Search, rank and (unless dry-run) register the best award."""
        keywords = self.normalizer.normalize(plan.title)
        candidates = self.awards_adapter.find_candidates(keywords)
        outcome.candidate_count = len(candidates)

        match = self.ranker.find_best(plan, candidates)
        logger.info(
            format_match_summary(plan, match),
            extra={"event": "plan.scan.summary", "candidate_count": len(candidates)},
        )

        if match is None:
            outcome.outcome = OUTCOME_NO_MATCH
            return

        outcome.award_id = match.award_id
        logger.info(
            "Found award for plan",
            extra={
                "event": "plan.match.found",
                "award_id": match.award_id,
                "investigator_count": len(match.principal_investigators),
            },
        )

        outcome.outcome = OUTCOME_MATCHED
        if self.app_config.dry_run:
            return

        # Recorded as matched first so the award is sent at most once
        self._record_processed(plan, outcome)

        if self.dmphub_adapter.register_award(plan, match):
            outcome.outcome = OUTCOME_REGISTERED
            logger.info(
                "Registered award with the DMPHub",
                extra={"event": "plan.award.registered", "award_id": match.award_id},
            )
        else:
            outcome.outcome = OUTCOME_REGISTRATION_FAILED
            logger.warning(
                "DMPHub did not accept the award",
                extra={"event": "plan.award.registration_failed", "award_id": match.award_id},
            )

    def _record_outcome(self, plan: Plan, outcome: PlanScanOutcome) -> None:
        """Record the plan as processed.

        A plan that reached the DMPHub is already recorded as matched, so a
        failure to store its final outcome keeps that outcome and is reported
        through error_message. Any other recording failure propagates and the
        plan is retried on the next run.
        """
        try:
            self._record_processed(plan, outcome)
        except Exception as e:
            if outcome.outcome not in (OUTCOME_REGISTERED, OUTCOME_REGISTRATION_FAILED):
                raise
            outcome.error_message = f"Could not record {outcome.outcome} outcome: {e}"
            logger.error(
                outcome.error_message,
                extra={
                    "event": "plan.record.failed",
                    "award_id": outcome.award_id,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )

    @staticmethod
    def _record_processed(plan: Plan, outcome: PlanScanOutcome) -> None:
        """Persist the plan in the processed set in its own session."""
        with get_session() as session:
            ProcessedPlanRepository(session).mark_processed(
                ProcessedPlan(
                    plan_uri=plan.uri,
                    doi=plan.doi,
                    processed_at=utc_now(),
                    outcome=outcome.outcome,
                    award_id=outcome.award_id,
                )
            )
