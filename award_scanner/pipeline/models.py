"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

# Plan outcomes
OUTCOME_REGISTERED = "registered"
OUTCOME_REGISTRATION_FAILED = "registration_failed"
OUTCOME_MATCHED = "matched"
OUTCOME_NO_MATCH = "no_match"
OUTCOME_NO_TITLE = "no_title"
OUTCOME_ALREADY_PROCESSED = "already_processed"
OUTCOME_NOT_SELECTED = "not_selected"
OUTCOME_ERROR = "error"

SKIPPED_OUTCOMES = frozenset({OUTCOME_ALREADY_PROCESSED, OUTCOME_NOT_SELECTED})
MATCHED_OUTCOMES = frozenset({OUTCOME_REGISTERED, OUTCOME_REGISTRATION_FAILED, OUTCOME_MATCHED})


@dataclass
class PlanScanOutcome:
    """
    Result of processing a single plan within a pipeline run.

    Attributes:
        plan_uri: Plan uri
        doi: Plan DOI
        outcome: One of the OUTCOME_* constants
        award_id: Award display URL when a match was found
        candidate_count: Number of candidates returned by the award search
        duration_seconds: Time spent on this plan
        error_message: Error text when outcome is "error", or why a
            registered plan could not be recorded
    """

    plan_uri: str
    doi: str
    outcome: str
    award_id: Optional[str] = None
    candidate_count: int = 0
    duration_seconds: float = 0.0
    error_message: Optional[str] = None

    @property
    def was_skipped(self) -> bool:
        return self.outcome in SKIPPED_OUTCOMES

    @property
    def was_matched(self) -> bool:
        return self.outcome in MATCHED_OUTCOMES

    @property
    def had_error(self) -> bool:
        return (
            self.outcome in (OUTCOME_ERROR, OUTCOME_REGISTRATION_FAILED)
            or self.error_message is not None
        )


@dataclass
class PipelineRunResult:
    """
    Aggregate results from a complete pipeline execution.

    Attributes:
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        total_duration_seconds: Total time for the entire run
        total_plans: Plans returned by the DMPHub
        total_scanned: Plans searched against the award API
        total_skipped: Plans skipped (already processed or not selected)
        total_matched: Plans with an accepted award
        total_registered: Awards successfully registered with the DMPHub
        total_errors: Errors encountered (fetch, per-plan, registration)
        plan_outcomes: Per-plan outcomes in processing order
        had_errors: Whether any error occurred
        error_message: Fatal error that stopped the run, if any
        skipped: Whether the run was skipped (lock already held)
    """

    run_started_at: datetime
    run_finished_at: datetime
    total_duration_seconds: float = 0.0
    total_plans: int = 0
    total_scanned: int = 0
    total_skipped: int = 0
    total_matched: int = 0
    total_registered: int = 0
    total_errors: int = 0
    plan_outcomes: List[PlanScanOutcome] = field(default_factory=list)
    had_errors: bool = False
    error_message: Optional[str] = None
    skipped: bool = False

    def __post_init__(self):
        """Compute aggregate counters from plan outcomes."""
        if self.plan_outcomes:
            self.total_skipped = sum(1 for o in self.plan_outcomes if o.was_skipped)
            self.total_scanned = sum(
                1 for o in self.plan_outcomes if not o.was_skipped and o.outcome != OUTCOME_ERROR
            )
            self.total_matched = sum(1 for o in self.plan_outcomes if o.was_matched)
            self.total_registered = sum(
                1 for o in self.plan_outcomes if o.outcome == OUTCOME_REGISTERED
            )
            self.total_errors += sum(1 for o in self.plan_outcomes if o.had_error)

        if self.total_errors or self.error_message:
            self.had_errors = True

        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()
