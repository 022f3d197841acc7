"""Scheduler service for periodic pipeline execution."""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from award_scanner.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "award-scan"


class SchedulerService:
    """
    Wraps APScheduler to trigger award scans at the configured interval.

    Jobs run on a BackgroundScheduler thread so the main thread stays free
    to handle signals and coordinate shutdown.
    """

    def __init__(
        self,
        pipeline_callable: Callable[[], object],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the scheduler service.

        Args:
            pipeline_callable: Function to call on each scheduled run (e.g., pipeline.run_once)
            interval_seconds: Interval between runs in seconds
            shutdown_event: Optional event to set on shutdown for coordination
        """
        self.pipeline_callable = pipeline_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """Register the scan job and start the scheduler.

        The first scan runs immediately; later scans follow the interval.
        Calling start() on a running scheduler is a no-op.
        """
        if self.scheduler.running:
            logger.warning("Scheduler already running", extra={"event": "scheduler.already_running"})
            return

        next_run = datetime.now(timezone.utc)
        self.scheduler.add_job(
            func=self.pipeline_callable,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="DMP Award Scan",
            replace_existing=True,
            next_run_time=next_run,
        )

        self.scheduler.start()

        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": next_run.isoformat(),
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler gracefully.

        Args:
            wait: If True, wait for a running scan to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self) -> None:
        """Run the pipeline synchronously in the current thread."""
        logger.info("Triggering immediate pipeline run", extra={"event": "scheduler.trigger_now"})
        self.pipeline_callable()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """Next scheduled scan, or None if the job is not registered."""
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
