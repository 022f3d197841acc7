"""Scheduling module for periodic award scans."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
