"""Pipeline orchestration: fetch plans, search awards, rank, register, record."""

from .models import PipelineRunResult, PlanScanOutcome
from .runner import ScanPipeline

__all__ = [
    "ScanPipeline",
    "PipelineRunResult",
    "PlanScanOutcome",
]
