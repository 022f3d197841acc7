"""Domain models for the DMP Award Scanner."""

from .models import AggregatedMatch, Candidate, Plan, PrincipalInvestigator, ProcessedPlan

__all__ = ["Plan", "Candidate", "PrincipalInvestigator", "AggregatedMatch", "ProcessedPlan"]
