"""Utility functions for preparing match results for downstream consumers.

This module provides helpers for building the award registration payload
and a plain-text summary of a plan's scan result.
"""

from typing import Dict, Optional

from award_scanner.domain.models import AggregatedMatch, Plan


def build_award_payload(plan: Plan, match: AggregatedMatch) -> Dict:
    """Build the request body sent to the DMPHub when registering an award.

    Args:
        plan: The plan the award was matched to
        match: AggregatedMatch from the ranker

    Returns:
        Dict with keys:
        - dmp: Plan uri
        - award: Dict with title, award_id (display URL) and
          principal_investigators (list of name/organization dicts)
    """
    return {
        "dmp": plan.uri,
        "award": {
            "title": match.title,
            "award_id": match.award_id,
            "principal_investigators": [
                {"name": pi.name, "organization": pi.organization}
                for pi in match.principal_investigators
            ],
        },
    }


def format_match_summary(plan: Plan, match: Optional[AggregatedMatch]) -> str:
    """Format the scan result for one plan as text.

    Args:
        plan: Plan that was scanned
        match: AggregatedMatch, or None when no award matched

    Returns:
        Multi-line summary string
    """
    lines = [f"Scanning Awards API for DMP: `{plan.title}` ({plan.doi})"]

    if plan.authors:
        lines.append(f"    with author(s): {plan.authors_display()}")

    if match is None:
        lines.append("  no matches found")
        return "\n".join(lines)

    lines.append(f"  Found award: {match.award_id}")
    lines.append(f"    Title: {match.title}")
    for pi in match.principal_investigators:
        lines.append(f"    Investigator: {pi.name} from {pi.organization}")

    return "\n".join(lines)
