"""Data models for the matching engine."""

from dataclasses import dataclass, field
from typing import List

from award_scanner.domain.models import Candidate


@dataclass
class ParsedAuthors:
    """Author names and organizations parsed from a plan's authors text.

    Attributes:
        names: Author names in the order they were listed
        organizations: Organizations in the same order as names
    """

    names: List[str] = field(default_factory=list)
    organizations: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.names and not self.organizations


@dataclass
class ScoredCandidate:
    """A candidate together with its combined match score.

    The score is a sum of sub-scores and is not bounded by 1.0.
    """

    score: float
    candidate: Candidate
