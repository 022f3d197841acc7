"""Candidate ranking and co-investigator aggregation.

The award search API returns one record per investigator, so a single
award with two co-PIs shows up twice with the same title. After scoring,
the best candidate is chosen by score and every other accepted candidate
with exactly the same title is folded into the same match.
"""

import logging
from typing import Iterable, List, Optional

from award_scanner.domain.models import AggregatedMatch, Candidate, Plan, PrincipalInvestigator

from .models import ScoredCandidate
from .scorer import MatchScorer

logger = logging.getLogger(__name__)

ACCEPTANCE_THRESHOLD = 0.9

SHOW_AWARD_URL = "https://www.nsf.gov/awardsearch/showAward?AWD_ID="


class CandidateRanker:
    """Finds the award, if any, that funded a plan.

    Responsibilities:
    - Skip candidates without a title or PI last name
    - Score eligible candidates and keep those at or above ACCEPTANCE_THRESHOLD
    - Pick the best accepted candidate (first maximum wins ties)
    - Aggregate accepted candidates sharing the winner's exact title
    """

    def __init__(
        self,
        scorer: Optional[MatchScorer] = None,
        award_url_base: str = SHOW_AWARD_URL,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize CandidateRanker.

        Args:
            scorer: Scorer used for each candidate (defaults to MatchScorer())
            award_url_base: Prefix joined with the candidate id to form award_id
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.scorer = scorer or MatchScorer()
        self.award_url_base = award_url_base
        self.logger = logger_instance or logger

    def score_candidates(self, plan: Plan, candidates: Iterable[Candidate]) -> List[ScoredCandidate]:
        """Score every eligible candidate and return the accepted ones.

        Args:
            plan: Plan being matched
            candidates: Raw candidates from the award search

        Returns:
            Accepted candidates in input order
        """
        accepted: List[ScoredCandidate] = []

        for candidate in candidates:
            if not candidate.is_eligible:
                self.logger.debug(
                    "Skipping ineligible candidate",
                    extra={"candidate_id": candidate.id},
                )
                continue

            score = self.scorer.score(
                plan,
                candidate_title=candidate.title,
                candidate_pi_name=candidate.pi_name,
                candidate_org=candidate.awardee_name,
            )

            if score >= ACCEPTANCE_THRESHOLD:
                accepted.append(ScoredCandidate(score=score, candidate=candidate))

            self.logger.debug(
                "Scored candidate",
                extra={
                    "candidate_id": candidate.id,
                    "score": round(score, 4),
                    "accepted": score >= ACCEPTANCE_THRESHOLD,
                },
            )

        return accepted

    def find_best(self, plan: Plan, candidates: Iterable[Candidate]) -> Optional[AggregatedMatch]:
        """Return the aggregated match for a plan, or None if nothing qualifies.

        Args:
            plan: Plan being matched
            candidates: Raw candidates from the award search

        Returns:
            AggregatedMatch, or None when no candidate reaches the threshold
        """
        accepted = self.score_candidates(plan, candidates)
        if not accepted:
            return None

        # max() keeps the first of equal maxima
        best = max(accepted, key=lambda scored: scored.score)
        winning_title = best.candidate.title

        investigators = [
            PrincipalInvestigator(
                name=scored.candidate.pi_name,
                organization=scored.candidate.awardee_name,
            )
            for scored in accepted
            if scored.candidate.title == winning_title
        ]

        self.logger.debug(
            "Selected best candidate",
            extra={
                "candidate_id": best.candidate.id,
                "score": round(best.score, 4),
                "accepted_count": len(accepted),
                "investigator_count": len(investigators),
            },
        )

        return AggregatedMatch(
            title=winning_title,
            principal_investigators=investigators,
            award_id=f"{self.award_url_base}{best.candidate.id}",
        )
