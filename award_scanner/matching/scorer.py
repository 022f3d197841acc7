"""Combined title, investigator and organization scoring for one candidate.

The score for a (plan, candidate) pair is built in ordered gates:
1. Title similarity of the normalized titles is always computed
2. Without author metadata the title similarity is the whole score
3. Author/organization evidence is only consulted once the title similarity
   reaches TITLE_SCORE_GATE
4. Otherwise the similarities of every listed author name against the PI
   name and of every listed organization against the awardee are summed
   onto the title score

Summing (rather than averaging) means plans listing several authors clear
the acceptance threshold more easily. The result is not a probability.
"""

import logging
from typing import Iterable, Optional

from award_scanner.domain.models import Plan

from .models import ParsedAuthors
from .normalization import TitleNormalizer, split_fields
from .similarity import SimilarityFunc, levenshtein_similarity

logger = logging.getLogger(__name__)

TITLE_SCORE_GATE = 0.7

AUTHOR_SEPARATOR = ", "
ORGANIZATION_SEPARATOR = "|"


def parse_authors(authors: Optional[str]) -> ParsedAuthors:
    """Split a plan's authors text into names and organizations.

    Entries are separated by ", " and each entry is "Name | Organization".
    An entry without "|" uses its whole text as both name and organization,
    as does "Name|" since trailing empty fields are dropped. Empty entries
    are skipped. Surrounding whitespace is kept as-is.

    Args:
        authors: Raw authors text (may be None)

    Returns:
        ParsedAuthors with parallel name and organization lists
    """
    parsed = ParsedAuthors()
    if not authors:
        return parsed

    for entry in split_fields(authors, AUTHOR_SEPARATOR):
        parts = split_fields(entry, ORGANIZATION_SEPARATOR)
        if not parts:
            continue
        parsed.names.append(parts[0])
        parsed.organizations.append(parts[-1])

    return parsed


class MatchScorer:
    """Scores a candidate award against a plan.

    Responsibilities:
    - Compare normalized plan and candidate titles
    - Apply the no-authors and low-title-score gates
    - Sum author name and organization similarities
    """

    def __init__(
        self,
        normalizer: Optional[TitleNormalizer] = None,
        similarity: SimilarityFunc = levenshtein_similarity,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize MatchScorer.

        Args:
            normalizer: Title normalizer (defaults to English stopwords)
            similarity: String similarity function returning [0, 1] or None
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.normalizer = normalizer or TitleNormalizer()
        self.similarity = similarity
        self.logger = logger_instance or logger

    def score(
        self,
        plan: Plan,
        candidate_title: Optional[str],
        candidate_pi_name: Optional[str],
        candidate_org: Optional[str],
    ) -> float:
        """Compute the combined score for one candidate.

        Args:
            plan: Plan being matched
            candidate_title: Award title
            candidate_pi_name: PI name as "<first> <last>"
            candidate_org: Awardee organization

        Returns:
            Non-negative score; 0.0 when either title is absent
        """
        title_score = self.title_score(plan.title, candidate_title)
        if plan.authors is None:
            return title_score

        authors = parse_authors(plan.authors)
        if authors.is_empty or title_score < TITLE_SCORE_GATE:
            return title_score

        pi_score = self._sum_similarity(authors.names, candidate_pi_name)
        org_score = self._sum_similarity(authors.organizations, candidate_org)

        self.logger.debug(
            "Candidate passed title gate",
            extra={
                "candidate_title": candidate_title,
                "title_score": round(title_score, 4),
                "pi_score": round(pi_score, 4),
                "org_score": round(org_score, 4),
            },
        )

        return title_score + pi_score + org_score

    def title_score(self, plan_title: Optional[str], candidate_title: Optional[str]) -> float:
        """Similarity of the two normalized titles (0.0 if either is absent)."""
        if plan_title is None or candidate_title is None:
            return 0.0

        value = self.similarity(
            self.normalizer.normalize(plan_title),
            self.normalizer.normalize(candidate_title),
        )
        return value or 0.0

    def _sum_similarity(self, texts: Iterable[str], target: Optional[str]) -> float:
        if target is None:
            return 0.0
        return sum(self.similarity(text, target) or 0.0 for text in texts)
