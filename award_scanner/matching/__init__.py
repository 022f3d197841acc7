"""Award matching engine for pairing plans with funding awards.

This module provides:
- TitleNormalizer: Canonicalizes titles into comparable token strings
- levenshtein_similarity: Normalized edit-distance similarity
- MatchScorer: Combined title, investigator and organization score
- CandidateRanker: Picks and aggregates the best accepted candidate
- Utility functions for registration payloads and summaries
"""

from .exceptions import InvalidInputError, MatchingError
from .models import ParsedAuthors, ScoredCandidate
from .normalization import TitleNormalizer
from .ranker import ACCEPTANCE_THRESHOLD, SHOW_AWARD_URL, CandidateRanker
from .scorer import TITLE_SCORE_GATE, MatchScorer, parse_authors
from .similarity import levenshtein_similarity
from .stopwords import DEFAULT_STOPWORDS, StopwordSet
from .utils import build_award_payload, format_match_summary

__all__ = [
    "TitleNormalizer",
    "StopwordSet",
    "DEFAULT_STOPWORDS",
    "levenshtein_similarity",
    "MatchScorer",
    "parse_authors",
    "CandidateRanker",
    "ScoredCandidate",
    "ParsedAuthors",
    "ACCEPTANCE_THRESHOLD",
    "TITLE_SCORE_GATE",
    "SHOW_AWARD_URL",
    "MatchingError",
    "InvalidInputError",
    "build_award_payload",
    "format_match_summary",
]
