"""Normalized edit-distance similarity.

The scorer's thresholds (0.7 title gate, 0.9 acceptance) are calibrated
against this exact definition:

    1 - levenshtein(a, b) / max(len(a), len(b))

with similarity("", "") == 1.0. Any replacement metric must stay symmetric
and return 1.0 for identical strings.
"""

from typing import Callable, Optional

from rapidfuzz.distance import Levenshtein

SimilarityFunc = Callable[[Optional[str], Optional[str]], Optional[float]]


def levenshtein_similarity(a: Optional[str], b: Optional[str]) -> Optional[float]:
    """Return the normalized Levenshtein similarity of two strings.

    Args:
        a: First string (may be None)
        b: Second string (may be None)

    Returns:
        Similarity in [0, 1], or None if either argument is None
    """
    if a is None or b is None:
        return None
    return Levenshtein.normalized_similarity(str(a), str(b))
