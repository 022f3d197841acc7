"""Exceptions raised by the matching core."""


class MatchingError(Exception):
    """Base exception for matching errors."""

    pass


class InvalidInputError(MatchingError):
    """Raised when a required text field is absent.

    Only TitleNormalizer.normalize() raises this; the scorer and ranker
    pre-check their inputs and fall back to a zero score or skip the record.
    """

    pass
