"""Title canonicalization for award matching.

Plan titles frequently carry a grant-type prefix ("EAGER: ...", "RAPID: ...")
and punctuation that award records do not, so both sides are reduced to the
same token string before they are compared.
"""

import re
from typing import Optional

from .exceptions import InvalidInputError
from .stopwords import DEFAULT_STOPWORDS, StopwordSet

_DISALLOWED_CHARS = re.compile(r"[^0-9a-z\s\-]", re.IGNORECASE)


def split_fields(text: str, separator: str) -> list:
    """Split text on separator, dropping trailing empty fields.

    "EAGER:" splits to ["EAGER"] and "Jane Doe|" to ["Jane Doe"]; empty
    fields before the last non-empty one are kept.
    """
    fields = text.split(separator)
    while fields and fields[-1] == "":
        fields.pop()
    return fields


class TitleNormalizer:
    """Turns a raw title into a comparable, lowercase token string.

    Algorithm:
    1. Keep only the last colon-separated field (drops grant-type prefixes);
       trailing empty fields are ignored, so "EAGER:" keeps "EAGER"
    2. Strip characters other than alphanumerics, whitespace and hyphens,
       falling back to the original title if nothing is left
    3. Drop stopwords and join the remaining tokens with single spaces
    """

    def __init__(self, stopwords: Optional[StopwordSet] = None):
        """Initialize TitleNormalizer.

        Args:
            stopwords: Stopword set to filter tokens with (defaults to English)
        """
        self.stopwords = stopwords if stopwords is not None else DEFAULT_STOPWORDS

    def normalize(self, title: Optional[str]) -> str:
        """Normalize a title.

        Args:
            title: Raw title text

        Returns:
            Lowercase tokens without stopwords, separated by single spaces

        Raises:
            InvalidInputError: If title is None
        """
        if title is None:
            raise InvalidInputError("Cannot normalize an absent title")

        fields = split_fields(title, ":")
        text = fields[-1] if fields else title

        stripped = _DISALLOWED_CHARS.sub("", text)
        if not stripped:
            stripped = title

        tokens = [
            token.lower()
            for token in stripped.split()
            if not self.stopwords.is_stopword(token)
        ]
        return " ".join(tokens)

