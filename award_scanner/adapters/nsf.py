"""NSF Award Search Web API adapter.

See https://www.nsf.gov/developer/ for the API reference.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from award_scanner.domain.models import Candidate

from .base import DEFAULT_USER_AGENT, BaseAdapter
from .exceptions import AdapterHTTPError, AdapterResponseError, AdapterTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_AWARDS_URL = "https://api.nsf.gov/services/v1/awards.json"

# Fields needed for scoring and display; the API returns a reduced set by default
PRINT_FIELDS = "id,title,piFirstName,piLastName,awardeeName"


class NSFAwardsAdapter(BaseAdapter):
    """Adapter for the NSF award search.

    API Details:
        Endpoint: https://api.nsf.gov/services/v1/awards.json
        Method: GET
        Authentication: None (public)
        Response: {"response": {"award": [...]}}, one entry per PI record
    """

    ADAPTER_NAME = "nsf"

    def __init__(
        self,
        awards_url: str = DEFAULT_AWARDS_URL,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        max_candidates: int = 500,
    ) -> None:
        """Initialize the NSF adapter.

        Args:
            awards_url: Full URL of the award search endpoint
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header for requests
            max_candidates: Maximum candidates returned per search (0 = unlimited)
        """
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.awards_url = awards_url
        self.max_candidates = max_candidates

    def find_candidates(self, keywords: str) -> list[Candidate]:
        """Search awards by keyword.

        Non-success responses and timeouts are logged and reported as no
        candidates, so a flaky search never aborts a scan.

        Args:
            keywords: Normalized plan title used as the keyword query

        Returns:
            List of Candidate records (possibly empty)

        Raises:
            AdapterResponseError: If a 2xx response body is malformed
        """
        if not keywords or not keywords.strip():
            return []

        params = {"keyword": keywords, "printFields": PRINT_FIELDS}

        logger.info(
            "Searching NSF awards",
            extra={"adapter": self.ADAPTER_NAME, "keywords": keywords},
        )

        try:
            payload = self._make_request(self.awards_url, params=params)
        except AdapterHTTPError as e:
            logger.warning(
                f"Received a {e.status_code} from the NSF Awards API",
                extra={
                    "adapter": self.ADAPTER_NAME,
                    "status": e.status_code,
                    "url": e.url,
                    "body": (e.body or "")[:500],
                },
            )
            return []
        except AdapterTimeoutError as e:
            logger.warning(
                "NSF Awards API timed out",
                extra={"adapter": self.ADAPTER_NAME, "url": e.url},
            )
            return []

        awards = self._extract_awards(payload)
        candidates = []
        for award in awards:
            try:
                candidates.append(Candidate.model_validate(award))
            except ValidationError as e:
                logger.warning(
                    "Failed to parse NSF award record",
                    extra={
                        "adapter": self.ADAPTER_NAME,
                        "award_id": award.get("id") if isinstance(award, dict) else None,
                        "error": str(e),
                    },
                )

        if self.max_candidates > 0 and len(candidates) > self.max_candidates:
            logger.warning(
                "Truncating candidates to max_candidates limit",
                extra={
                    "adapter": self.ADAPTER_NAME,
                    "total": len(candidates),
                    "max": self.max_candidates,
                },
            )
            candidates = candidates[: self.max_candidates]

        logger.info(
            "Fetched award candidates",
            extra={"adapter": self.ADAPTER_NAME, "count": len(candidates)},
        )
        return candidates

    @staticmethod
    def _extract_awards(payload) -> list:
        if payload is None:
            return []
        if not isinstance(payload, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(payload).__name__}"
            )

        response = payload.get("response") or {}
        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected 'response' field to be an object, got {type(response).__name__}"
            )

        awards = response.get("award") or []
        if not isinstance(awards, list):
            raise AdapterResponseError(
                f"Expected 'award' field to be array, got {type(awards).__name__}"
            )
        return awards
