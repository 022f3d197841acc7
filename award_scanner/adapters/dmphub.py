"""DMPHub adapter: source of data management plans and sink for awards."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from award_scanner.domain.models import AggregatedMatch, Plan
from award_scanner.matching.utils import build_award_payload

from .base import DEFAULT_USER_AGENT, BaseAdapter
from .exceptions import (
    AdapterAuthenticationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
)

logger = logging.getLogger(__name__)


class DMPHubAdapter(BaseAdapter):
    """Adapter for the DMPHub API.

    API Details:
        Plans:  GET  {plans_url}  -> {"items": [{"uri", "title", "authors"}, ...]}
        Awards: POST {awards_url} <- {"dmp": uri, "award": {...}}
        Auth:   OAuth2 client credentials against {token_url}, optional
    """

    ADAPTER_NAME = "dmphub"

    def __init__(
        self,
        plans_url: str,
        awards_url: str,
        token_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the DMPHub adapter.

        Args:
            plans_url: URL listing data management plans
            awards_url: URL awards are posted to
            token_url: OAuth2 token URL (required when credentials are given)
            client_id: OAuth2 client id
            client_secret: OAuth2 client secret
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header for requests
        """
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.plans_url = plans_url
        self.awards_url = awards_url
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self._access_token: Optional[str] = None

    @property
    def uses_authentication(self) -> bool:
        return bool(self.client_id and self.client_secret and self.token_url)

    def fetch_plans(self) -> list[Plan]:
        """Fetch all data management plans.

        Returns:
            List of Plan models; entries without a uri are skipped

        Raises:
            AdapterError: On HTTP, timeout, authentication or parsing failures
        """
        logger.info(
            "Fetching data management plans",
            extra={"adapter": self.ADAPTER_NAME, "url": self.plans_url},
        )

        payload = self._authorized_request(self.plans_url)
        items = self._extract_items(payload)

        plans = []
        for item in items:
            try:
                plans.append(Plan.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed plan record",
                    extra={
                        "adapter": self.ADAPTER_NAME,
                        "plan_uri": item.get("uri") if isinstance(item, dict) else None,
                        "error": str(e),
                    },
                )

        logger.info(
            "Fetched data management plans",
            extra={"adapter": self.ADAPTER_NAME, "count": len(plans)},
        )
        return plans

    def register_award(self, plan: Plan, award: AggregatedMatch) -> bool:
        """Send a matched award back to the DMPHub.

        Args:
            plan: Plan the award was matched to
            award: AggregatedMatch to register

        Returns:
            True if the DMPHub accepted the award, False otherwise
        """
        try:
            self._authorized_request(
                self.awards_url,
                method="POST",
                json_data=build_award_payload(plan, award),
            )
        except AdapterResponseError:
            # Accepted, but the acknowledgement body was not JSON
            pass
        except AdapterError as e:
            logger.error(
                "Failed to register award with the DMPHub",
                extra={
                    "adapter": self.ADAPTER_NAME,
                    "plan_uri": plan.uri,
                    "award_id": award.award_id,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            return False

        logger.info(
            "Registered award with the DMPHub",
            extra={
                "adapter": self.ADAPTER_NAME,
                "plan_uri": plan.uri,
                "award_id": award.award_id,
            },
        )
        return True

    def _authorized_request(self, url: str, **kwargs):
        """Send a request with the bearer token, renewing it once on a 401."""
        try:
            return self._make_request(url, headers=self._auth_headers(), **kwargs)
        except AdapterHTTPError as e:
            if e.status_code != 401 or not self.uses_authentication:
                raise
            logger.info(
                "DMPHub rejected the access token, requesting a new one",
                extra={"adapter": self.ADAPTER_NAME, "url": url},
            )
            self._access_token = None
            return self._make_request(url, headers=self._auth_headers(), **kwargs)

    def _auth_headers(self) -> dict:
        if not self.uses_authentication:
            return {}
        if self._access_token is None:
            self._access_token = self._fetch_token()
        return {"Authorization": f"Bearer {self._access_token}"}

    def _fetch_token(self) -> str:
        try:
            payload = self._make_request(
                self.token_url,
                method="POST",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
        except AdapterHTTPError as e:
            raise AdapterAuthenticationError(
                f"DMPHub token request failed with status {e.status_code}"
            ) from e
        except AdapterResponseError as e:
            raise AdapterAuthenticationError(f"DMPHub token response was not JSON: {e}") from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AdapterAuthenticationError("DMPHub token response did not include an access_token")

        logger.debug("Obtained DMPHub access token", extra={"adapter": self.ADAPTER_NAME})
        return token

    @staticmethod
    def _extract_items(payload) -> list:
        if payload is None:
            return []
        if isinstance(payload, list):
            return payload
        if not isinstance(payload, dict):
            raise AdapterResponseError(
                f"Expected JSON object or array response, got {type(payload).__name__}"
            )

        items = payload.get("items", [])
        if not isinstance(items, list):
            raise AdapterResponseError(
                f"Expected 'items' field to be array, got {type(items).__name__}"
            )
        return items
