"""Base adapter class with shared HTTP handling for the external APIs.

The DMPHub adapter and the NSF award search adapter both talk JSON over
HTTP; this module owns the session, timeouts, and the translation of
requests exceptions into the AdapterError hierarchy.
"""

import logging
from typing import Any, Dict, Optional

import requests

from award_scanner.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")

DEFAULT_USER_AGENT = "DMPAwardScanner/1.0"


class BaseAdapter:
    """Base class for API adapters.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    ADAPTER_NAME = "base"

    def __init__(self, timeout: int = 30, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """Initialize adapter with configuration.

        Args:
            timeout: HTTP request timeout in seconds (range 5-300)
            user_agent: User-Agent header for requests

        Raises:
            AdapterConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make HTTP request with error handling.

        Args:
            url: URL to request
            method: HTTP method (default "GET")
            headers: Additional headers (merged with session defaults)
            params: Query parameters
            json_data: JSON body
            data: Form-encoded body

        Returns:
            Parsed JSON response (dict or list); None for an empty 2xx body

        Raises:
            AdapterHTTPError: On 4xx/5xx status or connection failure
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On a body that is not valid JSON
        """
        logger.debug(
            f"HTTP {method} request to {url}",
            extra={
                "event": "adapter.fetch.request",
                "adapter": self.ADAPTER_NAME,
                "method": method,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                data=data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.retryable_error",
                    "adapter": self.ADAPTER_NAME,
                    "error_type": "Timeout",
                    "url": url,
                },
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "adapter": self.ADAPTER_NAME,
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise AdapterHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if response.status_code >= 400:
            is_retryable = response.status_code >= 500
            logger.log(
                logging.WARNING if is_retryable else logging.ERROR,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.retryable_error" if is_retryable else "adapter.fetch.error",
                    "adapter": self.ADAPTER_NAME,
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
                body=response.text,
            )

        if not response.content:
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "adapter": self.ADAPTER_NAME,
                    "error_type": "JSONDecodeError",
                    "url": url,
                },
            )
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "adapter.fetch.succeeded",
                "adapter": self.ADAPTER_NAME,
                "status_code": response.status_code,
                "url": url,
            },
        )
        return payload
