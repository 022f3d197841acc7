"""Custom exceptions for API adapters."""

from typing import Optional


class AdapterError(Exception):
    """Base exception for all adapter errors.

    The pipeline catches this per plan: the plan is left unprocessed and
    retried on the next run.
    """

    pass


class AdapterHTTPError(AdapterError):
    """HTTP request failed with a 4xx/5xx status or a connection error.

    status_code is 0 when no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body

    @property
    def is_retryable(self) -> bool:
        return self.status_code == 0 or self.status_code >= 500


class AdapterTimeoutError(AdapterError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Response could not be parsed or did not have the expected shape."""

    pass


class AdapterAuthenticationError(AdapterError):
    """Access token could not be obtained from the DMPHub."""

    pass


class AdapterConfigurationError(AdapterError):
    """Invalid adapter configuration (timeout out of range, empty user agent)."""

    pass
