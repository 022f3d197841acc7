"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/award_scanner.db"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        dmphub_client_id: Optional[str] = None,
        dmphub_client_secret: Optional[str] = None,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.dmphub_client_id = dmphub_client_id
        self.dmphub_client_secret = dmphub_client_secret
        self.log_level = log_level
        self.database_url = database_url or DEFAULT_DATABASE_URL

    @property
    def has_dmphub_credentials(self) -> bool:
        return bool(self.dmphub_client_id and self.dmphub_client_secret)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - DMPHUB_CLIENT_ID / DMPHUB_CLIENT_SECRET: OAuth2 client credentials for
      the DMPHub (both or neither)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DATABASE_URL: Processed-plan store (default: sqlite:///./data/award_scanner.db)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If any variable is invalid
    """
    errors = []

    client_id = os.getenv("DMPHUB_CLIENT_ID") or None
    client_secret = os.getenv("DMPHUB_CLIENT_SECRET") or None
    log_level = os.getenv("LOG_LEVEL") or None
    database_url = os.getenv("DATABASE_URL") or None

    if client_id and not client_secret:
        errors.append(
            "DMPHUB_CLIENT_ID is set but DMPHUB_CLIENT_SECRET is not. Both must be set for authentication."
        )
    elif client_secret and not client_id:
        errors.append(
            "DMPHUB_CLIENT_SECRET is set but DMPHUB_CLIENT_ID is not. Both must be set for authentication."
        )

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if database_url and "://" not in database_url:
        errors.append(f"Invalid DATABASE_URL: '{database_url}'. Expected a URL like sqlite:///path.db")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        dmphub_client_id=client_id,
        dmphub_client_secret=client_secret,
        log_level=log_level.upper() if log_level else None,
        database_url=database_url,
    )
