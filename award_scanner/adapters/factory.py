"""Factory functions for instantiating API adapters."""

import logging
from typing import Optional

from award_scanner.config.environment import EnvironmentConfig
from award_scanner.config.models import AdvancedConfig, DMPHubConfig, NSFConfig

from .dmphub import DMPHubAdapter
from .exceptions import AdapterConfigurationError
from .nsf import NSFAwardsAdapter

logger = logging.getLogger(__name__)


def get_awards_adapter(nsf_config: NSFConfig, advanced_config: AdvancedConfig) -> NSFAwardsAdapter:
    """Create the award search adapter.

    Args:
        nsf_config: NSF endpoint configuration
        advanced_config: Timeout, user agent and candidate limit

    Returns:
        Configured NSFAwardsAdapter

    Raises:
        AdapterConfigurationError: If the configuration is invalid
    """
    logger.debug(
        "Creating award search adapter",
        extra={"awards_url": nsf_config.awards_url},
    )
    try:
        return NSFAwardsAdapter(
            awards_url=nsf_config.awards_url,
            timeout=advanced_config.http_request_timeout,
            user_agent=advanced_config.user_agent,
            max_candidates=advanced_config.max_candidates_per_plan,
        )
    except AdapterConfigurationError:
        raise
    except Exception as e:
        raise AdapterConfigurationError(f"Failed to create award search adapter: {e}") from e


def get_dmphub_adapter(
    dmphub_config: DMPHubConfig,
    advanced_config: AdvancedConfig,
    env_config: Optional[EnvironmentConfig] = None,
) -> DMPHubAdapter:
    """Create the DMPHub adapter.

    Credentials are taken from env_config; without them requests are sent
    unauthenticated.

    Args:
        dmphub_config: DMPHub endpoint configuration
        advanced_config: Timeout and user agent
        env_config: Environment configuration holding client credentials

    Returns:
        Configured DMPHubAdapter

    Raises:
        AdapterConfigurationError: If the configuration is invalid
    """
    has_credentials = env_config is not None and env_config.has_dmphub_credentials

    logger.debug(
        "Creating DMPHub adapter",
        extra={"plans_url": dmphub_config.plans_url, "authenticated": has_credentials},
    )
    try:
        return DMPHubAdapter(
            plans_url=dmphub_config.plans_url,
            awards_url=dmphub_config.awards_url,
            token_url=dmphub_config.token_url if has_credentials else None,
            client_id=env_config.dmphub_client_id if has_credentials else None,
            client_secret=env_config.dmphub_client_secret if has_credentials else None,
            timeout=advanced_config.http_request_timeout,
            user_agent=advanced_config.user_agent,
        )
    except AdapterConfigurationError:
        raise
    except Exception as e:
        raise AdapterConfigurationError(f"Failed to create DMPHub adapter: {e}") from e
