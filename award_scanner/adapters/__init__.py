"""Adapters for the external APIs the scanner talks to.

- NSF Award Search: nsf.NSFAwardsAdapter (award candidates by keyword)
- DMPHub: dmphub.DMPHubAdapter (plans in, matched awards out)

Use the factory functions to instantiate adapters from configuration:
    from award_scanner.adapters import get_awards_adapter, get_dmphub_adapter
    awards = get_awards_adapter(app_config.nsf, app_config.advanced)
    candidates = awards.find_candidates("coastal resilience")
"""

from .base import BaseAdapter
from .dmphub import DMPHubAdapter
from .exceptions import (
    AdapterAuthenticationError,
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import get_awards_adapter, get_dmphub_adapter
from .nsf import NSFAwardsAdapter

__all__ = [
    # Base and factories
    "BaseAdapter",
    "get_awards_adapter",
    "get_dmphub_adapter",
    # Adapters
    "NSFAwardsAdapter",
    "DMPHubAdapter",
    # Exceptions
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterAuthenticationError",
    "AdapterConfigurationError",
]
