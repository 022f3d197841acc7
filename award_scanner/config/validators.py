"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    if config_dict.get("dry_run") is True:
        warning_messages.append("dry_run is enabled: matched awards will not be registered")

    only_dois = config_dict.get("only_dois")
    if isinstance(only_dois, list) and only_dois:
        warning_messages.append(
            f"only_dois is set: scanning is restricted to {len(only_dois)} plan(s)"
        )

    dmphub = config_dict.get("dmphub", {})
    if isinstance(dmphub, dict):
        base_path = dmphub.get("base_path", "")
        if isinstance(base_path, str) and base_path.startswith("http://") and "localhost" not in base_path:
            warning_messages.append(
                f"dmphub.base_path uses plain http ({base_path}); credentials will be sent unencrypted"
            )

    advanced = config_dict.get("advanced", {})
    if isinstance(advanced, dict):
        max_candidates = advanced.get("max_candidates_per_plan", 500)
        if isinstance(max_candidates, int) and max_candidates > 5000:
            warning_messages.append(
                f"Large max_candidates_per_plan ({max_candidates}) may slow down scoring"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
