"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

KNOWN_SECTIONS = {"matching", "logging"}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    # Unknown top-level sections are ignored by the schema
    for key in config_dict:
        if key not in KNOWN_SECTIONS:
            warning_messages.append(f"Unknown configuration section '{key}' will be ignored")

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        default_limit = matching.get("default_limit", 5)
        if isinstance(default_limit, int) and default_limit == 0:
            warning_messages.append(
                "default_limit is 0; requests without an explicit limit will return no matches"
            )
        max_limit = matching.get("max_limit")
        if isinstance(max_limit, int) and max_limit > 1000:
            warning_messages.append(
                f"Large max_limit ({max_limit}) may produce very large responses"
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
