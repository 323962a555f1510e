"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for valid but suspicious values.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        if matching.get("policy") == "flat":
            warning_messages.append(
                "Flat scoring ignores required/preferred tiers; employer priorities will not affect match rates"
            )
        if matching.get("strict_keywords") is False:
            warning_messages.append(
                "strict_keywords is disabled; selections of unknown keywords will be silently dropped"
            )

    ranking = config_dict.get("ranking", {})
    if isinstance(ranking, dict):
        threshold = ranking.get("fast_track_threshold", 80)
        pass_floor = matching.get("pass_floor", 50) if isinstance(matching, dict) else 50
        if isinstance(threshold, (int, float)) and isinstance(pass_floor, (int, float)):
            if threshold <= pass_floor:
                warning_messages.append(
                    f"fast_track_threshold ({threshold}) is at or below pass_floor ({pass_floor}); "
                    "every qualified match will be fast-tracked"
                )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
