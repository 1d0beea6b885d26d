"""
Input Validation Utilities
===========================

Validation and coercion helpers for weather station input.

The station firmware is not strict about types: the same field can show up
as 26, 26.5 or "26.5". These helpers turn that into a float or reject it.

Author: WeatherVerse Team
"""

import math
from datetime import datetime
from typing import Optional


def coerce_measurement(value) -> Optional[float]:
    """
    Coerce a temperature or humidity value to a float.

    Args:
        value: Number or numeric string (e.g., 26, 26.5, " 26.5 ")

    Returns:
        The float value, or None if it is missing, empty, boolean,
        non-numeric, NaN or infinite
    """
    # bool is an int subclass, and True is not a temperature
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def validate_timestamp(value: str) -> bool:
    """
    Validate an ISO-8601 timestamp string.

    Args:
        value: Timestamp string (e.g., "2025-04-22T09:00:00Z")

    Returns:
        True if valid, False otherwise
    """
    if not value or not value.strip():
        return False
    candidate = value.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        datetime.fromisoformat(candidate)
        return True
    except ValueError:
        return False


def validate_history_size(size: int) -> bool:
    """
    Validate the history cap (must be positive and reasonable).

    Args:
        size: Maximum number of readings to keep

    Returns:
        True if valid, False otherwise
    """
    return 1 <= size <= 10000


def validate_poll_interval(seconds: float) -> bool:
    """
    Validate the dashboard polling interval.

    Args:
        seconds: Seconds between polls

    Returns:
        True if valid, False otherwise
    """
    return 0 < seconds <= 86400  # up to 24 hours
