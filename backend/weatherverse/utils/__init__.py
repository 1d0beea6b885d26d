"""
Utility modules for the WeatherVerse backend.
"""

from weatherverse.utils.validation import (
    coerce_measurement,
    validate_timestamp,
    validate_history_size,
    validate_poll_interval,
)

__all__ = [
    "coerce_measurement",
    "validate_timestamp",
    "validate_history_size",
    "validate_poll_interval",
]
