"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from weatherverse.models import Reading, RecordReadingRequest
"""

from .reading import (
    # How the store keeps data and how values are displayed
    StoreMode,
    ChangeDirection,
    TemperatureBand,
    TimeOfDay,

    # The reading itself
    Reading,

    # What the weather station sends us
    RecordReadingRequest,

    # What we send back
    StatusResponse,
    LegacyDataResponse,

    # What the dashboard client computes
    ChangeIndicator,
    DashboardSnapshot,
)

__all__ = [
    "StoreMode",
    "ChangeDirection",
    "TemperatureBand",
    "TimeOfDay",
    "Reading",
    "RecordReadingRequest",
    "StatusResponse",
    "LegacyDataResponse",
    "ChangeIndicator",
    "DashboardSnapshot",
]
