"""
Reading Models
==============
Pydantic models for weather station readings.

This module defines all data structures used throughout the application:
- Request models: What the weather station posts to the backend
- Stored models: The immutable reading kept in the store
- Dashboard models: Derived values the dashboard client displays

A READING IS:
    temperature (°C), humidity (%), timestamp (ISO-8601 string)

Author: WeatherVerse Team
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from weatherverse.utils.validation import coerce_measurement, validate_timestamp


# =============================================================================
# ENUMS
# =============================================================================

class StoreMode(str, Enum):
    """
    How the readings store keeps data.

    - LATEST: Only the most recent reading, replaced on every ingest
    - HISTORY: A bounded, oldest-first list of readings (FIFO eviction)
    """
    LATEST = "latest"
    HISTORY = "history"


class ChangeDirection(str, Enum):
    """Direction of change between the current and previous reading."""
    UP = "up"
    DOWN = "down"
    NONE = "none"


class TemperatureBand(str, Enum):
    """
    Colour band for the temperature card.

    - COLD: below 28°C (blue)
    - WARM: 28°C to 32°C (yellow)
    - HOT: above 32°C (red)
    """
    COLD = "cold"
    WARM = "warm"
    HOT = "hot"


class TimeOfDay(str, Enum):
    """Dashboard theme picked from the local hour."""
    DAY = "day"
    SUNSET = "sunset"
    NIGHT = "night"


# =============================================================================
# STORED MODEL
# =============================================================================

class Reading(BaseModel):
    """
    One temperature/humidity observation.

    Readings are frozen once created. The store only ever replaces or
    appends them, it never edits one in place.

    Example:
        {
            "temperature": 26.0,
            "humidity": 40.0,
            "timestamp": "2025-04-22T09:00:00+00:00"
        }
    """
    model_config = ConfigDict(frozen=True)

    temperature: float = Field(..., description="Temperature in °C")
    humidity: float = Field(..., description="Relative humidity %")
    timestamp: str = Field(..., description="ISO-8601 timestamp")


# =============================================================================
# REQUEST MODELS - What the weather station sends to backend
# =============================================================================

class RecordReadingRequest(BaseModel):
    """
    Request body for POST /api/readings.

    The ESP8266 firmware sends numbers as strings sometimes, so both fields
    go through explicit numeric coercion. Anything that isn't a finite
    number is rejected before the store is touched.

    Fields:
        temperature: Temperature in °C (number or numeric string)
        humidity: Relative humidity % (number or numeric string)
        timestamp: Optional ISO-8601 timestamp. The server assigns one if missing.

    Example Request:
        POST /api/readings
        {
            "temperature": 26,
            "humidity": "40.5"
        }
    """
    temperature: float = Field(
        ...,
        description="Temperature in °C",
        examples=[26, "26.5"]
    )
    humidity: float = Field(
        ...,
        description="Relative humidity %",
        examples=[40, "40.5"]
    )
    timestamp: Optional[str] = Field(
        None,
        description="ISO-8601 timestamp (server assigns one if omitted)",
        examples=["2025-04-22T09:00:00Z"]
    )

    @field_validator("temperature", "humidity", mode="before")
    @classmethod
    def _coerce_number(cls, value):
        number = coerce_measurement(value)
        if number is None:
            raise ValueError(f"must be a number, got {value!r}")
        return number

    @field_validator("timestamp", mode="before")
    @classmethod
    def _check_timestamp(cls, value):
        if value is None:
            return None
        if not isinstance(value, str) or not validate_timestamp(value):
            raise ValueError(f"must be an ISO-8601 timestamp, got {value!r}")
        return value


# =============================================================================
# RESPONSE MODELS - What backend returns
# =============================================================================

class StatusResponse(BaseModel):
    """Acknowledgement returned after a reading is recorded."""
    status: str = Field("ok", description="Always 'ok' on success")


class LegacyDataResponse(BaseModel):
    """
    Latest values in the shape the first version of the server used.

    Returned by GET /data. Both fields are null until the first ingest.
    """
    temperature: Optional[float] = None
    humidity: Optional[float] = None


# =============================================================================
# DASHBOARD MODELS
# =============================================================================

class ChangeIndicator(BaseModel):
    """
    Change between the current and previous value of one measurement.

    direction is None when there is no previous reading to compare against.
    """
    direction: Optional[ChangeDirection] = None
    delta: Optional[float] = None
    label: Optional[str] = None


class DashboardSnapshot(BaseModel):
    """Everything the dashboard shows after a poll."""
    current: Reading
    previous: Optional[Reading] = None
    temperature_change: ChangeIndicator
    humidity_change: ChangeIndicator
    temperature_band: TemperatureBand
    is_humid: bool
    time_of_day: TimeOfDay
    history: list[Reading] = Field(default_factory=list)
    updated_at: datetime
