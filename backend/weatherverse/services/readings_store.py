"""
Readings Store
==============

The one place where weather readings live.

WHAT IT DOES:
------------
1. Builds a Reading from validated values (adds a timestamp if needed)
2. Keeps either the latest reading OR a short history of readings
3. Hands them back to the query endpoints

TWO MODES:
---------
- LATEST:  One slot. Every new reading replaces the old one.
- HISTORY: Up to `max_history` readings (24 by default), oldest first.
           When it's full, the oldest reading gets kicked out.

NO PERSISTENCE:
--------------
Everything is in memory. Restart the server = empty store. That's fine for
a weather demo, the station posts a new reading every few seconds anyway.

Author: WeatherVerse Team
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from weatherverse.models import Reading, StoreMode

logger = logging.getLogger(__name__)


class ReadingsStore:
    """
    In-memory store for weather readings.

    Created once when the server starts and injected into the routers.
    FastAPI may call sync code from a threadpool, so every access goes
    through a single lock.
    """

    DEFAULT_MAX_HISTORY = 24

    def __init__(self, mode: StoreMode = StoreMode.HISTORY, max_history: int = DEFAULT_MAX_HISTORY):
        """
        Set up the store.

        Args:
            mode: LATEST (one slot) or HISTORY (bounded list)
            max_history: How many readings to keep in HISTORY mode. Default is 24.
        """
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")

        self.mode = StoreMode(mode)
        self.max_history = max_history

        self._lock = threading.Lock()
        self._latest: Optional[Reading] = None
        self._history: deque[Reading] = deque(maxlen=max_history)

    # =========================================================================
    # WRITING
    # =========================================================================

    def record_reading(
        self,
        temperature: float,
        humidity: float,
        timestamp: Optional[str] = None
    ) -> Reading:
        """
        Store a new reading.

        Args:
            temperature: Temperature in °C (already validated)
            humidity: Relative humidity % (already validated)
            timestamp: ISO-8601 string from the device, or None to use "now"

        Returns:
            The Reading that was stored
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc).isoformat()

        reading = Reading(
            temperature=float(temperature),
            humidity=float(humidity),
            timestamp=timestamp,
        )

        with self._lock:
            self._latest = reading
            if self.mode == StoreMode.HISTORY:
                # deque(maxlen=...) drops the oldest entry on overflow
                self._history.append(reading)

        return reading

    # =========================================================================
    # READING
    # =========================================================================

    def latest(self) -> Optional[Reading]:
        """Get the most recent reading, or None if nothing was recorded yet."""
        with self._lock:
            return self._latest

    def history(self) -> list[Reading]:
        """
        Get all stored readings, oldest first.

        Always empty in LATEST mode.
        """
        with self._lock:
            return list(self._history)

    @property
    def count(self) -> int:
        """How many readings the store is holding right now."""
        with self._lock:
            if self.mode == StoreMode.HISTORY:
                return len(self._history)
            return 1 if self._latest is not None else 0
