"""
Dashboard Client
================

The dashboard side of WeatherVerse: polls the backend and works out what to
show.

WHAT IT DOES:
------------
1. Every POLL_INTERVAL seconds, GET /api/readings/latest
2. Keeps the last 24 readings for the charts (oldest kicked out first)
3. Works out current vs previous (arrows, deltas, colour band)
4. Runs the alert trigger on every new reading

WHEN THINGS GO WRONG:
--------------------
Backend down? Bad JSON? We log a warning and skip this tick. The next tick
tries again. No retries, no backoff, the timer IS the retry.

HOW TO RUN:
    weatherverse-dashboard
    # or
    python -m weatherverse.services.dashboard_client

Author: WeatherVerse Team
"""

import asyncio
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Optional

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pydantic import ValidationError

from weatherverse.models import DashboardSnapshot, Reading
from weatherverse.services.alert_service import AlertTrigger, build_notifier
from weatherverse.services import display
from weatherverse.utils import validate_poll_interval

logger = logging.getLogger(__name__)


class DashboardPoller:
    """
    Polls the backend on a timer and keeps a short client-side history.

    HOW TO USE:
    ----------
    poller = DashboardPoller("http://localhost:8000", poll_interval=30)
    poller.start()          # inside a running event loop
    ...
    snapshot = poller.snapshot()
    ...
    await poller.close()    # stops the timer and closes the HTTP client
    """

    JOB_ID = "dashboard_poll"

    def __init__(
        self,
        base_url: str,
        poll_interval: float = 30,
        history_size: int = 24,
        alert_trigger: Optional[AlertTrigger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        request_timeout: float = 10.0
    ):
        """
        Set up the poller.

        Args:
            base_url: Where the backend lives (e.g., "http://localhost:8000")
            poll_interval: Seconds between polls. Default is 30.
            history_size: How many readings to keep for the charts. Default is 24.
            alert_trigger: Checked on every new reading (optional)
            http_client: Bring your own client (tests use a mock transport)
            request_timeout: Per-request timeout in seconds
        """
        if not validate_poll_interval(poll_interval):
            raise ValueError(f"poll_interval must be between 0 and 86400 seconds, got {poll_interval}")

        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.alert_trigger = alert_trigger

        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=request_timeout)

        self._buffer: deque[Reading] = deque(maxlen=history_size)
        self._current: Optional[Reading] = None
        self._previous: Optional[Reading] = None

        self.scheduler: Optional[AsyncIOScheduler] = None
        self._job = None

    # =========================================================================
    # TIMER
    # =========================================================================

    def start(self):
        """
        Start polling every poll_interval seconds.

        Must be called from inside a running event loop. Calling it twice
        does nothing the second time.
        """
        if self._job is not None:
            logger.warning("Dashboard poller already running")
            return

        if self.scheduler is None:
            self.scheduler = AsyncIOScheduler()
            self.scheduler.start()

        self._job = self.scheduler.add_job(
            self.poll_once,
            trigger=IntervalTrigger(seconds=self.poll_interval),
            id=self.JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Polling {self.base_url} every {self.poll_interval}s")

    def stop(self):
        """Stop the timer. Safe to call when it isn't running."""
        if self._job is not None:
            self._job.remove()
            self._job = None
            logger.info("Dashboard polling stopped")

        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None

    @property
    def is_running(self) -> bool:
        return self._job is not None

    async def close(self):
        """Stop the timer and close the HTTP client if we created it."""
        self.stop()
        if self._owns_client:
            await self.http_client.aclose()

    # =========================================================================
    # POLLING
    # =========================================================================

    async def poll_once(self) -> Optional[DashboardSnapshot]:
        """
        Run one poll tick.

        Returns:
            The snapshot after this tick, or None if the tick was skipped
            (request failed or bad response) or there is still no data
        """
        url = f"{self.base_url}/api/readings/latest"
        try:
            response = await self.http_client.get(url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Poll failed, skipping tick: {type(e).__name__}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Poll returned invalid JSON, skipping tick: {e}")
            return None

        if data is None:
            logger.debug("No readings on the backend yet")
            return self.snapshot()

        try:
            reading = Reading.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Poll returned a malformed reading, skipping tick: {e}")
            return None

        if self._buffer and self._buffer[-1].timestamp == reading.timestamp:
            return self.snapshot()

        self._add_reading(reading)
        logger.info(
            f"New reading: {reading.temperature:.1f}°C, {reading.humidity:.1f}% "
            f"at {reading.timestamp}"
        )

        if self.alert_trigger is not None:
            # SMTP and the EmailJS client are blocking
            await asyncio.to_thread(self.alert_trigger.check, reading)

        return self.snapshot()

    async def load_history(self) -> int:
        """
        Seed the chart buffer from GET /api/readings/history.

        Returns:
            How many readings were loaded (0 if the request failed)
        """
        url = f"{self.base_url}/api/readings/history"
        try:
            response = await self.http_client.get(url)
            response.raise_for_status()
            readings = [Reading.model_validate(item) for item in response.json()]
        except httpx.HTTPError as e:
            logger.warning(f"Could not load history: {type(e).__name__}: {e}")
            return 0
        except (ValueError, TypeError) as e:
            # pydantic's ValidationError is a ValueError
            logger.warning(f"History response was malformed: {e}")
            return 0

        for reading in readings:
            self._add_reading(reading)
        logger.info(f"Loaded {len(readings)} readings from history")
        return len(readings)

    def _add_reading(self, reading: Reading):
        self._buffer.append(reading)
        self._previous = self._current
        self._current = reading

    # =========================================================================
    # WHAT THE DASHBOARD SHOWS
    # =========================================================================

    @property
    def current(self) -> Optional[Reading]:
        return self._current

    @property
    def previous(self) -> Optional[Reading]:
        return self._previous

    def history(self) -> list[Reading]:
        """Buffered readings for the charts, oldest first."""
        return list(self._buffer)

    def snapshot(self) -> Optional[DashboardSnapshot]:
        """
        Build the display values for the current reading.

        Returns:
            None until the first reading arrives
        """
        current = self._current
        if current is None:
            return None
        previous = self._previous

        return DashboardSnapshot(
            current=current,
            previous=previous,
            temperature_change=display.change_indicator(
                current.temperature,
                previous.temperature if previous else None,
                "°C",
            ),
            humidity_change=display.change_indicator(
                current.humidity,
                previous.humidity if previous else None,
                "%",
            ),
            temperature_band=display.temperature_band(current.temperature),
            is_humid=display.is_humid(current.humidity),
            time_of_day=display.time_of_day(datetime.now().hour),
            history=self.history(),
            updated_at=datetime.now(timezone.utc),
        )


# =============================================================================
# ENTRY POINT
# =============================================================================

async def main():
    """Run the poller until interrupted."""
    # Imported here so the poller module doesn't pull in the FastAPI app
    from weatherverse.config import Config

    notifier = build_notifier(Config.ALERT_CHANNEL)
    trigger = AlertTrigger(
        notifier=notifier,
        temperature_threshold=Config.ALERT_TEMPERATURE_THRESHOLD,
        humidity_threshold=Config.ALERT_HUMIDITY_THRESHOLD,
        edge_triggered=Config.ALERT_EDGE_TRIGGERED,
    )
    poller = DashboardPoller(
        base_url=Config.DASHBOARD_BASE_URL,
        poll_interval=Config.POLL_INTERVAL,
        history_size=Config.MAX_HISTORY,
        alert_trigger=trigger,
    )

    try:
        await poller.load_history()
        poller.start()
        await asyncio.Event().wait()
    finally:
        await poller.close()
        if hasattr(notifier, "close"):
            notifier.close()


def run():
    """Console script entry point."""
    from weatherverse.config import configure_logging
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Dashboard stopped")


if __name__ == "__main__":
    run()
