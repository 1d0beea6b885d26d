"""
Readings API Router
===================

This is where the weather station and the dashboard talk to the backend.

ALL ENDPOINTS:
-------------
POST   /api/readings          - Weather station posts a reading
GET    /api/readings/latest   - Latest reading (null if none yet)
GET    /api/readings/history  - Stored readings, oldest first (max 24)

LEGACY ENDPOINTS (first firmware version):
-----------------------------------------
GET    /update?temperature=..&humidity=..  - Post a reading via query string
GET    /data                               - Latest values, nulls if none yet

HOW IT WORKS:
------------
1. Station sends a reading (JSON body, or query parameters)
2. We coerce both values to floats, rejecting junk with a 400
3. The ReadingsStore keeps it
4. The dashboard polls /latest or /history

Author: WeatherVerse Team
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from weatherverse.models import (
    LegacyDataResponse,
    Reading,
    RecordReadingRequest,
    StatusResponse,
)
from weatherverse.services.readings_store import ReadingsStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/readings", tags=["readings"])
legacy_router = APIRouter(tags=["legacy"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================
# The store is created in the app lifespan and hung on app.state

def get_readings_store(request: Request) -> ReadingsStore:
    """
    Get the readings store for use in endpoints.

    Every endpoint that touches readings uses this.
    """
    store = getattr(request.app.state, "readings_store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return store


# =============================================================================
# HELPERS
# =============================================================================

def _describe_errors(error: ValidationError) -> str:
    """Turn a pydantic ValidationError into one readable sentence."""
    problems = []
    for err in error.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        if err.get("type") == "missing":
            problems.append(f"{field} is required")
        else:
            message = err.get("msg", "is invalid").removeprefix("Value error, ")
            problems.append(f"{field} {message}")
    return "Invalid reading: " + "; ".join(problems)


def parse_reading_payload(payload: dict) -> RecordReadingRequest:
    """
    Validate a raw reading payload.

    Raises:
        HTTPException(400): If a field is missing or isn't a number
    """
    try:
        return RecordReadingRequest.model_validate(payload)
    except ValidationError as e:
        detail = _describe_errors(e)
        logger.warning(f"Rejected reading {payload!r}: {detail}")
        raise HTTPException(status_code=400, detail=detail)


async def _read_payload(request: Request) -> dict:
    """
    Get the reading fields from a request.

    JSON body is the normal way. No body at all means the station sent
    everything in the query string, so we use that instead.
    """
    body = await request.body()
    if not body.strip():
        return dict(request.query_params)

    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")

    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=400,
            detail="Request body must be a JSON object with temperature and humidity"
        )
    return payload


def _store_reading(store: ReadingsStore, reading_request: RecordReadingRequest) -> Reading:
    reading = store.record_reading(
        temperature=reading_request.temperature,
        humidity=reading_request.humidity,
        timestamp=reading_request.timestamp,
    )
    logger.info(
        f"Data received - Temp: {reading.temperature}, Humidity: {reading.humidity} "
        f"({reading.timestamp})"
    )
    return reading


# =============================================================================
# INGEST
# =============================================================================

@router.post("", response_model=StatusResponse)
async def record_reading(
    request: Request,
    store: ReadingsStore = Depends(get_readings_store)
):
    """
    Record a reading from the weather station.

    **Body (JSON)**
    - temperature (required): °C, number or numeric string
    - humidity (required): %, number or numeric string
    - timestamp (optional): ISO-8601. We use the server time if it's missing.

    Without a body, the same fields are read from the query string.

    Returns 400 with a message if anything is missing or not a number.
    """
    payload = await _read_payload(request)
    reading_request = parse_reading_payload(payload)
    _store_reading(store, reading_request)
    return StatusResponse(status="ok")


# =============================================================================
# QUERY
# =============================================================================

@router.get("/latest", response_model=Optional[Reading])
async def get_latest_reading(store: ReadingsStore = Depends(get_readings_store)):
    """
    Get the most recent reading.

    Returns `null` (not an error!) if the station hasn't posted anything yet.
    """
    return store.latest()


@router.get("/history", response_model=list[Reading])
async def get_reading_history(store: ReadingsStore = Depends(get_readings_store)):
    """
    Get the stored readings, oldest first.

    At most MAX_HISTORY (24) readings. Empty list if nothing was posted yet
    or the server runs in latest-only mode.
    """
    return store.history()


# =============================================================================
# LEGACY ENDPOINTS
# =============================================================================

@legacy_router.get("/update", response_class=PlainTextResponse)
async def legacy_update(
    request: Request,
    store: ReadingsStore = Depends(get_readings_store)
):
    """
    Record a reading sent as query parameters (old ESP8266 firmware).

    GET /update?temperature=26&humidity=40
    """
    params = request.query_params
    if not params.get("temperature") or not params.get("humidity"):
        logger.warning(f"Rejected legacy update, missing parameters: {dict(params)!r}")
        return PlainTextResponse("Missing parameters", status_code=400)

    try:
        reading_request = parse_reading_payload(dict(params))
    except HTTPException:
        return PlainTextResponse("Invalid parameters", status_code=400)

    _store_reading(store, reading_request)
    return PlainTextResponse("Data updated successfully!")


@legacy_router.get("/data", response_model=LegacyDataResponse)
async def legacy_data(store: ReadingsStore = Depends(get_readings_store)):
    """Latest temperature and humidity, both null until the first reading."""
    latest = store.latest()
    if latest is None:
        return LegacyDataResponse()
    return LegacyDataResponse(temperature=latest.temperature, humidity=latest.humidity)
