"""
WeatherVerse - Backend API
==========================
FastAPI application that receives readings from an Arduino/ESP8266 weather
station and serves them to the WeatherVerse dashboard.

ARCHITECTURE:

    [ESP8266 + DHT sensor] --POST /api/readings--> [This Backend]
                                                         |
                                                  [ReadingsStore]
                                                   (in memory)
                                                         |
    [Dashboard] <--GET /api/readings/latest|history------+

    Nothing is saved to disk. Restart the server and the readings are gone.

HOW TO RUN:
    # Install
    pip install -e .

    # Optional: copy environment config and edit it
    cp env.example.txt .env

    # Run the server
    uvicorn weatherverse.main:app --reload --port 8000

    # Run the dashboard poller (in another terminal)
    weatherverse-dashboard

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc

Author: WeatherVerse Team
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from weatherverse.config import Config, configure_logging
from weatherverse.routers import readings_router, legacy_router
from weatherverse.services import ReadingsStore
from weatherverse.utils import validate_history_size


configure_logging()


def build_store() -> ReadingsStore:
    """Create the readings store from configuration."""
    if not validate_history_size(Config.MAX_HISTORY):
        raise ValueError(f"MAX_HISTORY must be between 1 and 10000, got {Config.MAX_HISTORY}")
    return ReadingsStore(mode=Config.STORE_MODE, max_history=Config.MAX_HISTORY)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Create the ReadingsStore (unless one was passed to create_app)
        2. Hang it on app.state so the routers can find it
        3. Print startup information

    SHUTDOWN:
        Nothing to clean up, the readings just go away with the process.
    """
    # ========== STARTUP ==========
    if getattr(app.state, "readings_store", None) is None:
        app.state.readings_store = build_store()
    store = app.state.readings_store

    print("=" * 60)
    print("WEATHERVERSE - Starting Backend")
    print("=" * 60)
    print(f"   Store mode: {store.mode.value}")
    print(f"   Max history: {store.max_history} readings")
    print(f"   CORS origins: {len(Config.CORS_ORIGINS)} configured")
    print()
    print("API Documentation: http://localhost:8000/docs")
    print("=" * 60)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    print()
    print("Shutting down... (readings are not persisted)")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(store: Optional[ReadingsStore] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        store: Use this store instead of building one from Config (tests do this)
    """
    app = FastAPI(
        title="WeatherVerse API",
        description="""
## Overview

Backend for a hobby weather station. The station posts temperature and
humidity, the dashboard reads them back.

## Endpoints

| Method | Path | What it does |
|--------|------|--------------|
| POST | `/api/readings` | Record a reading |
| GET | `/api/readings/latest` | Latest reading (`null` if none yet) |
| GET | `/api/readings/history` | Last 24 readings, oldest first |
| GET | `/update` | Old firmware: reading via query string |
| GET | `/data` | Old dashboard: latest values |

## Authentication

None. Put it behind something if you expose it to the internet.
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.readings_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(readings_router)
    app.include_router(legacy_router)

    @app.get(
        "/",
        response_class=PlainTextResponse,
        summary="Liveness",
        description="Check if the backend is running."
    )
    async def root():
        return "Server is up!"

    @app.get(
        "/health",
        summary="Health Check",
        description="Store configuration and how many readings it holds."
    )
    async def health():
        """Health check endpoint."""
        current = app.state.readings_store
        return {
            "status": "healthy",
            "store_mode": current.mode.value if current else None,
            "max_history": current.max_history if current else None,
            "readings": current.count if current else 0,
        }

    return app


app = create_app()
