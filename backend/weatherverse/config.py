"""
Configuration
=============

Settings for the backend and the dashboard client, loaded from environment
variables (and a .env file if there is one).

Environment Variables:
    STORE_MODE: "history" (bounded list) or "latest" (one slot). Default: history
    MAX_HISTORY: Readings kept in history mode. Default: 24
    FRONTEND_URL: URL of the dashboard for CORS
    LOG_LEVEL: Logging level. Default: INFO
    DASHBOARD_BASE_URL: Backend URL the dashboard client polls
    POLL_INTERVAL: Seconds between dashboard polls. Default: 30
    ALERT_CHANNEL: "smtp", "emailjs" or "none". Default: smtp
    ALERT_TEMPERATURE_THRESHOLD: °C, default 40
    ALERT_HUMIDITY_THRESHOLD: %, default 80
    ALERT_EDGE_TRIGGERED: "true" to alert only when crossing the threshold

SMTP_* and EMAILJS_* variables are read by the notifiers themselves.
"""

import logging
import os
import sys

from dotenv import load_dotenv

from weatherverse.models import StoreMode


# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    Application configuration loaded from environment variables.

    Defaults are set for local development: backend on port 8000,
    dashboard dev server on 5173.
    """

    # Store
    STORE_MODE = StoreMode(os.getenv("STORE_MODE", "history").strip().lower())
    MAX_HISTORY = int(os.getenv("MAX_HISTORY", "24"))

    # Frontend URL for CORS
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Allowed CORS origins
    CORS_ORIGINS = [
        FRONTEND_URL,
        "http://localhost:5173",    # Vite dev server
        "http://localhost:3000",    # Create React App
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Dashboard client
    DASHBOARD_BASE_URL = os.getenv("DASHBOARD_BASE_URL", "http://localhost:8000")
    POLL_INTERVAL = float(os.getenv("POLL_INTERVAL", "30"))

    # Alerts
    ALERT_CHANNEL = os.getenv("ALERT_CHANNEL", "smtp")
    ALERT_TEMPERATURE_THRESHOLD = float(os.getenv("ALERT_TEMPERATURE_THRESHOLD", "40"))
    ALERT_HUMIDITY_THRESHOLD = float(os.getenv("ALERT_HUMIDITY_THRESHOLD", "80"))
    ALERT_EDGE_TRIGGERED = _env_bool("ALERT_EDGE_TRIGGERED")


def configure_logging(level: str = None):
    """Send log lines to stderr as "[12:00:00] message"."""
    logging.basicConfig(
        level=level or Config.LOG_LEVEL,
        format='[%(asctime)s] %(message)s',
        datefmt='%H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
