"""
Services Package
================

These are the "workers" that do the actual work.

- ReadingsStore: Keeps the latest reading or a short history
- AlertTrigger: Fires a notification when it's too hot or humid
- EmailNotifier / EmailJSNotifier: How the notification gets sent
- DashboardPoller: The dashboard side, polls the backend on a timer
"""

from .readings_store import ReadingsStore
from .alert_service import (
    AlertTrigger,
    EmailNotifier,
    EmailJSNotifier,
    NullNotifier,
    build_notifier,
)
from .dashboard_client import DashboardPoller

__all__ = [
    "ReadingsStore",
    "AlertTrigger",
    "EmailNotifier",
    "EmailJSNotifier",
    "NullNotifier",
    "build_notifier",
    "DashboardPoller",
]
