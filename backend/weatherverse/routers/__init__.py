"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .readings import (
    router as readings_router,
    legacy_router,
    get_readings_store,
)

__all__ = [
    "readings_router",
    "legacy_router",
    "get_readings_store",
]
