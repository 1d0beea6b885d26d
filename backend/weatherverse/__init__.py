"""
WeatherVerse Backend
====================

This is the Python package for the weather station backend.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a reading look like?)
- services/  = Workers (store readings, poll the backend, send alerts)
- routers/   = API endpoints (the doors into our app)
- utils/     = Validation helpers
- config.py  = Settings from environment variables
- main.py    = Puts it all together and starts the server

Author: WeatherVerse Team
"""
