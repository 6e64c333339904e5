"""Environment-driven settings for the earthquake search service."""

import os

USGS_API_URL = os.getenv(
    "USGS_API_URL", "https://earthquake.usgs.gov/fdsnws/event/1"
).rstrip("/")
NOMINATIM_URL = os.getenv(
    "NOMINATIM_URL", "https://nominatim.openstreetmap.org"
).rstrip("/")
HTTP_USER_AGENT = os.getenv("HTTP_USER_AGENT", "EarthquakeSearchApp/1.0")
HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "10"))
REVERSE_GEOCODE_DELAY_S = float(os.getenv("REVERSE_GEOCODE_DELAY_S", "0.1"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
