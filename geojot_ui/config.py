"""
Client configuration.

Like the backend ``Settings``, values default from environment
variables and are read once at import time.
"""

import os
from dataclasses import dataclass

from geojot_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


@dataclass
class Settings:
    """Client settings loaded from environment variables."""

    base_url: str = os.getenv("GEOJOT_BASE_URL", DEFAULT_BASE_URL)
    request_timeout: float = float(os.getenv("GEOJOT_REQUEST_TIMEOUT", str(DEFAULT_TIMEOUT)))

    # OpenWeatherMap current weather.  Without a key the widget stays
    # on its loading message.
    openweather_api_key: str = os.getenv("OPENWEATHER_API_KEY", "")
    openweather_url: str = os.getenv(
        "OPENWEATHER_URL", "https://api.openweathermap.org/data/2.5/weather"
    )

    # OpenStreetMap Nominatim, used for place search and reverse geocoding.
    nominatim_url: str = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
    user_agent: str = os.getenv("GEOJOT_USER_AGENT", "geojot-client/1.0")

    # Worker threads for search-as-you-type requests.
    search_workers: int = int(os.getenv("GEOJOT_SEARCH_WORKERS", "4"))

    # Fallback when geolocation is unavailable: Liverpool, England.
    default_lat: float = 53.4084
    default_lng: float = -2.9916
    default_city: str = "Liverpool"


settings = Settings()
