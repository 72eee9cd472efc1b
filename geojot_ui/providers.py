"""
Third-party data providers used by the view models.

* ``WeatherProvider``: OpenWeatherMap current conditions.
* ``PlacesProvider``: OpenStreetMap Nominatim forward search and
  reverse geocoding.

Both return ``(data, error)`` tuples through
:func:`geojot_client.request_json`, like the GeoJot client itself.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from geojot_client import Error, request_json

from .config import settings

logger = logging.getLogger(__name__)

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


class WeatherProvider:
    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = settings.openweather_api_key if api_key is None else api_key
        self.url = url or settings.openweather_url
        self.session = session or requests.Session()
        self.timeout = timeout or settings.request_timeout

    def current(self, lat: float, lng: float) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Current weather at a point, in metric units.

        Returns the raw OpenWeatherMap payload (``main.temp``,
        ``weather[0].main``, ``weather[0].icon``, ``name``).
        """
        return request_json(
            self.session,
            "GET",
            self.url,
            params={"lat": lat, "lon": lng, "units": "metric", "appid": self.api_key},
            timeout=self.timeout,
        )


class PlacesProvider:
    """Place search and reverse geocoding against Nominatim.

    Nominatim's usage policy requires an identifying User-Agent.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_url).rstrip("/")
        self.session = session or requests.Session()
        self.headers = {"User-Agent": user_agent or settings.user_agent}
        self.timeout = timeout or settings.request_timeout

    def search(self, query: str, limit: int = 5) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Places matching ``query``: dicts with ``display_name``, ``lat`` and ``lon``."""
        data, error = request_json(
            self.session,
            "GET",
            f"{self.base_url}/search",
            params={"q": query, "format": "json", "limit": limit},
            headers=self.headers,
            timeout=self.timeout,
        )
        if error:
            return [], error
        return list(data or []), None

    def reverse(self, lat: float, lng: float) -> Tuple[Optional[str], Optional[Error]]:
        """Short address for a point: ``"<road>, <city>"``."""
        data, error = request_json(
            self.session,
            "GET",
            f"{self.base_url}/reverse",
            params={"lat": lat, "lon": lng, "format": "json"},
            headers=self.headers,
            timeout=self.timeout,
        )
        if error:
            return None, error
        return format_address((data or {}).get("address") or {}), None


def format_address(address: Dict[str, Any]) -> str:
    road = address.get("road") or address.get("pedestrian") or ""
    city = address.get("city") or address.get("town") or address.get("village") or ""
    return ", ".join(part for part in (road, city) if part)
