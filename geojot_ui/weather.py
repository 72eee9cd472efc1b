"""Local weather widget."""

import logging
import math
from typing import Any, Callable, Dict, Optional, Tuple

from .config import settings
from .providers import ICON_URL, WeatherProvider

logger = logging.getLogger(__name__)

LOADING = "Loading weather..."
NO_GEOLOCATION = "Geolocation is not supported by this browser. Defaulting to Liverpool, England."


class WeatherWidget:
    """Current weather at the user's position.

    ``geolocate`` returns ``(lat, lng)`` or ``None`` when the position is
    unavailable; passing no callable at all means geolocation is not
    supported.  Both fall back to Liverpool.  Until data arrives, or if
    the request fails, ``status`` stays ``Loading weather...``.
    """

    def __init__(
        self,
        provider: Optional[WeatherProvider] = None,
        geolocate: Optional[Callable[[], Optional[Tuple[float, float]]]] = None,
    ) -> None:
        self.provider = provider or WeatherProvider()
        self.geolocate = geolocate
        self.data: Optional[Dict[str, Any]] = None

    def _position(self) -> Tuple[float, float]:
        if self.geolocate is None:
            logger.error(NO_GEOLOCATION)
            return settings.default_lat, settings.default_lng
        position = self.geolocate()
        if position is None:
            logger.warning("Position unavailable, using %s", settings.default_city)
            return settings.default_lat, settings.default_lng
        return position

    def load(self) -> bool:
        lat, lng = self._position()
        data, error = self.provider.current(lat, lng)
        if error:
            logger.error("Error fetching weather: %s", error["message"])
            return False
        self.data = data
        return True

    @property
    def status(self) -> Optional[str]:
        return LOADING if self.data is None else None

    @property
    def temperature_text(self) -> Optional[str]:
        if self.data is None:
            return None
        return f"Temperature: {math.floor(self.data['main']['temp'] + 0.5)}°C"

    def _condition(self) -> Dict[str, Any]:
        conditions = (self.data or {}).get("weather") or [{}]
        return conditions[0]

    @property
    def description_text(self) -> Optional[str]:
        if self.data is None:
            return None
        return f"Weather: {self._condition().get('main', '')}"

    @property
    def city(self) -> Optional[str]:
        return (self.data or {}).get("name")

    @property
    def icon_url(self) -> Optional[str]:
        icon = self._condition().get("icon") if self.data else None
        return ICON_URL.format(icon=icon) if icon else None
