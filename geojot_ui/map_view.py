"""
The map screen.

Shows the pins of one user (the logged-in user by default) and lets the
owner place new pins.  It follows the selection channel: when the
search box or the recent-pins list selects a place, the map centres on
it at ``FOCUS_ZOOM`` and clears the selection.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import settings
from .pin_detail import PinDetailView
from .pin_form import PinForm
from .store import AppState, SelectionChannel

logger = logging.getLogger(__name__)

DEFAULT_ZOOM = 13
FOCUS_ZOOM = 15

LOAD_FAILED = "Failed to load pins"

# Returns (lat, lng), or None when the position cannot be determined.
Geolocate = Callable[[], Optional[Tuple[float, float]]]


class MapView:
    def __init__(
        self,
        state: AppState,
        viewed_username: Optional[str] = None,
        geolocate: Optional[Geolocate] = None,
    ) -> None:
        self.state = state
        self.viewed_username = viewed_username or state.username
        self.pins: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.center = self._initial_center(geolocate)
        self.zoom = DEFAULT_ZOOM
        self._unsubscribe = state.selection.subscribe(self._on_selection)

    @staticmethod
    def _initial_center(geolocate: Optional[Geolocate]) -> Tuple[float, float]:
        position = geolocate() if geolocate else None
        if position is None:
            return settings.default_lat, settings.default_lng
        return position

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Pins
    # ------------------------------------------------------------------
    def load_pins(self) -> bool:
        pins, error = self.state.api.list_pins(self.viewed_username)
        if error:
            self.error = LOAD_FAILED
            return False
        self.error = None
        self.pins = pins
        return True

    def find_pin(self, pin_id: str) -> Optional[Dict[str, Any]]:
        return next((p for p in self.pins if p.get("_id") == pin_id), None)

    @property
    def can_place_pins(self) -> bool:
        """Pins can only be dropped on one's own map."""
        username = self.state.username
        return username is not None and username == self.viewed_username

    def place_pin(self, lat: float, lng: float) -> Optional[PinForm]:
        if not self.can_place_pins:
            logger.info("Ignoring pin placement on %s's map", self.viewed_username)
            return None
        return PinForm(
            self.state,
            position={"lat": lat, "lng": lng},
            on_saved=self._pin_saved,
            on_deleted=self._pin_removed,
        )

    def open_pin(self, pin_id: str) -> Optional[PinDetailView]:
        pin = self.find_pin(pin_id)
        if pin is None:
            return None
        return PinDetailView(
            self.state,
            pin,
            on_delete=self.delete_pin,
            on_saved=self._pin_saved,
            on_removed=self._pin_removed,
        )

    def delete_pin(self, pin_id: str) -> bool:
        pin = self.find_pin(pin_id)
        if pin is None or pin.get("username") != self.state.username:
            return False
        ok, error = self.state.api.delete_pin(pin_id)
        if not ok:
            self.error = f"Failed to delete pin: {error['message']}"
            return False
        self._pin_removed(pin_id)
        self.state.pins.fetch_recent_pins()
        return True

    def _pin_saved(self, pin: Dict[str, Any]) -> None:
        for index, existing in enumerate(self.pins):
            if existing.get("_id") == pin.get("_id"):
                self.pins[index] = pin
                return
        self.pins.append(pin)

    def _pin_removed(self, pin_id: str) -> None:
        self.pins = [p for p in self.pins if p.get("_id") != pin_id]

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def _on_selection(self, selection: SelectionChannel) -> None:
        target = selection.location
        if target is None and selection.pin is not None:
            target = selection.pin.get("position")
        if not target:
            return
        self.center = (float(target["lat"]), float(target["lng"]))
        self.zoom = FOCUS_ZOOM
        selection.clear()
