"""
Home screen: the user's handle, recent pins, follower count and the
logout action.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .providers import PlacesProvider
from .store import AppState

logger = logging.getLogger(__name__)


class HomeView:
    def __init__(self, state: AppState, places: Optional[PlacesProvider] = None) -> None:
        self.state = state
        self.places = places or PlacesProvider()
        self.follower_count = 0
        # Pin id -> "<road>, <city>".
        self.addresses: Dict[str, str] = {}

    @property
    def display_name(self) -> str:
        return f"@{self.state.username}"

    @property
    def recent_pins(self) -> List[Dict[str, Any]]:
        return self.state.pins.recent_pins

    def load(self) -> None:
        """Refresh recent pins, the follower count and pin addresses."""
        self.state.pins.fetch_recent_pins()
        username = self.state.username
        if username:
            profile, error = self.state.api.get_user(username)
            if not error:
                self.follower_count = len((profile or {}).get("followers") or [])
        for pin in self.recent_pins:
            self._resolve_address(pin)

    def _resolve_address(self, pin: Dict[str, Any]) -> None:
        pin_id = pin.get("_id")
        position = pin.get("position") or {}
        if pin_id is None or pin_id in self.addresses or "lat" not in position:
            return
        address, error = self.places.reverse(position["lat"], position["lng"])
        if error:
            logger.warning("Could not resolve address of pin %s: %s", pin_id, error["message"])
            return
        self.addresses[pin_id] = address

    def select_pin(self, pin: Dict[str, Any]) -> None:
        """Focus the map on one of the recent pins."""
        self.state.selection.select_pin(pin)

    def logout(self, navigate: Callable[..., Any]) -> None:
        self.state.api.logout()
        self.state.users.logout()
        navigate("/", replace=True)
