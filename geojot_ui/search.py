"""
Search box for users and places.

Each query runs two requests side by side: user search on the GeoJot
API and place search on Nominatim.  Both go through the shared
in-flight tracker, so typing faster than the network answers never
shows results of an older query.
"""

import logging
from concurrent.futures import Future
from typing import Any, Callable, Dict, List, Optional

from .providers import PlacesProvider
from .store import AppState

logger = logging.getLogger(__name__)

LOADING = "Loading..."
TABS = ("users", "places")


class SearchView:
    def __init__(
        self,
        state: AppState,
        places: Optional[PlacesProvider] = None,
        on_select_user: Optional[Callable[[Dict[str, Any]], None]] = None,
        on_select_location: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        self.state = state
        self.places_provider = places or PlacesProvider()
        self.on_select_user = on_select_user
        self.on_select_location = on_select_location
        self.query = ""
        self.users: List[Dict[str, Any]] = []
        self.places: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.active_tab = "users"
        self.open = False

    def _key(self, name: str):
        return (id(self), name)

    def search(self, query: str) -> List[Future]:
        """Start both searches; returns their futures."""
        self.query = query
        self.open = True
        self.error = None
        if not query.strip():
            for name in TABS:
                self.state.inflight.cancel(self._key(name))
            self.users = []
            self.places = []
            return []
        return [
            self.state.inflight.submit(
                self._key("users"), self.state.api.search_users, query,
                on_result=self._users_loaded,
            ),
            self.state.inflight.submit(
                self._key("places"), self.places_provider.search, query,
                on_result=self._places_loaded,
            ),
        ]

    def _users_loaded(self, result: Any) -> None:
        users, error = result
        if error:
            logger.error("User search failed: %s", error["message"])
            self.error = f"Error: {error['message']}"
        self.users = users

    def _places_loaded(self, result: Any) -> None:
        places, error = result
        if error:
            logger.error("Place search failed: %s", error["message"])
            self.error = f"Error: {error['message']}"
        self.places = places

    @property
    def loading(self) -> bool:
        return any(self.state.inflight.pending(self._key(name)) for name in TABS)

    @property
    def status(self) -> Optional[str]:
        """``Loading...`` while a search runs, then the error if one failed."""
        if self.loading:
            return LOADING
        return self.error

    def show_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab {tab!r}")
        self.active_tab = tab

    def select_user(self, user: Dict[str, Any]) -> None:
        if self.on_select_user:
            self.on_select_user(user)
        self.close()

    def select_location(self, place: Dict[str, Any]) -> None:
        self.state.selection.select_location(float(place["lat"]), float(place["lon"]))
        if self.on_select_location:
            self.on_select_location(place)
        self.close()

    def close(self) -> None:
        self.open = False
