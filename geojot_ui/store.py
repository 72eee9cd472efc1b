"""
Shared client state.

``AppState`` bundles the two stores every view model reads (identity
and recent pins) with the selection channel the search box uses to
tell the map where to go.  Each store keeps a list of subscribers that
are called with the store after every change.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from geojot_client import GeoJotAPI

from .config import settings
from .inflight import InFlightRequests

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class Store:
    """Minimal observable: ``subscribe`` returns an unsubscribe callable."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self)


class UserStore(Store):
    """The logged-in identity."""

    def __init__(self, username: Optional[str] = None, token: Optional[str] = None) -> None:
        super().__init__()
        self.username = username
        self.token = token

    @property
    def logged_in(self) -> bool:
        return self.username is not None

    def login(self, username: str, token: Optional[str] = None) -> None:
        with self._lock:
            self.username = username
            self.token = token
        logger.info("Logged in as %s", username)
        self.notify()

    def logout(self) -> None:
        """Forget the identity.  Navigation is left to the caller."""
        with self._lock:
            self.username = None
            self.token = None
        self.notify()


class PinStore(Store):
    """Recent pins of the logged-in user."""

    def __init__(self, api: GeoJotAPI, users: UserStore) -> None:
        super().__init__()
        self.api = api
        self.users = users
        self.recent_pins: List[Dict[str, Any]] = []
        users.subscribe(self._user_changed)

    def _user_changed(self, users: UserStore) -> None:
        if users.logged_in or not self.recent_pins:
            return
        with self._lock:
            self.recent_pins = []
        self.notify()

    def fetch_recent_pins(self) -> bool:
        """Reload ``recent_pins`` from the server.

        On success the list is replaced by the response exactly as
        returned.  On failure the error is logged and the previous list
        is kept.  Returns whether the refresh succeeded.
        """
        username = self.users.username
        if not username:
            logger.warning("Not fetching recent pins: no user is logged in")
            return False
        pins, error = self.api.recent_pins(username)
        if error:
            logger.error("Error fetching recent pins: %s", error["message"])
            return False
        with self._lock:
            self.recent_pins = pins
        self.notify()
        return True


class SelectionChannel(Store):
    """Location or pin picked elsewhere that the map should focus on.

    The map clears the selection once it has moved, so selecting the
    same place twice moves the map twice.
    """

    def __init__(self) -> None:
        super().__init__()
        self.location: Optional[Dict[str, float]] = None
        self.pin: Optional[Dict[str, Any]] = None

    def select_location(self, lat: float, lng: float) -> None:
        with self._lock:
            self.location = {"lat": float(lat), "lng": float(lng)}
        self.notify()

    def select_pin(self, pin: Dict[str, Any]) -> None:
        with self._lock:
            self.pin = pin
        self.notify()

    def clear(self) -> None:
        # No notification; clearing is the consumer acknowledging.
        with self._lock:
            self.location = None
            self.pin = None


class AppState:
    """Everything a view model needs from its surroundings.

    ``inflight`` runs the search-as-you-type requests of every view.
    """

    def __init__(
        self,
        api: GeoJotAPI,
        users: Optional[UserStore] = None,
        pins: Optional[PinStore] = None,
        selection: Optional[SelectionChannel] = None,
        inflight: Optional[InFlightRequests] = None,
    ) -> None:
        self.api = api
        self.users = users or UserStore()
        self.pins = pins or PinStore(api, self.users)
        self.selection = selection or SelectionChannel()
        self.inflight = inflight or InFlightRequests(max_workers=settings.search_workers)

    @property
    def username(self) -> Optional[str]:
        return self.users.username
