"""GeoJot API client.

This module defines a thin client around the GeoJot REST API.  It is used
by the view models in :mod:`geojot_ui` and by the command line tools.  The
client uses the ``requests`` library internally to make HTTP calls.

The client exposes one method per endpoint:

* :meth:`GeoJotAPI.register` / :meth:`GeoJotAPI.login` – accounts.
* :meth:`GeoJotAPI.list_pins` / :meth:`GeoJotAPI.recent_pins` – read pins.
* :meth:`GeoJotAPI.create_pin`, :meth:`GeoJotAPI.update_pin`,
  :meth:`GeoJotAPI.delete_pin` – owner edits.
* :meth:`GeoJotAPI.toggle_like`, :meth:`GeoJotAPI.invite_collaborator`.
* :meth:`GeoJotAPI.search_users`, :meth:`GeoJotAPI.get_user`,
  :meth:`GeoJotAPI.follow`, :meth:`GeoJotAPI.unfollow`.
* :meth:`GeoJotAPI.upload_media`, :meth:`GeoJotAPI.upload_profile_pic`.
* :meth:`GeoJotAPI.search_music`.

No method raises for network or HTTP failures.  Every call returns a
tuple ``(data, error)``: on success ``error`` is ``None``; on failure
``data`` is ``None`` (or an empty list for list endpoints) and ``error``
is a dictionary with ``status_code``, ``message`` and the decoded
``body`` (when the server sent JSON).

The same helper, :func:`request_json`, is used for the third-party
providers (weather, geocoding) so that every network failure in the
application is reported the same way.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://geojotbackend.onrender.com"
DEFAULT_TIMEOUT = 15

Error = Dict[str, Any]
Result = Tuple[Optional[Any], Optional[Error]]


def _error_message(response: requests.Response) -> Tuple[str, Optional[Any]]:
    """Extract a human readable message from an error response.

    The GeoJot backend answers ``{"error": ...}``; FastAPI defaults and
    other services use ``detail`` or ``message``.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "", None
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail") or body.get("message")
        if message:
            return str(message), body
    return str(body), body


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    *,
    params: Dict[str, Any] | None = None,
    json_body: Any | None = None,
    files: Dict[str, Any] | None = None,
    headers: Dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Result:
    """Perform an HTTP request and decode the JSON response.

    Args:
        session: The ``requests`` session to send the request with.
        method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
        url: Absolute URL.
        params: Query parameters to include in the request.
        json_body: JSON body to send with the request.
        files: Multipart files, in the format ``requests`` accepts.
        headers: Extra request headers.
        timeout: Timeout in seconds.
    Returns:
        A tuple ``(data, error)``.  ``data`` contains the parsed JSON
        response on success (``None`` for empty bodies) and ``error`` is
        ``None``.  On failure ``data`` is ``None`` and ``error`` is a
        dictionary with keys ``status_code``, ``message`` and ``body``.
    """
    try:
        logger.debug("Sending %s request to %s", method, url)
        response = session.request(
            method=method,
            url=url,
            params=params,
            json=json_body,
            files=files,
            headers=headers or {},
            timeout=timeout,
        )
        response.raise_for_status()
        if response.content:
            return response.json(), None
        return None, None
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        message, body = ("", None)
        if exc.response is not None:
            message, body = _error_message(exc.response)
        if not message:
            message = str(exc)
        logger.error("Request %s %s failed (%s): %s", method, url, status, message)
        return None, {"status_code": status, "message": message, "body": body}
    except ValueError as exc:
        # Successful status but a body that is not JSON.
        logger.error("Invalid JSON from %s %s: %s", method, url, exc)
        return None, {"status_code": None, "message": "Invalid response from server", "body": None}
    except requests.RequestException as exc:
        logger.error("Request %s %s failed: %s", method, url, exc)
        return None, {"status_code": None, "message": str(exc), "body": None}


class GeoJotAPI:
    """Client for the GeoJot REST API.

    Authentication is a bearer token.  :meth:`login` stores the token it
    receives so later calls are authenticated; it can also be passed in
    directly as ``api_key``.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API.  Defaults to the
                ``GEOJOT_BASE_URL`` environment variable, then to the
                hosted backend.
            api_key: Optional bearer token.  If set, an ``Authorization``
                header with the value ``Bearer <api_key>`` is included in
                all requests.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Request timeout in seconds.
        """
        base_url = base_url or os.getenv("GEOJOT_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout or float(os.getenv("GEOJOT_REQUEST_TIMEOUT", str(DEFAULT_TIMEOUT)))

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
        files: Dict[str, Any] | None = None,
    ) -> Result:
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return request_json(
            self.session,
            method,
            self.url(path),
            params=params,
            json_body=json_body,
            files=files,
            headers=headers,
            timeout=self.timeout,
        )

    def _list(self, path: str, params: Dict[str, Any]) -> Tuple[List[Any], Optional[Error]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        if isinstance(data, list):
            return data, None
        logger.warning("Unexpected response from %s: %r", path, data)
        return [], {"status_code": None, "message": "Unexpected response from server", "body": data}

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def register(self, username: str, email: str, password: str) -> Result:
        """Create an account.  On success ``data`` is ``{"message": ...}``."""
        return self._request(
            "POST",
            "/api/register",
            json_body={"username": username, "email": email, "password": password},
        )

    def login(self, username: str, password: str) -> Result:
        """Log in and remember the returned token.

        Returns:
            ``({"user": {"username": ...}, "token": ...}, None)`` on
            success.
        """
        data, error = self._request(
            "POST", "/api/login", json_body={"username": username, "password": password}
        )
        if error:
            return None, error
        if isinstance(data, dict) and data.get("token"):
            self.api_key = data["token"]
        return data, None

    def logout(self) -> None:
        self.api_key = None

    # ------------------------------------------------------------------
    # Pins
    # ------------------------------------------------------------------
    def list_pins(self, username: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Pins on ``username``'s map (own pins and shared ones)."""
        return self._list("/api/pins", {"username": username})

    def recent_pins(self, username: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/api/pins/recent", {"username": username})

    def create_pin(self, pin: Dict[str, Any]) -> Result:
        return self._request("POST", "/api/pins", json_body=pin)

    def update_pin(self, pin_id: str, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/api/pins/{pin_id}", json_body=changes)

    def delete_pin(self, pin_id: str) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/api/pins/{pin_id}")
        return error is None, error

    def toggle_like(self, pin_id: str) -> Tuple[Optional[List[str]], Optional[Error]]:
        """Like or unlike a pin.  Returns the usernames that like it now."""
        data, error = self._request("POST", f"/api/pins/{pin_id}/like")
        if error:
            return None, error
        return list((data or {}).get("likes", [])), None

    def invite_collaborator(self, pin_id: str, username: str) -> Result:
        return self._request(
            "POST", f"/api/pins/{pin_id}/collaborators", json_body={"username": username}
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def search_users(self, query: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/api/users/search", {"query": query})

    def get_user(self, username: str) -> Result:
        return self._request("GET", f"/api/users/{username}")

    def follow(self, username: str, follower: str) -> Result:
        """Make ``follower`` (the logged-in user) follow ``username``."""
        return self._request(
            "POST", f"/api/users/{username}/follow", json_body={"follower": follower}
        )

    def unfollow(self, username: str, follower: str) -> Result:
        return self._request(
            "POST", f"/api/users/{username}/unfollow", json_body={"follower": follower}
        )

    def upload_profile_pic(
        self, username: str, filename: str, content: bytes, content_type: str
    ) -> Result:
        """Upload a new profile picture.  ``data`` is ``{"profilePic": url}``."""
        return self._request(
            "PUT",
            f"/api/users/{username}/profile-pic",
            files={"profilePic": (filename, content, content_type)},
        )

    # ------------------------------------------------------------------
    # Media and music
    # ------------------------------------------------------------------
    def upload_media(self, filename: str, content: bytes, content_type: str) -> Result:
        """Upload one image.  ``data`` is ``{"url": ..., "title": ...}``."""
        return self._request(
            "POST", "/api/media", files={"file": (filename, content, content_type)}
        )

    def search_music(self, query: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Search tracks.  Returns the raw Spotify track items."""
        data, error = self._request("GET", "/api/music/search", params={"q": query})
        if error:
            return [], error
        items = ((data or {}).get("tracks") or {}).get("items") or []
        return list(items), None
