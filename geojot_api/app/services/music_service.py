"""
Music search proxy.

The web client attaches a track to a pin by searching Spotify.  The
search runs server‑side so the Spotify client secret never reaches the
browser: the service obtains an app token with the client‑credentials
flow, caches it until shortly before it expires, and returns Spotify's
search response unchanged (``{"tracks": {"items": [...]}}``).
"""

import base64
import logging
import threading
import time
from typing import Any, Dict, Optional

import httpx

from geojot_api.app.core.config import settings

from .errors import NotConfigured, UpstreamError

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_SEARCH_URL = "https://api.spotify.com/v1/search"

# Refresh the token this many seconds before Spotify says it expires.
TOKEN_EXPIRY_MARGIN = 60


class MusicService:
    """Track search against the Spotify Web API."""

    _token: Optional[str] = None
    _token_expires_at: float = 0.0
    _lock = threading.Lock()

    @classmethod
    def reset_token(cls) -> None:
        with cls._lock:
            cls._token = None
            cls._token_expires_at = 0.0

    @classmethod
    def _access_token(cls) -> str:
        if not settings.spotify_client_id or not settings.spotify_client_secret:
            raise NotConfigured("Music search is not configured")
        with cls._lock:
            if cls._token and time.time() < cls._token_expires_at:
                return cls._token
        # Fetched outside the lock; concurrent refreshes just overwrite each other.
        credentials = f"{settings.spotify_client_id}:{settings.spotify_client_secret}"
        headers = {
            "Authorization": f"Basic {base64.b64encode(credentials.encode()).decode()}",
        }
        try:
            response = httpx.post(
                SPOTIFY_TOKEN_URL,
                headers=headers,
                data={"grant_type": "client_credentials"},
                timeout=15,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Spotify token request failed: %s", exc)
            raise UpstreamError("Music search is unavailable") from exc
        data = response.json()
        with cls._lock:
            cls._token = data["access_token"]
            cls._token_expires_at = time.time() + int(data.get("expires_in", 3600)) - TOKEN_EXPIRY_MARGIN
            return cls._token

    @classmethod
    def search_tracks(cls, query: str, limit: int = 10) -> Dict[str, Any]:
        """Search tracks by free text.

        An empty query short‑circuits to an empty result without calling
        Spotify.  A 401 from Spotify drops the cached token so the next
        call fetches a fresh one.  The calls block, so callers run this
        off the event loop.
        """
        query = query.strip()
        if not query:
            return {"tracks": {"items": []}}
        token = cls._access_token()
        try:
            response = httpx.get(
                SPOTIFY_SEARCH_URL,
                headers={"Authorization": f"Bearer {token}"},
                params={"q": query, "type": "track", "limit": limit},
                timeout=15,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 401:
                cls.reset_token()
            logger.error("Spotify search failed (%s): %s", exc.response.status_code, exc)
            raise UpstreamError("Music search is unavailable") from exc
        except httpx.HTTPError as exc:
            logger.error("Spotify search failed: %s", exc)
            raise UpstreamError("Music search is unavailable") from exc
        return response.json()
