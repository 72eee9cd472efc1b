"""Music search endpoint (Spotify proxy)."""

from fastapi import APIRouter, Query
from typing import Any, Dict

from geojot_api.app.api.errors import to_http_exception
from geojot_api.app.services.errors import ServiceError
from geojot_api.app.services.music_service import MusicService

router = APIRouter()


@router.get("/search")
def search_music(q: str = Query("", max_length=200)) -> Dict[str, Any]:
    """Spotify's track search response, unchanged.

    Plain ``def``: the Spotify calls block and run in the threadpool.
    """
    try:
        return MusicService.search_tracks(q)
    except ServiceError as e:
        raise to_http_exception(e) from e
