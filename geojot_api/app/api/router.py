"""
Top‑level API router.

Aggregates the domain routers.  The paths are part of the contract the
web client was built against, so they are not versioned.
"""

from fastapi import APIRouter

from .endpoints import auth, media, music, pins, users

router = APIRouter()

# ``auth`` exposes /register and /login directly under the API root.
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(pins.router, prefix="/pins", tags=["pins"])
router.include_router(media.router, prefix="/media", tags=["media"])
router.include_router(music.router, prefix="/music", tags=["music"])
