"""
User endpoints: search, profiles, the follow graph and profile pictures.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from typing import Dict, List

from geojot_api.app.api.endpoints.media import read_upload
from geojot_api.app.api.errors import to_http_exception
from geojot_api.app.core.security import get_current_user
from geojot_api.app.schemas.user import FollowRequest, UserProfile, UserRead
from geojot_api.app.services.errors import ServiceError
from geojot_api.app.services.media_service import MediaService
from geojot_api.app.services.user_service import UserService

router = APIRouter()


def _require_self(current_user: dict, username: str, action: str) -> None:
    if current_user["username"] != username:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} as yourself",
        )


@router.get("/search", response_model=List[UserRead])
async def search_users(query: str = Query("", max_length=100)) -> List[UserRead]:
    """Usernames containing ``query``, exact match first."""
    return await UserService.search_users(query)


@router.get("/{username}", response_model=UserProfile)
async def get_profile(username: str) -> UserProfile:
    try:
        return await UserService.get_profile(username)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.api_route("/{username}/follow", methods=["POST", "PUT"], response_model=UserProfile)
async def follow(
    username: str,
    body: FollowRequest,
    current_user: dict = Depends(get_current_user),
) -> UserProfile:
    """``body.follower`` starts following ``username``.

    The follower must be the authenticated user.
    """
    _require_self(current_user, body.follower, "follow")
    try:
        return await UserService.follow(username, body.follower)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.api_route("/{username}/unfollow", methods=["POST", "PUT"], response_model=UserProfile)
async def unfollow(
    username: str,
    body: FollowRequest,
    current_user: dict = Depends(get_current_user),
) -> UserProfile:
    _require_self(current_user, body.follower, "unfollow")
    try:
        return await UserService.unfollow(username, body.follower)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{username}/profile-pic")
async def upload_profile_pic(
    username: str,
    request: Request,
    profile_pic: UploadFile = File(..., alias="profilePic"),
    current_user: dict = Depends(get_current_user),
) -> Dict[str, str]:
    """Replace the user's profile picture with the uploaded image.

    Returns ``{"profilePic": <absolute url>}``.
    """
    _require_self(current_user, username, "change the profile picture")
    content = await read_upload(profile_pic)
    try:
        media_id = await MediaService.store_image(
            current_user["user_id"], profile_pic.filename, profile_pic.content_type, content
        )
        url = str(request.url_for("get_media", media_id=media_id))
        await UserService.set_profile_pic(username, url)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return {"profilePic": url}
