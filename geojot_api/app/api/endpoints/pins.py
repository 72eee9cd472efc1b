"""
Pin endpoints.

Reads are public; every mutation needs a bearer token, and edits,
deletion and invitations are limited to the pin's owner.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List

from geojot_api.app.api.errors import to_http_exception
from geojot_api.app.core.security import get_current_user
from geojot_api.app.schemas.pin import (
    CollaboratorRequest,
    LikesResponse,
    PinCreate,
    PinRead,
    PinUpdate,
)
from geojot_api.app.schemas.user import MessageResponse
from geojot_api.app.services.errors import ServiceError
from geojot_api.app.services.pin_service import PinService

router = APIRouter()


@router.get("", response_model=List[PinRead])
async def list_pins(username: str = Query(...)) -> List[PinRead]:
    """Pins on ``username``'s map: their own and those shared with them."""
    try:
        return await PinService.list_pins(username)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/recent", response_model=List[PinRead])
async def recent_pins(username: str = Query(...)) -> List[PinRead]:
    """The user's most recently created or edited pins, newest first."""
    try:
        return await PinService.recent_pins(username)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("", response_model=PinRead, status_code=status.HTTP_201_CREATED)
async def create_pin(
    pin: PinCreate,
    current_user: dict = Depends(get_current_user),
) -> PinRead:
    try:
        return await PinService.create_pin(pin, current_user["username"])
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{pin_id}", response_model=PinRead)
async def get_pin(pin_id: int) -> PinRead:
    try:
        return await PinService.get_pin(pin_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{pin_id}", response_model=PinRead)
async def update_pin(
    pin_id: int,
    updates: PinUpdate,
    current_user: dict = Depends(get_current_user),
) -> PinRead:
    """Partial update; fields left out of the body keep their value."""
    try:
        return await PinService.update_pin(pin_id, updates, current_user["username"])
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{pin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pin(
    pin_id: int,
    current_user: dict = Depends(get_current_user),
) -> None:
    try:
        await PinService.delete_pin(pin_id, current_user["username"])
    except ServiceError as e:
        raise to_http_exception(e) from e
    return None


@router.post("/{pin_id}/like", response_model=LikesResponse)
async def toggle_like(
    pin_id: int,
    current_user: dict = Depends(get_current_user),
) -> LikesResponse:
    """Like the pin, or take the like back if already given."""
    try:
        likes = await PinService.toggle_like(pin_id, current_user["username"])
    except ServiceError as e:
        raise to_http_exception(e) from e
    return LikesResponse(likes=likes)


@router.post("/{pin_id}/collaborators", response_model=MessageResponse)
async def invite_collaborator(
    pin_id: int,
    body: CollaboratorRequest,
    current_user: dict = Depends(get_current_user),
) -> MessageResponse:
    try:
        await PinService.add_collaborator(pin_id, body.username, current_user["username"])
    except ServiceError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Collaborator added")
