"""
Pydantic models for user data.

Defines the payloads for registration, login, profile reads and the
follow/unfollow actions.  Passwords are accepted on input only and
never serialised back.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UserRegister(BaseModel):
    """Schema for ``POST /api/register``."""

    username: str = Field(..., examples=["alice"])
    email: str = Field(..., examples=["alice@example.com"])
    password: str = Field(..., examples=["Sup3rSecret"])


class UserLogin(BaseModel):
    username: str = Field(..., examples=["alice"])
    password: str = Field(..., examples=["Sup3rSecret"])


class UserRead(BaseModel):
    """Public view of a user, as returned by search."""

    username: str
    profile_pic: Optional[str] = Field(None, alias="profilePic")

    model_config = {
        "populate_by_name": True,
    }


class UserProfile(UserRead):
    """A user together with both sides of the follow graph."""

    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)


class LoginResponse(BaseModel):
    user: UserRead
    token: str
    token_type: str = "bearer"


class FollowRequest(BaseModel):
    """Body of the follow/unfollow endpoints.

    ``follower`` is the user who starts or stops following; it must be
    the authenticated user.
    """

    follower: str = Field(..., examples=["bob"])


class MessageResponse(BaseModel):
    message: str
