"""
Pydantic models for pins.

A pin is a geolocated note owned by one user.  It may carry up to nine
images (``mediaFiles``), one music track (``songDetails``), the list of
users who liked it and the list of invited collaborators.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

MAX_MEDIA_FILES = 9


class Position(BaseModel):
    lat: float = Field(..., ge=-90, le=90, examples=[53.4084])
    lng: float = Field(..., ge=-180, le=180, examples=[-2.9916])


class MediaFile(BaseModel):
    url: str
    title: Optional[str] = None


class SongDetails(BaseModel):
    """Track attached to a pin, in the shape the music search returns."""

    title: str = ""
    artists: str = ""
    album_art_url: Optional[str] = Field("", alias="albumArtUrl")
    preview_url: Optional[str] = Field("", alias="previewUrl")

    model_config = {
        "populate_by_name": True,
    }


class PinBase(BaseModel):
    position: Position
    name: str = Field(..., examples=["Lime Street"])
    notes: str = Field("", examples=["Met the band here"])
    media_files: List[MediaFile] = Field(
        default_factory=list, alias="mediaFiles", max_length=MAX_MEDIA_FILES
    )
    song_details: Optional[SongDetails] = Field(None, alias="songDetails")

    model_config = {
        "populate_by_name": True,
    }


class PinCreate(PinBase):
    """Schema for creating a pin; the owner is the authenticated user."""
    pass


class PinUpdate(BaseModel):
    """Schema for editing a pin.

    All fields are optional; only provided fields are changed.
    """

    position: Optional[Position] = None
    name: Optional[str] = None
    notes: Optional[str] = None
    media_files: Optional[List[MediaFile]] = Field(
        None, alias="mediaFiles", max_length=MAX_MEDIA_FILES
    )
    song_details: Optional[SongDetails] = Field(None, alias="songDetails")

    model_config = {
        "populate_by_name": True,
    }


class PinRead(PinBase):
    """Schema for reading a pin from the API."""

    id: str = Field(..., alias="_id")
    username: str
    likes: List[str] = Field(default_factory=list)
    collaborators: List[str] = Field(default_factory=list)
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class CollaboratorRequest(BaseModel):
    username: str = Field(..., examples=["bob"])


class LikesResponse(BaseModel):
    likes: List[str]
