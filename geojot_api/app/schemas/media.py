"""Pydantic models for uploaded images."""

from pydantic import BaseModel


class MediaRead(BaseModel):
    """Where an uploaded image can be fetched from."""

    url: str
    title: str
