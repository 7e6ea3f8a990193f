"""
Pydantic models for volunteer opportunity posts.

Posts are free-form: besides the fields listed here the client may send
any descriptive attribute (category, location, thumbnail, ...) and it is
stored as is.  ``volunteersNeeded`` is the remaining number of open
slots and defaults to 1 when omitted.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """Schema for creating a post."""

    title: Optional[str] = Field(None, example="Beach clean-up")
    description: Optional[str] = Field(None, example="Help us clean the shore")
    deadline: Optional[str] = Field(None, example="2025-09-01")
    organizerName: Optional[str] = Field(None, example="Jane Doe")
    organizerEmail: Optional[str] = Field(None, example="organizer@example.com")
    volunteersNeeded: Optional[int] = Field(None, example=5)

    model_config = {"extra": "allow"}


class PostUpdate(BaseModel):
    """Schema for updating a post.

    ``organizerEmail`` identifies the caller and must match the stored
    owner.  All other fields are optional; only provided fields are
    written.
    """

    organizerEmail: Optional[str] = Field(None, example="organizer@example.com")

    model_config = {"extra": "allow"}


class VolunteersNeededUpdate(BaseModel):
    """Administrative overwrite of a post's remaining capacity."""

    volunteersNeeded: int = Field(..., example=3)
