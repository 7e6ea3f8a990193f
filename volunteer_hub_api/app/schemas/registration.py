"""
Pydantic models for volunteer registrations.

A registration links one volunteer (identified by email) to one post.
Additional descriptive fields sent by the client, such as ``postTitle``
or a free-text ``suggestion``, are stored alongside the registration.
"""

from typing import Optional

from pydantic import BaseModel, Field


class RegistrationCreate(BaseModel):
    """Schema for signing up as a volunteer for a post."""

    postId: Optional[str] = Field(None, example="64f0c2a1e4b0a1b2c3d4e5f6")
    userId: Optional[str] = Field(None, example="64f0c2a1e4b0a1b2c3d4e5f7")
    userName: Optional[str] = Field(None, example="Jane Doe")
    userEmail: Optional[str] = Field(None, example="volunteer@example.com")

    model_config = {"extra": "allow"}
