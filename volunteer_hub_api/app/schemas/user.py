"""
Pydantic models for user data.

Users sign in on the web client (usually through Google) and the client
reports the identity to the API.  ``email`` is optional at the schema
level so that a missing email is reported as a 400 by the user service
rather than as a schema error.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserUpsert(BaseModel):
    """Identity reported by the client after sign in."""

    email: Optional[str] = Field(None, example="volunteer@example.com")
    name: Optional[str] = Field(None, example="Jane Doe")
    photoURL: Optional[str] = Field(None, example="https://example.com/avatar.png")
    provider: Optional[str] = Field(None, example="google")


class UserTouch(BaseModel):
    email: Optional[str] = Field(None, example="volunteer@example.com")
    lastSignInTime: Optional[str] = Field(None, example="2025-01-01T10:00:00Z")
