"""Pydantic schemas for the auth module."""

from datetime import datetime

from pydantic import BaseModel


class SessionResponse(BaseModel):
    """The verified admin behind the current session."""

    user_id: str
    email: str | None = None
    role: str | None = None
    expires_at: datetime | None = None
