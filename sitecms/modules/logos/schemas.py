"""Pydantic schemas for the site logo module."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SiteLogoCreate(BaseModel):
    """Schema for registering a new logo."""

    url: str = Field(..., min_length=1, max_length=1000)
    alt: str | None = Field(default=None, max_length=255)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    active: bool = True


class SiteLogoUpdate(BaseModel):
    """Schema for updating a logo. Only provided fields change."""

    url: str | None = Field(default=None, min_length=1, max_length=1000)
    alt: str | None = Field(default=None, max_length=255)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    active: bool | None = None


class SiteLogoResponse(BaseModel):
    """Schema for logo response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    alt: str
    width: int | None = None
    height: int | None = None
    active: bool
    created_at: datetime
    updated_at: datetime


class SiteLogoEnvelope(BaseModel):
    """``{"logo": ...}`` body; ``logo`` is null when none is active."""

    logo: SiteLogoResponse | None = None


class SiteLogoListResponse(BaseModel):
    """Schema for logo list response."""

    items: list[SiteLogoResponse]
    total: int
