"""Pydantic schemas for the media module."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MediaAssetCreate(BaseModel):
    """Register an object that was uploaded through a presigned URL."""

    filename: str = Field(..., min_length=1, max_length=255)
    mime_type: str = Field(..., min_length=1, max_length=100)
    file_size: int = Field(..., gt=0)
    s3_key: str = Field(..., min_length=1, max_length=500)
    url: str | None = Field(default=None, max_length=1000)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    alt_text: str | None = Field(default=None, max_length=500)
    folder: str | None = Field(default=None, max_length=100)


class MediaAssetUpdate(BaseModel):
    """Schema for updating media metadata."""

    alt_text: str | None = Field(default=None, max_length=500)
    folder: str | None = Field(default=None, max_length=100)


class MediaAssetResponse(BaseModel):
    """Schema for media asset response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    mime_type: str
    file_size: int
    s3_key: str
    url: str
    width: int | None = None
    height: int | None = None
    alt_text: str | None = None
    folder: str | None = None
    is_image: bool
    uploaded_by: str | None = None
    created_at: datetime
    updated_at: datetime


class MediaAssetListResponse(BaseModel):
    """Schema for media asset list response."""

    items: list[MediaAssetResponse]
    total: int


class UploadURLRequest(BaseModel):
    """Request for presigned upload URL."""

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=100)
    folder: str | None = Field(default=None, max_length=100, pattern=r"^[a-z0-9_-]+$")


class UploadURLResponse(BaseModel):
    """Response with presigned upload URL."""

    upload_url: str
    file_url: str
    s3_key: str
    expires_in: int
