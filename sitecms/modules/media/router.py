"""Media library routes (admin only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from sitecms.core.dependencies import Limit
from sitecms.core.exceptions import AlreadyExistsError
from sitecms.core.logging import get_logger
from sitecms.core.schemas import SuccessResponse
from sitecms.core.security import CurrentAdmin, require_admin
from sitecms.modules.media.schemas import (
    MediaAssetCreate,
    MediaAssetListResponse,
    MediaAssetResponse,
    MediaAssetUpdate,
    UploadURLRequest,
    UploadURLResponse,
)
from sitecms.modules.media.service import MediaRepository, Storage

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/media", tags=["Admin - Media"])


@router.get(
    "",
    response_model=MediaAssetListResponse,
    summary="List media",
    dependencies=[Depends(require_admin)],
)
async def list_media(
    repo: MediaRepository,
    limit: Limit,
    folder: str | None = Query(default=None, description="Filter by folder"),
    mime_type: str | None = Query(
        default=None, description="Filter by MIME type prefix (e.g., 'image/')"
    ),
) -> MediaAssetListResponse:
    """List uploaded files, newest first."""
    assets = await repo.search(folder=folder, mime_type_prefix=mime_type, limit=limit.limit)
    return MediaAssetListResponse(
        items=[MediaAssetResponse.model_validate(a) for a in assets],
        total=len(assets),
    )


@router.post(
    "/upload-url",
    response_model=UploadURLResponse,
    summary="Get presigned upload URL",
    dependencies=[Depends(require_admin)],
)
async def get_upload_url(data: UploadURLRequest, storage: Storage) -> UploadURLResponse:
    """Get a presigned URL for direct upload to the bucket.

    Flow:
    1. Call this endpoint to get ``upload_url``
    2. PUT the file directly to ``upload_url``
    3. Call ``POST /admin/media`` with ``s3_key`` to register it
    """
    s3_key = storage.build_key(data.filename, data.folder)
    upload_url = storage.generate_presigned_upload_url(s3_key, data.content_type)
    return UploadURLResponse(
        upload_url=upload_url,
        file_url=storage.get_object_url(s3_key),
        s3_key=s3_key,
        expires_in=storage.config.s3_upload_url_expires,
    )


@router.post(
    "",
    response_model=MediaAssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register uploaded file",
    dependencies=[Depends(require_admin)],
)
async def create_media(
    data: MediaAssetCreate,
    repo: MediaRepository,
    storage: Storage,
    admin: CurrentAdmin,
) -> MediaAssetResponse:
    """Register a file after it was uploaded to the presigned URL."""
    if await repo.get_by_key(data.s3_key) is not None:
        raise AlreadyExistsError("MediaAsset", "s3_key", data.s3_key)

    fields = data.model_dump()
    fields["url"] = fields["url"] or storage.get_object_url(data.s3_key)
    fields["uploaded_by"] = admin.user_id

    asset = await repo.create(fields)
    return MediaAssetResponse.model_validate(asset)


@router.get(
    "/{asset_id}",
    response_model=MediaAssetResponse,
    summary="Get media",
    dependencies=[Depends(require_admin)],
)
async def get_media(asset_id: UUID, repo: MediaRepository) -> MediaAssetResponse:
    return MediaAssetResponse.model_validate(await repo.get(asset_id))


@router.patch(
    "/{asset_id}",
    response_model=MediaAssetResponse,
    summary="Update media metadata",
    dependencies=[Depends(require_admin)],
)
async def update_media(
    asset_id: UUID,
    data: MediaAssetUpdate,
    repo: MediaRepository,
) -> MediaAssetResponse:
    asset = await repo.update(asset_id, data.model_dump(exclude_unset=True))
    return MediaAssetResponse.model_validate(asset)


@router.delete(
    "/{asset_id}",
    response_model=SuccessResponse,
    summary="Delete media",
    dependencies=[Depends(require_admin)],
)
async def delete_media(
    asset_id: UUID,
    repo: MediaRepository,
    storage: Storage,
) -> SuccessResponse:
    """Delete the record, then try to remove the object from the bucket."""
    asset = await repo.get(asset_id)
    s3_key = asset.s3_key

    await repo.delete(asset_id)

    if not storage.delete_object(s3_key):
        logger.warning("media_object_orphaned", asset_id=str(asset_id), s3_key=s3_key)

    return SuccessResponse()
