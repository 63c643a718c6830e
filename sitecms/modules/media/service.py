"""Media library: object storage client and asset repository."""

import uuid
from typing import Annotated, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends

from sitecms.config import Settings, settings
from sitecms.core.dependencies import DBSession
from sitecms.core.exceptions import ExternalServiceError
from sitecms.core.logging import get_logger
from sitecms.core.repository import ResourceRepository
from sitecms.modules.media.models import MediaAsset

logger = get_logger(__name__)


class S3Service:
    """Presigned uploads and deletes against an S3-compatible bucket."""

    def __init__(self, config: Settings = settings) -> None:
        self.config = config
        self._client = None
        self._public_client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.config.s3_access_key and self.config.s3_secret_key)

    def _make_client(self, endpoint_url: str | None):
        return boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            aws_access_key_id=self.config.s3_access_key,
            aws_secret_access_key=self.config.s3_secret_key,
            region_name=self.config.s3_region,
            config=Config(signature_version="s3v4"),
        )

    @property
    def client(self):
        """S3 client for server-side operations.

        Raises:
            ExternalServiceError: If S3 credentials are not configured.
        """
        if not self.is_configured:
            raise ExternalServiceError(
                "S3",
                "S3 credentials not configured. Set S3_ACCESS_KEY and S3_SECRET_KEY.",
            )
        if self._client is None:
            self._client = self._make_client(self.config.s3_endpoint_url)
        return self._client

    @property
    def public_client(self):
        """Client signing against S3_PUBLIC_URL so browsers can use the URL."""
        if not self.config.s3_public_url:
            return self.client
        if self._public_client is None:
            self._public_client = self._make_client(self.config.s3_public_url)
        return self._public_client

    @staticmethod
    def build_key(filename: str, folder: str | None = None) -> str:
        """``[folder/]<uuid>[.ext]``; the original name never reaches the key."""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        name = f"{uuid.uuid4()}.{ext}" if ext else str(uuid.uuid4())
        return f"{folder}/{name}" if folder else name

    def get_object_url(self, s3_key: str) -> str:
        """Relative path served by the media proxy/CDN in front of the bucket."""
        return f"/media/{s3_key}"

    def generate_presigned_upload_url(self, s3_key: str, content_type: str) -> str:
        try:
            return self.public_client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.config.s3_bucket_name,
                    "Key": s3_key,
                    "ContentType": content_type,
                },
                ExpiresIn=self.config.s3_upload_url_expires,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("s3_presign_failed", error=str(e), key=s3_key)
            raise ExternalServiceError("S3", "Failed to generate upload URL") from e

    def delete_object(self, s3_key: str) -> bool:
        """Best-effort delete. Returns False (and logs) when the bucket refuses."""
        try:
            self.client.delete_object(Bucket=self.config.s3_bucket_name, Key=s3_key)
        except (BotoCoreError, ClientError, ExternalServiceError) as e:
            logger.warning("s3_delete_failed", error=str(e), key=s3_key)
            return False
        return True


_storage = S3Service()


def get_storage() -> S3Service:
    return _storage


Storage = Annotated[S3Service, Depends(get_storage)]


class MediaAssetRepository(ResourceRepository[MediaAsset]):
    """Media library rows; ``s3_key`` is unique."""

    model = MediaAsset
    required_fields = frozenset({"filename", "mime_type", "file_size", "s3_key", "url"})
    writable_fields = frozenset({
        "filename",
        "mime_type",
        "file_size",
        "s3_key",
        "url",
        "width",
        "height",
        "alt_text",
        "folder",
        "uploaded_by",
    })

    def validate(self, fields: dict[str, Any], *, partial: bool) -> list[dict[str, Any]]:
        errors = []
        size = fields.get("file_size")
        if size is not None and (not isinstance(size, int) or size <= 0):
            errors.append({"field": "file_size", "message": "Must be a positive integer"})
        for name in ("width", "height"):
            value = fields.get(name)
            if value is not None and (not isinstance(value, int) or value <= 0):
                errors.append({"field": name, "message": "Must be a positive integer"})
        return errors

    async def search(
        self,
        folder: str | None = None,
        mime_type_prefix: str | None = None,
        limit: int | None = None,
    ) -> list[MediaAsset]:
        filters: list[Any] = []
        if folder:
            filters.append(MediaAsset.folder == folder)
        if mime_type_prefix:
            filters.append(MediaAsset.mime_type.startswith(mime_type_prefix))
        return await self.list(filters=filters, limit=limit)

    async def get_by_key(self, s3_key: str) -> MediaAsset | None:
        return await self.first(filters=[MediaAsset.s3_key == s3_key])


def get_media_repository(db: DBSession) -> MediaAssetRepository:
    return MediaAssetRepository(db)


MediaRepository = Annotated[MediaAssetRepository, Depends(get_media_repository)]
