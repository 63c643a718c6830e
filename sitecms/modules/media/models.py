"""Media library database model."""

from sqlalchemy import BigInteger, CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from sitecms.core.base_model import Base, TimestampMixin, UUIDMixin


class MediaAsset(Base, UUIDMixin, TimestampMixin):
    """File uploaded to object storage.

    The browser uploads straight to the bucket through a presigned URL;
    this row is registered afterwards and tracks the object metadata.
    """

    __tablename__ = "media_assets"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)

    s3_key: Mapped[str] = mapped_column(String(500), nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)

    # Image dimensions (if applicable)
    width: Mapped[int | None] = mapped_column(nullable=True)
    height: Mapped[int | None] = mapped_column(nullable=True)

    alt_text: Mapped[str | None] = mapped_column(String(500), nullable=True)
    folder: Mapped[str | None] = mapped_column(String(100), nullable=True)

    uploaded_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        Index("ix_media_assets_folder", "folder"),
        Index("ix_media_assets_s3_key", "s3_key", unique=True),
        CheckConstraint("file_size > 0", name="ck_media_assets_size_positive"),
    )

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def __repr__(self) -> str:
        return f"<MediaAsset {self.filename}>"
