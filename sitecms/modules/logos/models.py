"""Site logo database model."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sitecms.core.base_model import Base, TimestampMixin, UUIDMixin


class SiteLogo(Base, UUIDMixin, TimestampMixin):
    """Logo displayed in the public site header.

    The current logo is the most recently created active row. No database
    constraint keeps a single row active.
    """

    __tablename__ = "site_logos"

    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    alt: Mapped[str] = mapped_column(String(255), nullable=False)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<SiteLogo {self.url} active={self.active}>"
