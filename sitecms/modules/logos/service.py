"""Site logo repository."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import update as sql_update

from sitecms.config import settings
from sitecms.core.dependencies import DBSession
from sitecms.core.logging import get_logger
from sitecms.core.repository import ResourceRepository
from sitecms.modules.logos.models import SiteLogo

logger = get_logger(__name__)


class SiteLogoRepository(ResourceRepository[SiteLogo]):
    """Logos with the single-active convention.

    Activating a logo first clears the flag on the others and then writes
    the new row. Without a uniqueness constraint two concurrent activations
    can still both end up active; readers take the newest active row.
    """

    model = SiteLogo
    required_fields = frozenset({"url", "alt"})
    writable_fields = frozenset({"url", "alt", "width", "height", "active"})

    def validate(self, fields: dict[str, Any], *, partial: bool) -> list[dict[str, Any]]:
        errors = []
        for name in ("width", "height"):
            value = fields.get(name)
            if value is not None and (not isinstance(value, int) or value <= 0):
                errors.append({"field": name, "message": "Must be a positive integer"})
        if "active" in fields and not isinstance(fields["active"], bool):
            errors.append({"field": "active", "message": "Must be a boolean"})
        return errors

    async def get_current(self) -> SiteLogo | None:
        """Most recently created active logo, or None."""
        return await self.first(
            filters=[SiteLogo.active.is_(True)],
            order_by=[SiteLogo.created_at.desc()],
        )

    async def create(self, fields: dict[str, Any]) -> SiteLogo:
        fields = {"active": True, **fields}
        if not fields.get("alt"):
            fields["alt"] = settings.site_name

        self.check_fields(fields)

        if fields["active"]:
            await self._deactivate_others()

        return await super().create(fields)

    async def update(self, entity_id: UUID, fields: dict[str, Any]) -> SiteLogo:
        await self.get(entity_id)
        self.check_fields(fields, partial=True)

        if fields.get("active") is True:
            await self._deactivate_others(keep_id=entity_id)

        return await super().update(entity_id, fields)

    async def _deactivate_others(self, keep_id: UUID | None = None) -> None:
        stmt = sql_update(SiteLogo).where(SiteLogo.active.is_(True)).values(active=False)
        if keep_id is not None:
            stmt = stmt.where(SiteLogo.id != keep_id)
        await self._execute(stmt)
        logger.debug("site_logos_deactivated", keep_id=str(keep_id) if keep_id else None)


def get_logo_repository(db: DBSession) -> SiteLogoRepository:
    return SiteLogoRepository(db)


LogoRepository = Annotated[SiteLogoRepository, Depends(get_logo_repository)]
