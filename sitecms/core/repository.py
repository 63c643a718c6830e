"""Generic resource repository.

One parametrized CRUD implementation shared by every resource type.
Subclasses pick the model and spell out their own field rules; each public
call is a single unit of work against the store.

Usage:
    class SiteLogoRepository(ResourceRepository[SiteLogo]):
        model = SiteLogo
        required_fields = frozenset({"url"})
        writable_fields = frozenset({"url", "alt", "width", "height", "active"})
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Executable, Result, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sitecms.core.base_model import Base
from sitecms.core.exceptions import NotFoundError, StoreError, ValidationError
from sitecms.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class ResourceRepository(Generic[ModelT]):
    """CRUD operations for one resource kind."""

    # Override in subclass
    model: type[ModelT]
    required_fields: frozenset[str] = frozenset()
    writable_fields: frozenset[str] = frozenset()
    # Foreign key fields and the model their value must point at
    references: dict[str, type[Base]] = {}

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @property
    def resource_name(self) -> str:
        return self.model.__name__

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, fields: dict[str, Any], *, partial: bool) -> list[dict[str, Any]]:
        """Resource-specific field rules. Return a list of error dicts."""
        return []

    def check_fields(self, fields: dict[str, Any], *, partial: bool = False) -> None:
        """Raise ValidationError when fields are unknown, missing or malformed."""
        errors: list[dict[str, Any]] = []

        for name in sorted(set(fields) - self.writable_fields):
            errors.append({"field": name, "message": "Unknown field"})

        for name in sorted(self.required_fields):
            if partial and name not in fields:
                continue
            if _is_blank(fields.get(name)):
                errors.append({"field": name, "message": "Field is required"})

        columns = self.model.__table__.c
        for name in sorted(fields.keys() & (self.writable_fields - self.required_fields)):
            if fields[name] is None and name in columns and not columns[name].nullable:
                errors.append({"field": name, "message": "Field cannot be null"})

        errors.extend(self.validate(fields, partial=partial))

        if errors:
            raise ValidationError(f"Invalid {self.resource_name} fields", errors=errors)

    async def check_references(self, fields: dict[str, Any]) -> None:
        """Raise ValidationError when a foreign key names a row that does not exist."""
        errors = []
        for name, target in sorted(self.references.items()):
            value = fields.get(name)
            if value is None:
                continue
            result = await self._execute(select(target.id).where(target.id == value))
            if result.scalar_one_or_none() is None:
                errors.append({"field": name, "message": f"{target.__name__} not found"})

        if errors:
            raise ValidationError(f"Invalid {self.resource_name} references", errors=errors)

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    async def _execute(self, statement: Executable) -> Result[Any]:
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as exc:
            await self._store_failed("execute", exc)
            raise StoreError() from exc

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self._store_failed("commit", exc)
            raise StoreError() from exc

    async def _store_failed(self, operation: str, exc: SQLAlchemyError) -> None:
        logger.error(
            "store_operation_failed",
            resource=self.resource_name,
            operation=operation,
            error=str(exc),
        )
        try:
            await self.db.rollback()
        except SQLAlchemyError:
            logger.warning("store_rollback_failed", resource=self.resource_name)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create(self, fields: dict[str, Any]) -> ModelT:
        """Insert a new resource and return it with its generated id."""
        self.check_fields(fields)
        await self.check_references(fields)

        entity = self.model(**fields)
        self.db.add(entity)
        await self._commit()

        logger.info("resource_created", resource=self.resource_name, id=str(entity.id))
        return entity

    async def get(self, entity_id: UUID) -> ModelT:
        """Get resource by id.

        Raises:
            NotFoundError: If no row has this id
        """
        result = await self._execute(select(self.model).where(self.model.id == entity_id))
        entity = result.scalar_one_or_none()

        if entity is None:
            raise NotFoundError(self.resource_name, entity_id)

        return entity

    async def first(
        self,
        filters: list[Any] | None = None,
        order_by: list[Any] | None = None,
    ) -> ModelT | None:
        """Return the first matching resource, or None."""
        items = await self.list(filters=filters, order_by=order_by, limit=1)
        return items[0] if items else None

    async def list(
        self,
        filters: list[Any] | None = None,
        order_by: list[Any] | None = None,
        limit: int | None = None,
    ) -> list[ModelT]:
        """Snapshot read of matching resources, newest first by default."""
        stmt = select(self.model)

        for condition in filters or []:
            stmt = stmt.where(condition)

        stmt = stmt.order_by(*(order_by or [self.model.created_at.desc()]))

        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def update(self, entity_id: UUID, fields: dict[str, Any]) -> ModelT:
        """Apply a partial update.

        Raises:
            NotFoundError: If no row has this id (nothing is written)
            ValidationError: If fields are unknown or malformed
        """
        entity = await self.get(entity_id)
        self.check_fields(fields, partial=True)
        await self.check_references(fields)

        for name, value in fields.items():
            setattr(entity, name, value)

        await self._commit()

        logger.info("resource_updated", resource=self.resource_name, id=str(entity_id))
        return entity

    async def delete(self, entity_id: UUID) -> None:
        """Hard delete a resource.

        Raises:
            NotFoundError: If no row has this id
        """
        entity = await self.get(entity_id)

        try:
            await self.db.delete(entity)
        except SQLAlchemyError as exc:
            await self._store_failed("delete", exc)
            raise StoreError() from exc

        await self._commit()

        logger.info("resource_deleted", resource=self.resource_name, id=str(entity_id))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
