"""Post repository."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_

from sitecms.core.base_model import utcnow
from sitecms.core.dependencies import DBSession
from sitecms.core.exceptions import AlreadyExistsError, NotFoundError, ValidationError
from sitecms.core.logging import get_logger
from sitecms.core.repository import ResourceRepository
from sitecms.modules.case_studies.service import SLUG_RE
from sitecms.modules.media.models import MediaAsset
from sitecms.modules.posts.models import Post, PostStatus

logger = get_logger(__name__)

LOCALES = ("en", "ar")

SORTABLE_FIELDS = frozenset({"created_at", "updated_at", "published_at", "title"})


class PostRepository(ResourceRepository[Post]):
    """Posts keyed by (locale, slug)."""

    model = Post
    required_fields = frozenset({"locale", "title", "slug", "content"})
    writable_fields = frozenset({
        "locale",
        "title",
        "slug",
        "excerpt",
        "content",
        "featured_image_id",
        "author_id",
        "status",
        "published_at",
    })
    references = {"featured_image_id": MediaAsset}

    def validate(self, fields: dict[str, Any], *, partial: bool) -> list[dict[str, Any]]:
        errors = []

        locale = fields.get("locale")
        if locale is not None and locale not in LOCALES:
            errors.append({"field": "locale", "message": f"Allowed: {', '.join(LOCALES)}"})

        slug = fields.get("slug")
        if slug is not None and not SLUG_RE.match(str(slug)):
            errors.append({
                "field": "slug",
                "message": "Slug must contain only lowercase letters, numbers and hyphens",
            })

        status = fields.get("status")
        if status is not None and status not in {s.value for s in PostStatus}:
            errors.append({"field": "status", "message": f"Unknown post status: {status}"})

        return errors

    async def _check_slug_available(
        self, locale: str, slug: str, exclude_id: UUID | None = None
    ) -> None:
        filters = [Post.locale == locale, Post.slug == slug]
        if exclude_id is not None:
            filters.append(Post.id != exclude_id)
        if await self.first(filters=filters) is not None:
            raise AlreadyExistsError("Post", "slug", slug)

    async def create(self, fields: dict[str, Any]) -> Post:
        fields = {**fields, "status": PostStatus.DRAFT.value, "published_at": None}
        fields.setdefault("locale", "en")

        self.check_fields(fields)
        await self._check_slug_available(fields["locale"], fields["slug"])

        return await super().create(fields)

    async def update(self, entity_id: UUID, fields: dict[str, Any]) -> Post:
        post = await self.get(entity_id)
        self.check_fields(fields, partial=True)

        locale = fields.get("locale") or post.locale
        slug = fields.get("slug") or post.slug
        if (locale, slug) != (post.locale, post.slug):
            await self._check_slug_available(locale, slug, exclude_id=entity_id)

        return await super().update(entity_id, fields)

    async def publish(self, entity_id: UUID) -> Post:
        """Move a draft to PUBLISHED, stamping ``published_at``.

        Raises:
            NotFoundError: If no post has this id
            ValidationError: If the post is already published
        """
        post = await self.get(entity_id)
        if post.is_published:
            raise ValidationError(
                "Post is already published",
                errors=[{"field": "status", "message": "Already published"}],
            )

        post = await super().update(
            entity_id, {"status": PostStatus.PUBLISHED.value, "published_at": utcnow()}
        )
        logger.info("post_published", id=str(entity_id), locale=post.locale, slug=post.slug)
        return post

    async def search(
        self,
        status: str | None = None,
        locale: str | None = None,
        search: str | None = None,
        sort: str = "updated_at",
        ascending: bool = False,
    ) -> list[Post]:
        if sort not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{sort}'",
                errors=[{"field": "sort", "message": f"Allowed: {', '.join(sorted(SORTABLE_FIELDS))}"}],
            )

        filters: list[Any] = []
        if status:
            filters.append(Post.status == status)
        if locale:
            filters.append(Post.locale == locale)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(Post.title.ilike(pattern), Post.content.ilike(pattern)))

        column = getattr(Post, sort)
        return await self.list(
            filters=filters,
            order_by=[column.asc() if ascending else column.desc(), Post.id],
        )

    async def list_published(self, locale: str = "en", limit: int | None = None) -> list[Post]:
        """Latest published posts in one locale."""
        return await self.list(
            filters=[
                Post.status == PostStatus.PUBLISHED.value,
                Post.published_at.is_not(None),
                Post.locale == locale,
            ],
            order_by=[Post.published_at.desc()],
            limit=limit,
        )

    async def get_published_by_slug(self, slug: str, locale: str = "en") -> Post:
        post = await self.first(
            filters=[
                Post.slug == slug,
                Post.locale == locale,
                Post.status == PostStatus.PUBLISHED.value,
            ],
        )
        if post is None:
            raise NotFoundError("Post", slug)
        return post


def get_post_repository(db: DBSession) -> PostRepository:
    return PostRepository(db)


Posts = Annotated[PostRepository, Depends(get_post_repository)]
