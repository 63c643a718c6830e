"""Common FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sitecms.core.database import get_db

DBSession = Annotated[AsyncSession, Depends(get_db)]


class SortParams:
    """Sorting parameters shared by admin list endpoints."""

    def __init__(
        self,
        sort: str = Query(
            default="created_at",
            description="Field to sort by",
        ),
        order: str = Query(
            default="desc",
            pattern="^(asc|desc)$",
            description="Sort order: asc or desc",
        ),
    ) -> None:
        self.sort = sort
        self.order = order

    @property
    def is_ascending(self) -> bool:
        return self.order == "asc"


Sorting = Annotated[SortParams, Depends()]


class LimitParams:
    """Upper bound on rows returned by a snapshot list."""

    def __init__(
        self,
        limit: int = Query(default=20, ge=1, le=100, description="Maximum items"),
    ) -> None:
        self.limit = limit


Limit = Annotated[LimitParams, Depends()]
