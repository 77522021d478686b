"""Page/limit pagination shared by every list endpoint."""

import math
from typing import Generic, List, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class PaginationParams(BaseModel):
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (default: 1)"),
    limit: int = Query(
        DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description="Items per page (default: 10, max: 100)",
    ),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "PageMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class Page(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta


async def paginate(db: AsyncSession, query: Select, params: PaginationParams):
    """
    Run a select with offset/limit and a matching count query.
    Returns (items, PageMeta).
    """
    count_query = select(func.count()).select_from(
        query.order_by(None).subquery()
    )
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.offset(params.offset).limit(params.limit))
    items = result.scalars().unique().all()
    return items, PageMeta.build(total, params.page, params.limit)
