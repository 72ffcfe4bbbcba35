"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Every index endpoint shares the same request parameters (PageParams) and
the same response envelope (Page):

    {
        "pagination": {"current": 1, "limit": 20, "records": 57, "pages": 3},
        "data": [...]
    }
"""

import math
from typing import Annotated, Any, Generic, Literal, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.config import settings

T = TypeVar("T")

SortDirection = Literal["asc", "desc"]


class Pagination(BaseModel):
    """페이지네이션 메타데이터.

    Attributes:
        current: 현재 페이지 번호 — 1부터 시작 (Current page, 1-indexed)
        limit: 페이지당 항목 수 (Items per page)
        records: 전체 항목 수 (Total record count)
        pages: 전체 페이지 수 — ceil(records / limit) (Total pages)
    """

    current: int
    limit: int
    records: int
    pages: int


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델 — Paginated response envelope."""

    pagination: Pagination
    data: list[T]


class PageParams:
    """목록 조회 공통 쿼리 파라미터 — Shared query parameters for index endpoints.

    page=0은 첫 페이지로 취급합니다 (page 0 is treated as the first page).
    limit은 1 이상 MAX_PAGE_LIMIT 이하만 허용 (0 or negative limits are rejected with 422).
    """

    def __init__(
        self,
        page: Annotated[int, Query(ge=0, description="페이지 번호 (1-based, 0 = 1)")] = 1,
        limit: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_LIMIT, description="페이지 크기")] = settings.DEFAULT_PAGE_LIMIT,
        sort_by: Annotated[str | None, Query(description="정렬 필드")] = None,
        sort_direction: Annotated[SortDirection, Query(description="asc | desc")] = "desc",
    ) -> None:
        self.page: int = max(page, 1)
        self.limit: int = limit
        self.sort_by: str | None = sort_by
        self.sort_direction: SortDirection = sort_direction

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def total_pages(records: int, limit: int) -> int:
    """전체 페이지 수 — ceil(records / limit), 0 records → 0 pages."""
    if limit <= 0:
        return 0
    return math.ceil(records / limit)


def build_page(items: Sequence[Any], total: int, params: PageParams) -> dict[str, Any]:
    """응답 봉투 생성 — Wrap mapped items with pagination metadata."""
    return {
        "pagination": {
            "current": params.page,
            "limit": params.limit,
            "records": total,
            "pages": total_pages(total, params.limit),
        },
        "data": list(items),
    }


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    limit: int = 20,
    options: Sequence[Any] = (),
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate, already ordered)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        limit: 페이지당 항목 수 (Items per page)
        options: 항목 조회에만 적용할 로더 옵션 (Loader options for the item query only)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
    """
    # 전체 개수 조회: 정렬 제거 후 서브쿼리로 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회: OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    offset: int = (max(page, 1) - 1) * limit
    result = await db.execute(query.options(*options).offset(offset).limit(limit))
    items: Sequence[Any] = result.scalars().all()

    return items, total
