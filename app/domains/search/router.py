"""Search 도메인 라우터

고급 검색어 검색 및 파싱 API 엔드포인트입니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import APIResponse, ErrorResponse, create_response
from app.domains.bookmarks.remote import RemoteStore, get_remote_store
from app.domains.search.query_parser import normalize_query, parse_query, tokenize
from app.domains.search.schemas import (
    ParsedFiltersResponse,
    ParseResponse,
    SearchResponse,
)
from app.domains.search.service import SearchService

router = APIRouter()


def get_search_service(
    session: AsyncSession = Depends(get_db),
    remote_store: RemoteStore = Depends(get_remote_store),
) -> SearchService:
    """SearchService 의존성"""
    return SearchService(session, remote_store=remote_store)


@router.get(
    "",
    response_model=APIResponse[SearchResponse],
    dependencies=[Depends(verify_internal_api_key)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def search(
    user_id: str = Query(..., min_length=1, description="사용자 ID"),
    q: str = Query("", max_length=1000, description="검색어"),
    page: int = Query(0, ge=0, description="원격 페이지 번호 (0부터 시작)"),
    request_id: Optional[int] = Query(
        None, ge=0, description="클라이언트 검색 요청 ID"
    ),
    service: SearchService = Depends(get_search_service),
):
    """검색어로 북마크 검색"""
    result = await service.search(
        q, user_id=user_id, page=page, request_id=request_id
    )
    return create_response(
        data=SearchResponse.from_result(result),
        message=f"{len(result.items)}개의 결과를 찾았습니다.",
    )


@router.get(
    "/parse",
    response_model=APIResponse[ParseResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def parse(
    q: str = Query("", max_length=1000, description="검색어"),
):
    """검색어 파싱 결과 조회"""
    filters = parse_query(q)
    normalized = normalize_query(q)
    return create_response(
        data=ParseResponse(
            query=q,
            normalized_query=normalized,
            tokens=tokenize(normalized),
            filters=ParsedFiltersResponse.from_filters(filters),
            has_filters=filters.has_structured_filters(),
        ),
        message="검색어를 파싱했습니다.",
    )
