"""검색 서비스

검색어마다 로컬 캐시만 사용할지, 원격 검색으로 넘어갈지 결정합니다.

    1. 구조화 필터 있음: 로컬 캐시만 평가 (원격 조회 없음, has_more=False)
    2. 필터 없음 + 검색어 있음: 로컬 키워드 검색, 결과가 없으면 원격
       유사도 검색 후 로컬 캐시에 병합
    3. 빈 검색어: 원격 저장소를 date_added 내림차순으로 페이지 조회 후 병합
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.time import measure_time
from app.domains.bookmarks.exceptions import RemoteStoreException
from app.domains.bookmarks.remote import RemoteStore, get_remote_store
from app.domains.bookmarks.repository import (
    BookmarkRepository,
    sort_by_date_added,
)
from app.domains.bookmarks.schemas import BookmarkRecord
from app.domains.search.evaluator import build_predicate
from app.domains.search.exceptions import (
    InvalidSearchQueryException,
    RemoteSearchFailedException,
)
from app.domains.search.query_parser import parse_query
from app.domains.search.types import ParsedFilters, SearchResult, SearchSource

logger = get_logger(__name__)


class SearchService:
    """검색 서비스"""

    def __init__(
        self,
        session: AsyncSession,
        remote_store: Optional[RemoteStore] = None,
        page_size: Optional[int] = None,
        similarity_threshold: Optional[float] = None,
    ):
        self.session = session
        self.repository = BookmarkRepository(session)
        self.remote_store = remote_store or get_remote_store()
        self.page_size = page_size or settings.search_page_size
        self.similarity_threshold = (
            similarity_threshold
            if similarity_threshold is not None
            else settings.search_similarity_threshold
        )

    async def search(
        self,
        query: Any,
        user_id: str,
        page: int = 0,
        request_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SearchResult:
        """통합 검색

        Args:
            query: 검색어 (문자열이 아니면 빈 검색어로 취급)
            user_id: 소유자 ID
            page: 원격 페이지 번호 (0부터 시작, 로컬 결과에는 무시)
            request_id: 호출자가 발급한 검색 요청 ID (결과에 그대로 포함)
            now: 상대 날짜 필터 기준 시각 (기본: 현재 시각)

        Returns:
            SearchResult: 검색 결과

        Raises:
            RemoteSearchFailedException: 원격 검색과 fallback 모두 실패 시
            InvalidSearchQueryException: user_id 가 비었거나 page 가 음수일 때
        """
        if not user_id:
            raise InvalidSearchQueryException("user_id is required")
        if page < 0:
            raise InvalidSearchQueryException(f"page must be >= 0: {page}")

        query = query if isinstance(query, str) else ""
        filters = parse_query(query)

        if filters.has_structured_filters():
            return await self._search_local(filters, user_id, request_id, now)

        # 필터도 키워드도 남지 않는 검색어 ("+", "site:") 는 로컬 전체와 일치
        if query.strip():
            result = await self._search_local(filters, user_id, request_id, now)
            if result.items:
                return result
            return await self._search_remote(
                query, filters, user_id, page, request_id
            )

        return await self._list_remote(filters, user_id, page, request_id)

    async def _search_local(
        self,
        filters: ParsedFilters,
        user_id: str,
        request_id: Optional[int],
        now: Optional[datetime],
    ) -> SearchResult:
        with measure_time() as timer:
            items = await self.repository.scan(
                build_predicate(filters, now=now), user_id=user_id
            )

        logger.info(
            f"Local search completed: user_id={user_id}, "
            f"found={len(items)} ({timer['elapsed_ms']:.2f}ms)",
            extra={"request_id": get_request_id(), "search_id": request_id},
        )
        return SearchResult(
            items=items,
            has_more=False,
            source=SearchSource.LOCAL,
            filters=filters,
            request_id=request_id,
        )

    async def _search_remote(
        self,
        query: str,
        filters: ParsedFilters,
        user_id: str,
        page: int,
        request_id: Optional[int],
    ) -> SearchResult:
        source = SearchSource.REMOTE
        try:
            items = await self.remote_store.search_similar(
                query=query,
                user_id=user_id,
                threshold=self.similarity_threshold,
                max_results=self.page_size,
                offset=page * self.page_size,
            )
        except RemoteStoreException as e:
            logger.warning(
                f"Similarity search failed, falling back to substring "
                f"search: {e.detail_info}",
                extra={"request_id": get_request_id(), "search_id": request_id},
            )
            source = SearchSource.FALLBACK
            try:
                items = await self.remote_store.search_substring(
                    query=query,
                    user_id=user_id,
                    page=page,
                    page_size=self.page_size,
                )
            except RemoteStoreException as fallback_error:
                logger.error(
                    f"Fallback search failed: {fallback_error.detail_info}",
                    extra={
                        "request_id": get_request_id(),
                        "search_id": request_id,
                    },
                )
                raise RemoteSearchFailedException(
                    query=query,
                    detail_msg=str(fallback_error.detail_info.get("info")),
                ) from fallback_error

        return await self._merge_remote(
            items, filters, user_id, source, request_id
        )

    async def _list_remote(
        self,
        filters: ParsedFilters,
        user_id: str,
        page: int,
        request_id: Optional[int],
    ) -> SearchResult:
        try:
            items = await self.remote_store.fetch_page(
                user_id=user_id, page=page, page_size=self.page_size
            )
        except RemoteStoreException as e:
            logger.error(
                f"Remote listing failed: {e.detail_info}",
                extra={"request_id": get_request_id(), "search_id": request_id},
            )
            raise RemoteSearchFailedException(
                query="", detail_msg=str(e.detail_info.get("info"))
            ) from e

        return await self._merge_remote(
            items, filters, user_id, SearchSource.REMOTE, request_id
        )

    async def _merge_remote(
        self,
        items: list[BookmarkRecord],
        filters: ParsedFilters,
        user_id: str,
        source: SearchSource,
        request_id: Optional[int],
    ) -> SearchResult:
        for item in items:
            # 프로시저 결과에 소유자 컬럼이 없을 수 있음
            if item.user_id is None:
                item.user_id = user_id
        if items:
            await self.repository.bulk_upsert(items)

        logger.info(
            f"Remote search completed: source={source.value}, "
            f"user_id={user_id}, found={len(items)}",
            extra={"request_id": get_request_id(), "search_id": request_id},
        )
        return SearchResult(
            items=sort_by_date_added(items),
            has_more=len(items) == self.page_size,
            source=source,
            filters=filters,
            request_id=request_id,
        )
