"""원격 저장소 클라이언트

PostgREST(Supabase) 호환 REST API 로 ``content`` 테이블과
``search_content`` 유사도 검색 프로시저에 접근합니다.
"""

from datetime import datetime
from functools import lru_cache
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.core.utils.datetime import format_iso
from app.domains.bookmarks.exceptions import (
    RemoteStoreException,
    RemoteStoreNotConfiguredException,
)
from app.domains.bookmarks.schemas import BookmarkRecord

logger = get_logger(__name__)

CONTENT_TABLE = "content"
SEARCH_PROCEDURE = "search_content"

# 부분 문자열 fallback 검색 대상 필드
SUBSTRING_SEARCH_FIELDS = (
    "title",
    "summary",
    "tags",
    "channel_name",
    "user_notes",
)


def _quote_filter_value(value: str) -> str:
    """PostgREST 논리 필터용 값 인용 (쉼표/괄호 포함 값 보호)"""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class RemoteStore:
    """원격 저장소 클라이언트

    소유자 ID 기준 페이지 조회, 유사도 검색, 레코드 CRUD 를 제공합니다.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """원격 저장소 클라이언트 초기화

        Args:
            settings: 애플리케이션 설정
            transport: 테스트용 httpx 트랜스포트 (선택)
        """
        self.settings = settings
        self.base_url = settings.remote_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self.base_url:
            raise RemoteStoreNotConfiguredException()
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.settings.remote_api_key:
                headers["apikey"] = self.settings.remote_api_key
                headers["Authorization"] = (
                    f"Bearer {self.settings.remote_api_key}"
                )
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/rest/v1",
                headers=headers,
                timeout=self.settings.remote_timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """HTTP 커넥션 종료"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Remote {operation} failed: HTTP {e.response.status_code} "
                f"{e.response.text[:200]}"
            )
            raise RemoteStoreException(
                detail_msg=e.response.text[:500] or str(e),
                status_code=e.response.status_code,
                operation=operation,
            )
        except httpx.TimeoutException:
            logger.error(f"Remote {operation} timed out")
            raise RemoteStoreException(
                detail_msg="원격 저장소 요청 시간 초과",
                operation=operation,
            )
        except httpx.HTTPError as e:
            logger.error(f"Remote {operation} failed: {e}")
            raise RemoteStoreException(detail_msg=str(e), operation=operation)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Remote {operation} returned non-JSON body: "
                f"{response.text[:200]}"
            )
            raise RemoteStoreException(
                detail_msg=f"JSON 이 아닌 응답: {e}", operation=operation
            ) from e

    async def _request_records(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> list[BookmarkRecord]:
        """요청 후 응답 행을 BookmarkRecord 목록으로 변환

        Raises:
            RemoteStoreException: 요청 실패, 행 목록이 아닌 응답, 검증 실패
        """
        rows = await self._request(operation, method, path, **kwargs)
        if rows is None:
            return []
        if not isinstance(rows, list):
            logger.error(
                f"Remote {operation} returned {type(rows).__name__}, "
                f"expected list"
            )
            raise RemoteStoreException(
                detail_msg="행 목록이 아닌 응답", operation=operation
            )
        try:
            return [BookmarkRecord.model_validate(row) for row in rows]
        except ValidationError as e:
            logger.error(
                f"Remote {operation} returned invalid rows: "
                f"{e.error_count()} errors"
            )
            raise RemoteStoreException(
                detail_msg=f"레코드 검증 실패: {e.errors()[0]['msg']}",
                operation=operation,
            ) from e

    async def fetch_page(
        self, user_id: str, page: int, page_size: int
    ) -> list[BookmarkRecord]:
        """소유자의 레코드를 date_added 내림차순으로 페이지 조회

        Args:
            user_id: 소유자 ID
            page: 페이지 번호 (0부터 시작)
            page_size: 페이지 크기

        Returns:
            레코드 목록
        """
        return await self._request_records(
            "fetch_page",
            "GET",
            f"/{CONTENT_TABLE}",
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "date_added.desc",
                "offset": page * page_size,
                "limit": page_size,
            },
        )

    async def search_similar(
        self,
        query: str,
        user_id: str,
        threshold: float,
        max_results: int,
        offset: int = 0,
    ) -> list[BookmarkRecord]:
        """서버 측 유사도/전문 검색 프로시저 호출

        Args:
            query: 검색어
            user_id: 소유자 ID
            threshold: 최소 유사도
            max_results: 최대 결과 수
            offset: 건너뛸 결과 수

        Returns:
            레코드 목록 (정렬 보장 없음)
        """
        return await self._request_records(
            "search_similar",
            "POST",
            f"/rpc/{SEARCH_PROCEDURE}",
            json={
                "search_query": query,
                "user_id_input": user_id,
                "similarity_threshold": threshold,
                "max_results": max_results,
                "offset_input": offset,
            },
        )

    async def search_substring(
        self, query: str, user_id: str, page: int, page_size: int
    ) -> list[BookmarkRecord]:
        """부분 문자열(ilike) 검색 (유사도 검색 실패 시 fallback)"""
        pattern = _quote_filter_value(f"*{query}*")
        conditions = ",".join(
            f"{field}.ilike.{pattern}" for field in SUBSTRING_SEARCH_FIELDS
        )
        return await self._request_records(
            "search_substring",
            "GET",
            f"/{CONTENT_TABLE}",
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "or": f"({conditions})",
                "order": "date_added.desc",
                "offset": page * page_size,
                "limit": page_size,
            },
        )

    async def fetch_since(
        self, user_id: str, since: datetime, limit: int
    ) -> list[BookmarkRecord]:
        """since 이후 추가된 레코드 조회 (증분 동기화)"""
        return await self._request_records(
            "fetch_since",
            "GET",
            f"/{CONTENT_TABLE}",
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "date_added": f"gt.{format_iso(since)}",
                "order": "date_added.desc",
                "limit": limit,
            },
        )

    async def fetch_all(
        self, user_id: str, page_size: int = 1000
    ) -> list[BookmarkRecord]:
        """소유자의 전체 레코드 조회"""
        records: list[BookmarkRecord] = []
        page = 0
        while True:
            batch = await self.fetch_page(user_id, page, page_size)
            records.extend(batch)
            if len(batch) < page_size:
                return records
            page += 1

    async def insert(self, record: BookmarkRecord) -> BookmarkRecord:
        """레코드 추가"""
        created = await self._request_records(
            "insert",
            "POST",
            f"/{CONTENT_TABLE}",
            json=record.model_dump(mode="json"),
            headers={"Prefer": "return=representation"},
        )
        if not created:
            raise RemoteStoreException(
                detail_msg="생성된 레코드가 응답에 없습니다.", operation="insert"
            )
        return created[0]

    async def upsert(
        self, records: list[BookmarkRecord]
    ) -> list[BookmarkRecord]:
        """레코드 일괄 upsert (id 충돌 시 병합)"""
        return await self._request_records(
            "upsert",
            "POST",
            f"/{CONTENT_TABLE}",
            json=[record.model_dump(mode="json") for record in records],
            headers={
                "Prefer": "resolution=merge-duplicates,return=representation"
            },
        )

    async def update(
        self, record_id: str, changes: dict[str, Any]
    ) -> list[BookmarkRecord]:
        """레코드 부분 수정"""
        return await self._request_records(
            "update",
            "PATCH",
            f"/{CONTENT_TABLE}",
            params={"id": f"eq.{record_id}"},
            json=changes,
            headers={"Prefer": "return=representation"},
        )

    async def delete(self, record_id: str) -> None:
        """레코드 삭제"""
        await self._request(
            "delete",
            "DELETE",
            f"/{CONTENT_TABLE}",
            params={"id": f"eq.{record_id}"},
        )


@lru_cache
def _create_remote_store() -> RemoteStore:
    """원격 저장소 클라이언트 싱글톤 생성 (캐시됨)"""
    return RemoteStore(settings)


def get_remote_store() -> RemoteStore:
    """FastAPI DI용 원격 저장소 의존성"""
    return _create_remote_store()
