"""Bookmarks 도메인 리포지토리

로컬 캐시(오프라인 검색용) 데이터 접근 계층입니다.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence, cast

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils.datetime import UTC, parse_timestamp
from app.domains.bookmarks.models import Bookmark
from app.domains.bookmarks.schemas import (
    SEARCHABLE_FIELDS,
    BookmarkRecord,
    RecordPredicate,
)

_OLDEST = datetime.min.replace(tzinfo=UTC)


def sort_by_date_added(
    records: Iterable[BookmarkRecord], descending: bool = True
) -> list[BookmarkRecord]:
    """date_added 기준 정렬 (파싱 불가 값은 가장 오래된 것으로 취급)"""

    def _key(record: BookmarkRecord) -> datetime:
        return parse_timestamp(record.date_added) or _OLDEST

    return sorted(records, key=_key, reverse=descending)


def _to_model(record: BookmarkRecord) -> Bookmark:
    return Bookmark(
        id=record.id,
        user_id=record.user_id,
        payload=record.model_dump(mode="json"),
        **{field: getattr(record, field) for field in SEARCHABLE_FIELDS},
    )


def _to_record(bookmark: Bookmark) -> BookmarkRecord:
    data = dict(bookmark.payload or {})
    data["id"] = bookmark.id
    data["user_id"] = bookmark.user_id
    for field in SEARCHABLE_FIELDS:
        data[field] = getattr(bookmark, field)
    return BookmarkRecord.model_validate(data)


class BookmarkRepository:
    """북마크 로컬 캐시 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def bulk_upsert(self, records: Sequence[BookmarkRecord]) -> int:
        """레코드 일괄 저장 (id 기준 insert or replace)

        Args:
            records: 저장할 레코드 목록

        Returns:
            저장된 레코드 수
        """
        for record in records:
            await self.session.merge(_to_model(record))
        await self.session.flush()
        return len(records)

    async def scan(
        self,
        predicate: RecordPredicate,
        user_id: Optional[str] = None,
    ) -> list[BookmarkRecord]:
        """조건에 맞는 레코드 조회

        Args:
            predicate: 레코드 필터 함수
            user_id: 소유자 ID (None 이면 전체)

        Returns:
            date_added 내림차순으로 정렬된 레코드 목록
        """
        records = await self.list_all(user_id=user_id)
        return [record for record in records if predicate(record)]

    async def list_all(
        self, user_id: Optional[str] = None
    ) -> list[BookmarkRecord]:
        """전체 레코드 조회 (date_added 내림차순)"""
        query = select(Bookmark)
        if user_id is not None:
            query = query.where(Bookmark.user_id == user_id)

        result = await self.session.execute(query)
        bookmarks = cast(Sequence[Bookmark], result.scalars().all())
        return sort_by_date_added(_to_record(b) for b in bookmarks)

    async def count(self, user_id: Optional[str] = None) -> int:
        """캐시된 레코드 수 조회"""
        query = select(func.count(Bookmark.id))
        if user_id is not None:
            query = query.where(Bookmark.user_id == user_id)

        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def latest_for_user(self, user_id: str) -> Optional[BookmarkRecord]:
        """사용자의 가장 최근 레코드 조회 (증분 동기화 기준점)"""
        records = await self.list_all(user_id=user_id)
        return records[0] if records else None

    async def delete_oldest(self, limit: int) -> int:
        """가장 오래된 레코드부터 삭제

        Args:
            limit: 삭제할 최대 레코드 수

        Returns:
            삭제된 레코드 수
        """
        if limit <= 0:
            return 0

        records = await self.list_all()
        oldest_ids = [record.id for record in records[::-1][:limit]]
        if not oldest_ids:
            return 0

        stmt = delete(Bookmark).where(Bookmark.id.in_(oldest_ids))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return int(result.rowcount)

    async def clear(self) -> int:
        """캐시 전체 삭제

        Returns:
            삭제된 레코드 수
        """
        result = await self.session.execute(delete(Bookmark))
        await self.session.flush()
        return int(result.rowcount)

    async def replace_all(self, records: Sequence[BookmarkRecord]) -> int:
        """캐시를 주어진 레코드로 교체"""
        await self.clear()
        return await self.bulk_upsert(records)
