"""BookmarkRepository 단위 테스트"""

import pytest

from app.domains.bookmarks.repository import (
    BookmarkRepository,
    sort_by_date_added,
)


@pytest.fixture
def repository(db_session):
    """BookmarkRepository 인스턴스 (인메모리 SQLite)"""
    return BookmarkRepository(db_session)


class TestSortByDateAdded:
    """date_added 정렬 테스트"""

    def test_descending_with_unparseable_last(self, record_factory):
        """최신순, 해석 불가 값은 가장 오래된 것으로 취급"""
        records = [
            record_factory("old", date_added="2024-01-01T00:00:00Z"),
            record_factory("bad", date_added="yesterday-ish"),
            record_factory("new", date_added="2025-08-15T00:00:00+00:00"),
            record_factory("none"),
        ]

        ordered = [r.id for r in sort_by_date_added(records)]

        assert ordered[:2] == ["new", "old"]
        assert set(ordered[2:]) == {"bad", "none"}

    def test_ascending(self, record_factory):
        """오름차순 정렬"""
        records = [
            record_factory("b", date_added="2025-02-01"),
            record_factory("a", date_added="2025-01-01"),
        ]

        ordered = sort_by_date_added(records, descending=False)

        assert [r.id for r in ordered] == ["a", "b"]


class TestBookmarkRepository:
    """BookmarkRepository 테스트"""

    @pytest.mark.asyncio
    async def test_bulk_upsert_and_list(self, repository, jazz_records):
        """일괄 저장 후 최신순 조회"""
        # When
        saved = await repository.bulk_upsert(jazz_records)

        # Then
        assert saved == 2
        records = await repository.list_all(user_id="user-1")
        assert [r.id for r in records] == ["1", "2"]
        assert records[0].tags == "music,jazz"

    @pytest.mark.asyncio
    async def test_upsert_replaces_by_id(self, repository, record_factory):
        """같은 id 는 덮어씀"""
        await repository.bulk_upsert([record_factory("1", title="Before")])
        await repository.bulk_upsert([record_factory("1", title="After")])

        records = await repository.list_all()

        assert len(records) == 1
        assert records[0].title == "After"

    @pytest.mark.asyncio
    async def test_extra_fields_are_preserved(self, repository, record_factory):
        """스키마에 없는 원본 필드 보존"""
        await repository.bulk_upsert(
            [record_factory("1", thumbnail_url="https://img/1.png")]
        )

        [record] = await repository.list_all()

        assert record.extra_fields() == {"thumbnail_url": "https://img/1.png"}

    @pytest.mark.asyncio
    async def test_scan_with_predicate(self, repository, jazz_records):
        """판정 함수로 필터링"""
        await repository.bulk_upsert(jazz_records)

        found = await repository.scan(
            lambda r: r.video_type == "note", user_id="user-1"
        )

        assert [r.id for r in found] == ["2"]

    @pytest.mark.asyncio
    async def test_count_and_latest(self, repository, jazz_records, record_factory):
        """사용자별 개수와 최신 레코드"""
        await repository.bulk_upsert(
            jazz_records + [record_factory("x", user_id="user-2")]
        )

        assert await repository.count() == 3
        assert await repository.count(user_id="user-1") == 2
        latest = await repository.latest_for_user("user-1")
        assert latest is not None and latest.id == "1"
        assert await repository.latest_for_user("nobody") is None

    @pytest.mark.asyncio
    async def test_delete_oldest(self, repository, record_factory):
        """가장 오래된 레코드부터 삭제"""
        await repository.bulk_upsert(
            [
                record_factory(str(day), date_added=f"2025-08-{day:02d}")
                for day in range(1, 6)
            ]
        )

        deleted = await repository.delete_oldest(2)

        assert deleted == 2
        remaining = [r.id for r in await repository.list_all()]
        assert remaining == ["5", "4", "3"]
        assert await repository.delete_oldest(0) == 0

    @pytest.mark.asyncio
    async def test_clear_and_replace_all(
        self, repository, jazz_records, record_factory
    ):
        """전체 삭제 및 교체"""
        await repository.bulk_upsert(jazz_records)

        replaced = await repository.replace_all([record_factory("new")])

        assert replaced == 1
        assert [r.id for r in await repository.list_all()] == ["new"]
        assert await repository.clear() == 1
        assert await repository.count() == 0
