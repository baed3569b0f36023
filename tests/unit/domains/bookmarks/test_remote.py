"""RemoteStore 단위 테스트 (httpx MockTransport)"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from app.core.config import Settings
from app.domains.bookmarks.exceptions import (
    RemoteStoreException,
    RemoteStoreNotConfiguredException,
)
from app.domains.bookmarks.remote import RemoteStore


def _store(handler) -> RemoteStore:
    config = Settings(
        remote_url="https://example.supabase.co/",
        remote_api_key="anon-key",
    )
    return RemoteStore(config, transport=httpx.MockTransport(handler))


class TestRemoteStoreReads:
    """조회/검색 요청 테스트"""

    @pytest.mark.asyncio
    async def test_fetch_page(self):
        """소유자 필터, 최신순, offset/limit 페이지 조회"""
        # Given
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(
                200,
                json=[{"id": 42, "title": "Jazz", "tags": ["music", "jazz"]}],
            )

        store = _store(handler)

        # When
        records = await store.fetch_page("user-1", page=2, page_size=50)

        # Then
        request = captured["request"]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/content"
        assert request.url.params["user_id"] == "eq.user-1"
        assert request.url.params["order"] == "date_added.desc"
        assert request.url.params["offset"] == "100"
        assert request.url.params["limit"] == "50"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"

        assert records[0].id == "42"
        assert records[0].tags == "music,jazz"
        await store.aclose()

    @pytest.mark.asyncio
    async def test_search_similar_calls_procedure(self):
        """유사도 검색 프로시저 호출"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=[])

        store = _store(handler)

        records = await store.search_similar(
            "react hooks", "user-1", threshold=0.1, max_results=200, offset=400
        )

        assert records == []
        assert captured["path"] == "/rest/v1/rpc/search_content"
        assert captured["body"] == {
            "search_query": "react hooks",
            "user_id_input": "user-1",
            "similarity_threshold": 0.1,
            "max_results": 200,
            "offset_input": 400,
        }

    @pytest.mark.asyncio
    async def test_search_substring_builds_or_filter(self):
        """부분 문자열 검색은 5개 필드 ilike OR 조건"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = request.url.params
            return httpx.Response(200, json=[{"id": "1"}])

        store = _store(handler)

        records = await store.search_substring(
            "jazz", "user-1", page=0, page_size=200
        )

        assert [r.id for r in records] == ["1"]
        condition = captured["params"]["or"]
        for field in ("title", "summary", "tags", "channel_name", "user_notes"):
            assert f'{field}.ilike."*jazz*"' in condition
        assert "original_url" not in condition

    @pytest.mark.asyncio
    async def test_fetch_since(self):
        """기준 시각 이후 레코드 조회"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = request.url.params
            return httpx.Response(200, json=[])

        store = _store(handler)
        since = datetime(2025, 8, 1, tzinfo=timezone.utc)

        await store.fetch_since("user-1", since, limit=1000)

        assert captured["params"]["date_added"] == "gt.2025-08-01T00:00:00+00:00"
        assert captured["params"]["limit"] == "1000"

    @pytest.mark.asyncio
    async def test_fetch_all_pages_until_short_page(self):
        """짧은 페이지가 나올 때까지 반복 조회"""
        pages = {0: [{"id": "1"}, {"id": "2"}], 2: [{"id": "3"}]}

        def handler(request: httpx.Request) -> httpx.Response:
            offset = int(request.url.params["offset"])
            return httpx.Response(200, json=pages.get(offset, []))

        store = _store(handler)

        records = await store.fetch_all("user-1", page_size=2)

        assert [r.id for r in records] == ["1", "2", "3"]


class TestRemoteStoreWrites:
    """레코드 변경 요청 테스트"""

    @pytest.mark.asyncio
    async def test_upsert_prefers_merge(self, record_factory):
        """upsert 는 merge-duplicates 헤더 사용"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["prefer"] = request.headers["prefer"]
            return httpx.Response(201, json=json.loads(request.content))

        store = _store(handler)

        saved = await store.upsert([record_factory("1", title="Jazz")])

        assert "resolution=merge-duplicates" in captured["prefer"]
        assert saved[0].title == "Jazz"

    @pytest.mark.asyncio
    async def test_insert_returns_created_record(self, record_factory):
        """insert 는 생성된 행을 레코드로 반환"""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            return httpx.Response(201, json=[json.loads(request.content)])

        store = _store(handler)

        created = await store.insert(record_factory("7", title="Lo-fi"))

        assert created.id == "7"
        assert created.title == "Lo-fi"

    @pytest.mark.asyncio
    async def test_update_patches_by_id(self):
        """update 는 id 조건으로 PATCH"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["id"] = request.url.params["id"]
            body = json.loads(request.content)
            return httpx.Response(200, json=[{"id": "abc", **body}])

        store = _store(handler)

        updated = await store.update("abc", {"user_notes": "great"})

        assert captured == {"method": "PATCH", "id": "eq.abc"}
        assert updated[0].user_notes == "great"

    @pytest.mark.asyncio
    async def test_delete_by_id(self):
        """id 조건으로 삭제 (빈 응답 허용)"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["id"] = request.url.params["id"]
            return httpx.Response(204)

        store = _store(handler)

        await store.delete("abc")

        assert captured == {"method": "DELETE", "id": "eq.abc"}


class TestRemoteStoreErrors:
    """오류 매핑 테스트"""

    @pytest.mark.asyncio
    async def test_http_error_maps_to_remote_store_exception(self):
        """HTTP 오류 응답은 RemoteStoreException"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal error")

        store = _store(handler)

        with pytest.raises(RemoteStoreException) as exc_info:
            await store.fetch_page("user-1", page=0, page_size=10)

        assert exc_info.value.remote_status_code == 500
        assert exc_info.value.operation == "fetch_page"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_remote_store_exception(self):
        """연결 오류도 RemoteStoreException"""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        store = _store(handler)

        with pytest.raises(RemoteStoreException) as exc_info:
            await store.search_similar("q", "user-1", 0.1, 10)

        assert exc_info.value.remote_status_code is None

    @pytest.mark.asyncio
    async def test_not_configured(self):
        """원격 URL 이 없으면 설정 오류"""
        store = RemoteStore(Settings(remote_url=""))

        with pytest.raises(RemoteStoreNotConfiguredException):
            await store.fetch_page("user-1", page=0, page_size=10)

    @pytest.mark.asyncio
    async def test_non_json_body_maps_to_remote_store_exception(self):
        """200 응답이라도 JSON 이 아니면 RemoteStoreException"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        store = _store(handler)

        with pytest.raises(RemoteStoreException) as exc_info:
            await store.search_similar("jazz", "user-1", 0.1, 10)

        assert exc_info.value.operation == "search_similar"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_invalid_row_maps_to_remote_store_exception(self):
        """검증에 실패한 행은 RemoteStoreException"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": None}])

        store = _store(handler)

        with pytest.raises(RemoteStoreException) as exc_info:
            await store.search_similar("jazz", "user-1", 0.1, 10)

        assert exc_info.value.operation == "search_similar"

    @pytest.mark.asyncio
    async def test_object_body_maps_to_remote_store_exception(self):
        """행 목록이 아닌 JSON 객체 응답은 RemoteStoreException"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": "unexpected"})

        store = _store(handler)

        with pytest.raises(RemoteStoreException) as exc_info:
            await store.fetch_page("user-1", page=0, page_size=10)

        assert exc_info.value.operation == "fetch_page"

    @pytest.mark.asyncio
    async def test_insert_without_representation(self, record_factory):
        """insert 응답에 행이 없으면 RemoteStoreException"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json=[])

        store = _store(handler)

        with pytest.raises(RemoteStoreException) as exc_info:
            await store.insert(record_factory("7"))

        assert exc_info.value.operation == "insert"
