"""테스트 설정"""

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, get_db
from app.domains.bookmarks.models import Bookmark  # noqa: F401
from app.domains.bookmarks.remote import RemoteStore, get_remote_store
from app.domains.bookmarks.schemas import BookmarkRecord
from app.domains.bookmarks.sync import SyncService, get_sync_service
from app.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_record(
    record_id: str,
    user_id: Optional[str] = "user-1",
    **fields,
) -> BookmarkRecord:
    """테스트용 BookmarkRecord 생성"""
    return BookmarkRecord(id=record_id, user_id=user_id, **fields)


@pytest.fixture
def record_factory():
    """BookmarkRecord 팩토리"""
    return make_record


@pytest.fixture
def jazz_records() -> list[BookmarkRecord]:
    """필터 검색 시나리오용 레코드"""
    return [
        make_record(
            "1",
            title="Intro to Jazz",
            tags="music,jazz",
            video_type="video",
            original_url="youtube.com/x",
            date_added="2025-08-15T00:00:00Z",
        ),
        make_record(
            "2",
            title="Notes",
            tags="personal",
            video_type="note",
            date_added="2025-08-10T00:00:00Z",
        ),
    ]


# NOTE:
# 인메모리 SQLite는 커넥션마다 별도 DB가 생성되므로 StaticPool로
# 하나의 커넥션을 공유
@pytest_asyncio.fixture
async def session_factory():
    """테스트 세션 팩토리 (인메모리 SQLite)"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    """테스트 데이터베이스 세션"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def remote_store() -> MagicMock:
    """원격 저장소 Mock"""
    mock = MagicMock(spec=RemoteStore)
    mock.fetch_page = AsyncMock(return_value=[])
    mock.search_similar = AsyncMock(return_value=[])
    mock.search_substring = AsyncMock(return_value=[])
    mock.fetch_since = AsyncMock(return_value=[])
    mock.fetch_all = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def sync_service(session_factory, remote_store) -> SyncService:
    """테스트 DB와 원격 저장소 Mock을 사용하는 SyncService"""
    return SyncService(session_factory=session_factory, remote_store=remote_store)


@pytest_asyncio.fixture
async def client(session_factory, remote_store, sync_service):
    """비동기 테스트 클라이언트 (테스트 DB 및 원격 저장소 Mock 사용)"""

    async def override_get_db():
        async with session_factory() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_remote_store] = lambda: remote_store
    app.dependency_overrides[get_sync_service] = lambda: sync_service

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as client:
        yield client

    # 정리
    await sync_service.stop()
    app.dependency_overrides.clear()


@pytest.fixture
def api_key_header():
    """Internal API Key 헤더"""
    return {"X-Internal-Api-Key": settings.internal_api_key}
