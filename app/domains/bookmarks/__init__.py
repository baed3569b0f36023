"""Bookmarks 도메인 모듈

원격 저장소의 북마크를 오프라인 검색용 로컬 캐시로 유지하는 도메인입니다.

구조:
    - models.py: SQLAlchemy 모델 정의 (Bookmark)
    - schemas.py: Pydantic 스키마 (BookmarkRecord, 동기화 응답)
    - repository.py: 로컬 캐시 데이터 접근 계층
    - remote.py: 원격 저장소 REST 클라이언트 (httpx)
    - sync.py: 증분 동기화, 캐시 정리, 복구
    - router.py: API 엔드포인트 (API Key 인증 포함)
    - exceptions.py: 도메인 예외
"""

from app.domains.bookmarks.exceptions import (
    BookmarkErrorCode,
    CacheOperationException,
    RemoteStoreException,
    RemoteStoreNotConfiguredException,
    SyncFailedException,
)
from app.domains.bookmarks.models import Bookmark
from app.domains.bookmarks.remote import RemoteStore, get_remote_store
from app.domains.bookmarks.repository import BookmarkRepository
from app.domains.bookmarks.router import router
from app.domains.bookmarks.schemas import BookmarkRecord
from app.domains.bookmarks.sync import SyncService, get_sync_service

__all__ = [
    "Bookmark",
    "BookmarkRecord",
    "BookmarkRepository",
    "RemoteStore",
    "get_remote_store",
    "SyncService",
    "get_sync_service",
    "router",
    "BookmarkErrorCode",
    "RemoteStoreException",
    "RemoteStoreNotConfiguredException",
    "CacheOperationException",
    "SyncFailedException",
]
