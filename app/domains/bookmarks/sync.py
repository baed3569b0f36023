"""백그라운드 동기화 서비스

원격 저장소의 새 레코드를 주기적으로 로컬 캐시에 반영하고, 캐시 크기를
제한합니다. 백그라운드 작업이므로 동기화 실패는 로그만 남기고 전파하지
않습니다.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings, settings
from app.core.database import async_session_maker
from app.core.exceptions import BaseAPIException
from app.core.logging import get_logger
from app.core.utils.datetime import UTC, now_utc, parse_timestamp
from app.core.utils.time import monotonic_ms
from app.domains.bookmarks.exceptions import CacheOperationException
from app.domains.bookmarks.remote import RemoteStore, get_remote_store
from app.domains.bookmarks.repository import BookmarkRepository
from app.domains.bookmarks.schemas import BookmarkRecord

logger = get_logger(__name__)

# 캐시가 비어 있을 때의 증분 동기화 기준 시각
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass
class SyncResult:
    """동기화 1회 실행 결과"""

    user_id: str
    fetched_count: int
    trimmed_count: int = 0


@dataclass
class SyncStatus:
    """동기화 상태"""

    is_running: bool
    last_sync_time: Optional[datetime]
    next_sync_in_ms: int
    cached_count: int


class SyncService:
    """로컬 캐시 동기화 서비스"""

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        remote_store: Optional[RemoteStore] = None,
        config: Optional[Settings] = None,
    ):
        self._session_factory = session_factory or async_session_maker
        self.remote_store = remote_store or get_remote_store()
        self.config = config or settings
        self.last_sync_time: Optional[datetime] = None
        self._last_sync_ms: Optional[float] = None
        self._task: Optional[asyncio.Task] = None
        self._user_id: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def perform_sync(self, user_id: str) -> Optional[SyncResult]:
        """증분 동기화 1회 실행

        캐시된 가장 최근 date_added 이후의 원격 레코드를 가져와 저장한 뒤
        캐시 크기를 정리합니다.

        Returns:
            SyncResult: 동기화 결과 (실패 시 None)
        """
        async with self._session_factory() as session:
            repository = BookmarkRepository(session)
            try:
                latest = await repository.latest_for_user(user_id)
                since = (
                    parse_timestamp(latest.date_added) if latest else None
                ) or EPOCH

                records = await self.remote_store.fetch_since(
                    user_id, since, limit=self.config.sync_fetch_limit
                )
                self._assign_owner(records, user_id)
                if records:
                    await repository.bulk_upsert(records)
                trimmed = await self._trim(repository)
                await session.commit()
            except (BaseAPIException, SQLAlchemyError) as e:
                await session.rollback()
                logger.error(
                    f"Sync failed for user {user_id}: {e}",
                    extra={"user_id": user_id},
                )
                return None

        self.last_sync_time = now_utc()
        self._last_sync_ms = monotonic_ms()
        logger.info(
            f"Sync completed: user_id={user_id}, fetched={len(records)}, "
            f"trimmed={trimmed}"
        )
        return SyncResult(
            user_id=user_id, fetched_count=len(records), trimmed_count=trimmed
        )

    async def force_sync(self, user_id: str) -> Optional[SyncResult]:
        """주기와 무관하게 즉시 동기화"""
        return await self.perform_sync(user_id)

    async def optimize_cache(self) -> int:
        """캐시 크기 정리

        Returns:
            삭제된 레코드 수
        """
        async with self._session_factory() as session:
            trimmed = await self._trim(BookmarkRepository(session))
            await session.commit()
        return trimmed

    async def _trim(self, repository: BookmarkRepository) -> int:
        total = await repository.count()
        excess = total - self.config.cache_max_items
        if excess <= 0:
            return 0

        trimmed = await repository.delete_oldest(
            min(excess, self.config.cache_trim_batch)
        )
        logger.info(f"Trimmed {trimmed} oldest records (cache size: {total})")
        return trimmed

    async def recover_all_data(self, user_id: str) -> bool:
        """로컬 캐시를 원격 저장소의 전체 레코드로 교체

        Returns:
            복구 성공 여부
        """
        async with self._session_factory() as session:
            try:
                records = await self.remote_store.fetch_all(
                    user_id, page_size=self.config.sync_fetch_limit
                )
                self._assign_owner(records, user_id)
                await BookmarkRepository(session).replace_all(records)
                await session.commit()
            except (BaseAPIException, SQLAlchemyError) as e:
                await session.rollback()
                logger.error(
                    f"Data recovery failed for user {user_id}: {e}",
                    extra={"user_id": user_id},
                )
                return False

        logger.info(f"Recovered {len(records)} records for user {user_id}")
        return True

    async def clear_all_data(self) -> int:
        """로컬 캐시 전체 삭제

        Returns:
            삭제된 레코드 수

        Raises:
            CacheOperationException: 삭제 실패 시
        """
        async with self._session_factory() as session:
            try:
                deleted = await BookmarkRepository(session).clear()
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise CacheOperationException("clear", str(e)) from e

        self.last_sync_time = None
        self._last_sync_ms = None
        logger.info(f"Cleared local cache ({deleted} records)")
        return deleted

    async def cached_count(self, user_id: Optional[str] = None) -> int:
        async with self._session_factory() as session:
            return await BookmarkRepository(session).count(user_id=user_id)

    async def get_status(self) -> SyncStatus:
        """현재 동기화 상태 조회"""
        next_sync_in_ms = 0
        if self.is_running and self._last_sync_ms is not None:
            interval_ms = self.config.sync_interval_seconds * 1000
            elapsed = monotonic_ms() - self._last_sync_ms
            next_sync_in_ms = max(0, int(interval_ms - elapsed))

        return SyncStatus(
            is_running=self.is_running,
            last_sync_time=self.last_sync_time,
            next_sync_in_ms=next_sync_in_ms,
            cached_count=await self.cached_count(),
        )

    def start(self, user_id: str) -> bool:
        """주기 동기화 시작 (즉시 1회 실행 후 주기마다 반복)

        Returns:
            새로 시작했으면 True, 이미 실행 중이면 False
        """
        if self.is_running:
            logger.warning(
                f"Periodic sync already running for user {self._user_id}"
            )
            return False

        self._user_id = user_id
        self._task = asyncio.create_task(self._run_periodic(user_id))
        logger.info(
            f"Periodic sync started: user_id={user_id}, "
            f"interval={self.config.sync_interval_seconds}s"
        )
        return True

    async def stop(self) -> None:
        """주기 동기화 중지"""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Periodic sync stopped: user_id={self._user_id}")
        self._user_id = None

    async def _run_periodic(self, user_id: str) -> None:
        while True:
            await self.perform_sync(user_id)
            await asyncio.sleep(self.config.sync_interval_seconds)

    @staticmethod
    def _assign_owner(records: list[BookmarkRecord], user_id: str) -> None:
        for record in records:
            if record.user_id is None:
                record.user_id = user_id


@lru_cache
def get_sync_service() -> SyncService:
    """FastAPI DI용 동기화 서비스 싱글톤"""
    return SyncService()
