"""검색 요청 순서 관리

빠른 연속 입력으로 여러 검색이 겹쳐 실행될 때, 가장 마지막에 발급된
요청의 결과만 반영합니다 (완료 순서가 아닌 발급 순서 기준). 진행 중인
요청은 취소하지 않고 결과만 버립니다.

디바운스는 부하 감소용이며, 입력이 멈춘 뒤 일정 시간이 지나야 검색을
발급합니다. 대기 중인 타이머만 취소되고 이미 시작된 검색은 취소되지
않습니다.
"""

import asyncio
import itertools
from typing import Awaitable, Callable, Optional, TypeVar

from app.core.config import settings
from app.core.logging import get_logger
from app.domains.search.types import SearchResult

logger = get_logger(__name__)

T = TypeVar("T")


class SearchSession:
    """검색 요청 ID 발급기

    호출자(예: 검색 입력 하나)마다 하나씩 소유합니다. 전역 상태가 아니며
    요청 ID 는 명시적으로 전달됩니다.

    Example::

        session = SearchSession()
        result = await session.run(
            lambda request_id: service.search(query, user_id, request_id=request_id)
        )
        if result is not None:
            render(result)
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0

    @property
    def latest(self) -> int:
        """가장 최근 발급된 요청 ID (발급 전에는 0)"""
        return self._latest

    def issue(self) -> int:
        """새 요청 ID 발급"""
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, request_id: Optional[int]) -> bool:
        return request_id is not None and request_id == self._latest

    def apply(self, result: SearchResult) -> bool:
        """결과를 반영해도 되는지 여부 (오래된 요청이면 False)"""
        if self.is_current(result.request_id):
            return True
        logger.debug(
            f"Discarding stale search result: request_id={result.request_id}, "
            f"latest={self._latest}"
        )
        return False

    async def run(
        self, search: Callable[[int], Awaitable[SearchResult]]
    ) -> Optional[SearchResult]:
        """요청 ID 를 발급해 검색을 실행하고, 최신일 때만 결과 반환"""
        request_id = self.issue()
        result = await search(request_id)
        if result.request_id is None:
            result.request_id = request_id
        return result if self.apply(result) else None


class SearchDebouncer:
    """재설정 가능한 디바운스 타이머"""

    def __init__(self, delay_ms: Optional[int] = None):
        if delay_ms is None:
            delay_ms = settings.search_debounce_ms
        self.delay = delay_ms / 1000
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_waiting(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def schedule(self, factory: Callable[[], Awaitable[T]]) -> "asyncio.Task[T]":
        """대기 중인 호출을 취소하고 지연 후 factory 실행을 예약

        Returns:
            factory 결과를 담는 Task (대기 중 취소되면 CancelledError)
        """
        self.cancel()
        task = asyncio.create_task(self._fire_after_delay(factory))
        self._pending = task
        return task

    def cancel(self) -> bool:
        """대기 중인 호출 취소 (이미 시작된 검색은 유지)"""
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
            return True
        return False

    async def _fire_after_delay(self, factory: Callable[[], Awaitable[T]]) -> T:
        await asyncio.sleep(self.delay)
        # 지연이 끝난 호출은 더 이상 취소 대상이 아님
        if self._pending is asyncio.current_task():
            self._pending = None
        return await factory()
